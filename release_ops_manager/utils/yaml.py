"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

import structlog
from ruamel.yaml import YAML

logger = structlog.get_logger(__name__)

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Loads a YAML file and returns a dictionary.

    Mappings keep the order in which they appear in the file, which matters for
    settings such as the release notes label mapping.
    """
    with open(path, encoding="utf-8") as f:
        content = yaml.load(f)
    if content is None:
        logger.warning("YAML file is empty", path=str(path))
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping at the top level of {path}, got {type(content).__name__}")
    return content
