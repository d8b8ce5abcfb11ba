"""Unit tests for loading the release configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from release_ops_manager.configuration.models import ReleaseConfiguration, load_release_configuration

CONFIGURATION = """\
previous_release_version: 2.7.1
github:
  repository: mockito/mockito
  write_auth_user: shipkit
git:
  releasable_branch_regex: master|release/.+
  commit_message_postfix: "[ci skip]"
release_notes:
  file: docs/release-notes.md
  label_mapping:
    java-9: Java 9 support
    BDD: BDD support
    bug: Bugfixes
team:
  developers:
    - szczepiq:Szczepan Faber
  contributors:
    - mstachniuk:Marcin Stachniuk
"""


def test_load_release_configuration(tmp_path: Path) -> None:
    """Test loading a complete configuration file."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text(CONFIGURATION, encoding="utf-8")

    configuration = load_release_configuration(config_file)

    assert configuration.previous_release_version == "2.7.1"
    assert configuration.github.repository == "mockito/mockito"
    assert configuration.release_notes.file == Path("docs/release-notes.md")
    assert configuration.team.developers == ["szczepiq:Szczepan Faber"]


def test_label_mapping_keeps_file_order(tmp_path: Path) -> None:
    """Test that the label groups keep the order they are configured in."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text(CONFIGURATION, encoding="utf-8")

    configuration = load_release_configuration(config_file)

    assert list(configuration.release_notes.label_mapping) == ["java-9", "BDD", "bug"]


def test_defaults_without_configuration_file() -> None:
    """Test the defaults used when no configuration file is given."""
    configuration = load_release_configuration(None)

    assert configuration.dry_run is False
    assert configuration.git.tag_prefix == "v"
    assert configuration.git.releasable_branch_regex == "master|release/.+"
    assert configuration.git.branch == "master"
    assert configuration.release_notes.label_mapping == {}


def test_empty_configuration_file(tmp_path: Path) -> None:
    """Test that an empty file means the defaults."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text("", encoding="utf-8")

    assert load_release_configuration(config_file) == ReleaseConfiguration()


def test_configuration_file_must_be_a_mapping(tmp_path: Path) -> None:
    """Test that a file without a top level mapping is rejected."""
    config_file = tmp_path / "release.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Expected a mapping"):
        load_release_configuration(config_file)


def test_invalid_team_member_is_rejected() -> None:
    """Test that team members must use the 'login:Full Name' notation."""
    with pytest.raises(ValidationError, match="Invalid format of team member 'szczepiq'"):
        ReleaseConfiguration.model_validate({"team": {"developers": ["szczepiq"]}})
