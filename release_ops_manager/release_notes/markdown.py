"""Markdown manipulation for release notes files."""

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class MarkdownWriter:
    """Places new release notes at the top of a release notes document."""

    def __init__(self, expected_header: str | None = None) -> None:
        """Initialize with an optional document header that must stay at the very top."""
        self.expected_header = expected_header.strip() if expected_header else None

    def insert_release_notes(self, existing_content: str, new_content: str) -> str:
        """Insert new release notes above the existing ones.

        When the document starts with the expected header, the notes go right
        below it; otherwise they go to the very top.
        """
        new_block = new_content.strip() + "\n\n"
        if self.expected_header and existing_content.startswith(self.expected_header):
            header_end = len(self.expected_header)
            body = existing_content[header_end:].lstrip("\n")
            return f"{self.expected_header}\n\n{new_block}{body}"
        if self.expected_header:
            logger.warning("Release notes file does not start with the expected header", expected=self.expected_header)
        return new_block + existing_content

    def update_file(self, path: Path, new_content: str) -> str:
        """Insert the new release notes into the file in place and return the updated document."""
        existing_content = path.read_text(encoding="utf-8") if path.exists() else ""
        updated = self.insert_release_notes(existing_content, new_content)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(updated, encoding="utf-8")
        logger.info("Updated release notes file", path=str(path))
        return updated
