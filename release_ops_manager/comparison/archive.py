"""Entry by entry comparison of zip archives such as sources jars."""

import hashlib
import zipfile
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


def archive_entries(path: Path) -> dict[str, str]:
    """Map every file entry of the archive to the digest of its content.

    Entry order, timestamps and directory entries are ignored.
    """
    entries: dict[str, str] = {}
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            with archive.open(info) as entry:
                entries[info.filename] = hashlib.file_digest(entry, "sha256").hexdigest()
    return entries


class ZipComparator:
    """Compares two archives by entry path and entry content."""

    def are_equal(self, previous: Path, current: Path) -> bool:
        """Whether both archives contain the same files with the same content."""
        previous_entries = archive_entries(previous)
        current_entries = archive_entries(current)
        if previous_entries == current_entries:
            return True

        added = sorted(current_entries.keys() - previous_entries.keys())
        removed = sorted(previous_entries.keys() - current_entries.keys())
        changed = sorted(name for name in previous_entries.keys() & current_entries.keys() if previous_entries[name] != current_entries[name])
        logger.info(
            "Archives differ",
            previous=str(previous),
            current=str(current),
            added=added[:10],
            removed=removed[:10],
            changed=changed[:10],
        )
        return False
