"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Release Notes Constants
# -----------------------

# Regex Patterns
TICKET_REFERENCE_PATTERN = re.compile(r"#(\d+)\b")
"""Pattern to match issue/pull request references in commit messages (e.g., #123)."""

DEFAULT_TAG_PREFIX = "v"
"""Default prefix of version tags, so that tags look like v1.0 or v2.3.4."""

DEFAULT_RELEASABLE_BRANCH_REGEX = "master|release/.+"
"""Default regex of branches that are entitled to be released (master, release/2.x, ...)."""

DEFAULT_COMMIT_MESSAGE_POSTFIX = "[ci skip]"
"""Default postfix appended to commits made by the release automation."""

SKIP_RELEASE_KEYWORD = "[ci skip-release]"
"""Keyword in the build commit message that skips the release."""

GITHUB_PROFILE_URL_TEMPLATE = "http://github.com/{login}"
"""Profile URL synthesized for team members configured in compact notation."""

DEFAULT_NOTABLE_LABEL = "noteworthy"
"""GitHub label marking improvements that belong to the notable release notes."""

OTHER_IMPROVEMENTS_TITLE = "Other"
"""Heading of the group collecting improvements whose labels are not mapped."""

# Default File Settings
DEFAULT_RELEASE_NOTES_PATH = "docs/release-notes.md"
"""Default path to the detailed release notes file."""

DEFAULT_NOTABLE_RELEASE_NOTES_PATH = "docs/notable-release-notes.md"
"""Default path to the notable release notes file."""

DEFAULT_RELEASE_NOTES_DATA_PATH = "build/release-notes-data.json"
"""Default path of the serialized release notes data written by the fetch stage."""

DEFAULT_NOTABLE_RELEASE_NOTES_DATA_PATH = "build/notable-release-notes-data.json"
"""Default path of the serialized notable release notes data written by the fetch stage."""

DEFAULT_CONTRIBUTORS_DATA_PATH = "build/all-contributors.json"
"""Default path of the serialized project contributors written by the fetch stage."""

DEFAULT_MAVEN_REPOSITORY_URL = "https://repo1.maven.org/maven2"
"""Repository used to derive download URLs of previously published artifacts."""

SERIALIZATION_SCHEMA_VERSION = 1
"""Version of the persisted release notes / contributors documents."""

# Masking
# -------

SECRET_MASK = "[SECRET]"
"""Replacement text for secret values in command lines, output and errors."""
