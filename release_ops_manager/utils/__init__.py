"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_RELEASE_NOTES_PATH,
    SECRET_MASK,
    TICKET_REFERENCE_PATTERN,
)
from .masking import SecretMasker
from .process import ProcessExecutionError, ProcessRunner
from .retry import retry_on_rate_limit

__all__ = [
    "TICKET_REFERENCE_PATTERN",
    "DEFAULT_RELEASE_NOTES_PATH",
    "SECRET_MASK",
    "SecretMasker",
    "ProcessRunner",
    "ProcessExecutionError",
    "retry_on_rate_limit",
]
