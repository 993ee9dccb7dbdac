"""
zensearch exception hierarchy.

All zensearch exceptions inherit from ZenSearchError, making it easy for hosts
to catch library-level errors while still distinguishing specific failure modes.
"""


class ZenSearchError(Exception):
    """Base exception class for all zensearch errors."""


class ConfigurationError(ZenSearchError):
    """Raised for configuration errors (missing keys, invalid values)."""


class RecordError(ZenSearchError):
    """Raised when a source record cannot be turned into an indexable entry."""
