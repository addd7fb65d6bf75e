"""
Error types for hierarchy integrity operations.

All store failures are fatal: they propagate to the command line entry
point, which prints them and exits non-zero.
"""


class HierarchyIntegrityError(Exception):
    """Base class for all hierarchy integrity errors."""

    pass


class ConfigurationError(HierarchyIntegrityError):
    """Raised when the credential locator is missing or unusable."""

    pass


class StoreError(HierarchyIntegrityError):
    """Raised when the manager store fails."""

    def __init__(self, message: str, uid: str | None = None):
        super().__init__(message)
        self.uid = uid


class StoreReadError(StoreError):
    """Raised when the manager records cannot be loaded."""

    pass


class StoreWriteError(StoreError):
    """Raised when an edge removal cannot be persisted."""

    pass
