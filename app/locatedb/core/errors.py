"""Exception hierarchy for locatedb.

Every error that may reach the command line derives from LocateError,
so the CLI can report it uniformly. TraversalEntryError is the one
exception that never leaves the traversal engine.
"""


class LocateError(Exception):
    """Base exception for all locatedb errors."""


class MountEnumerationError(LocateError):
    """Raised when the OS mount table cannot be read."""


class TraversalEntryError(LocateError):
    """A single entry could not be read during a directory walk.

    Attributes:
        path: Path of the unreadable entry.
        cause: Underlying OS or encoding error.
    """

    def __init__(self, path: str, cause: OSError | UnicodeError) -> None:
        self.path = path
        self.cause = cause
        reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else cause
        super().__init__(f"Cannot read {path!r}: {reason}")


class StorageError(LocateError):
    """Raised when the index database cannot be opened, read or written."""


class IndexNotBuiltError(StorageError):
    """Raised when querying a database that has never been populated."""


class ConcurrentUpdateError(StorageError):
    """Raised when another update holds the index write lock."""


class PatternError(LocateError):
    """Raised when a regular expression query does not compile.

    Attributes:
        text: The offending pattern text.
    """

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid regular expression {text!r}: {reason}")


class ConfigError(LocateError):
    """Raised when the configuration file is invalid or unreadable."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""
