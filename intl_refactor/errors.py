"""Exception types raised by the extraction and refactoring pipeline."""


class IntlRefactorError(Exception):
    """Base class for pipeline errors."""


class RootNotFoundError(IntlRefactorError, FileNotFoundError):
    """The directory a run was asked to process does not exist."""

    def __init__(self, root: str):
        self.root = root
        super().__init__(f"Directory not found: {root}")


class InvalidPatternError(IntlRefactorError, ValueError):
    """A user-supplied exclude pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid exclude pattern {pattern!r}: {reason}")


class ResourceWriteError(IntlRefactorError, OSError):
    """A resource or source file could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
