from __future__ import annotations

from pathlib import Path


class PackagingError(Exception):
    """Base class for every failure raised while bundling a folder."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def __str__(self) -> str:
        return self.message


class InvalidSourceFolder(PackagingError):
    def __init__(self, path: str | Path):
        super().__init__(
            f"The specified folder '{path}' does not exist, or is not a directory!",
            path,
        )


class FileSystemError(PackagingError):
    pass


class ArchiveCreationFailed(PackagingError):
    def __init__(self, path: str | Path, reason: str = ""):
        message = f"Unable to create the new archive: '{path}'!"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)
        self.reason = reason


class EntryWriteFailed(PackagingError):
    """A single file could not be added; recorded on the result, never fatal."""

    def __init__(self, path: str | Path, reason: str = ""):
        super().__init__(f"Unable to add '{path}' to the archive: {reason}", path)
        self.reason = reason
