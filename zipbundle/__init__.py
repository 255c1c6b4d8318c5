"""
Bundle a project folder into a single deployable zip archive.

Files listed in a `.zipignore` file (literal path prefixes) are left out.
"""

from .errors import (
    ArchiveCreationFailed,
    EntryWriteFailed,
    FileSystemError,
    InvalidSourceFolder,
    PackagingError,
)
from .ignore import IgnoreCache, IgnoreMatcher
from .models import (
    EntryFailure,
    EntryOutcome,
    FileDecision,
    PackagingOptions,
    PackagingResult,
    PackagingState,
    PackagingStatus,
)
from .packager import ArchivePackager, bundle_folder
from .version import __version__

__all__ = [
    "ArchiveCreationFailed",
    "ArchivePackager",
    "EntryFailure",
    "EntryOutcome",
    "EntryWriteFailed",
    "FileDecision",
    "FileSystemError",
    "IgnoreCache",
    "IgnoreMatcher",
    "InvalidSourceFolder",
    "PackagingError",
    "PackagingOptions",
    "PackagingResult",
    "PackagingState",
    "PackagingStatus",
    "__version__",
    "bundle_folder",
]
