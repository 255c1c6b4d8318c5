from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .constants import STATUS_SUCCESS_TEXT
from .errors import PackagingError


class PackagingState(str, Enum):
    IDLE = "idle"
    RESOLVING_PATHS = "resolving_paths"
    WALKING = "walking"
    FILTERING = "filtering"
    WRITING = "writing"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PackagingStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class EntryOutcome(str, Enum):
    ADDED = "ADDED"
    IGNORED = "IGNORED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PackagingOptions:
    source_folder: str | Path
    ignore_file: str | Path | None = None
    output_name: str | None = None
    output_dir: str | Path | None = None


@dataclass(frozen=True)
class FileDecision:
    relative_path: str
    included: bool


@dataclass(frozen=True)
class EntryFailure:
    relative_path: str
    reason: str


@dataclass(frozen=True)
class PackagingResult:
    archive_path: Path | None
    total_files_written: int
    status: PackagingStatus
    message: str = STATUS_SUCCESS_TEXT
    decisions: tuple[FileDecision, ...] = field(default=(), repr=False)
    failed_entries: tuple[EntryFailure, ...] = ()
    error: PackagingError | None = field(default=None, compare=False)
    state: PackagingState = PackagingState.SUCCEEDED

    @property
    def ok(self) -> bool:
        return self.status is PackagingStatus.SUCCESS

    @property
    def included(self) -> list[str]:
        return [d.relative_path for d in self.decisions if d.included]

    @property
    def ignored(self) -> list[str]:
        return [d.relative_path for d in self.decisions if not d.included]

    @property
    def written(self) -> list[str]:
        failed = {f.relative_path for f in self.failed_entries}
        return [p for p in self.included if p not in failed]

    def outcomes(self) -> list[tuple[str, EntryOutcome]]:
        """Pair every walked path with what happened to it, in walk order."""
        failed = {f.relative_path for f in self.failed_entries}
        pairs = []
        for d in self.decisions:
            if not d.included:
                outcome = EntryOutcome.IGNORED
            elif d.relative_path in failed:
                outcome = EntryOutcome.FAILED
            else:
                outcome = EntryOutcome.ADDED
            pairs.append((d.relative_path, outcome))
        return pairs

    def raise_for_status(self) -> None:
        """Raise the fatal error of a failed run, or a generic PackagingError."""
        if self.ok:
            return
        if self.error is not None:
            raise self.error
        raise PackagingError(self.message, self.archive_path)
