from __future__ import annotations

import logging
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .constants import ARCHIVE_EXTENSION, DEFAULT_IGNORE_FILE, STATUS_SUCCESS_TEXT
from .errors import ArchiveCreationFailed, EntryWriteFailed, InvalidSourceFolder, PackagingError
from .file_utils import normalize_relative_path, walk_files, working_directory
from .ignore import IgnoreCache, IgnoreMatcher
from .models import (
    EntryFailure,
    FileDecision,
    PackagingOptions,
    PackagingResult,
    PackagingState,
    PackagingStatus,
)


log = logging.getLogger(__name__)

Hook = Callable[[], object]


@dataclass
class _RunRecord:
    destination: Path | None = None
    decisions: list[FileDecision] = field(default_factory=list)
    failures: list[EntryFailure] = field(default_factory=list)


class ArchivePackager:
    """
    Bundle a folder into `<output_dir>/<output_name>.zip`.

    Every file under the source folder is checked against the ignore file and
    the survivors are written with their folder-relative path as entry name.
    An existing archive at the destination is always replaced.

    Two optional hooks observe the run: the before-hook fires first thing and
    the after-hook fires last, after the working directory is restored, even
    when the run fails. Fatal errors come back inside the result instead of
    being raised; see `PackagingResult.raise_for_status()`.
    """

    def __init__(self, ignore_cache: IgnoreCache | None = None,
                 fresh_ignore_cache: bool = False,
                 compression: int = zipfile.ZIP_DEFLATED):
        self.ignore_cache = ignore_cache if ignore_cache is not None else IgnoreCache()
        self.matcher = IgnoreMatcher(self.ignore_cache)
        self.fresh_ignore_cache = fresh_ignore_cache
        self.compression = compression
        self.state = PackagingState.IDLE
        self._before_hook: Hook | None = None
        self._after_hook: Hook | None = None
        self._running = False

    def before(self, hook: Hook | None) -> ArchivePackager:
        self._before_hook = hook
        return self

    def after(self, hook: Hook | None) -> ArchivePackager:
        self._after_hook = hook
        return self

    def run(self, options: PackagingOptions) -> PackagingResult:
        if self._running:
            raise RuntimeError("ArchivePackager.run() is already in progress")
        self._running = True
        self.state = PackagingState.IDLE
        record = _RunRecord()
        try:
            self._fire(self._before_hook, "Before")
            try:
                result = self._package(options, record)
            except PackagingError as exc:
                log.error("%s", exc)
                self.state = PackagingState.FAILED
                result = PackagingResult(
                    archive_path=record.destination,
                    total_files_written=0,
                    status=PackagingStatus.FAILURE,
                    message=str(exc),
                    decisions=tuple(record.decisions),
                    failed_entries=tuple(record.failures),
                    error=exc,
                    state=PackagingState.FAILED,
                )
            finally:
                self._fire(self._after_hook, "After")
        finally:
            self._running = False
        return result

    def _fire(self, hook: Hook | None, label: str) -> None:
        if hook is None:
            return
        log.info("Executing %s Hook...", label)
        hook()

    def plan(self, options: PackagingOptions) -> tuple[FileDecision, ...]:
        """Walk and filter like `run()` but write nothing; hooks do not fire."""
        record = _RunRecord()
        try:
            folder, destination, ignore_file = self._prepare(options, record)
            with working_directory(folder):
                self._collect(folder, ignore_file, destination, record, announce=False)
        finally:
            self.state = PackagingState.IDLE
        return tuple(record.decisions)

    def _prepare(self, options: PackagingOptions, record: _RunRecord) -> tuple[Path, Path, Path]:
        self.state = PackagingState.RESOLVING_PATHS
        folder = self._resolve_source(options.source_folder)
        output_dir = Path(options.output_dir).resolve() if options.output_dir else folder
        archive_name = options.output_name or folder.name
        destination = output_dir / f"{archive_name}.{ARCHIVE_EXTENSION}"
        record.destination = destination
        ignore_file = self._resolve_ignore_file(folder, options.ignore_file)
        if self.fresh_ignore_cache:
            self.ignore_cache.clear()
        return folder, destination, ignore_file

    def _package(self, options: PackagingOptions, record: _RunRecord) -> PackagingResult:
        folder, destination, ignore_file = self._prepare(options, record)

        log.info("%s => %s", folder, destination.name)

        with working_directory(folder):
            log.info("Bundling...")
            included = self._collect(folder, ignore_file, destination, record)

            self.state = PackagingState.WRITING
            self._remove_previous(destination)
            self._write(destination, included, record)

            self.state = PackagingState.FINALIZING
            total, problem = self._inspect(destination)

        if problem is None and record.failures:
            problem = f"{len(record.failures)} file(s) could not be added to the archive"
        status = PackagingStatus.FAILURE if problem else PackagingStatus.SUCCESS
        message = problem or STATUS_SUCCESS_TEXT

        log.info("FILES  : %d", total)
        log.info("STATUS : %s", message)

        self.state = PackagingState.SUCCEEDED if problem is None else PackagingState.FAILED
        return PackagingResult(
            archive_path=destination,
            total_files_written=total,
            status=status,
            message=message,
            decisions=tuple(record.decisions),
            failed_entries=tuple(record.failures),
            state=self.state,
        )

    def _resolve_source(self, source_folder: str | Path) -> Path:
        if not source_folder:
            raise InvalidSourceFolder(source_folder)
        folder = Path(source_folder).resolve()
        if not folder.is_dir():
            raise InvalidSourceFolder(folder)
        return folder

    def _resolve_ignore_file(self, folder: Path, ignore_file: str | Path | None) -> Path:
        if not ignore_file:
            return folder / DEFAULT_IGNORE_FILE
        path = Path(ignore_file)
        # Relative ignore files are looked up inside the folder being bundled.
        if not path.is_absolute():
            path = folder / path
        return path.resolve()

    def _collect(self, folder: Path, ignore_file: Path, destination: Path,
                 record: _RunRecord, announce: bool = True) -> list[str]:
        self.state = PackagingState.WALKING
        files = walk_files(folder)
        self.state = PackagingState.FILTERING
        root = str(folder)
        skip = str(destination)
        included: list[str] = []
        for abs_path in files:
            if abs_path == skip:
                continue
            rel_posix = normalize_relative_path(abs_path, root)
            keep = not self.matcher.match(rel_posix, ignore_file)
            record.decisions.append(FileDecision(relative_path=rel_posix, included=keep))
            if keep:
                included.append(rel_posix)
            if announce:
                log.info("%s: %s", "ADDED  " if keep else "IGNORED", rel_posix)
        return included

    def _remove_previous(self, destination: Path) -> None:
        if not os.path.lexists(destination):
            return
        if destination.is_dir():
            raise ArchiveCreationFailed(destination, "a directory exists at this path")
        try:
            destination.unlink()
        except OSError as exc:
            raise ArchiveCreationFailed(destination, str(exc)) from exc
        log.debug("removed previous archive %s", destination)

    def _write(self, destination: Path, included: list[str], record: _RunRecord) -> None:
        try:
            archive = zipfile.ZipFile(destination, "w", compression=self.compression)
        except (OSError, ValueError) as exc:
            raise ArchiveCreationFailed(destination, str(exc)) from exc

        with archive:
            for rel_posix in included:
                try:
                    # cwd is the source folder, so the entry name is also the path.
                    archive.write(rel_posix, arcname=rel_posix)
                except (OSError, ValueError) as exc:
                    failure = EntryWriteFailed(rel_posix, str(exc))
                    log.warning("FAILED : %s", failure)
                    record.failures.append(EntryFailure(rel_posix, str(exc)))

    def _inspect(self, destination: Path) -> tuple[int, str | None]:
        """Re-open the finished archive, count entries and run its CRC check."""
        try:
            with zipfile.ZipFile(destination) as archive:
                total = len(archive.infolist())
                bad_entry = archive.testzip()
        except (OSError, zipfile.BadZipFile) as exc:
            return 0, f"archive could not be read back: {exc}"
        if bad_entry is not None:
            return total, f"archive check failed at entry '{bad_entry}'"
        return total, None


def bundle_folder(folder: str | Path,
                  output_name: str | None = None,
                  output_dir: str | Path | None = None,
                  ignore_file: str | Path | None = None,
                  before: Hook | None = None,
                  after: Hook | None = None) -> PackagingResult:
    """One-shot helper: build a packager, register hooks and run it."""
    packager = ArchivePackager().before(before).after(after)
    return packager.run(PackagingOptions(
        source_folder=folder,
        ignore_file=ignore_file,
        output_name=output_name,
        output_dir=output_dir,
    ))
