"""
`.zipignore` parsing and matching.

An ignore file holds one literal path prefix per line. `#` starts a comment,
either for the whole line or as a trailing suffix; blank lines are skipped.
A path is ignored when it equals a pattern or starts with one, so `build`
also covers `build/out.o` and `build.log`. There is no wildcard or negation
syntax, and matching is case-sensitive.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .constants import COMMENT_PREFIX
from .errors import FileSystemError


log = logging.getLogger(__name__)


def parse_ignore_lines(text: str) -> list[str]:
    patterns: list[str] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        if COMMENT_PREFIX in line:
            line = line.split(COMMENT_PREFIX, 1)[0].strip()
            if not line:
                continue
        patterns.append(line)
    return patterns


def _cache_key(ignore_file: str | Path) -> str:
    return os.path.realpath(os.fspath(ignore_file))


class IgnoreCache:
    """
    Parsed pattern lists, memoized per ignore file.

    Entries are built on first use and kept until `rebuild()` or `clear()`;
    edits to an ignore file are not picked up on their own.
    """

    def __init__(self):
        self._entries: dict[str, tuple[str, ...]] = {}

    def __contains__(self, ignore_file: str | Path) -> bool:
        return _cache_key(ignore_file) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, ignore_file: str | Path) -> tuple[str, ...]:
        key = _cache_key(ignore_file)
        cached = self._entries.get(key)
        if cached is None:
            cached = self._build(key)
        return cached

    def rebuild(self, ignore_file: str | Path) -> tuple[str, ...]:
        return self._build(_cache_key(ignore_file))

    def clear(self) -> None:
        self._entries.clear()

    def _build(self, key: str) -> tuple[str, ...]:
        path = Path(key)
        if not path.is_file():
            log.debug("no ignore file at %s, nothing will be ignored", path)
            patterns: tuple[str, ...] = ()
        else:
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise FileSystemError(
                    f"Cannot read ignore file '{path}': {exc.strerror or exc}", path
                ) from exc
            patterns = tuple(parse_ignore_lines(text))
            log.debug("loaded %d ignore pattern(s) from %s", len(patterns), path)
        self._entries[key] = patterns
        return patterns


class IgnoreMatcher:
    def __init__(self, cache: IgnoreCache | None = None):
        self.cache = cache if cache is not None else IgnoreCache()

    def patterns(self, ignore_file: str | Path | None) -> tuple[str, ...]:
        if ignore_file is None:
            return ()
        return self.cache.get(ignore_file)

    def match(self, relative_path: str, ignore_file: str | Path | None) -> bool:
        """Return True when ``relative_path`` is excluded by ``ignore_file``."""
        patterns = self.patterns(ignore_file)
        if not patterns:
            return False
        if relative_path in patterns:
            return True
        return any(relative_path.startswith(pattern) for pattern in patterns)
