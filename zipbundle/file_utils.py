from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator

from .errors import FileSystemError


log = logging.getLogger(__name__)


def normalize_relative_path(absolute_path: str | Path, root: str | Path) -> str:
    """
    Turn an absolute file path into the root-relative entry name.

    The result uses forward slashes and has no leading separator, whatever the
    host separator is. It is used both for ignore matching and as the entry
    name inside the archive.
    """
    absolute = str(absolute_path)
    prefix = str(root)
    if not absolute.startswith(prefix):
        raise ValueError(f"'{absolute}' is not located under '{prefix}'")
    rel = absolute[len(prefix):].replace("\\", "/")
    # Exactly one separator, so "a//b" style oddities stay visible.
    if rel.startswith("/"):
        rel = rel[1:]
    return rel


def walk_files(root: str | Path) -> Iterator[str]:
    """
    Yield every file beneath ``root``, depth-first.

    Directories are descended into but never yielded. Within a directory the
    files come first (by name), then each sub-directory in name order. The
    generator is single-use; walk again for a fresh listing.
    """
    root = str(root)
    if not os.path.isdir(root):
        raise FileSystemError(f"Cannot walk '{root}': not an existing directory", root)

    def _raise(err: OSError) -> None:
        raise FileSystemError(
            f"Cannot list '{err.filename}': {err.strerror or err}", err.filename
        ) from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename in (".", ".."):
                continue
            yield os.path.join(dirpath, filename)


@contextmanager
def working_directory(path: str | Path) -> Iterator[Path]:
    """Switch the process working directory, restoring it on every exit path."""
    previous = os.getcwd()
    os.chdir(path)
    log.debug("cwd: %s -> %s", previous, path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)
        log.debug("cwd restored: %s", previous)


def _tag_counts(node: dict) -> dict[str, int]:
    counts: dict[str, int] = {}
    for value in node.values():
        if isinstance(value, dict):
            for tag, n in _tag_counts(value).items():
                counts[tag] = counts.get(tag, 0) + n
        else:
            counts[value] = counts.get(value, 0) + 1
    return counts


def build_tree(entries: Iterable[tuple[str, str]], root_name: str, style: str = "ascii") -> str:
    """
    Render ``(relative_path, tag)`` pairs as a directory tree.

    Files print as ``name [TAG]``, or as the bare name when the tag is empty.
    A directory whose files all carry the same non-empty tag is folded into a
    single ``dir/ [TAG, n files]`` line, so an ignored ``build/`` or
    ``node_modules/`` takes one row instead of thousands.

    style:
      - "ascii": |-- / `-- connectors (safe with the built-in PDF fonts)
      - "unicode": ├── / └── connectors (terminal output)
    """
    tree: dict[str, dict | str] = {}
    for rel, tag in entries:
        *dirs, name = PurePosixPath(rel).parts or ("",)
        if not name:
            continue
        node = tree
        for part in dirs:
            node = node.setdefault(f"{part}/", {})
        node[name] = tag or ""

    if style == "unicode":
        mid, last, vert, pad = "├── ", "└── ", "│   ", "    "
    else:
        mid, last, vert, pad = "|-- ", "`-- ", "|   ", "    "

    lines = [f"{root_name}/"]

    def emit(node: dict, prefix: str) -> None:
        names = list(node)
        for idx, name in enumerate(names):
            value = node[name]
            branch, child_prefix = (last, pad) if idx == len(names) - 1 else (mid, vert)
            if not isinstance(value, dict):
                lines.append(f"{prefix}{branch}{name} [{value}]" if value else f"{prefix}{branch}{name}")
                continue
            counts = _tag_counts(value)
            if len(counts) == 1 and "" not in counts:
                (tag, n), = counts.items()
                lines.append(f"{prefix}{branch}{name} [{tag}, {n} file{'s' if n != 1 else ''}]")
                continue
            lines.append(f"{prefix}{branch}{name}")
            emit(value, prefix + child_prefix)

    emit(tree, "")
    return "\n".join(lines)
