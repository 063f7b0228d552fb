"""
Exclusion of listed matches using gitignore-syntax patterns (via `pathspec`),
from command-line/config patterns and `.multiglobignore` files.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path

import pathspec

from multiglob.walker import Match

IGNORE_FILE_NAME = ".multiglobignore"


def _read_ignore_file(path: Path) -> list[str]:
    """Pattern lines of an ignore file, without blanks and comments."""
    lines = path.read_text().splitlines()
    return [line for line in lines if line.strip() and not line.strip().startswith("#")]


def build_exclude_spec(patterns: Sequence[str]) -> pathspec.PathSpec | None:
    """Compile gitignore-style patterns, or `None` when there are none."""
    if not patterns:
        return None
    return pathspec.PathSpec.from_lines("gitignore", patterns)


def load_ignore_file(start_dir: Path, name: str = IGNORE_FILE_NAME) -> pathspec.PathSpec | None:
    """
    Walk up from `start_dir` looking for `name`. Returns the compiled spec of
    the first file found, or `None` if there is none or it has no patterns.
    """
    current = start_dir.resolve()
    while True:
        candidate = current / name
        if candidate.is_file():
            return build_exclude_spec(_read_ignore_file(candidate))
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def is_excluded(relative: Path, is_dir: bool, specs: Sequence[pathspec.PathSpec]) -> bool:
    """
    Check a path relative to the search base. Directories are checked with a
    trailing `/` so that `build/` patterns apply, and every parent directory is
    checked too, since a walk does not prune on these patterns.
    """
    parts = relative.parts
    for i in range(1, len(parts)):
        parent = "/".join(parts[:i]) + "/"
        if any(spec.match_file(parent) for spec in specs):
            return True
    rel = relative.as_posix() + ("/" if is_dir else "")
    return any(spec.match_file(rel) for spec in specs)


def filter_matches(
    matches: Iterable[Match], base: Path, specs: Sequence[pathspec.PathSpec]
) -> Iterator[Match]:
    """Drop matches excluded by any of `specs`, relative to `base`."""
    if not specs:
        yield from matches
        return
    resolved_base = Path(os.path.abspath(base))
    for match in matches:
        try:
            relative = match.path.relative_to(resolved_base)
        except ValueError:
            relative = Path(match.path.name)
        if not is_excluded(relative, match.is_dir, specs):
            yield match


def excluded_directories(
    base: Path, specs: Sequence[pathspec.PathSpec]
) -> Callable[[Path], bool] | None:
    """
    Predicate telling the walker which directories not to descend into, or
    `None` when nothing is excluded.
    """
    if not specs:
        return None
    resolved_base = Path(os.path.abspath(base))

    def prune(directory: Path) -> bool:
        try:
            relative = directory.relative_to(resolved_base)
        except ValueError:
            return False
        return is_excluded(relative, True, specs)

    return prune
