"""
Directory-tree matching.

All expressions of a set are walked together: each directory is listed once
and only the cursors still alive below an entry are carried into it, so N
expressions cost one walk rather than N.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from multiglob.cursors import Cursors, advance, initial_cursors, is_complete, live
from multiglob.patterns import PatternSequence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """A matched filesystem entry."""

    path: Path
    is_dir: bool

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return str(self.path)


def _list_directory(directory: Path) -> list[tuple[str, bool]]:
    """
    List direct children as `(name, is_dir)`. The handle is closed before the
    caller sees any entry, so a suspended walk holds no open directories.
    `OSError` propagates.
    """
    with os.scandir(directory) as scan:
        return [(entry.name, entry.is_dir()) for entry in scan]


def _walk(
    directory: Path,
    sequences: Sequence[PatternSequence],
    cursors: Cursors,
    prune: Callable[[Path], bool] | None,
) -> Iterator[Match]:
    entries = _list_directory(directory)
    log.debug("Enumerated %s: %d entries, %d live cursors", directory, len(entries), len(cursors))

    for name, is_dir in entries:
        advanced = advance(sequences, cursors, name)
        if not advanced:
            continue
        path = directory / name
        if is_complete(sequences, advanced):
            yield Match(path, is_dir)
        if is_dir:
            remaining = live(sequences, advanced)
            if remaining and (prune is None or not prune(path)):
                yield from _walk(path, sequences, remaining, prune)


def _consume_leader(
    sequences: Sequence[PatternSequence], cursors: Cursors, leader: Sequence[str]
) -> Cursors:
    """Advance through the components between the root and the search origin."""
    for component in leader:
        cursors = live(sequences, advance(sequences, cursors, component))
        if not cursors:
            break
    return cursors


def walk(
    directory: str | Path,
    sequences: Sequence[PatternSequence],
    leader: Sequence[str] = (),
    prune: Callable[[Path], bool] | None = None,
) -> Iterator[Match]:
    """
    Lazily yield entries below `directory` matching any of `sequences`.

    `leader` holds the components from the filesystem root down to
    `directory`; rooted sequences are matched against it before enumeration
    starts. Subdirectories for which `prune` returns true are not entered,
    though they can still be yielded themselves. The origin itself is never
    yielded. Order is unspecified and no
    entry is yielded twice.
    """
    cursors = _consume_leader(sequences, initial_cursors(sequences), leader)
    if not cursors:
        return
    yield from _walk(Path(directory), sequences, cursors, prune)
