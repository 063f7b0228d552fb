"""
`Globber`: a set of glob expressions evaluated together.

Usage::

    from multiglob import Globber

    globber = Globber("**/*.md", "docs/*.txt", ignore_case=True)
    for match in globber.get_matches("."):
        print(match.path)

    globber.is_match("docs/notes.TXT")  # True
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from multiglob.matcher import match_path
from multiglob.patterns import (
    PatternSequence,
    anchor_to_drive,
    compile_glob,
    is_rooted,
    split_components,
    strip_root,
)
from multiglob.roots import filesystem_roots
from multiglob.walker import Match, walk

log = logging.getLogger(__name__)


class Globber:
    """
    Holds zero or more compiled expressions sharing one rootedness.

    The first expression added decides whether the set is rooted. A later
    expression of the other kind is logged as a warning and treated as if it
    had the set's rootedness, or rejected with `ValueError` when `strict`.
    Nothing is cached between calls; every call reflects the filesystem as it
    is at that moment.
    """

    def __init__(self, *globs: str, ignore_case: bool = False, strict: bool = False) -> None:
        self._ignore_case: bool = ignore_case
        self._strict: bool = strict
        self._rooted: bool | None = None
        self._sequences: list[PatternSequence] = []
        for glob in globs:
            self.add_expression(glob)

    @property
    def rooted(self) -> bool:
        return bool(self._rooted)

    @property
    def ignore_case(self) -> bool:
        return self._ignore_case

    @property
    def sequences(self) -> tuple[PatternSequence, ...]:
        return tuple(self._sequences)

    def __len__(self) -> int:
        return len(self._sequences)

    def __repr__(self) -> str:
        globs = ", ".join(repr(seq.glob) for seq in self._sequences)
        return f"Globber({globs}, ignore_case={self._ignore_case})"

    def add_expression(self, glob: str, ignore_case: bool | None = None) -> PatternSequence:
        """
        Compile `glob` and add it to the set. `ignore_case` defaults to the
        globber's setting and applies to every segment of this expression.
        """
        if ignore_case is None:
            ignore_case = self._ignore_case
        rooted = is_rooted(glob)

        if self._rooted is None:
            self._rooted = rooted
        elif rooted != self._rooted:
            kind = "rooted" if self._rooted else "relative"
            msg = f"Expression {glob!r} does not match the set's rootedness; treating it as {kind}"
            if self._strict:
                raise ValueError(msg)
            log.warning(msg)

        sequence = compile_glob(glob, ignore_case=ignore_case, rooted=self._rooted)
        self._sequences.append(sequence)
        return sequence

    def get_matches(
        self,
        path: str | Path = ".",
        cwd: str | Path | None = None,
        prune: Callable[[Path], bool] | None = None,
    ) -> Iterator[Match]:
        """
        Lazily yield entries under `path` that match any expression.

        A relative `path` is taken relative to `cwd` (the process working
        directory by default). For a rooted set the components of `path`
        itself are matched first, so only entries reachable through `path`
        are returned. Raises `ValueError` immediately if a rooted expression
        names a drive that `path` is not on.

        `prune` is called with each matching directory before the walk enters
        it; a true result skips everything below that directory.
        """
        if not self._sequences:
            return iter(())

        base = os.fspath(cwd) if cwd is not None else os.getcwd()
        origin = os.path.abspath(os.path.join(base, os.fspath(path)))

        if not self._rooted:
            return walk(origin, self._sequences, prune=prune)

        leader = split_components(strip_root(origin))
        sequences = anchor_to_drive(self._sequences, leader)
        self._check_drives(sequences, leader, origin)
        return walk(origin, sequences, leader, prune)

    def is_match(self, path: str | Path, cwd: str | Path | None = None) -> bool:
        """Check a path string against the set without touching the filesystem."""
        return match_path(
            os.fspath(path),
            self._sequences,
            self.rooted,
            cwd=os.fspath(cwd) if cwd is not None else None,
        )

    @staticmethod
    def _check_drives(sequences: Iterable[PatternSequence], leader: list[str], origin: str) -> None:
        origin_drive = leader[0] if leader else ""
        for seq in sequences:
            if seq.drive is not None and seq.drive.casefold() != origin_drive.casefold():
                raise ValueError(
                    f"Cannot search {origin!r} with rooted expression {seq.glob!r}:"
                    f" it is not on drive {seq.drive}"
                )


def get_matches(
    path: str | Path, globs: str | Iterable[str], ignore_case: bool = False
) -> Iterator[Match]:
    """Match one glob, or several in a single walk, under `path`."""
    if isinstance(globs, str):
        globs = [globs]
    return Globber(*globs, ignore_case=ignore_case).get_matches(path)


def is_match(path: str, glob: str, ignore_case: bool = False) -> bool:
    return Globber(glob, ignore_case=ignore_case).is_match(path)


def get_matches_from_roots(
    glob: str, roots: Iterable[str] | None = None, ignore_case: bool = False
) -> Iterator[Match]:
    """
    Search `glob` from every filesystem root (every drive on Windows).
    `roots` replaces the detected roots, e.g. to search a single drive.
    """
    relative = glob.lstrip("/\\")
    for root in roots if roots is not None else filesystem_roots():
        root = str(root)
        if root[-1:] not in ("/", "\\"):
            root += os.sep
        globber = Globber(root + relative, ignore_case=ignore_case)
        yield from globber.get_matches(root)
