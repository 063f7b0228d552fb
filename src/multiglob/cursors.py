"""
Cursor stepping shared by the tree walker and the string matcher.

A `Cursor` points at the next unmatched segment of one `PatternSequence`.
Every step takes a tuple of live cursors and returns a new tuple, so each
recursive call owns its own state and several expressions can be advanced
together over one path or one directory walk.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from multiglob.patterns import PatternSequence


class Cursor(NamedTuple):
    sequence: int
    position: int


Cursors = tuple[Cursor, ...]


def initial_cursors(sequences: Sequence[PatternSequence]) -> Cursors:
    """One cursor at the start of every non-empty sequence."""
    return tuple(Cursor(i, 0) for i, seq in enumerate(sequences) if len(seq) > 0)


def expand(sequences: Sequence[PatternSequence], cursors: Cursors) -> Cursors:
    """
    Add the zero-width alternatives of `**`: a cursor resting on a multi-level
    segment may also skip it. Cursors past the end are dropped, since they have
    nothing left to match against a further component.
    """
    result: dict[Cursor, None] = {}
    pending = list(cursors)
    while pending:
        cursor = pending.pop(0)
        seq = sequences[cursor.sequence]
        if cursor.position >= len(seq) or cursor in result:
            continue
        result[cursor] = None
        if seq[cursor.position].is_multi_level:
            pending.append(Cursor(cursor.sequence, cursor.position + 1))
    return tuple(result)


def advance(sequences: Sequence[PatternSequence], cursors: Cursors, name: str) -> Cursors:
    """
    Consume one path component. A matching segment moves its cursor forward;
    a multi-level segment also keeps a cursor in place so it can consume more.
    """
    result: dict[Cursor, None] = {}
    for cursor in expand(sequences, cursors):
        segment = sequences[cursor.sequence][cursor.position]
        if not segment.matches(name):
            continue
        result[Cursor(cursor.sequence, cursor.position + 1)] = None
        if segment.is_multi_level:
            result[cursor] = None
    return tuple(result)


def is_complete(sequences: Sequence[PatternSequence], cursors: Cursors) -> bool:
    """True when some sequence has been consumed entirely."""
    return any(cursor.position == len(sequences[cursor.sequence]) for cursor in cursors)


def live(sequences: Sequence[PatternSequence], cursors: Cursors) -> Cursors:
    """Cursors that can still match a deeper component."""
    return tuple(c for c in cursors if c.position < len(sequences[c.sequence]))
