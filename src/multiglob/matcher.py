"""Path-string matching. Never touches the filesystem."""

from __future__ import annotations

import os
from collections.abc import Sequence

from multiglob.cursors import advance, initial_cursors, is_complete
from multiglob.patterns import (
    PatternSequence,
    anchor_to_drive,
    is_rooted,
    split_components,
    strip_root,
)


def match_path(
    path: str,
    sequences: Sequence[PatternSequence],
    rooted: bool,
    cwd: str | None = None,
) -> bool:
    """
    Check whether `path` matches any of `sequences`.

    An absolute path never matches an unrooted set. A relative path checked
    against a rooted set is first joined onto `cwd` (the process working
    directory when not given), so the answer depends on where it is asked from.
    """
    if not sequences:
        return False

    if is_rooted(path):
        if not rooted:
            return False
    elif rooted:
        base = cwd if cwd is not None else os.getcwd()
        path = os.path.abspath(os.path.join(base, path))

    components = split_components(strip_root(path) if rooted else path)
    if not components:
        return False
    if rooted:
        sequences = anchor_to_drive(sequences, components)

    cursors = initial_cursors(sequences)
    for component in components:
        cursors = advance(sequences, cursors, component)
        if not cursors:
            return False
    return is_complete(sequences, cursors)
