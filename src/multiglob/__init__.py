"""
Glob matching for `*`, `?` and `**` against directory trees or path strings,
with any number of expressions evaluated in a single directory walk.

Usage::

    from multiglob import Globber, split_pattern

    base, pattern = split_pattern("/var/log/**/*.txt")
    for match in Globber(pattern).get_matches(base):
        print(match.path)
"""

from multiglob.globber import Globber, get_matches, get_matches_from_roots, is_match
from multiglob.patterns import (
    PatternSequence,
    SegmentKind,
    SegmentPattern,
    compile_glob,
    compile_segment,
    split_pattern,
)
from multiglob.roots import filesystem_roots
from multiglob.walker import Match

__all__ = [
    "Globber",
    "Match",
    "PatternSequence",
    "SegmentKind",
    "SegmentPattern",
    "compile_glob",
    "compile_segment",
    "filesystem_roots",
    "get_matches",
    "get_matches_from_roots",
    "is_match",
    "split_pattern",
]
