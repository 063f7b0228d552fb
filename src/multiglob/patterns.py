"""
Glob compilation: splitting a glob into path components and turning each
component into a `SegmentPattern`.

Supported syntax is deliberately small: `*` (any run of characters within one
path component), `?` (exactly one character) and `**` (zero or more whole path
components). Both `/` and `\\` are accepted as separators.
"""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

MULTI_LEVEL_TOKEN = "**"

# Characters that make a path component a wildcard pattern.
_WILDCARD_CHARS = frozenset("*?")

_SEPARATORS = "/\\"
_SEPARATOR_RE = re.compile(r"[/\\]+")
_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:(?=[/\\])")
_DRIVE_RE = re.compile(r"[A-Za-z]:")


class SegmentKind(Enum):
    """How a single path component is matched."""

    LITERAL = "literal"
    WILDCARD = "wildcard"
    MULTI_LEVEL = "multi_level"


@dataclass(frozen=True)
class SegmentPattern:
    """
    Compiled matcher for one path component. Never sees a separator.

    `MULTI_LEVEL` segments match any component; whether they consume zero or
    more components is decided by the cursor logic, not here.
    """

    kind: SegmentKind
    text: str
    ignore_case: bool = False
    regex: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    @property
    def is_multi_level(self) -> bool:
        return self.kind is SegmentKind.MULTI_LEVEL

    def matches(self, name: str) -> bool:
        """Check whether a whole path component matches this segment."""
        if self.kind is SegmentKind.MULTI_LEVEL:
            return True
        if self.kind is SegmentKind.LITERAL:
            if self.ignore_case:
                return name.casefold() == self.text.casefold()
            return name == self.text
        if self.regex is None:
            return False
        return self.regex.fullmatch(name) is not None


@dataclass(frozen=True)
class PatternSequence:
    """
    Ordered segment matchers for one glob expression. Index `i` of `segments`
    matches the component at depth `i` below the search origin.
    """

    segments: tuple[SegmentPattern, ...]
    rooted: bool = False
    ignore_case: bool = False
    glob: str = ""

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> SegmentPattern:
        return self.segments[index]

    @property
    def drive(self) -> str | None:
        """Drive letter component (`C:`) of a rooted sequence, if it names one."""
        if self.rooted and self.segments and is_drive(self.segments[0].text):
            return self.segments[0].text
        return None

    def anchored_to(self, drive: str) -> PatternSequence:
        """Prefix a drive-less rooted sequence with `drive`, compared ignoring case."""
        segment = compile_segment(drive, ignore_case=True)
        return PatternSequence(
            (segment, *self.segments), rooted=True, ignore_case=self.ignore_case, glob=self.glob
        )


def is_drive(component: str) -> bool:
    return _DRIVE_RE.fullmatch(component) is not None


def has_wildcards(text: str) -> bool:
    return any(c in _WILDCARD_CHARS for c in text)


def _translate_wildcard(text: str) -> str:
    parts: list[str] = []
    for ch in text:
        if ch == "?":
            parts.append(".")
        elif ch == "*":
            parts.append(".*")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


def compile_segment(text: str, ignore_case: bool = False) -> SegmentPattern:
    """
    Compile one path component of a glob.

    `**` becomes the multi-level segment, text without `*` or `?` becomes a
    literal comparison, anything else is translated to an anchored regex.
    """
    if text == MULTI_LEVEL_TOKEN:
        return SegmentPattern(SegmentKind.MULTI_LEVEL, text, ignore_case)
    if not has_wildcards(text):
        return SegmentPattern(SegmentKind.LITERAL, text, ignore_case)

    flags = re.DOTALL
    if ignore_case:
        flags |= re.IGNORECASE
    regex = re.compile(_translate_wildcard(text), flags)
    return SegmentPattern(SegmentKind.WILDCARD, text, ignore_case, regex)


def split_components(path: str) -> list[str]:
    """Split on either separator, dropping empty components (`a//b/` is `a/b`)."""
    return [part for part in _SEPARATOR_RE.split(path) if part]


def is_rooted(path: str) -> bool:
    """True for `/x`, `\\x`, `C:/x` and `C:\\x`, on every platform."""
    if not path:
        return False
    return path[0] in _SEPARATORS or _DRIVE_ROOT_RE.match(path) is not None


def strip_root(path: str) -> str:
    """
    Remove leading separators. A drive letter is kept so that it is compared
    as the first ordinary path component.
    """
    return path.lstrip(_SEPARATORS)


def compile_glob(
    glob: str, ignore_case: bool = False, rooted: bool | None = None
) -> PatternSequence:
    """
    Compile a full glob expression. Rootedness comes from the text unless the
    caller forces it (an expression set shares one rootedness).
    """
    if rooted is None:
        rooted = is_rooted(glob)
    segments = tuple(
        compile_segment(part, ignore_case) for part in split_components(strip_root(glob))
    )
    return PatternSequence(segments, rooted=rooted, ignore_case=ignore_case, glob=glob)


def anchor_to_drive(
    sequences: Sequence[PatternSequence], components: Sequence[str]
) -> list[PatternSequence]:
    """
    When a root-stripped path starts with a drive, make drive-less rooted
    sequences start with that drive too (`/x` means `<current drive>:/x`).
    """
    if not components or not is_drive(components[0]):
        return list(sequences)
    drive = components[0]
    return [
        seq.anchored_to(drive) if seq.rooted and seq.drive is None else seq for seq in sequences
    ]


def _path_root(pattern: str) -> str:
    """Root text of a rooted pattern: the drive letter, if any, plus one separator."""
    match = _DRIVE_ROOT_RE.match(pattern)
    drive = match.group(0) if match else ""
    return drive + os.sep


def split_pattern(pattern: str) -> tuple[str, str]:
    """
    Split a glob into a wildcard-free base directory and the remaining pattern.

    Only whole components before the last separator are moved into the base,
    so `/var/log/*.txt` gives `("/var/log", "*.txt")` and `test` gives
    `(".", "test")`. Trailing separators never appear in the remainder.
    """
    base = ""
    components: list[str] = []

    if is_rooted(pattern):
        base = _path_root(pattern)
        pattern = pattern[len(base.rstrip(_SEPARATORS)) :].lstrip(_SEPARATORS)

    while True:
        match = _SEPARATOR_RE.search(pattern)
        if match is None:
            break
        token = pattern[: match.start()]
        if has_wildcards(token):
            break
        if token:
            components.append(token)
        pattern = pattern[match.end() :]

    base += os.sep.join(components)
    remainder = pattern.rstrip(_SEPARATORS)
    if not base:
        return ".", remainder
    return base, remainder
