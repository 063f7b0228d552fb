"""Tests for directory-tree matching."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from multiglob import walker
from multiglob.patterns import compile_glob, split_components, strip_root
from multiglob.walker import Match, walk


def _walk(root: Path, *globs: str) -> list[str]:
    sequences = [compile_glob(glob) for glob in globs]
    return [m.path.relative_to(root).as_posix() for m in walk(root, sequences)]


@pytest.mark.parametrize(
    ("glob", "expected"),
    [
        ("First/A.txt", {"First/A.txt"}),
        ("*/A.txt", {"First/A.txt", "Second/A.txt"}),
        ("*/*.txt", {"First/A.txt", "First/B.txt", "Second/A.txt", "Third/B.txt"}),
        ("**/B.txt", {"First/B.txt", "Second/Nested/B.txt", "Third/B.txt"}),
        (
            "**/*.txt",
            {"First/A.txt", "First/B.txt", "Second/A.txt", "Second/Nested/B.txt", "Third/B.txt"},
        ),
    ],
)
def test_walk_finds_matches(tree: Path, glob: str, expected: set[str]):
    results = _walk(tree, glob)
    assert set(results) == expected
    assert len(results) == len(expected)


def test_star_does_not_cross_separators(tree: Path):
    assert set(_walk(tree, "*/B.txt")) == {"First/B.txt", "Third/B.txt"}
    assert _walk(tree, "*/A.txt/x") == []
    assert set(_walk(tree, "*/*/B.txt")) == {"Second/Nested/B.txt"}


def test_multi_level_matches_zero_levels(tmp_path: Path):
    (tmp_path / "B.txt").write_text("top")
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)
    (nested / "B.txt").write_text("deep")

    assert set(_walk(tmp_path, "**/B.txt")) == {"B.txt", "a/b/c/B.txt"}


def test_multi_level_alone_matches_everything_once(tree: Path):
    results = _walk(tree, "**")
    assert len(results) == len(set(results))
    assert set(results) == {
        "First",
        "First/A.txt",
        "First/B.txt",
        "Second",
        "Second/A.txt",
        "Second/Nested",
        "Second/Nested/B.txt",
        "Third",
        "Third/B.txt",
    }


def test_trailing_multi_level_excludes_the_directory_itself(tree: Path):
    assert set(_walk(tree, "Second/**")) == {"Second/A.txt", "Second/Nested", "Second/Nested/B.txt"}


def test_multi_level_in_the_middle(tree: Path):
    assert set(_walk(tree, "Second/**/B.txt")) == {"Second/Nested/B.txt"}
    assert set(_walk(tree, "Second/**/A.txt")) == {"Second/A.txt"}


def test_directories_are_matched(tree: Path):
    matches = list(walk(tree, [compile_glob("*")]))
    assert {m.name for m in matches} == {"First", "Second", "Third"}
    assert all(m.is_dir for m in matches)


def test_file_entries_report_is_dir_false(tree: Path):
    [match] = list(walk(tree, [compile_glob("Third/B.txt")]))
    assert match == Match(tree / "Third" / "B.txt", is_dir=False)
    assert str(match) == str(tree / "Third" / "B.txt")


def test_literal_differing_by_one_character_does_not_match(tmp_path: Path):
    (tmp_path / "report.txt").write_text("x")
    assert _walk(tmp_path, "report.txt") == ["report.txt"]
    assert _walk(tmp_path, "report.tx") == []
    assert _walk(tmp_path, "report.txt2") == []


def test_multiple_sequences_yield_each_entry_once(tree: Path):
    results = _walk(tree, "**/A.txt", "**/B.txt", "**/*.txt", "First/*")
    assert len(results) == len(set(results))
    assert set(results) == {
        "First/A.txt",
        "First/B.txt",
        "Second/A.txt",
        "Second/Nested/B.txt",
        "Third/B.txt",
    }


@pytest.mark.parametrize(
    "globs",
    [
        ("*/A.txt", "**/B.txt"),
        ("First/*", "Second/**", "Third/B.txt"),
        ("**/Nested", "*/?.txt"),
    ],
)
def test_merged_walk_equals_union_of_single_walks(tree: Path, globs: tuple[str, ...]):
    union: set[str] = set()
    for glob in globs:
        union |= set(_walk(tree, glob))
    merged = _walk(tree, *globs)
    assert set(merged) == union
    assert len(merged) == len(union)


def test_empty_sequence_matches_nothing(tree: Path):
    assert _walk(tree, "") == []
    assert list(walk(tree, [])) == []


def test_leader_restricts_rooted_walk(tree: Path):
    origin = tree / "Second"
    sequences = [compile_glob(str(tree / "**" / "*.txt"))]
    leader = split_components(strip_root(str(origin)))
    results = {m.path.relative_to(tree).as_posix() for m in walk(origin, sequences, leader)}
    assert results == {"Second/A.txt", "Second/Nested/B.txt"}


def test_leader_mismatch_lists_nothing(tree: Path):
    sequences = [compile_glob(str(tree / "First" / "*.txt"))]
    origin = tree / "Second"
    leader = split_components(strip_root(str(origin)))
    assert list(walk(origin, sequences, leader)) == []


def test_walk_is_lazy(tree: Path):
    matches = walk(tree, [compile_glob("**/*.txt")])
    first = next(matches)
    assert first.path.suffix == ".txt"
    matches.close()


def test_walk_of_missing_directory_raises(tmp_path: Path):
    matches = walk(tmp_path / "missing", [compile_glob("*")])
    with pytest.raises(FileNotFoundError):
        list(matches)


@pytest.mark.skipif(
    os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="needs POSIX permissions enforced for the current user",
)
def test_unreadable_directory_propagates_error(tree: Path):
    locked = tree / "Second"
    locked.chmod(0)
    try:
        with pytest.raises(PermissionError):
            list(walk(tree, [compile_glob("**/*.txt")]))
    finally:
        locked.chmod(0o755)


def test_pruned_directory_is_yielded_but_not_entered(tree: Path, monkeypatch: pytest.MonkeyPatch):
    listed: list[Path] = []
    list_directory = walker._list_directory  # pyright: ignore[reportPrivateUsage]

    def recording_list_directory(directory: Path) -> list[tuple[str, bool]]:
        listed.append(directory)
        return list_directory(directory)

    monkeypatch.setattr(walker, "_list_directory", recording_list_directory)

    def prune(directory: Path) -> bool:
        return directory.name == "Second"

    results = {
        m.path.relative_to(tree).as_posix()
        for m in walk(tree, [compile_glob("**")], prune=prune)
    }
    assert "Second" in results
    assert not any(r.startswith("Second/") for r in results)
    assert "First/A.txt" in results
    assert tree / "Second" not in listed
    assert tree / "Second" / "Nested" not in listed


def test_prune_is_only_asked_about_directories_with_live_cursors(tree: Path):
    asked: list[str] = []

    def prune(directory: Path) -> bool:
        asked.append(directory.relative_to(tree).as_posix())
        return False

    results = [m.path for m in walk(tree, [compile_glob("First/*.txt")], prune=prune)]
    assert len(results) == 2
    assert asked == ["First"]
