from __future__ import annotations

from pathlib import Path

import pytest


def make_tree(root: Path) -> None:
    """
    First/{A.txt,B.txt}, Second/{A.txt,Nested/B.txt}, Third/B.txt
    """
    (root / "First").mkdir()
    (root / "Second" / "Nested").mkdir(parents=True)
    (root / "Third").mkdir()
    (root / "First" / "A.txt").write_text("foo")
    (root / "First" / "B.txt").write_text("foo")
    (root / "Second" / "A.txt").write_text("foo")
    (root / "Second" / "Nested" / "B.txt").write_text("foo")
    (root / "Third" / "B.txt").write_text("foo")


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    make_tree(tmp_path)
    return tmp_path
