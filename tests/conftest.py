from __future__ import annotations

from pathlib import Path

import pytest

from crecord_diffedit.diffing import buildfile
from crecord_diffedit.difftree import DiffTree
from crecord_diffedit.main import Config, Ui
from crecord_diffedit.selection import Selection


class DefaultsConfig(Config):
    """Configuration which never looks at the user's Git configuration"""

    def get(self, section, item, default=None):
        return default


@pytest.fixture
def ui() -> Ui:
    ui = Ui(DefaultsConfig())
    ui.setdebuglevel(2)
    return ui


@pytest.fixture
def trees(tmp_path: Path) -> tuple[Path, Path]:
    left = tmp_path / "left"
    right = tmp_path / "right"
    left.mkdir()
    right.mkdir()
    yield left, right


@pytest.fixture
def writetree():
    def write(root: Path, files: dict[str, bytes]):
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
    return write


@pytest.fixture
def readtree():
    def read(root: Path) -> dict[str, bytes]:
        return {
            path.relative_to(root).as_posix(): path.read_bytes()
            for path in sorted(root.rglob("*"))
            if path.is_file()
        }
    return read


@pytest.fixture
def hunk_tree() -> tuple[DiffTree, Selection]:
    """A modified file with a single section [a, -b, +c, d] and a new file"""
    tree = DiffTree([
        buildfile("a.txt", b"a\nb\nd\n", b"a\nc\nd\n"),
        buildfile("b.txt", None, b"new\n"),
    ])
    return tree, Selection(tree)
