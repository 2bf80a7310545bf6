from __future__ import annotations

import errno
import os
import stat

import pytest

from crecord_diffedit import crecord_core
from crecord_diffedit.chunk_selector import Outcome
from crecord_diffedit.crecord_core import dorecord, writeselection
from crecord_diffedit.diffing import buildtree
from crecord_diffedit.difftree import Key, SelectionState
from crecord_diffedit.selection import Selection
from crecord_diffedit.util import Abort

LEFT = {
    'same': b'unchanged\n',
    'modified': b'one\ntwo\nthree\n',
    'crlf': b'one\r\ntwo\r\n',
    'noeol': b'a\nb',
    'removed': b'will be removed\n',
    'image.bin': b'\x89PNG\0old',
    'dir/nested': b'x\ny\n',
}

RIGHT = {
    'same': b'unchanged\n',
    'modified': b'one\n2\nthree\nfour\n',
    'crlf': b'one\r\n2\r\n',
    'noeol': b'a\nb\nc\n',
    'added': b'new file\n',
    'image.bin': b'\x89PNG\0new',
    'dir/nested': b'x\n',
    'dir/added': b'',
}


def accept(opts, tree, selection, ui):
    return Outcome.ACCEPT


def reject(opts, tree, selection, ui):
    selection.set_all(SelectionState.UNSELECTED)
    return Outcome.ACCEPT


def abort(opts, tree, selection, ui):
    selection.set_all(SelectionState.UNSELECTED)
    return Outcome.ABORT


@pytest.fixture
def populated(trees, writetree):
    left, right = trees
    writetree(left, LEFT)
    writetree(right, RIGHT)
    return left, right


def test_accept_everything(ui, populated, readtree):
    left, right = populated
    result = dorecord(ui, left, right, selector=accept)

    assert readtree(left) == LEFT
    assert readtree(right) == RIGHT
    assert result.written == [] and result.removed == []
    assert len(result.unchanged) == 8


def test_reject_everything(ui, populated, readtree):
    left, right = populated
    result = dorecord(ui, left, right, selector=reject)

    assert readtree(left) == LEFT
    assert readtree(right) == LEFT
    assert result.removed == ['added', 'dir/added']
    assert result.ok


def test_select_none_by_default(ui, populated, readtree):
    left, right = populated
    dorecord(ui, left, right, selector=accept, default=SelectionState.UNSELECTED)
    assert readtree(right) == LEFT


def test_quit_writes_nothing(ui, populated, readtree):
    left, right = populated
    with pytest.raises(Abort, match='user quit'):
        dorecord(ui, left, right, selector=abort)

    assert readtree(left) == LEFT
    assert readtree(right) == RIGHT


def test_no_changes(ui, trees, writetree, capsys):
    left, right = trees
    writetree(left, {'a': b'a\n'})
    writetree(right, {'a': b'a\n'})

    def selector(*args):
        pytest.fail('there is nothing to select')

    result = dorecord(ui, left, right, selector=selector)
    assert result.written == []
    assert 'no changes to record' in capsys.readouterr().out


def test_not_a_directory(ui, tmp_path):
    (tmp_path / 'file').write_bytes(b'')
    with pytest.raises(Abort, match='is not a directory'):
        dorecord(ui, tmp_path, tmp_path / 'file', selector=accept)


def test_partial_selection(ui, populated):
    left, right = populated

    def selector(opts, tree, selection, ui):
        paths = [f.path for f in tree]
        # take the newline added after "b" but not the new line "c"
        noeol = paths.index('noeol')
        selection.toggle(Key(noeol, 0, 3))
        # keep the new line at the end but not the change of the second one
        modified = paths.index('modified')
        selection.toggle(Key(modified, 0, 1))
        selection.toggle(Key(modified, 0, 2))
        return Outcome.ACCEPT

    dorecord(ui, left, right, selector=selector)

    assert (right / 'noeol').read_bytes() == b'a\nb\n'
    assert (right / 'modified').read_bytes() == b'one\ntwo\nthree\nfour\n'


def test_last_line_without_newline_is_kept_last(ui, trees, writetree):
    left, right = trees
    writetree(left, {'f': b'a\nb'})
    writetree(right, {'f': b'a\nc'})

    def selector(opts, tree, selection, ui):
        # reject the deletion of "b", accept the insertion of "c"
        selection.toggle(Key(0, 0, 1))
        return Outcome.ACCEPT

    dorecord(ui, left, right, selector=selector)
    assert (right / 'f').read_bytes() == b'a\nb\nc'


def test_permissions_are_kept(ui, trees, writetree):
    left, right = trees
    writetree(left, {'script': b'old\n', 'deleted': b'#!/bin/sh\n'})
    writetree(right, {'script': b'new\n'})
    os.chmod(right / 'script', 0o755)
    os.chmod(left / 'deleted', 0o750)

    dorecord(ui, left, right, selector=reject)

    assert (right / 'script').read_bytes() == b'old\n'
    assert stat.S_IMODE((right / 'script').stat().st_mode) == 0o755
    assert stat.S_IMODE((right / 'deleted').stat().st_mode) == 0o750


def test_unavailable_files_are_left_alone(ui, trees, writetree, capsys):
    left, right = trees
    writetree(left, {'a': b'a\n'})
    writetree(right, {'a': b'b\n'})
    os.symlink('a', right / 'link')

    result = dorecord(ui, left, right, selector=reject)

    assert result.skipped == ['link']
    assert os.readlink(right / 'link') == 'a'
    assert (right / 'a').read_bytes() == b'a\n'
    assert 'link: left unchanged' in capsys.readouterr().err


def test_failed_write_does_not_stop_others(ui, trees, writetree):
    left, right = trees
    # "x" is a file on the left, but a directory on the right
    writetree(left, {'x': b'left\n', 'z': b'left\n'})
    writetree(right, {'x/y': b'right\n', 'z': b'right\n'})

    tree = buildtree(ui, left, right)
    Selection(tree, SelectionState.UNSELECTED)
    result = writeselection(ui, tree, left, right)

    assert list(result.failed) == ['x']
    assert result.removed == ['x/y']
    assert result.written == ['z']
    assert not result.ok
    assert (right / 'z').read_bytes() == b'left\n'
    assert (right / 'x').is_dir()
    # no temporary files are left behind
    assert sorted(p.name for p in right.iterdir()) == ['x', 'z']
    assert list((right / 'x').iterdir()) == []


def test_failed_write_aborts(ui, trees, writetree, monkeypatch, readtree):
    left, right = trees
    writetree(left, {'a': b'1\n', 'b': b'1\n', 'c': b'1\n'})
    writetree(right, {'a': b'2\n', 'b': b'2\n', 'c': b'2\n'})

    atomicwrite = crecord_core.atomicwrite

    def failingwrite(path, mode=None):
        if path.name == 'b':
            raise OSError(errno.ENOSPC, os.strerror(errno.ENOSPC))
        return atomicwrite(path, mode)

    monkeypatch.setattr(crecord_core, 'atomicwrite', failingwrite)
    with pytest.raises(Abort, match=r'failed to write 1 file\(s\)'):
        dorecord(ui, left, right, selector=reject)

    assert readtree(right) == {'a': b'1\n', 'b': b'2\n', 'c': b'1\n'}
