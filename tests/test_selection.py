from __future__ import annotations

import io
import random

import pytest

from crecord_diffedit.diffing import buildfile
from crecord_diffedit.difftree import DiffTree, File, Key, SelectionState
from crecord_diffedit.selection import (
    TOGGLE_FROM_PARTIAL,
    Selection,
    checkinvariants,
)

S = SelectionState.SELECTED
U = SelectionState.UNSELECTED
P = SelectionState.PARTIAL


def numbered(n: int, changed=()) -> bytes:
    return b''.join(b'%d%s\n' % (i, b'!' if i in changed else b'') for i in range(n))


@pytest.fixture
def big_tree() -> DiffTree:
    return DiffTree([
        buildfile('one', numbered(30), numbered(30, changed={2, 3, 20})),
        buildfile('two', numbered(5), numbered(5, changed={0, 4}), context=0),
        buildfile('three', None, numbered(3)),
        buildfile('four.bin', b'\0old', b'\0new'),
        File('five', None, None, error='symbolic links are not supported'),
    ])


def allkeys(tree: DiffTree) -> list[Key]:
    keys = []
    for fileidx, file in enumerate(tree):
        keys.append(Key(fileidx))
        for sectionidx, section in enumerate(file.sections):
            keys.append(Key(fileidx, sectionidx))
            keys.extend(Key(fileidx, sectionidx, i) for i in range(len(section.lines)))
    return keys


def snapshot(tree: DiffTree, selection: Selection) -> dict[Key, SelectionState]:
    return {key: selection.query(key) for key in allkeys(tree)}


def test_partial_hunk(hunk_tree):
    tree, selection = hunk_tree
    selection.set_all(U)
    # [a, -b, +c, d]: accept the insertion only
    assert selection.toggle(Key(0, 0, 2)) is S

    assert selection.query(Key(0, 0)) is P
    assert selection.query(Key(0)) is P
    assert tree[0].content() == b'a\nb\nc\nd\n'


def test_write_partial_hunk(hunk_tree):
    tree, selection = hunk_tree
    # reject the deletion of "b", keep the insertion of "c"
    selection.toggle(Key(0, 0, 1))

    with io.BytesIO() as fp:
        tree[0].write(fp)
        assert fp.getvalue() == b'a\nb\nc\nd\n'

    selection.toggle(Key(1))
    with io.BytesIO() as fp:
        tree[1].write(fp)
        assert fp.getvalue() == b''
    assert tree[1].content() is None


def test_full_hunk(hunk_tree):
    tree, selection = hunk_tree
    selection.set_all(U)
    selection.toggle(Key(0, 0, 1))
    selection.toggle(Key(0, 0, 2))

    assert selection.query(Key(0, 0)) is S
    assert selection.query(Key(0)) is S
    assert tree[0].content() == b'a\nc\nd\n'


def test_default_selection(hunk_tree):
    tree, _selection = hunk_tree
    assert Selection(tree).state() is S
    assert Selection(tree, U).state() is U
    with pytest.raises(ValueError):
        Selection(tree, P)


def test_toggle_partial_completes(hunk_tree):
    tree, selection = hunk_tree
    assert TOGGLE_FROM_PARTIAL is S

    selection.toggle(Key(0, 0, 1))
    assert selection.query(Key(0, 0)) is P
    assert selection.toggle(Key(0, 0)) is S
    assert all(line.selected for line in tree[0].sections[0].changedlines)

    selection.toggle(Key(0, 0, 2))
    assert selection.query(Key(0)) is P
    assert selection.toggle(Key(0)) is S
    assert selection.query(Key(0, 0, 2)) is S


def test_toggle_file_pushes_down(hunk_tree):
    tree, selection = hunk_tree
    assert selection.toggle(Key(0)) is U
    assert selection.query(Key(0, 0)) is U
    assert selection.query(Key(0, 0, 1)) is U
    assert selection.query(Key(0, 0, 2)) is U
    assert tree[0].content() == b'a\nb\nd\n'


def test_context_line_toggle_is_noop(hunk_tree):
    tree, selection = hunk_tree
    selection.toggle(Key(0, 0, 1))
    before = snapshot(tree, selection)

    assert selection.toggle(Key(0, 0, 0)) is S
    assert selection.toggle(Key(0, 0, 3)) is S
    assert snapshot(tree, selection) == before


@pytest.mark.parametrize("seed", range(5))
def test_toggle_twice_restores(big_tree, seed):
    rng = random.Random(seed)
    selection = Selection(big_tree)
    keys = allkeys(big_tree)
    for key in rng.sample(keys, 10):
        selection.toggle(key)

    before = snapshot(big_tree, selection)
    linekeys = [key for key in keys if key.kind == 'line']
    for key in rng.sample(linekeys, 5):
        selection.toggle(key)
        selection.toggle(key)
        assert snapshot(big_tree, selection) == before


@pytest.mark.parametrize("seed", range(20))
def test_random_operations_keep_aggregates(big_tree, seed):
    rng = random.Random(seed)
    selection = Selection(big_tree, rng.choice([S, U]))
    keys = allkeys(big_tree)
    contents = [(line.origin, line.content) for line in big_tree.lines()]
    for _ in range(200):
        op = rng.random()
        if op < 0.85:
            selection.toggle(rng.choice(keys))
        elif op < 0.9:
            selection.set_all(rng.choice([S, U]))
        elif op < 0.95:
            selection.invert_all()
        else:
            selection.toggle_all()
        checkinvariants(big_tree)
    assert [(line.origin, line.content) for line in big_tree.lines()] == contents
    assert all(line.state is S for line in big_tree.lines() if not line.selectable)


def test_set_all(big_tree):
    selection = Selection(big_tree)
    selection.toggle(Key(0, 0, 3))

    selection.set_all(U)
    assert selection.state() is U
    assert all(line.state is U for line in big_tree.lines() if line.selectable)
    assert big_tree[3].state is U

    selection.set_all(S)
    assert selection.state() is S
    assert all(line.state is S for line in big_tree.lines())

    with pytest.raises(ValueError):
        selection.set_all(P)


def test_invert_all(big_tree):
    selection = Selection(big_tree)
    selection.toggle(Key(1, 0))
    selection.invert_all()

    assert selection.query(Key(1, 0)) is S
    assert selection.query(Key(1, 1)) is U
    assert selection.query(Key(0)) is U
    assert selection.query(Key(3)) is U
    checkinvariants(big_tree)


def test_toggle_all(big_tree):
    selection = Selection(big_tree)
    assert selection.toggle_all() is U
    assert selection.toggle_all() is S

    selection.toggle(Key(0, 0))
    assert selection.state() is P
    assert selection.toggle_all() is S


def test_opaque_file_is_atomic(big_tree):
    selection = Selection(big_tree)
    opaque = big_tree[3]
    assert opaque.opaque
    assert opaque.content() == b'\0new'

    assert selection.toggle(Key(3)) is U
    assert opaque.content() == b'\0old'
    assert selection.toggle(Key(3)) is S
    checkinvariants(big_tree)


def test_unavailable_file_cannot_be_selected(big_tree):
    selection = Selection(big_tree)
    unavailable = big_tree[4]
    assert selection.query(Key(4)) is U
    assert selection.toggle(Key(4)) is U
    selection.set_all(S)
    assert unavailable.state is U
    # unavailable files don't count towards the overall state
    assert selection.state() is S


def test_checkinvariants_detects_stale_state(hunk_tree):
    tree, selection = hunk_tree
    tree[0].sections[0].lines[1].selected = False
    with pytest.raises(AssertionError):
        checkinvariants(tree)


def randomcontent(rng: random.Random):
    if rng.random() < 0.15:
        return None
    lines = [rng.choice([b'a', b'b', b'c', b'', b'd\r'])
             for _ in range(rng.randint(0, 12))]
    data = b''.join(line + b'\n' for line in lines)
    if data and rng.random() < 0.3:
        data = data[:-1]
    return data


@pytest.mark.parametrize("seed", range(100))
def test_select_all_or_nothing_reproduces_sides(seed):
    rng = random.Random(seed)
    before, after = randomcontent(rng), randomcontent(rng)
    f = buildfile('f', before, after, context=rng.randint(0, 3))
    if f is None:
        assert before == after
        return

    selection = Selection(DiffTree([f]))
    assert f.content() == after
    selection.set_all(U)
    assert f.content() == before
    selection.set_all(S)
    assert f.content() == after
