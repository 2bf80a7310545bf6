# Record process driver
#
# Copyright 2008—2011, 2014 Mark Edgington <edgimar@gmail.com>
# Copyright 2016, 2018—2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of
# the GNU General Public License, incorporated herein by reference.
#
# Much of this extension is based on Bryan O'Sullivan's record extension.
#
# SPDX-License-Identifier: GPL-2.0-or-later
from __future__ import annotations

from gettext import gettext as _

import stat
from pathlib import Path
from typing import Optional

from .chunk_selector import Outcome, chunkselector
from .diffing import DEFAULT_CONTEXT, buildtree
from .difftree import DiffTree, File, SelectionState
from .selection import Selection
from .util import Abort, atomicwrite


class RecordResult:
    """What happened to each file when the selection was written out"""

    def __init__(self):
        self.written: list[str] = []
        self.removed: list[str] = []
        self.unchanged: list[str] = []
        self.skipped: list[str] = []
        self.failed: dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return not self.failed

    def __repr__(self):
        return "%s(written=%r, removed=%r, unchanged=%r, skipped=%r, failed=%r)" % (
            self.__class__.__name__, self.written, self.removed,
            self.unchanged, self.skipped, self.failed)


def filemode(*paths: Path) -> Optional[int]:
    """Return the permission bits of the first of paths that exists"""
    for path in paths:
        try:
            return stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            continue
    return None


def writefile(ui, file: File, left: Path, right: Path, result: RecordResult) -> None:
    target = right / file.path
    content = file.content()
    if content == file.after:
        ui.debug('%s: unchanged' % file.path)
        result.unchanged.append(file.path)
        return

    if content is None:
        ui.debug('removing %s' % target)
        target.unlink()
        result.removed.append(file.path)
        return

    mode = filemode(target, left / file.path)
    ui.debug('writing %d bytes to %s' % (len(content), target))
    target.parent.mkdir(parents=True, exist_ok=True)
    with atomicwrite(target, mode) as fp:
        file.write(fp)
    result.written.append(file.path)


def writeselection(ui, tree: DiffTree, left: Path, right: Path) -> RecordResult:
    """Write the selected content of every file into the right-hand tree.

    Every file is replaced atomically.  A failure to write one file is
    recorded in the result and does not stop the remaining files from
    being written; files already written stay as they are.
    """
    result = RecordResult()
    for file in tree:
        if not file.available:
            result.skipped.append(file.path)
            continue
        try:
            writefile(ui, file, left, right, result)
        except OSError as inst:
            ui.warn(_('%s: %s') % (file.path, inst.strerror or inst))
            result.failed[file.path] = inst.strerror or str(inst)
    return result


def dorecord(ui, left, right, selector=None, **opts) -> RecordResult:
    """This is the diff editing driver.

    Its job is to compare the left ("before") and right ("after") trees,
    let the user interactively choose which changes to keep, and then
    rewrite the right tree so it only contains the chosen changes.

    The left tree is never modified.  If the user quits, nothing is
    written at all.
    """
    left, right = Path(left), Path(right)
    for path in (left, right):
        if not path.is_dir():
            raise Abort(_('%s is not a directory') % path)

    context = opts.get('context')
    if context is None:
        context = DEFAULT_CONTEXT

    # 0. compare the trees
    tree = buildtree(ui, left, right, context=context)
    if not tree:
        ui.status(_('no changes to record'))
        return RecordResult()

    # 1. let the user choose the changes to keep
    default = opts.get('default') or SelectionState.SELECTED
    selection = Selection(tree, default)
    if selector is None:
        selector = chunkselector
    outcome = selector(opts, tree, selection, ui)
    if outcome is not Outcome.ACCEPT:
        raise Abort(_('user quit'))

    # 2. write the selection into the right tree
    result = writeselection(ui, tree, left, right)
    for path in result.skipped:
        ui.warn(_('%s: left unchanged') % path)
    ui.info(_('%d files written, %d removed, %d unchanged') % (
        len(result.written), len(result.removed), len(result.unchanged)))
    if not result.ok:
        raise Abort(_('failed to write %d file(s)') % len(result.failed))
    return result
