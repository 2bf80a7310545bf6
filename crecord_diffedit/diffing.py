# Building the diff tree from two directory trees
#
# Copyright 2008—2011, 2014 Mark Edgington <edgimar@gmail.com>
# Copyright 2016, 2018—2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of
# the GNU General Public License, incorporated herein by reference.
#
# SPDX-License-Identifier: GPL-2.0-or-later
from __future__ import annotations

from gettext import gettext as _

import difflib
import os
from pathlib import Path
from typing import Callable, Optional, Sequence

from .difftree import DiffTree, File, Line, Origin, Section
from .encoding import isbinary, splitlines

DEFAULT_CONTEXT = 3

Record = tuple[Origin, bytes]
Differ = Callable[[Sequence[bytes], Sequence[bytes]], Sequence[Record]]


class InputError(Exception):
    pass


def linediff(before: Sequence[bytes], after: Sequence[bytes]) -> list[Record]:
    r"""Compute line correspondence records between two lists of lines.

    Replaced runs are reported as deletions followed by insertions.

    >>> linediff([b'a\n', b'b\n', b'd\n'], [b'a\n', b'c\n', b'd\n'])
    [(<Origin.KEPT: ' '>, b'a\n'),
     (<Origin.DELETED: '-'>, b'b\n'),
     (<Origin.INSERTED: '+'>, b'c\n'),
     (<Origin.KEPT: ' '>, b'd\n')]
    """
    matcher = difflib.SequenceMatcher(None, before, after, autojunk=False)
    records: list[Record] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            records.extend((Origin.KEPT, line) for line in before[i1:i2])
        else:
            records.extend((Origin.DELETED, line) for line in before[i1:i2])
            records.extend((Origin.INSERTED, line) for line in after[j1:j2])
    return records


def buildsections(records: Sequence[Record], context: int = DEFAULT_CONTEXT) -> list[Section]:
    r"""Group line records into sections.

    Each section is a run of changes padded with up to context unchanged
    lines on each side; changes whose paddings would touch or overlap
    share a section.

    >>> records = [(Origin.KEPT, b'%d\n' % i) for i in range(10)]
    >>> records[1] = (Origin.DELETED, b'1\n')
    >>> records[8] = (Origin.INSERTED, b'8\n')
    >>> buildsections(records, context=1)
    [<section @@ -1,3 +1,2 @@>, <section @@ -8,2 +7,3 @@>]
    >>> buildsections(records, context=3)
    [<section @@ -1,9 +1,9 @@>]
    """
    changed = [i for i, (origin, _line) in enumerate(records)
               if origin is not Origin.KEPT]
    if not changed:
        return []

    groups = []
    start = prev = changed[0]
    for i in changed[1:]:
        if i - prev - 1 > 2 * context:
            groups.append((start, prev))
            start = i
        prev = i
    groups.append((start, prev))

    # offsets of each record in the before and after contents
    fromoffsets = [0]
    tooffsets = [0]
    for origin, _line in records:
        fromoffsets.append(fromoffsets[-1] + (origin is not Origin.INSERTED))
        tooffsets.append(tooffsets[-1] + (origin is not Origin.DELETED))

    sections = []
    for first, last in groups:
        lo = max(0, first - context)
        hi = min(len(records), last + context + 1)
        lines = [Line(origin, content) for origin, content in records[lo:hi]]
        sections.append(Section(lines, fromoffsets[lo], tooffsets[lo]))
    return sections


def buildfile(
        path: str,
        before: Optional[bytes],
        after: Optional[bytes],
        context: int = DEFAULT_CONTEXT,
        differ: Differ = linediff,
) -> Optional[File]:
    """Build the file node for one path, or return None if it is unchanged.

    None for before or after means the file is absent on that side.
    """
    if before == after:
        return None
    if any(data is not None and isbinary(data) for data in (before, after)):
        return File(path, before, after)
    records = differ(splitlines(before or b''), splitlines(after or b''))
    return File(path, before, after, buildsections(records, context))


def scantree(root: Path) -> dict[str, Path]:
    """Return all non-directory entries below root, keyed by relative path"""
    entries = {}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        names = filenames + [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
        for name in names:
            path = Path(dirpath, name)
            entries[path.relative_to(root).as_posix()] = path
    return entries


def readentry(path: Optional[Path]) -> Optional[bytes]:
    if path is None:
        return None
    if path.is_symlink():
        raise InputError(_('symbolic links are not supported'))
    if not path.is_file():
        raise InputError(_('not a regular file'))
    return path.read_bytes()


def samelink(left: Optional[Path], right: Optional[Path]) -> bool:
    if left is None or right is None:
        return False
    if not (left.is_symlink() and right.is_symlink()):
        return False
    return os.readlink(left) == os.readlink(right)


def buildtree(
        ui,
        left: Path,
        right: Path,
        context: int = DEFAULT_CONTEXT,
        differ: Differ = linediff,
) -> DiffTree:
    """Compare two directory trees and build the diff tree of all changes.

    Problems with individual files don't stop the comparison: such files
    are included as unavailable and reported with ui.warn().
    """
    leftentries = scantree(left)
    rightentries = scantree(right)

    files = []
    for name in sorted(set(leftentries) | set(rightentries)):
        leftpath, rightpath = leftentries.get(name), rightentries.get(name)
        if samelink(leftpath, rightpath):
            continue
        try:
            before = readentry(leftpath)
            after = readentry(rightpath)
        except (InputError, OSError) as inst:
            error = getattr(inst, 'strerror', None) or str(inst)
            ui.warn(_('%s: %s') % (name, error))
            files.append(File(name, None, None, error=error))
            continue

        f = buildfile(name, before, after, context, differ)
        if f is None:
            continue
        ui.debug('%s: %d sections' % (name, len(f.sections)))
        files.append(f)
    return DiffTree(files)
