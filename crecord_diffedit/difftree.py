# Diff tree: files, sections and lines with their selection state
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

import enum
import io
from typing import IO, Iterator, NamedTuple, Optional, Sequence, Union

from .encoding import fromlocal, splitlines


class SelectionState(enum.Enum):
    UNSELECTED = 'unselected'
    SELECTED = 'selected'
    # only ever computed for files and sections, never stored on a line
    PARTIAL = 'partial'

    @classmethod
    def frombool(cls, selected: bool) -> 'SelectionState':
        return cls.SELECTED if selected else cls.UNSELECTED


class Origin(enum.Enum):
    """Where a line comes from; the value is its unified diff prefix"""
    KEPT = ' '
    INSERTED = '+'
    DELETED = '-'


class Key(NamedTuple):
    """Stable address of a node: file index, section index, line index"""
    file: int
    section: Optional[int] = None
    line: Optional[int] = None

    @property
    def kind(self) -> str:
        if self.section is None:
            return 'file'
        elif self.line is None:
            return 'section'
        return 'line'

    def parent(self) -> Optional['Key']:
        if self.line is not None:
            return Key(self.file, self.section)
        elif self.section is not None:
            return Key(self.file)
        return None


class Line:
    """A single line of a section.

    Kept lines are context: they are not selectable and always end up
    in the output.  For inserted and deleted lines, the selected flag means
    the change is accepted.
    """

    def __init__(self, origin: Origin, content: bytes, selected: bool = True):
        self.origin = origin
        # raw content, including the line terminator if there is one
        self.content = content
        self.selected = selected

    @property
    def selectable(self) -> bool:
        return self.origin is not Origin.KEPT

    @property
    def state(self) -> SelectionState:
        if not self.selectable:
            return SelectionState.SELECTED
        return SelectionState.frombool(self.selected)

    @property
    def nonewline(self) -> bool:
        return not self.content.endswith(b'\n')

    def __bytes__(self) -> bytes:
        """Return what this line contributes to the output"""
        if self.origin is Origin.KEPT:
            return self.content
        elif self.origin is Origin.INSERTED:
            return self.content if self.selected else b''
        else:
            return b'' if self.selected else self.content

    def prettystr(self) -> str:
        return self.origin.value + fromlocal(self.content.rstrip(b'\r\n'))

    def __str__(self) -> str:
        return self.prettystr()

    def __repr__(self) -> str:
        return '<line %s%r>' % (self.origin.value, self.content)


class Section:
    """A run of changed lines together with the context around them"""

    def __init__(self, lines: Sequence[Line], fromline: int, toline: int):
        self.lines = list(lines)
        # zero-based offsets of the first line of the section
        # in the before and after contents
        self.fromline = fromline
        self.toline = toline
        self.state = SelectionState.SELECTED

    @property
    def changedlines(self) -> Sequence[Line]:
        return [line for line in self.lines if line.selectable]

    @property
    def fromlen(self) -> int:
        return sum(1 for line in self.lines if line.origin is not Origin.INSERTED)

    @property
    def tolen(self) -> int:
        return sum(1 for line in self.lines if line.origin is not Origin.DELETED)

    def countchanges(self) -> tuple[int, int]:
        """lines -> (n+, n-)"""
        add = len([line for line in self.lines if line.origin is Origin.INSERTED])
        rem = len([line for line in self.lines if line.origin is Origin.DELETED])
        return add, rem

    def getfromtoline(self) -> str:
        """Return the unified diff range line of the section.

        >>> section = Section([Line(Origin.KEPT, b'a\\n'),
        ...                    Line(Origin.DELETED, b'b\\n'),
        ...                    Line(Origin.INSERTED, b'c\\n')], 4, 4)
        >>> section.getfromtoline()
        '@@ -5,2 +5,2 @@'
        >>> Section([Line(Origin.INSERTED, b'x\\n')], 0, 0).getfromtoline()
        '@@ -0,0 +1,1 @@'
        """
        fromlen, tolen = self.fromlen, self.tolen
        # an empty range starts at the line preceding it
        fromline = self.fromline + 1 if fromlen else self.fromline
        toline = self.toline + 1 if tolen else self.toline
        return '@@ -%d,%d +%d,%d @@' % (fromline, fromlen, toline, tolen)

    def outputlines(self) -> Iterator[bytes]:
        for line in self.lines:
            piece = bytes(line)
            if piece:
                yield piece

    def __repr__(self) -> str:
        return '<section %s>' % self.getfromtoline()


class File:
    """All changes of a single file.

    A file without sections is opaque: it can only be taken as a whole.
    This is the case for binary or undecodable content, and for files
    which are only created or removed without any lines.  A file with an
    error is unavailable: it cannot be selected and is never written.
    """

    def __init__(
            self,
            path: str,
            before: Optional[bytes],
            after: Optional[bytes],
            sections: Sequence[Section] = (),
            error: Optional[str] = None,
    ):
        self.path = path
        # None means the file does not exist on that side
        self.before = before
        self.after = after
        self.sections = list(sections)
        self.error = error
        self.state = SelectionState.SELECTED if error is None else SelectionState.UNSELECTED
        self.beforelines = splitlines(before) if (before and self.sections) else []

    @property
    def available(self) -> bool:
        return self.error is None

    @property
    def opaque(self) -> bool:
        return self.available and not self.sections

    @property
    def changetype(self) -> str:
        """One of "M", "A", or "D" (modified, added, deleted)"""
        if self.before is None and self.after is not None:
            return 'A'
        elif self.after is None and self.before is not None:
            return 'D'
        return 'M'

    def iterlines(self) -> Iterator[bytes]:
        """Replay the before content with the selected changes applied"""
        pos = 0
        for section in self.sections:
            yield from self.beforelines[pos:section.fromline]
            yield from section.outputlines()
            pos = section.fromline + section.fromlen
        yield from self.beforelines[pos:]

    def content(self) -> Optional[bytes]:
        """Return the content the file should have after applying the
        selection, or None if the file should not exist."""
        if not self.available:
            return self.after
        if self.state is SelectionState.UNSELECTED:
            return self.before
        if self.opaque:
            return self.after
        if self.state is SelectionState.SELECTED and self.after is None:
            return None
        out: list[bytes] = []
        for piece in self.iterlines():
            # a line which was last in the file may be followed by more now
            if out and not out[-1].endswith(b'\n'):
                out[-1] += b'\n'
            out.append(piece)
        return b''.join(out)

    def write(self, fp: IO[bytes]) -> None:
        """Write the resulting content of the file into the binary stream"""
        fp.write(self.content() or b'')

    def pretty(self, fp: IO[str]) -> None:
        if self.error is not None:
            fp.write(_('unavailable: %s') % self.error)
        elif self.opaque:
            if self.changetype == 'A':
                fp.write(_('new file (all or nothing)'))
            elif self.changetype == 'D':
                fp.write(_('deleted file (all or nothing)'))
            else:
                fp.write(_('this modifies a binary file (all or nothing)'))
        else:
            fp.write(_('%d hunks, %d lines changed') %
                     (len(self.sections),
                      sum(max(s.countchanges()) for s in self.sections)))

    def prettystr(self) -> str:
        with io.StringIO() as s:
            self.pretty(s)
            return s.getvalue()

    def __repr__(self) -> str:
        return '<file %s %s>' % (self.changetype, self.path)


Node = Union[File, Section, Line]


class DiffTree(list):
    """List of file objects representing all changes of a session"""

    def __init__(self, files: Sequence[File] = ()):
        super().__init__(files)

    def node(self, key: Key) -> Node:
        file = self[key.file]
        if key.section is None:
            return file
        section = file.sections[key.section]
        if key.line is None:
            return section
        return section.lines[key.line]

    def lines(self) -> Iterator[Line]:
        for file in self:
            for section in file.sections:
                yield from section.lines
