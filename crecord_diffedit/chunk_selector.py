# Chunk selector text user interface
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

from collections.abc import Sequence
from gettext import gettext as _
from typing import NamedTuple, Optional

import curses
import enum
import locale
import re
import signal

from . import encoding
from . import util
from .difftree import DiffTree, File, Key, Line, Origin, SelectionState
from .selection import Selection


class Mode(enum.Enum):
    NORMAL = 'normal'
    HELP = 'help'
    CONFIRMQUIT = 'confirm-quit'
    CONFIRMACCEPT = 'confirm-accept'


class Outcome(enum.Enum):
    ACCEPT = 'accept'
    ABORT = 'abort'


class Row(NamedTuple):
    key: Key
    depth: int
    # the cursor never rests on context lines
    focusable: bool


class DrawRow(NamedTuple):
    key: Key
    depth: int
    checkbox: str
    text: str
    # one of: file, section, addition, deletion, context, error
    style: str
    focused: bool


class Frame(NamedTuple):
    """Everything the terminal backend needs to draw one screen"""
    mode: Mode
    statussegments: Sequence[str]
    prompt: Optional[str]
    rows: Sequence[DrawRow]


class ViewportState:
    def __init__(self, offset: int = 0, height: int = 1):
        self.offset = offset
        self.height = max(1, height)

    def clamp(self, numrows: int) -> None:
        self.offset = max(0, min(self.offset, numrows - self.height))

    def __repr__(self):
        return "%s(offset=%d, height=%d)" % (self.__class__.__name__, self.offset, self.height)


def flatten(tree: DiffTree, expanded: set[Key]) -> list[Row]:
    """Return the rows currently visible, given the set of expanded
    files and sections."""
    rows = []
    for fileidx, file in enumerate(tree):
        filekey = Key(fileidx)
        rows.append(Row(filekey, 0, True))
        if filekey not in expanded:
            continue
        for sectionidx, section in enumerate(file.sections):
            sectionkey = Key(fileidx, sectionidx)
            rows.append(Row(sectionkey, 1, True))
            if sectionkey not in expanded:
                continue
            for lineidx, line in enumerate(section.lines):
                rows.append(Row(Key(fileidx, sectionidx, lineidx), 2, line.selectable))
    return rows


_headermessage = _('Select changes to keep')

_confirmmessages = {
    Mode.CONFIRMQUIT: _('Abort without applying any changes [yN]?'),
    Mode.CONFIRMACCEPT: _('Are you sure you want to apply the selected changes [Yn]?'),
}

helptext = _("""            [press any key to return to the change display]

The right-hand tree will be replaced with the changes you select here; the
left-hand tree is never modified.  Unselected changes are reverted to the
left-hand version.  Nothing is written if you quit.
The following are valid keystrokes:

                [SPACE] : (un-)select item ([~]/[x] = partly/fully selected)
                [ENTER] : (un-)select item and go to the next of its kind
                      a : invert the selection of every line
                      A : (un-)select all items
    Up/Down-arrow [k/j] : go to previous/next unfolded item
        PgUp/PgDn [K/J] : go to previous/next item of same type
 Right/Left-arrow [l/h] : go to child item / parent item
 Shift-Left-arrow   [H] : go to parent file / fold selected file
                      g : go to the top
                      G : go to the bottom
          ctrl-u/ctrl-d : go a page up/down
                      f : fold / unfold item, hiding/revealing its children
                      F : fold / unfold all items
                 ctrl-l : scroll the selected line to the top of the screen
      e/y ctrl-e/ctrl-y : scroll down/up one line
          ctrl-f/ctrl-b : scroll down/up one page
                      c : confirm and apply the selected changes
                  q/ESC : quit without applying (no changes will be made)
                      ? : help (what you're currently reading)""")


class ChunkSelector:
    """Cursor, folding and scrolling over a diff tree.

    This is the terminal-independent part of the interface: it turns key
    names (as returned by curses' getkey()) into cursor movement, folding
    and selection changes, and describes what to draw with frame().
    """

    def __init__(self, tree: DiffTree, selection: Selection, opts=None, height: int = 24):
        if not tree:
            raise ValueError('nothing to select from')
        self.tree = tree
        self.selection = selection
        self.opts = opts or {}

        self.mode = Mode.NORMAL
        self.outcome: Optional[Outcome] = None

        # files start folded, sections unfolded, so unfolding a file
        # shows all its lines
        self.expanded: set[Key] = {
            Key(fileidx, sectionidx)
            for fileidx, file in enumerate(tree)
            for sectionidx in range(len(file.sections))
        }

        # the currently selected file, section or line
        self.currentselecteditem = Key(0)
        self.viewport = ViewportState(0, height)

        self.rows: list[Row] = []
        self.rowindex: dict[Key, int] = {}
        self.refreshrows()

    @property
    def cursor(self) -> int:
        return self.rowindex[self.currentselecteditem]

    def refreshrows(self):
        """Recompute the visible rows and keep the cursor on one of them"""
        self.rows = flatten(self.tree, self.expanded)
        self.rowindex = {row.key: i for i, row in enumerate(self.rows)}

        item = self.currentselecteditem
        while item not in self.rowindex:
            # the item was folded away: select the closest visible ancestor
            item = item.parent()
        index = self.rowindex[item]
        if not self.rows[index].focusable:
            index = self.nearestfocusable(index)
        self.currentselecteditem = self.rows[index].key
        self.updatescroll()

    def nearestfocusable(self, index: int) -> int:
        for i in range(index, len(self.rows)):
            if self.rows[i].focusable:
                return i
        for i in range(index, -1, -1):
            if self.rows[i].focusable:
                return i
        return index

    def selectrow(self, index: Optional[int]):
        if index is not None:
            self.currentselecteditem = self.rows[index].key
        self.updatescroll()

    def findrow(self, indices, depth: Optional[int] = None) -> Optional[int]:
        for i in indices:
            row = self.rows[i]
            if row.focusable and (depth is None or row.depth == depth):
                return i
        return None

    def isfolded(self, item: Key) -> bool:
        return item.kind != 'line' and item not in self.expanded

    def setfolded(self, item: Key, folded: bool):
        if folded:
            self.expanded.discard(item)
        else:
            self.expanded.add(item)
        self.refreshrows()

    def handlefirstlineevent(self):
        """Handle 'g' to navigate to the top most file."""
        self.selectrow(self.findrow(range(len(self.rows))))

    def handlelastlineevent(self):
        """Handle 'G' to navigate to the bottom most visible item."""
        self.selectrow(self.findrow(range(len(self.rows) - 1, -1, -1)))

    def uparrowevent(self):
        """Select the previous visible item, whatever its kind."""
        self.selectrow(self.findrow(range(self.cursor - 1, -1, -1)))

    def downarrowevent(self):
        """Select the next visible item, whatever its kind."""
        self.selectrow(self.findrow(range(self.cursor + 1, len(self.rows))))

    def uparrowshiftevent(self):
        """
        Select (if possible) the previous item on the same level as the
        currently selected item.  Otherwise, select (if possible) the
        parent-item of the currently selected item.
        """
        depth = self.rows[self.cursor].depth
        index = self.findrow(range(self.cursor - 1, -1, -1), depth)
        if index is None:
            parent = self.currentselecteditem.parent()
            if parent is not None:
                index = self.rowindex[parent]
        self.selectrow(index)

    def downarrowshiftevent(self):
        """Select (if possible) the next item on the same level."""
        depth = self.rows[self.cursor].depth
        self.selectrow(self.findrow(range(self.cursor + 1, len(self.rows)), depth))

    def pageupevent(self):
        target = max(0, self.cursor - self.viewport.height)
        self.selectrow(self.findrow(range(target, len(self.rows))))

    def pagedownevent(self):
        target = min(len(self.rows) - 1, self.cursor + self.viewport.height)
        self.selectrow(self.findrow(range(target, -1, -1)))

    def rightarrowevent(self):
        """
        Select (if possible) the first of this item's child-items,
        unfolding the item if needed.
        """
        item = self.currentselecteditem
        if item.kind == 'line':
            return
        if self.isfolded(item):
            self.setfolded(item, False)
        index = self.findrow(range(self.cursor + 1, len(self.rows)))
        if index is not None and self.rows[index].key.parent() == item:
            self.selectrow(index)

    def leftarrowevent(self):
        """
        If the current item can be folded (i.e. it is an unfolded file or
        section), then fold it.  Otherwise try select (if possible) the parent
        of this item.
        """
        item = self.currentselecteditem
        if item.kind != 'line' and not self.isfolded(item) and self.haschildren(item):
            self.setfolded(item, True)
            return
        parent = item.parent()
        if parent is not None:
            self.currentselecteditem = parent
            self.updatescroll()

    def leftarrowshiftevent(self):
        """
        Select the file of the current item (or fold current item if the
        current item is already a file).
        """
        item = self.currentselecteditem
        if item.kind == 'file':
            if not self.isfolded(item):
                self.setfolded(item, True)
            return
        self.currentselecteditem = Key(item.file)
        self.updatescroll()

    def haschildren(self, item: Key) -> bool:
        if item.kind == 'file':
            return bool(self.tree[item.file].sections)
        return item.kind == 'section'

    def togglefolded(self, item: Optional[Key] = None):
        """Toggle folded flag of specified item (defaults to currently selected)"""
        if item is None:
            item = self.currentselecteditem
        if item.kind == 'line':
            # lines cannot be folded, fold their section instead
            item = item.parent()
            self.currentselecteditem = item
        self.setfolded(item, not self.isfolded(item))

    def togglefoldedall(self):
        """Unfold everything, or fold everything if all is unfolded already"""
        allkeys = set()
        for fileidx, file in enumerate(self.tree):
            allkeys.add(Key(fileidx))
            allkeys.update(Key(fileidx, i) for i in range(len(file.sections)))
        if self.expanded == allkeys:
            self.expanded = set()
        else:
            self.expanded = allkeys
        self.refreshrows()

    def toggleapply(self, item: Optional[Key] = None):
        """
        Toggle the selection of the specified item.  If no item is specified,
        toggle the currently selected item.
        """
        if item is None:
            item = self.currentselecteditem
        self.selection.toggle(item)

    def toggleapplyandadvance(self):
        self.toggleapply()
        self.downarrowshiftevent()

    def toggleall(self):
        """Toggle the selection of all items."""
        self.selection.toggle_all()

    def invertall(self):
        self.selection.invert_all()

    def updatescroll(self):
        """Scroll the viewport to fully show the currently-selected item"""
        height = self.viewport.height
        # keep a few rows of context above and below the cursor
        margin = min(3, (height - 1) // 2)
        index = self.cursor
        if index > self.viewport.offset + height - 1 - margin:
            self.viewport.offset = index - (height - 1 - margin)
        elif index < self.viewport.offset + margin:
            self.viewport.offset = index - margin
        self.viewport.clamp(len(self.rows))

    def scrolllines(self, numlines: int):
        """Scroll the viewport by numlines rows without moving the cursor"""
        self.viewport.offset += numlines
        self.viewport.clamp(len(self.rows))

    def scrolltotop(self):
        """Scroll the selected row to the top of the screen"""
        self.viewport.offset = self.cursor
        self.viewport.clamp(len(self.rows))

    def resize(self, height: int):
        self.viewport.height = max(1, height)
        self.updatescroll()

    def getstatusprefixstring(self, item: Key) -> str:
        """
        Create a string to prefix a line with which indicates whether 'item'
        is selected and/or folded.
        """
        node = self.tree.node(item)
        if isinstance(node, Line):
            if not node.selectable:
                return "     "
            return ("[x]" if node.selected else "[ ]") + "  "

        if isinstance(node, File) and not node.available:
            checkbox = "[!]"
        elif node.state is SelectionState.SELECTED:
            checkbox = "[x]"
        elif node.state is SelectionState.PARTIAL:
            checkbox = "[~]"
        else:
            checkbox = "[ ]"

        if self.isfolded(item) and self.haschildren(item):
            checkbox += "**"
        else:
            checkbox += "  "
        if isinstance(node, File):
            # one of "M", "A", or "D" (modified, added, deleted)
            checkbox += node.changetype + " "
        return checkbox

    def drawrow(self, row: Row) -> DrawRow:
        node = self.tree.node(row.key)
        if isinstance(node, File):
            text = "%s  (%s)" % (node.path, node.prettystr())
            style = 'file' if node.available else 'error'
        elif isinstance(node, Line):
            text = node.prettystr()
            style = {
                Origin.KEPT: 'context',
                Origin.INSERTED: 'addition',
                Origin.DELETED: 'deletion',
            }[node.origin]
        else:
            text = node.getfromtoline()
            style = 'section'
        return DrawRow(row.key, row.depth, self.getstatusprefixstring(row.key),
                       text, style, row.key == self.currentselecteditem)

    def _getstatuslinesegments(self) -> list[str]:
        """-> [str]. return segments"""
        selected = self.selection.query(self.currentselecteditem) is SelectionState.SELECTED
        segments = [
            _headermessage,
            '-',
            _('[x]=selected **=collapsed'),
            _('c: confirm'),
            _('q: abort'),
            _('arrow keys: move/expand/collapse'),
            _('space: deselect') if selected else _('space: select'),
            _('?: help'),
        ]
        return segments

    def frame(self) -> Frame:
        start = self.viewport.offset
        visible = self.rows[start:start + self.viewport.height]
        return Frame(
            self.mode,
            self._getstatuslinesegments(),
            _confirmmessages.get(self.mode),
            [self.drawrow(row) for row in visible],
        )

    def confirmcommit(self) -> bool:
        if not self.opts.get('confirm'):
            self.outcome = Outcome.ACCEPT
            return True
        self.mode = Mode.CONFIRMACCEPT
        return False

    def handlekeypressed(self, keypressed: str) -> bool:
        """
        Perform actions based on pressed keys.

        Return true to exit the main loop.
        """
        if self.mode is Mode.HELP:
            self.mode = Mode.NORMAL
            return False
        if self.mode is Mode.CONFIRMQUIT:
            if keypressed in ["y", "Y"]:
                self.outcome = Outcome.ABORT
                return True
            self.mode = Mode.NORMAL
            return False
        if self.mode is Mode.CONFIRMACCEPT:
            if keypressed in ["y", "Y", "\n", "KEY_ENTER"]:
                self.outcome = Outcome.ACCEPT
                return True
            self.mode = Mode.NORMAL
            return False

        if keypressed in ["k", "KEY_UP"]:
            self.uparrowevent()
        elif keypressed in ["K", "KEY_PPAGE"]:
            self.uparrowshiftevent()
        elif keypressed in ["j", "KEY_DOWN"]:
            self.downarrowevent()
        elif keypressed in ["J", "KEY_NPAGE"]:
            self.downarrowshiftevent()
        elif keypressed in ["l", "KEY_RIGHT"]:
            self.rightarrowevent()
        elif keypressed in ["h", "KEY_LEFT"]:
            self.leftarrowevent()
        elif keypressed in ["H", "KEY_SLEFT"]:
            self.leftarrowshiftevent()
        elif keypressed in ["\x15"]:  # ctrl-u
            self.pageupevent()
        elif keypressed in ["\x04"]:  # ctrl-d
            self.pagedownevent()
        elif keypressed in ["q", "\x1b"]:
            self.mode = Mode.CONFIRMQUIT
        elif keypressed in ["c"]:
            return self.confirmcommit()
        elif keypressed in [" "]:
            self.toggleapply()
        elif keypressed in ["\n", "KEY_ENTER"]:
            self.toggleapplyandadvance()
        elif keypressed in ["A"]:
            self.toggleall()
        elif keypressed in ["a"]:
            self.invertall()
        elif keypressed in ["f"]:
            self.togglefolded()
        elif keypressed in ["F"]:
            self.togglefoldedall()
        elif keypressed in ["?"]:
            self.mode = Mode.HELP
        elif keypressed in ["\x0c"]:  # ctrl-l
            self.scrolltotop()
        elif keypressed in ["e", "\x05"]:  # ctrl-e
            self.scrolllines(1)
        elif keypressed in ["y", "\x19"]:  # ctrl-y
            self.scrolllines(-1)
        elif keypressed in ["\x06"]:  # ctrl-f
            self.scrolllines(self.viewport.height)
        elif keypressed in ["\x02"]:  # ctrl-b
            self.scrolllines(-self.viewport.height)
        elif keypressed in ["g", "KEY_HOME"]:
            self.handlefirstlineevent()
        elif keypressed in ["G", "KEY_END"]:
            self.handlelastlineevent()
        return False


def chunkselector(opts, tree: DiffTree, selection: Selection, ui) -> Outcome:
    """
    Curses interface to let the user select changes, marking the selection
    state of the chosen items.
    """
    chunkselector = CursesChunkSelector(tree, selection, opts)
    # This is required for ncurses to display non-ASCII characters in default user
    # locale encoding correctly.  --immerrr
    locale.setlocale(locale.LC_ALL, '')

    f = signal.getsignal(signal.SIGTSTP)
    try:
        curses.wrapper(chunkselector.main)
    except KeyboardInterrupt:
        chunkselector.outcome = Outcome.ABORT
    except curses.error as inst:
        raise util.Abort(_('cannot start the interface: %s') % inst)
    finally:
        # ncurses does not restore signal handler for SIGTSTP
        signal.signal(signal.SIGTSTP, f)
    if chunkselector.initerr is not None:
        raise util.Abort(chunkselector.initerr)
    ui.debug('selection finished: %s' % chunkselector.outcome.value)
    return chunkselector.outcome


class CursesChunkSelector(ChunkSelector):
    # indentation of files, sections and lines
    indentnumchars = (0, 3, 6)

    def __init__(self, tree: DiffTree, selection: Selection, opts=None):
        super().__init__(tree, selection, opts)

        # dictionary mapping (fgcolor, bgcolor) pairs to the
        # corresponding curses color-pair value.
        self.colorpairs = {}
        # maps custom nicknames of color-pairs to curses color-pair values
        self.colorpairnames = {}
        self.usecolor = True

        self.numstatuslines = 1
        # error during initialization, cannot be printed in the curses
        # interface, it should be printed by the calling code
        self.initerr = None

    def _getstatuslines(self, frame: Frame) -> Sequence[str]:
        """() -> [str]. return short help used in the top status window"""
        if frame.prompt is not None:
            lines = [frame.prompt]
        else:
            # wrap segments to lines
            width = self.xscreensize
            lines = []
            lastwidth = width
            for s in frame.statussegments:
                w = encoding.ucolwidth(s)
                sep = ' ' * (1 + (s and s[0] not in '-['))
                if lastwidth + w + len(sep) >= width:
                    lines.append(s)
                    lastwidth = w
                else:
                    lines[-1] += sep + s
                    lastwidth += w + len(sep)
        return [util.ellipsis(line, self.xscreensize - 1) for line in lines]

    def layout(self, numstatuslines: int):
        """Split the screen into the status window and the change window"""
        self.yscreensize, self.xscreensize = self.stdscr.getmaxyx()
        self.numstatuslines = numstatuslines
        # newwin([height, width,] begin_y, begin_x)
        self.statuswin = curses.newwin(self.numstatuslines, self.xscreensize, 0, 0)
        self.statuswin.keypad(True)  # interpret arrow-key, etc. ESC sequences
        bodyheight = max(1, self.yscreensize - self.numstatuslines)
        self.chunkwin = curses.newwin(bodyheight, self.xscreensize, self.numstatuslines, 0)
        self.resize(bodyheight)

    def handleresize(self):
        """Handle window resizing"""
        try:
            curses.update_lines_cols()
            self.stdscr.clear()
            self.stdscr.refresh()
            self.layout(self.numstatuslines)
        except curses.error:
            pass

    def printstring(self, window, text, pair=None, pairname=None,
                    attrlist=None, align=True, showwhtspc=False):
        """
        Print the string, text, with the specified colors and attributes, to
        the specified curses window object, cutting it at the right border.

        If align == True, whitespace is added to the printed string such that
        the string stretches to the right border of the window.

        If showwhtspc == True, trailing whitespace of a string is highlighted.
        """
        # preprocess the text, converting tabs to spaces
        text = text.expandtabs(4)
        # Strip \n, and convert control characters to ^[char] representation
        text = re.sub(
            r'[\x00-\x08\x0a-\x1f]',
            lambda m: '^' + chr(ord(m.group()) + 64), text.strip('\n')
        )

        if pair is not None:
            colorpair = pair
        else:
            colorpair = self.getcolorpair(name=pairname or "normal", attrlist=attrlist)

        y, xstart = window.getyx()
        room = window.getmaxyx()[1] - xstart

        numtrailingspaces = 0
        if showwhtspc:
            origlen = len(text)
            text = text.rstrip(' ')  # tabs have already been expanded
            numtrailingspaces = origlen - len(text)

        text = util.trim(text, room)
        window.addstr(text, colorpair)
        room -= encoding.ucolwidth(text)

        if numtrailingspaces and room > 0:
            wscolorpair = colorpair | curses.A_REVERSE
            for i in range(min(numtrailingspaces, room)):
                window.addch(curses.ACS_CKBOARD, wscolorpair)
            room -= min(numtrailingspaces, room)

        if align and room > 0:
            window.addstr(" " * room, colorpair)

    def printrow(self, y: int, row: DrawRow):
        if row.focused:
            pairname = "selected"
        else:
            pairname = {
                'addition': "addition",
                'deletion': "deletion",
                'error': "deletion",
            }.get(row.style, "normal")
        attrlist = [curses.A_BOLD] if row.style in ('file', 'section', 'error') else None

        self.chunkwin.move(y, 0)
        lineprefix = " " * self.indentnumchars[row.depth] + row.checkbox
        # add uncolored checkbox/indent
        self.printstring(self.chunkwin, lineprefix, align=False)
        self.printstring(self.chunkwin, row.text, pairname=pairname, attrlist=attrlist,
                         showwhtspc=row.style in ('addition', 'deletion'))

    def helpwindow(self):
        """Print the help text in place of the changes."""
        for y, line in enumerate(helptext.split("\n")[:self.viewport.height]):
            try:
                self.chunkwin.move(y, 0)
                self.printstring(self.chunkwin, line,
                                 pairname="legend" if y == 0 else "normal")
            except curses.error:
                pass

    def updatescreen(self):
        frame = self.frame()
        statuslines = self._getstatuslines(frame)
        if len(statuslines) != self.numstatuslines:
            try:
                self.layout(len(statuslines))
            except curses.error:
                pass
            frame = self.frame()

        self.statuswin.erase()
        self.chunkwin.erase()

        # print out the status lines at the top
        for y, line in enumerate(statuslines):
            try:
                self.statuswin.move(y, 0)
                self.printstring(self.statuswin, line,
                                 pairname="selected" if frame.prompt else "legend")
            except curses.error:
                pass

        if frame.mode is Mode.HELP:
            self.helpwindow()
        else:
            # print out the visible part of the changes
            for y, row in enumerate(frame.rows):
                try:
                    self.printrow(y, row)
                except curses.error:
                    pass

        self.statuswin.noutrefresh()
        self.chunkwin.noutrefresh()
        curses.doupdate()

    def getcolorpair(self, fgcolor=None, bgcolor=None, name=None,
                     attrlist=None):
        """
        Get a curses color pair, adding it to self.colorpairs if it is not
        already defined.  An optional string, name, can be passed as a shortcut
        for referring to the color-pair.  By default, if no arguments are
        specified, the default foreground / background color-pair is
        returned.

        attrlist is used to 'flavor' the returned color-pair.  This information
        is not stored in self.colorpairs.  It contains attribute values like
        curses.A_BOLD.
        """
        if (name is not None) and name in self.colorpairnames:
            # then get the associated color pair and return it
            colorpair = self.colorpairnames[name]
        else:
            if fgcolor is None:
                fgcolor = -1
            if bgcolor is None:
                bgcolor = -1
            if (fgcolor, bgcolor) in self.colorpairs:
                colorpair = self.colorpairs[(fgcolor, bgcolor)]
            else:
                pairindex = len(self.colorpairs) + 1
                if self.usecolor:
                    curses.init_pair(pairindex, fgcolor, bgcolor)
                    colorpair = self.colorpairs[(fgcolor, bgcolor)] = (
                        curses.color_pair(pairindex))
                else:
                    colorpair = 0
                    if name == 'selected':
                        colorpair = curses.A_REVERSE
                    self.colorpairs[(fgcolor, bgcolor)] = colorpair
            if name is not None:
                self.colorpairnames[name] = colorpair

        # add attributes if possible
        for textattr in attrlist or []:
            colorpair |= textattr
        return colorpair

    def initcolorpair(self, *args, **kwargs):
        """Same as getcolorpair."""
        self.getcolorpair(*args, **kwargs)

    def main(self, stdscr):
        """
        Method to be wrapped by curses.wrapper() for selecting changes.
        """
        self.stdscr = stdscr
        self.yscreensize, self.xscreensize = self.stdscr.getmaxyx()

        curses.start_color()
        try:
            curses.use_default_colors()
        except curses.error:
            self.usecolor = False

        # In some situations we may have some cruft left on the "alternate
        # screen" from another program (or previous iterations of ourself).
        self.stdscr.clear()
        self.stdscr.refresh()

        # don't display the cursor
        try:
            curses.curs_set(0)
        except curses.error:
            pass

        # available colors: black, blue, cyan, green, magenta, white, yellow
        # init_pair(color_id, foreground_color, background_color)
        self.initcolorpair(None, None, name="normal")
        self.initcolorpair(curses.COLOR_WHITE, curses.COLOR_MAGENTA,
                           name="selected")
        self.initcolorpair(curses.COLOR_RED, None, name="deletion")
        self.initcolorpair(curses.COLOR_GREEN, None, name="addition")
        self.initcolorpair(curses.COLOR_WHITE, curses.COLOR_BLUE, name="legend")

        try:
            self.layout(len(self._getstatuslines(self.frame())))
        except curses.error:
            self.initerr = _('the terminal is too small to display the changes')
            return

        while True:
            self.updatescreen()
            try:
                keypressed = self.statuswin.getkey()
            except curses.error:
                continue
            if keypressed == "KEY_RESIZE":
                self.handleresize()
                continue
            if self.handlekeypressed(keypressed):
                break
