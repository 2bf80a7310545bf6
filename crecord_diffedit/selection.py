# Tri-state selection of files, sections and lines
#
# Copyright 2008—2011, 2014 Mark Edgington <edgimar@gmail.com>
# Copyright 2016, 2018—2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of
# the GNU General Public License, incorporated herein by reference.
#
# SPDX-License-Identifier: GPL-2.0-or-later
from __future__ import annotations

from typing import Iterable

from .difftree import DiffTree, File, Key, Section, SelectionState

# State a file or section takes when toggled while partially selected:
# toggling an ambiguous node always completes it.
TOGGLE_FROM_PARTIAL = SelectionState.SELECTED


def aggregate(states: Iterable[SelectionState]) -> SelectionState:
    """Combine the states of children into the state of their parent.

    >>> S, U, P = SelectionState.SELECTED, SelectionState.UNSELECTED, SelectionState.PARTIAL
    >>> aggregate([S, S]).name, aggregate([U, U]).name, aggregate([S, U]).name
    ('SELECTED', 'UNSELECTED', 'PARTIAL')
    >>> aggregate([U, P]).name
    'PARTIAL'
    """
    seen = set(states)
    if seen == {SelectionState.SELECTED}:
        return SelectionState.SELECTED
    if seen == {SelectionState.UNSELECTED}:
        return SelectionState.UNSELECTED
    if not seen:
        return SelectionState.UNSELECTED
    return SelectionState.PARTIAL


def sectionstate(section: Section) -> SelectionState:
    return aggregate(line.state for line in section.changedlines)


def filestate(file: File) -> SelectionState:
    return aggregate(section.state for section in file.sections)


class Selection:
    """Owner of the selection state of a diff tree.

    The aggregate states of sections and files are recomputed eagerly on
    every change, so reading them with query() is always consistent with
    the lines below them.
    """

    def __init__(self, tree: DiffTree, default: SelectionState = SelectionState.SELECTED):
        if default is SelectionState.PARTIAL:
            raise ValueError('the initial selection must be either selected or unselected')
        self.tree = tree
        self.set_all(default)

    def query(self, key: Key) -> SelectionState:
        return self.tree.node(key).state

    def toggle(self, key: Key) -> SelectionState:
        """Toggle the node at key and return its new state.

        A line flips and its section and file are recomputed.  A file or
        section becomes unselected if it was selected, and selected
        otherwise, and that state is pushed down to everything below it.
        Toggling a context line or an unavailable file does nothing.
        """
        file = self.tree[key.file]
        if not file.available:
            return file.state

        if key.section is None:
            if file.state is SelectionState.SELECTED:
                self._setfile(file, SelectionState.UNSELECTED)
            elif file.state is SelectionState.PARTIAL:
                self._setfile(file, TOGGLE_FROM_PARTIAL)
            else:
                self._setfile(file, SelectionState.SELECTED)
            return file.state

        section = file.sections[key.section]
        if key.line is None:
            if section.state is SelectionState.SELECTED:
                self._setsection(section, SelectionState.UNSELECTED)
            elif section.state is SelectionState.PARTIAL:
                self._setsection(section, TOGGLE_FROM_PARTIAL)
            else:
                self._setsection(section, SelectionState.SELECTED)
            file.state = filestate(file)
            return section.state

        line = section.lines[key.line]
        if not line.selectable:
            return line.state
        line.selected = not line.selected
        section.state = sectionstate(section)
        file.state = filestate(file)
        return line.state

    def set_all(self, state: SelectionState) -> None:
        """Select or unselect every line of the tree"""
        if state is SelectionState.PARTIAL:
            raise ValueError('cannot directly set the partial state')
        for file in self.tree:
            if file.available:
                self._setfile(file, state)

    def invert_all(self) -> None:
        """Flip every selectable line and every opaque file"""
        for file in self.tree:
            if not file.available:
                continue
            if file.opaque:
                file.state = (SelectionState.UNSELECTED
                              if file.state is SelectionState.SELECTED
                              else SelectionState.SELECTED)
                continue
            for section in file.sections:
                for line in section.changedlines:
                    line.selected = not line.selected
                section.state = sectionstate(section)
            file.state = filestate(file)

    def toggle_all(self) -> SelectionState:
        """Unselect everything if everything is selected, else select everything"""
        if self.state() is SelectionState.SELECTED:
            self.set_all(SelectionState.UNSELECTED)
        else:
            self.set_all(SelectionState.SELECTED)
        return self.state()

    def state(self) -> SelectionState:
        """Aggregate state of the whole tree"""
        return aggregate(file.state for file in self.tree if file.available)

    def _setsection(self, section: Section, state: SelectionState) -> None:
        selected = state is SelectionState.SELECTED
        for line in section.changedlines:
            line.selected = selected
        section.state = state

    def _setfile(self, file: File, state: SelectionState) -> None:
        for section in file.sections:
            self._setsection(section, state)
        file.state = state


def checkinvariants(tree: DiffTree) -> None:
    """Raise AssertionError if any cached state disagrees with its children"""
    for file in tree:
        for section in file.sections:
            expected = sectionstate(section)
            if section.state is not expected:
                raise AssertionError('%r in %s is %s, expected %s' % (
                    section, file.path, section.state.value, expected.value))
        if file.sections and file.state is not filestate(file):
            raise AssertionError('%r is %s, expected %s' % (
                file, file.state.value, filestate(file).value))
        if file.opaque and file.state is SelectionState.PARTIAL:
            raise AssertionError('%r is partially selected' % file)
