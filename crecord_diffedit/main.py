# crecord-diffedit entry point and configuration helpers
#
# Copyright 2016, 2018—2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of
# the GNU General Public License, incorporated herein by reference.
#
# SPDX-License-Identifier: GPL-2.0-or-later

from gettext import gettext as _
from typing import Optional

import argparse
import os
import sys

from . import __version__, crecord_core
from .difftree import SelectionState
from .util import Abort, systemcall


class Config:
    """Read-only access to the crecord section of the Git configuration"""

    def get(self, section, item, default=None) -> Optional[str]:
        try:
            return systemcall(
                ['git', 'config', '--get', '%s.%s' % (section, item)],
                onerr=KeyError,
                encoding="UTF-8",
            ).rstrip('\n')
        except KeyError:
            return default

    def getint(self, section, item, default=None) -> Optional[int]:
        value = self.get(section, item)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise Abort(_('%s.%s is not a number: %r') % (section, item, value))

    def getbool(self, section, item, default=False) -> bool:
        value = self.get(section, item)
        if value is None:
            return default
        return value.lower() in ('true', 'yes', 'on', '1')


class Ui:
    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.debuglevel = 0

    def print_message(self, *msg, debuglevel: int, **opts):
        if self.debuglevel < debuglevel:
            return

        sys.stdout.flush()
        print(*msg, **opts, file=sys.stderr)
        sys.stderr.flush()

    def debug(self, *msg, **opts):
        self.print_message(*msg, debuglevel=2, **opts)

    def info(self, *msg, **opts):
        self.print_message(*msg, debuglevel=1, **opts)

    def warn(self, *msg, **opts):
        self.print_message(*msg, debuglevel=0, **opts)

    def status(self, *msg, **opts):
        print(*msg, **opts)

    def setdebuglevel(self, level):
        self.debuglevel = level


def parseargs(argv=None):
    prog = os.path.basename(sys.argv[0])

    parser = argparse.ArgumentParser(
        description='interactively select which changes between two trees to keep',
        prog=prog,
    )
    parser.add_argument('-d', '--diff', action='store_true', default=False,
                        help='compare two directories (accepted for merge tool compatibility)')
    parser.add_argument('left', help='the tree before the changes; it is never modified')
    parser.add_argument('right', help='the tree after the changes; it is replaced with the selected changes')
    parser.add_argument('-U', '--context', metavar='N', type=int, default=None,
                        help='show N lines of context around changes (default: 3)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--select-all', dest='default', action='store_const',
                       const=SelectionState.SELECTED, default=None,
                       help='start with every change selected (default)')
    group.add_argument('--select-none', dest='default', action='store_const',
                       const=SelectionState.UNSELECTED,
                       help='start with no change selected')
    parser.add_argument('--confirm', default=None, action='store_true',
                        help='show confirmation prompt after selecting changes')
    parser.add_argument('-v', '--verbose', default=0, action='count', help='be more verbose')
    parser.add_argument('--debug', action='store_const', const=2, dest='verbose',
                        help='be debuggingly verbose')
    parser.add_argument('--version', action='version', version='%(prog)s ' + __version__)
    return parser.parse_args(argv)


def configure(opts: dict, config: Config) -> dict:
    """Fill in the options not given on the command line from the configuration"""
    if opts['context'] is None:
        opts['context'] = config.getint('crecord', 'context', 3)
    if opts['context'] < 0:
        raise Abort(_('the number of context lines cannot be negative'))
    if opts['default'] is None:
        value = config.get('crecord', 'defaultselection', 'selected')
        try:
            opts['default'] = SelectionState(value.lower())
        except ValueError:
            opts['default'] = None
        if opts['default'] not in (SelectionState.SELECTED, SelectionState.UNSELECTED):
            raise Abort(_('crecord.defaultselection must be "selected" or "unselected", not %r') % value)
    if opts['confirm'] is None:
        opts['confirm'] = config.getbool('crecord', 'confirm', False)
    return opts


def main(argv=None):
    args = parseargs(argv)
    opts = vars(args)

    ui = Ui()
    ui.setdebuglevel(opts['verbose'])

    try:
        configure(opts, ui.config)
        left = opts.pop('left')
        right = opts.pop('right')
        crecord_core.dorecord(ui, left, right, **opts)
    except Abort as inst:
        sys.stderr.write(_("abort: %s\n") % inst)
        sys.exit(1)
    sys.exit(0)


if __name__ == '__main__':
    main()
