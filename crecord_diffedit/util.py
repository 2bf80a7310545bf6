# Utility functions
#
#  Copyright 2006, 2015 Matt Mackall <mpm@selenic.com>
#  Copyright 2007 Eric St-Jean <esj@wwd.ca>
#  Copyright 2009, 2011 Mads Kiilerich <mads@kiilerich.com>
#  Copyright 2015 Pierre-Yves David <pierre-yves.david@fb.com>
#  Copyright 2016, 2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of the
# GNU General Public License version 2 or any later version
#
# Some of these utilities were originally taken from Mercurial.
#
# SPDX-License-Identifier: GPL-2.0-or-later
from __future__ import annotations

from gettext import gettext as _
import contextlib
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import IO, Iterator, Optional, Sequence, Union

from .encoding import ucolwidth


closefds = os.name == 'posix'


def explainexit(code):
    """return a 2-tuple (desc, code) describing a subprocess status
    (codes from kill are negative - not os.system/wait encoding)"""
    if (code < 0) and (os.name == 'posix'):
        return _("killed by signal %d") % -code, -code
    else:
        return _("exited with status %d") % code, code


class Abort(Exception):
    pass


def systemcall(cmd: Sequence[str], encoding: Optional[str] = None,
               dir: Optional[os.PathLike | str] = None,
               onerr=None, errprefix=None):
    """Run a command and return its standard output.

    If the command fails and onerr is given, raise onerr with a message
    describing the failure.  If the command cannot be started at all, onerr
    is raised as well, so callers only have a single error to handle.
    """
    try:
        sys.stdout.flush()
    except Exception:
        pass

    try:
        p = subprocess.Popen(cmd, cwd=dir, stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL, close_fds=closefds)
    except OSError as inst:
        if onerr:
            errmsg = '%s: %s' % (os.path.basename(cmd[0]), inst.strerror)
            if errprefix:
                errmsg = '%s: %s' % (errprefix, errmsg)
            raise onerr(errmsg)
        raise
    out, _err = p.communicate()
    rc = p.returncode

    if rc and onerr:
        errmsg = '%s %s' % (os.path.basename(cmd[0]),
                            explainexit(rc)[0])
        if errprefix:
            errmsg = '%s: %s' % (errprefix, errmsg)
        raise onerr(errmsg)

    if encoding == "fs":
        return os.fsdecode(out)
    elif encoding:
        return out.decode(encoding)
    else:
        return out


@contextlib.contextmanager
def atomicwrite(path: Union[str, Path], mode: Optional[int] = None) -> Iterator[IO[bytes]]:
    """Open a temporary file next to path for writing in binary mode.

    When the block finishes without an exception, the temporary file
    replaces path in a single rename, so readers see either the old or
    the new content and never a partially written file.  If mode is given,
    the permission bits of the new file are set to it.  On error, the
    temporary file is removed and path is left untouched.
    """
    path = Path(path)
    fd, tmpname = tempfile.mkstemp(prefix='.%s.' % path.name,
                                   suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'wb') as fp:
            yield fp
            fp.flush()
            os.fsync(fp.fileno())
        if mode is not None:
            os.chmod(tmpname, mode)
        os.replace(tmpname, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmpname)
        raise


def ellipsis(text, maxlength=400):
    """Trim string to at most maxlength (default: 400) columns in display."""
    return trim(text, maxlength, ellipsis='...')


def trim(s, width, ellipsis='', leftside=False):
    """Trim string 's' to at most 'width' columns (including 'ellipsis').

    If 'leftside' is True, left side of string 's' is trimmed.
    'ellipsis' is always placed at trimmed side.

    >>> ellipsis = '+++'
    >>> t = '1234567890'
    >>> print(trim(t, 12, ellipsis=ellipsis))
    1234567890
    >>> print(trim(t, 8, ellipsis=ellipsis))
    12345+++
    >>> print(trim(t, 8, ellipsis=ellipsis, leftside=True))
    +++67890
    >>> print(trim(t, 8))
    12345678
    >>> print(trim(t, 3, ellipsis=ellipsis))
    +++
    >>> t = 'あいうえお' # 2 x 5 = 10 columns
    >>> print(trim(t, 10, ellipsis=ellipsis))
    あいうえお
    >>> print(trim(t, 8, ellipsis=ellipsis))
    あい+++
    >>> print(trim(t, 5))
    あい
    """
    if ucolwidth(s) <= width:  # trimming is not needed
        return s

    width -= len(ellipsis)
    if width <= 0:  # no enough room even for ellipsis
        return ellipsis[:width + len(ellipsis)]

    if leftside:
        uslice = lambda i: s[i:]
        concat = lambda s: ellipsis + s
    else:
        uslice = lambda i: s[:-i]
        concat = lambda s: s + ellipsis
    for i in range(1, len(s)):
        usub = uslice(i)
        if ucolwidth(usub) <= width:
            return concat(usub)
    return ellipsis  # no enough room for multi-column characters
