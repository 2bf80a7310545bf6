# Unicode string width calculator and byte content helpers
#
#  Copyright 2009, 2010 Matt Mackall <mpm@selenic.com>
#  Copyright 2010, 2011 FUJIWARA Katsunori <foozy@lares.dti.ne.jp>
#  Copyright 2011 Augie Fackler <durin42@gmail.com>
#  Copyright 2016, 2018—2022 Andrej Shadura <andrew@shadura.me>
#
# This software may be used and distributed according to the terms of
# the GNU General Public License version 2 or any later version.
#
# SPDX-License-Identifier: GPL-2.0-or-later

import unicodedata
from codecs import register_error


# How to treat ambiguous-width characters. Set to 'WFA' to treat as wide.
wide = "WF"

# how much of a file to look at when sniffing for binary content
SNIFFSIZE = 8000


def ucolwidth(d: str) -> int:
    """Find the column width of a Unicode string for display"""
    eaw = getattr(unicodedata, 'east_asian_width', None)
    if eaw is not None:
        return sum([eaw(c) in wide and 2 or 1 for c in d])
    return len(d)


def hexreplace(err: UnicodeError) -> tuple[str, int]:
    if not isinstance(err, UnicodeDecodeError):
        raise NotImplementedError("only decoding is supported")
    return "".join(
        "<%X>" % x for x in err.object[err.start:err.end]
    ), err.end


register_error("hexreplace", hexreplace)


def fromlocal(data: bytes) -> str:
    r"""Decode bytes for display, showing undecodable bytes as hex codes.

    >>> fromlocal(b'caf\xc3\xa9')
    'café'
    >>> fromlocal(b'caf\xe9')
    'caf<E9>'
    """
    return data.decode("UTF-8", errors="hexreplace")


def isbinary(data: bytes) -> bool:
    r"""Return True if the content cannot be edited line by line.

    Content is considered binary when it has a NUL byte near its start,
    or when it is not valid UTF-8.

    >>> isbinary(b'plain text\n')
    False
    >>> isbinary(b'\x00\x01\x02')
    True
    >>> isbinary(b'\xff\xfe broken')
    True
    """
    if b'\0' in data[:SNIFFSIZE]:
        return True
    try:
        data.decode("UTF-8")
    except UnicodeDecodeError:
        return True
    return False


def splitlines(data: bytes) -> list[bytes]:
    r"""Split content into lines, keeping line terminators.

    Only '\n' terminates a line, so '\r\n' endings survive intact and
    a missing newline at the end of the file is preserved.

    >>> splitlines(b'a\r\nb\nc')
    [b'a\r\n', b'b\n', b'c']
    >>> splitlines(b'')
    []
    """
    lines = data.split(b'\n')
    last = lines.pop()
    result = [line + b'\n' for line in lines]
    if last:
        result.append(last)
    return result
