# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Process-wide tunables

These are plain module-level settings, read at the point of use.
Nothing in the library changes them itself.
"""

import sys

#: Default for `vectorized()`
DEFAULT_VECTORIZED = True

#: Default for `max_raster_bytes()`
DEFAULT_MAX_RASTER_BYTES = sys.maxsize

__SETTINGS = dict()


# Row processing strategy for the compositor and the row converters.

def set_vectorized(flag):
    """Select the numpy row path (True) or the per-pixel path (False)

    Both paths give identical results; the per-pixel path is the
    reference implementation, and is much slower.
    """
    assert isinstance(flag, bool)
    __SETTINGS['vectorized'] = flag


def vectorized():
    """Whether rows are processed with numpy

    >>> vectorized()
    True
    """
    return __SETTINGS.get('vectorized', DEFAULT_VECTORIZED)


# Allocation limit for raster storage.

def set_max_raster_bytes(value):
    """Set the largest backing store a Raster may allocate, in bytes"""
    assert isinstance(value, int)
    assert value > 0
    __SETTINGS['max_raster_bytes'] = value


def max_raster_bytes():
    """Get the largest permitted raster backing store, in bytes"""
    return __SETTINGS.get('max_raster_bytes', DEFAULT_MAX_RASTER_BYTES)


def reset():
    """Restore all the defaults (used by the test suite)"""
    __SETTINGS.clear()


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
