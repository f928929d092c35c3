# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Palette: fixed-capacity color tables for indexed images"""


## Imports

import logging

import numpy as np

from pixlib.format import PixelFormat
from pixlib.format import as_pixel
from pixlib.raster import Raster

logger = logging.getLogger(__name__)


## Class and function defs


class Palette (object):
    """An ordered table of up to `capacity` colors in one format

    Entries are `pixlib.format.Pixel` objects. Colors passed in are
    converted to the palette's format first, and the table never holds
    the same color twice unless `replace_entry()` puts it there.

      >>> from pixlib.format import RGB8
      >>> p = Palette(RGB8, 2)
      >>> p
      <Palette rgb8 entries=0, capacity=2>
      >>> p.set_entry((1, 2, 3)), p.set_entry((4, 5, 6))
      (0, 1)
      >>> p.set_entry((1, 2, 3))
      0
      >>> p.set_entry((7, 8, 9)) is None
      True
      >>> p.to_bytes()
      b'\\x01\\x02\\x03\\x04\\x05\\x06'

    """

    ## Construction

    def __init__(self, fmt, capacity):
        """Instantiate, empty

        :param pixlib.format.PixelFormat fmt: format of the entries
        :param int capacity: maximum number of entries

        """
        if not isinstance(fmt, PixelFormat):
            raise TypeError("not a pixel format: %r" % (fmt,))
        capacity = int(capacity)
        if capacity < 0:
            raise ValueError("negative palette capacity: %d" % (capacity,))
        self._format = fmt
        self._capacity = capacity
        self._table = []

    @property
    def format(self):
        return self._format

    @property
    def capacity(self):
        return self._capacity

    def __len__(self):
        """Number of entries in use"""
        return len(self._table)

    def __iter__(self):
        return iter(self._table)

    ## Entries

    def entry(self, i):
        """The color at index `i`, or None past the end"""
        if 0 <= i < len(self._table):
            return self._table[i]
        return None

    def set_entry(self, color):
        """Find a color, adding it if it is new

        :returns: the color's index, or None if the palette is full
        :rtype: int

        """
        pixel = as_pixel(color, self._format)
        for i, existing in enumerate(self._table):
            if existing == pixel:
                return i
        i = len(self._table)
        if i >= self._capacity:
            logger.debug("Palette full (%d entries): %r", i, pixel)
            return None
        self._table.append(pixel)
        return i

    def replace_entry(self, i, color):
        """Replace the color at index `i`

        :returns: the old color, or None if `i` is past the end

        """
        if not (0 <= i < len(self._table)):
            return None
        old = self._table[i]
        self._table[i] = as_pixel(color, self._format)
        return old

    ## Indexed data

    def histogram(self, indices):
        """Count how often each entry is used by some index data

        :param indices: iterable of ints
        :returns: one count per entry, or None if any index is past the
          end of the table
        :rtype: list

          >>> from pixlib.format import GRAY8
          >>> p = Palette(GRAY8, 4)
          >>> [p.set_entry((v,)) for v in (0, 85, 170)]
          [0, 1, 2]
          >>> p.histogram([0, 2, 2, 1, 2])
          [1, 1, 3]
          >>> p.histogram([0, 3]) is None
          True

        """
        hist = [0] * len(self._table)
        for i in indices:
            i = int(i)
            if not (0 <= i < len(hist)):
                return None
            hist[i] += 1
        return hist

    def to_bytes(self):
        """The entries, packed in the format's storage layout"""
        return self._as_array().tobytes()

    def _as_array(self):
        fmt = self._format
        if not self._table:
            return np.zeros((0, fmt.n_channels), dtype=fmt.dtype)
        return np.array([p.values for p in self._table], dtype=fmt.dtype)

    def colorize(self, indices, width, height):
        """Expand row-major index data into a raster of this format

        :param indices: width × height ints, row by row
        :rtype: pixlib.raster.Raster
        :raises: ValueError: for wrong-sized data, or an index past the
          end of the table

        """
        idx = np.asarray(indices, dtype=np.int64).reshape(-1)
        if idx.shape[0] != width * height:
            raise ValueError(
                "%dx%d indices needed, got %d" % (width, height, idx.shape[0])
            )
        if idx.size and (idx.min() < 0 or idx.max() >= len(self._table)):
            raise ValueError(
                "index data refers past the %d palette entries"
                % (len(self._table),)
            )
        raster = Raster(self._format, width, height)
        table = self._as_array()
        grid = idx.reshape(height, width)
        for y, row in enumerate(raster.rows_mut()):
            row[...] = table[grid[y]]
        return raster

    ## Display

    def __repr__(self):
        return "<Palette %s entries=%d, capacity=%d>" % (
            self._format.name, len(self._table), self._capacity,
        )


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
