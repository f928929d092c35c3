# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Rasters: rectangular grids of pixels in a single format"""

## Imports

import logging

import numpy as np

from pixlib.errors import SizeOverflow
from pixlib.errors import OutOfBounds
from pixlib.errors import FormatMismatch
from pixlib.format import PixelFormat
from pixlib.format import Pixel
from pixlib.format import as_pixel
from pixlib.format import convert_array
from pixlib.helpers import Region
from pixlib.helpers import as_region
from pixlib.helpers import transfer_area
import pixlib.settings
import pixlib.compositing

logger = logging.getLogger(__name__)


## Class defs


class Raster (object):
    """A width × height grid of pixels, stored row-major.

    The backing store is a numpy array of shape (height, width,
    n_channels) in the format's channel dtype. New rasters are zeroed,
    which is transparent for formats with alpha and black otherwise.

    >>> from pixlib.format import RGBA8P
    >>> r = Raster(RGBA8P, 3, 2)
    >>> r
    <Raster rgba8p 3x2>
    >>> r.pixel_at(2, 1)
    <Pixel rgba8p (0, 0, 0, 0)>
    >>> r.set_pixel_at(2, 1, (10, 20, 30, 40))
    >>> r.to_bytes()[-4:]
    b'\\n\\x14\\x1e('
    >>> r.pixel_at(3, 0)
    Traceback (most recent call last):
    ...
    pixlib.errors.OutOfBounds: pixel (3, 0) is outside a 3x2 raster

    """

    def __init__(self, fmt, width, height):
        """Allocate a zero-filled raster

        :raises: pixlib.errors.SizeOverflow
        :raises: ValueError: for negative dimensions

        """
        if not isinstance(fmt, PixelFormat):
            raise TypeError("not a pixel format: %r" % (fmt,))
        width = int(width)
        height = int(height)
        if width < 0 or height < 0:
            raise ValueError("negative raster size: %dx%d" % (width, height))
        nbytes = width * height * fmt.bytes_per_pixel
        limit = pixlib.settings.max_raster_bytes()
        if nbytes > limit:
            logger.error(
                "Refusing a %dx%d %s raster: %d bytes exceeds the "
                "limit of %d",
                width, height, fmt.name, nbytes, limit,
            )
            raise SizeOverflow(width, height, nbytes)
        try:
            data = np.zeros((height, width, fmt.n_channels), dtype=fmt.dtype)
        except (MemoryError, ValueError):
            logger.exception(
                "numpy.zeros() failed for a %dx%d %s raster",
                width, height, fmt.name,
            )
            raise SizeOverflow(width, height, nbytes)
        self._format = fmt
        self._data = data

    ## Construction

    @classmethod
    def new(cls, fmt, width, height):
        """New zero-filled raster"""
        return cls(fmt, width, height)

    @classmethod
    def new_filled(cls, fmt, width, height, color):
        """New raster filled with one color

        The color is converted to the raster's format once.

        """
        pixel = as_pixel(color, fmt)
        raster = cls(fmt, width, height)
        raster._data[...] = pixel.to_array()
        return raster

    @classmethod
    def new_from_raster(cls, fmt, other):
        """New raster holding another's pixels, converted to `fmt`"""
        logger.debug(
            "Converting %dx%d raster from %s to %s",
            other.width, other.height, other.format.name, fmt.name,
        )
        raster = cls(fmt, other.width, other.height)
        raster.copy_raster((0, 0), other)
        return raster

    @classmethod
    def new_from_buffer(cls, fmt, width, height, buffer):
        """New raster from raw bytes in the format's storage layout

        :param buffer: any bytes-like object, row-major, unpadded,
          channels interleaved, little-endian
        :raises: pixlib.errors.FormatMismatch: for a wrong-sized buffer

        Float channels are clamped to [0, 1] on the way in, and NaNs
        are replaced with zero.

        """
        if not isinstance(fmt, PixelFormat):
            raise TypeError("not a pixel format: %r" % (fmt,))
        view = memoryview(buffer).cast("B")
        expected = int(width) * int(height) * fmt.bytes_per_pixel
        if view.nbytes != expected:
            raise FormatMismatch(
                "a %dx%d %s raster needs %d bytes, got %d"
                % (width, height, fmt.name, expected, view.nbytes)
            )
        raster = cls(fmt, width, height)
        arr = np.frombuffer(view, dtype=fmt.dtype)
        arr = arr.reshape(raster._data.shape)
        if not fmt.channel.is_fixed:
            arr = fmt.channel.encode_array(arr)
        raster._data[...] = arr
        return raster

    ## Export

    def to_bytes(self):
        """Raw pixel data in the format's storage layout"""
        return self._data.tobytes()

    def as_u8_array(self):
        """Read-only byte view of the storage: shape (height, row bytes)"""
        view = self._data.view(np.uint8).reshape(
            self.height, self.width * self._format.bytes_per_pixel,
        )
        view.flags.writeable = False
        return view

    ## Inspection

    @property
    def format(self):
        return self._format

    @property
    def width(self):
        return self._data.shape[1]

    @property
    def height(self):
        return self._data.shape[0]

    def region(self):
        """The raster's full extent, with its origin at (0, 0)"""
        return Region(0, 0, self.width, self.height)

    ## Row access

    def _clipped(self, region):
        if region is None:
            return self.region()
        return self.region().intersection(as_region(region))

    def rows(self, region=None):
        """Iterate over read-only rows of a region

        :param Region region: area to visit; clipped to the raster
        :returns: a fresh generator of numpy arrays, each of shape
          (region width, n_channels)

        Regions lying outside the raster produce no rows.

        """
        return self._iter_rows(self._clipped(region), False)

    def rows_mut(self, region=None):
        """Iterate over writable rows of a region

        Like `rows()`, but the arrays are views into the storage.

        """
        return self._iter_rows(self._clipped(region), True)

    def _iter_rows(self, area, writable):
        if area.is_empty():
            return
        for y in range(area.top, area.bottom):
            row = self._data[y, area.left:area.right]
            if not writable:
                row = row.view()
                row.flags.writeable = False
            yield row

    ## Single pixels

    def _check_bounds(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds(x, y, self.width, self.height)

    def pixel_at(self, x, y):
        """The pixel at (x, y)

        :raises: pixlib.errors.OutOfBounds

        """
        self._check_bounds(x, y)
        return Pixel.new_from_array(self._format, self._data[y, x])

    def set_pixel_at(self, x, y, color):
        """Set the pixel at (x, y), converting the color if needed

        :raises: pixlib.errors.OutOfBounds

        """
        self._check_bounds(x, y)
        self._data[y, x] = as_pixel(color, self._format).to_array()

    ## Bulk operations

    def copy_color(self, region, color):
        """Fill a region with a color, clipped to the raster"""
        area = self._clipped(region)
        if area.is_empty():
            return
        pixel = as_pixel(color, self._format)
        self._data[area.top:area.bottom, area.left:area.right] = (
            pixel.to_array()
        )

    def copy_raster(self, dest_offset, source, source_region=None):
        """Copy pixels from another raster, converting their format

        :param tuple dest_offset: (dx, dy). Source pixel (sx, sy) is
          written to (sx + dx, sy + dy).
        :param Raster source: raster to read; may be this raster
        :param Region source_region: optional area of the source

        Only the part which lies inside both rasters is copied.

        """
        dx, dy = dest_offset
        area = transfer_area(
            self.region(), dest_offset, source.region(), source_region,
        )
        if area.is_empty():
            return
        src = source._data[area.top:area.bottom, area.left:area.right]
        dst = self._data[
            area.top + dy:area.bottom + dy,
            area.left + dx:area.right + dx,
        ]
        if source.format == self._format:
            dst[...] = src
            return
        for dst_row, src_row in zip(dst, src):
            dst_row[...] = convert_array(source.format, self._format, src_row)

    def clear(self):
        """Reset every pixel to zero"""
        self._data[...] = 0

    def convert(self, fmt):
        """A new raster with this one's pixels in another format"""
        return Raster.new_from_raster(fmt, self)

    ## Compositing shortcuts

    def composite_color(self, color, region=None, op=None):
        """Composite a single color over a region of this raster"""
        pixlib.compositing.composite(
            self, (0, 0), color, region,
            op or pixlib.compositing.SRC_OVER,
        )

    def composite_raster(self, dest_offset, source, source_region=None,
                         op=None):
        """Composite another raster onto this one"""
        pixlib.compositing.composite(
            self, dest_offset, source, source_region,
            op or pixlib.compositing.SRC_OVER,
        )

    def composite_matte(self, dest_offset, mask, mask_region, color,
                        op=None):
        """Composite a color through a coverage mask onto this raster"""
        pixlib.compositing.composite_matte(
            self, dest_offset, mask, mask_region, color,
            op or pixlib.compositing.SRC_OVER,
        )

    ## Comparison

    def __eq__(self, other):
        if not isinstance(other, Raster):
            return NotImplemented
        return (self._format == other._format and
                self._data.shape == other._data.shape and
                np.array_equal(self._data, other._data))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "<Raster %s %dx%d>" % (
            self._format.name, self.width, self.height,
        )


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
