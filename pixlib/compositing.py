# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Porter-Duff compositing of rasters and colors onto rasters.

Every operator is a pair of blend factors, one for the source and one
for the destination, and each output channel (alpha included) is

    result = min(1, source * source_factor + dest * dest_factor)

computed in the destination's channel precision. Integer precisions
round each product to the nearest value. Float precision rounds each
product to float32 before summing.

Two implementations exist. The default one works on whole numpy rows;
the other goes pixel by pixel using `pixlib.channel.Channel` arithmetic,
and is selected by ``pixlib.settings.set_vectorized(False)``. Both give
bit-identical results.

  >>> SRC_OVER.blend_pixel(Ch8, 3, (0, 0, 128, 128), (255, 0, 0, 255))
  (127, 0, 128, 255)

"""

## Imports

import logging

import numpy as np

from pixlib.channel import Ch8
from pixlib.channel import _mul_fixed
from pixlib.errors import FormatMismatch
from pixlib.format import Pixel
from pixlib.format import as_pixel
from pixlib.format import convert_array
from pixlib.helpers import Region
from pixlib.helpers import as_region
from pixlib.helpers import transfer_area
import pixlib.settings

logger = logging.getLogger(__name__)


## Blend factors

ZERO = "zero"
ONE = "one"
SRC_ALPHA = "src-alpha"
INV_SRC_ALPHA = "inv-src-alpha"
DST_ALPHA = "dst-alpha"
INV_DST_ALPHA = "inv-dst-alpha"

FACTORS = (ZERO, ONE, SRC_ALPHA, INV_SRC_ALPHA, DST_ALPHA, INV_DST_ALPHA)


def _factor_channel(factor, sa, da):
    """One blend factor as a Channel, for the per-pixel path"""
    cls = type(sa)
    if factor == ZERO:
        return cls.MIN
    elif factor == ONE:
        return cls.MAX
    elif factor == SRC_ALPHA:
        return sa
    elif factor == INV_SRC_ALPHA:
        return sa.invert()
    elif factor == DST_ALPHA:
        return da
    elif factor == INV_DST_ALPHA:
        return da.invert()
    raise ValueError("unknown blend factor %r" % (factor,))


def _factor_array(factor, chan, sa, da):
    """One blend factor as a raw column, for the numpy path

    Integer precisions get int64 columns, and Ch32 gets float64 columns
    holding float32-representable values.

    """
    if factor == ZERO:
        return np.zeros_like(sa)
    elif factor == ONE:
        return np.full_like(sa, chan.MAX_VALUE)
    elif factor == SRC_ALPHA:
        return sa
    elif factor == INV_SRC_ALPHA:
        return _invert_array(chan, sa)
    elif factor == DST_ALPHA:
        return da
    elif factor == INV_DST_ALPHA:
        return _invert_array(chan, da)
    raise ValueError("unknown blend factor %r" % (factor,))


def _invert_array(chan, a):
    if chan.is_fixed:
        return chan.MAX_VALUE - a
    return (1.0 - a).astype(chan.dtype).astype(np.float64)


def _scale_array(chan, a, b):
    """Channel.scale(), over arrays in working form"""
    if chan.is_fixed:
        return _mul_fixed(a, b, chan.MAX_VALUE)
    return np.clip(a * b, 0.0, 1.0).astype(chan.dtype).astype(np.float64)


def _add_array(chan, a, b):
    """Channel.add(), over arrays in working form"""
    if chan.is_fixed:
        return np.minimum(a + b, chan.MAX_VALUE)
    return np.clip(a + b, 0.0, 1.0).astype(chan.dtype).astype(np.float64)


def _working(chan, raw):
    if chan.is_fixed:
        return np.asarray(raw, dtype=np.int64)
    return np.asarray(raw, dtype=np.float64)


## Operators


class Operator (object):
    """A Porter-Duff operator: a named pair of blend factors"""

    def __init__(self, name, src_factor, dst_factor):
        assert src_factor in FACTORS
        assert dst_factor in FACTORS
        self.name = name
        self.src_factor = src_factor
        self.dst_factor = dst_factor

    def blend_pixel(self, chan, alpha_index, src, dst):
        """Blend one pixel using Channel arithmetic

        :param type chan: precision of both pixels
        :param int alpha_index: alpha position, or None for opaque
        :param src: raw source values
        :param dst: raw destination values
        :returns: raw result values
        :rtype: tuple

        """
        if alpha_index is None:
            sa = da = chan.MAX
        else:
            sa = chan(src[alpha_index])
            da = chan(dst[alpha_index])
        fs = _factor_channel(self.src_factor, sa, da)
        fd = _factor_channel(self.dst_factor, sa, da)
        return tuple(
            chan(s).scale(fs).add(chan(d).scale(fd)).value
            for s, d in zip(src, dst)
        )

    def blend_array(self, chan, alpha_index, src, dst):
        """Blend arrays of pixels with numpy

        :param type chan: precision of both arrays
        :param int alpha_index: alpha position, or None for opaque
        :param numpy.ndarray src: raw source pixels, shape (..., n)
        :param numpy.ndarray dst: raw destination pixels, same shape
        :returns: raw result pixels, in a new array of `chan.dtype`

        >>> src = np.array([[0, 0, 128, 128]], "u1")
        >>> dst = np.array([[255, 0, 0, 255]], "u1")
        >>> SRC_OVER.blend_array(Ch8, 3, src, dst).tolist()
        [[127, 0, 128, 255]]

        """
        s = _working(chan, src)
        d = _working(chan, dst)
        if alpha_index is None:
            sa = da = np.full(s.shape[:-1] + (1,), chan.MAX_VALUE, s.dtype)
        else:
            sa = s[..., alpha_index:alpha_index + 1]
            da = d[..., alpha_index:alpha_index + 1]
        fs = _factor_array(self.src_factor, chan, sa, da)
        fd = _factor_array(self.dst_factor, chan, sa, da)
        out = _add_array(
            chan,
            _scale_array(chan, s, fs),
            _scale_array(chan, d, fd),
        )
        return out.astype(chan.dtype)

    def __repr__(self):
        return "<Operator %s>" % (self.name,)


CLEAR = Operator("clear", ZERO, ZERO)
SRC = Operator("src", ONE, ZERO)
DST = Operator("dst", ZERO, ONE)
SRC_OVER = Operator("src-over", ONE, INV_SRC_ALPHA)
DST_OVER = Operator("dst-over", INV_DST_ALPHA, ONE)
SRC_IN = Operator("src-in", DST_ALPHA, ZERO)
DST_IN = Operator("dst-in", ZERO, SRC_ALPHA)
SRC_OUT = Operator("src-out", INV_DST_ALPHA, ZERO)
DST_OUT = Operator("dst-out", ZERO, INV_SRC_ALPHA)
SRC_ATOP = Operator("src-atop", DST_ALPHA, INV_SRC_ALPHA)
DST_ATOP = Operator("dst-atop", INV_DST_ALPHA, SRC_ALPHA)
XOR = Operator("xor", INV_DST_ALPHA, INV_SRC_ALPHA)
PLUS = Operator("plus", ONE, ONE)

#: All operators, by name
OPERATORS = {
    op.name: op for op in (
        CLEAR, SRC, DST,
        SRC_OVER, DST_OVER,
        SRC_IN, DST_IN,
        SRC_OUT, DST_OUT,
        SRC_ATOP, DST_ATOP,
        XOR, PLUS,
    )
}


def operator_for_name(name):
    """Look up an operator

    >>> operator_for_name("dst-atop")
    <Operator dst-atop>

    """
    try:
        return OPERATORS[name]
    except KeyError:
        raise ValueError("unknown compositing operator %r" % (name,))


## Validation


def _check_compositable(fmt, role):
    if not fmt.is_compositable():
        raise FormatMismatch(
            "cannot composite with a %s %s: compositing needs linear "
            "gamma and premultiplied alpha" % (fmt.name, role)
        )


def _check_operator(op):
    if not isinstance(op, Operator):
        raise TypeError("not a compositing operator: %r" % (op,))


## Row drivers


def _source_format(fmt):
    """Format the source is converted to before blending

    This is the destination format with an alpha channel, so that a
    translucent source keeps its coverage even when the destination
    stores none.

    """
    return fmt.with_alpha(True)


def _blend_rows(op, fmt, src_rows, dst_rows):
    """Blend matching rows of source pixels into destination rows

    Source rows are in `_source_format(fmt)`. Destinations without an
    alpha channel are blended as opaque, and keep only their color. The
    destination rows are modified in place.

    """
    chan = fmt.channel
    n = fmt.n_channels
    opaque = not fmt.has_alpha
    ai = fmt.n_colors
    if pixlib.settings.vectorized():
        for src_row, dst_row in zip(src_rows, dst_rows):
            if opaque:
                dst = np.empty((dst_row.shape[0], n + 1), dtype=chan.dtype)
                dst[:, :n] = dst_row
                dst[:, n] = chan.MAX_VALUE
            else:
                dst = dst_row
            dst_row[...] = op.blend_array(chan, ai, src_row, dst)[:, :n]
        return
    for src_row, dst_row in zip(src_rows, dst_rows):
        for x in range(dst_row.shape[0]):
            dst = [v.item() for v in dst_row[x]]
            if opaque:
                dst.append(chan.MAX_VALUE)
            result = op.blend_pixel(
                chan, ai, [v.item() for v in src_row[x]], dst,
            )
            dst_row[x] = result[:n]


def _dest_rows(dest, dest_offset, area):
    dx, dy = dest_offset
    return dest.rows_mut(area.translated(dx, dy))


## Public interface


def composite(dest, dest_offset, source, source_region=None, op=SRC_OVER):
    """Composite a raster or a color onto a destination raster

    :param pixlib.raster.Raster dest: the raster to modify
    :param tuple dest_offset: (dx, dy). Source pixel (sx, sy) lands on
      destination pixel (sx + dx, sy + dy).
    :param source: a Raster, or a Pixel (or raw values in the
      destination format) to use as a solid color
    :param Region source_region: optional area of the source to use.
      A color covers this region; without one, it covers the whole
      destination from the offset onwards.
    :param Operator op: the Porter-Duff operator
    :raises: pixlib.errors.FormatMismatch: if either format is not
      linear and premultiplied

    The source is converted to the destination's format first, keeping
    its alpha even if the destination stores none. Pixels
    outside either raster are ignored. Formats are checked before
    anything is modified.

    """
    _check_operator(op)
    fmt = dest.format
    _check_compositable(fmt, "destination")
    src_fmt = _source_format(fmt)
    dx, dy = dest_offset
    if isinstance(source, (tuple, list)):
        source = as_pixel(source, fmt)
    if isinstance(source, Pixel):
        _check_compositable(source.format, "source color")
        pixel = source.convert(src_fmt)
        if source_region is None:
            bounds = Region(
                0, 0,
                max(dest.width - dx, 0),
                max(dest.height - dy, 0),
            )
        else:
            bounds = as_region(source_region)
        area = transfer_area(dest.region(), dest_offset, bounds)
        if area.is_empty():
            return
        logger.debug("%s: %r onto %r over %r", op.name, pixel, dest, area)
        row = np.broadcast_to(
            pixel.to_array(), (area.width, src_fmt.n_channels),
        )
        src_rows = (row for i in range(area.height))
    else:
        _check_compositable(source.format, "source")
        area = transfer_area(
            dest.region(), dest_offset, source.region(), source_region,
        )
        if area.is_empty():
            return
        logger.debug("%s: %r onto %r over %r", op.name, source, dest, area)
        src_rows = source.rows(area)
        if source.format != src_fmt:
            src_rows = (
                convert_array(source.format, src_fmt, r) for r in src_rows
            )
        elif source is dest:
            src_rows = [np.array(r) for r in src_rows]
    _blend_rows(op, fmt, src_rows, _dest_rows(dest, dest_offset, area))


def composite_matte(dest, dest_offset, mask, mask_region, color,
                    op=SRC_OVER):
    """Composite a solid color through a coverage mask

    :param pixlib.raster.Raster dest: the raster to modify
    :param tuple dest_offset: where the mask's origin lands
    :param pixlib.raster.Raster mask: coverage, in a linear mask format
    :param Region mask_region: optional area of the mask to use
    :param color: a Pixel, or raw values in the destination format
    :param Operator op: the Porter-Duff operator

    The effective source pixel is the premultiplied color scaled by the
    mask's coverage at that position, alpha included.

    """
    _check_operator(op)
    fmt = dest.format
    chan = fmt.channel
    _check_compositable(fmt, "destination")
    if mask.format.n_colors != 0:
        raise FormatMismatch(
            "%s is not a mask format" % (mask.format.name,)
        )
    _check_compositable(mask.format, "mask")
    src_fmt = _source_format(fmt)
    if isinstance(color, Pixel):
        _check_compositable(color.format, "source color")
        pixel = color.convert(src_fmt)
    else:
        pixel = as_pixel(color, fmt).convert(src_fmt)
    area = transfer_area(
        dest.region(), dest_offset, mask.region(), mask_region,
    )
    if area.is_empty():
        return
    logger.debug("%s: %r through %r onto %r", op.name, pixel, mask, dest)
    mask_chan = mask.format.channel
    color_w = _working(chan, pixel.to_array())
    src_rows = []
    for mrow in mask.rows(area):
        coverage = mask_chan.rescale_array(mrow[:, 0], chan)
        cov_w = _working(chan, coverage)[:, np.newaxis]
        if pixlib.settings.vectorized():
            row = _scale_array(chan, color_w, cov_w).astype(chan.dtype)
        else:
            row = np.array([
                [chan(c).scale(chan(cov.item())).value
                 for c in pixel.values]
                for cov in coverage
            ], dtype=chan.dtype).reshape(-1, src_fmt.n_channels)
        src_rows.append(row)
    _blend_rows(op, fmt, src_rows, _dest_rows(dest, dest_offset, area))


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
