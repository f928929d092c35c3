# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Pixel formats, pixels, and conversion between formats.

A `PixelFormat` is the combination of four independent tags: a color
model (`pixlib.color`), a channel precision (`pixlib.channel`), an
alpha policy (`pixlib.alpha`) and a gamma policy (`pixlib.gamma`), plus
whether an alpha channel is stored at all. Formats are immutable and
compare by value:

  >>> PixelFormat(RGB, Ch8, PREMULTIPLIED) == RGBA8P
  True
  >>> SRGBA8
  <PixelFormat srgba8>
  >>> SRGBA8.model, SRGBA8.channel, SRGBA8.alpha, SRGBA8.gamma
  (<ColorModel rgb>, <class 'pixlib.channel.Ch8'>, <AlphaPolicy straight>, <GammaPolicy srgb>)

A `Pixel` is one value in a given format. Converting a pixel, or a whole
array of them, between any two formats goes through `convert_array()`:

  >>> SHWB8.pixel(0, 0, 0).convert(SRGB8)
  <Pixel srgb8 (255, 0, 0)>
  >>> RGBA8.pixel(255, 128, 0, 128).convert(RGBA8P)
  <Pixel rgba8p (128, 64, 0, 128)>

"""

## Imports

import numpy as np

from pixlib.channel import Channel
from pixlib.channel import Ch8, Ch16, Ch32
from pixlib.channel import PRECISIONS
from pixlib.channel import precision_for_name
from pixlib.alpha import AlphaPolicy
from pixlib.alpha import STRAIGHT, PREMULTIPLIED
import pixlib.alpha
from pixlib.gamma import GammaPolicy
from pixlib.gamma import LINEAR, SRGB
import pixlib.gamma
from pixlib.color import ColorModel
from pixlib.color import RGB, BGR, CMY, GRAY, HSV, HSL, HWB, YCBCR, MASK
from pixlib.color import XYZ, OKLAB
from pixlib.color import model_for_name


## Class defs


class PixelFormat (object):
    """Composite pixel format descriptor.

    :param pixlib.color.ColorModel model: meaning of the color channels
    :param type channel: Ch8, Ch16 or Ch32
    :param pixlib.alpha.AlphaPolicy alpha: STRAIGHT or PREMULTIPLIED
    :param pixlib.gamma.GammaPolicy gamma: LINEAR or SRGB
    :param bool has_alpha: whether an alpha channel is stored

    The alpha channel, when present, always comes after the color
    channels. Mask formats consist of the alpha channel alone, so they
    cannot be created with ``has_alpha=False``.

    Storage layout is row-major, unpadded, with channels interleaved in
    declared order, each `channel.bits` wide and little-endian.

      >>> RGBA16.bytes_per_pixel, GRAY8.n_channels, MASK32.n_channels
      (8, 1, 1)

    """

    __slots__ = ("_model", "_channel", "_alpha", "_gamma", "_has_alpha")

    def __init__(self, model, channel, alpha=STRAIGHT, gamma=LINEAR,
                 has_alpha=True):
        if not isinstance(model, ColorModel):
            raise TypeError("not a color model: %r" % (model,))
        if channel not in PRECISIONS:
            raise TypeError("not a channel precision: %r" % (channel,))
        if not isinstance(alpha, AlphaPolicy):
            raise TypeError("not an alpha policy: %r" % (alpha,))
        if not isinstance(gamma, GammaPolicy):
            raise TypeError("not a gamma policy: %r" % (gamma,))
        if model.n_components == 0 and not has_alpha:
            raise ValueError("%s formats need their alpha channel"
                             % (model.name,))
        self._model = model
        self._channel = channel
        self._alpha = alpha
        self._gamma = gamma
        self._has_alpha = bool(has_alpha)

    ## Inspectable identity

    @property
    def model(self):
        return self._model

    @property
    def channel(self):
        return self._channel

    @property
    def alpha(self):
        return self._alpha

    @property
    def gamma(self):
        return self._gamma

    @property
    def has_alpha(self):
        return self._has_alpha

    @property
    def n_colors(self):
        """Number of color channels"""
        return self._model.n_components

    @property
    def n_channels(self):
        """Number of stored channels, alpha included"""
        return self._model.n_components + (1 if self._has_alpha else 0)

    @property
    def alpha_index(self):
        """Index of the alpha channel, or None"""
        if self._has_alpha:
            return self._model.n_components
        return None

    @property
    def dtype(self):
        """numpy storage type of one channel"""
        return self._channel.dtype

    @property
    def bytes_per_pixel(self):
        return self.n_channels * self._channel.dtype.itemsize

    @property
    def name(self):
        """Short name, like "srgba8p" or "mask16"

        >>> PixelFormat(HWB, Ch32, PREMULTIPLIED, SRGB).name
        'shwba32p'

        """
        if self._model is MASK:
            return "mask%d" % (self._channel.bits,)
        return "%s%s%s%d%s" % (
            "s" if self._gamma is SRGB else "",
            self._model.name,
            "a" if self._has_alpha else "",
            self._channel.bits,
            "p" if self._alpha is PREMULTIPLIED else "",
        )

    def is_compositable(self):
        """True if this format can take part in compositing.

        Compositing needs linear gamma and premultiplied alpha. Formats
        without color channels have nothing to premultiply, so only
        their gamma matters.

          >>> RGBA8P.is_compositable(), SRGBA8P.is_compositable()
          (True, False)
          >>> RGBA8.is_compositable(), MASK8.is_compositable()
          (False, True)

        """
        if not self._gamma.is_linear:
            return False
        return self._alpha is PREMULTIPLIED or self.n_colors == 0

    def with_policies(self, alpha=None, gamma=None):
        """Copy of this format with a different alpha or gamma policy"""
        return PixelFormat(
            self._model, self._channel,
            self._alpha if alpha is None else alpha,
            self._gamma if gamma is None else gamma,
            self._has_alpha,
        )

    def with_alpha(self, has_alpha=True):
        """Copy of this format with or without a stored alpha channel

          >>> RGB8.with_alpha()
          <PixelFormat rgba8>

        """
        if bool(has_alpha) == self._has_alpha:
            return self
        return PixelFormat(
            self._model, self._channel, self._alpha, self._gamma,
            has_alpha,
        )

    ## Pixels in this format

    def pixel(self, *values):
        """Make a pixel from raw channel values"""
        return Pixel(self, values)

    def pixel_from_unit(self, *units):
        """Make a pixel from channel intensities between 0 and 1"""
        return Pixel.new_from_unit(self, *units)

    def transparent(self):
        """The all-zero pixel: transparent, or black without alpha"""
        return Pixel(self, (0,) * self.n_channels)

    ## Comparison

    def _key(self):
        return (self._model.name, self._channel.__name__,
                self._alpha.name, self._gamma.name, self._has_alpha)

    def __eq__(self, other):
        if not isinstance(other, PixelFormat):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return "<PixelFormat %s>" % (self.name,)

    def __reduce__(self):
        return (_format_from_key, self._key())


def _format_from_key(model, channel, alpha, gamma, has_alpha):
    return PixelFormat(
        model_for_name(model),
        precision_for_name(channel),
        pixlib.alpha.policy_for_name(alpha),
        pixlib.gamma.policy_for_name(gamma),
        has_alpha,
    )


class Pixel (object):
    """An immutable tuple of raw channel values in one format.

      >>> p = RGBA16.pixel(65535, 0, 0, 32768)
      >>> p.values
      (65535, 0, 0, 32768)
      >>> p.alpha()
      Ch16(32768)
      >>> p.channels()[0]
      Ch16(65535)

    Raw values are validated by the format's channel class:

      >>> RGB8.pixel(256, 0, 0)
      Traceback (most recent call last):
      ...
      ValueError: Ch8 value out of range: 256

    """

    __slots__ = ("_format", "_values")

    def __init__(self, fmt, values):
        if not isinstance(fmt, PixelFormat):
            raise TypeError("not a pixel format: %r" % (fmt,))
        values = tuple(values)
        if len(values) != fmt.n_channels:
            raise ValueError(
                "%s pixels have %d channels, got %d values"
                % (fmt.name, fmt.n_channels, len(values))
            )
        chan = fmt.channel
        self._format = fmt
        self._values = tuple(chan(v).value for v in values)

    @classmethod
    def new_from_unit(cls, fmt, *units):
        """Construct from unit intensities, rounding to the precision

        >>> Pixel.new_from_unit(RGB8, 1.0, 0.5, 0.0)
        <Pixel rgb8 (255, 128, 0)>

        """
        return cls(fmt, [fmt.channel.encode(u) for u in units])

    @classmethod
    def new_from_array(cls, fmt, arr):
        """Construct from a 1-D numpy array of raw values"""
        return cls(fmt, [v.item() for v in np.asarray(arr).reshape(-1)])

    ## Accessors

    @property
    def format(self):
        return self._format

    @property
    def values(self):
        """Raw channel values, in storage order"""
        return self._values

    def channels(self):
        """Channel objects, in storage order"""
        chan = self._format.channel
        return tuple(chan(v) for v in self._values)

    def color(self):
        """Raw color channel values (alpha excluded)"""
        return self._values[:self._format.n_colors]

    def alpha(self):
        """The alpha channel; opaque if the format stores none"""
        idx = self._format.alpha_index
        chan = self._format.channel
        if idx is None:
            return chan.MAX
        return chan(self._values[idx])

    def to_array(self):
        """Raw values as a 1-D numpy array of the format's dtype"""
        return np.array(self._values, dtype=self._format.dtype)

    ## Conversion

    def convert(self, fmt):
        """Convert to another pixel format

        >>> GRAY8.pixel(200).convert(RGB8)
        <Pixel rgb8 (200, 200, 200)>
        >>> MASK8.pixel(77).convert(RGBA8)
        <Pixel rgba8 (0, 0, 0, 77)>

        """
        if fmt == self._format:
            return self
        arr = convert_array(self._format, fmt, self.to_array()[np.newaxis])
        return Pixel.new_from_array(fmt, arr[0])

    ## Sequence protocol

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __getitem__(self, i):
        return self._values[i]

    ## Comparison

    def __eq__(self, other):
        if not isinstance(other, Pixel):
            return NotImplemented
        return (self._format == other._format and
                self._values == other._values)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self._format, self._values))

    def __repr__(self):
        if self._format.channel is Ch32:
            vals = ", ".join("%0.4f" % (v,) for v in self._values)
        else:
            vals = ", ".join("%d" % (v,) for v in self._values)
        return "<Pixel %s (%s)>" % (self._format.name, vals)


## Conversion protocol


def convert_array(src_fmt, dst_fmt, data):
    """Convert an array of raw pixels from one format to another.

    :param PixelFormat src_fmt: format of `data`
    :param PixelFormat dst_fmt: format to produce
    :param numpy.ndarray data: shape (..., src_fmt.n_channels)
    :returns: a new array of shape (..., dst_fmt.n_channels)
    :rtype: numpy.ndarray

    The steps always run in this order, in float64:

    1. decode the source precision into unit values
    2. decode the source gamma curve on the model's linear channels
    3. un-premultiply, if the alpha policy or the model changes, or if
       the destination has no alpha channel to premultiply against
    4. convert color models through the linear RGB hub
    5. apply the destination alpha policy
    6. encode the destination gamma curve
    7. encode the destination precision, rounding to nearest

    Same-format conversion returns an exact copy.

    Alpha channels: a source without one is opaque. A destination
    without one drops it, leaving straight color. Mask sources have
    black color, so they convert to black, carrying their alpha into
    destinations which have it.

      >>> data = np.array([[0, 0, 255, 255], [255, 255, 255, 0]], 'u1')
      >>> convert_array(RGBA8, BGRA8, data).tolist()
      [[255, 0, 0, 255], [255, 255, 255, 0]]
      >>> convert_array(RGBA8, RGBA8P, data).tolist()
      [[0, 0, 255, 255], [0, 0, 0, 0]]

    """
    data = np.asarray(data)
    if data.shape[-1:] != (src_fmt.n_channels,):
        raise ValueError(
            "array of shape %r does not hold %s pixels"
            % (data.shape, src_fmt.name)
        )
    if src_fmt == dst_fmt:
        return np.array(data, dtype=dst_fmt.dtype, copy=True)

    src_model = src_fmt.model
    dst_model = dst_fmt.model
    lead = data.shape[:-1]

    # 1. precision
    unit = src_fmt.channel.decode_array(data)
    color = np.array(unit[..., :src_fmt.n_colors], dtype=np.float64)
    if src_fmt.has_alpha:
        alpha = np.array(unit[..., src_fmt.alpha_index], dtype=np.float64)
    else:
        alpha = np.ones(lead, dtype=np.float64)

    # 2. source gamma
    src_lin = list(src_model.linear)
    if src_lin and not src_fmt.gamma.is_linear:
        color[..., src_lin] = src_fmt.gamma.to_linear(color[..., src_lin])

    # 3. straight intermediate
    model_change = src_model is not dst_model
    premultiplied = src_fmt.alpha is PREMULTIPLIED
    if premultiplied and (model_change or
                          dst_fmt.alpha is not PREMULTIPLIED or
                          not dst_fmt.has_alpha):
        if src_lin:
            color[..., src_lin] = PREMULTIPLIED.decode(
                color[..., src_lin], alpha[..., np.newaxis],
            )
        premultiplied = False

    # 4. hub
    if model_change:
        color = dst_model.from_hub(src_model.to_hub(color))

    # 5. destination alpha policy
    dst_lin = list(dst_model.linear)
    if (not premultiplied and dst_fmt.alpha is PREMULTIPLIED and
            dst_fmt.has_alpha and dst_lin):
        color[..., dst_lin] = PREMULTIPLIED.encode(
            color[..., dst_lin], alpha[..., np.newaxis],
        )

    # 6. destination gamma
    if dst_lin and not dst_fmt.gamma.is_linear:
        color[..., dst_lin] = dst_fmt.gamma.from_linear(color[..., dst_lin])

    # 7. destination precision
    out = np.empty(lead + (dst_fmt.n_channels,), dtype=np.float64)
    out[..., :dst_fmt.n_colors] = color
    if dst_fmt.has_alpha:
        out[..., dst_fmt.alpha_index] = alpha
    return dst_fmt.channel.encode_array(out)


def convert_pixel(src_fmt, dst_fmt, values):
    """Convert one pixel given as a sequence of raw values"""
    return Pixel(src_fmt, values).convert(dst_fmt)


def as_pixel(color, fmt):
    """Coerce a color to a pixel in `fmt`, converting if needed

    :param color: a Pixel, or a sequence of raw values in `fmt`
    :rtype: Pixel

    """
    if isinstance(color, Pixel):
        return color.convert(fmt)
    if isinstance(color, Channel):
        color = (color.convert(fmt.channel).value,)
    return Pixel(fmt, color)


## Named formats

# Naming: an "s" prefix for sRGB gamma, the model, "a" when an alpha
# channel is stored, the bits per channel, and a "p" suffix for
# premultiplied alpha.

RGB8 = PixelFormat(RGB, Ch8, has_alpha=False)
RGBA8 = PixelFormat(RGB, Ch8)
RGBA8P = PixelFormat(RGB, Ch8, PREMULTIPLIED)
SRGB8 = PixelFormat(RGB, Ch8, gamma=SRGB, has_alpha=False)
SRGBA8 = PixelFormat(RGB, Ch8, gamma=SRGB)
SRGBA8P = PixelFormat(RGB, Ch8, PREMULTIPLIED, SRGB)

RGB16 = PixelFormat(RGB, Ch16, has_alpha=False)
RGBA16 = PixelFormat(RGB, Ch16)
RGBA16P = PixelFormat(RGB, Ch16, PREMULTIPLIED)
SRGB16 = PixelFormat(RGB, Ch16, gamma=SRGB, has_alpha=False)
SRGBA16 = PixelFormat(RGB, Ch16, gamma=SRGB)
SRGBA16P = PixelFormat(RGB, Ch16, PREMULTIPLIED, SRGB)

RGB32 = PixelFormat(RGB, Ch32, has_alpha=False)
RGBA32 = PixelFormat(RGB, Ch32)
RGBA32P = PixelFormat(RGB, Ch32, PREMULTIPLIED)
SRGB32 = PixelFormat(RGB, Ch32, gamma=SRGB, has_alpha=False)
SRGBA32 = PixelFormat(RGB, Ch32, gamma=SRGB)
SRGBA32P = PixelFormat(RGB, Ch32, PREMULTIPLIED, SRGB)

BGR8 = PixelFormat(BGR, Ch8, has_alpha=False)
BGRA8 = PixelFormat(BGR, Ch8)
BGRA8P = PixelFormat(BGR, Ch8, PREMULTIPLIED)
SBGR8 = PixelFormat(BGR, Ch8, gamma=SRGB, has_alpha=False)
SBGRA8 = PixelFormat(BGR, Ch8, gamma=SRGB)

CMY8 = PixelFormat(CMY, Ch8, has_alpha=False)
CMYA8 = PixelFormat(CMY, Ch8)

GRAY8 = PixelFormat(GRAY, Ch8, has_alpha=False)
GRAYA8 = PixelFormat(GRAY, Ch8)
GRAYA8P = PixelFormat(GRAY, Ch8, PREMULTIPLIED)
SGRAY8 = PixelFormat(GRAY, Ch8, gamma=SRGB, has_alpha=False)
SGRAYA8 = PixelFormat(GRAY, Ch8, gamma=SRGB)
GRAY16 = PixelFormat(GRAY, Ch16, has_alpha=False)
GRAYA16 = PixelFormat(GRAY, Ch16)
GRAY32 = PixelFormat(GRAY, Ch32, has_alpha=False)
GRAYA32 = PixelFormat(GRAY, Ch32)

HSV8 = PixelFormat(HSV, Ch8, has_alpha=False)
HSVA8 = PixelFormat(HSV, Ch8)
HSL8 = PixelFormat(HSL, Ch8, has_alpha=False)
HSLA8 = PixelFormat(HSL, Ch8)
HWB8 = PixelFormat(HWB, Ch8, has_alpha=False)
HWBA8 = PixelFormat(HWB, Ch8)
SHWB8 = PixelFormat(HWB, Ch8, gamma=SRGB, has_alpha=False)
SHWBA8 = PixelFormat(HWB, Ch8, gamma=SRGB)
HWB32 = PixelFormat(HWB, Ch32, has_alpha=False)

YCBCR8 = PixelFormat(YCBCR, Ch8, has_alpha=False)
YCBCRA8 = PixelFormat(YCBCR, Ch8)

XYZ8 = PixelFormat(XYZ, Ch8, has_alpha=False)
XYZA8 = PixelFormat(XYZ, Ch8)
XYZ16 = PixelFormat(XYZ, Ch16, has_alpha=False)
XYZ32 = PixelFormat(XYZ, Ch32, has_alpha=False)

OKLAB8 = PixelFormat(OKLAB, Ch8, has_alpha=False)
OKLABA8 = PixelFormat(OKLAB, Ch8)
OKLAB16 = PixelFormat(OKLAB, Ch16, has_alpha=False)
OKLAB32 = PixelFormat(OKLAB, Ch32, has_alpha=False)

MASK8 = PixelFormat(MASK, Ch8)
MASK16 = PixelFormat(MASK, Ch16)
MASK32 = PixelFormat(MASK, Ch32)

#: Named formats, by `PixelFormat.name`
FORMATS = {
    f.name: f for f in list(globals().values())
    if isinstance(f, PixelFormat)
}


def format_for_name(name):
    """Look up one of the named formats

    >>> format_for_name("srgba8p") is SRGBA8P
    True

    """
    try:
        return FORMATS[name]
    except KeyError:
        raise ValueError("unknown pixel format %r" % (name,))


def _test():
    """Run doctest strings"""
    import doctest
    doctest.testmod(optionflags=doctest.ELLIPSIS)


if __name__ == '__main__':
    _test()
