# coding=utf-8
# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Color models and the conversion network between them.

Color models are singleton objects which describe the meaning of a
pixel's color channels, and which know how to turn those channels into
and out of one shared representation: linear RGB, the *hub*. Any model
converts to any other via the hub, so adding a model means writing one
subclass with two methods, and nothing else needs to change:

  >>> rgb = np.array([1.0, 0.5, 0.0])
  >>> HSV.from_hub(rgb).round(4).tolist()
  [0.0833, 1.0, 1.0]
  >>> HSV.to_hub(HSV.from_hub(rgb)).round(4).tolist()
  [1.0, 0.5, 0.0]

All conversions are vectorized: they take float64 numpy arrays whose
last axis holds the channels, and return arrays of the same leading
shape. Alpha is not the business of the color model; see
`pixlib.format`.

Hue is always stored as a fraction of a full turn, not in degrees, so
1.0 and 0.0 are the same hue. Round trips through the hue models lose
the hue of greys, which have no chroma to carry it. That is inherent
to those models, not a bug.

"""

## Imports

import numpy as np


## Base class


class ColorModel (object):
    """Base class for color models.

    Subclasses define the channel names in `components`, and implement
    `to_hub()` and `from_hub()`. They also classify their channels:
    `circular` channels hold hue angles, and `linear` channels are the
    ones which gamma curves and premultiplication apply to.

    """

    #: Short identifying name
    name = None
    #: Channel names, in storage order
    components = ()
    #: Indices of channels holding a hue (wrapping at 1.0)
    circular = ()
    #: Indices of channels affected by gamma and premultiplied alpha
    linear = ()

    @property
    def n_components(self):
        """Number of color channels (alpha excluded)"""
        return len(self.components)

    def to_hub(self, components):
        """Model components → linear RGB

        :param numpy.ndarray components: shape (..., n_components)
        :rtype: numpy.ndarray of shape (..., 3)

        """
        raise NotImplementedError

    def from_hub(self, rgb):
        """Linear RGB → model components

        :param numpy.ndarray rgb: shape (..., 3)
        :rtype: numpy.ndarray of shape (..., n_components)

        """
        raise NotImplementedError

    def __repr__(self):
        return "<ColorModel %s>" % (self.name,)

    def __reduce__(self):
        return (model_for_name, (self.name,))


## Hue helpers

# The hexcone decomposition used by HSV, HSL and HWB. Hue prime is the
# hue in sixths of a turn; each sixth is one sector of the hexcone,
# running red, yellow, green, cyan, blue, magenta.


def hue_chroma_value(rgb):
    """RGB → hue, chroma and value (the largest component)

    >>> h, c, v = hue_chroma_value(np.array([0.2, 0.4, 0.4]))
    >>> round(float(h), 4), round(float(c), 4), round(float(v), 4)
    (0.5, 0.2, 0.4)

    Greys have no hue; zero is used.

    """
    r = rgb[..., 0]
    g = rgb[..., 1]
    b = rgb[..., 2]
    val = np.maximum(np.maximum(r, g), b)
    chroma = val - np.minimum(np.minimum(r, g), b)
    has_hue = chroma > 0
    c = np.where(has_hue, chroma, 1.0)
    hue_r = np.where(g >= b, (g - b) / c, 6.0 - (b - g) / c)
    hue_g = 2.0 + (b - r) / c
    hue_b = 4.0 + (r - g) / c
    hue = np.where(val == r, hue_r, np.where(val == g, hue_g, hue_b))
    hue = np.where(has_hue, hue / 6.0, 0.0)
    hue = np.where(hue >= 1.0, hue - 1.0, hue)
    return hue, chroma, val


def hexcone_rgb(hue, chroma):
    """Hue and chroma → the base RGB (before adding the grey level)

    >>> hexcone_rgb(np.array(1.0 / 6), np.array(1.0)).tolist()
    [1.0, 1.0, 0.0]

    A hue of 1.0 is the same as 0.0:

    >>> hexcone_rgb(np.array(1.0), np.array(1.0)).tolist()
    [1.0, 0.0, 0.0]

    """
    hp = np.mod(hue, 1.0) * 6.0
    floor = np.floor(hp)
    sector = floor.astype(np.int64) % 6
    frac = hp - floor
    rising = chroma * frac
    falling = chroma * (1.0 - frac)
    zero = np.zeros_like(rising)
    chroma = chroma + zero
    # Secondary component climbs in even sectors, falls in odd ones
    sec = np.where(sector % 2 == 0, rising, falling)
    conds = [sector == i for i in range(6)]
    r = np.select(conds, [chroma, sec, zero, zero, sec, chroma])
    g = np.select(conds, [sec, chroma, chroma, sec, zero, zero])
    b = np.select(conds, [zero, zero, sec, chroma, chroma, sec])
    return np.stack([r, g, b], axis=-1)


def _stack(*channels):
    return np.stack(channels, axis=-1)


## RGB family


class RGBModel (ColorModel):
    """Additive red, green, blue: the hub model itself"""

    name = "rgb"
    components = ("red", "green", "blue")
    linear = (0, 1, 2)

    def to_hub(self, components):
        return np.array(components, dtype=np.float64, copy=True)

    def from_hub(self, rgb):
        return np.array(rgb, dtype=np.float64, copy=True)


class BGRModel (ColorModel):
    """RGB with the channels stored in reverse order"""

    name = "bgr"
    components = ("blue", "green", "red")
    linear = (0, 1, 2)

    def to_hub(self, components):
        return np.array(components[..., ::-1], dtype=np.float64)

    def from_hub(self, rgb):
        return np.array(rgb[..., ::-1], dtype=np.float64)


class CMYModel (ColorModel):
    """Subtractive cyan, magenta, yellow: exactly one minus RGB

    >>> CMY.from_hub(np.array([1.0, 0.25, 0.0])).tolist()
    [0.0, 0.75, 1.0]

    """

    name = "cmy"
    components = ("cyan", "magenta", "yellow")
    linear = (0, 1, 2)

    def to_hub(self, components):
        return 1.0 - components

    def from_hub(self, rgb):
        return 1.0 - rgb


## Luminance


# Rec. 709 relative luminance weights. These apply to linear RGB, which
# is what the hub holds. BT.601 luma weights (0.299, 0.587, 0.114) are
# meant for gamma-encoded values instead.
_RED_LUMA = 0.2126
_GREEN_LUMA = 0.7152
_BLUE_LUMA = 0.0722


def RGB_to_luminance(rgb):
    """Linear RGB → relative luminance

    >>> round(float(RGB_to_luminance(np.array([1.0, 1.0, 1.0]))), 6)
    1.0
    >>> round(float(RGB_to_luminance(np.array([0.0, 1.0, 0.0]))), 4)
    0.7152

    """
    return (_RED_LUMA * rgb[..., 0] +
            _GREEN_LUMA * rgb[..., 1] +
            _BLUE_LUMA * rgb[..., 2])


class GrayModel (ColorModel):
    """A single luminance channel.

    Conversion from RGB uses perceptual luminance weights, not the mean;
    conversion to RGB broadcasts the one value to all three channels.

    """

    name = "gray"
    components = ("value",)
    linear = (0,)

    def to_hub(self, components):
        v = components[..., 0]
        return _stack(v, v, v)

    def from_hub(self, rgb):
        return np.clip(RGB_to_luminance(rgb), 0.0, 1.0)[..., np.newaxis]


## Hue models


class HSVModel (ColorModel):
    """Cylindrical hue, saturation, value

    >>> HSV.to_hub(np.array([2.0 / 3, 1.0, 0.5])).tolist()
    [0.0, 0.0, 0.5]

    """

    name = "hsv"
    components = ("hue", "saturation", "value")
    circular = (0,)
    linear = (1, 2)

    def to_hub(self, components):
        h = components[..., 0]
        s = components[..., 1]
        v = components[..., 2]
        chroma = v * s
        base = hexcone_rgb(h, chroma)
        return base + (v - chroma)[..., np.newaxis]

    def from_hub(self, rgb):
        hue, chroma, val = hue_chroma_value(rgb)
        safe = np.where(val > 0, val, 1.0)
        sat = np.where(val > 0, chroma / safe, 0.0)
        return _stack(hue, sat, val)


class HSLModel (ColorModel):
    """Cylindrical hue, saturation, lightness

    >>> HSL.from_hub(np.array([0.5, 0.5, 0.5])).tolist()
    [0.0, 0.0, 0.5]
    >>> HSL.to_hub(np.array([0.0, 1.0, 0.5])).tolist()
    [1.0, 0.0, 0.0]

    """

    name = "hsl"
    components = ("hue", "saturation", "lightness")
    circular = (0,)
    linear = (1, 2)

    def to_hub(self, components):
        h = components[..., 0]
        s = components[..., 1]
        l = components[..., 2]
        chroma = (1.0 - np.abs(2.0 * l - 1.0)) * s
        base = hexcone_rgb(h, chroma)
        return base + (l - chroma / 2.0)[..., np.newaxis]

    def from_hub(self, rgb):
        hue, chroma, val = hue_chroma_value(rgb)
        light = val - chroma / 2.0
        denom = 1.0 - np.abs(2.0 * light - 1.0)
        ok = denom > 0
        sat = np.where(ok, chroma / np.where(ok, denom, 1.0), 0.0)
        return _stack(hue, np.clip(sat, 0.0, 1.0), light)


class HWBModel (ColorModel):
    """Hue, whiteness, blackness

    Whiteness and blackness which sum to more than one are scaled down
    to sum to exactly one, keeping their ratio (a grey).

    >>> HWB.to_hub(np.array([0.0, 0.0, 0.0])).tolist()
    [1.0, 0.0, 0.0]
    >>> HWB.to_hub(np.array([0.3, 0.8, 0.8])).tolist()
    [0.5, 0.5, 0.5]

    """

    name = "hwb"
    components = ("hue", "whiteness", "blackness")
    circular = (0,)
    linear = (1, 2)

    def to_hub(self, components):
        h = components[..., 0]
        w = components[..., 1]
        b = components[..., 2]
        total = w + b
        over = total > 1.0
        ratio = np.where(over, 1.0 / np.where(over, total, 1.0), 1.0)
        w = w * ratio
        b = b * ratio
        v = 1.0 - b
        chroma = np.maximum(v - w, 0.0)
        base = hexcone_rgb(h, chroma)
        return base + w[..., np.newaxis]

    def from_hub(self, rgb):
        hue, chroma, val = hue_chroma_value(rgb)
        safe = np.where(val > 0, val, 1.0)
        sat_v = np.where(val > 0, chroma / safe, 0.0)
        whiteness = (1.0 - sat_v) * val
        blackness = 1.0 - val
        return _stack(hue, whiteness, blackness)


## ITU.BT-601 Y'CbCr, full range, chroma offset to [0, 1].

# ref http://www.itu.int/rec/R-REC-BT.601/en
# ref JPEG File Interchange Format, version 1.02


def RGB_to_YCbCr_BT601(rgb):
    """RGB → BT601 YCbCr: all terms ∈ [0, 1], chroma centred on 0.5

    >>> RGB_to_YCbCr_BT601(np.array([1.0, 1.0, 1.0])).round(6).tolist()
    [1.0, 0.5, 0.5]

    """
    R = rgb[..., 0]
    G = rgb[..., 1]
    B = rgb[..., 2]
    Y = 0.299 * R + 0.587 * G + 0.114 * B
    Cb = 0.5 - 0.168736 * R - 0.331264 * G + 0.5 * B
    Cr = 0.5 + 0.5 * R - 0.418688 * G - 0.081312 * B
    return np.clip(_stack(Y, Cb, Cr), 0.0, 1.0)


def YCbCr_to_RGB_BT601(ycc):
    """BT601 YCbCr → RGB, clamped to the RGB cube

    >>> YCbCr_to_RGB_BT601(np.array([0.5, 0.5, 0.5])).tolist()
    [0.5, 0.5, 0.5]

    """
    Y = ycc[..., 0]
    Cb = ycc[..., 1] - 0.5
    Cr = ycc[..., 2] - 0.5
    R = Y + 1.402 * Cr
    G = Y - 0.344136 * Cb - 0.714136 * Cr
    B = Y + 1.772 * Cb
    return np.clip(_stack(R, G, B), 0.0, 1.0)


class YCbCrModel (ColorModel):
    """YUV-type color, using the full-range BT601 definition.

    Only the luma channel is subject to gamma and premultiplication:
    the chroma channels are signed differences stored around 0.5.

    """

    name = "ycbcr"
    components = ("y", "cb", "cr")
    linear = (0,)

    def to_hub(self, components):
        return YCbCr_to_RGB_BT601(components)

    def from_hub(self, rgb):
        return RGB_to_YCbCr_BT601(rgb)


## CIE 1931 XYZ, D65 white point

# ref IEC 61966-2-1 (the sRGB primaries and white point)

_RGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])

_XYZ_TO_RGB = np.array([
    [3.2406, -1.5372, -0.4986],
    [-0.9689, 1.8758, 0.0415],
    [0.0557, -0.2040, 1.0570],
])


class XYZModel (ColorModel):
    """CIE XYZ tristimulus values, relative to a D65 white

    Y is the same relative luminance `GRAY` uses. Stored channels are
    limited to [0, 1], so the Z of the brightest blues and whites is
    clipped slightly.

    >>> XYZ.from_hub(np.array([1.0, 1.0, 1.0])).round(4).tolist()
    [0.9505, 1.0, 1.089]

    """

    name = "xyz"
    components = ("x", "y", "z")
    linear = (0, 1, 2)

    def to_hub(self, components):
        xyz = np.asarray(components, dtype=np.float64)
        return np.dot(xyz, _XYZ_TO_RGB.T)

    def from_hub(self, rgb):
        return np.dot(np.asarray(rgb, dtype=np.float64), _RGB_TO_XYZ.T)


## Oklab perceptual space

# ref https://bottosson.github.io/posts/oklab/

_RGB_TO_LMS = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])

_LMS_TO_OKLAB = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])

_OKLAB_TO_LMS = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])

_LMS_TO_RGB = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])


class OklabModel (ColorModel):
    """Oklab: perceptual lightness L, with the opponent axes a and b

    The a and b axes are signed. Stored channels hold [0, 1], so only
    the non-negative half of each axis survives storage; in float
    working values the conversion is complete.

    >>> l, a, b = OKLAB.from_hub(np.array([1.0, 1.0, 1.0]))
    >>> round(float(l), 4), bool(abs(a) < 1e-4), bool(abs(b) < 1e-4)
    (1.0, True, True)

    """

    name = "oklab"
    components = ("l", "a", "b")
    linear = (0, 1, 2)

    def to_hub(self, components):
        lms_ = np.dot(
            np.asarray(components, dtype=np.float64), _OKLAB_TO_LMS.T,
        )
        return np.dot(lms_ ** 3, _LMS_TO_RGB.T)

    def from_hub(self, rgb):
        lms = np.dot(np.asarray(rgb, dtype=np.float64), _RGB_TO_LMS.T)
        return np.dot(np.cbrt(lms), _LMS_TO_OKLAB.T)


## Alpha-only


class MaskModel (ColorModel):
    """No color at all: a mask has only its alpha (coverage) channel.

    Its color is black, whatever format it ends up in.

    >>> MASK.to_hub(np.zeros((2, 0))).tolist()
    [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]

    """

    name = "mask"
    components = ()

    def to_hub(self, components):
        return np.zeros(components.shape[:-1] + (3,), dtype=np.float64)

    def from_hub(self, rgb):
        return np.zeros(rgb.shape[:-1] + (0,), dtype=np.float64)


## Model singletons

RGB = RGBModel()
BGR = BGRModel()
CMY = CMYModel()
GRAY = GrayModel()
HSV = HSVModel()
HSL = HSLModel()
HWB = HWBModel()
YCBCR = YCbCrModel()
XYZ = XYZModel()
OKLAB = OklabModel()
MASK = MaskModel()

#: All known models, by name
MODELS = {
    m.name: m for m in (
        RGB, BGR, CMY, GRAY, HSV, HSL, HWB, YCBCR, XYZ, OKLAB, MASK,
    )
}


def model_for_name(name):
    """Look up a color model by name

    >>> model_for_name("hwb") is HWB
    True

    """
    try:
        return MODELS[name]
    except KeyError:
        raise ValueError("unknown color model %r" % (name,))


def convert(src_model, dst_model, components):
    """Convert components between two models, through the hub

    >>> convert(CMY, HSL, np.array([0.0, 1.0, 1.0])).tolist()
    [0.0, 1.0, 0.5]

    """
    if src_model is dst_model:
        return np.array(components, dtype=np.float64, copy=True)
    return dst_model.from_hub(src_model.to_hub(components))


## Module testing

def _test():
    """Run all doctests in this module"""
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
