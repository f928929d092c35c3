# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Gamma policies: how stored channel values relate to light intensity

A pixel format is either `LINEAR`, where stored values are proportional
to physical intensity, or `SRGB`, where they follow the sRGB transfer
curve. Blending arithmetic is only correct on linear values.

The transfer functions accept Python floats or numpy arrays of unit
values.

"""

import numpy as np


## sRGB transfer curve

# Linear segment near zero, power law elsewhere.
# ref IEC 61966-2-1

_SRGB_DECODE_KNEE = 0.04045
_SRGB_ENCODE_KNEE = 0.0031308
_SRGB_SLOPE = 12.92
_SRGB_POWER = 2.4


def srgb_decode(v):
    """sRGB encoded value → linear intensity

    >>> srgb_decode(0.0), srgb_decode(1.0)
    (0.0, 1.0)
    >>> round(srgb_decode(0.5), 6)
    0.214041

    """
    if isinstance(v, np.ndarray):
        v = np.clip(v, 0.0, 1.0)
        return np.where(
            v < _SRGB_DECODE_KNEE,
            v / _SRGB_SLOPE,
            ((v + 0.055) / 1.055) ** _SRGB_POWER,
        )
    if v <= 0.0:
        return 0.0
    elif v < _SRGB_DECODE_KNEE:
        return v / _SRGB_SLOPE
    elif v < 1.0:
        return ((v + 0.055) / 1.055) ** _SRGB_POWER
    return 1.0


def srgb_encode(v):
    """Linear intensity → sRGB encoded value

    >>> srgb_encode(0.0), srgb_encode(1.0)
    (0.0, 1.0)
    >>> round(srgb_encode(0.214041), 4)
    0.5

    """
    if isinstance(v, np.ndarray):
        v = np.clip(v, 0.0, 1.0)
        return np.where(
            v < _SRGB_ENCODE_KNEE,
            v * _SRGB_SLOPE,
            1.055 * v ** (1.0 / _SRGB_POWER) - 0.055,
        )
    if v <= 0.0:
        return 0.0
    elif v < _SRGB_ENCODE_KNEE:
        return v * _SRGB_SLOPE
    elif v < 1.0:
        return 1.055 * v ** (1.0 / _SRGB_POWER) - 0.055
    return 1.0


## Policy tags


class GammaPolicy (object):
    """A gamma encoding mode attached to a pixel format.

    Instances are singletons: compare them with ``is``.

    """

    def __init__(self, name, decode, encode):
        self.name = name
        self._decode = decode
        self._encode = encode

    def to_linear(self, v):
        """Stored unit value(s) → linear unit value(s)"""
        return self._decode(v)

    def from_linear(self, v):
        """Linear unit value(s) → stored unit value(s)"""
        return self._encode(v)

    @property
    def is_linear(self):
        return self is LINEAR

    def __repr__(self):
        return "<GammaPolicy %s>" % (self.name,)

    def __reduce__(self):
        return (policy_for_name, (self.name,))


def _identity(v):
    return v


#: Stored values are linear intensities. Required for compositing.
LINEAR = GammaPolicy("linear", _identity, _identity)

#: Stored values are encoded with the sRGB transfer curve.
SRGB = GammaPolicy("srgb", srgb_decode, srgb_encode)

POLICIES = (LINEAR, SRGB)


def policy_for_name(name):
    """Look up a gamma policy by its name

    >>> policy_for_name("srgb") is SRGB
    True

    """
    for policy in POLICIES:
        if policy.name == name:
            return policy
    raise ValueError("unknown gamma policy %r" % (name,))


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
