# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Channel values: one color or alpha component at a fixed precision.

A channel holds an intensity in the closed range [0, 1]. Three storage
precisions exist, and each class doubles as the precision tag used by
`pixlib.format.PixelFormat`:

* `Ch8`: 8-bit unsigned integer, 0 to 255
* `Ch16`: 16-bit unsigned integer, 0 to 65535
* `Ch32`: 32-bit float, clamped to 0.0 to 1.0 on every write

Values convert losslessly upwards and round to nearest downwards:

  >>> Ch8(0x80).convert(Ch16)
  Ch16(32896)
  >>> Ch16(32896).convert(Ch8)
  Ch8(128)
  >>> Ch8(51).convert(Ch32)
  Ch32(0.2)

Arithmetic treats the stored values as fractions of one, and saturates
instead of wrapping:

  >>> Ch8(200).add(Ch8(100))
  Ch8(255)
  >>> Ch8(255).scale(Ch8(128))
  Ch8(128)
  >>> Ch8(10).sub(Ch8(20))
  Ch8(0)

"""

## Imports

import numpy as np


## Class defs


class Channel (object):
    """Abstract base for the three channel precisions.

    Subclasses set `bits`, `dtype` and `MAX_VALUE` (the raw value
    representing an intensity of 1.0), and implement the unit/raw
    mapping both for scalars and for numpy arrays. The array versions
    must follow exactly the same rounding rules as the scalar ones:
    the compositor relies on that to give identical results whichever
    path it takes.

    """

    __slots__ = ("_value",)

    #: Bits of storage per channel
    bits = None
    #: numpy storage type (always little-endian)
    dtype = None
    #: Raw value for full intensity
    MAX_VALUE = None
    #: True for the integer precisions
    is_fixed = False

    def __init__(self, value):
        self._value = self._coerce(value)

    ## Raw <-> unit mapping (overridden)

    @classmethod
    def _coerce(cls, value):
        raise NotImplementedError

    @classmethod
    def decode(cls, raw):
        """Raw stored value → unit float"""
        raise NotImplementedError

    @classmethod
    def encode(cls, unit):
        """Unit float → raw stored value, clamped and rounded"""
        raise NotImplementedError

    @classmethod
    def decode_array(cls, raw):
        """Raw numpy array → float64 unit array"""
        raise NotImplementedError

    @classmethod
    def encode_array(cls, unit):
        """float64 unit array → raw numpy array of `dtype`"""
        raise NotImplementedError

    @classmethod
    def rescale_array(cls, raw, other):
        """Raw array of this precision → raw array of `other`

        Rounds exactly as `convert()` does for single values.

        >>> Ch8.rescale_array(np.array([0, 128, 255], "u1"), Ch16).tolist()
        [0, 32896, 65535]

        """
        if other is cls:
            return np.array(raw, dtype=cls.dtype)
        if cls.is_fixed and other.is_fixed:
            wide = np.asarray(raw, dtype=np.int64)
            return _rescale_fixed(
                wide, cls.MAX_VALUE, other.MAX_VALUE,
            ).astype(other.dtype)
        return other.encode_array(cls.decode_array(raw))

    ## Construction

    @classmethod
    def from_unit(cls, unit):
        """New channel from a unit intensity

        >>> Ch8.from_unit(0.5)
        Ch8(128)
        >>> Ch16.from_unit(2.0)
        Ch16(65535)

        """
        return cls(cls.encode(unit))

    ## Accessors

    @property
    def value(self):
        """The raw stored value"""
        return self._value

    def to_unit(self):
        """The intensity as a float between 0.0 and 1.0"""
        return self.decode(self._value)

    def __int__(self):
        return int(self._value)

    def __float__(self):
        return float(self.to_unit())

    ## Precision conversion

    def convert(self, other):
        """Convert to another channel precision

        :param type other: Ch8, Ch16 or Ch32
        :rtype: Channel

        Fixed-to-fixed conversion is done in integers, rounding to the
        nearest value (halves away from zero). Going up, this is the
        same as bit replication; going back down restores the original.

        >>> all(Ch8(v).convert(Ch16).convert(Ch8) == Ch8(v)
        ...     for v in range(256))
        True

        """
        if other is type(self):
            return other(self._value)
        if self.is_fixed and other.is_fixed:
            return other(_rescale_fixed(
                self._value, self.MAX_VALUE, other.MAX_VALUE,
            ))
        return other.from_unit(self.to_unit())

    ## Arithmetic

    def _operand(self, other):
        if isinstance(other, Channel):
            return other.convert(type(self))._value
        return self.encode(other)

    def scale(self, by):
        """Multiply by another channel, or by a unit float

        >>> Ch16(65535).scale(0.5)
        Ch16(32768)
        >>> Ch32(0.5).scale(Ch32(0.5))
        Ch32(0.25)

        """
        cls = type(self)
        if not isinstance(by, Channel):
            return cls.from_unit(self.to_unit() * by)
        b = self._operand(by)
        if cls.is_fixed:
            return cls(_mul_fixed(self._value, b, cls.MAX_VALUE))
        return cls(self._value * b)

    def add(self, other):
        """Saturating addition"""
        cls = type(self)
        b = self._operand(other)
        if cls.is_fixed:
            return cls(min(self._value + b, cls.MAX_VALUE))
        return cls(self._value + b)

    def sub(self, other):
        """Saturating subtraction"""
        cls = type(self)
        b = self._operand(other)
        if cls.is_fixed:
            return cls(max(self._value - b, 0))
        return cls(self._value - b)

    def invert(self):
        """One minus this value

        >>> Ch8(55).invert()
        Ch8(200)

        """
        cls = type(self)
        if cls.is_fixed:
            return cls(cls.MAX_VALUE - self._value)
        return cls(1.0 - self._value)

    ## Gamma transfer

    def to_linear(self, gamma):
        """Decode from a gamma policy's curve to linear intensity

        :param pixlib.gamma.GammaPolicy gamma: the owning format's policy

        """
        if gamma.is_linear:
            return type(self)(self._value)
        return type(self).from_unit(gamma.to_linear(self.to_unit()))

    def from_linear(self, gamma):
        """Encode a linear intensity with a gamma policy's curve"""
        if gamma.is_linear:
            return type(self)(self._value)
        return type(self).from_unit(gamma.from_linear(self.to_unit()))

    ## Comparison

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value

    def __le__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value <= other._value

    def __gt__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value > other._value

    def __ge__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value >= other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._value)


class _FixedChannel (Channel):
    """Integer storage, scaled linearly over [0, MAX_VALUE]"""

    __slots__ = ()

    is_fixed = True

    @classmethod
    def _coerce(cls, value):
        value = int(value)
        if not (0 <= value <= cls.MAX_VALUE):
            raise ValueError(
                "%s value out of range: %d" % (cls.__name__, value)
            )
        return value

    @classmethod
    def decode(cls, raw):
        return raw / cls.MAX_VALUE

    @classmethod
    def encode(cls, unit):
        if unit != unit:  # NaN
            return 0
        unit = min(max(unit, 0.0), 1.0)
        return int(np.floor(unit * cls.MAX_VALUE + 0.5))

    @classmethod
    def decode_array(cls, raw):
        return np.asarray(raw, dtype=np.float64) / cls.MAX_VALUE

    @classmethod
    def encode_array(cls, unit):
        unit = np.clip(np.nan_to_num(unit, nan=0.0), 0.0, 1.0)
        return np.floor(unit * cls.MAX_VALUE + 0.5).astype(cls.dtype)


class Ch8 (_FixedChannel):
    """8-bit channel: raw values 0 to 255"""

    __slots__ = ()

    bits = 8
    dtype = np.dtype("u1")
    MAX_VALUE = 0xff


class Ch16 (_FixedChannel):
    """16-bit channel: raw values 0 to 65535"""

    __slots__ = ()

    bits = 16
    dtype = np.dtype("<u2")
    MAX_VALUE = 0xffff


class Ch32 (Channel):
    """Floating point channel, always between 0.0 and 1.0

    >>> Ch32(1.5), Ch32(-3), Ch32(float("nan"))
    (Ch32(1.0), Ch32(0.0), Ch32(0.0))

    """

    __slots__ = ()

    bits = 32
    dtype = np.dtype("<f4")
    MAX_VALUE = 1.0

    @classmethod
    def _coerce(cls, value):
        return cls.encode(value)

    @classmethod
    def decode(cls, raw):
        return float(raw)

    @classmethod
    def encode(cls, unit):
        unit = float(unit)
        if unit != unit:
            return 0.0
        unit = min(max(unit, 0.0), 1.0)
        return float(np.float32(unit))

    @classmethod
    def decode_array(cls, raw):
        return np.asarray(raw, dtype=np.float64)

    @classmethod
    def encode_array(cls, unit):
        unit = np.clip(np.nan_to_num(unit, nan=0.0), 0.0, 1.0)
        return unit.astype(cls.dtype)

    def __repr__(self):
        return "Ch32(%s)" % (round(self._value, 6),)


Ch8.MIN = Ch8(0)
Ch8.MAX = Ch8(Ch8.MAX_VALUE)
Ch16.MIN = Ch16(0)
Ch16.MAX = Ch16(Ch16.MAX_VALUE)
Ch32.MIN = Ch32(0.0)
Ch32.MAX = Ch32(1.0)

#: All precisions, coarsest first
PRECISIONS = (Ch8, Ch16, Ch32)


## Integer helpers, shared with the compositor's numpy path

def _rescale_fixed(v, from_max, to_max):
    """Round-to-nearest rescale between two fixed ranges

    Works on ints and on numpy integer arrays (use a wide dtype).

    >>> _rescale_fixed(255, 255, 65535)
    65535
    >>> _rescale_fixed(0x7f80, 65535, 255)
    127

    """
    return (v * to_max * 2 + from_max) // (2 * from_max)


def _mul_fixed(a, b, max_value):
    """Fixed point product a*b/max, rounded to nearest

    >>> _mul_fixed(255, 255, 255), _mul_fixed(128, 255, 255)
    (255, 128)
    >>> _mul_fixed(80, 200, 255)
    63

    """
    return (a * b * 2 + max_value) // (2 * max_value)


def precision_for_name(name):
    """Look up a channel class by name, e.g. "Ch16"."""
    for cls in PRECISIONS:
        if cls.__name__ == name:
            return cls
    raise ValueError("unknown channel precision %r" % (name,))


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
