# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Alpha policies: straight or premultiplied color channels

In a `PREMULTIPLIED` format every color channel has already been scaled
by the pixel's alpha, so that color <= alpha. In a `STRAIGHT` format the
color channels are independent of alpha.

Both directions work on unit floats, or numpy arrays of them.

"""

import numpy as np


class AlphaPolicy (object):
    """An alpha mode attached to a pixel format.

    `encode()` takes straight color into the policy's representation;
    `decode()` takes it back out to straight color. Instances are
    singletons: compare them with ``is``.

    """

    def __init__(self, name):
        self.name = name

    def encode(self, color, alpha):
        raise NotImplementedError

    def decode(self, color, alpha):
        raise NotImplementedError

    def __repr__(self):
        return "<AlphaPolicy %s>" % (self.name,)

    def __reduce__(self):
        return (policy_for_name, (self.name,))


class _Straight (AlphaPolicy):

    def encode(self, color, alpha):
        return color

    def decode(self, color, alpha):
        return color


class _Premultiplied (AlphaPolicy):

    def encode(self, color, alpha):
        """Straight → premultiplied

        >>> PREMULTIPLIED.encode(0.5, 0.5)
        0.25

        """
        return color * alpha

    def decode(self, color, alpha):
        """Premultiplied → straight; zero alpha gives zero color

        >>> PREMULTIPLIED.decode(0.25, 0.5)
        0.5
        >>> PREMULTIPLIED.decode(0.25, 0.0)
        0.0

        """
        if isinstance(color, np.ndarray) or isinstance(alpha, np.ndarray):
            color, alpha = np.broadcast_arrays(
                np.asarray(color, dtype=np.float64),
                np.asarray(alpha, dtype=np.float64),
            )
            out = np.zeros(color.shape, dtype=np.float64)
            np.divide(color, alpha, out=out, where=(alpha > 0))
            return np.minimum(out, 1.0)
        if alpha <= 0:
            return 0.0
        return min(color / alpha, 1.0)


#: Color channels are independent of alpha.
STRAIGHT = _Straight("straight")

#: Color channels are scaled by alpha. Required for compositing.
PREMULTIPLIED = _Premultiplied("premultiplied")

POLICIES = (STRAIGHT, PREMULTIPLIED)


def policy_for_name(name):
    """Look up an alpha policy by its name"""
    for policy in POLICIES:
        if policy.name == name:
            return policy
    raise ValueError("unknown alpha policy %r" % (name,))


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
