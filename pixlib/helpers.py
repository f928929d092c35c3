# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Small geometry helpers shared by rasters and the compositor"""


class Region (object):
    """An axis-aligned rectangle of whole pixels.

    Regions are immutable values: they compare and hash by their four
    numbers. The right and bottom edges are exclusive.

    >>> big = Region(-3, 2, 180, 222)
    >>> a = Region(0, 10, 5, 15)
    >>> b = Region(2, 10, 1, 15)
    >>> c = Region(-1, 10, 1, 30)
    >>> a.contains(b)
    True
    >>> not b.contains(a)
    True
    >>> [big.contains(r) for r in [a, b, c]]
    [True, True, True]
    >>> [big.overlaps(r) for r in [a, b, c]]
    [True, True, True]
    >>> a.overlaps(b) and b.overlaps(a)
    True
    >>> (not a.overlaps(c)) and (not c.overlaps(a))
    True

    Intersections of disjoint regions are empty, but still a Region:

    >>> r1 = Region(-40, -40, 5, 5)
    >>> r2 = Region(-41, -35, 5, 500)
    >>> r1.intersection(r2)
    Region(-40, -35, 0, 0)
    >>> r1.translated(0, 1).intersection(r2)
    Region(-40, -35, 4, 1)

    Negative sizes are rejected:

    >>> Region(0, 0, -1, 4)
    Traceback (most recent call last):
    ...
    ValueError: negative region size: -1x4

    """

    __slots__ = ("_x", "_y", "_w", "_h")

    def __init__(self, x=0, y=0, width=0, height=0):
        """Initializes, with optional location and dimensions."""
        x, y, width, height = int(x), int(y), int(width), int(height)
        if width < 0 or height < 0:
            raise ValueError("negative region size: %dx%d" % (width, height))
        self._x = x
        self._y = y
        self._w = width
        self._h = height

    @classmethod
    def new_from_size(cls, width, height):
        """Region covering (0, 0) to (width, height)"""
        return cls(0, 0, width, height)

    ## Edges and size

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    @property
    def width(self):
        return self._w

    @property
    def height(self):
        return self._h

    left = x
    top = y

    @property
    def right(self):
        """Exclusive right edge"""
        return self._x + self._w

    @property
    def bottom(self):
        """Exclusive bottom edge"""
        return self._y + self._h

    def __iter__(self):
        """Allows iteration, and thus casting to tuples and lists.

        The sequence returned is always 4 items long, and in the order
        x, y, width, height.

        """
        return iter((self._x, self._y, self._w, self._h))

    def is_empty(self):
        """Returns true if the region has zero area."""
        return self._w == 0 or self._h == 0

    ## Geometry

    def contains(self, other):
        """Returns true if this region entirely contains another."""
        return (
            other.left >= self.left and
            other.top >= self.top and
            other.right <= self.right and
            other.bottom <= self.bottom
        )

    def contains_pixel(self, x, y):
        """Checks if pixel coordinates lie inside this region"""
        return (self._x <= x < self.right and
                self._y <= y < self.bottom)

    def overlaps(self, other):
        """Returns true if this region intersects another."""
        if max(self.left, other.left) >= min(self.right, other.right):
            return False
        if max(self.top, other.top) >= min(self.bottom, other.bottom):
            return False
        return True

    def intersection(self, other):
        """The region common to this one and another.

        :rtype: Region

        If the two do not intersect, the result is the empty region at
        the would-be top left corner, with zero width and height.

        """
        x = max(self.left, other.left)
        y = max(self.top, other.top)
        rx = min(self.right, other.right)
        ry = min(self.bottom, other.bottom)
        if rx <= x or ry <= y:
            return Region(x, y, 0, 0)
        return Region(x, y, rx - x, ry - y)

    def translated(self, dx, dy):
        """Copy of this region, moved by an offset

        >>> Region(1, 2, 3, 4).translated(-1, 10)
        Region(0, 12, 3, 4)

        """
        return Region(self._x + dx, self._y + dy, self._w, self._h)

    ## Comparison

    def __eq__(self, other):
        """Returns true if this region is identical to another."""
        if not isinstance(other, Region):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(tuple(self))

    def __repr__(self):
        return 'Region(%d, %d, %d, %d)' % tuple(self)


def as_region(region):
    """Coerce an (x, y, width, height) sequence to a Region"""
    if region is None or isinstance(region, Region):
        return region
    return Region(*region)


def transfer_area(dest_bounds, dest_offset, source_bounds,
                  source_region=None):
    """Area of a source that a copy or composite operation reads.

    :param Region dest_bounds: the destination's full extent
    :param tuple dest_offset: (dx, dy); source (sx, sy) lands at
      (sx + dx, sy + dy)
    :param Region source_bounds: the source's full extent
    :param Region source_region: optional restriction, source space
    :returns: the clipped area, in source coordinates
    :rtype: Region

    The result is the source region, intersected with the source's
    bounds and with the destination bounds shifted back by the offset.

    >>> transfer_area(Region(0, 0, 10, 10), (8, -2), Region(0, 0, 5, 5))
    Region(0, 2, 2, 3)
    >>> transfer_area(Region(0, 0, 10, 10), (0, 0), Region(0, 0, 5, 5),
    ...               Region(20, 20, 3, 3)).is_empty()
    True

    """
    dx, dy = dest_offset
    area = source_bounds.intersection(dest_bounds.translated(-dx, -dy))
    if source_region is not None:
        area = area.intersection(as_region(source_region))
    return area


def clamp(x, lo, hi):
    """Clamp a value to the closed range [lo, hi]

    >>> clamp(-3, 0, 10), clamp(5, 0, 10), clamp(11, 0, 10)
    (0, 5, 10)

    """
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def _test():
    import doctest
    doctest.testmod()


if __name__ == '__main__':
    _test()
