# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Region geometry tests"""

import random
import unittest

from pixlib.helpers import Region
from pixlib.helpers import transfer_area
from pixlib.helpers import clamp


def _random_regions(n, seed):
    rng = random.Random(seed)
    return [
        Region(rng.randint(-20, 20), rng.randint(-20, 20),
               rng.randint(0, 30), rng.randint(0, 30))
        for i in range(n)
    ]


def _area(r):
    """Pixels covered, as a set"""
    return {(x, y) for x in range(r.left, r.right)
            for y in range(r.top, r.bottom)}


class RegionBasics (unittest.TestCase):

    def test_edges(self):
        r = Region(2, 3, 4, 5)
        self.assertEqual((r.left, r.top, r.right, r.bottom), (2, 3, 6, 8))
        self.assertEqual((r.width, r.height), (4, 5))
        self.assertEqual(tuple(r), (2, 3, 4, 5))

    def test_negative_size_rejected(self):
        with self.assertRaises(ValueError):
            Region(0, 0, -1, 0)
        with self.assertRaises(ValueError):
            Region(0, 0, 0, -5)

    def test_empty(self):
        self.assertTrue(Region().is_empty())
        self.assertTrue(Region(5, 5, 0, 10).is_empty())
        self.assertFalse(Region(5, 5, 1, 1).is_empty())

    def test_value_semantics(self):
        self.assertEqual(Region(1, 2, 3, 4), Region(1, 2, 3, 4))
        self.assertNotEqual(Region(1, 2, 3, 4), Region(1, 2, 3, 5))
        self.assertNotEqual(Region(1, 2, 3, 4), (1, 2, 3, 4))
        self.assertEqual(len({Region(1, 2, 3, 4), Region(1, 2, 3, 4)}), 1)

    def test_contains_pixel(self):
        r = Region(0, 0, 2, 2)
        self.assertTrue(r.contains_pixel(1, 1))
        self.assertFalse(r.contains_pixel(2, 1))
        self.assertFalse(r.contains_pixel(-1, 0))

    def test_clamp(self):
        self.assertEqual(clamp(5, 0, 3), 3)
        self.assertEqual(clamp(-5, 0, 3), 0)


class RegionIntersection (unittest.TestCase):

    def test_self_intersection(self):
        for r in _random_regions(50, 1):
            if r.is_empty():
                continue
            self.assertEqual(r.intersection(r), r)

    def test_commutative(self):
        regions = _random_regions(40, 2)
        for a in regions:
            for b in regions:
                self.assertEqual(a.intersection(b), b.intersection(a))

    def test_associative(self):
        regions = _random_regions(12, 3)
        for a in regions:
            for b in regions:
                for c in regions:
                    self.assertEqual(
                        a.intersection(b).intersection(c),
                        a.intersection(b.intersection(c)),
                    )

    def test_matches_pixel_sets(self):
        regions = _random_regions(25, 4)
        for a in regions:
            for b in regions:
                i = a.intersection(b)
                self.assertEqual(_area(i), _area(a) & _area(b))

    def test_disjoint_gives_canonical_empty(self):
        i = Region(0, 0, 10, 10).intersection(Region(50, 60, 5, 5))
        self.assertEqual((i.width, i.height), (0, 0))
        self.assertEqual(i, Region(50, 60, 0, 0))

    def test_transfer_area(self):
        dest = Region(0, 0, 100, 100)
        src = Region(0, 0, 5, 5)
        self.assertEqual(transfer_area(dest, (40, 40), src), src)
        self.assertEqual(transfer_area(dest, (98, 0), src),
                         Region(0, 0, 2, 5))
        self.assertEqual(transfer_area(dest, (-3, -1), src),
                         Region(3, 1, 2, 4))
        self.assertTrue(transfer_area(dest, (100, 0), src).is_empty())
        self.assertEqual(
            transfer_area(dest, (0, 0), src, Region(1, 1, 10, 10)),
            Region(1, 1, 4, 4),
        )


if __name__ == '__main__':
    unittest.main()
