# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Tests the Porter-Duff compositor for correctness, and checks that the
numpy path and the per-pixel path agree bit for bit."""

from random import Random
import unittest

import numpy as np

import pixlib.settings
from pixlib.channel import Ch8
from pixlib.errors import FormatMismatch
from pixlib.helpers import Region
from pixlib.raster import Raster
import pixlib.compositing as comp
from pixlib.compositing import OPERATORS
from pixlib.compositing import composite
from pixlib.compositing import composite_matte
from pixlib.format import (
    RGBA8, RGBA8P, RGBA16P, RGBA32P, SRGBA8P, RGB8, MASK8, MASK16,
    GRAYA8P, PixelFormat,
)
from pixlib.color import RGB
from pixlib.alpha import PREMULTIPLIED


N_SAMPLES = 1200

# Premultiplied-only formats without alpha still composite as opaque
RGB8P = PixelFormat(RGB, Ch8, PREMULTIPLIED, has_alpha=False)


def _random_premultiplied(rng, fmt, n):
    """n random valid premultiplied pixels, as an (n, channels) array"""
    chan = fmt.channel
    out = np.zeros((n, fmt.n_channels), dtype=fmt.dtype)
    for i in range(n):
        if fmt.has_alpha:
            a = chan.from_unit(rng.random())
            if rng.random() < 0.1:
                a = rng.choice([chan.MIN, chan.MAX])
            color = [chan.from_unit(rng.random()).scale(a).value
                     for c in range(fmt.n_colors)]
            out[i] = color + [a.value]
        else:
            out[i] = [chan.from_unit(rng.random()).value
                      for c in range(fmt.n_channels)]
    return out


def _raster_from_rows(fmt, data, width):
    height = data.shape[0] // width
    return Raster.new_from_buffer(fmt, width, height, data.tobytes())


class ScalarVectorEquivalence (unittest.TestCase):
    """Both execution paths give identical output for every operator"""

    def tearDown(self):
        pixlib.settings.reset()

    def _check(self, fmt, seed, n=N_SAMPLES, width=40):
        rng = Random(seed)
        src = _raster_from_rows(
            fmt, _random_premultiplied(rng, fmt, n), width,
        )
        dst_data = _random_premultiplied(rng, fmt, n)
        for name, op in sorted(OPERATORS.items()):
            results = []
            for vectorized in (True, False):
                pixlib.settings.set_vectorized(vectorized)
                dst = _raster_from_rows(fmt, dst_data, width)
                composite(dst, (0, 0), src, op=op)
                results.append(dst)
            self.assertEqual(
                results[0].to_bytes(), results[1].to_bytes(),
                "%s: paths differ for %s" % (fmt.name, name),
            )

    def test_rgba8(self):
        self._check(RGBA8P, 1)

    def test_rgba16(self):
        self._check(RGBA16P, 2, n=400)

    def test_rgba32(self):
        self._check(RGBA32P, 3, n=400)

    def test_gray_and_mask(self):
        self._check(GRAYA8P, 4, n=200)
        self._check(MASK16, 5, n=200)

    def test_no_alpha_channel(self):
        self._check(RGB8P, 6, n=200)

    def test_single_pixel_blend_agrees(self):
        rng = Random(7)
        src = _random_premultiplied(rng, RGBA8P, N_SAMPLES)
        dst = _random_premultiplied(rng, RGBA8P, N_SAMPLES)
        for op in OPERATORS.values():
            vec = op.blend_array(Ch8, 3, src, dst)
            for i in range(0, N_SAMPLES, 7):
                scalar = op.blend_pixel(
                    Ch8, 3, src[i].tolist(), dst[i].tolist(),
                )
                self.assertEqual(tuple(vec[i].tolist()), scalar)

    def test_color_source_agrees(self):
        color = RGBA8P.pixel(80, 10, 60, 200)
        rng = Random(8)
        dst_data = _random_premultiplied(rng, RGBA8P, 300)
        outputs = []
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = _raster_from_rows(RGBA8P, dst_data, 30)
            composite(dst, (3, 2), color, Region(0, 0, 20, 5),
                      op=comp.SRC_ATOP)
            outputs.append(dst.to_bytes())
        self.assertEqual(outputs[0], outputs[1])


class Operators (unittest.TestCase):

    def setUp(self):
        rng = Random(11)
        self.src_data = _random_premultiplied(rng, RGBA8P, 100)
        self.dst_data = _random_premultiplied(rng, RGBA8P, 100)
        self.src = _raster_from_rows(RGBA8P, self.src_data, 10)

    def tearDown(self):
        pixlib.settings.reset()

    def _dest(self):
        return _raster_from_rows(RGBA8P, self.dst_data, 10)

    def test_all_operators_registered(self):
        self.assertEqual(len(OPERATORS), 13)
        self.assertIs(comp.operator_for_name("src-over"), comp.SRC_OVER)
        with self.assertRaises(ValueError):
            comp.operator_for_name("multiply")

    def test_src_copies_source(self):
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = self._dest()
            composite(dst, (0, 0), self.src, op=comp.SRC)
            self.assertEqual(dst, self.src)

    def test_dst_keeps_destination(self):
        dst = self._dest()
        composite(dst, (0, 0), self.src, op=comp.DST)
        self.assertEqual(dst, self._dest())

    def test_clear_zeroes(self):
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = self._dest()
            composite(dst, (0, 0), self.src, op=comp.CLEAR)
            self.assertEqual(dst.to_bytes(), b"\x00" * 400)

    def test_transparent_src_over_is_a_no_op(self):
        clear = Raster(RGBA8P, 10, 10)
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = self._dest()
            composite(dst, (0, 0), clear)
            self.assertEqual(dst, self._dest())

    def test_src_over_opaque_replaces(self):
        dst = self._dest()
        composite(dst, (0, 0), RGBA8P.pixel(1, 2, 3, 255))
        for row in dst.rows():
            self.assertTrue(np.all(row == [1, 2, 3, 255]))

    def test_plus_saturates(self):
        dst = Raster.new_filled(RGBA8P, 2, 2, (200, 100, 0, 200))
        composite(dst, (0, 0), RGBA8P.pixel(100, 100, 0, 100), op=comp.PLUS)
        self.assertEqual(dst.pixel_at(1, 1).values, (255, 200, 0, 255))

    def test_in_and_out(self):
        dst = Raster.new_filled(RGBA8P, 1, 1, (0, 0, 0, 0))
        composite(dst, (0, 0), RGBA8P.pixel(50, 50, 50, 255),
                  op=comp.SRC_IN)
        self.assertEqual(dst.pixel_at(0, 0).values, (0, 0, 0, 0))
        composite(dst, (0, 0), RGBA8P.pixel(50, 50, 50, 255),
                  op=comp.SRC_OUT)
        self.assertEqual(dst.pixel_at(0, 0).values, (50, 50, 50, 255))
        composite(dst, (0, 0), RGBA8P.pixel(0, 0, 0, 255),
                  op=comp.DST_OUT)
        self.assertEqual(dst.pixel_at(0, 0).values, (0, 0, 0, 0))

    def test_xor_of_opaque_pixels_is_clear(self):
        dst = Raster.new_filled(RGBA8P, 1, 1, (9, 9, 9, 255))
        composite(dst, (0, 0), RGBA8P.pixel(7, 7, 7, 255), op=comp.XOR)
        self.assertEqual(dst.pixel_at(0, 0).values, (0, 0, 0, 0))

    def test_float_precision(self):
        dst = Raster.new_filled(RGBA32P, 1, 1, (0.5, 0.0, 0.0, 0.5))
        composite(dst, (0, 0), RGBA32P.pixel(0.0, 0.25, 0.0, 0.5))
        self.assertEqual(dst.pixel_at(0, 0).values, (0.25, 0.25, 0.0, 0.75))


class Geometry (unittest.TestCase):

    def tearDown(self):
        pixlib.settings.reset()

    def test_5x5_src_over_onto_clear(self):
        """SrcOver onto transparent pixels reduces to Src"""
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            src = Raster.new_filled(RGBA8P, 5, 5, (80, 0, 80, 200))
            dst = Raster(RGBA8P, 100, 100)
            composite(dst, (40, 40), src, op=comp.SRC_OVER)
            inside = Region(40, 40, 5, 5)
            for y, row in enumerate(dst.rows()):
                for x in range(100):
                    if inside.contains_pixel(x, y):
                        expected = [80, 0, 80, 200]
                    else:
                        expected = [0, 0, 0, 0]
                    self.assertEqual(row[x].tolist(), expected)

    def test_partly_outside(self):
        src = Raster.new_filled(RGBA8P, 5, 5, (1, 1, 1, 255))
        dst = Raster(RGBA8P, 10, 10)
        composite(dst, (-2, 8), src)
        self.assertEqual(dst.pixel_at(0, 8).values, (1, 1, 1, 255))
        self.assertEqual(dst.pixel_at(2, 9).values, (1, 1, 1, 255))
        self.assertEqual(dst.pixel_at(3, 9).values, (0, 0, 0, 0))
        self.assertEqual(dst.pixel_at(0, 7).values, (0, 0, 0, 0))

    def test_wholly_outside_is_a_no_op(self):
        src = Raster.new_filled(RGBA8P, 5, 5, (1, 1, 1, 255))
        dst = Raster(RGBA8P, 10, 10)
        composite(dst, (10, 0), src)
        composite(dst, (0, 0), src, Region(7, 7, 2, 2))
        self.assertEqual(dst, Raster(RGBA8P, 10, 10))

    def test_color_over_region(self):
        dst = Raster(RGBA8P, 6, 6)
        composite(dst, (1, 1), RGBA8P.pixel(5, 5, 5, 255), Region(0, 0, 2, 3))
        covered = {
            (x, y) for y in range(6) for x in range(6)
            if dst.pixel_at(x, y).values != (0, 0, 0, 0)
        }
        self.assertEqual(covered, {(x, y) for x in (1, 2) for y in (1, 2, 3)})

    def test_color_without_region_fills_from_offset(self):
        dst = Raster(RGBA8P, 4, 4)
        composite(dst, (2, 3), RGBA8P.pixel(5, 5, 5, 255))
        self.assertEqual(dst.pixel_at(3, 3).values, (5, 5, 5, 255))
        self.assertEqual(dst.pixel_at(2, 3).values, (5, 5, 5, 255))
        self.assertEqual(dst.pixel_at(1, 3).values, (0, 0, 0, 0))
        self.assertEqual(dst.pixel_at(3, 2).values, (0, 0, 0, 0))

    def test_source_converted_to_destination_format(self):
        src = Raster.new_filled(RGBA16P, 2, 2, (65535, 0, 0, 65535))
        dst = Raster(RGBA8P, 2, 2)
        composite(dst, (0, 0), src)
        self.assertEqual(dst.pixel_at(0, 0).values, (255, 0, 0, 255))

    def test_overlapping_self_composite(self):
        r = Raster(RGBA8P, 4, 1)
        r.set_pixel_at(0, 0, (10, 0, 0, 255))
        composite(r, (1, 0), r, Region(0, 0, 3, 1), op=comp.SRC)
        self.assertEqual(r.pixel_at(1, 0).values, (10, 0, 0, 255))
        self.assertEqual(r.pixel_at(2, 0).values, (0, 0, 0, 0))


class Masks (unittest.TestCase):

    def tearDown(self):
        pixlib.settings.reset()

    def test_mask_source_darkens(self):
        """A mask composites as black, with its coverage as alpha"""
        dst = Raster.new_filled(RGBA8P, 1, 1, (200, 200, 200, 255))
        mask = Raster.new_filled(MASK8, 1, 1, (128,))
        composite(dst, (0, 0), mask)
        self.assertEqual(dst.pixel_at(0, 0).values, (100, 100, 100, 255))

    def test_matte_scales_color_by_coverage(self):
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = Raster(RGBA8P, 3, 1)
            mask = Raster(MASK8, 3, 1)
            mask.set_pixel_at(0, 0, (255,))
            mask.set_pixel_at(1, 0, (128,))
            composite_matte(dst, (0, 0), mask, None,
                            RGBA8P.pixel(200, 100, 0, 255))
            self.assertEqual(dst.pixel_at(0, 0).values, (200, 100, 0, 255))
            self.assertEqual(dst.pixel_at(1, 0).values, (100, 50, 0, 128))
            self.assertEqual(dst.pixel_at(2, 0).values, (0, 0, 0, 0))

    def test_matte_paths_agree(self):
        rng = Random(21)
        mask_data = np.array(
            [[rng.randint(0, 65535)] for i in range(400)], dtype="<u2",
        )
        dst_data = _random_premultiplied(rng, RGBA8P, 400)
        outputs = []
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            mask = _raster_from_rows(MASK16, mask_data, 20)
            dst = _raster_from_rows(RGBA8P, dst_data, 20)
            composite_matte(dst, (0, 0), mask, Region(0, 0, 20, 20),
                            RGBA8P.pixel(90, 30, 120, 180), comp.DST_ATOP)
            outputs.append(dst.to_bytes())
        self.assertEqual(outputs[0], outputs[1])

    def test_matte_needs_a_mask(self):
        dst = Raster(RGBA8P, 2, 2)
        with self.assertRaises(FormatMismatch):
            composite_matte(dst, (0, 0), Raster(RGBA8P, 2, 2), None,
                            (1, 1, 1, 1))


class MixedFormats (unittest.TestCase):
    """Operator identities hold when source and destination differ"""

    def tearDown(self):
        pixlib.settings.reset()

    def _both_paths(self, make_dest, source, op=comp.SRC_OVER,
                    offset=(0, 0)):
        outputs = []
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = make_dest()
            composite(dst, offset, source, op=op)
            outputs.append(dst)
        self.assertEqual(outputs[0], outputs[1])
        return outputs[0]

    def test_translucent_over_destination_without_alpha(self):
        dst = self._both_paths(
            lambda: Raster.new_filled(RGB8P, 2, 2, (255, 255, 255)),
            RGBA8P.pixel(64, 0, 0, 128),
        )
        self.assertEqual(dst.pixel_at(1, 1).values, (191, 127, 127))

    def test_transparent_over_destination_without_alpha(self):
        rng = Random(31)
        data = _random_premultiplied(rng, RGB8P, 100)
        before = _raster_from_rows(RGB8P, data, 10)
        dst = self._both_paths(
            lambda: _raster_from_rows(RGB8P, data, 10),
            Raster(RGBA8P, 10, 10),
        )
        self.assertEqual(dst, before)
        dst = self._both_paths(
            lambda: _raster_from_rows(RGB8P, data, 10),
            RGBA8P.pixel(0, 0, 0, 0),
        )
        self.assertEqual(dst, before)

    def test_dst_keeps_destination_without_alpha(self):
        rng = Random(32)
        data = _random_premultiplied(rng, RGB8P, 100)
        src = _raster_from_rows(
            RGBA16P, _random_premultiplied(rng, RGBA16P, 100), 10,
        )
        dst = self._both_paths(
            lambda: _raster_from_rows(RGB8P, data, 10), src, comp.DST,
        )
        self.assertEqual(dst, _raster_from_rows(RGB8P, data, 10))

    def test_src_onto_destination_without_alpha(self):
        dst = self._both_paths(
            lambda: Raster(RGB8P, 3, 1),
            Raster.new_filled(RGBA16P, 3, 1, (65535, 0, 0, 65535)),
            comp.SRC,
        )
        self.assertEqual(dst.pixel_at(2, 0).values, (255, 0, 0))

    def test_transparent_16bit_over_8bit(self):
        rng = Random(33)
        data = _random_premultiplied(rng, RGBA8P, 100)
        dst = self._both_paths(
            lambda: _raster_from_rows(RGBA8P, data, 10),
            Raster(RGBA16P, 10, 10),
        )
        self.assertEqual(dst, _raster_from_rows(RGBA8P, data, 10))

    def test_transparent_color_over_mask(self):
        rng = Random(34)
        data = _random_premultiplied(rng, MASK8, 100)
        dst = self._both_paths(
            lambda: _raster_from_rows(MASK8, data, 10),
            Raster(RGBA8P, 10, 10),
        )
        self.assertEqual(dst, _raster_from_rows(MASK8, data, 10))

    def test_matte_onto_destination_without_alpha(self):
        mask = Raster.new_filled(MASK8, 1, 1, (128,))
        outputs = []
        for vectorized in (True, False):
            pixlib.settings.set_vectorized(vectorized)
            dst = Raster.new_filled(RGB8P, 1, 1, (255, 255, 255))
            composite_matte(dst, (0, 0), mask, None,
                            RGBA8P.pixel(200, 100, 0, 255))
            outputs.append(dst.pixel_at(0, 0).values)
        self.assertEqual(outputs, [(227, 177, 127)] * 2)


class Validation (unittest.TestCase):

    def test_formats_checked_before_mutation(self):
        dst = Raster.new_filled(RGBA8P, 2, 2, (1, 2, 3, 4))
        before = dst.to_bytes()
        with self.assertRaises(FormatMismatch):
            composite(dst, (0, 0), Raster(RGBA8, 2, 2))
        with self.assertRaises(FormatMismatch):
            composite(dst, (0, 0), Raster(SRGBA8P, 2, 2))
        with self.assertRaises(FormatMismatch):
            composite(dst, (0, 0), RGBA8.pixel(1, 1, 1, 1))
        self.assertEqual(dst.to_bytes(), before)
        with self.assertRaises(FormatMismatch):
            composite(Raster(RGB8, 2, 2), (0, 0), dst)

    def test_raw_values_are_destination_format(self):
        dst = Raster(RGBA8P, 2, 1)
        composite(dst, (1, 0), (10, 20, 30, 40))
        self.assertEqual(dst.pixel_at(1, 0).values, (10, 20, 30, 40))
        self.assertEqual(dst.pixel_at(0, 0).values, (0, 0, 0, 0))

    def test_bad_operator(self):
        with self.assertRaises(TypeError):
            composite(Raster(RGBA8P, 1, 1), (0, 0), RGBA8P.pixel(0, 0, 0, 0),
                      op="src-over")

    def test_raster_shortcuts(self):
        dst = Raster(RGBA8P, 2, 2)
        dst.composite_color(RGBA8P.pixel(4, 4, 4, 255), Region(0, 0, 1, 1))
        self.assertEqual(dst.pixel_at(0, 0).values, (4, 4, 4, 255))
        self.assertEqual(dst.pixel_at(1, 1).values, (0, 0, 0, 0))
        src = Raster.new_filled(RGBA8P, 1, 1, (9, 9, 9, 255))
        dst.composite_raster((1, 1), src, op=comp.DST_OVER)
        self.assertEqual(dst.pixel_at(1, 1).values, (9, 9, 9, 255))
        mask = Raster.new_filled(MASK8, 2, 2, (255,))
        dst.composite_matte((0, 0), mask, None, RGBA8P.pixel(0, 0, 0, 0),
                            comp.CLEAR)
        self.assertEqual(dst, Raster(RGBA8P, 2, 2))


if __name__ == '__main__':
    unittest.main()
