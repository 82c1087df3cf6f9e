# Grassmann: Exterior Algebra Kernel (C) 2026 The Grassmann Authors
# Licensed under the Apache License, Version 2.0

import itertools
import math
import unittest
from core.algebra import GrassmannAlgebra
from core.element import Element


class TestAlgebraicProperties(unittest.TestCase):
    def setUp(self):
        self.algebra = GrassmannAlgebra(4)
        P = [self.algebra.generator(k) for k in range(4)]
        self.samples = [
            self.algebra.zero(),
            self.algebra.scalar(1.5),
            2 * P[0],
            P[0] - 3 * P[2],
            (P[0] | P[1]) + 0.5 * (P[2] | P[3]),
            Element(self.algebra, {0: 1.0, 0b0110: -2.0, 0b1011: 4.0, 0b1111: 0.25}),
            Element(self.algebra, {0b0001: 0.0, 0b0010: 1.0}),
        ]

    def test_trim_idempotent(self):
        for x in self.samples:
            once = x.copy().trim()
            twice = once.copy().trim()
            self.assertEqual(once, twice)

    def test_additive_identity(self):
        for x in self.samples:
            self.assertEqual(x + self.algebra.zero(), x)
            self.assertEqual((x - x).trim().size(), 0)

    def test_wedge_bilinear(self):
        for x, y, z in itertools.product(self.samples[:5], repeat=3):
            left = ((x + y) | z).trim()
            right = ((x | z) + (y | z)).trim()
            self.assertEqual(left, right)

    def test_wedge_associative(self):
        for x, y, z in itertools.product(self.samples, repeat=3):
            self.assertEqual(((x | y) | z).trim(), (x | (y | z)).trim())

    def test_meet_bilinear(self):
        for x, y, z in itertools.product(self.samples[:5], repeat=3):
            left = (x & (y + 2 * z)).trim()
            right = ((x & y) + 2 * (x & z)).trim()
            self.assertEqual(left, right)

    def test_vectors_anticommute(self):
        P = [self.algebra.generator(k) for k in range(4)]
        for a, b in itertools.combinations(P, 2):
            self.assertEqual(a | b, -(b | a))

    def test_self_wedge_of_blades_vanishes(self):
        for index in range(1, self.algebra.dim):
            b = self.algebra.blade(index, 2.0)
            self.assertEqual((b | b).size(), 0)

    def test_compatible_division_round_trip(self):
        for index in range(self.algebra.dim):
            for s in (1.0, -2.5, 0.125):
                b = self.algebra.blade(index, 3.0)
                self.assertEqual((s * b) / b, s)

    def test_dagger_twice(self):
        # complementing twice gives back the blade up to sign(i, ~i) * sign(~i, i)
        for x in self.samples:
            back = ~~x
            for (i, c), (j, d) in zip(x, back):
                self.assertEqual(i, j)
                self.assertEqual(abs(c), abs(d))

    def test_division_by_zero_propagates_nan(self):
        for x in self.samples[1:]:
            y = x / 0
            self.assertEqual(y.size(), x.size())
            self.assertTrue(all(math.isnan(c) for _, c in y))


if __name__ == '__main__':
    unittest.main()
