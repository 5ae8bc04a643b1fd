import random

import pytest

from quadint.errors import DegreeOverflowError, NonEuclideanDomainError, UnsupportedNumberDomainError
from quadint.gcd import (
    NORM_EUCLIDEAN_REAL,
    euclidean_gcd,
    is_divisible_by,
    is_norm_euclidean,
    try_euclidean_gcd_anyway,
)
from quadint.quad import quadint
from quadint.ring import QuadraticRing

GAUSSIAN = QuadraticRing(-1)
ROOT2 = QuadraticRing(2)
NOT_EUCLIDEAN = QuadraticRing(-5)


class TestIsDivisibleBy:
    """Tests for is_divisible_by"""

    def test_main(self):
        assert is_divisible_by(quadint(6, 0, NOT_EUCLIDEAN), quadint(1, 1, NOT_EUCLIDEAN))
        assert not is_divisible_by(quadint(2, 0, NOT_EUCLIDEAN), quadint(1, 1, NOT_EUCLIDEAN))

    def test_int_operands(self):
        x = quadint(4, 2, GAUSSIAN)
        assert is_divisible_by(x, 2)
        assert not is_divisible_by(x, 3)
        assert is_divisible_by(10, quadint(1, 2, GAUSSIAN))

    def test_zero_divisor(self):
        """Division by zero answers False"""
        assert not is_divisible_by(quadint(3, 1, GAUSSIAN), 0)
        assert not is_divisible_by(quadint(3, 1, GAUSSIAN), quadint(0, 0, GAUSSIAN))

    def test_no_quadint(self):
        with pytest.raises(TypeError):
            is_divisible_by(4, 2)


class TestIsNormEuclidean:
    """Tests for is_norm_euclidean"""

    def test_main(self):
        assert is_norm_euclidean(GAUSSIAN)
        assert is_norm_euclidean(QuadraticRing(-11))
        assert is_norm_euclidean(QuadraticRing(73))
        assert not is_norm_euclidean(NOT_EUCLIDEAN)
        assert not is_norm_euclidean(QuadraticRing(-19))
        assert not is_norm_euclidean(QuadraticRing(10))

    def test_unsupported(self, ill_defined_ring):
        with pytest.raises(UnsupportedNumberDomainError):
            is_norm_euclidean(ill_defined_ring)


class TestEuclideanGCD:
    """Tests for euclidean_gcd"""

    def test_gaussian(self):
        """gcd(5, 3 + i) = 2 - i"""
        assert euclidean_gcd(quadint(5, 0, GAUSSIAN), quadint(3, 1, GAUSSIAN)) == quadint(2, -1, GAUSSIAN)
        assert euclidean_gcd(quadint(3, 1, GAUSSIAN), quadint(5, 0, GAUSSIAN)) == quadint(2, -1, GAUSSIAN)
        assert euclidean_gcd(5, quadint(3, 1, GAUSSIAN)) == quadint(2, -1, GAUSSIAN)

    def test_real(self):
        """In real rings the gcd is the associate in [1, e)"""
        assert euclidean_gcd(quadint(7, 0, ROOT2), quadint(3, 1, ROOT2)) == quadint(-1, 2, ROOT2)

    def test_eisenstein(self):
        """(5 + √-3)/2 has norm 7"""
        ring = QuadraticRing(-3)
        assert euclidean_gcd(quadint(7, 0, ring), quadint(5, 1, ring, 2)) == quadint(5, 1, ring, 2)

    def test_zero(self):
        """gcd(0, x) is x up to units"""
        x = quadint(-1, 2, GAUSSIAN)
        assert euclidean_gcd(quadint(0, 0, GAUSSIAN), x) == quadint(2, 1, GAUSSIAN)
        assert euclidean_gcd(x, 0) == quadint(2, 1, GAUSSIAN)

    def test_coprime(self):
        assert euclidean_gcd(quadint(3, 0, GAUSSIAN), quadint(2, 1, GAUSSIAN)) == quadint(1, 0, GAUSSIAN)

    @pytest.mark.parametrize("radicand", [-1, -2, -3, -7, -11, 2, 3, 5, 13])
    def test_common_factor(self, radicand):
        """The gcd divides both operands and is a multiple of any common factor"""
        ring = QuadraticRing(radicand)
        common = quadint(2, 1, ring)
        pairs = [((3, 1), (1, -2)), ((5, 0), (4, 3)), ((7, 2), (2, 7)), ((1, 1), (1, 0))]
        for (a, b), (c, e) in pairs:
            x = quadint(a, b, ring) * common
            y = quadint(c, e, ring) * common
            g = euclidean_gcd(x, y)
            assert is_divisible_by(x, g)
            assert is_divisible_by(y, g)
            assert is_divisible_by(g, common)

    def test_symmetric(self):
        for x, y in [((4, 1), (2, 3)), ((10, 0), (1, 3)), ((6, 6), (9, 3))]:
            a, b = quadint(*x, GAUSSIAN), quadint(*y, GAUSSIAN)
            assert euclidean_gcd(a, b) == euclidean_gcd(b, a)

    def test_not_euclidean(self):
        """Rings outside the norm-Euclidean list are refused, keeping the operands"""
        a, b = quadint(2, 0, NOT_EUCLIDEAN), quadint(1, 1, NOT_EUCLIDEAN)
        with pytest.raises(NonEuclideanDomainError) as exc:
            euclidean_gcd(a, b)

        assert exc.value.operands == (a, b)

    def test_across_rings(self):
        with pytest.raises(DegreeOverflowError):
            euclidean_gcd(quadint(1, 1, ROOT2), quadint(1, 1, QuadraticRing(3)))


class TestTryEuclideanGCDAnyway:
    """Tests for try_euclidean_gcd_anyway"""

    def test_stall(self):
        """gcd(2, 1 + √-5) has no generator, the stalled divisor comes back negated"""
        with pytest.raises(NonEuclideanDomainError) as exc:
            euclidean_gcd(quadint(2, 0, NOT_EUCLIDEAN), quadint(1, 1, NOT_EUCLIDEAN))

        res = try_euclidean_gcd_anyway(exc.value)
        assert res == quadint(-2, 0, NOT_EUCLIDEAN)
        assert res.reg_part < 0

    def test_lucky(self):
        """Operands whose descent happens to work give the real gcd"""
        ring = NOT_EUCLIDEAN
        error = NonEuclideanDomainError("test", quadint(6, 0, ring), quadint(3, 0, ring))
        assert try_euclidean_gcd_anyway(error) == quadint(3, 0, ring)

    def test_euclidean_ring(self):
        """In a norm-Euclidean ring the answer matches euclidean_gcd"""
        error = NonEuclideanDomainError("test", quadint(5, 0, GAUSSIAN), quadint(3, 1, GAUSSIAN))
        assert try_euclidean_gcd_anyway(error) == quadint(2, -1, GAUSSIAN)

    def test_real_ring_sign(self):
        """A completed descent in a real ring never looks like the stall mark"""
        ring = QuadraticRing(10)
        error = NonEuclideanDomainError("test", quadint(9, 0, ring), quadint(-1, 1, ring))
        res = try_euclidean_gcd_anyway(error)
        assert res == quadint(1, -1, ring)
        assert res.reg_part >= 0
        assert is_divisible_by(quadint(9, 0, ring), res)

    def test_pure_surd_stall(self):
        """A stalled pure-surd divisor has no regular part to negate"""
        ring = NOT_EUCLIDEAN
        error = NonEuclideanDomainError("test", quadint(5, 1, ring), quadint(0, 2, ring))
        assert try_euclidean_gcd_anyway(error) == quadint(0, 2, ring)


class TestRealRingDescent:
    """Tests for euclidean_gcd over every norm-Euclidean real ring"""

    @staticmethod
    def random_element(rng: random.Random, ring: QuadraticRing) -> quadint:
        if ring.has_half_integers and rng.random() < 0.5:
            return quadint(2 * rng.randint(-40, 40) + 1, 2 * rng.randint(-40, 40) + 1, ring, 2)

        return quadint(rng.randint(-80, 80), rng.randint(-80, 80), ring)

    def test_far_quotient(self):
        """gcd(101 - 9√73, -174 + 171√73) needs a quotient several surd steps out"""
        ring = QuadraticRing(73)
        x, y = quadint(101, -9, ring), quadint(-174, 171, ring)
        g = euclidean_gcd(x, y)
        assert is_divisible_by(x, g)
        assert is_divisible_by(y, g)

    @pytest.mark.parametrize("radicand", sorted(NORM_EUCLIDEAN_REAL))
    def test_random_pairs(self, radicand):
        """The descent completes and the gcd divides both operands"""
        ring = QuadraticRing(radicand)
        rng = random.Random(radicand)
        for _ in range(25):
            x, y = self.random_element(rng, ring), self.random_element(rng, ring)
            if not x or not y:
                continue

            g = euclidean_gcd(x, y)
            assert is_divisible_by(x, g)
            assert is_divisible_by(y, g)
