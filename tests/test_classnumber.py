import pytest

from quadint.classnumber import field_class_number, is_ufd, minkowski_prime_bound
from quadint.errors import InvalidArgumentError, UnsupportedNumberDomainError
from quadint.grouping import ResultsGrouping
from quadint.results import ResultsTables
from quadint.ring import QuadraticRing


class TestFieldClassNumber:
    """Tests for field_class_number"""

    @pytest.mark.parametrize("radicand", [-1, -2, -3, -7, -11, -19, -43, -67, -163])
    def test_heegner(self, radicand):
        """The nine imaginary rings with unique factorization"""
        assert field_class_number(QuadraticRing(radicand)) == 1

    @pytest.mark.parametrize("radicand, expected", [
        (-5, 2), (-6, 2), (-10, 2), (-13, 2), (-15, 2),
        (-23, 3), (-31, 3),
        (-14, 4), (-17, 4), (-21, 4),
        (-47, 5),
        (-29, 6),
    ])
    def test_imaginary(self, radicand, expected):
        assert field_class_number(QuadraticRing(radicand)) == expected

    @pytest.mark.parametrize("radicand", [2, 3, 5, 6, 7, 13, 21, 23, 29, 31])
    def test_real_one(self, radicand):
        assert field_class_number(QuadraticRing(radicand)) == 1

    @pytest.mark.parametrize("radicand, expected", [
        (10, 2), (15, 2), (26, 2), (30, 2), (34, 2), (35, 2), (65, 2),
        (79, 3),
    ])
    def test_real(self, radicand, expected):
        """Real rings, with units of norm -1 (10, 26, 65) and of norm 1 (the rest)"""
        assert field_class_number(QuadraticRing(radicand)) == expected

    def test_grouping_reused(self):
        """A passed grouping is extended up to the Minkowski bound"""
        ring = QuadraticRing(10)
        grouping = ResultsGrouping(ring, prime_pi=2)
        assert field_class_number(ring, grouping) == 2
        assert grouping.prime_pi >= minkowski_prime_bound(ring)
        assert 3 in grouping.splits()

    def test_grouping_wrong_ring(self):
        with pytest.raises(InvalidArgumentError):
            field_class_number(QuadraticRing(10), ResultsGrouping(QuadraticRing(15)))

    def test_unsupported(self, ill_defined_ring):
        with pytest.raises(UnsupportedNumberDomainError):
            field_class_number(ill_defined_ring)


class TestMinkowskiBound:
    """Tests for minkowski_prime_bound"""

    def test_main(self):
        assert minkowski_prime_bound(QuadraticRing(10)) == 3
        assert minkowski_prime_bound(QuadraticRing(21)) == 2
        assert minkowski_prime_bound(QuadraticRing(-5)) == 2
        assert minkowski_prime_bound(QuadraticRing(-163)) == 8


class TestIsUFD:
    """Tests for is_ufd"""

    def test_main(self):
        assert is_ufd(QuadraticRing(-1))
        assert is_ufd(QuadraticRing(-163))
        assert not is_ufd(QuadraticRing(-5))
        assert is_ufd(QuadraticRing(2))
        assert is_ufd(QuadraticRing(23))
        assert not is_ufd(QuadraticRing(10))

    def test_tables(self):
        """With tables the class number is computed once and remembered"""
        tables = ResultsTables()
        ring = QuadraticRing(79)
        assert not is_ufd(ring, tables)
        assert tables.cache(ring).get_class_number() == 3
        assert len(tables) == 1
