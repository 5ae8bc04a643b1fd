import pytest

from quadint.config import Settings
from quadint.errors import InvalidArgumentError, UnsupportedNumberDomainError
from quadint.grouping import INERT, RAMIFIED, SPLIT, ResultsGrouping, prime_symbol, splitting_factor
from quadint.quad import quadint
from quadint.results import ResultsCache, ResultsTables
from quadint.ring import QuadraticRing

GAUSSIAN = QuadraticRing(-1)
NOT_UFD = QuadraticRing(-5)


class TestPrimeSymbol:
    """Tests for prime_symbol and splitting_factor"""

    def test_gaussian(self):
        assert prime_symbol(GAUSSIAN, 2) == RAMIFIED
        assert prime_symbol(GAUSSIAN, 3) == INERT
        assert prime_symbol(GAUSSIAN, 5) == SPLIT

    def test_two(self):
        """2 follows the discriminant mod 8"""
        assert prime_symbol(QuadraticRing(-7), 2) == SPLIT
        assert prime_symbol(QuadraticRing(-3), 2) == INERT
        assert prime_symbol(QuadraticRing(2), 2) == RAMIFIED

    def test_splitting_factor(self):
        for p in (2, 5, 13, 17):
            assert splitting_factor(GAUSSIAN, p).norm() == p

        assert splitting_factor(QuadraticRing(-7), 2) == quadint(1, 1, QuadraticRing(-7), 2)
        assert splitting_factor(NOT_UFD, 3) is None


class TestResultsGrouping:
    """Tests for ResultsGrouping"""

    def test_gaussian(self):
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=30)
        assert grouping.inerts() == {3, 7, 11, 19, 23}
        assert set(grouping.splits()) == {5, 13, 17, 29}
        assert grouping.ramifieds() == {2: quadint(1, 1, GAUSSIAN)}
        assert all(pi.norm() == p for p, pi in grouping.splits().items())

    def test_not_principal(self):
        """Primes over which no element of norm p exists are stored as None"""
        grouping = ResultsGrouping(NOT_UFD, prime_pi=10)
        assert grouping.inerts() == set()
        assert grouping.splits() == {3: None, 7: None}
        assert grouping.ramifieds() == {2: None, 5: quadint(0, 1, NOT_UFD)}

    def test_default_bound(self):
        assert ResultsGrouping(GAUSSIAN).prime_pi == ResultsGrouping.DEFAULT_PRIME_PI
        assert ResultsGrouping(GAUSSIAN, settings=Settings(prime_pi=50)).prime_pi == 50

    def test_raise_prime_pi(self):
        """Raising the bound classifies more primes and keeps the old ones"""
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=10)
        before = grouping.splits()
        grouping.raise_prime_pi(20)

        assert grouping.prime_pi == 30
        assert grouping.inerts() == {3, 7, 11, 19, 23}
        after = grouping.splits()
        assert set(after) == {5, 13, 17, 29}
        assert all(after[p] == before[p] for p in before)

    def test_raise_zero(self):
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=10)
        grouping.raise_prime_pi(0)
        assert grouping.prime_pi == 10

    def test_negative(self):
        """The bound never goes down"""
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=10)
        with pytest.raises(InvalidArgumentError):
            grouping.raise_prime_pi(-1)

        with pytest.raises(InvalidArgumentError):
            ResultsGrouping(GAUSSIAN, prime_pi=-5)

    def test_copies(self):
        """Callers cannot change the stored tables"""
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=10)
        grouping.inerts().add(4)
        grouping.splits()[4] = None
        assert 4 not in grouping.inerts()
        assert 4 not in grouping.splits()

    def test_classification(self):
        grouping = ResultsGrouping(GAUSSIAN, prime_pi=10)
        assert grouping.classification(2) == RAMIFIED
        assert grouping.classification(3) == INERT
        assert grouping.classification(5) == SPLIT

        with pytest.raises(InvalidArgumentError):
            grouping.classification(4)

        with pytest.raises(InvalidArgumentError):
            grouping.classification(11)

    def test_unsupported(self, ill_defined_ring):
        with pytest.raises(UnsupportedNumberDomainError):
            ResultsGrouping(ill_defined_ring)

    def test_repr(self):
        assert repr(ResultsGrouping(GAUSSIAN, prime_pi=10)) == "ResultsGrouping(QuadraticRing(-1), prime_pi=10)"


class TestResultsCache:
    """Tests for ResultsCache"""

    def test_real(self):
        """Q(√21): unit (5 + √21)/2 and class number 1"""
        ring = QuadraticRing(21)
        cache = ResultsCache(ring)
        assert not cache.has_unit
        assert not cache.has_class_number

        assert cache.get_unit() == quadint(5, 1, ring, 2)
        assert cache.get_class_number() == 1
        assert cache.has_unit
        assert cache.has_class_number

    def test_imaginary(self):
        cache = ResultsCache(NOT_UFD)
        assert cache.get_class_number() == 2

        with pytest.raises(InvalidArgumentError):
            cache.get_unit()
        assert not cache.has_unit

    def test_overflowed_unit(self):
        """An overflowed unit is stored as None, which still counts as computed"""
        cache = ResultsCache(QuadraticRing(199))
        assert cache.get_unit() is None
        assert cache.has_unit

    def test_unsupported(self, ill_defined_ring):
        with pytest.raises(UnsupportedNumberDomainError):
            ResultsCache(ill_defined_ring)


class TestResultsTables:
    """Tests for ResultsTables"""

    def test_same_objects(self):
        tables = ResultsTables()
        ring = QuadraticRing(-5)
        assert tables.cache(ring) is tables.cache(ring)
        assert tables.grouping(ring) is tables.grouping(ring)
        assert tables.cache(ring).grouping is tables.grouping(ring)

    def test_membership(self):
        tables = ResultsTables()
        assert len(tables) == 0
        assert QuadraticRing(2) not in tables

        tables.grouping(QuadraticRing(2))
        tables.cache(QuadraticRing(3))
        assert QuadraticRing(2) in tables
        assert QuadraticRing(3) in tables
        assert len(tables) == 2

    def test_settings(self):
        tables = ResultsTables(Settings(prime_pi=40))
        assert tables.grouping(GAUSSIAN).prime_pi == 40
