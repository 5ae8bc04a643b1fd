import logging

from functools import cache
from typing import Optional

from sympy import primerange

from quadint.config import Settings, resolve
from quadint.errors import InvalidArgumentError, NonEuclideanDomainError
from quadint.gcd import euclidean_gcd, is_norm_euclidean
from quadint.quad import quadint
from quadint.ring import QuadraticRing
from quadint.symbols import kronecker, legendre
from quadint.units import divide_out_units, elements_of_norm, require_variant
from quadint.utils import mod_sqrt_prime

logger = logging.getLogger(__name__)

INERT, RAMIFIED, SPLIT = -1, 0, 1


def prime_symbol(ring: QuadraticRing, p: int) -> int:
    """
    How the rational prime p behaves in ring: -1 inert, 0 ramified, 1 split.

    Odd primes use the Legendre symbol of the radicand; 2 uses the Kronecker symbol of the discriminant.
    """
    if p == 2:
        return kronecker(ring.discriminant, 2)

    return legendre(ring.radicand, p)


@cache
def splitting_factor(ring: QuadraticRing, p: int, settings: Optional[Settings] = None) -> Optional[quadint]:
    """
    An element of norm ±p, the principal generator of a prime ideal over a split or ramified p.

    In norm-Euclidean rings it is gcd(p, x + sqrt(d)) with x^2 = d (mod p), the way a prime over p is
    built in proofs; otherwise, or if that gcd misses, the norm equation is searched directly.

    Returns:
        Optional[quadint]: The canonical associate of such an element, or None when the ideals over p
            are not principal (or the search limit was hit first).
    """
    if is_norm_euclidean(ring):
        x = mod_sqrt_prime(ring.radicand, p)
        if x is not None:
            try:
                g = euclidean_gcd(quadint(p, 0, ring), quadint(x, 1, ring), settings)
            except NonEuclideanDomainError:
                logger.debug("gcd construction of a prime over %d failed in %r", p, ring)
            else:
                if abs(g.norm()) == p:
                    return g

    for m in elements_of_norm(ring, p, settings):
        return divide_out_units(m, settings)

    return None


class ResultsGrouping:
    """
    Classification of the rational primes up to prime_pi in one ring.

    Each prime is inert, split or ramified. Split and ramified primes are stored with one element of
    norm ±p (the conjugate gives the other factor of a split prime), or None when no such element exists.

    Classification happens lazily on first access, and raise_prime_pi only ever adds primes.
    """

    DEFAULT_PRIME_PI = 720

    def __init__(self, ring: QuadraticRing, prime_pi: Optional[int] = None, settings: Optional[Settings] = None) -> None:
        require_variant(ring)
        self.settings = resolve(settings)

        if prime_pi is None:
            prime_pi = self.settings.prime_pi
        if prime_pi < 0:
            raise InvalidArgumentError(f"prime_pi must be non-negative, got {prime_pi}", prime_pi)

        self._ring = ring
        self._prime_pi = prime_pi
        self._classified_through = 1
        self._inerts: set[int] = set()
        self._splits: dict[int, Optional[quadint]] = {}
        self._ramifieds: dict[int, Optional[quadint]] = {}

    @property
    def ring(self) -> QuadraticRing:
        return self._ring

    @property
    def prime_pi(self) -> int:
        return self._prime_pi

    def raise_prime_pi(self, increment: int) -> None:
        """
        Extend the bound of classified primes.

        Raises:
            InvalidArgumentError: If increment is negative.
        """
        if increment < 0:
            raise InvalidArgumentError(f"Cannot lower prime_pi (increment {increment})", increment)

        self._prime_pi += increment

    def _classify(self) -> None:
        if self._classified_through >= self._prime_pi:
            return

        logger.debug("Classifying primes %d..%d in %r", self._classified_through + 1, self._prime_pi, self._ring)
        for p in primerange(self._classified_through + 1, self._prime_pi + 1):
            p = int(p)
            symbol = prime_symbol(self._ring, p)
            if symbol == INERT:
                self._inerts.add(p)
            elif symbol == SPLIT:
                self._splits[p] = splitting_factor(self._ring, p, self.settings)
            else:
                self._ramifieds[p] = splitting_factor(self._ring, p, self.settings)

        self._classified_through = self._prime_pi

    def inerts(self) -> set[int]:
        self._classify()
        return set(self._inerts)

    def splits(self) -> dict[int, Optional[quadint]]:
        self._classify()
        return dict(self._splits)

    def ramifieds(self) -> dict[int, Optional[quadint]]:
        self._classify()
        return dict(self._ramifieds)

    def classification(self, p: int) -> int:
        """
        INERT, RAMIFIED or SPLIT for a prime p up to prime_pi.

        Raises:
            InvalidArgumentError: If p is not a classified prime.
        """
        self._classify()
        if p in self._inerts:
            return INERT
        if p in self._splits:
            return SPLIT
        if p in self._ramifieds:
            return RAMIFIED

        raise InvalidArgumentError(f"{p} is not a prime up to {self._prime_pi}", p)

    def __repr__(self) -> str:
        return f"ResultsGrouping({self._ring!r}, prime_pi={self._prime_pi})"
