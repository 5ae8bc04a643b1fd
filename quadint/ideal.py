import logging

from math import gcd
from typing import Optional, Union

from sympy import isprime

from quadint.classnumber import is_ufd
from quadint.config import Settings
from quadint.errors import InvalidArgumentError
from quadint.quad import OP_TYPES, quadint
from quadint.ring import QuadraticRing
from quadint.symbols import kronecker
from quadint.units import divide_out_units, elements_of_norm, require_variant

logger = logging.getLogger(__name__)

Hermite = tuple[int, int, int]


def _omega(ring: QuadraticRing) -> quadint:
    """The second element w of the integral basis 1, w"""
    if ring.has_half_integers:
        return quadint(1, 1, ring, 2)

    return quadint(0, 1, ring)


def _coords(x: quadint) -> tuple[int, int]:
    """(u, v) with x = u + v*w"""
    if x.ring.has_half_integers:
        return (x.a - x.b) // x.denom, 2 * x.b // x.denom

    return x.a, x.b


def _from_coords(u: int, v: int, ring: QuadraticRing) -> quadint:
    if ring.has_half_integers:
        return quadint(2 * u + v, v, ring, 2)

    return quadint(u, v, ring)


def _hermite_basis(vectors: list[tuple[int, int]]) -> Hermite:
    """
    Reduce the lattice spanned by vectors to (A, B, C), spanned by (A, 0) and (B, C).

    Each new vector is run through Euclid's algorithm on the second coordinate against (B, C), and
    whatever lands on the first axis is folded into A.
    """
    A = B = C = 0
    for u, v in vectors:
        while v:
            q = C // v
            (B, C), (u, v) = (u, v), (B - q * u, C - q * v)

        A = gcd(A, u)

    if C < 0:
        B, C = -B, -C
    if A:
        B %= A

    return A, B, C


class Ideal:
    """
    An ideal of a quadratic ring, given by its generators.

    The ideal is stored as its Hermite basis over Z: with 1, w the integral basis of the ring (w = √d, or
    (1 + √d)/2 when the ring has half-integers) every nonzero ideal is A*Z + (B + C*w)*Z with A, C > 0 and
    0 <= B < A. Two ideals are equal iff their bases are, whatever generators they were built from.
    """

    __slots__ = ("generators", "ring", "_hermite")

    generators: tuple[quadint, ...]
    ring: QuadraticRing
    _hermite: Hermite

    def __init__(self, *generators: OP_TYPES) -> None:
        """
        Initialize an Ideal.

        Args:
            generators: One or more elements of a ring. Ints are taken as rational integers of that ring.

        Raises:
            InvalidArgumentError: If no generator is given.
            TypeError: If no generator is a quadint, so the ring is unknown.
            DegreeOverflowError: If generators come from different rings.
        """
        if not generators:
            raise InvalidArgumentError("An ideal needs at least one generator", generators)

        first = next((g for g in generators if isinstance(g, quadint)), None)
        if first is None:
            raise TypeError("At least one generator must be a quadint")

        ring = first.ring
        require_variant(ring)

        gens = []
        for g in generators:
            g = first._from_obj(g)
            if g.ring != ring and g.is_rational:
                g = quadint(g.a, 0, ring)
            first._check_same_ring(g, "generate an ideal from")
            gens.append(g)

        w = _omega(ring)
        self.ring = ring
        self.generators = tuple(gens)
        self._hermite = _hermite_basis([_coords(x) for g in gens for x in (g, g * w)])

    @classmethod
    def whole(cls, ring: QuadraticRing) -> "Ideal":
        """The ring itself, as the ideal generated by 1."""
        return cls(quadint(1, 0, ring))

    def basis(self) -> tuple[quadint, quadint]:
        """The Z-basis (A, B + C*w) of the ideal."""
        A, B, C = self._hermite
        return quadint(A, 0, self.ring), _from_coords(B, C, self.ring)

    def norm(self) -> int:
        """The index of the ideal in the ring, |N(a)| for a principal ideal (a). The zero ideal has norm 0."""
        A, _, C = self._hermite
        return A * C

    # region Membership
    def contains(self, other: Union[OP_TYPES, "Ideal"]) -> bool:
        """
        True iff other lies in this ideal.

        Args:
            other: An element, or an ideal, which is contained iff all its generators are.
                Elements of other rings are not contained, apart from rational integers.
        """
        if isinstance(other, Ideal):
            return other.ring == self.ring and all(self.contains(g) for g in other.generators)

        x = self.generators[0]._from_obj(other)
        if x.ring != self.ring:
            if not x.is_rational:
                return False
            x = quadint(x.a, 0, self.ring)

        A, B, C = self._hermite
        u, v = _coords(x)
        if C:
            if v % C:
                return False
            u -= (v // C) * B
        elif v:
            return False

        return u % A == 0 if A else u == 0

    def __contains__(self, other: Union[OP_TYPES, "Ideal"]) -> bool:
        return self.contains(other)
    # endregion

    # region Classification
    def principal_generator(self, settings: Optional[Settings] = None) -> Optional[quadint]:
        """
        A single generator of the ideal, or None if none was found.

        An element of the ideal whose norm is ± the norm of the ideal generates it, so the elements of
        that norm are searched for one inside the ideal.

        Returns:
            quadint: The canonical associate of the generator (see divide_out_units).
        """
        n = self.norm()
        if n == 0:
            return quadint(0, 0, self.ring)

        for x in elements_of_norm(self.ring, n, settings):
            if self.contains(x):
                return divide_out_units(x, settings)

        return None

    def is_principal(self, settings: Optional[Settings] = None) -> bool:
        if self.principal_generator(settings) is not None:
            return True

        # A truncated norm search can miss the generator, a class number of 1 cannot
        if is_ufd(self.ring, settings=settings):
            logger.warning("No generator of norm %d found for %r in a ring with class number 1", self.norm(), self)
            return True

        return False

    def is_maximal(self) -> bool:
        """
        True iff the ideal is a nonzero prime ideal, which in these rings makes it maximal.

        Prime ideals have prime norm p, or norm p^2 when they are (p) for a rational prime p that stays
        inert.
        """
        n = self.norm()
        if n < 2:
            return False
        if isprime(n):
            return True

        A, B, C = self._hermite
        return A == C and B == 0 and isprime(A) and kronecker(self.ring.discriminant, A) == -1
    # endregion

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ideal):
            return NotImplemented

        return self.ring == other.ring and self._hermite == other._hermite

    def __hash__(self) -> int:
        return hash((self.ring, self._hermite))

    def __repr__(self) -> str:
        return f"Ideal({', '.join(map(repr, self.generators))})"
