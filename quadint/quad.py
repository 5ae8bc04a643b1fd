from fractions import Fraction
from math import ceil, floor, sqrt
from typing import ClassVar, Iterator, Optional, Union

from quadint.config import INT_MAX, INT_MIN, LONG_MAX, LONG_MIN
from quadint.errors import (
    ArithmeticOverflowError,
    DegreeOverflowError,
    InvalidArgumentError,
    NotDivisibleError,
    ZeroDivisorError,
)
from quadint.ring import QuadraticRing
from quadint.symbols import kernel
from quadint.utils import floor_sqrt_scaled

OTHER_OP_TYPES = int
_OTHER_OP_TYPES = (int,)  # mypyc-friendly for isinstance
OP_TYPES = Union["quadint", OTHER_OP_TYPES]


def _in_int_range(n: int) -> bool:
    return INT_MIN <= n <= INT_MAX


class quadint:
    """
    Quadratic integer (a + b*sqrt(d)) / denom in the ring of integers of Q(sqrt(d)).

    Stored exactly as the two numerators a, b, the denominator (1 or 2) and the ring.

    Integrality constraint:
        denom == 2 only in rings with d = 1 (mod 4), and then a, b are both odd.
        Values given with denom == 2 and both numerators even are reduced to denom == 1.

    Notes:
      - Numerators are bounded to the signed 32-bit range; leaving it raises ArithmeticOverflowError.
      - Values from different rings only combine when one of them is a rational integer,
        or when both are pure surds being multiplied or divided.
    """

    __slots__ = ("a", "b", "denom", "ring")

    a: int
    b: int
    denom: int
    ring: QuadraticRing

    # How many surd steps either side of the exact quotient the real-ring division explores first,
    # and how far it may widen when no candidate leaves a remainder smaller than the divisor
    QUOTIENT_WINDOW: ClassVar[int] = 4
    QUOTIENT_WINDOW_LIMIT: ClassVar[int] = 256

    def __init__(self, a: int = 0, b: int = 0, ring: Optional[QuadraticRing] = None, denom: int = 1) -> None:
        """
        Initialize a quadint.

        Args:
            a: Regular part numerator.
            b: Surd part numerator.
            ring: The ring the value lives in.
            denom: 1 or 2 (a negative denominator flips the signs of both numerators).

        Raises:
            InvalidArgumentError: If the ring is missing, the denominator is not ±1 or ±2,
                or the numerators break the half-integer parity rule.
            ArithmeticOverflowError: If a numerator does not fit the 32-bit range.
        """
        if not isinstance(ring, QuadraticRing):
            raise InvalidArgumentError("A quadint needs a QuadraticRing", ring)

        for n in (a, b, denom):
            if not isinstance(n, _OTHER_OP_TYPES):
                raise InvalidArgumentError(f"quadint parts must be ints, got {type(n).__name__}", n)

        a0, b0, c0 = int(a), int(b), int(denom)
        if c0 < 0:
            a0, b0, c0 = -a0, -b0, -c0

        if c0 not in (1, 2):
            raise InvalidArgumentError(f"Denominator must be 1 or 2, got {denom}", denom)

        if c0 == 2:
            if (a0 ^ b0) & 1:
                raise InvalidArgumentError("With denominator 2, both numerators must have the same parity", (a, b))

            if a0 & 1 == 0:
                a0, b0, c0 = a0 // 2, b0 // 2, 1
            elif not ring.has_half_integers:
                raise InvalidArgumentError(f"{ring!r} has no half-integers", (a, b))

        if not (_in_int_range(a0) and _in_int_range(b0)):
            raise ArithmeticOverflowError("Coefficient out of the 32-bit range", a0, b0, ring)

        self.a, self.b, self.denom, self.ring = a0, b0, c0, ring

    # region constructors / conversions
    @classmethod
    def _make(cls, a: int, b: int, ring: QuadraticRing, denom: int = 1) -> "quadint":
        return cls(a, b, ring, denom)

    def _from_obj(self, n: OP_TYPES) -> "quadint":
        """Convert an int to a quadint of this ring"""
        if isinstance(n, quadint):
            return n

        if isinstance(n, _OTHER_OP_TYPES):
            return self._make(int(n), 0, self.ring)

        raise TypeError(f"Unsupported operand type {type(n).__name__} for quadint")

    @staticmethod
    def _integral(reg: Fraction, surd: Fraction, ring: QuadraticRing) -> Optional["quadint"]:
        """The quadint reg + surd*sqrt(d) if it is an algebraic integer of ring, else None"""
        if reg.denominator == 1 and surd.denominator == 1:
            return quadint(reg.numerator, surd.numerator, ring)

        if ring.has_half_integers and reg.denominator == 2 and surd.denominator == 2:
            return quadint(reg.numerator, surd.numerator, ring, 2)

        return None

    @classmethod
    def nearby(cls, reg: Fraction, surd: Fraction, ring: QuadraticRing, window: int = 0) -> list["quadint"]:
        """
        Lattice points of ring around reg + surd*sqrt(d).

        Args:
            reg: Regular part of the target.
            surd: Surd part of the target.
            ring: The ring to take points from.
            window: Extra surd steps to explore either side. In real rings each step also adds the regular
                parts that nearly cancel the surd difference, where the indefinite norm is small.

        Returns:
            list: The candidates, sorted by numerators.
        """
        scale = 2 if ring.has_half_integers else 1
        x, y = reg * scale, surd * scale

        # Half-integer points need one extra step to meet the parity condition
        pad = scale - 1
        d = ring.radicand

        points: set[tuple[int, int]] = set()
        for s in range(floor(y) - pad - window, ceil(y) + pad + window + 1):
            regs = set(range(floor(x) - pad, ceil(x) + pad + 1))
            if window and d > 0:
                h = floor_sqrt_scaled(d, y - s)
                for c in (floor(x) - h, floor(x) + h):
                    regs.update(range(c - pad - 1, c + pad + 2))

            for r in regs:
                if scale == 2 and (r - s) & 1:
                    continue
                if _in_int_range(r) and _in_int_range(s):
                    points.add((r, s))

        return [cls._make(r, s, ring, scale) for r, s in sorted(points)]
    # endregion

    @property
    def reg_part(self) -> int:
        return self.a

    @property
    def surd_part(self) -> int:
        return self.b

    @property
    def is_rational(self) -> bool:
        """True iff the surd part is zero (the value is a rational integer)."""
        return self.b == 0

    def algebraic_degree(self) -> int:
        if self.b:
            return 2

        return 1 if self.a else 0

    def norm(self) -> int:
        """
        Field norm, the product of the value and its conjugate.

        Returns:
            int: (a^2 - d*b^2) / denom^2, always a rational integer.

        Raises:
            ArithmeticOverflowError: If the norm does not fit the 64-bit range.
        """
        n = (self.a * self.a - self.ring.radicand * self.b * self.b) // (self.denom * self.denom)
        if not LONG_MIN <= n <= LONG_MAX:
            raise ArithmeticOverflowError("Norm out of the 64-bit range", self.a, self.b, self.ring)

        return n

    def trace(self) -> int:
        return 2 * self.a // self.denom

    def conjugate(self) -> "quadint":
        """Field conjugation: (a + b*sqrt(d))/c -> (a - b*sqrt(d))/c."""
        return self._make(self.a, -self.b, self.ring, self.denom)

    def min_polynomial_coeffs(self) -> tuple[int, int, int]:
        """
        Coefficients (c0, c1, c2) of the minimal polynomial c0 + c1*x + c2*x^2, lowest degree first.

        Degree 0 gives x, degree 1 gives x - a.
        """
        degree = self.algebraic_degree()
        if degree == 0:
            return 0, 1, 0
        if degree == 1:
            return -self.a, 1, 0

        return self.norm(), -self.trace(), 1

    # region arithmetic
    def _check_same_ring(self, other: "quadint", verb: str) -> None:
        if self.ring != other.ring:
            raise DegreeOverflowError(f"Cannot {verb} numbers from {self.ring!r} and {other.ring!r}", self, other)

    def plus(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, _OTHER_OP_TYPES):
            return self._make(self.a + int(other) * self.denom, self.b, self.ring, self.denom)

        other = self._from_obj(other)

        # A rational integer belongs to every ring
        if other.is_rational:
            return self.plus(other.a)
        if self.is_rational:
            return other.plus(self.a)

        self._check_same_ring(other, "add")

        if self.denom == other.denom:
            return self._make(self.a + other.a, self.b + other.b, self.ring, self.denom)

        # Mixed denominators: lift both to halves
        s, t = 2 // self.denom, 2 // other.denom
        return self._make(self.a * s + other.a * t, self.b * s + other.b * t, self.ring, 2)

    def minus(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, _OTHER_OP_TYPES):
            return self.plus(-int(other))

        return self.plus(-self._from_obj(other))

    def times(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, _OTHER_OP_TYPES):
            k = int(other)
            return self._make(self.a * k, self.b * k, self.ring, self.denom)

        other = self._from_obj(other)

        if other.is_rational:
            return self.times(other.a)
        if self.is_rational:
            return other.times(self.a)

        if self.ring != other.ring:
            if self.a == 0 and other.a == 0:
                return self._times_pure_surds(other)

            raise DegreeOverflowError(f"Cannot multiply numbers from {self.ring!r} and {other.ring!r}", self, other)

        # If x=(A+B√d)/c and y=(E+F√d)/e then xy=(AE+BFd + (AF+BE)√d)/(ce)
        A, B, E, F = self.a, self.b, other.a, other.b
        reg = A * E + B * F * self.ring.radicand
        surd = A * F + B * E
        den = self.denom * other.denom

        if den == 4:
            # Both factors have same-parity numerators and d = 1 (mod 4), so reg and surd are even
            reg, surd, den = reg // 2, surd // 2, 2

        return self._make(reg, surd, self.ring, den)

    def _times_pure_surds(self, other: "quadint") -> "quadint":
        """
        b1*sqrt(d1) * b2*sqrt(d2) for two different rings.

        The radicand product is reduced to its squarefree kernel, and the result lands in a new ring.
        """
        d1, d2 = self.ring.radicand, other.ring.radicand
        rad = d1 * d2
        surd = self.b * other.b
        if d1 < 0 and d2 < 0:
            # i*sqrt(m) * i*sqrt(n) == -sqrt(mn)
            surd = -surd

        # Each prime occurs at most twice in rad; the repeated ones come out of the root
        coat = rad // kernel(rad)
        rad //= coat * coat
        if not _in_int_range(rad):
            raise ArithmeticOverflowError("Radicand product out of the 32-bit range", 0, surd * coat)

        return self._make(0, surd * coat, QuadraticRing(rad), 1)

    def _quotient_fractions(self, other: "quadint") -> tuple[Fraction, Fraction]:
        """Exact self/other in the same ring as (reg, surd) fractions, via the divisor's conjugate."""
        A, B, c = self.a, self.b, self.denom
        E, F, e = other.a, other.b, other.denom
        d = self.ring.radicand

        n = (E * E - d * F * F) // (e * e)
        den = c * e * n
        return Fraction(A * E - B * F * d, den), Fraction(B * E - A * F, den)

    def divides(self, other: OP_TYPES) -> "quadint":
        """
        Exact division self / other.

        Returns:
            quadint: The exact quotient.

        Raises:
            ZeroDivisorError: If other is zero.
            NotDivisibleError: If the quotient is not an algebraic integer, carrying the exact fractions.
            DegreeOverflowError: If the operands come from different rings and are not both pure surds.
        """
        if isinstance(other, _OTHER_OP_TYPES):
            k = int(other)
            if k == 0:
                raise ZeroDivisorError(self)

            reg, surd = Fraction(self.a, self.denom * k), Fraction(self.b, self.denom * k)
            q = self._integral(reg, surd, self.ring)
            if q is None:
                raise NotDivisibleError(self, self._make(k, 0, self.ring), (reg, surd))
            return q

        other = self._from_obj(other)
        if not other:
            raise ZeroDivisorError(self)

        if other.is_rational:
            return self.divides(other.a)

        if self.ring != other.ring:
            if self.is_rational:
                return self._make(self.a, 0, other.ring).divides(other)

            if self.a == 0 and other.a == 0:
                # x / y == x * conj(y) / N(y), and x * conj(y) is again a pure surd
                return self._times_pure_surds(other.conjugate()).divides(other.norm())

            raise DegreeOverflowError(f"Cannot divide numbers from {self.ring!r} and {other.ring!r}", self, other)

        reg, surd = self._quotient_fractions(other)
        q = self._integral(reg, surd, self.ring)
        if q is None:
            raise NotDivisibleError(self, other, (reg, surd))

        return q

    def __add__(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, (quadint, *_OTHER_OP_TYPES)):
            return self.plus(other)

        return NotImplemented

    def __radd__(self, other: OTHER_OP_TYPES) -> "quadint":
        return self.__add__(other)

    def __sub__(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, (quadint, *_OTHER_OP_TYPES)):
            return self.minus(other)

        return NotImplemented

    def __rsub__(self, other: OTHER_OP_TYPES) -> "quadint":
        return self.__neg__().__add__(other)

    def __neg__(self) -> "quadint":
        return self._make(-self.a, -self.b, self.ring, self.denom)

    def __pos__(self) -> "quadint":
        return self

    def __mul__(self, other: OP_TYPES) -> "quadint":
        if isinstance(other, (quadint, *_OTHER_OP_TYPES)):
            return self.times(other)

        return NotImplemented

    def __rmul__(self, other: OTHER_OP_TYPES) -> "quadint":
        return self.__mul__(other)

    def __pow__(self, exp: int) -> "quadint":
        e = int(exp)
        if e < 0:
            raise ValueError("Negative powers not supported")

        result = self._make(1, 0, self.ring)
        base = self
        while e:
            if e & 1:
                result = result * base

            e >>= 1
            if e:
                base = base * base

        return result

    def __truediv__(self, other: OP_TYPES) -> "quadint":
        # Unlike int, / is exact division here; // and % give the Euclidean quotient and remainder
        if isinstance(other, (quadint, *_OTHER_OP_TYPES)):
            return self.divides(other)

        return NotImplemented

    def __rtruediv__(self, other: OTHER_OP_TYPES) -> "quadint":
        if isinstance(other, _OTHER_OP_TYPES):
            return self._from_obj(other).divides(self)

        return NotImplemented
    # endregion

    # region Euclidean division
    def __divmod__(self, other: OP_TYPES) -> tuple["quadint", "quadint"]:
        """
        Division with remainder by nearest lattice point.

            self = q * other + r

        The quotient minimizes |N(r)| among the lattice points near the exact quotient. In real rings the
        search widens, doubling from QUOTIENT_WINDOW up to QUOTIENT_WINDOW_LIMIT surd steps, until
        |N(r)| < |N(other)|. In norm-Euclidean rings such a quotient exists; elsewhere it may not, which is
        what the GCD checks for.

        Returns:
            (q, r)

        Raises:
            ZeroDivisorError: if other == 0
            DegreeOverflowError: if the operands come from incompatible rings
        """
        if not isinstance(other, (quadint, *_OTHER_OP_TYPES)):
            return NotImplemented

        num, den = self, self._from_obj(other)
        if not den:
            raise ZeroDivisorError(self)

        if num.ring != den.ring:
            if den.is_rational:
                den = num._make(den.a, 0, num.ring)
            elif num.is_rational:
                num = den._make(num.a, 0, den.ring)
            else:
                raise DegreeOverflowError(f"Cannot divide numbers from {num.ring!r} and {den.ring!r}", num, den)

        ring = num.ring
        reg, surd = num._quotient_fractions(den)
        exact = self._integral(reg, surd, ring)
        if exact is not None:
            return exact, num._make(0, 0, ring)

        d = ring.radicand
        window = self.QUOTIENT_WINDOW if d > 0 else 0

        def _key(q: quadint) -> tuple[Fraction, int, int, int]:
            x = reg - Fraction(q.a, q.denom)
            y = surd - Fraction(q.b, q.denom)
            return abs(x * x - d * y * y), abs(q.a) + abs(q.b), q.a, q.b

        candidates = self.nearby(reg, surd, ring, window)
        if not candidates:
            raise ArithmeticOverflowError("Quotient out of the 32-bit range", reg.numerator, surd.numerator, ring)

        q = min(candidates, key=_key)
        while d > 0 and _key(q)[0] >= 1 and window < self.QUOTIENT_WINDOW_LIMIT:
            # Near the asymptotes of the norm hyperbola the closer lattice points can sit several steps out
            window *= 2
            q = min(self.nearby(reg, surd, ring, window) or [q], key=_key)

        return q, num - q * den

    def __floordiv__(self, other: OP_TYPES) -> "quadint":
        q, _ = divmod(self, other)
        return q

    def __rfloordiv__(self, other: OTHER_OP_TYPES) -> "quadint":
        if isinstance(other, _OTHER_OP_TYPES):
            return self._from_obj(other).__floordiv__(self)

        return NotImplemented

    def __mod__(self, other: OP_TYPES) -> "quadint":
        _, r = divmod(self, other)
        return r
    # endregion

    def __bool__(self) -> bool:
        return self.a != 0 or self.b != 0

    def __iter__(self) -> Iterator[int]:
        return iter((self.a, self.b))

    def __complex__(self) -> complex:
        root = sqrt(self.ring.abs_radicand)
        if self.ring.radicand < 0:
            return complex(self.a / self.denom, self.b * root / self.denom)

        return complex((self.a + self.b * root) / self.denom, 0.0)

    def __float__(self) -> float:
        if self.ring.radicand < 0 and self.b:
            raise TypeError("Cannot convert a non-real quadint to float")

        return complex(self).real

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, quadint):
            return False

        return (self.a, self.b, self.denom, self.ring) == (other.a, other.b, other.denom, other.ring)

    def __hash__(self) -> int:
        return hash((self.a, self.b, self.denom, self.ring))

    def __repr__(self) -> str:
        if self.denom == 1:
            return f"quadint({self.a}, {self.b}, {self.ring!r})"

        return f"quadint({self.a}, {self.b}, {self.ring!r}, {self.denom})"
