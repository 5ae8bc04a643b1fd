import logging

from fractions import Fraction
from functools import cache
from math import isqrt
from typing import Iterator, Optional

from sympy import integer_nthroot
from sympy.solvers.diophantine.diophantine import diop_DN

from quadint.config import Settings, resolve
from quadint.errors import ArithmeticOverflowError, InvalidArgumentError, UnsupportedNumberDomainError
from quadint.quad import quadint
from quadint.ring import QuadraticRing, Variant
from quadint.symbols import is_perfect_square
from quadint.utils import memoized_search, surd_sign

logger = logging.getLogger(__name__)


def require_variant(ring: QuadraticRing) -> Variant:
    """The ring's variant, or UnsupportedNumberDomainError if no algorithm handles it."""
    variant = ring.variant
    if variant is Variant.REAL or variant is Variant.IMAGINARY:
        return variant

    raise UnsupportedNumberDomainError(f"No algorithm is implemented for {ring!r}", ring)


def ring_units(ring: QuadraticRing) -> list[quadint]:
    """
    The units of finite order: ±1, plus ±i in Z[i] and the primitive sixth roots of unity in Z[ω].

    For imaginary rings this is the whole unit group.
    """
    variant = require_variant(ring)
    one = quadint(1, 0, ring)
    units = [one, -one]

    if variant is Variant.IMAGINARY:
        if ring.radicand == -1:
            i = quadint(0, 1, ring)
            units.extend([i, -i])
        elif ring.radicand == -3:
            units.extend([quadint(a, b, ring, 2) for a in (-1, 1) for b in (-1, 1)])

    return units


def unit_inverse(u: quadint) -> quadint:
    n = u.norm()
    if n not in (-1, 1):
        raise InvalidArgumentError(f"{u!r} is not a unit", u)

    return u.conjugate() * n


def canonical_associate(x: quadint) -> tuple[quadint, quadint]:
    """
    Unit-migration normalization over the units of finite order:
        replace x by x*u.

    The chosen associate has the largest regular part, ties going to the larger surd part.
    In Z[i] that is the sector -45° < arg <= 45°, in real rings it just makes the leading part positive.

    Returns:
         tuple: (x_canon, u) such that x_canon = x*u.
    """
    best = None
    best_u = None
    best_key = None
    for u in ring_units(x.ring):
        cand = x * u
        key = (Fraction(cand.a, cand.denom), Fraction(cand.b, cand.denom))
        if best_key is None or key > best_key:
            best, best_u, best_key = cand, u, key

    if best is None or best_u is None:
        raise ArithmeticError(f"No units found for {x.ring!r}")

    return best, best_u


@cache
def _pell_solution(d: int, n: int) -> Optional[tuple[int, int]]:
    """Smallest positive solution of x^2 - d*y^2 = n for n = ±1, or None."""
    solutions = diop_DN(d, n)
    if not solutions:
        return None

    x, y = min(solutions, key=lambda s: (abs(s[1]), abs(s[0])))
    return abs(x), abs(y)


def _cube_root_unit(ring: QuadraticRing, x: int, y: int, n: int) -> Optional[tuple[int, int]]:
    """
    Half-integer unit e = (X + Y*sqrt(d))/2 with e^3 = x + y*sqrt(d), if there is one.

    Comparing traces, X^3 - 3nX = 2x where n = N(e) = N(x + y*sqrt(d)).
    """
    d = ring.radicand
    root, _ = integer_nthroot(2 * x, 3)
    for X in range(max(int(root) - 2, 1), int(root) + 3):
        if X * X * X - 3 * n * X != 2 * x:
            continue

        rest = X * X - 4 * n
        if rest % d or not is_perfect_square(rest // d):
            continue

        Y = isqrt(rest // d)
        if not (X & 1 and Y & 1):
            continue

        # (X + Y√d)^3 / 8 == x + y√d
        if X ** 3 + 3 * X * Y * Y * d == 8 * x and 3 * X * X * Y + Y ** 3 * d == 8 * y:
            return X, Y

    return None


@cache
def fundamental_unit_numerators(ring: QuadraticRing, threshold: int) -> tuple[int, int, int]:
    """
    Numerators (X, Y, c) of the fundamental unit (X + Y*sqrt(d))/c of a real ring, unbounded.

    Tries surd coefficients 1..threshold first (in halves for half-integer rings),
    taking the smallest regular part at the first surd coefficient that works.
    Beyond that the unit comes from the Pell solver and, in half-integer rings, a cube-root check.
    """
    d = ring.radicand
    scale = 2 if ring.has_half_integers else 1
    target = scale * scale

    for Y in range(1, threshold + 1):
        base = d * Y * Y
        for t in (-target, target):
            if base + t > 0 and is_perfect_square(base + t):
                return isqrt(base + t), Y, scale

    logger.debug("No unit of %r with surd part up to %d, using the Pell solver", ring, threshold)

    solution = _pell_solution(d, -1) or _pell_solution(d, 1)
    if solution is None:
        raise ArithmeticError(f"Pell solver found no unit for {ring!r}")

    x, y = solution
    n = x * x - d * y * y
    if scale == 2:
        root = _cube_root_unit(ring, x, y, n)
        if root is not None:
            return root[0], root[1], 2

    return x, y, 1


def fundamental_unit(ring: QuadraticRing, settings: Optional[Settings] = None) -> Optional[quadint]:
    """
    The fundamental unit of a real quadratic ring, the smallest unit greater than 1.

    Args:
        ring: A real quadratic ring.
        settings: Search settings, the defaults if None.

    Returns:
        Optional[quadint]: The unit, or None if its coefficients do not fit the 32-bit range.

    Raises:
        InvalidArgumentError: For imaginary rings, whose unit groups are finite.
        UnsupportedNumberDomainError: For rings of unknown variant.
    """
    if require_variant(ring) is Variant.IMAGINARY:
        raise InvalidArgumentError(f"{ring!r} is imaginary and has no fundamental unit", ring)

    X, Y, scale = fundamental_unit_numerators(ring, resolve(settings).unit_search_threshold)
    try:
        return quadint(X, Y, ring, scale)
    except ArithmeticOverflowError:
        logger.warning("Fundamental unit of %r overflows: (%d + %d*sqrt(%d))/%d",
                       ring, X, Y, ring.radicand, scale)
        return None


def fundamental_unit_norm(ring: QuadraticRing, settings: Optional[Settings] = None) -> int:
    """Norm (±1) of the fundamental unit, available even when the unit itself overflows."""
    X, Y, scale = fundamental_unit_numerators(ring, resolve(settings).unit_search_threshold)
    return (X * X - ring.radicand * Y * Y) // (scale * scale)


def _nagell_bound(d: int, n: int) -> int:
    """
    Surd bound for the solutions of X^2 - d*Y^2 = n.

    Every class of solutions under the norm-1 units of Z[sqrt(d)] has a member with
        0 <= Y <= y1 * sqrt(|n| / (2 * (x1 - 1)))
    where x1 + y1*sqrt(d) solves the Pell equation.
    """
    solution = _pell_solution(d, 1)
    if solution is None:
        raise ArithmeticError(f"x^2 - {d}*y^2 = 1 has no solution")

    x1, y1 = solution
    return isqrt(y1 * y1 * abs(n) // (2 * (x1 - 1))) + 1


@memoized_search
def _norm_solutions(ring: QuadraticRing, k: int, limit: int) -> Iterator[tuple[int, int]]:
    d = ring.radicand
    scale = 2 if ring.has_half_integers else 1
    n = k * scale * scale

    if d < 0:
        bound = isqrt(n // -d)
        targets: tuple[int, ...] = (n,)
    else:
        bound = _nagell_bound(d, n)
        if bound > limit:
            logger.warning("Norm search for %d in %r truncated at surd part %d (bound %d)", k, ring, limit, bound)
            bound = limit
        targets = (n, -n)

    for Y in range(bound + 1):
        base = d * Y * Y
        for t in targets:
            square = t + base
            if not is_perfect_square(square):
                continue

            X = isqrt(square)
            if scale == 2 and (X - Y) & 1:
                continue

            yield X, Y
            if X and Y:
                yield -X, Y


def elements_of_norm(ring: QuadraticRing, k: int, settings: Optional[Settings] = None) -> Iterator[quadint]:
    """
    Yield elements of norm ±k (only +k in imaginary rings), covering every associate class.

    Results are produced lazily in order of increasing surd part and memoized per (ring, k).

    Args:
        ring: The ring to search.
        k: A positive integer.
        settings: Search settings; norm_search_limit caps the surd part in real rings.

    Raises:
        InvalidArgumentError: If k is not positive.
    """
    require_variant(ring)
    if k <= 0:
        raise InvalidArgumentError(f"Norm must be positive, got {k}", k)

    return _elements(ring, k, resolve(settings).norm_search_limit)


def _elements(ring: QuadraticRing, k: int, limit: int) -> Iterator[quadint]:
    scale = 2 if ring.has_half_integers else 1
    for X, Y in _norm_solutions(ring, k, limit):
        try:
            yield quadint(X, Y, ring, scale)
        except ArithmeticOverflowError:
            logger.debug("Skipping element of norm %d beyond the 32-bit range in %r", k, ring)


def divide_out_units(x: quadint, settings: Optional[Settings] = None) -> quadint:
    """
    Canonical associate of x.

    Imaginary rings use canonical_associate. Real rings make x positive and then multiply or divide by
    the fundamental unit e until 1 <= x < e, leaving x only sign-normalized when e overflows.

    Returns:
        quadint: The canonical associate.
    """
    if not x:
        return x

    if require_variant(x.ring) is Variant.IMAGINARY:
        return canonical_associate(x)[0]

    d = x.ring.radicand
    y = x if surd_sign(x.a, x.b, d) > 0 else -x

    unit = fundamental_unit(x.ring, settings)
    if unit is None:
        return y

    try:
        while surd_sign(y.a - y.denom, y.b, d) < 0:
            y = y * unit

        while True:
            diff = y - unit
            if surd_sign(diff.a, diff.b, d) < 0:
                break
            y = y.divides(unit)
    except ArithmeticOverflowError:
        logger.warning("Unit reduction of %r overflowed, keeping the sign-normalized value", x)
        return x if surd_sign(x.a, x.b, d) > 0 else -x

    return y
