import logging

from functools import cache
from math import gcd, isqrt
from typing import TYPE_CHECKING, Optional

from sympy import divisors

from quadint.config import Settings
from quadint.errors import InvalidArgumentError
from quadint.gcd import NORM_EUCLIDEAN_REAL
from quadint.grouping import ResultsGrouping
from quadint.ring import QuadraticRing, Variant
from quadint.units import fundamental_unit_norm, require_variant

if TYPE_CHECKING:
    from quadint.results import ResultsTables

logger = logging.getLogger(__name__)

# Imaginary quadratic rings with class number 1
HEEGNER = frozenset({-1, -2, -3, -7, -11, -19, -43, -67, -163})

Form = tuple[int, int, int]


def minkowski_prime_bound(ring: QuadraticRing) -> int:
    """
    Every ideal class holds an ideal of norm at most the Minkowski bound, so the prime ideals over
    rational primes up to this value generate the class group.

    Real rings: sqrt(D)/2. Imaginary rings: (2/pi)*sqrt(|D|), rounded up through (2/3)*sqrt(|D|).
    """
    D = ring.discriminant
    if D > 0:
        return isqrt(D) // 2

    return isqrt(-4 * D // 9)


@cache
def _count_reduced_definite_forms(D: int) -> int:
    """Number of reduced primitive positive definite forms (a, b, c) of discriminant D < 0."""
    h = 0
    a = 1
    while 3 * a * a <= -D:
        for b in range(-a + 1, a + 1):
            if (b - D) % 2:
                continue

            num = b * b - D
            if num % (4 * a):
                continue

            c = num // (4 * a)
            if c < a or (b < 0 and a == c):
                continue

            if gcd(a, b, c) == 1:
                h += 1
        a += 1

    return h


def _reduced_indefinite_forms(D: int) -> set[Form]:
    """
    Reduced primitive forms (a, b, c) of discriminant D > 0:
        0 < b < sqrt(D) and sqrt(D) - b < 2|a| < sqrt(D) + b
    """
    r = isqrt(D)
    forms: set[Form] = set()
    for b in range(1, r + 1):
        if (b - D) % 2:
            continue

        ac = (b * b - D) // 4
        for m in divisors(-ac):
            t = 2 * int(m)
            if (t + b) ** 2 <= D:
                continue
            if t >= b and (t - b) ** 2 >= D:
                continue

            for a in (int(m), -int(m)):
                c = ac // a
                if gcd(a, b, c) == 1:
                    forms.add((a, b, c))

    return forms


def _rho(form: Form, D: int, r: int) -> Form:
    """One reduction step (a, b, c) -> (c, b', a') with b' = -b (mod 2|c|) and sqrt(D) - 2|c| < b' < sqrt(D)."""
    _, b, c = form
    m = 2 * abs(c)
    b2 = r - ((r + b) % m)
    return c, b2, (b2 * b2 - D) // (4 * c)


@cache
def _count_indefinite_cycles(D: int) -> int:
    """Narrow class number: the number of cycles of reduced forms of discriminant D > 0."""
    r = isqrt(D)
    forms = _reduced_indefinite_forms(D)

    seen: set[Form] = set()
    cycles = 0
    for f in sorted(forms):
        if f in seen:
            continue

        cycles += 1
        g = f
        while g not in seen:
            seen.add(g)
            g = _rho(g, D, r)

    return cycles


def _principal_up_to_minkowski(grouping: ResultsGrouping, bound: int) -> bool:
    if grouping.prime_pi < bound:
        grouping.raise_prime_pi(bound - grouping.prime_pi)

    for table in (grouping.splits(), grouping.ramifieds()):
        for p, factor in table.items():
            if p <= bound and factor is None:
                return False

    return True


def field_class_number(ring: QuadraticRing,
                       grouping: Optional[ResultsGrouping] = None,
                       settings: Optional[Settings] = None) -> int:
    """
    Ideal class number of the ring.

    If every split or ramified prime up to the Minkowski bound has an element of norm ±p in the
    grouping, all ideal classes are principal and the answer is 1. Otherwise the classes are counted
    as reduced binary quadratic forms of the ring's discriminant: reduced forms for imaginary rings,
    cycles of reduced forms for real rings (halved when the fundamental unit has norm 1).

    Args:
        ring: The ring.
        grouping: Prime classification to reuse and extend, a fresh one if None.
        settings: Search settings, the defaults if None.

    Returns:
        int: The class number, at least 1.
    """
    variant = require_variant(ring)
    bound = minkowski_prime_bound(ring)

    if grouping is None:
        grouping = ResultsGrouping(ring, prime_pi=bound, settings=settings)
    elif grouping.ring != ring:
        raise InvalidArgumentError(f"Grouping of {grouping.ring!r} used for {ring!r}", grouping)

    if _principal_up_to_minkowski(grouping, bound):
        return 1

    D = ring.discriminant
    logger.debug("Non-principal prime below %d in %r, counting forms of discriminant %d", bound, ring, D)
    if variant is Variant.IMAGINARY:
        return _count_reduced_definite_forms(D)

    narrow = _count_indefinite_cycles(D)
    if fundamental_unit_norm(ring, settings) == -1:
        return narrow

    return narrow // 2


def is_ufd(ring: QuadraticRing,
           tables: Optional["ResultsTables"] = None,
           settings: Optional[Settings] = None) -> bool:
    """
    True iff factorization into irreducibles is unique in ring, i.e. the class number is 1.

    Args:
        ring: The ring.
        tables: Memo tables to read and fill the class number from.
        settings: Search settings when no tables are given.
    """
    if require_variant(ring) is Variant.IMAGINARY:
        return ring.radicand in HEEGNER

    if ring.radicand in NORM_EUCLIDEAN_REAL:
        return True

    if tables is not None:
        return tables.cache(ring).get_class_number() == 1

    return field_class_number(ring, settings=settings) == 1
