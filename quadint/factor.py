import logging

from math import isqrt
from typing import TYPE_CHECKING, Optional

from sympy import divisors, factorint, isprime

from quadint.classnumber import is_ufd
from quadint.config import Settings
from quadint.errors import NonUniqueFactorizationDomainError
from quadint.gcd import is_divisible_by
from quadint.grouping import INERT, RAMIFIED, prime_symbol, splitting_factor
from quadint.quad import quadint
from quadint.symbols import kronecker
from quadint.units import canonical_associate, elements_of_norm, require_variant, unit_inverse

if TYPE_CHECKING:
    from quadint.results import ResultsTables

logger = logging.getLogger(__name__)


def is_prime(n: quadint) -> bool:
    """
    True iff n generates a prime ideal.

    That happens when |N(n)| is a rational prime, or when n is an associate of a rational prime p
    that stays inert in the ring (|N(n)| = p^2, p divides n and the Kronecker symbol (D/p) is -1).
    """
    require_variant(n.ring)
    norm = abs(n.norm())
    if norm < 2:
        return False

    if isprime(norm):
        return True

    p = isqrt(norm)
    if p * p != norm or not isprime(p):
        return False

    return kronecker(n.ring.discriminant, p) == -1 and is_divisible_by(n, p)


def _proper_divisor(n: quadint, settings: Optional[Settings] = None) -> Optional[quadint]:
    """
    A non-unit, non-associate divisor of n, or None if n is irreducible.

    Any proper divisor has a norm that properly divides |N(n)|, so only those norms are tried.
    """
    norm = abs(n.norm())
    for k in divisors(norm)[1:-1]:
        for m in elements_of_norm(n.ring, int(k), settings):
            if is_divisible_by(n, m):
                return m

    return None


def is_irreducible(n: quadint,
                   tables: Optional["ResultsTables"] = None,
                   settings: Optional[Settings] = None) -> bool:
    """
    True iff n is not a product of two non-units.

    Zero is reducible (0 = 0 * 2); units count as irreducible since they have no such product.
    """
    require_variant(n.ring)
    if not n:
        return False

    norm = abs(n.norm())
    if norm == 1 or isprime(norm):
        return True

    if is_ufd(n.ring, tables, settings):
        return is_prime(n)

    return _proper_divisor(n, settings) is None


def _factor_key(f: quadint) -> tuple[int, int, int]:
    scale = 2 // f.denom
    return abs(f.norm()), f.a * scale, f.b * scale


def _normal_form(unit: quadint, factors: list[quadint]) -> tuple[quadint, list[quadint]]:
    """
    Move every factor to its canonical associate, collecting the units into one leading unit.

        unit * f1 * ... * fk == unit' * f1' * ... * fk'
    """
    canon = []
    for f in factors:
        c, u = canonical_associate(f)
        unit = unit * unit_inverse(u)
        canon.append(c)

    canon.sort(key=_factor_key)
    return unit, canon


def prime_factors(n: quadint,
                  tables: Optional["ResultsTables"] = None,
                  settings: Optional[Settings] = None) -> list[quadint]:
    """
    Factorization into primes, unit first.

    Returns [unit, p1, ..., pk] with each prime a canonical associate, ordered by absolute norm; the unit is
    left out when it is 1. Zero and units come back as [n].

    Raises:
        NonUniqueFactorizationDomainError: If the ring is not a UFD, carrying n for try_to_factorize_anyway.
        ArithmeticError: If the cofactor left over is not a unit, indicating a bug in the code.
    """
    ring = n.ring
    require_variant(ring)
    if not is_ufd(ring, tables, settings):
        raise NonUniqueFactorizationDomainError(f"{ring!r} is not a unique factorization domain", n)

    norm = abs(n.norm())
    if norm < 2:
        return [n]

    q = n
    primes: list[quadint] = []
    for p, e in sorted(factorint(norm).items()):
        p = int(p)
        symbol = prime_symbol(ring, p)

        if symbol == INERT:
            # p stays prime and the norm holds it squared
            for _ in range(e // 2):
                q = q.divides(p)
                primes.append(quadint(p, 0, ring))
            continue

        pi = splitting_factor(ring, p, settings)
        if pi is None:
            raise ArithmeticError(f"No element of norm {p} found in {ring!r}")

        remaining = e
        for c in ((pi,) if symbol == RAMIFIED else (pi, pi.conjugate())):
            while remaining and is_divisible_by(q, c):
                q = q.divides(c)
                primes.append(c)
                remaining -= 1

        if remaining:
            raise ArithmeticError(f"Failed to extract the primes over {p} (unexpected)")

    if abs(q.norm()) != 1:
        raise ArithmeticError("remaining cofactor is not a unit; factorization incomplete")

    unit, canon = _normal_form(q, primes)
    return ([unit] if unit != quadint(1, 0, ring) else []) + canon


def _split(n: quadint, settings: Optional[Settings]) -> list[quadint]:
    m = _proper_divisor(n, settings)
    if m is None:
        return [n]

    return _split(m, settings) + _split(n.divides(m), settings)


def irreducible_factors(n: quadint,
                        tables: Optional["ResultsTables"] = None,
                        settings: Optional[Settings] = None) -> list[quadint]:
    """
    A factorization of n into irreducibles in any ring.

    In a UFD this is prime_factors. Otherwise the result is one of possibly several factorizations, and
    each factor that is irreducible but not prime adds two extra -1 entries after the unit, so that
    callers can tell the factorization is not canonical. The product is still n.
    """
    ring = n.ring
    require_variant(ring)
    if is_ufd(ring, tables, settings):
        return prime_factors(n, tables, settings)

    if abs(n.norm()) < 2:
        return [n]

    one = quadint(1, 0, ring)
    unit, canon = _normal_form(one, _split(n, settings))

    markers: list[quadint] = []
    for f in canon:
        if not is_prime(f):
            markers.extend([-one, -one])

    if markers:
        logger.debug("Factorization of %r is not unique (%d non-prime irreducibles)", n, len(markers) // 2)

    return ([unit] if unit != one else []) + markers + canon


def try_to_factorize_anyway(error: NonUniqueFactorizationDomainError,
                            tables: Optional["ResultsTables"] = None,
                            settings: Optional[Settings] = None) -> list[quadint]:
    """Best-effort factorization of the number prime_factors refused to factor, see irreducible_factors."""
    return irreducible_factors(error.number, tables, settings)
