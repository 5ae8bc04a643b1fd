import logging

from typing import Optional

from quadint.config import Settings
from quadint.errors import NonEuclideanDomainError, NotDivisibleError
from quadint.quad import OP_TYPES, quadint
from quadint.ring import QuadraticRing, Variant
from quadint.units import divide_out_units, require_variant

logger = logging.getLogger(__name__)

# Radicands of the rings in which division by nearest lattice point always shrinks the norm
NORM_EUCLIDEAN_IMAGINARY = frozenset({-1, -2, -3, -7, -11})
NORM_EUCLIDEAN_REAL = frozenset({2, 3, 5, 6, 7, 11, 13, 17, 19, 21, 29, 33, 37, 41, 57, 73})


def is_norm_euclidean(ring: QuadraticRing) -> bool:
    if require_variant(ring) is Variant.IMAGINARY:
        return ring.radicand in NORM_EUCLIDEAN_IMAGINARY

    return ring.radicand in NORM_EUCLIDEAN_REAL


def is_divisible_by(a: OP_TYPES, b: OP_TYPES) -> bool:
    """
    True iff a / b is a quadratic integer.

    Division by zero answers False rather than raising.
    """
    if not isinstance(a, quadint):
        if not isinstance(b, quadint):
            raise TypeError("At least one operand must be a quadint")
        a = b._from_obj(a)

    if not b:
        return False

    try:
        a.divides(b)
    except NotDivisibleError:
        return False

    return True


def _common_ring(a: OP_TYPES, b: OP_TYPES) -> tuple[quadint, quadint]:
    """Bring a and b into one ring, moving a rational operand into the other's ring."""
    if not isinstance(a, quadint):
        if not isinstance(b, quadint):
            raise TypeError("At least one operand must be a quadint")
        return b._from_obj(a), b

    if not isinstance(b, quadint):
        return a, a._from_obj(b)

    if a.ring != b.ring:
        if b.is_rational:
            return a, quadint(b.a, 0, a.ring)
        if a.is_rational:
            return quadint(a.a, 0, b.ring), b

    return a, b


def _order(a: quadint, b: quadint) -> tuple[quadint, quadint]:
    """Larger absolute norm first"""
    if abs(b.norm()) > abs(a.norm()):
        return b, a

    return a, b


def euclidean_gcd(a: OP_TYPES, b: OP_TYPES, settings: Optional[Settings] = None) -> quadint:
    """
    GCD via the Euclidean algorithm with nearest-lattice-point division.

    Only defined for the norm-Euclidean rings, where every division step shrinks the remainder norm.

    Returns:
        quadint: The canonical associate of the gcd (see divide_out_units).

    Raises:
        NonEuclideanDomainError: If the ring is not norm-Euclidean, or a step fails to shrink the norm.
            Both operands are kept on the error for try_euclidean_gcd_anyway.
        DegreeOverflowError: If a and b come from different rings.
    """
    a, b = _common_ring(a, b)
    a._check_same_ring(b, "take the gcd of")

    if not is_norm_euclidean(a.ring):
        raise NonEuclideanDomainError(f"{a.ring!r} is not norm-Euclidean", a, b)

    x, y = _order(a, b)
    if y:
        last = abs(y.norm())
        while y:
            _, r = divmod(x, y)
            x, y = y, r

            if y:
                nr = abs(y.norm())
                if nr >= last:
                    raise NonEuclideanDomainError("Euclidean descent failed (non-decreasing remainder norm)", a, b)
                last = nr

    return divide_out_units(x, settings)


def try_euclidean_gcd_anyway(error: NonEuclideanDomainError, settings: Optional[Settings] = None) -> quadint:
    """
    Best-effort GCD for operands that made euclidean_gcd give up.

    Runs the same division steps without asking whether the ring is norm-Euclidean, and stops at the
    first step that does not shrink the remainder norm. The answer is then unreliable, and is marked
    by returning the last divisor with a negative regular part. Completed descents are flipped to a
    non-negative regular part, so a negative one only ever marks a stall.

    A stalled divisor with no regular part (a pure surd such as 2*sqrt(-5)) cannot carry the mark and
    comes back unchanged, indistinguishable from a reliable answer.

    Args:
        error: The error raised by euclidean_gcd.
        settings: Search settings, the defaults if None.

    Returns:
        quadint: The gcd, or the unreliable-result sentinel.
    """
    x, y = _order(*_common_ring(error.a, error.b))

    stalled = False
    if y:
        last = abs(y.norm())
        while y:
            _, r = divmod(x, y)
            if r and abs(r.norm()) >= last:
                stalled = True
                break

            x, y = y, r
            if y:
                last = abs(y.norm())

    if not stalled:
        g = divide_out_units(x, settings)
        return -g if g.a < 0 else g

    logger.debug("Euclidean descent stalled for %r and %r at divisor %r", error.a, error.b, y)
    g = divide_out_units(y, settings)
    return -g if g.a > 0 else g
