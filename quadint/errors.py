from fractions import Fraction
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from quadint.quad import quadint
    from quadint.ring import QuadraticRing


class QuadIntError(ArithmeticError):
    """Base class for every error raised by quadint"""


class InvalidArgumentError(QuadIntError, ValueError):
    """A malformed ring, value, symbol modulus or other argument"""

    def __init__(self, message: str, argument: Any = None) -> None:
        super().__init__(message)
        self.argument = argument


class ZeroDivisorError(InvalidArgumentError, ZeroDivisionError):
    """Division by the zero value"""

    def __init__(self, dividend: Any) -> None:
        super().__init__("Division by zero is not defined", dividend)
        self.dividend = dividend


class ArithmeticOverflowError(QuadIntError, OverflowError):
    """A coefficient or norm left the representable integer range"""

    def __init__(self, message: str, reg: int, surd: int = 0, ring: Optional["QuadraticRing"] = None) -> None:
        super().__init__(message)
        self.reg = reg
        self.surd = surd
        self.ring = ring


class DegreeOverflowError(QuadIntError):
    """
    Two values from different quadratic rings were combined.

    The exact result would be an algebraic integer of degree 4, which this package does not represent.
    """

    def __init__(self, message: str, a: "quadint", b: "quadint", max_degree: int = 2) -> None:
        super().__init__(message)
        self.a = a
        self.b = b
        self.max_degree = max_degree

    @property
    def necessary_degree(self) -> int:
        """Degree of the smallest field holding both operands"""
        return self.a.algebraic_degree() * self.b.algebraic_degree()

    @property
    def causing_numbers(self) -> tuple["quadint", "quadint"]:
        return self.a, self.b


class NotDivisibleError(QuadIntError):
    """
    Exact division failed.

    Carries the exact quotient coefficients as fractions, so ``dividend / divisor`` is
        (reg + surd * sqrt(d)) with reg, surd = error.fractions
    """

    def __init__(self,
                 dividend: "quadint",
                 divisor: "quadint",
                 fractions: tuple[Fraction, Fraction]) -> None:
        super().__init__(f"{dividend!r} is not divisible by {divisor!r}")
        self.dividend = dividend
        self.divisor = divisor
        self.fractions = fractions

    @property
    def ring(self) -> "QuadraticRing":
        return self.dividend.ring

    def bounding_integers(self) -> list["quadint"]:
        """
        List the lattice points of the ring surrounding the exact quotient.

        Returns:
            list: Candidate quotients, every floor/ceiling combination of the coefficients.
        """
        reg, surd = self.fractions
        return type(self.dividend).nearby(reg, surd, self.ring)


class NonEuclideanDomainError(QuadIntError):
    """
    The Euclidean algorithm cannot be trusted in this ring.

    Raised with both original operands so that ``try_euclidean_gcd_anyway`` can resume the computation.
    """

    def __init__(self, message: str, a: "quadint", b: "quadint") -> None:
        super().__init__(message)
        self.a = a
        self.b = b

    @property
    def operands(self) -> tuple["quadint", "quadint"]:
        return self.a, self.b


class NonUniqueFactorizationDomainError(QuadIntError):
    """
    The ring is not a unique factorization domain.

    Raised with the number being factored so that ``try_to_factorize_anyway`` can produce a factorization.
    """

    def __init__(self, message: str, number: "quadint") -> None:
        super().__init__(message)
        self.number = number


class UnsupportedNumberDomainError(QuadIntError, NotImplementedError):
    """The ring variant is recognized but no algorithm is implemented for it"""

    def __init__(self, message: str, ring: Any, a: Any = None, b: Any = None) -> None:
        super().__init__(message)
        self.ring = ring
        self.a = a
        self.b = b
