from dataclasses import dataclass
from enum import Enum
from typing import Optional

from quadint.config import INT_MAX, INT_MIN
from quadint.errors import InvalidArgumentError
from quadint.symbols import is_squarefree


class Variant(Enum):
    REAL = "real"
    IMAGINARY = "imaginary"


@dataclass(frozen=True)
class QuadraticRing:
    """
    The ring of integers of Q(sqrt(d)) for a squarefree radicand d.

    When d = 1 (mod 4) the ring also holds the "half-integers" (a + b*sqrt(d))/2 with a, b both odd.
    Rings are compared by value, so every QuadraticRing(-5) is the same ring.
    """
    radicand: int
    imaginary: Optional[bool] = None

    def __post_init__(self) -> None:
        d = self.radicand
        if isinstance(d, bool) or not isinstance(d, int):
            raise InvalidArgumentError(f"Radicand must be an int, got {type(d).__name__}", d)

        if d == 0 or d == 1:
            raise InvalidArgumentError(f"Radicand {d} does not define a quadratic ring", d)

        if not INT_MIN <= d <= INT_MAX:
            raise InvalidArgumentError(f"Radicand {d} is out of range", d)

        if not is_squarefree(d):
            raise InvalidArgumentError(f"Radicand {d} is not squarefree", d)

        if self.imaginary is None:
            object.__setattr__(self, "imaginary", d < 0)
        elif bool(self.imaginary) != (d < 0):
            kind = "imaginary" if self.imaginary else "real"
            raise InvalidArgumentError(f"Radicand {d} cannot define an {kind} ring", d)

    @property
    def variant(self) -> Variant:
        return Variant.IMAGINARY if self.imaginary else Variant.REAL

    @property
    def has_half_integers(self) -> bool:
        # Python's % is floored, so -3 % 4 == 1 and the same test covers imaginary rings
        return self.radicand % 4 == 1

    @property
    def discriminant(self) -> int:
        return self.radicand if self.has_half_integers else 4 * self.radicand

    @property
    def abs_radicand(self) -> int:
        return abs(self.radicand)

    @property
    def is_purely_real(self) -> bool:
        return not self.imaginary

    def __repr__(self) -> str:
        return f"QuadraticRing({self.radicand})"
