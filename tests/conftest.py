from typing import Optional

import pytest

from quadint.ring import QuadraticRing, Variant


class IllDefinedQuadraticRing(QuadraticRing):
    """A ring whose variant no algorithm knows about"""

    @property
    def variant(self) -> Optional[Variant]:
        return None


@pytest.fixture
def ill_defined_ring() -> QuadraticRing:
    return IllDefinedQuadraticRing(7)
