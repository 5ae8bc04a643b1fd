import logging

from typing import Optional, Union

from quadint.classnumber import field_class_number
from quadint.config import Settings, resolve
from quadint.errors import ArithmeticOverflowError
from quadint.grouping import ResultsGrouping
from quadint.quad import quadint
from quadint.ring import QuadraticRing
from quadint.units import fundamental_unit, require_variant

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()


class ResultsCache:
    """
    Memoized unit and class number of one ring.

    Each result is computed on first request and kept from then on. A stored None means the computation
    ran and overflowed, which is different from not having run yet.
    Not safe for concurrent use; share one across threads only behind a lock.
    """

    def __init__(self,
                 ring: QuadraticRing,
                 grouping: Optional[ResultsGrouping] = None,
                 settings: Optional[Settings] = None) -> None:
        require_variant(ring)
        self.ring = ring
        self.grouping = grouping
        self.settings = resolve(settings)
        self._unit: Union[_Unset, Optional[quadint]] = _UNSET
        self._class_number: Union[_Unset, Optional[int]] = _UNSET

    @property
    def has_unit(self) -> bool:
        """True once get_unit has run, whatever it found."""
        return self._unit is not _UNSET

    @property
    def has_class_number(self) -> bool:
        return self._class_number is not _UNSET

    def get_unit(self) -> Optional[quadint]:
        """
        The fundamental unit, None if it does not fit the coefficient range.

        Raises:
            InvalidArgumentError: For imaginary rings.
        """
        if isinstance(self._unit, _Unset):
            self._unit = fundamental_unit(self.ring, self.settings)

        return self._unit

    def get_class_number(self) -> Optional[int]:
        """The class number, None if an intermediate value overflowed."""
        if isinstance(self._class_number, _Unset):
            try:
                self._class_number = field_class_number(self.ring, self.grouping, self.settings)
            except ArithmeticOverflowError as e:
                logger.warning("Class number of %r overflowed: %s", self.ring, e)
                self._class_number = None

        return self._class_number

    def __repr__(self) -> str:
        return f"ResultsCache({self.ring!r}, unit={self._unit!r}, class_number={self._class_number!r})"


class ResultsTables:
    """
    The per-ring memo tables, keyed by ring.

    Owned by the caller and passed into the analysis functions that take a ``tables`` argument.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = resolve(settings)
        self._groupings: dict[QuadraticRing, ResultsGrouping] = {}
        self._caches: dict[QuadraticRing, ResultsCache] = {}

    def grouping(self, ring: QuadraticRing) -> ResultsGrouping:
        g = self._groupings.get(ring)
        if g is None:
            g = self._groupings[ring] = ResultsGrouping(ring, settings=self.settings)

        return g

    def cache(self, ring: QuadraticRing) -> ResultsCache:
        c = self._caches.get(ring)
        if c is None:
            c = self._caches[ring] = ResultsCache(ring, self.grouping(ring), self.settings)

        return c

    def __contains__(self, ring: object) -> bool:
        return ring in self._groupings or ring in self._caches

    def __len__(self) -> int:
        return len(set(self._groupings) | set(self._caches))
