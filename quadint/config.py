import logging

from dataclasses import dataclass, fields
from dataclasses import replace as _replace
from typing import Any, Optional

# Coefficients are stored as signed 32-bit values and norms as signed 64-bit values.
INT_MIN = -(1 << 31)
INT_MAX = (1 << 31) - 1
LONG_MIN = -(1 << 63)
LONG_MAX = (1 << 63) - 1

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# TODO: Once Py3.9 support has been dropped, add slots=True
@dataclass(frozen=True)
class Settings:
    """
    Tuning knobs for the searches in the analysis layer.

    Attributes:
        prime_pi: Rational primes up to this bound are classified by a fresh ResultsGrouping.
        unit_search_threshold: Largest surd coefficient tried by the direct unit search
            before handing over to the Pell solver.
        norm_search_limit: Cap on the surd coefficients scanned when solving norm equations in real rings.
    """
    prime_pi: int = 720
    unit_search_threshold: int = 4800
    norm_search_limit: int = 200_000

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Setting {f.name} must be a non-negative int, got {value!r}")

    def replace(self, **changes: Any) -> "Settings":
        """Copy these settings with some fields overridden"""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        return _replace(self, **changes)


DEFAULT_SETTINGS = Settings()


def resolve(settings: Optional[Settings]) -> Settings:
    return DEFAULT_SETTINGS if settings is None else settings


def setup_basic_logger(name: str = "quadint", level: int = logging.INFO) -> logging.Logger:
    """
    Attach a stream handler to a quadint logger.

    The package itself never configures handlers; this is for scripts and interactive sessions.

    Args:
        name: Logger name, "quadint" covers the whole package.
        level: Logging level for both the logger and its handler.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(getattr(h, "_quadint_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._quadint_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
