import logging

from dataclasses import FrozenInstanceError

import pytest

from quadint.config import DEFAULT_SETTINGS, INT_MAX, INT_MIN, LONG_MAX, LONG_MIN, Settings, setup_basic_logger


class TestSettings:
    """Tests for Settings"""

    def test_defaults(self):
        assert DEFAULT_SETTINGS == Settings()
        assert DEFAULT_SETTINGS.prime_pi == 720
        assert DEFAULT_SETTINGS.unit_search_threshold == 4800

    def test_replace(self):
        """replace copies, leaving the original untouched"""
        settings = DEFAULT_SETTINGS.replace(prime_pi=50)
        assert settings.prime_pi == 50
        assert settings.norm_search_limit == DEFAULT_SETTINGS.norm_search_limit
        assert DEFAULT_SETTINGS.prime_pi == 720

    def test_replace_unknown(self):
        with pytest.raises(ValueError):
            DEFAULT_SETTINGS.replace(prime_p=50)

    @pytest.mark.parametrize("value", [-1, 1.5, "10", None])
    def test_invalid(self, value):
        """Settings are non-negative ints"""
        with pytest.raises(ValueError):
            Settings(prime_pi=value)

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_SETTINGS.prime_pi = 10

    def test_hashable(self):
        """Settings key the memoized searches"""
        assert len({Settings(), Settings(), Settings(prime_pi=1)}) == 2


def test_ranges():
    """Coefficients are 32-bit and norms 64-bit"""
    assert INT_MAX == 2 ** 31 - 1
    assert INT_MIN == -(2 ** 31)
    assert LONG_MAX == 2 ** 63 - 1
    assert LONG_MIN == -(2 ** 63)


def test_setup_basic_logger():
    """The handler is only attached once"""
    logger = setup_basic_logger("quadint.test_config", logging.DEBUG)
    setup_basic_logger("quadint.test_config", logging.DEBUG)

    marked = [h for h in logger.handlers if getattr(h, "_quadint_handler", False)]
    assert len(marked) == 1
    assert logger.level == logging.DEBUG

    for h in marked:
        logger.removeHandler(h)
