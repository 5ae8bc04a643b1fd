from dataclasses import dataclass, field
from fractions import Fraction
from functools import wraps
from math import isqrt
from threading import RLock
from typing import Any, Callable, Generic, Hashable, Iterator, Optional, TypeVar

T = TypeVar("T")


def floor_sqrt_scaled(d: int, x: Fraction) -> int:
    """floor(sqrt(d) * |x|) for d >= 0, computed without floating point."""
    num, den = abs(x.numerator), x.denominator
    return isqrt(d * num * num) // den


def surd_sign(a: int, b: int, d: int) -> int:
    """
    Sign of the real number a + b*sqrt(d), for d > 0 not a perfect square.

    Returns:
        int: -1, 0 or 1.
    """
    sa = (a > 0) - (a < 0)
    sb = (b > 0) - (b < 0)
    if sb == 0:
        return sa
    if sa == 0 or sa == sb:
        return sb

    # Opposite signs: the term with the larger square wins
    return sa if a * a > b * b * d else sb


def mod_sqrt_prime(n: int, p: int) -> Optional[int]:
    """Return x such that x*x % p == n % p, or None if no sqrt exists. p must be prime."""
    n %= p
    if n == 0 or p == 2:
        return n

    if pow(n, (p - 1) // 2, p) != 1:
        return None

    if p % 4 == 3:
        return pow(n, (p + 1) // 4, p)

    # Tonelli-Shanks, p - 1 = q * 2^s with q odd
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) // 2, p)
    while t != 1:
        i, t2i = 1, (t * t) % p
        while i < m and t2i != 1:
            t2i = (t2i * t2i) % p
            i += 1

        b = pow(c, 1 << (m - i - 1), p)
        r = (r * b) % p
        c = (b * b) % p
        t = (t * c) % p
        m = i

    return r


@dataclass
class _SearchEntry(Generic[T]):
    source: Optional[Iterator[T]]
    found: list[T] = field(default_factory=list)
    lock: RLock = field(default_factory=RLock)


def memoized_search(fn: Callable[..., Iterator[T]]) -> Callable[..., Iterator[T]]:
    """
    Memoize a generator function per argument tuple.

    Searches are usually abandoned after the first hit, so the underlying generator is advanced lazily:
    every call replays what earlier calls already found and only then resumes the shared search.
    Arguments must be hashable and positional.

    Returns:
        Callable: The wrapped generator function.
    """
    entries: dict[Hashable, _SearchEntry[Any]] = {}
    entries_lock = RLock()

    @wraps(fn)
    def wrapper(*args: Any) -> Iterator[T]:
        with entries_lock:
            entry = entries.get(args)
            if entry is None:
                entry = entries[args] = _SearchEntry(source=fn(*args))

        def _replay() -> Iterator[T]:
            i = 0
            while True:
                with entry.lock:
                    if i < len(entry.found):
                        item = entry.found[i]
                    elif entry.source is None:
                        return
                    else:
                        try:
                            item = next(entry.source)
                        except StopIteration:
                            entry.source = None
                            return
                        except BaseException:
                            # A failed search is retried from scratch on the next call
                            with entries_lock:
                                entries.pop(args, None)
                            raise
                        entry.found.append(item)
                i += 1
                yield item

        return _replay()

    wrapper.cache_clear = entries.clear  # type: ignore[attr-defined]
    return wrapper
