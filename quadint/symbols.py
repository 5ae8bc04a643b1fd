from math import isqrt

from sympy import factorint, isprime

from quadint.errors import InvalidArgumentError


def is_perfect_square(n: int) -> bool:
    if n < 0:
        return False

    r = isqrt(n)
    return r * r == n


def is_squarefree(n: int) -> bool:
    """True iff no square of a prime divides n. 0 is not squarefree, -1 and 1 are."""
    if n == 0:
        return False

    return all(e == 1 for e in factorint(abs(n)).values())


def kernel(n: int) -> int:
    """
    Largest squarefree divisor of n, carrying the sign of n.

    Examples:
        kernel(60) == 30, kernel(-4) == -2, kernel(1) == 1
    """
    if n == 0:
        raise InvalidArgumentError("0 has no squarefree kernel", n)

    k = 1
    for p in factorint(abs(n)):
        k *= p

    return -k if n < 0 else k


def moebius(n: int) -> int:
    """Möbius function of a positive integer."""
    if n < 1:
        raise InvalidArgumentError("Möbius function is only defined for positive integers", n)

    exponents = factorint(n)
    if any(e > 1 for e in exponents.values()):
        return 0

    return -1 if len(exponents) % 2 else 1


def legendre(a: int, p: int) -> int:
    """
    Legendre symbol (a/p).

    Args:
        a: Any integer.
        p: An odd prime.

    Returns:
        int: 0 if p divides a, 1 if a is a nonzero square mod p, -1 otherwise.

    Raises:
        InvalidArgumentError: If p is not an odd prime.
    """
    if p == 2 or not isprime(p):
        raise InvalidArgumentError(f"Legendre symbol needs an odd prime modulus, got {p}", p)

    # Euler's criterion
    t = pow(a % p, (p - 1) // 2, p)
    return -1 if t == p - 1 else t


def jacobi(a: int, n: int) -> int:
    """
    Jacobi symbol (a/n), the multiplicative extension of the Legendre symbol to odd moduli.

    Raises:
        InvalidArgumentError: If n is even or not positive.
    """
    if n <= 0 or n % 2 == 0:
        raise InvalidArgumentError(f"Jacobi symbol needs an odd positive modulus, got {n}", n)

    a %= n
    result = 1
    while a:
        while a % 2 == 0:
            a //= 2
            if n % 8 in (3, 5):
                result = -result

        # quadratic reciprocity
        a, n = n, a
        if a % 4 == 3 and n % 4 == 3:
            result = -result
        a %= n

    return result if n == 1 else 0


def _kronecker_two(a: int) -> int:
    if a % 2 == 0:
        return 0

    return 1 if a % 8 in (1, 7) else -1


def kronecker(a: int, n: int) -> int:
    """
    Kronecker symbol (a/n), defined for every pair of integers.

    Agrees with the Jacobi symbol for odd positive n, extended multiplicatively to n = 2, n = -1 and n = 0.
    """
    if n == 0:
        return 1 if a in (-1, 1) else 0

    result = 1
    if n < 0:
        n = -n
        if a < 0:
            result = -1

    while n % 2 == 0:
        n //= 2
        result *= _kronecker_two(a)
        if not result:
            return 0

    if n == 1:
        return result

    return result * jacobi(a, n)
