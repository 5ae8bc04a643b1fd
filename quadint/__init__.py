from quadint.classnumber import field_class_number, is_ufd
from quadint.config import DEFAULT_SETTINGS, Settings, setup_basic_logger
from quadint.errors import (
    ArithmeticOverflowError,
    DegreeOverflowError,
    InvalidArgumentError,
    NonEuclideanDomainError,
    NonUniqueFactorizationDomainError,
    NotDivisibleError,
    QuadIntError,
    UnsupportedNumberDomainError,
    ZeroDivisorError,
)
from quadint.factor import irreducible_factors, is_irreducible, is_prime, prime_factors, try_to_factorize_anyway
from quadint.gcd import euclidean_gcd, is_divisible_by, try_euclidean_gcd_anyway
from quadint.grouping import ResultsGrouping
from quadint.ideal import Ideal
from quadint.quad import quadint
from quadint.results import ResultsCache, ResultsTables
from quadint.ring import QuadraticRing, Variant
from quadint.symbols import jacobi, kronecker, legendre
from quadint.units import divide_out_units, elements_of_norm, fundamental_unit, ring_units

__all__ = [
    "ArithmeticOverflowError",
    "DEFAULT_SETTINGS",
    "DegreeOverflowError",
    "Ideal",
    "InvalidArgumentError",
    "NonEuclideanDomainError",
    "NonUniqueFactorizationDomainError",
    "NotDivisibleError",
    "QuadIntError",
    "QuadraticRing",
    "ResultsCache",
    "ResultsGrouping",
    "ResultsTables",
    "Settings",
    "UnsupportedNumberDomainError",
    "Variant",
    "ZeroDivisorError",
    "divide_out_units",
    "elements_of_norm",
    "euclidean_gcd",
    "field_class_number",
    "fundamental_unit",
    "irreducible_factors",
    "is_divisible_by",
    "is_irreducible",
    "is_prime",
    "is_ufd",
    "jacobi",
    "kronecker",
    "legendre",
    "prime_factors",
    "quadint",
    "ring_units",
    "setup_basic_logger",
    "try_euclidean_gcd_anyway",
    "try_to_factorize_anyway",
]
