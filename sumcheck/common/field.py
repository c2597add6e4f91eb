"""
Finite Field Arithmetic for the Sumcheck Protocol.

All Sumcheck computations happen in a prime field Z_p: the integers
{0, 1, ..., p-1} with addition and multiplication taken modulo p. This
module provides the handful of primitives the polynomial engine needs.

Key Concepts:
    - Every value is kept as a canonical residue in [0, p)
    - Exponentiation uses square-and-multiply: O(log e) multiplications
    - The modulus MUST be prime, otherwise the soundness argument of
      Sumcheck (Schwartz-Zippel) does not apply, so it is validated up front

Example:
    >>> modular_pow(3, 4, 97)  # 81
    81
    >>> field = PrimeField(97)
    >>> field.add(45, 67)  # (45 + 67) mod 97 = 15
    15

Python integers are arbitrary precision, so intermediate products such as
base * base can never overflow before they are reduced.
"""

from __future__ import annotations
from typing import Optional
import random

from .errors import InvalidModulus


# Default modulus for console runs (Fermat prime F4 = 2^16 + 1).
DEFAULT_MODULUS = 65537

# Small prime that is easy to check by hand.
SMALL_TEST_PRIME = 97

_SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def modular_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod modulus using square-and-multiply.

    Time complexity: O(log exponent) multiplications.

    Args:
        base: Any integer (negative values are reduced first)
        exponent: Non-negative integer exponent
        modulus: Positive modulus

    Returns:
        Integer in [0, modulus)

    Raises:
        ValueError: If exponent is negative
    """
    if exponent < 0:
        raise ValueError(f"Exponent must be non-negative, got {exponent}")
    if modulus == 1:
        return 0

    result = 1
    base = base % modulus

    while exponent > 0:
        if exponent & 1:  # If least significant bit is 1
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1

    return result


def is_prime(n: int) -> bool:
    """
    Miller-Rabin primality test.

    With the first twelve primes as witnesses the answer is exact for every
    n < 3.3 * 10^24, which covers all 64-bit moduli. Beyond that it is a
    strong probable-prime test.
    """
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n % p == 0:
            return n == p

    # Write n - 1 = d * 2^s with d odd
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for a in _SMALL_PRIMES:
        x = modular_pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = (x * x) % n
            if x == n - 1:
                break
        else:
            return False
    return True


def validate_modulus(modulus: int) -> int:
    """
    Check that modulus is a prime greater than 1.

    Returns:
        The modulus, unchanged

    Raises:
        InvalidModulus: For non-integers, values <= 1 and composites
    """
    if isinstance(modulus, bool) or not isinstance(modulus, int):
        raise InvalidModulus("Modulus must be an integer",
                             {"modulus": repr(modulus)})
    if modulus <= 1:
        raise InvalidModulus("Modulus must be greater than 1",
                             {"modulus": modulus})
    if not is_prime(modulus):
        raise InvalidModulus("Modulus must be prime", {"modulus": modulus})
    return modulus


class PrimeField:
    """
    A prime field Z_p for modular arithmetic on raw integers.

    Unlike a field-element class, this works directly on ``int`` values,
    which is what the sparse polynomial engine stores.

    Attributes:
        prime: The prime modulus p

    Example:
        >>> field = PrimeField(97)
        >>> field.add(45, 67)  # 112 - 97 = 15
        15
        >>> field.contains(97)
        False
    """

    def __init__(self, prime: int):
        """
        Initialize a prime field.

        Args:
            prime: The prime modulus. Validated with ``validate_modulus``.
        """
        self.prime = validate_modulus(prime)

    def __repr__(self) -> str:
        return f"PrimeField({self.prime})"

    def contains(self, value: int) -> bool:
        """Check if a value is already a canonical field element."""
        return 0 <= value < self.prime

    def add(self, a: int, b: int) -> int:
        """Add two integers in the field."""
        return (a + b) % self.prime

    def random(self, rng: Optional[random.Random] = None) -> int:
        """
        Sample a uniformly random field element.

        Args:
            rng: Random generator to draw from (module-level ``random``
                 when omitted)
        """
        source = rng if rng is not None else random
        return source.randrange(self.prime)
