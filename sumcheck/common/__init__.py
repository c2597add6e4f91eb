"""
Common building blocks for the Sumcheck toolkit.

This module provides:
    - Finite field arithmetic (modular_pow, PrimeField, validate_modulus)
    - Sparse multivariate polynomials (Polynomial)
    - Usage error types
"""

from .errors import (
    ArityMismatch,
    ChallengeSourceExhausted,
    DuplicateAssignment,
    IncompatibleOperands,
    IndexOutOfRange,
    InvalidFieldElement,
    InvalidModulus,
    InvalidProtocolInput,
    ParseError,
    SumcheckError,
)
from .field import DEFAULT_MODULUS, PrimeField, is_prime, modular_pow, validate_modulus
from .polynomial import Polynomial

__all__ = [
    "ArityMismatch",
    "ChallengeSourceExhausted",
    "DuplicateAssignment",
    "IncompatibleOperands",
    "IndexOutOfRange",
    "InvalidFieldElement",
    "InvalidModulus",
    "InvalidProtocolInput",
    "ParseError",
    "SumcheckError",
    "DEFAULT_MODULUS",
    "PrimeField",
    "is_prime",
    "modular_pow",
    "validate_modulus",
    "Polynomial",
]
