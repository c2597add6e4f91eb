"""
Sumcheck Toolkit
================

The Sumcheck interactive proof over a prime field: a prover convinces a
verifier of Σ f(x) over the boolean hypercube {0,1}^n using n rounds of
univariate polynomials and one final evaluation.

Modules:
    - common: Field arithmetic, sparse multivariate polynomials, errors
    - protocol: The prover/verifier round engine and challenge sources
    - parser: Text input for polynomials and override tables
    - main: Console entry point

Quick Start:
    >>> from sumcheck import Polynomial, SumcheckProtocol
    >>> f = Polynomial(3, 97, {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1})
    >>> SumcheckProtocol(f).run().accepted
    True
"""

__version__ = "0.1.0"

from .common import (
    Polynomial,
    PrimeField,
    SumcheckError,
    modular_pow,
)
from .protocol import (
    FixedChallengeSource,
    RandomChallengeSource,
    RejectReason,
    Rejection,
    SumcheckProtocol,
    SumcheckResult,
    run_sumcheck,
)

__all__ = [
    "Polynomial",
    "PrimeField",
    "SumcheckError",
    "modular_pow",
    "FixedChallengeSource",
    "RandomChallengeSource",
    "RejectReason",
    "Rejection",
    "SumcheckProtocol",
    "SumcheckResult",
    "run_sumcheck",
]
