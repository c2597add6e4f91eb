"""
Sumcheck Protocol Engine

Key Components:
    - SumcheckProtocol: Runs the prover/verifier rounds and the final check
    - SumcheckResult / Rejection: Outcome of a run, including the transcript
    - RandomChallengeSource / FixedChallengeSource: Verifier randomness

Usage:
    >>> from sumcheck.common import Polynomial
    >>> from sumcheck.protocol import SumcheckProtocol, FixedChallengeSource
    >>>
    >>> f = Polynomial(2, 97, {(1, 0): 2, (0, 1): 3})
    >>> engine = SumcheckProtocol(f, challenge_source=FixedChallengeSource([5, 7]))
    >>> engine.run().accepted
    True
"""

from .challenges import ChallengeSource, FixedChallengeSource, RandomChallengeSource
from .core import (
    ProtocolState,
    RejectReason,
    Rejection,
    RoundRecord,
    SumcheckProtocol,
    SumcheckResult,
    honest_round_polynomial,
    run_sumcheck,
)

__all__ = [
    "ChallengeSource",
    "FixedChallengeSource",
    "RandomChallengeSource",
    "ProtocolState",
    "RejectReason",
    "Rejection",
    "RoundRecord",
    "SumcheckProtocol",
    "SumcheckResult",
    "honest_round_polynomial",
    "run_sumcheck",
]
