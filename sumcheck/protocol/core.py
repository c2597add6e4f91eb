"""
Sumcheck Protocol Engine.

The Sumcheck protocol lets a prover convince a verifier that

    C = Σ f(x)   for x ∈ {0,1}^n

without the verifier summing 2^n evaluations itself.

The protocol (n rounds + a final check):
    Round j = 1..n:
        1. Prover sends g_j(X_j) = Σ f(r_1, ..., r_{j-1}, X_j, x_{j+1}, ..., x_n)
           summed over boolean x_{j+1}, ..., x_n
        2. Verifier checks, in order:
             a. g_j is univariate
             b. deg(g_j) <= deg_{X_j}(f)
             c. g_1(0) + g_1(1) = C          (j = 1)
                g_j(0) + g_j(1) = g_{j-1}(r_{j-1})   (j > 1)
        3. Verifier picks a challenge r_j
    Final check:
        f(r_1, ..., r_n) = g_n(r_n)

A cheating prover has to lie in some round, and a random challenge catches
the lie except with probability deg/p per round (Schwartz-Zippel).

Test seams:
    - challenge_source: where r_j comes from when not overridden
    - verifier_overrides: {round: r_round} to script the verifier
    - prover_overrides: {round: g_round} to script a dishonest prover

A failed check is NOT an exception. The engine returns a SumcheckResult
whose ``rejection`` names the failed check and the round it happened in.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

from ..common.errors import IncompatibleOperands, IndexOutOfRange, InvalidProtocolInput
from ..common.field import PrimeField
from ..common.polynomial import Polynomial
from .challenges import ChallengeSource, RandomChallengeSource


logger = logging.getLogger(__name__)


class RejectReason(Enum):
    """Which verifier check failed."""
    NOT_UNIVARIATE = "not_univariate"
    DEGREE_EXCEEDED = "degree_exceeded"
    CONSISTENCY_FAILURE = "consistency_failure"
    FINAL_CHECK_FAILURE = "final_check_failure"


class ProtocolState(Enum):
    """Where the engine is in a run."""
    INIT = "init"
    ROUND = "round"
    FINAL_CHECK = "final_check"
    ACCEPT = "accept"
    REJECT = "reject"


@dataclass(frozen=True)
class Rejection:
    """
    A rejected proof.

    Attributes:
        reason: The check that failed
        round: Round in which it failed (1-indexed; n for the final check)
        detail: Human-readable explanation with the offending values
    """
    reason: RejectReason
    round: int
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.reason.value} at round {self.round}"
        return f"{text}: {self.detail}" if self.detail else text


@dataclass
class RoundRecord:
    """
    One entry of the protocol transcript.

    Attributes:
        round_num: Round number (1-indexed)
        message: The univariate polynomial g_j sent by the prover
        challenge: Challenge r_j drawn after the message was accepted
                   (None if the round was rejected)
        expected_sum: Value g_j(0) + g_j(1) had to match
        prover_overridden: True if g_j came from the prover override table
        challenge_overridden: True if r_j came from the verifier override table
    """
    round_num: int
    message: Polynomial
    challenge: Optional[int] = None
    expected_sum: int = 0
    prover_overridden: bool = False
    challenge_overridden: bool = False

    def __repr__(self) -> str:
        return f"RoundRecord(round={self.round_num}, message={self.message}, challenge={self.challenge})"


@dataclass
class SumcheckResult:
    """
    Complete result of one protocol run.

    Attributes:
        claimed_sum: The sum C the prover claims
        rounds: Transcript of round messages and challenges
        challenges: All challenges r_1, ..., r_k drawn during the run
        rejection: Why the proof was rejected, or None if accepted
        final_value: f(r_1, ..., r_n), if the final check was reached
        expected_value: g_n(r_n), if the final check was reached
    """
    claimed_sum: int
    rounds: List[RoundRecord] = field(default_factory=list)
    challenges: List[int] = field(default_factory=list)
    rejection: Optional[Rejection] = None
    final_value: Optional[int] = None
    expected_value: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


TranscriptSink = Callable[[RoundRecord], None]


def honest_round_polynomial(polynomial: Polynomial,
                            fixed: Sequence[Tuple[int, int]]) -> Polynomial:
    """
    The honest prover's message for the next round.

    Fixes the already-challenged variables, then sums out every variable
    after the current one, leaving a univariate polynomial.
    """
    return polynomial.partial_eval(list(fixed)).reduce_to(1)


class SumcheckProtocol:
    """
    Runs the Sumcheck protocol between an honest verifier and a
    (possibly scripted) prover.

    Example:
        >>> f = Polynomial(3, 97, {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1})
        >>> engine = SumcheckProtocol(f, verifier_overrides={1: 2, 2: 3, 3: 6})
        >>> engine.run().accepted
        True
    """

    def __init__(self, polynomial: Polynomial,
                 challenge_source: Optional[ChallengeSource] = None,
                 verifier_overrides: Optional[Mapping[int, int]] = None,
                 prover_overrides: Optional[Mapping[int, Polynomial]] = None,
                 transcript_sink: Optional[TranscriptSink] = None):
        """
        Initialize the engine.

        Args:
            polynomial: The polynomial f whose hypercube sum is being proven
            challenge_source: Source of verifier randomness
                              (a fresh RandomChallengeSource when omitted)
            verifier_overrides: Forced challenges, keyed by round 1..n
            prover_overrides: Forced prover messages, keyed by round 1..n
            transcript_sink: Called with each RoundRecord as it is produced

        Raises:
            InvalidProtocolInput: If f has no variables or a forced
                                  challenge is not a field element
            IndexOutOfRange: If an override names a round outside 1..n
            IncompatibleOperands: If a forced message is not a polynomial
                                  over the same field
        """
        if not isinstance(polynomial, Polynomial):
            raise InvalidProtocolInput("Expected a Polynomial",
                                       {"got": type(polynomial).__name__})
        if polynomial.num_vars < 1:
            raise InvalidProtocolInput("Sumcheck needs at least one variable",
                                       {"num_vars": polynomial.num_vars})

        self.polynomial = polynomial
        self.num_vars = polynomial.num_vars
        self.modulus = polynomial.modulus
        self.field = PrimeField(polynomial.modulus)
        self.challenge_source = challenge_source if challenge_source is not None \
            else RandomChallengeSource()
        self.verifier_overrides: Dict[int, int] = dict(verifier_overrides or {})
        self.prover_overrides: Dict[int, Polynomial] = dict(prover_overrides or {})
        self.transcript_sink = transcript_sink

        self._validate_overrides()

        # Degree bounds are fixed for the whole run
        self.degree_bounds = polynomial.degrees()

        self.reset()

    def _validate_overrides(self):
        for table in (self.verifier_overrides, self.prover_overrides):
            for round_num in table:
                if isinstance(round_num, bool) or not isinstance(round_num, int) \
                        or not 1 <= round_num <= self.num_vars:
                    raise IndexOutOfRange("Override round out of range",
                                          {"round": round_num, "num_rounds": self.num_vars})

        for round_num, value in self.verifier_overrides.items():
            if isinstance(value, bool) or not isinstance(value, int) \
                    or not self.field.contains(value):
                raise InvalidProtocolInput("Forced challenge must be a field element",
                                           {"round": round_num, "value": value})

        for round_num, message in self.prover_overrides.items():
            if not isinstance(message, Polynomial) or message.modulus != self.modulus:
                raise IncompatibleOperands("Forced prover message must be a polynomial "
                                           "over the same field",
                                           {"round": round_num})

    def reset(self):
        """Reset to the initial state."""
        self.state = ProtocolState.INIT
        self.round = 0
        self.fixed: List[Tuple[int, int]] = []
        self.challenges: List[int] = []
        self.history: List[RoundRecord] = []

    # =========================================================================
    # Prover side
    # =========================================================================

    def compute_claimed_sum(self) -> int:
        """C = Σ f over the hypercube, as the honest prover computes it."""
        return self.polynomial.reduce_to(0).constant()

    def prover_message(self, round_num: int) -> Tuple[Polynomial, bool]:
        """
        The prover's round polynomial g_j.

        Returns:
            Tuple of (message, whether it came from the override table)
        """
        if round_num in self.prover_overrides:
            return self.prover_overrides[round_num], True
        return honest_round_polynomial(self.polynomial, self.fixed), False

    # =========================================================================
    # Verifier side
    # =========================================================================

    def select_challenge(self, round_num: int) -> Tuple[int, bool]:
        """
        The verifier's challenge r_j for round ``round_num``.

        Returns:
            Tuple of (challenge, whether it came from the override table)

        Raises:
            InvalidProtocolInput: If the challenge source returns a value
                                  outside [0, modulus)
        """
        if round_num in self.verifier_overrides:
            return self.verifier_overrides[round_num], True

        challenge = self.challenge_source.sample(self.modulus)
        if isinstance(challenge, bool) or not isinstance(challenge, int) \
                or not self.field.contains(challenge):
            raise InvalidProtocolInput("Challenge source returned a non-field element",
                                       {"round": round_num, "value": challenge})
        return challenge, False

    def check_round(self, round_num: int, message: Polynomial,
                    expected_sum: int) -> Optional[Rejection]:
        """
        Run the three per-round verifier checks, stopping at the first failure.

        Args:
            round_num: Round number j (1-indexed)
            message: The prover's g_j
            expected_sum: C for j = 1, otherwise g_{j-1}(r_{j-1})

        Returns:
            A Rejection, or None if every check passed
        """
        if message.num_vars != 1:
            return Rejection(RejectReason.NOT_UNIVARIATE, round_num,
                             f"g_{round_num} has {message.num_vars} variables")

        degree = message.degree_in_var(0)
        bound = self.degree_bounds[round_num - 1]
        if degree > bound:
            return Rejection(RejectReason.DEGREE_EXCEEDED, round_num,
                             f"deg(g_{round_num}) = {degree} > {bound}")

        round_sum = self.field.add(message.evaluate([0]), message.evaluate([1]))
        if round_sum != expected_sum:
            return Rejection(RejectReason.CONSISTENCY_FAILURE, round_num,
                             f"g_{round_num}(0) + g_{round_num}(1) = {round_sum}, "
                             f"expected {expected_sum}")
        return None

    # =========================================================================
    # Driver
    # =========================================================================

    def _emit(self, record: RoundRecord):
        self.history.append(record)
        if self.transcript_sink is not None:
            self.transcript_sink(record)

    def _reject(self, result: SumcheckResult, rejection: Rejection) -> SumcheckResult:
        self.state = ProtocolState.REJECT
        result.rejection = rejection
        logger.warning("Proof rejected: %s", rejection)
        return result

    def execute_round(self, round_num: int, expected_sum: int) -> Tuple[RoundRecord, Optional[Rejection]]:
        """
        Execute round j: get g_j from the prover and check it.

        The challenge is NOT drawn here; it is only revealed once the
        message has been accepted.
        """
        self.state = ProtocolState.ROUND
        self.round = round_num

        message, overridden = self.prover_message(round_num)
        logger.debug("g_%d = %s%s", round_num, message,
                     " (forced)" if overridden else "")

        record = RoundRecord(round_num=round_num, message=message,
                             expected_sum=expected_sum,
                             prover_overridden=overridden)
        return record, self.check_round(round_num, message, expected_sum)

    def run(self) -> SumcheckResult:
        """
        Run the complete protocol.

        Returns:
            SumcheckResult; ``accepted`` is False and ``rejection`` is set
            if any verifier check failed
        """
        self.reset()

        claimed_sum = self.compute_claimed_sum()
        logger.debug("Claimed sum C = %d", claimed_sum)
        result = SumcheckResult(claimed_sum=claimed_sum,
                                rounds=self.history,
                                challenges=self.challenges)

        expected_sum = claimed_sum

        for round_num in range(1, self.num_vars + 1):
            record, rejection = self.execute_round(round_num, expected_sum)
            if rejection is not None:
                self._emit(record)
                return self._reject(result, rejection)

            if round_num == self.num_vars:
                self.state = ProtocolState.FINAL_CHECK

            challenge, forced = self.select_challenge(round_num)
            logger.debug("r_%d = %d%s", round_num, challenge, " (forced)" if forced else "")

            record.challenge = challenge
            record.challenge_overridden = forced
            self.fixed.append((round_num - 1, challenge))
            self.challenges.append(challenge)
            self._emit(record)

            # Next round's g_{j+1}(0) + g_{j+1}(1) must equal g_j(r_j)
            expected_sum = record.message.evaluate([challenge])

        # Final check: f(r_1, ..., r_n) = g_n(r_n)
        final_value = self.polynomial.partial_eval(self.fixed).constant()
        result.final_value = final_value
        result.expected_value = expected_sum

        if final_value != expected_sum:
            return self._reject(result, Rejection(
                RejectReason.FINAL_CHECK_FAILURE, self.num_vars,
                f"f(r) = {final_value}, g_{self.num_vars}(r_{self.num_vars}) = {expected_sum}",
            ))

        self.state = ProtocolState.ACCEPT
        logger.info("Proof accepted: C = %d over %d rounds", claimed_sum, self.num_vars)
        return result


def run_sumcheck(polynomial: Polynomial, **kwargs) -> SumcheckResult:
    """Build a SumcheckProtocol for ``polynomial`` and run it once."""
    return SumcheckProtocol(polynomial, **kwargs).run()
