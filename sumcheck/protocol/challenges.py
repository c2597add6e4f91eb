"""
Verifier Challenge Sources.

The verifier's randomness is an explicit collaborator of the protocol
engine rather than a global generator. Anything with a
``sample(modulus) -> int`` method returning a value in [0, modulus) can be
plugged in.

Two implementations are provided:
    - RandomChallengeSource: uniform samples from a private random.Random,
      optionally seeded for reproducible runs
    - FixedChallengeSource: replays a scripted sequence, for tests that need
      a specific challenge to expose a cheating prover
"""

from __future__ import annotations
from typing import Iterable, List, Optional, Protocol, runtime_checkable
import random

from ..common.errors import ChallengeSourceExhausted
from ..common.field import PrimeField


@runtime_checkable
class ChallengeSource(Protocol):
    """Anything that can draw a verifier challenge from Z_modulus."""

    def sample(self, modulus: int) -> int:
        ...


class RandomChallengeSource:
    """
    Uniform challenges from a private ``random.Random`` instance.

    Example:
        >>> source = RandomChallengeSource(seed=42)
        >>> 0 <= source.sample(97) < 97
        True
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)
        self._field: Optional[PrimeField] = None

    def sample(self, modulus: int) -> int:
        if self._field is None or self._field.prime != modulus:
            self._field = PrimeField(modulus)
        return self._field.random(self._rng)

    def __repr__(self) -> str:
        return f"RandomChallengeSource(seed={self.seed})"


class FixedChallengeSource:
    """
    Replays a fixed list of challenges in order.

    Values are reduced modulo the requested modulus. Asking for more
    challenges than were scripted raises ``ChallengeSourceExhausted``.

    Attributes:
        values: The scripted challenges
        drawn: How many challenges have been handed out so far
    """

    def __init__(self, values: Iterable[int]):
        self.values: List[int] = list(values)
        self.drawn = 0

    def sample(self, modulus: int) -> int:
        if self.drawn >= len(self.values):
            raise ChallengeSourceExhausted("No scripted challenges left",
                                           {"scripted": len(self.values)})
        value = self.values[self.drawn] % modulus
        self.drawn += 1
        return value

    def reset(self) -> None:
        self.drawn = 0

    def __repr__(self) -> str:
        return f"FixedChallengeSource({self.values}, drawn={self.drawn})"
