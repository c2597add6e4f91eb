"""
Error types for the Sumcheck toolkit.

Two kinds of failure exist in this package and they are kept apart:

    - Usage errors (this module): the caller handed an API something it
      cannot work with, e.g. an exponent tuple of the wrong length or a
      modulus that is not prime. These are raised immediately.
    - Protocol rejections (see ``sumcheck.protocol.core.RejectReason``): a
      proof that fails one of the verifier's checks. A rejected proof is a
      normal outcome of running the protocol, so it is returned as data and
      never raised.

Every usage error also derives from the builtin exception a plain Python
caller would expect (``ValueError`` or ``IndexError``), so code written
against the builtins keeps working.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class SumcheckError(Exception):
    """
    Base class for all usage errors raised by this package.

    Attributes:
        message: Human-readable description
        context: Optional key/value details (offending index, modulus, ...)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ArityMismatch(SumcheckError, ValueError):
    """An exponent tuple or point does not have ``num_vars`` entries."""


class InvalidModulus(SumcheckError, ValueError):
    """The modulus is not a prime greater than 1."""


class IndexOutOfRange(SumcheckError, IndexError):
    """A variable index lies outside ``[0, num_vars)``."""


class DuplicateAssignment(SumcheckError, ValueError):
    """The same variable was assigned twice in one partial evaluation."""


class IncompatibleOperands(SumcheckError, ValueError):
    """Two polynomials differ in ``num_vars`` or ``modulus``."""


class InvalidProtocolInput(SumcheckError, ValueError):
    """The protocol engine was configured with unusable inputs."""


class ChallengeSourceExhausted(SumcheckError, LookupError):
    """A fixed challenge sequence ran out of values."""


class ParseError(SumcheckError, ValueError):
    """Text input could not be parsed into a polynomial or override table."""


class InvalidFieldElement(SumcheckError, ValueError):
    """A value assigned to a variable is not in ``[0, modulus)``."""
