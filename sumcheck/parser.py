"""
Text input for polynomials and override tables.

Polynomial format (one string, terms separated by ';'):

    "coeff:exp1,exp2,...; coeff:exp1,exp2,..."

    "2:3,0,0; 1:1,0,1; 1:0,1,1"   →   2·x1³ + x1·x3 + x2·x3

Verifier overrides (round:challenge pairs, separated by ',' or ';'):

    "1:2, 2:3, 3:6"

Prover overrides (round=polynomial, entries separated by '|'):

    "1=8:3; 2:1"   →   {1: 8X³ + 2X}
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import re

from .common.errors import ParseError
from .common.field import DEFAULT_MODULUS
from .common.polynomial import Polynomial


_TERM_SEPARATOR = re.compile(r"\s*;\s*")
_PAIR_SEPARATOR = re.compile(r"\s*[,;]\s*")


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ParseError(f"Invalid {what}", {what: text.strip()}) from None


def parse_terms(text: str) -> List[Tuple[Tuple[int, ...], int]]:
    """
    Split a polynomial string into (exponents, coefficient) pairs.

    Empty segments (e.g. a trailing ';') are skipped.

    Raises:
        ParseError: On a malformed term, coefficient or exponent
    """
    terms = []
    for term in _TERM_SEPARATOR.split(text.strip()):
        if not term:
            continue
        parts = term.split(":")
        if len(parts) != 2:
            raise ParseError("Invalid term format, expected 'coeff:exp1,exp2,...'",
                             {"term": term})

        coefficient = _parse_int(parts[0], "coefficient")
        exponents = tuple(_parse_int(e, "exponent") for e in parts[1].split(","))
        if any(e < 0 for e in exponents):
            raise ParseError("Exponents must be non-negative", {"term": term})
        terms.append((exponents, coefficient))
    return terms


def parse_polynomial(text: str, num_vars: Optional[int] = None,
                     modulus: int = DEFAULT_MODULUS) -> Polynomial:
    """
    Parse a polynomial string.

    Args:
        text: Terms in 'coeff:exp1,exp2,...; ...' form
        num_vars: Expected number of variables; inferred from the first
                  term when omitted
        modulus: Prime modulus of the coefficient field

    Raises:
        ParseError: On malformed input, or if num_vars cannot be inferred
        ArityMismatch: If a term has the wrong number of exponents
        InvalidModulus: If modulus is not prime
    """
    terms = parse_terms(text)
    if num_vars is None:
        if not terms:
            raise ParseError("Cannot infer the number of variables from an empty polynomial")
        num_vars = len(terms[0][0])

    poly = Polynomial(num_vars, modulus)
    for exponents, coefficient in terms:
        poly.add_term(exponents, coefficient)
    return poly


def parse_verifier_overrides(text: str) -> Dict[int, int]:
    """
    Parse 'round:challenge' pairs into a verifier override table.

    Raises:
        ParseError: On malformed pairs or a round given twice
    """
    overrides: Dict[int, int] = {}
    for pair in _PAIR_SEPARATOR.split(text.strip()):
        if not pair:
            continue
        parts = pair.split(":")
        if len(parts) != 2:
            raise ParseError("Invalid override, expected 'round:challenge'", {"entry": pair})
        round_num = _parse_int(parts[0], "round")
        if round_num in overrides:
            raise ParseError("Round overridden twice", {"round": round_num})
        overrides[round_num] = _parse_int(parts[1], "challenge")
    return overrides


def parse_challenge_list(text: str) -> List[int]:
    """Parse a comma separated list of challenges, e.g. '2, 3, 6'."""
    return [_parse_int(v, "challenge") for v in _PAIR_SEPARATOR.split(text.strip()) if v]


def parse_prover_overrides(text: str, modulus: int = DEFAULT_MODULUS) -> Dict[int, Polynomial]:
    """
    Parse 'round=polynomial' entries separated by '|'.

    Each polynomial's arity is inferred from its first term, so a
    deliberately multivariate message can be scripted too.

    Raises:
        ParseError: On malformed entries or a round given twice
    """
    overrides: Dict[int, Polynomial] = {}
    for entry in text.split("|"):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ParseError("Invalid override, expected 'round=coeff:exp; ...'",
                             {"entry": entry})
        round_text, poly_text = entry.split("=", 1)
        round_num = _parse_int(round_text, "round")
        if round_num in overrides:
            raise ParseError("Round overridden twice", {"round": round_num})
        overrides[round_num] = parse_polynomial(poly_text, modulus=modulus)
    return overrides
