"""Console rendering of protocol runs."""

from __future__ import annotations
from typing import List

from tabulate import tabulate

from .common.polynomial import Polynomial
from .protocol.core import RoundRecord, SumcheckResult


def transcript_rows(result: SumcheckResult) -> List[List[str]]:
    """One row per round: j, g_j, g_j(0)+g_j(1), expected, r_j."""
    rows = []
    for record in result.rounds:
        message = record.message
        if message.num_vars == 1:
            round_sum = str((message.evaluate([0]) + message.evaluate([1])) % message.modulus)
        else:
            round_sum = "-"

        challenge = "-" if record.challenge is None else str(record.challenge)
        if record.challenge_overridden:
            challenge += " *"

        poly_text = str(message)
        if record.prover_overridden:
            poly_text += " *"

        rows.append([record.round_num, poly_text, round_sum, record.expected_sum, challenge])
    return rows


def format_transcript(result: SumcheckResult, tablefmt: str = "simple") -> str:
    """Render the transcript as a table. Forced values are marked with '*'."""
    return tabulate(
        transcript_rows(result),
        headers=["j", "g_j(X)", "g_j(0)+g_j(1)", "expected", "r_j"],
        tablefmt=tablefmt,
    )


def print_header(polynomial: Polynomial):
    print("\n" + "═" * 70)
    print("              SUMCHECK PROTOCOL")
    print("═" * 70)
    print(f"\nPolynomial: f = {polynomial}")
    print(f"Number of variables: n = {polynomial.num_vars}")
    print(f"Field: Z_{polynomial.modulus}")


def print_round(record: RoundRecord):
    """Print one round as soon as it is produced (verbose mode)."""
    print(f"\n{'─' * 40}")
    print(f"ROUND {record.round_num}")
    forced = " (forced)" if record.prover_overridden else ""
    print(f"  g_{record.round_num}(X) = {record.message}{forced}")
    print(f"  expected g_{record.round_num}(0) + g_{record.round_num}(1) = {record.expected_sum}")
    if record.challenge is not None:
        forced = " (forced)" if record.challenge_overridden else ""
        print(f"  r_{record.round_num} = {record.challenge}{forced}")


def print_result(result: SumcheckResult):
    """Print the transcript table and the verdict."""
    print(f"\nClaimed sum: C = {result.claimed_sum}\n")
    print(format_transcript(result))

    if result.final_value is not None:
        print(f"\nFinal check: f(r) = {result.final_value}, "
              f"g_n(r_n) = {result.expected_value}")

    if result.accepted:
        print("\n✓ Proof accepted!")
    else:
        print(f"\n✗ Proof rejected! ({result.rejection})")
