"""
Sumcheck Toolkit - Main Entry Point

Reads a polynomial, runs the Sumcheck protocol on it and prints the
transcript and verdict.

Run with:
    python -m sumcheck
    sumcheck --num-vars 3 --terms "2:3,0,0; 1:1,0,1; 1:0,1,1" --modulus 97

Anything not given on the command line is prompted for, e.g.

    Enter the number of variables in the polynomial:
    3
    Enter polynomial terms in the format 'coeff:exp1,exp2,...; coeff:exp1,exp2,...'
    2:3,0,0; 1:1,0,1; 1:0,1,1

Exit status: 0 if the proof is accepted, 1 if rejected, 2 on bad input.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import logging

from .common.errors import SumcheckError
from .common.field import DEFAULT_MODULUS
from .display import print_header, print_result, print_round
from .parser import (
    parse_challenge_list,
    parse_polynomial,
    parse_prover_overrides,
    parse_verifier_overrides,
)
from .protocol.challenges import FixedChallengeSource, RandomChallengeSource
from .protocol.core import SumcheckProtocol


logger = logging.getLogger(__name__)

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sumcheck",
        description="Run the Sumcheck interactive proof on a multivariate polynomial.",
    )
    parser.add_argument("--num-vars", type=int, help="Number of variables (prompted if omitted)")
    parser.add_argument("--terms", help="Polynomial terms 'coeff:exp1,exp2,...; ...' (prompted if omitted)")
    parser.add_argument("--modulus", type=int, default=DEFAULT_MODULUS,
                        help=f"Prime modulus (default {DEFAULT_MODULUS})")
    parser.add_argument("--seed", type=int, help="Seed for the verifier's random challenges")
    parser.add_argument("--challenges",
                        help="Fixed challenge sequence '2,3,6' used instead of random sampling")
    parser.add_argument("--verifier-overrides", help="Forced challenges 'round:value, ...'")
    parser.add_argument("--prover-overrides",
                        help="Forced prover messages 'round=coeff:exp; ... | round=...'")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print each round as it happens")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default WARNING)")
    return parser


def prompt_num_vars() -> int:
    print("Enter the number of variables in the polynomial:")
    return int(input().strip())


def prompt_terms() -> str:
    print("Enter polynomial terms in the format 'coeff:exp1,exp2,...; coeff:exp1,exp2,...'")
    return input().strip()


def run(args: argparse.Namespace) -> int:
    """Run the protocol for parsed command-line arguments."""
    num_vars = args.num_vars if args.num_vars is not None else prompt_num_vars()
    terms = args.terms if args.terms is not None else prompt_terms()

    polynomial = parse_polynomial(terms, num_vars=num_vars, modulus=args.modulus)

    if args.challenges:
        challenge_source = FixedChallengeSource(parse_challenge_list(args.challenges))
    else:
        challenge_source = RandomChallengeSource(seed=args.seed)

    verifier_overrides = parse_verifier_overrides(args.verifier_overrides) \
        if args.verifier_overrides else None
    prover_overrides = parse_prover_overrides(args.prover_overrides, modulus=args.modulus) \
        if args.prover_overrides else None

    if args.verbose:
        print_header(polynomial)

    engine = SumcheckProtocol(
        polynomial,
        challenge_source=challenge_source,
        verifier_overrides=verifier_overrides,
        prover_overrides=prover_overrides,
        transcript_sink=print_round if args.verbose else None,
    )
    result = engine.run()
    print_result(result)

    return EXIT_ACCEPTED if result.accepted else EXIT_REJECTED


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        return run(args)
    except (SumcheckError, ValueError) as exc:
        logger.debug("Aborting on bad input", exc_info=True)
        print(f"\nError: {exc}")
        return EXIT_USAGE
    except EOFError:
        print("\nNo input given.")
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
