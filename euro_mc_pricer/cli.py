"""
Command-line entry point: price a European call and put, then run the
convergence study for both.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from euro_mc_pricer.analytic import black_scholes_price
from euro_mc_pricer.convergence import DEFAULT_SIMULATION_COUNTS, convergence_analysis
from euro_mc_pricer.engine import DEFAULT_BATCH_SIZE, MonteCarloEngine
from euro_mc_pricer.models import MarketParameters
from euro_mc_pricer.payoffs import EuropeanCall, EuropeanPut
from euro_mc_pricer.random_source import RandomSource
from euro_mc_pricer.results import MonteCarloResult

logger = logging.getLogger(__name__)


def _counts(text: str) -> list[int]:
    try:
        return [int(c) for c in text.split(",") if c.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}") from e


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="euro-mc-pricer",
        description="Monte Carlo pricer for European options under Black-Scholes dynamics.",
    )
    p.add_argument("--spot", type=float, default=100.0, help="Initial spot price")
    p.add_argument("--strike", type=float, default=105.0, help="Option strike price")
    p.add_argument("--rate", type=float, default=0.05, help="Risk-free interest rate")
    p.add_argument("--volatility", type=float, default=0.20, help="Annualized volatility")
    p.add_argument("--maturity", type=float, default=1.0, help="Time to maturity in years")
    p.add_argument("--simulations", type=int, default=1_000_000, help="Trials for the headline prices")
    p.add_argument(
        "--confidence",
        type=float,
        default=0.95,
        help="Confidence level (0.90, 0.95 or 0.99; anything else uses the 95%% z-score)",
    )
    p.add_argument(
        "--counts",
        type=_counts,
        default=list(DEFAULT_SIMULATION_COUNTS),
        help="Comma-separated trial counts for the convergence study",
    )
    p.add_argument("--seed", type=int, default=None, help="Random seed (default: time-based)")
    p.add_argument("--workers", type=int, default=1, help="Worker threads per pricing run")
    p.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Trials per vectorized batch")
    p.add_argument("--out-dir", type=str, default=".", help="Directory for CSV and plot output")
    p.add_argument("--plot", action="store_true", help="Also save convergence plots (PNG)")
    p.add_argument("--no-convergence", action="store_true", help="Skip the convergence study")
    p.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    return p


def _print_result(label: str, result: MonteCarloResult, reference: float) -> None:
    pct = f"{result.confidence_level:.0%}"
    print(f"Estimated European {label} Price:".ljust(39) + f"{result.price:.6f}")
    print(f"{label} Price Standard Error:".ljust(39) + f"{result.standard_error:.6f}")
    print(
        f"{label} Price {pct} Confidence Interval:".ljust(39)
        + f"[{result.ci_lower:.6f}, {result.ci_upper:.6f}]"
    )
    print(f"Black-Scholes {label} Price:".ljust(39) + f"{reference:.6f}\n")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = MarketParameters(
            spot=args.spot,
            rate=args.rate,
            volatility=args.volatility,
            maturity=args.maturity,
        )
        call = EuropeanCall(args.strike)
        put = EuropeanPut(args.strike)
        engine = MonteCarloEngine(
            random_source=RandomSource(args.seed),
            batch_size=args.batch_size,
            n_workers=args.workers,
        )

        print("Monte Carlo European Option Pricer")
        print("-" * 48)
        print(f"Initial Spot Price: {params.spot}")
        print(f"Strike Price: {args.strike}")
        print(f"Risk-Free Rate: {params.rate}")
        print(f"Volatility: {params.volatility}")
        print(f"Time to Maturity: {params.maturity} years")
        print(f"Base Number of Simulations: {args.simulations}\n")

        call_bs = black_scholes_price(params, args.strike, "call")
        put_bs = black_scholes_price(params, args.strike, "put")

        call_result = engine.price(params, args.simulations, call, confidence_level=args.confidence)
        _print_result("Call", call_result, call_bs)
        put_result = engine.price(params, args.simulations, put, confidence_level=args.confidence)
        _print_result("Put", put_result, put_bs)

        if not args.no_convergence:
            try:
                os.makedirs(args.out_dir, exist_ok=True)
            except OSError as e:
                # each file write then reports its own failure
                logger.error("could not create output directory %s: %s", args.out_dir, e)
            for label, prefix, payoff, reference in (
                ("Call Option", "call_option", call, call_bs),
                ("Put Option", "put_option", put, put_bs),
            ):
                convergence_analysis(
                    params,
                    payoff,
                    label,
                    prefix,
                    counts=args.counts,
                    engine=engine,
                    confidence_level=args.confidence,
                    out_dir=args.out_dir,
                    plot=args.plot,
                    reference=reference,
                )
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
