"""
Convergence study: price the same option at increasing trial counts and
report price, standard error and confidence interval for each count.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from euro_mc_pricer.engine import MonteCarloEngine  # noqa: E402
from euro_mc_pricer.models import MarketParameters  # noqa: E402
from euro_mc_pricer.moments import DEFAULT_CONFIDENCE_LEVEL, applied_confidence_level  # noqa: E402
from euro_mc_pricer.payoffs import Payoff  # noqa: E402
from euro_mc_pricer.results import CSV_COLUMNS  # noqa: E402

logger = logging.getLogger(__name__)

DEFAULT_SIMULATION_COUNTS = [
    1000, 5000, 10000, 50000, 100000, 200000, 500000, 1000000, 2000000, 5000000,
]


def run_convergence(
    params: MarketParameters,
    payoff: Payoff,
    counts: Iterable[int] = DEFAULT_SIMULATION_COUNTS,
    engine: MonteCarloEngine | None = None,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> pd.DataFrame:
    """
    Price ``payoff`` once per trial count.

    Returns a DataFrame with columns Simulations, Price, StandardError,
    CILower, CIUpper (one row per count, in the given order).
    """
    if engine is None:
        engine = MonteCarloEngine()
    rows = []
    for n in counts:
        result = engine.price(params, n, payoff, confidence_level=confidence_level)
        rows.append(result.to_row())
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def format_table(frame: pd.DataFrame, confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> str:
    pct = f"{applied_confidence_level(confidence_level):.0%}"
    lines = [
        f"Simulations | Price       | Std. Error  | {pct + ' CI Lower':>12} | {pct + ' CI Upper':>12}",
        "------------|-------------|-------------|--------------|--------------",
    ]
    for row in frame.itertuples(index=False):
        lines.append(
            f"{row.Simulations:>11d} | {row.Price:>11.6f} | {row.StandardError:>11.6f} | "
            f"{row.CILower:>12.6f} | {row.CIUpper:>12.6f}"
        )
    lines.append("-" * 66)
    return "\n".join(lines)


def write_csv(frame: pd.DataFrame, path: str) -> bool:
    """Write the convergence table; log and return False on I/O failure."""
    try:
        frame.to_csv(path, index=False, float_format="%.6f")
    except OSError as e:
        logger.error("could not write %s: %s", path, e)
        return False
    logger.info("wrote convergence data to %s", path)
    return True


def plot_convergence(
    frame: pd.DataFrame,
    path: str,
    reference: float | None = None,
    title: str = "Monte Carlo convergence",
) -> bool:
    """Price with its confidence band against log trial count."""
    fig = plt.figure()
    try:
        n = frame["Simulations"].to_numpy()
        plt.fill_between(n, frame["CILower"].to_numpy(), frame["CIUpper"].to_numpy(), alpha=0.3, label="CI")
        plt.plot(n, frame["Price"].to_numpy(), marker="o", label="MC price")
        if reference is not None and np.isfinite(reference):
            plt.axhline(reference, linestyle="--", color="black", label="Black-Scholes")
        plt.xscale("log")
        plt.xlabel("Simulations")
        plt.ylabel("Price")
        plt.title(title)
        plt.legend()
        plt.savefig(path, dpi=200, bbox_inches="tight")
    except (OSError, ValueError) as e:
        # ValueError: unsupported file extension
        logger.error("could not write %s: %s", path, e)
        return False
    finally:
        plt.close(fig)
    logger.info("saved plot to %s", path)
    return True


def convergence_analysis(
    params: MarketParameters,
    payoff: Payoff,
    option_label: str,
    filename_prefix: str,
    counts: Iterable[int] = DEFAULT_SIMULATION_COUNTS,
    engine: MonteCarloEngine | None = None,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    out_dir: str = ".",
    plot: bool = False,
    reference: float | None = None,
) -> pd.DataFrame:
    """
    Run the study, print the table and save ``<prefix>_convergence.csv``
    (and ``.png`` when ``plot``) under ``out_dir``.

    File errors are reported but never stop the study.
    """
    print(f"\n--- Convergence Analysis for {option_label} ---")
    frame = run_convergence(params, payoff, counts, engine=engine, confidence_level=confidence_level)
    print(format_table(frame, confidence_level))

    csv_path = os.path.join(out_dir, f"{filename_prefix}_convergence.csv")
    if write_csv(frame, csv_path):
        print(f"Convergence data saved to {csv_path}")
    else:
        print(f"Error: could not write {csv_path}")

    if plot:
        png_path = os.path.join(out_dir, f"{filename_prefix}_convergence.png")
        plot_convergence(frame, png_path, reference=reference, title=f"{option_label}: Monte Carlo convergence")
    return frame
