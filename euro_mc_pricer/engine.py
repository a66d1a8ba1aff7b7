from __future__ import annotations

import logging
import numbers
import warnings
from concurrent.futures import ThreadPoolExecutor

from euro_mc_pricer.errors import DegenerateSampleWarning, InvalidTrialCount
from euro_mc_pricer.models import GeometricBrownianMotion, MarketParameters
from euro_mc_pricer.moments import (
    DEFAULT_CONFIDENCE_LEVEL,
    RunningMoments,
    applied_confidence_level,
    confidence_interval,
)
from euro_mc_pricer.payoffs import Payoff
from euro_mc_pricer.random_source import RandomSource, default_source
from euro_mc_pricer.results import MonteCarloResult

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 65_536


def _check_trial_count(n_paths) -> int:
    if isinstance(n_paths, bool) or not isinstance(n_paths, numbers.Integral):
        raise InvalidTrialCount(f"number of trials must be an integer, got {n_paths!r}")
    if n_paths <= 0:
        raise InvalidTrialCount(f"number of trials must be positive, got {n_paths}")
    return int(n_paths)


def split_trials(n_paths: int, n_workers: int) -> list[int]:
    """Split ``n_paths`` into at most ``n_workers`` near-equal positive counts."""
    base, extra = divmod(n_paths, n_workers)
    counts = [base + (1 if i < extra else 0) for i in range(n_workers)]
    return [c for c in counts if c > 0]


def simulate_moments(
    model: GeometricBrownianMotion,
    payoff: Payoff,
    n_paths: int,
    source: RandomSource,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> RunningMoments:
    """
    Run ``n_paths`` trials and return moments of the discounted payoffs.

    Draws are taken ``batch_size`` at a time, so memory stays bounded by the
    batch, not by ``n_paths``. Exactly ``n_paths`` draws are consumed.
    """
    discount = model.params.discount_factor
    moments = RunningMoments()
    remaining = n_paths
    while remaining > 0:
        n = min(batch_size, remaining)
        terminal = model.sample_terminal_prices(n, source)
        moments.update(discount * payoff.evaluate(terminal))
        remaining -= n
    return moments


class MonteCarloEngine:
    """
    Monte Carlo engine for European payoffs under Black-Scholes dynamics.

    Parameters
    ----------
    random_source : RandomSource | None
        Source of standard-normal draws. ``None`` uses the process-wide
        default, looked up at pricing time.
    batch_size : int
        Trials simulated per vectorized step.
    n_workers : int
        Number of threads the trials are split across. Each worker draws
        from its own child stream of ``random_source``; partial moments are
        merged in worker order, so a seeded run is reproducible for a fixed
        worker count.
    """

    def __init__(
        self,
        random_source: RandomSource | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        n_workers: int = 1,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}")
        self._random_source = random_source
        self.batch_size = int(batch_size)
        self.n_workers = int(n_workers)

    @property
    def random_source(self) -> RandomSource:
        if self._random_source is None:
            return default_source()
        return self._random_source

    def price(
        self,
        params: MarketParameters,
        n_paths: int,
        payoff: Payoff,
        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    ) -> MonteCarloResult:
        """
        Price an option via Monte Carlo.

        The price is the sample mean of the discounted payoffs, the standard
        error is the (N-1)-divisor sample standard deviation over sqrt(N),
        and the interval is price +/- z * standard error.
        """
        n_paths = _check_trial_count(n_paths)
        confidence_level = applied_confidence_level(confidence_level)
        if not isinstance(params, MarketParameters):
            raise TypeError(f"params must be MarketParameters, got {type(params).__name__}")
        if not isinstance(payoff, Payoff):
            raise TypeError(f"payoff must be a Payoff, got {type(payoff).__name__}")

        model = GeometricBrownianMotion(params)
        counts = split_trials(n_paths, self.n_workers)
        logger.debug(
            "pricing %s: n_paths=%d workers=%d batch_size=%d",
            payoff, n_paths, len(counts), self.batch_size,
        )

        if len(counts) == 1:
            moments = simulate_moments(model, payoff, n_paths, self.random_source, self.batch_size)
        else:
            moments = self._simulate_parallel(model, payoff, counts)

        if n_paths == 1:
            warnings.warn(
                "single trial: standard error set to 0, interval is not meaningful",
                DegenerateSampleWarning,
                stacklevel=2,
            )

        standard_error = moments.standard_error
        lower, upper = confidence_interval(moments.mean, standard_error, confidence_level)
        result = MonteCarloResult(
            price=moments.mean,
            standard_error=standard_error,
            ci_lower=lower,
            ci_upper=upper,
            n_paths=n_paths,
            confidence_level=confidence_level,
        )
        logger.debug("priced %s: price=%.6f stderr=%.6f", payoff, result.price, result.standard_error)
        return result

    def _simulate_parallel(self, model, payoff, counts) -> RunningMoments:
        sources = self.random_source.spawn(len(counts))
        with ThreadPoolExecutor(max_workers=len(counts)) as pool:
            futures = [
                pool.submit(simulate_moments, model, payoff, n, source, self.batch_size)
                for n, source in zip(counts, sources)
            ]
            partials = [f.result() for f in futures]

        total = RunningMoments()
        for partial in partials:
            total.merge(partial)
        return total


def price_european_option(
    params: MarketParameters,
    n_paths: int,
    payoff: Payoff,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    random_source: RandomSource | None = None,
) -> MonteCarloResult:
    """Price with a single-threaded engine; ``random_source=None`` uses the process-wide default."""
    engine = MonteCarloEngine(random_source=random_source)
    return engine.price(params, n_paths, payoff, confidence_level=confidence_level)
