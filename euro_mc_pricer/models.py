from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from euro_mc_pricer.errors import InvalidMarketParameters
from euro_mc_pricer.random_source import RandomSource, default_source


@dataclass(frozen=True)
class MarketParameters:
    """
    Market inputs for one simulation run.

    Attributes:
        spot: Initial asset price (> 0)
        rate: Risk-free interest rate (annualized, continuously compounded)
        volatility: Volatility (annualized, >= 0)
        maturity: Time to maturity in years (> 0)
    """
    spot: float
    rate: float
    volatility: float
    maturity: float

    def __post_init__(self):
        for name in ("spot", "rate", "volatility", "maturity"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidMarketParameters(f"{name} must be finite, got {value!r}")
        if self.spot <= 0:
            raise InvalidMarketParameters(f"spot must be positive, got {self.spot}")
        if self.maturity <= 0:
            raise InvalidMarketParameters(f"maturity must be positive, got {self.maturity}")
        if self.volatility < 0:
            raise InvalidMarketParameters(f"volatility must be non-negative, got {self.volatility}")

    @property
    def discount_factor(self) -> float:
        return math.exp(-self.rate * self.maturity)

    @property
    def forward(self) -> float:
        return self.spot * math.exp(self.rate * self.maturity)


def simulate_terminal_price(params: MarketParameters, z):
    """
    Terminal price under risk-neutral GBM for standard-normal draw(s) ``z``:

        S_T = S_0 * exp((r - 0.5 * sigma^2) * T + sigma * sqrt(T) * z)

    ``z`` may be a float or an ndarray; the result has the same shape.
    """
    drift = (params.rate - 0.5 * params.volatility**2) * params.maturity
    diffusion = params.volatility * np.sqrt(params.maturity)
    return params.spot * np.exp(drift + diffusion * z)


class GeometricBrownianMotion:
    """
    Risk-neutral GBM model:
        dS = r S dt + sigma S dW

    Only the terminal value is simulated; one draw per path.
    """

    def __init__(self, params: MarketParameters):
        self.params = params
        self._drift = (params.rate - 0.5 * params.volatility**2) * params.maturity
        self._diffusion = params.volatility * np.sqrt(params.maturity)

    def terminal_price(self, z):
        return self.params.spot * np.exp(self._drift + self._diffusion * z)

    def sample_terminal_prices(self, n: int, source: RandomSource | None = None) -> np.ndarray:
        """
        Simulate ``n`` terminal prices, consuming exactly ``n`` draws.

        Returns
        -------
        prices : ndarray of shape (n,)
        """
        if source is None:
            source = default_source()
        return self.terminal_price(source.standard_normal(n))
