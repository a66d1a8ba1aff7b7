"""
Closed-form Black-Scholes prices, used as a benchmark for the simulation.
"""

import numpy as np
from scipy.stats import norm

from euro_mc_pricer.models import MarketParameters
from euro_mc_pricer.payoffs import EuropeanCall, EuropeanPut


def black_scholes_price(params: MarketParameters, strike: float, option_type: str = "call") -> float:
    """Black-Scholes price for a European call or put."""
    S0, r, sigma, T = params.spot, params.rate, params.volatility, params.maturity
    kind = option_type.lower()
    if kind not in ("call", "put"):
        raise ValueError("option_type must be 'call' or 'put'")

    if sigma == 0:
        # deterministic terminal price: discounted intrinsic value on the forward
        payoff = EuropeanCall(strike) if kind == "call" else EuropeanPut(strike)
        return float(params.discount_factor * payoff.evaluate(params.forward))

    sqrtT = np.sqrt(T)
    d1 = (np.log(S0 / strike) + (r + 0.5 * sigma * sigma) * T) / (sigma * sqrtT)
    d2 = d1 - sigma * sqrtT

    if kind == "call":
        return float(S0 * norm.cdf(d1) - strike * np.exp(-r * T) * norm.cdf(d2))
    return float(strike * np.exp(-r * T) * norm.cdf(-d2) - S0 * norm.cdf(-d1))


def put_call_parity_gap(params: MarketParameters, strike: float) -> float:
    """C - P implied by parity: S0 - K * exp(-rT)."""
    return params.spot - strike * params.discount_factor
