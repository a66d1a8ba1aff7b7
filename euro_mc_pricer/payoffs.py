from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from euro_mc_pricer.errors import InvalidPayoff


class Payoff(ABC):
    """
    Payoff of a European claim as a function of the terminal price.

    Subclasses implement ``evaluate`` for scalars and ndarrays alike; the
    engine only ever calls ``evaluate``.
    """

    @abstractmethod
    def evaluate(self, terminal_price):
        ...

    def __call__(self, terminal_price):
        return self.evaluate(terminal_price)


def _check_strike(strike: float) -> None:
    if not math.isfinite(strike) or strike <= 0:
        raise InvalidPayoff(f"strike must be positive and finite, got {strike!r}")


@dataclass(frozen=True)
class EuropeanCall(Payoff):
    """
    European call payoff: max(S_T - K, 0)
    """
    strike: float

    def __post_init__(self):
        _check_strike(self.strike)

    def evaluate(self, terminal_price):
        return np.maximum(terminal_price - self.strike, 0.0)


@dataclass(frozen=True)
class EuropeanPut(Payoff):
    """
    European put payoff: max(K - S_T, 0)
    """
    strike: float

    def __post_init__(self):
        _check_strike(self.strike)

    def evaluate(self, terminal_price):
        return np.maximum(self.strike - terminal_price, 0.0)


@dataclass(frozen=True)
class DigitalCall(Payoff):
    """
    Cash-or-nothing call: ``cash`` if S_T > K, else 0.
    """
    strike: float
    cash: float = 1.0

    def __post_init__(self):
        _check_strike(self.strike)
        if not math.isfinite(self.cash) or self.cash < 0:
            raise InvalidPayoff(f"cash must be non-negative and finite, got {self.cash!r}")

    def evaluate(self, terminal_price):
        return np.where(np.asarray(terminal_price) > self.strike, self.cash, 0.0)
