"""
Exceptions and warnings raised by the pricer.

All errors are caller-input violations, so they derive from ValueError.
"""


class PricingError(ValueError):
    """Base class for invalid pricing inputs."""


class InvalidTrialCount(PricingError):
    """Number of Monte Carlo trials is not a positive integer."""


class InvalidMarketParameters(PricingError):
    """Spot, rate, volatility or maturity outside their domain."""


class InvalidPayoff(PricingError):
    """Payoff constructed with a non-positive strike or negative cash amount."""


class DegenerateSampleWarning(UserWarning):
    """A single trial gives no information about the estimator's spread."""
