from __future__ import annotations

from dataclasses import asdict, dataclass

CSV_COLUMNS = ["Simulations", "Price", "StandardError", "CILower", "CIUpper"]


@dataclass(frozen=True)
class MonteCarloResult:
    """
    Monte Carlo price estimate with its uncertainty.

    ``ci_lower <= price <= ci_upper`` and ``standard_error >= 0`` hold for
    every result the engine returns.
    """
    price: float
    standard_error: float
    ci_lower: float
    ci_upper: float
    n_paths: int
    confidence_level: float = 0.95

    @property
    def margin_of_error(self) -> float:
        return 0.5 * (self.ci_upper - self.ci_lower)

    @property
    def width(self) -> float:
        return self.ci_upper - self.ci_lower

    def contains(self, value: float) -> bool:
        return self.ci_lower <= value <= self.ci_upper

    def to_dict(self) -> dict:
        return asdict(self)

    def to_row(self) -> dict:
        """Row keyed by the convergence CSV header."""
        return dict(zip(
            CSV_COLUMNS,
            [self.n_paths, self.price, self.standard_error, self.ci_lower, self.ci_upper],
        ))
