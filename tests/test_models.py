import math

import numpy as np
import pytest

from euro_mc_pricer.errors import InvalidMarketParameters
from euro_mc_pricer.models import GeometricBrownianMotion, MarketParameters, simulate_terminal_price
from euro_mc_pricer.random_source import RandomSource


class TestMarketParameters:
    def test_valid(self, params):
        assert params.spot == 100.0
        assert params.discount_factor == pytest.approx(math.exp(-0.05))
        assert params.forward == pytest.approx(100.0 * math.exp(0.05))

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(spot=0.0),
            dict(spot=-1.0),
            dict(maturity=0.0),
            dict(maturity=-0.5),
            dict(volatility=-0.1),
            dict(spot=float("nan")),
            dict(rate=float("inf")),
            dict(volatility=float("nan")),
        ],
    )
    def test_rejects_invalid(self, kwargs):
        base = dict(spot=100.0, rate=0.05, volatility=0.2, maturity=1.0)
        base.update(kwargs)
        with pytest.raises(InvalidMarketParameters):
            MarketParameters(**base)

    def test_invalid_parameters_are_value_errors(self):
        with pytest.raises(ValueError):
            MarketParameters(spot=-1.0, rate=0.05, volatility=0.2, maturity=1.0)

    def test_zero_volatility_and_negative_rate_allowed(self):
        p = MarketParameters(spot=50.0, rate=-0.01, volatility=0.0, maturity=2.0)
        assert p.volatility == 0.0

    def test_frozen(self, params):
        with pytest.raises(AttributeError):
            params.spot = 1.0


class TestTerminalPrice:
    def test_formula(self, params):
        z = 0.3
        expected = 100.0 * math.exp((0.05 - 0.5 * 0.04) * 1.0 + 0.2 * 1.0 * z)
        assert simulate_terminal_price(params, z) == pytest.approx(expected, rel=1e-14)

    def test_zero_draw_gives_median(self):
        p = MarketParameters(spot=80.0, rate=0.03, volatility=0.4, maturity=0.5)
        expected = 80.0 * math.exp((0.03 - 0.08) * 0.5)
        assert simulate_terminal_price(p, 0.0) == pytest.approx(expected)

    def test_zero_volatility_is_forward(self, zero_vol_params):
        for z in (-3.0, 0.0, 2.5):
            assert simulate_terminal_price(zero_vol_params, z) == pytest.approx(zero_vol_params.forward)

    def test_vectorized_and_positive(self, params):
        z = np.linspace(-8, 8, 101)
        prices = simulate_terminal_price(params, z)
        assert prices.shape == z.shape
        assert np.all(prices > 0)
        assert np.all(np.diff(prices) > 0)

    def test_model_matches_function(self, params):
        model = GeometricBrownianMotion(params)
        z = np.array([-1.0, 0.0, 1.5])
        np.testing.assert_allclose(model.terminal_price(z), simulate_terminal_price(params, z))

    def test_sample_consumes_exactly_n_draws(self, params):
        model = GeometricBrownianMotion(params)
        a = RandomSource(seed=9)
        b = RandomSource(seed=9)
        model.sample_terminal_prices(1000, a)
        b.standard_normal(1000)
        assert a.next_standard_normal() == b.next_standard_normal()

    def test_risk_neutral_mean(self, params, source):
        prices = GeometricBrownianMotion(params).sample_terminal_prices(400_000, source)
        se = prices.std(ddof=1) / math.sqrt(prices.size)
        assert abs(prices.mean() - params.forward) < 5 * se
