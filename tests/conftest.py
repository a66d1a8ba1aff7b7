import pytest

from euro_mc_pricer.models import MarketParameters
from euro_mc_pricer.random_source import RandomSource


@pytest.fixture
def params():
    # S0=100, r=5%, sigma=20%, T=1y
    return MarketParameters(spot=100.0, rate=0.05, volatility=0.20, maturity=1.0)


@pytest.fixture
def zero_vol_params():
    return MarketParameters(spot=100.0, rate=0.05, volatility=0.0, maturity=1.0)


@pytest.fixture
def source():
    return RandomSource(seed=12345)
