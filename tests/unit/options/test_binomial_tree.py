import math

import numpy as np
import pytest

from binomial_hedge.options import (
    MAX_EXPANDING_LEVELS,
    BinomialParameters,
    DomainError,
    TreeStructureError,
    european_call_price,
    european_call_price_from_factors,
    fold_distribution,
    fold_layer,
    price_european_call,
    risk_neutral_call_price,
    risk_neutral_values,
    terminal_distribution,
)


def test_regression_five_level_out_of_the_money_call():
    price = european_call_price(
        spot=100.0,
        strike=125.0,
        volatility=0.5,
        time_to_maturity=1.0,
        levels=5,
        risk_free_rate=0.06,
    )
    assert price == pytest.approx(12.6274104658, abs=1e-8)


def test_single_level_tree_is_one_fold():
    price = european_call_price(100.0, 100.0, 0.2, 1.0, 1, 0.05)
    assert price == pytest.approx(12.1622849646, abs=1e-8)


def test_at_the_money_zero_volatility_zero_rate_is_worthless():
    assert european_call_price(100.0, 100.0, 0.0, 1.0, 5, 0.0) == pytest.approx(0.0)


@pytest.mark.parametrize(
    ("spot", "strike", "rate"),
    [
        (100.0, 90.0, 0.05),
        (100.0, 103.0, 0.05),
        (100.0, 110.0, 0.05),
        (100.0, 100.0, 0.0),
    ],
)
def test_zero_volatility_is_discounted_forward_payoff(spot, strike, rate):
    t = 1.5
    expected = max(0.0, spot * math.exp(rate * t) - strike) * math.exp(-rate * t)
    assert european_call_price(spot, strike, 0.0, t, 7, rate) == pytest.approx(expected)


@pytest.mark.parametrize("levels", [1, 2, 3, 5, 10, 50, 200])
@pytest.mark.parametrize(
    ("spot", "strike", "volatility", "t", "rate"),
    [
        (100.0, 125.0, 0.5, 1.0, 0.06),
        (100.0, 100.0, 0.2, 1.0, 0.05),
        (30.0, 28.0, 0.3, 40 / 365, 0.05),
        (100.0, 80.0, 0.35, 2.0, 0.0),
        (100.0, 100.0, 0.2, 1.0, -0.01),
        (100.0, 100.0, 0.0, 1.0, 0.03),
    ],
)
def test_hedge_replication_matches_risk_neutral_pricing(
    levels, spot, strike, volatility, t, rate
):
    hedged = european_call_price(spot, strike, volatility, t, levels, rate)
    risk_neutral = risk_neutral_call_price(spot, strike, volatility, t, levels, rate)
    assert hedged == pytest.approx(risk_neutral, rel=1e-9, abs=1e-12)


@pytest.mark.parametrize("levels", [1, 2, 3, 6, 9])
def test_expanding_tree_matches_recombining_tree(levels):
    kwargs = dict(
        spot=100.0,
        strike=105.0,
        volatility=0.3,
        time_to_maturity=0.75,
        levels=levels,
        risk_free_rate=0.04,
    )
    recombining = european_call_price(**kwargs, method="recombining")
    expanding = european_call_price(**kwargs, method="expanding")
    assert expanding == pytest.approx(recombining, rel=1e-9)


def test_price_is_non_increasing_in_strike():
    strikes = np.linspace(40.0, 200.0, 41)
    prices = [european_call_price(100.0, k, 0.3, 1.0, 25, 0.05) for k in strikes]
    assert all(b <= a for a, b in zip(prices, prices[1:]))
    assert prices[-1] >= 0.0


def test_strike_above_every_leaf_is_worthless():
    assert european_call_price(100.0, 1_000.0, 0.2, 1.0, 10, 0.05) == 0.0


def test_zero_strike_is_worth_the_spot():
    assert european_call_price(100.0, 0.0, 0.2, 1.0, 10, 0.05) == pytest.approx(100.0)


def test_strike_below_every_leaf_is_discounted_forward():
    price = european_call_price(100.0, 10.0, 0.2, 1.0, 10, 0.05)
    assert price == pytest.approx(100.0 - 10.0 * math.exp(-0.05), rel=1e-9)


def test_large_level_count_is_tractable():
    price = european_call_price(100.0, 100.0, 0.2, 1.0, 2_000, 0.05)
    assert price == pytest.approx(10.4506, abs=5e-3)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(levels=0),
        dict(levels=-3),
        dict(time_to_maturity=0.0),
        dict(time_to_maturity=-1.0),
        dict(volatility=-0.1),
        dict(spot=0.0),
        dict(strike=-1.0),
        dict(risk_free_rate=math.nan),
        dict(volatility=math.inf),
        dict(levels=math.inf),
        dict(levels=math.nan),
        dict(levels=5.5),
    ],
)
def test_domain_errors_are_raised_before_tree_construction(kwargs):
    base = dict(
        spot=100.0,
        strike=100.0,
        volatility=0.2,
        time_to_maturity=1.0,
        levels=5,
        risk_free_rate=0.05,
    )
    with pytest.raises(DomainError):
        european_call_price(**{**base, **kwargs})


def test_domain_error_is_a_value_error():
    with pytest.raises(ValueError):
        european_call_price(100.0, 100.0, 0.2, 1.0, 0, 0.05)


def test_expanding_tree_is_capped():
    with pytest.raises(DomainError, match="expanding tree limited"):
        european_call_price(
            100.0, 100.0, 0.2, 1.0, MAX_EXPANDING_LEVELS + 1, 0.05, method="expanding"
        )


def test_unknown_method_raises():
    with pytest.raises(ValueError, match="method must be one of"):
        european_call_price(100.0, 100.0, 0.2, 1.0, 5, 0.05, method="trinomial")


def test_price_european_call_accepts_parameters():
    params = BinomialParameters(
        spot=100.0,
        strike=125.0,
        volatility=0.5,
        time_to_maturity=1.0,
        levels=5,
        risk_free_rate=0.06,
    )
    assert params.dt == pytest.approx(0.2)
    assert params.gu == pytest.approx(math.exp(0.5 * math.sqrt(0.2)))
    assert params.gu * params.gd == pytest.approx(1.0)
    assert price_european_call(params) == pytest.approx(12.6274104658, abs=1e-8)


_MAPPING = {
    "spot": 100.0,
    "strike": 125.0,
    "volatility": 0.5,
    "time_to_maturity": 1.0,
    "risk_free_rate": 0.06,
}


def test_from_mapping_accepts_integral_float_levels():
    params = BinomialParameters.from_mapping({**_MAPPING, "levels": 5.0})
    assert params.as_dict()["levels"] == 5
    assert price_european_call(params) == pytest.approx(12.6274104658, abs=1e-8)


@pytest.mark.parametrize("levels", [5.5, math.inf, math.nan])
def test_from_mapping_rejects_non_integer_levels(levels):
    with pytest.raises(DomainError, match="levels must be"):
        BinomialParameters.from_mapping({**_MAPPING, "levels": levels})


def test_fold_layer_adjacent_matches_reference_layer():
    prices, values = fold_layer(
        [12.5, 50.0, 200.0, 800.0], [0.0, 0.0, 100.0, 700.0], 2.0, 0.5, 0.05, 0.33
    )
    np.testing.assert_allclose(prices, [25.0, 100.0, 400.0])
    np.testing.assert_allclose(
        values, [0.0, 33.87882068697758, 301.6364620609328], rtol=1e-12
    )


def test_fold_distribution_recombining_layer():
    value = fold_distribution(
        [12.5, 50.0, 200.0, 800.0], [0.0, 0.0, 100.0, 700.0], 2.0, 0.5, 0.05, 0.33
    )
    assert value == pytest.approx(49.42384638120689, rel=1e-9)


def test_fold_distribution_two_nodes_is_single_fold():
    value = fold_distribution([50.0, 200.0], [0.0, 100.0], 2.0, 0.5, 0.05, 5.0)
    assert value == pytest.approx(40.7066405642865)


def test_fold_distribution_disjoint_pairs():
    prices = [25.0, 100.0, 100.0, 400.0]
    payoffs = [0.0, 0.0, 0.0, 300.0]
    disjoint = fold_distribution(prices, payoffs, 2.0, 0.5, 0.05, 0.5, "disjoint")
    adjacent = fold_distribution(
        [25.0, 100.0, 400.0], [0.0, 0.0, 300.0], 2.0, 0.5, 0.05, 0.5, "adjacent"
    )
    assert disjoint == pytest.approx(adjacent, rel=1e-12)


def test_fold_layer_disjoint_rejects_inconsistent_pair():
    with pytest.raises(TreeStructureError, match="inconsistent node pair"):
        fold_layer([25.0, 90.0], [0.0, 0.0], 2.0, 0.5, 0.05, 0.5, "disjoint")


def test_fold_layer_rejects_odd_disjoint_layer():
    with pytest.raises(TreeStructureError, match="even number"):
        fold_layer([25.0, 50.0, 100.0], [0.0, 0.0, 0.0], 2.0, 0.5, 0.05, 0.5, "disjoint")


def test_fold_layer_rejects_mismatched_lengths():
    with pytest.raises(TreeStructureError, match="differ in length"):
        fold_layer([25.0, 50.0, 100.0], [0.0, 0.0], 2.0, 0.5, 0.05, 0.5)


def test_fold_layer_rejects_single_node():
    with pytest.raises(TreeStructureError):
        fold_layer([25.0], [0.0], 2.0, 0.5, 0.05, 0.5)


def test_fold_layer_does_not_mutate_inputs():
    prices = np.array([12.5, 50.0, 200.0, 800.0])
    payoffs = np.array([0.0, 0.0, 100.0, 700.0])
    fold_layer(prices, payoffs, 2.0, 0.5, 0.05, 0.33)
    np.testing.assert_array_equal(prices, [12.5, 50.0, 200.0, 800.0])
    np.testing.assert_array_equal(payoffs, [0.0, 0.0, 100.0, 700.0])


def _risk_neutral_on_factors(spot, strike, gu, gd, t, levels, r):
    dt = t / levels
    values = np.maximum(terminal_distribution(spot, levels, gu, gd) - strike, 0.0)
    while values.size > 1:
        values = risk_neutral_values(values[:-1], values[1:], gu, gd, r, dt)
    return float(values[0])


@pytest.mark.parametrize("method", ["recombining", "expanding"])
def test_asymmetric_tree_matches_risk_neutral_pricing(method):
    price = european_call_price_from_factors(
        100.0, 100.0, 1.2, 0.9, 1.0, 4, 0.05, method=method
    )
    expected = _risk_neutral_on_factors(100.0, 100.0, 1.2, 0.9, 1.0, 4, 0.05)
    assert price == pytest.approx(expected, rel=1e-9)


@pytest.mark.parametrize(
    ("gu", "gd"),
    [(1.0, 1.0), (0.9, 1.2), (1.2, 0.0), (-1.2, 0.5)],
)
def test_asymmetric_tree_rejects_invalid_factors(gu, gd):
    with pytest.raises(DomainError):
        european_call_price_from_factors(100.0, 100.0, gu, gd, 1.0, 4, 0.05)


def test_arbitrage_inputs_are_logged(caplog):
    with caplog.at_level("WARNING", logger="binomial_hedge.options.models.binomial_tree"):
        european_call_price(100.0, 100.0, 0.01, 1.0, 2, 0.5)
    assert "admits arbitrage" in caplog.text


@pytest.mark.parametrize("method", ["recombining", "expanding"])
def test_negative_rate_below_down_move_matches_risk_neutral(method):
    # exp(r*dt) < gd: child values turn negative inside the tree.
    price = european_call_price(100.0, 100.0, 0.01, 1.0, 5, -0.5, method=method)
    expected = risk_neutral_call_price(100.0, 100.0, 0.01, 1.0, 5, -0.5)
    assert expected == pytest.approx(-44482.957660314896, rel=1e-9)
    assert price == pytest.approx(expected, rel=1e-9)
