import pytest

from hypothesis import given, settings, strategies as st

from carryback.domain.deal import DealInputs
from carryback.services.recompute import check_horizons, recompute


def test_default_deal_all_cash_path(default_inputs):
    d = recompute(default_inputs)

    assert d.holdback == pytest.approx(225_000.0)
    assert d.net_cash_now == pytest.approx(1_275_000.0)
    assert d.interest_on_cash == pytest.approx(510_000.0)
    assert d.recover_holdback == pytest.approx(225_000.0)
    assert d.all_cash_tax.total_tax == pytest.approx(200_000.0)
    assert d.seller_gets_all_cash == pytest.approx(1_810_000.0)

    months = sorted(cf.month for cf in d.all_cash_flows)
    assert months == [0, 12, 24, 24]


def test_default_deal_financing_path(default_inputs):
    d = recompute(default_inputs)

    assert d.down_payment == pytest.approx(150_000.0)
    assert d.principal == pytest.approx(1_350_000.0)
    assert len(d.schedule) == 120
    assert d.total_payments == pytest.approx(d.payment * 120)
    assert d.total_interest == pytest.approx(d.total_payments - 1_350_000.0)
    assert len(d.installment.rows) == 121


def test_headline_identities(default_inputs):
    d = recompute(default_inputs)

    assert d.total_value_to_seller == pytest.approx(d.down_payment + d.total_payments + d.tax_advantage)
    assert d.additional_value == pytest.approx(d.total_value_to_seller - d.seller_gets_all_cash)
    assert d.additional_value_pct == pytest.approx(d.additional_value / d.seller_gets_all_cash * 100.0)
    assert d.npv_delta == pytest.approx(d.npv_financing - d.npv_all_cash)


def test_zero_discount_npvs_are_nominal():
    inputs = DealInputs(discount_rate=0)
    d = recompute(inputs)

    assert d.npv_all_cash == pytest.approx(d.seller_gets_all_cash)
    assert d.npv_financing == pytest.approx(d.down_payment + d.total_payments - d.installment.total_tax)
    # with no discounting the tax advantage is just the difference in tax bills
    assert d.tax_advantage == pytest.approx(d.all_cash_tax.total_tax - d.installment.total_tax)


def test_fractional_horizons():
    d = recompute(DealInputs(holdback_years=1.5, invest_years=2.5))
    months = sorted(cf.month for cf in d.all_cash_flows)
    # holdback at 18, reinvestment credits for whole years only
    assert months == [0, 12, 18, 24]
    assert d.interest_on_cash == pytest.approx(d.net_cash_now * 0.20 * 2.5)


def test_balloon_deal_has_payoff_flow():
    d = recompute(DealInputs(term_years=5, balloon=500_000))
    assert d.schedule[-1].is_balloon
    assert d.total_payments == pytest.approx(d.payment * 60 + 500_000.0)
    assert len(d.installment.rows) == len(d.schedule) + 1


def test_zero_term_is_defined():
    d = recompute(DealInputs(term_years=0))
    assert d.schedule == []
    assert d.payment == 0.0
    assert d.total_payments == 0.0
    assert d.installment.total_tax == pytest.approx(d.installment.recapture_tax)


def test_seller_gets_nothing_guard():
    d = recompute(DealInputs(purchase_price=0))
    assert d.seller_gets_all_cash == 0.0
    assert d.additional_value_pct == pytest.approx(d.additional_value * 100.0)


@settings(max_examples=40, deadline=None)
@given(
    price=st.floats(min_value=50_000.0, max_value=5_000_000.0),
    down=st.floats(min_value=0.0, max_value=100.0),
    rate=st.floats(min_value=0.0, max_value=12.0),
    discount=st.floats(min_value=0.0, max_value=20.0),
)
def test_recompute_is_total(price, down, rate, discount):
    d = recompute(DealInputs(purchase_price=price, down_pct=down, rate_pct=rate, discount_rate=discount))
    for v in d.summary().values():
        assert v == v  # not NaN
        assert abs(v) != float("inf")


def test_check_horizons():
    check_horizons(DealInputs(term_years=50, invest_years=50), 50)
    with pytest.raises(ValueError, match="term_years"):
        check_horizons(DealInputs(term_years=1_000), 50)
    with pytest.raises(ValueError, match="invest_years"):
        check_horizons(DealInputs(invest_years=1e9), 50)
