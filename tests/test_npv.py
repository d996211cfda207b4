import pytest

from hypothesis import given, strategies as st

from carryback.analysis.npv import npv_monthly
from carryback.domain.results import CashFlow


def test_month_zero_is_undiscounted():
    assert npv_monthly([CashFlow(0, 1000.0)], 12.0) == pytest.approx(1000.0)


def test_single_discounted_flow():
    # 12%/yr -> 1%/month
    assert npv_monthly([CashFlow(12, 1000.0)], 12.0) == pytest.approx(1000.0 / 1.01 ** 12)


def test_signs_are_kept():
    flows = [CashFlow(0, 500.0), CashFlow(0, -200.0), CashFlow(1, -101.0)]
    assert npv_monthly(flows, 12.0) == pytest.approx(500.0 - 200.0 - 100.0)


def test_fractional_month():
    assert npv_monthly([CashFlow(1.5, 100.0)], 12.0) == pytest.approx(100.0 / 1.01 ** 1.5)


def test_empty_and_garbage():
    assert npv_monthly([], 8.0) == 0.0
    assert npv_monthly([CashFlow(3, float("nan")), CashFlow(1, 10.0)], float("nan")) == pytest.approx(10.0)


@given(
    flows=st.lists(
        st.tuples(
            st.integers(min_value=0, max_value=480),
            st.floats(min_value=-1e7, max_value=1e7),
        ),
        max_size=50,
    )
)
def test_zero_discount_is_plain_sum(flows):
    cfs = [CashFlow(m, a) for m, a in flows]
    assert npv_monthly(cfs, 0.0) == pytest.approx(sum(a for _, a in flows), abs=1e-3)


@given(
    month=st.integers(min_value=1, max_value=480),
    amount=st.floats(min_value=1.0, max_value=1e7),
    rate=st.floats(min_value=0.5, max_value=30.0),
)
def test_positive_rate_shrinks_future_inflows(month, amount, rate):
    assert npv_monthly([CashFlow(month, amount)], rate) < amount
