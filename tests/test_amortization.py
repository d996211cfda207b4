import pytest

from hypothesis import given, strategies as st

from carryback.analysis.amortization import build_schedule, monthly_payment_with_balloon


def test_schedule_120_months_ends_at_zero():
    res = build_schedule(1_350_000.0, 6.0, 10, 0.0)
    r = 0.06 / 12
    n = 120
    # annuity identity: P = M * (1 - (1+r)^-n) / r
    assert 1_350_000.0 == pytest.approx(res.payment * (1 - (1 + r) ** -n) / r, rel=1e-9)

    assert len(res.schedule) == 120
    assert res.schedule[-1].month == 120
    assert res.schedule[-1].balance == 0.0
    assert sum(row.principal for row in res.schedule) == pytest.approx(1_350_000.0, abs=1e-6)


def test_interest_plus_principal_equals_payment():
    res = build_schedule(500_000.0, 7.5, 15, 0.0)
    for row in res.schedule[:-1]:
        assert row.interest + row.principal == pytest.approx(row.payment, abs=1e-9)


def test_zero_rate_is_straight_line():
    res = build_schedule(120_000.0, 0.0, 10, 0.0)
    assert res.payment == pytest.approx(1000.0)
    assert all(row.interest == 0.0 for row in res.schedule)
    assert all(row.principal == pytest.approx(1000.0) for row in res.schedule)
    assert res.schedule[59].balance == pytest.approx(60_000.0)


def test_term_rounds_to_nearest_month():
    assert len(build_schedule(10_000.0, 5.0, 1.99, 0.0).schedule) == 24
    assert len(build_schedule(10_000.0, 5.0, 0.5, 0.0).schedule) == 6
    # 0.125 * 12 = 1.5 rounds half up
    assert len(build_schedule(10_000.0, 5.0, 0.125, 0.0).schedule) == 2


def test_zero_month_term_is_guarded():
    res = build_schedule(100_000.0, 6.0, 0.01, 0.0)
    assert res.schedule == []
    assert res.payment == 0.0
    assert monthly_payment_with_balloon(100_000.0, 0.0, 0.0) == 0.0


def test_balloon_payoff_row():
    res = build_schedule(1_000_000.0, 6.0, 5, 400_000.0)
    n = 60
    assert len(res.schedule) == n + 1

    regular, payoff = res.schedule[-2], res.schedule[-1]
    assert regular.month == n and payoff.month == n
    assert regular.balance == pytest.approx(400_000.0, abs=1e-4)
    assert payoff.is_balloon
    assert payoff.interest == 0.0
    assert payoff.principal == 400_000.0
    assert payoff.payment == 400_000.0
    assert payoff.balance == 0.0
    assert not any(row.is_balloon for row in res.schedule[:-1])
    assert sum(row.principal for row in res.schedule) == pytest.approx(1_000_000.0, abs=1e-4)


def test_balloon_zero_rate():
    res = build_schedule(100_000.0, 0.0, 1, 40_000.0)
    assert res.payment == pytest.approx(5000.0)
    assert res.schedule[-1].is_balloon
    assert res.schedule[-2].balance == pytest.approx(40_000.0)


def test_balloon_above_principal_passes_through():
    res = build_schedule(100_000.0, 6.0, 5, 250_000.0)
    assert res.payment < 0
    assert res.schedule[-1].is_balloon
    assert all(row.balance >= 0 for row in res.schedule)


def test_garbage_inputs_coerce_to_zero():
    res = build_schedule(float("nan"), -3.0, float("inf"), None)
    assert res.schedule == []
    assert res.payment == 0.0


@given(
    principal=st.floats(min_value=0.0, max_value=5_000_000.0),
    rate=st.floats(min_value=0.0, max_value=25.0),
    years=st.integers(min_value=1, max_value=40),
)
def test_no_balloon_schedule_closes_at_zero(principal, rate, years):
    res = build_schedule(principal, rate, years, 0.0)
    assert len(res.schedule) == years * 12
    assert res.schedule[-1].balance == 0.0
    assert sum(row.principal for row in res.schedule) == pytest.approx(principal, rel=1e-9, abs=1e-6)

    balances = [row.balance for row in res.schedule]
    assert all(b >= 0 for b in balances)
    assert all(a >= b - 1e-6 for a, b in zip(balances, balances[1:]))


@given(
    principal=st.floats(min_value=1_000.0, max_value=5_000_000.0),
    frac=st.floats(min_value=0.01, max_value=1.0),
    rate=st.floats(min_value=0.0, max_value=15.0),
    years=st.integers(min_value=1, max_value=30),
)
def test_balloon_schedule_repays_principal(principal, frac, rate, years):
    balloon = principal * frac
    res = build_schedule(principal, rate, years, balloon)
    assert res.schedule[-1].is_balloon
    assert res.schedule[-1].interest == 0.0
    assert res.schedule[-1].balance == 0.0
    assert sum(row.principal for row in res.schedule) == pytest.approx(principal, rel=1e-6)
