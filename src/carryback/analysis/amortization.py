import math
from typing import List

from carryback.domain.deal import clamp
from carryback.domain.results import AmortizationRow, ScheduleResult


def _n_months(term_years: float) -> int:
    # Round half up, so 10.04 years -> 120 months and 0.04 years -> 0.
    return int(math.floor(term_years * 12.0 + 0.5))


def monthly_payment_with_balloon(
    principal: float,
    annual_rate_pct: float,
    term_years: float,
    balloon: float = 0.0,
) -> float:
    """
    Level payment that leaves exactly ``balloon`` outstanding after the last period.

    The balloon's present value is carved out of the principal and the rest is
    amortized with the standard annuity formula:

        M = (P - B * (1+r)^-n) * r / (1 - (1+r)^-n)

    With r == 0 this degenerates to straight-line (P - B) / n.
    A zero-month term returns 0.0 rather than dividing by zero.
    """
    n = _n_months(term_years)
    if n <= 0:
        return 0.0

    r = annual_rate_pct / 1200.0
    if r == 0:
        return (principal - balloon) / n

    discount = (1 + r) ** -n
    if discount == 1.0:
        # rate too small to register in floating point
        return (principal - balloon) / n
    effective_pv = principal - balloon * discount
    return effective_pv * r / (1 - discount)


def build_schedule(
    principal: float,
    rate_pct: float,
    term_years: float,
    balloon: float = 0.0,
) -> ScheduleResult:
    """
    Month-by-month schedule for a fixed-payment note with optional balloon.

    Final period:
      - balloon > 0: the month-n row pays only down to the balloon, then a
        synthetic row at the same month pays the balloon off (zero interest).
      - no balloon: any rounding residual is folded into month n's principal
        so the schedule ends at exactly zero.

    A balloon larger than the principal is passed through as-is (the payment
    goes negative); callers that care should validate before calling.
    """
    principal = clamp(principal)
    rate_pct = clamp(rate_pct)
    term_years = clamp(term_years)
    balloon = clamp(balloon)

    n = _n_months(term_years)
    pmt = monthly_payment_with_balloon(principal, rate_pct, term_years, balloon)
    r = rate_pct / 1200.0

    schedule: List[AmortizationRow] = []
    bal = principal

    for m in range(1, n + 1):
        interest = bal * r
        principal_pay = pmt - interest

        if m == n and balloon > 0:
            principal_pay = max(0.0, bal - balloon)
            bal -= principal_pay
            schedule.append(
                AmortizationRow(
                    month=m,
                    payment=pmt,
                    interest=interest,
                    principal=principal_pay,
                    balance=max(0.0, bal),
                )
            )
            schedule.append(
                AmortizationRow(
                    month=m,
                    payment=balloon,
                    interest=0.0,
                    principal=balloon,
                    balance=0.0,
                    is_balloon=True,
                )
            )
            break

        bal -= principal_pay
        if m == n:
            # fold the residual so the loan closes at exactly zero
            principal_pay += bal
            bal = 0.0

        schedule.append(
            AmortizationRow(
                month=m,
                payment=pmt,
                interest=interest,
                principal=principal_pay,
                balance=max(0.0, bal),
            )
        )

    return ScheduleResult(schedule=schedule, payment=pmt)
