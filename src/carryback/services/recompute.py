from __future__ import annotations

from typing import List

from carryback.adapters.logging_utils import ctx, get_logger
from carryback.analysis.amortization import build_schedule
from carryback.analysis.npv import npv_monthly
from carryback.analysis.taxes import build_installment_taxes, taxes_all_cash
from carryback.domain.deal import DealInputs
from carryback.domain.results import AllCashTax, CashFlow, DerivedResult, InstallmentTaxes

logger = get_logger(__name__)


def _all_cash_flows(
    inputs: DealInputs,
    net_cash_now: float,
    holdback: float,
    tax: AllCashTax,
) -> List[CashFlow]:
    """
    Seller's timeline if they take cash at close:
      - month 0: proceeds net of holdback, less the full tax bill
      - holdback released after holdback_years
      - one reinvestment credit per whole year of the horizon
    """
    flows = [
        CashFlow(month=0, amount=net_cash_now - tax.total_tax),
        CashFlow(month=12 * inputs.holdback_years, amount=holdback),
    ]
    yearly_credit = net_cash_now * (inputs.invest_rate_pct / 100.0)
    y = 1
    while y <= inputs.invest_years:
        flows.append(CashFlow(month=y * 12, amount=yearly_credit))
        y += 1
    return flows


def _financing_flows(down_payment: float, schedule, inst: InstallmentTaxes) -> List[CashFlow]:
    flows = [CashFlow(month=0, amount=down_payment)]
    flows.extend(CashFlow(month=r.month, amount=r.payment) for r in schedule)
    flows.extend(CashFlow(month=t.month, amount=-t.total) for t in inst.rows)
    return flows


def recompute(inputs: DealInputs) -> DerivedResult:
    """
    Full derived view of a deal. Pure: call it again after any input change and
    throw the previous result away.
    """
    price = inputs.purchase_price

    # --- all-cash path ---
    holdback = (inputs.holdback_pct / 100.0) * price
    net_cash_now = price - holdback
    interest_on_cash = net_cash_now * (inputs.invest_rate_pct / 100.0) * inputs.invest_years
    recover_holdback = holdback

    all_cash_tax = taxes_all_cash(
        price=price,
        selling_costs=inputs.selling_costs,
        basis=inputs.basis,
        recapture_amt=inputs.recapture_amt,
        recapture_rate=inputs.recapture_rate,
        ltcg_rate=inputs.ltcg_rate,
        state_gain_rate=inputs.state_gain_rate,
    )

    seller_gets_all_cash = net_cash_now + interest_on_cash + recover_holdback - all_cash_tax.total_tax

    cf_all = _all_cash_flows(inputs, net_cash_now, holdback, all_cash_tax)
    npv_all_cash = npv_monthly(cf_all, inputs.discount_rate)

    # --- financing path ---
    down_payment = inputs.down_payment
    principal = inputs.note_principal
    sched = build_schedule(principal, inputs.rate_pct, inputs.term_years, inputs.balloon)
    total_payments = sum(r.payment for r in sched.schedule)
    total_interest = sum(r.interest for r in sched.schedule)

    inst = build_installment_taxes(
        schedule=sched.schedule,
        price=price,
        selling_costs=inputs.selling_costs,
        basis=inputs.basis,
        recapture_amt=inputs.recapture_amt,
        recapture_rate=inputs.recapture_rate,
        ltcg_rate=inputs.ltcg_rate,
        state_gain_rate=inputs.state_gain_rate,
        ord_rate=inputs.ordinary_rate,
        state_ord_rate=inputs.state_ord_rate,
    )

    cf_fin = _financing_flows(down_payment, sched.schedule, inst)
    npv_financing = npv_monthly(cf_fin, inputs.discount_rate)

    # --- comparison ---
    # Discounted installment taxes against the undiscounted all-cash bill.
    npv_taxes_inst = npv_monthly(
        (CashFlow(month=t.month, amount=t.total) for t in inst.rows),
        inputs.discount_rate,
    )
    tax_advantage = all_cash_tax.total_tax - npv_taxes_inst

    total_value_to_seller = down_payment + total_payments + tax_advantage
    additional_value = total_value_to_seller - seller_gets_all_cash
    additional_value_pct = additional_value / max(seller_gets_all_cash, 1.0) * 100.0

    result = DerivedResult(
        holdback=holdback,
        net_cash_now=net_cash_now,
        interest_on_cash=interest_on_cash,
        recover_holdback=recover_holdback,
        seller_gets_all_cash=seller_gets_all_cash,
        all_cash_tax=all_cash_tax,
        payment=sched.payment,
        down_payment=down_payment,
        principal=principal,
        schedule=sched.schedule,
        total_payments=total_payments,
        total_interest=total_interest,
        installment=inst,
        tax_advantage=tax_advantage,
        total_value_to_seller=total_value_to_seller,
        additional_value=additional_value,
        additional_value_pct=additional_value_pct,
        npv_all_cash=npv_all_cash,
        npv_financing=npv_financing,
        npv_delta=npv_financing - npv_all_cash,
        all_cash_flows=cf_all,
        financing_flows=cf_fin,
    )

    if inputs.balloon > principal:
        logger.warning(
            "balloon_exceeds_principal",
            extra=ctx(balloon=inputs.balloon, principal=principal, payment=sched.payment),
        )
    logger.debug(
        "deal_recomputed",
        extra=ctx(
            n_rows=len(sched.schedule),
            npv_all_cash=npv_all_cash,
            npv_financing=npv_financing,
            npv_delta=result.npv_delta,
        ),
    )
    return result


def check_horizons(inputs: DealInputs, max_years: float) -> None:
    """
    Reject terms the caller should not be allowed to schedule. The schedule and
    the reinvestment timeline both grow one row per month/year of horizon.
    """
    for field in ("term_years", "invest_years"):
        years = getattr(inputs, field)
        if years > max_years:
            raise ValueError(f"{field} must be at most {max_years:g} years (got {years:g})")
