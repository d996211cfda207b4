from typing import List, Sequence

from carryback.domain.deal import clamp
from carryback.domain.results import AllCashTax, AmortizationRow, InstallmentTaxes, TaxRow


def _recapture_tax(amount_realized: float, basis: float, recapture_amt: float, recapture_rate: float) -> float:
    """
    Recapture is capped at the realized gain and is never deferred.
    """
    gain = max(0.0, amount_realized - basis)
    return min(recapture_amt, gain) * (recapture_rate / 100.0)


def taxes_all_cash(
    price: float,
    selling_costs: float,
    basis: float,
    recapture_amt: float,
    recapture_rate: float,
    ltcg_rate: float,
    state_gain_rate: float,
) -> AllCashTax:
    """
    One-time tax on an outright sale, all recognized at close.

    Losses floor at zero gain. Depreciation recapture is carved out of the gain
    first; the remainder is taxed at the combined federal + state LTCG rate.
    """
    price, selling_costs, basis = clamp(price), clamp(selling_costs), clamp(basis)
    recapture_amt, recapture_rate = clamp(recapture_amt), clamp(recapture_rate)
    ltcg_rate, state_gain_rate = clamp(ltcg_rate), clamp(state_gain_rate)

    amount_realized = price - selling_costs
    gain = max(0.0, amount_realized - basis)
    recapture_taxable = min(recapture_amt, gain)
    recapture_tax = recapture_taxable * (recapture_rate / 100.0)
    remaining_gain = max(0.0, gain - recapture_taxable)
    cap_gain_tax = remaining_gain * ((ltcg_rate + state_gain_rate) / 100.0)

    return AllCashTax(
        amount_realized=amount_realized,
        gain=gain,
        recapture_tax=recapture_tax,
        cap_gain_tax=cap_gain_tax,
        total_tax=recapture_tax + cap_gain_tax,
    )


def build_installment_taxes(
    schedule: Sequence[AmortizationRow],
    price: float,
    selling_costs: float,
    basis: float,
    recapture_amt: float,
    recapture_rate: float,
    ltcg_rate: float,
    state_gain_rate: float,
    ord_rate: float,
    state_ord_rate: float,
) -> InstallmentTaxes:
    """
    Installment-method tax timing using the gross profit ratio (GPR).

    - Month 0 carries the full recapture tax (not eligible for deferral).
    - Each principal payment recognizes ``principal * GPR`` of gain at LTCG rates.
    - Each interest payment is ordinary income in the month it is received.
    """
    price, selling_costs, basis = clamp(price), clamp(selling_costs), clamp(basis)
    recapture_amt, recapture_rate = clamp(recapture_amt), clamp(recapture_rate)
    gain_rate = (clamp(ltcg_rate) + clamp(state_gain_rate)) / 100.0
    ordinary = (clamp(ord_rate) + clamp(state_ord_rate)) / 100.0

    amount_realized = price - selling_costs
    contract_price = amount_realized
    gross_profit = max(0.0, amount_realized - basis - recapture_amt)
    gpr = gross_profit / contract_price if contract_price > 0 else 0.0

    recapture_tax = _recapture_tax(amount_realized, basis, recapture_amt, recapture_rate)
    rows: List[TaxRow] = [TaxRow(month=0, cap_gain_tax=0.0, interest_tax=0.0, recapture_tax=recapture_tax)]

    total_cap_gain_tax = 0.0
    total_interest_tax = 0.0
    for r in schedule:
        cap_tax = r.principal * gpr * gain_rate
        int_tax = r.interest * ordinary
        total_cap_gain_tax += cap_tax
        total_interest_tax += int_tax
        rows.append(TaxRow(month=r.month, cap_gain_tax=cap_tax, interest_tax=int_tax, recapture_tax=0.0))

    return InstallmentTaxes(
        rows=rows,
        gpr=gpr,
        gross_profit=gross_profit,
        contract_price=contract_price,
        total_cap_gain_tax=total_cap_gain_tax,
        total_interest_tax=total_interest_tax,
        recapture_tax=recapture_tax,
        total_tax=recapture_tax + total_cap_gain_tax + total_interest_tax,
    )
