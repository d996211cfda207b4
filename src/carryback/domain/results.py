from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class AmortizationRow:
    month: int
    payment: float
    interest: float
    principal: float
    balance: float            # after this row, never negative
    is_balloon: bool = False  # synthetic lump payoff row


@dataclass(frozen=True)
class ScheduleResult:
    schedule: List[AmortizationRow]
    payment: float            # level monthly payment


@dataclass(frozen=True)
class TaxRow:
    month: int
    cap_gain_tax: float
    interest_tax: float
    recapture_tax: float      # non-zero only on the month-0 row

    @property
    def total(self) -> float:
        return self.cap_gain_tax + self.interest_tax + self.recapture_tax


@dataclass(frozen=True)
class CashFlow:
    month: float              # months from close; fractional when a year horizon is
    amount: float             # + inflow to seller, - outflow


@dataclass(frozen=True)
class AllCashTax:
    amount_realized: float
    gain: float
    recapture_tax: float
    cap_gain_tax: float
    total_tax: float


@dataclass(frozen=True)
class InstallmentTaxes:
    rows: List[TaxRow]
    gpr: float                # gross profit ratio
    gross_profit: float
    contract_price: float
    total_cap_gain_tax: float
    total_interest_tax: float
    recapture_tax: float
    total_tax: float


@dataclass(frozen=True)
class DerivedResult:
    # All-cash path
    holdback: float
    net_cash_now: float
    interest_on_cash: float
    recover_holdback: float
    seller_gets_all_cash: float
    all_cash_tax: AllCashTax

    # Financing path
    payment: float
    down_payment: float
    principal: float
    schedule: List[AmortizationRow]
    total_payments: float
    total_interest: float
    installment: InstallmentTaxes

    # Comparison
    tax_advantage: float
    total_value_to_seller: float
    additional_value: float
    additional_value_pct: float
    npv_all_cash: float
    npv_financing: float
    npv_delta: float

    all_cash_flows: List[CashFlow] = field(default_factory=list)
    financing_flows: List[CashFlow] = field(default_factory=list)

    def summary(self) -> dict:
        """Flat headline numbers, no row lists."""
        return {
            "holdback": self.holdback,
            "net_cash_now": self.net_cash_now,
            "interest_on_cash": self.interest_on_cash,
            "recover_holdback": self.recover_holdback,
            "seller_gets_all_cash": self.seller_gets_all_cash,
            "all_cash_total_tax": self.all_cash_tax.total_tax,
            "payment": self.payment,
            "down_payment": self.down_payment,
            "principal": self.principal,
            "n_rows": len(self.schedule),
            "total_payments": self.total_payments,
            "total_interest": self.total_interest,
            "gpr": self.installment.gpr,
            "installment_total_tax": self.installment.total_tax,
            "tax_advantage": self.tax_advantage,
            "total_value_to_seller": self.total_value_to_seller,
            "additional_value": self.additional_value,
            "additional_value_pct": self.additional_value_pct,
            "npv_all_cash": self.npv_all_cash,
            "npv_financing": self.npv_financing,
            "npv_delta": self.npv_delta,
        }
