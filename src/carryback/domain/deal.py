# src/carryback/domain/deal.py
from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def clamp(val: Any, minimum: float = 0.0) -> float:
    """
    Lenient numeric floor used everywhere an input crosses into the math.

    Accepts:
      - 250000
      - "250000"
      - "6.5%"
    Non-finite, blank, garbage or below-minimum values come back as ``minimum``.
    """
    if val is None or isinstance(val, bool):
        return minimum
    if isinstance(val, str):
        s = val.strip().replace(",", "")
        if s.endswith("%"):
            s = s[:-1]
        try:
            f = float(s)
        except ValueError:
            return minimum
    else:
        try:
            f = float(val)
        except (TypeError, ValueError, OverflowError):
            return minimum
    if not math.isfinite(f):
        return minimum
    return max(f, minimum)


# Numeric fields in form order. Also the keys of a shared/saved state.
NUMERIC_FIELDS = (
    "purchase_price",
    "selling_costs",
    "basis",
    "ltcg_rate",
    "state_gain_rate",
    "recapture_amt",
    "recapture_rate",
    "ordinary_rate",
    "state_ord_rate",
    "holdback_pct",
    "holdback_years",
    "invest_rate_pct",
    "invest_years",
    "down_pct",
    "rate_pct",
    "term_years",
    "balloon",
    "discount_rate",
)


class DealInputs(BaseModel):
    """
    Raw form state for one deal. Percentages are on a 0-100 scale.

    Every numeric field is floored at zero instead of raising, so a half-typed
    form or a tampered share link still produces a usable snapshot.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    # Branding
    brand_name: str = "Your Firm Name"
    logo_url: str = ""

    # Deal basics
    purchase_price: float = Field(1_500_000.0, description="Contract sale price")
    selling_costs: float = 0.0
    basis: float = Field(700_000.0, description="Seller's adjusted cost basis")

    # Taxes
    ltcg_rate: float = Field(20.0, description="Federal long-term capital gains rate, %")
    state_gain_rate: float = 5.0
    recapture_amt: float = Field(0.0, description="Depreciation subject to recapture")
    recapture_rate: float = 37.0
    ordinary_rate: float = Field(37.0, description="Federal ordinary rate applied to note interest, %")
    state_ord_rate: float = 5.0

    # All-cash assumptions
    holdback_pct: float = 15.0
    holdback_years: float = 2.0
    invest_rate_pct: float = 20.0
    invest_years: float = 2.0

    # Seller-financing terms
    down_pct: float = 10.0
    rate_pct: float = 6.0
    term_years: float = 10.0
    balloon: float = 0.0

    # Lens
    discount_rate: float = 8.0

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _floor_at_zero(cls, v: Any) -> float:
        return clamp(v)

    @field_validator("brand_name", "logo_url", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def down_payment(self) -> float:
        return self.down_pct / 100.0 * self.purchase_price

    @property
    def note_principal(self) -> float:
        return self.purchase_price - self.down_payment
