from __future__ import annotations

from typing import Iterable

import numpy as np

from carryback.domain.deal import clamp
from carryback.domain.results import CashFlow


def npv_monthly(cash_flows: Iterable[CashFlow], annual_discount_rate_pct: float) -> float:
    """
    NPV = sum(amount / (1 + r) ** month), r = annual % / 1200.

    Month 0 is undiscounted. Amounts keep their sign; non-finite amounts count
    as zero and negative months are treated as month 0.
    """
    flows = list(cash_flows)
    if not flows:
        return 0.0

    r = clamp(annual_discount_rate_pct) / 1200.0
    months = np.array([clamp(cf.month) for cf in flows], dtype=float)
    amounts = np.nan_to_num(
        np.array([cf.amount for cf in flows], dtype=float),
        nan=0.0,
        posinf=0.0,
        neginf=0.0,
    )
    return float(np.sum(amounts / np.power(1.0 + r, months)))
