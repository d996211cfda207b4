from __future__ import annotations

import html
from pathlib import Path

import pandas as pd

from carryback.domain.deal import DealInputs
from carryback.domain.results import DerivedResult

CSV_COLUMNS = [
    "Month",
    "Payment",
    "Interest",
    "Principal",
    "Balance",
    "CapGainTax",
    "InterestTax",
    "RecaptureTax",
]


def fmt_usd(x) -> str:
    try:
        v = float(x)
    except (TypeError, ValueError):
        v = 0.0
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}"


def fmt_pct(x) -> str:
    try:
        return f"{float(x):.2f}%"
    except (TypeError, ValueError):
        return "0.00%"


def schedule_frame(derived: DerivedResult) -> pd.DataFrame:
    """
    One row per amortization row, joined with the tax row for the same period.

    Tax rows line up positionally after the month-0 row, so a balloon month
    produces two lines (regular payment, then the payoff). A non-zero upfront
    recapture tax is appended as a trailing month-0 line.
    """
    tax_rows = derived.installment.rows[1:]
    records = []
    for s, t in zip(derived.schedule, tax_rows):
        records.append(
            {
                "Month": s.month,
                "Payment": s.payment,
                "Interest": s.interest,
                "Principal": s.principal,
                "Balance": s.balance,
                "CapGainTax": t.cap_gain_tax,
                "InterestTax": t.interest_tax,
                "RecaptureTax": 0.0,
            }
        )

    rec0 = derived.installment.rows[0] if derived.installment.rows else None
    if rec0 is not None and rec0.recapture_tax:
        records.append(
            {
                "Month": 0,
                "Payment": 0.0,
                "Interest": 0.0,
                "Principal": 0.0,
                "Balance": derived.principal,
                "CapGainTax": 0.0,
                "InterestTax": 0.0,
                "RecaptureTax": rec0.recapture_tax,
            }
        )

    df = pd.DataFrame.from_records(records, columns=CSV_COLUMNS)
    return df.astype({"Month": int})


def schedule_csv(derived: DerivedResult) -> str:
    return schedule_frame(derived).to_csv(index=False, float_format="%.2f", lineterminator="\n")


def write_schedule_csv(derived: DerivedResult, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(schedule_csv(derived), encoding="utf-8")
    return path


_PRINT_STYLE = (
    "body{font-family:ui-sans-serif,system-ui;padding:24px} "
    "table{border-collapse:collapse;width:100%} "
    "td,th{border:1px solid #ddd;padding:8px;text-align:right} th{text-align:left}"
)


def render_print_html(derived: DerivedResult, inputs: DealInputs) -> str:
    """Standalone printable page for the amortization schedule."""
    rows = "".join(
        "<tr><td>{}</td><td>{}</td><td>{}</td><td>{}</td><td>{}</td></tr>".format(
            r.month,
            fmt_usd(r.payment),
            fmt_usd(r.interest),
            fmt_usd(r.principal),
            fmt_usd(r.balance),
        )
        for r in derived.schedule
    )
    brand = html.escape(inputs.brand_name)
    term = f"{inputs.term_years:g}"
    rate = f"{inputs.rate_pct:g}"
    return (
        "<html><head><title>Amortization Schedule</title>"
        f"<style>{_PRINT_STYLE}</style>"
        "</head><body>"
        f"<h2>{brand} – Amortization Schedule</h2>"
        f"<p><strong>Purchase Price:</strong> {fmt_usd(inputs.purchase_price)} &nbsp; "
        f"<strong>Rate:</strong> {rate}% &nbsp; <strong>Term:</strong> {term} yrs</p>"
        "<table><thead><tr><th>Month</th><th>Payment</th><th>Interest</th>"
        "<th>Principal</th><th>Balance</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        "</body></html>"
    )
