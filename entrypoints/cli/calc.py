from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from carryback.adapters.config import config
from carryback.domain.deal import DealInputs
from carryback.services.export import fmt_pct, fmt_usd, write_schedule_csv
from carryback.services.recompute import check_horizons, recompute
from carryback.services.scenarios import ScenarioService, build_repository
from carryback.services.share import apply_state, inputs_from_share, share_url

app = typer.Typer(help="Seller financing vs all-cash calculator.")


def _load_inputs(state: Optional[Path], share: Optional[str], scenario: Optional[str]) -> DealInputs:
    """
    Defaults, then a JSON state file, then a share code, then a saved scenario.
    Each layer only overrides the fields it carries.
    """
    inputs = DealInputs()
    if state is not None:
        try:
            raw = json.loads(state.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file", path=str(state), error=str(e))
        else:
            inputs = apply_state(inputs, raw if isinstance(raw, dict) else None)
    if share:
        inputs = inputs_from_share(share, base=inputs)
    if scenario:
        loaded = ScenarioService(build_repository(config)).load(scenario, base=inputs)
        if loaded is None:
            raise typer.BadParameter(f"unknown scenario: {scenario}")
        inputs = loaded
    return inputs


def _recompute(inputs: DealInputs):
    try:
        check_horizons(inputs, config.MAX_TERM_YEARS)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    return recompute(inputs)


_STATE_OPT = typer.Option(None, "--state", help="JSON file of deal inputs")
_SHARE_OPT = typer.Option(None, "--share", help="Share code (the ?s= value of a link)")
_SCENARIO_OPT = typer.Option(None, "--scenario", help="Saved scenario name")


@app.command()
def analyze(
    state: Optional[Path] = _STATE_OPT,
    share: Optional[str] = _SHARE_OPT,
    scenario: Optional[str] = _SCENARIO_OPT,
    as_json: bool = typer.Option(False, "--json", help="Print the raw summary as JSON"),
) -> None:
    """
    Compare all-cash against seller financing for one deal.
    """
    inputs = _load_inputs(state, share, scenario)
    d = _recompute(inputs)

    if as_json:
        typer.echo(json.dumps(d.summary(), indent=2))
        return

    typer.echo(f"{inputs.brand_name}")
    typer.echo(f"{d.additional_value_pct:.1f}% More Money for the Seller")
    typer.echo("")
    typer.echo("All cash")
    typer.echo(f"  Cash at close (after holdback): {fmt_usd(d.net_cash_now)}")
    typer.echo(f"  Reinvestment interest:          {fmt_usd(d.interest_on_cash)}")
    typer.echo(f"  Holdback recovered:             {fmt_usd(d.recover_holdback)}")
    typer.echo(f"  Taxes due at close:             {fmt_usd(d.all_cash_tax.total_tax)}")
    typer.echo(f"  Seller nets:                    {fmt_usd(d.seller_gets_all_cash)}")
    typer.echo("Seller financing")
    typer.echo(f"  Down payment:                   {fmt_usd(d.down_payment)}")
    typer.echo(f"  Monthly payment:                {fmt_usd(d.payment)}")
    typer.echo(f"  Total payments:                 {fmt_usd(d.total_payments)}")
    typer.echo(f"  Total interest:                 {fmt_usd(d.total_interest)}")
    typer.echo(f"  Gross profit ratio:             {fmt_pct(d.installment.gpr * 100)}")
    typer.echo(f"  Tax advantage:                  {fmt_usd(d.tax_advantage)}")
    typer.echo(f"  Total value to seller:          {fmt_usd(d.total_value_to_seller)}")
    if inputs.balloon > 0:
        typer.echo(f"  Balloon at month {d.schedule[-1].month if d.schedule else 0}: {fmt_usd(inputs.balloon)}")
    typer.echo(f"NPV @ {fmt_pct(inputs.discount_rate)}")
    typer.echo(f"  All cash:  {fmt_usd(d.npv_all_cash)}")
    typer.echo(f"  Financing: {fmt_usd(d.npv_financing)}")
    typer.echo(f"  Delta:     {fmt_usd(d.npv_delta)}")


@app.command("export-csv")
def export_csv(
    out: Path = typer.Argument(Path("amortization_schedule.csv")),
    state: Optional[Path] = _STATE_OPT,
    share: Optional[str] = _SHARE_OPT,
    scenario: Optional[str] = _SCENARIO_OPT,
) -> None:
    """
    Write the amortization + installment tax schedule as CSV.
    """
    inputs = _load_inputs(state, share, scenario)
    path = write_schedule_csv(_recompute(inputs), out)
    logger.info("Wrote schedule CSV", path=str(path))


@app.command()
def share(
    state: Optional[Path] = _STATE_OPT,
    scenario: Optional[str] = _SCENARIO_OPT,
    base_url: str = typer.Option(config.SHARE_BASE_URL, help="Page the link should open"),
) -> None:
    """
    Print a sharable link for the current inputs.
    """
    inputs = _load_inputs(state, None, scenario)
    typer.echo(share_url(inputs, base_url))


@app.command()
def save(
    name: str,
    state: Optional[Path] = _STATE_OPT,
    share: Optional[str] = _SHARE_OPT,
) -> None:
    """
    Save the inputs under NAME (re-saving overwrites).
    """
    inputs = _load_inputs(state, share, None)
    svc = ScenarioService(build_repository(config))
    try:
        rec = svc.save(name, inputs)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    logger.info("Saved scenario", name=rec["name"], saved_at=rec["saved_at"])


@app.command()
def scenarios(
    compare: bool = typer.Option(False, "--compare", help="Show saved scenarios side by side"),
) -> None:
    """
    List saved scenarios.
    """
    svc = ScenarioService(build_repository(config))
    saved = svc.list()
    if not saved:
        typer.echo("No saved scenarios yet.")
        return
    if compare:
        typer.echo(svc.compare(saved.keys()).to_string())
        return
    for name, rec in saved.items():
        typer.echo(f"{name}\t{rec['saved_at']}")


@app.command()
def delete(name: str) -> None:
    """
    Delete the scenario saved under NAME.
    """
    ScenarioService(build_repository(config)).delete(name)
    logger.info("Deleted scenario", name=name)


if __name__ == "__main__":
    app()
