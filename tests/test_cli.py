import json

from typer.testing import CliRunner

from carryback.domain.deal import DealInputs
from carryback.services.share import encode_state
from entrypoints.cli import calc

runner = CliRunner()


def test_analyze_json_from_state_file(tmp_path):
    state = tmp_path / "deal.json"
    state.write_text(json.dumps({"purchase_price": 1_000_000, "down_pct": 20}))

    result = runner.invoke(calc.app, ["analyze", "--state", str(state), "--json"])
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["down_payment"] == 200_000.0
    assert summary["principal"] == 800_000.0


def test_analyze_from_share_code():
    code = encode_state(DealInputs(brand_name="Share Test Realty"))
    result = runner.invoke(calc.app, ["analyze", "--share", code])
    assert result.exit_code == 0, result.output
    assert "Share Test Realty" in result.output
    assert "More Money for the Seller" in result.output


def test_unreadable_state_file_uses_defaults(tmp_path):
    state = tmp_path / "bad.json"
    state.write_text("{nope")
    result = runner.invoke(calc.app, ["analyze", "--state", str(state), "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["principal"] == 1_350_000.0


def test_export_csv(tmp_path):
    out = tmp_path / "sched.csv"
    result = runner.invoke(calc.app, ["export-csv", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text().startswith("Month,Payment,Interest")


def test_share_prints_link():
    result = runner.invoke(calc.app, ["share", "--base-url", "https://example.com/calc"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().startswith("https://example.com/calc?s=")


def test_analyze_rejects_term_over_limit(tmp_path):
    state = tmp_path / "deal.json"
    state.write_text(json.dumps({"term_years": 1_000}))
    result = runner.invoke(calc.app, ["analyze", "--state", str(state)])
    assert result.exit_code != 0
    assert "term_years" in result.output
