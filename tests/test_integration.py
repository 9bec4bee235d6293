"""Integration tests for end-to-end workflows."""

from decimal import Decimal

from networth.cli.main import cli
from networth.domain.aggregates import AggregateLedger
from networth.domain.target_accounts import TargetAccountService


def invoke(cli_runner, temp_store, *args):
    result = cli_runner.invoke(cli, ["--db-path", temp_store.database_path, *args])
    assert result.exit_code == 0, result.output
    return result


def created_id(result) -> str:
    return result.output.split("ID: ")[1].split(")")[0].strip()


def test_full_workflow(cli_runner, temp_store):
    """Test accounts -> group -> individual and group runs -> rename -> status."""
    alice = created_id(invoke(
        cli_runner, temp_store, "account", "add",
        "--owner", "Alice", "--tax-type", "Tax-Free", "--type", "IRA", "--institution", "Vanguard",
    ))
    bob_a = created_id(invoke(
        cli_runner, temp_store, "account", "add",
        "--owner", "Bob", "--tax-type", "Tax-Deferred", "--type", "401k", "--institution", "Fidelity",
    ))
    bob_b = created_id(invoke(
        cli_runner, temp_store, "account", "add",
        "--owner", "Bob", "--tax-type", "Tax-Deferred", "--type", "401k", "--institution", "Schwab",
    ))
    invoke(cli_runner, temp_store, "group", "create", "Bob 401ks", "--target", "Bob Combined 401k", "--owner", "Bob")
    invoke(cli_runner, temp_store, "group", "add", "Bob 401ks", bob_a)
    invoke(cli_runner, temp_store, "group", "add", "Bob 401ks", bob_b)

    # Individual balances for everyone
    invoke(
        cli_runner, temp_store, "reconcile",
        "--amount", f"{alice}=1000", "--amount", f"{bob_a}=400", "--amount", f"{bob_b}=600",
        "--date", "2026-03-31",
    )
    # Group run with only one member supplied
    invoke(
        cli_runner, temp_store, "reconcile", "--mode", "group", "--kind", "detailed",
        "--amount", f"{bob_a}=450", "--contributions", f"{bob_b}=25",
        "--date", "2026-04-30",
    )

    targets = TargetAccountService(temp_store)
    entries = {entry.account_name: entry for entry in targets.list_accounts(2026)}
    assert entries["Alice's Vanguard IRA (Roth)"].balance == Decimal("1000")
    assert entries["Bob Combined 401k"].balance == Decimal("450")
    assert entries["Bob Combined 401k"].contributions == Decimal("25")
    assert entries["Bob Combined 401k"].owner == "Bob"

    # Rename the individual entry and keep reconciling into it
    entry_id = entries["Alice's Vanguard IRA (Roth)"].entry_id
    invoke(cli_runner, temp_store, "target", "rename", entry_id, "Alice Roth")
    result = invoke(cli_runner, temp_store, "reconcile", "--amount", f"{alice}=1100", "--date", "2026-05-31")
    assert "Created: 0 | Updated: 1" in result.output
    assert targets.get_account(entry_id).balance == Decimal("1100")

    totals = AggregateLedger(temp_store).get_totals(2026)
    assert totals.tax_free == Decimal("1100")
    assert totals.tax_deferred == Decimal("1000")

    result = invoke(cli_runner, temp_store, "status", "--year", "2026")
    assert "Last reconciled: 2026-05-31" in result.output
