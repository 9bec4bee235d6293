"""Tests for account naming."""

import pytest
from networth.domain.entities import SourceAccount
from networth.domain.naming import generate_account_name, name_for


@pytest.mark.parametrize(
    "owner, tax_type, account_type, institution, description, expected",
    [
        ("Alice", "Tax-Free", "IRA", "Vanguard", "", "Alice's Vanguard IRA (Roth)"),
        ("Bob", "Tax-Deferred", "401k", "Fidelity", "", "Bob's Fidelity 401k (Traditional)"),
        ("Bob", "After-Tax", "401k", "", "", "Bob's 401k (Taxable)"),
        ("Alice", "Cash", "IRA", "", "", "Alice's IRA (Cash)"),
        ("Joint", "After-Tax", "Brokerage", "Fidelity", "Kids", "Joint Fidelity Brokerage - Kids"),
        ("joint", "Cash", "Cash", "Ally", "", "Joint Ally Cash"),
        ("Alice", "Tax-Free", "HSA", "Optum", "", "Alice's Optum HSA"),
        ("", "Tax-Free", "ESPP", "", "", "ESPP"),
        ("", "", "", "", "", ""),
    ],
)
def test_generate_account_name(owner, tax_type, account_type, institution, description, expected):
    """Test names built from account attributes."""
    assert generate_account_name(owner, tax_type, account_type, institution, description) == expected


def test_generate_account_name_trims_inputs():
    """Test surrounding whitespace does not leak into the name."""
    assert generate_account_name("  Alice ", "Tax-Free ", " IRA", " Vanguard ") == "Alice's Vanguard IRA (Roth)"


def test_generate_account_name_accepts_none():
    """Test missing attributes produce a shorter name instead of failing."""
    assert generate_account_name(None, None, "Brokerage", None, None) == "Brokerage"


def test_name_for_is_deterministic():
    """Test naming the same account twice gives the same name."""
    account = SourceAccount(
        id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA",
        institution="Vanguard", description="Rollover",
    )

    assert name_for(account) == name_for(account) == "Alice's Vanguard IRA (Roth) - Rollover"
