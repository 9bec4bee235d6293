"""Tests for document mappers."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from networth.database.mappers import (
    group_from_document,
    group_to_document,
    settings_from_document,
    snapshot_from_document,
    snapshot_to_document,
    source_account_from_document,
    source_account_to_document,
    target_account_from_document,
    target_account_to_document,
    totals_from_document,
)
from networth.domain.entities import (
    BucketTotals,
    Provenance,
    Snapshot,
    SnapshotAccount,
    SourceAccount,
    TargetAccount,
)


class TestSourceAccountMapper:
    """Tests for source account documents."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_unset_values_collapse_to_none(self, raw):
        account = source_account_from_document({
            "id": "a1", "owner": "Alice", "amount": raw, "fees": raw,
        })

        assert account.amount is None
        assert account.fees is None
        assert account.gains is None

    def test_numbers_and_strings_are_parsed(self):
        account = source_account_from_document({"id": "a1", "amount": 12.5, "gains": "(3.25)"})

        assert account.amount == Decimal("12.5")
        assert account.gains == Decimal("-3.25")

    def test_to_document_omits_values_by_default(self):
        account = SourceAccount(id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA", amount=Decimal("5"))

        assert "amount" not in source_account_to_document(account)
        document = source_account_to_document(account, include_values=True)
        assert document["amount"] == "5"
        assert document["fees"] is None


class TestTargetAccountMapper:
    """Tests for accounts ledger documents."""

    def test_round_trip_keeps_unknown_keys(self):
        document = {
            "year": "2026",
            "owner": "Alice",
            "account_name": "Roth",
            "balance": "100.10",
            "contributions": "",
            "provenance": {"updated_at": "2026-06-30T10:00:00+00:00", "update_kind": "detailed"},
            "notes": "keep",
        }

        entry = target_account_from_document("e1", document)

        assert entry.year == 2026
        assert entry.balance == Decimal("100.10")
        assert entry.contributions is None
        assert entry.provenance.update_kind == "detailed"
        assert entry.provenance.updated_at == datetime(2026, 6, 30, 10, tzinfo=UTC)
        assert entry.extra == {"notes": "keep"}

        written = target_account_to_document(entry)
        assert written["notes"] == "keep"
        assert written["balance"] == "100.10"
        assert written["contributions"] is None
        assert written["entry_id"] == "e1"

    def test_bad_year_and_provenance(self):
        entry = target_account_from_document("e1", {"year": "soon", "provenance": "x"})

        assert entry.year == 0
        assert entry.provenance == Provenance()


class TestGroupMapper:
    """Tests for group documents."""

    def test_defaults_and_duplicate_members(self):
        group = group_from_document("g1", {"member_ids": ["a1", "a2", "a1", None]})

        assert group.owner_override == "Joint"
        assert group.member_ids == ("a1", "a2")
        assert group.total_balance == Decimal("0")

    def test_to_document(self):
        group = group_from_document("g1", {"name": "G", "member_ids": ["a1"], "total_balance": "12"})

        document = group_to_document(group)

        assert document["member_ids"] == ["a1"]
        assert document["total_balance"] == "12"
        assert document["last_sync"] is None


class TestSnapshotMapper:
    """Tests for snapshot records."""

    def test_round_trip(self):
        snapshot = Snapshot(
            id="s1",
            update_date=date(2026, 6, 30),
            timestamp=datetime(2026, 6, 30, 9, 30, tzinfo=UTC),
            update_kind="detailed",
            accounts=(
                SnapshotAccount(
                    source_id="a1", account_name="Roth", owner="Alice",
                    tax_type="Tax-Free", account_type="IRA", amount=Decimal("10"),
                ),
            ),
            totals=BucketTotals(tax_free=Decimal("10")),
        )

        document = snapshot_to_document(snapshot)

        assert document["year"] == 2026
        assert document["accounts_count"] == 1
        assert document["total_amount"] == "10"
        assert snapshot_from_document(document) == snapshot

    def test_unusable_record(self):
        assert snapshot_from_document({"id": "s1", "timestamp": "2026-01-01T00:00:00"}) is None


def test_totals_ignore_unknown_buckets():
    totals = totals_from_document({"tax_free": "5", "crypto": "100", "cash": None})

    assert totals == BucketTotals(tax_free=Decimal("5"))
    assert totals_from_document("junk") == BucketTotals()


def test_settings_fall_back_per_field():
    settings = settings_from_document({"snapshot_retention": "abc", "default_mode": "group"})

    assert settings.snapshot_retention == 500
    assert settings.default_mode == "group"
    assert settings.default_update_kind == "balance-only"
