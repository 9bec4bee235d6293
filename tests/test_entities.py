"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date, datetime, UTC
from decimal import Decimal

from networth.domain.entities import (
    BucketTotals,
    Snapshot,
    SourceAccount,
    UpdateKind,
)


class TestSourceAccount:
    """Tests for SourceAccount entity."""

    def test_identity_clears_values(self):
        account = SourceAccount(
            id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA",
            amount=Decimal("1"), gains=Decimal("2"),
        )

        identity = account.identity()

        assert identity.amount is None
        assert set(identity.details().values()) == {None}
        assert identity.owner == "Alice"
        assert account.details()["gains"] == Decimal("2")

    def test_immutability(self):
        account = SourceAccount(id="a1", owner="Alice", tax_type="Cash", account_type="Cash")

        with pytest.raises(FrozenInstanceError):
            account.amount = Decimal("1")


class TestBucketTotals:
    """Tests for BucketTotals."""

    def test_plus_and_add(self):
        totals = BucketTotals().plus("hsa", Decimal("5")) + BucketTotals(hsa=Decimal("1"), cash=Decimal("2"))

        assert totals.hsa == Decimal("6")
        assert totals.total == Decimal("8")
        assert totals.is_zero() is False
        assert BucketTotals().is_zero() is True

    def test_as_dict_lists_every_bucket(self):
        assert list(BucketTotals().as_dict()) == [
            "tax_free", "tax_deferred", "brokerage", "espp", "hsa", "cash", "unclassified",
        ]


@pytest.mark.parametrize(
    "kind, writes_balance, writes_details",
    [
        (UpdateKind.BALANCE_ONLY, True, False),
        (UpdateKind.DETAILED, True, True),
        (UpdateKind.DETAILED_PRESERVE_BALANCE, False, True),
    ],
)
def test_update_kind_fields(kind, writes_balance, writes_details):
    assert kind.writes_balance is writes_balance
    assert kind.writes_details is writes_details


def test_snapshot_year_and_total():
    snapshot = Snapshot(
        id="s1",
        update_date=date(2025, 12, 31),
        timestamp=datetime(2026, 1, 1, tzinfo=UTC),
        update_kind="balance-only",
        accounts=(),
        totals=BucketTotals(cash=Decimal("3"), espp=Decimal("4")),
    )

    assert snapshot.year == 2025
    assert snapshot.total_amount == Decimal("7")
