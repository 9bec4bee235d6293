"""Tests for the accounts ledger service."""

import pytest
from decimal import Decimal

from networth.domain.datasets import TARGET_ACCOUNTS_KEY
from networth.domain.errors import NotFoundError, ValidationError


class TestTargetAccountService:
    """Tests for TargetAccountService."""

    def test_add_and_list_by_year(self, target_service):
        entry = target_service.add_account(2026, "Alice", "Roth", "IRA", "Vanguard", Decimal("10"))
        target_service.add_account(2025, "Alice", "Roth", "IRA", "Vanguard")

        assert [e.entry_id for e in target_service.list_accounts(2026)] == [entry.entry_id]
        assert len(target_service.list_accounts()) == 2
        assert target_service.get_account(entry.entry_id).balance == Decimal("10")

    def test_add_requires_owner_and_name(self, target_service):
        with pytest.raises(ValidationError):
            target_service.add_account(2026, "", "Roth")

    def test_rename_records_mapping(self, target_service, name_cache):
        entry = target_service.add_account(2026, "Alice", "Alice's Vanguard IRA (Roth)")

        renamed = target_service.rename_account(entry.entry_id, "Retirement")

        assert renamed.account_name == "Retirement"
        assert name_cache.current_name("Alice's Vanguard IRA (Roth)") == "Retirement"

    def test_rename_updates_group_target(self, target_service, group_service):
        entry = target_service.add_account(2026, "Joint", "Combined 401k")
        group = group_service.create_group("G", target_account_name="combined 401k")

        target_service.rename_account(entry.entry_id, "All 401ks")

        assert group_service.get_group(group.id).target_account_name == "All 401ks"

    def test_rename_missing_entry(self, target_service):
        with pytest.raises(NotFoundError):
            target_service.rename_account("missing", "Name")

    def test_delete_account(self, target_service):
        entry = target_service.add_account(2026, "Alice", "Roth")

        target_service.delete_account(entry.entry_id)

        assert target_service.list_accounts() == []
        with pytest.raises(NotFoundError):
            target_service.delete_account(entry.entry_id)

    def test_unknown_keys_survive(self, target_service, temp_store):
        entry = target_service.add_account(2026, "Alice", "Roth")
        stored = temp_store.read(TARGET_ACCOUNTS_KEY)
        stored[entry.entry_id]["notes"] = "keep me"
        temp_store.write(TARGET_ACCOUNTS_KEY, stored)

        target_service.rename_account(entry.entry_id, "Roth IRA")

        assert temp_store.read(TARGET_ACCOUNTS_KEY)[entry.entry_id]["notes"] == "keep me"

    def test_available_accounts_deduplicated_and_sorted(self, target_service):
        target_service.add_account(2026, "Bob", "Brokerage")
        target_service.add_account(2026, "Alice", "Roth")
        target_service.add_account(2026, "Alice", "Brokerage")
        target_service.add_account(2026, "Bob", "Brokerage")

        available = target_service.available_accounts(2026)

        assert [(e.account_name, e.owner) for e in available] == [
            ("Brokerage", "Alice"),
            ("Brokerage", "Bob"),
            ("Roth", "Alice"),
        ]

    def test_unused_accounts(self, target_service, group_service):
        target_service.add_account(2026, "Joint", "Combined 401k")
        target_service.add_account(2026, "Alice", "Roth")
        group_service.create_group("G", target_account_name="Combined 401k")

        assert [e.account_name for e in target_service.unused_accounts(2026)] == ["Roth"]
