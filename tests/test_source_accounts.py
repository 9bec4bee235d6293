"""Tests for the liquid asset account service."""

import pytest
from decimal import Decimal

from networth.domain.datasets import SOURCE_ACCOUNTS_KEY
from networth.domain.entities import LedgerEvent, SourceAccount
from networth.domain.errors import ConflictError, NotFoundError, ValidationError
from networth.domain.source_accounts import validate_source_account


class TestValidateSourceAccount:
    """Tests for per-field validation."""

    def test_valid_account(self):
        account = SourceAccount(id="a1", owner="Alice", tax_type="Tax-Free", account_type="IRA")

        assert validate_source_account(account) == {}

    def test_reports_every_field(self):
        account = SourceAccount(id="a1", owner=" ", tax_type="", account_type="Savings")

        errors = validate_source_account(account)

        assert set(errors) == {"owner", "tax_type", "account_type"}
        assert "required" in errors["tax_type"]
        assert "must be one of" in errors["account_type"]


class TestSourceAccountService:
    """Tests for SourceAccountService."""

    def test_create_and_list(self, source_service, alice_ira):
        accounts = source_service.list_accounts()

        assert [a.id for a in accounts] == [alice_ira.id]
        assert accounts[0].institution == "Vanguard"
        assert source_service.get_account(alice_ira.id) == alice_ira
        assert source_service.get_account("missing") is None

    def test_create_invalid_raises_with_field_errors(self, source_service):
        with pytest.raises(ValidationError) as exc_info:
            source_service.create_account(owner="", tax_type="Tax-Free", account_type="IRA")

        assert "owner" in exc_info.value.field_errors

    def test_duplicate_name_conflicts(self, source_service, alice_ira):
        with pytest.raises(ConflictError):
            source_service.create_account(
                owner="Alice", tax_type="Tax-Free", account_type="IRA", institution="Vanguard"
            )

    def test_description_disambiguates(self, source_service, alice_ira):
        other = source_service.create_account(
            owner="Alice", tax_type="Tax-Free", account_type="IRA",
            institution="Vanguard", description="Rollover",
        )

        assert other.id != alice_ira.id
        assert len(source_service.list_accounts()) == 2

    def test_values_are_not_persisted(self, source_service, temp_store, alice_ira):
        """Test only identity fields survive a reload."""
        stored = temp_store.read(SOURCE_ACCOUNTS_KEY)
        stored[0]["amount"] = "500"
        stored[0]["gains"] = "7"
        temp_store.write(SOURCE_ACCOUNTS_KEY, stored)

        account = source_service.get_account(alice_ira.id)

        assert account.amount is None
        assert account.gains is None

    def test_update_account(self, source_service, alice_ira):
        updated = source_service.update_account(alice_ira.id, institution="Fidelity", owner=None)

        assert updated.institution == "Fidelity"
        assert updated.owner == "Alice"
        assert source_service.get_account(alice_ira.id).institution == "Fidelity"

    def test_update_rejects_unknown_fields(self, source_service, alice_ira):
        with pytest.raises(ValidationError):
            source_service.update_account(alice_ira.id, amount="5")

    def test_update_missing_account(self, source_service):
        with pytest.raises(NotFoundError):
            source_service.update_account("missing", owner="Bob")

    def test_delete_account_leaves_group(self, source_service, group_service, alice_ira):
        group = group_service.create_group("G")
        group_service.add_member(group.id, alice_ira.id)

        source_service.delete_account(alice_ira.id)

        assert source_service.list_accounts() == []
        assert group_service.get_group(group.id).member_ids == ()
        with pytest.raises(NotFoundError):
            source_service.delete_account(alice_ira.id)

    def test_with_values(self, source_service, alice_ira, bob_401k):
        batch = source_service.with_values({
            alice_ira.id: {"amount": "$1,000.50", "contributions": ""},
        })

        by_id = {account.id: account for account in batch}
        assert by_id[alice_ira.id].amount == Decimal("1000.50")
        assert by_id[alice_ira.id].contributions is None
        assert by_id[bob_401k.id].amount is None

    def test_with_values_unknown_account(self, source_service):
        with pytest.raises(NotFoundError):
            source_service.with_values({"missing": {"amount": "1"}})

    def test_changes_are_published(self, source_service, channel):
        events = []
        channel.subscribe(LedgerEvent.SOURCE_CHANGED, lambda event, payload: events.append(payload))

        created = source_service.create_account(owner="Carol", tax_type="Cash", account_type="Cash")

        assert events == [{"account_id": created.id}]
