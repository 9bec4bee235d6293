"""Liquid asset (source ledger) account domain service."""

import logging
import uuid
from dataclasses import replace
from typing import Any, Optional

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import SOURCE_ACCOUNTS_KEY
from networth.domain.entities import AccountType, LedgerEvent, SourceAccount, TaxType
from networth.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    duplicate_source_account,
    source_account_not_found,
    store_write_failed,
)
from networth.domain.groups import GroupService
from networth.domain.naming import name_for
from networth.domain.notifications import NotificationChannel

logger = logging.getLogger(__name__)

TAX_TYPES = tuple(tax_type.value for tax_type in TaxType)
ACCOUNT_TYPES = tuple(account_type.value for account_type in AccountType)


def validate_source_account(account: SourceAccount) -> dict[str, str]:
    """Check the identity fields of a source account.

    Returns:
        Mapping of field name to error message; empty when valid
    """
    errors = {}
    if not account.owner.strip():
        errors["owner"] = "Owner is required"
    if not account.tax_type:
        errors["tax_type"] = "Tax type is required"
    elif account.tax_type not in TAX_TYPES:
        errors["tax_type"] = f"Tax type must be one of: {', '.join(TAX_TYPES)}"
    if not account.account_type:
        errors["account_type"] = "Account type is required"
    elif account.account_type not in ACCOUNT_TYPES:
        errors["account_type"] = f"Account type must be one of: {', '.join(ACCOUNT_TYPES)}"
    return errors


class SourceAccountService:
    """Service for managing liquid asset account definitions.

    Only identity fields are persisted. Amounts and detail values are entered
    per session, so every loaded account starts with them unset.
    """

    def __init__(
        self,
        store: DocumentStore,
        channel: Optional[NotificationChannel] = None,
        groups: Optional[GroupService] = None,
    ):
        """Initialize source account service.

        Args:
            store: Document store instance
            channel: Optional channel notified after every change
            groups: Optional group service cleaned up when accounts are deleted
        """
        self.store = store
        self.channel = channel
        self.groups = groups

    def list_accounts(self) -> list[SourceAccount]:
        """List all source accounts with their values unset."""
        raw = self.store.read(SOURCE_ACCOUNTS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed liquid assets accounts document")
            return []
        return [
            mappers.source_account_from_document(document).identity()
            for document in raw
            if isinstance(document, dict) and document.get("id")
        ]

    def get_account(self, account_id: str) -> Optional[SourceAccount]:
        """Get source account by ID.

        Returns:
            SourceAccount or None if not found
        """
        for account in self.list_accounts():
            if account.id == account_id:
                return account
        return None

    def _save(self, accounts: list[SourceAccount], account_id: Optional[str] = None) -> None:
        documents = [mappers.source_account_to_document(account) for account in accounts]
        if not self.store.write(SOURCE_ACCOUNTS_KEY, documents):
            raise PersistenceError(store_write_failed([SOURCE_ACCOUNTS_KEY]))
        if self.channel is not None:
            self.channel.publish(LedgerEvent.SOURCE_CHANGED, {"account_id": account_id})

    def _check(self, account: SourceAccount, accounts: list[SourceAccount]) -> None:
        errors = validate_source_account(account)
        if errors:
            raise ValidationError("; ".join(errors.values()), field_errors=errors)
        name = name_for(account)
        for existing in accounts:
            if existing.id != account.id and name_for(existing) == name:
                raise ConflictError(duplicate_source_account(name))

    def create_account(
        self,
        owner: str,
        tax_type: str,
        account_type: str,
        institution: str = "",
        description: str = "",
    ) -> SourceAccount:
        """Create a new source account.

        Raises:
            ValidationError: If an identity field is missing or invalid
            ConflictError: If an account with the same generated name exists
        """
        accounts = self.list_accounts()
        account = SourceAccount(
            id=uuid.uuid4().hex,
            owner=owner.strip(),
            tax_type=tax_type.strip(),
            account_type=account_type.strip(),
            institution=institution.strip(),
            description=description.strip(),
        )
        self._check(account, accounts)
        self._save([*accounts, account], account.id)
        logger.info(f"Created liquid assets account '{name_for(account)}'")
        return account

    def update_account(self, account_id: str, **changes: Any) -> SourceAccount:
        """Update identity fields of a source account.

        Args:
            account_id: Account to update
            **changes: New values for owner, tax_type, account_type,
                institution or description; None values are ignored

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the result is invalid
            ConflictError: If the new name collides with another account
        """
        allowed = {"owner", "tax_type", "account_type", "institution", "description"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        accounts = self.list_accounts()
        for index, account in enumerate(accounts):
            if account.id == account_id:
                break
        else:
            raise NotFoundError(source_account_not_found(account_id))

        updated = replace(
            accounts[index],
            **{field: value.strip() for field, value in changes.items() if value is not None},
        )
        self._check(updated, accounts)
        accounts[index] = updated
        self._save(accounts, account_id)
        return updated

    def delete_account(self, account_id: str) -> None:
        """Delete a source account and drop it from any group.

        Raises:
            NotFoundError: If the account does not exist
        """
        accounts = self.list_accounts()
        remaining = [account for account in accounts if account.id != account_id]
        if len(remaining) == len(accounts):
            raise NotFoundError(source_account_not_found(account_id))
        self._save(remaining, account_id)
        if self.groups is not None:
            self.groups.forget_account(account_id)

    def with_values(self, values: dict[str, dict[str, Any]]) -> list[SourceAccount]:
        """Build a reconciliation batch from the stored definitions.

        Args:
            values: Raw entered values keyed by account ID, e.g.
                ``{"a1": {"amount": "1000", "gains": "12.50"}}``

        Returns:
            Every stored account, with values applied where given

        Raises:
            NotFoundError: If values name an unknown account
        """
        accounts = self.list_accounts()
        known = {account.id for account in accounts}
        for account_id in values:
            if account_id not in known:
                raise NotFoundError(source_account_not_found(account_id))
        batch = []
        for account in accounts:
            entered = values.get(account.id)
            if entered:
                document = mappers.source_account_to_document(account)
                document.update(entered)
                account = mappers.source_account_from_document(document)
            batch.append(account)
        return batch
