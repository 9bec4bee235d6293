"""Accounts (target ledger) domain service."""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Optional

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import TARGET_ACCOUNTS_KEY
from networth.domain.entities import LedgerEvent, TargetAccount
from networth.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    store_write_failed,
    target_account_not_found,
)
from networth.domain.groups import GroupService
from networth.domain.name_cache import AccountNameCache
from networth.domain.notifications import NotificationChannel

logger = logging.getLogger(__name__)


class TargetAccountService:
    """Service for the independently edited accounts ledger."""

    def __init__(
        self,
        store: DocumentStore,
        name_cache: Optional[AccountNameCache] = None,
        channel: Optional[NotificationChannel] = None,
        groups: Optional[GroupService] = None,
    ):
        """Initialize target account service.

        Args:
            store: Document store instance
            name_cache: Cache that records renames so matching follows them
            channel: Optional channel notified after every change
            groups: Optional group service whose target names follow renames
        """
        self.store = store
        self.name_cache = name_cache
        self.channel = channel
        self.groups = groups

    def _load_raw(self) -> dict[str, Any]:
        raw = self.store.read(TARGET_ACCOUNTS_KEY, {})
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed account data document")
            return {}
        return raw

    def load_all(self) -> dict[str, TargetAccount]:
        """Load every entry of every period keyed by entry ID."""
        return {
            entry_id: mappers.target_account_from_document(entry_id, document)
            for entry_id, document in self._load_raw().items()
            if isinstance(document, dict)
        }

    def stage_document(self, accounts: dict[str, TargetAccount]) -> dict[str, Any]:
        """Return the account data document holding accounts.

        Entries this package cannot read are carried over unchanged.
        """
        document = {
            entry_id: value
            for entry_id, value in self._load_raw().items()
            if not isinstance(value, dict)
        }
        for entry_id, account in accounts.items():
            document[entry_id] = mappers.target_account_to_document(account)
        return document

    def _save(self, accounts: dict[str, TargetAccount], year: Optional[int] = None) -> None:
        if not self.store.write(TARGET_ACCOUNTS_KEY, self.stage_document(accounts)):
            raise PersistenceError(store_write_failed([TARGET_ACCOUNTS_KEY]))
        if self.channel is not None:
            self.channel.publish(LedgerEvent.TARGET_CHANGED, {"source": "accounts", "year": year})

    def list_accounts(self, year: Optional[int] = None) -> list[TargetAccount]:
        """List entries, optionally restricted to one year, in stored order."""
        return [
            account
            for account in self.load_all().values()
            if year is None or account.year == year
        ]

    def get_account(self, entry_id: str) -> Optional[TargetAccount]:
        """Get entry by ID.

        Returns:
            TargetAccount or None if not found
        """
        return self.load_all().get(entry_id)

    def add_account(
        self,
        year: int,
        owner: str,
        account_name: str,
        account_type: str = "",
        institution: str = "",
        balance: Optional[Decimal] = None,
    ) -> TargetAccount:
        """Create an entry directly, as a user editing the ledger would.

        Raises:
            ValidationError: If owner or account name is empty
        """
        if not owner.strip() or not account_name.strip():
            raise ValidationError("Owner and account name are required")
        accounts = self.load_all()
        account = TargetAccount(
            entry_id=f"entry_{uuid.uuid4().hex}",
            year=year,
            owner=owner.strip(),
            account_name=account_name.strip(),
            account_type=account_type.strip(),
            institution=institution.strip(),
            balance=balance,
        )
        accounts[account.entry_id] = account
        self._save(accounts, year)
        return account

    def rename_account(self, entry_id: str, new_name: str) -> TargetAccount:
        """Rename an entry and remember the rename for future matching.

        Groups that reconcile into the old name are pointed at the new one.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the new name is empty
        """
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Account name is required")
        accounts = self.load_all()
        if entry_id not in accounts:
            raise NotFoundError(target_account_not_found(entry_id))
        old_name = accounts[entry_id].account_name
        accounts[entry_id] = replace(accounts[entry_id], account_name=new_name)
        self._save(accounts, accounts[entry_id].year)

        if self.name_cache is not None:
            self.name_cache.record_rename(old_name, new_name)
        if self.groups is not None:
            for group in self.groups.list_groups():
                if group.target_account_name.lower() == old_name.lower():
                    self.groups.update_metadata(group.id, target_account_name=new_name)
        logger.info(f"Renamed account '{old_name}' to '{new_name}'")
        return accounts[entry_id]

    def delete_account(self, entry_id: str) -> None:
        """Delete an entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        accounts = self.load_all()
        if entry_id not in accounts:
            raise NotFoundError(target_account_not_found(entry_id))
        year = accounts.pop(entry_id).year
        self._save(accounts, year)

    def available_accounts(self, year: int) -> list[TargetAccount]:
        """List a year's entries that have a name, one per name and owner.

        Returns:
            Entries sorted by account name, then owner
        """
        seen = set()
        available = []
        for account in self.list_accounts(year):
            if not account.account_name:
                continue
            key = (account.account_name, account.owner)
            if key in seen:
                continue
            seen.add(key)
            available.append(account)
        return sorted(available, key=lambda a: (a.account_name.lower(), a.owner.lower()))

    def unused_accounts(self, year: int) -> list[TargetAccount]:
        """List available entries that no group reconciles into yet."""
        used = set()
        if self.groups is not None:
            used = {
                group.target_account_name.lower()
                for group in self.groups.list_groups()
                if group.target_account_name
            }
        return [
            account
            for account in self.available_accounts(year)
            if account.account_name.lower() not in used
        ]
