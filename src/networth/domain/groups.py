"""Account group domain service."""

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import GROUPS_KEY
from networth.domain.entities import JOINT_OWNER, AccountGroup, LedgerEvent, SourceAccount
from networth.domain.errors import (
    NotFoundError,
    PersistenceError,
    group_not_found,
    store_write_failed,
)
from networth.domain.notifications import NotificationChannel
from networth.utils.amount_parser import amount_or_zero

logger = logging.getLogger(__name__)


class GroupService:
    """Service for managing groups of liquid asset accounts.

    Membership is keyed by source account id, so renaming an account never
    breaks its grouping. A source account belongs to at most one group:
    adding it to a group removes it from every other group.
    """

    def __init__(self, store: DocumentStore, channel: Optional[NotificationChannel] = None):
        """Initialize group service.

        Args:
            store: Document store instance
            channel: Optional channel notified after every change
        """
        self.store = store
        self.channel = channel

    def _load_raw(self) -> dict[str, Any]:
        raw = self.store.read(GROUPS_KEY, {})
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed account groups document")
            return {}
        return {key: value for key, value in raw.items() if isinstance(value, dict)}

    def stage_document(self, groups: Iterable[AccountGroup]) -> dict[str, Any]:
        """Return the groups document holding groups, keeping unknown keys."""
        raw = self._load_raw()
        return {
            group.id: {**raw.get(group.id, {}), **mappers.group_to_document(group)}
            for group in groups
        }

    def _save(self, groups: Iterable[AccountGroup], group_id: Optional[str] = None) -> None:
        if not self.store.write(GROUPS_KEY, self.stage_document(groups)):
            raise PersistenceError(store_write_failed([GROUPS_KEY]))
        if self.channel is not None:
            self.channel.publish(LedgerEvent.GROUPS_CHANGED, {"group_id": group_id})

    def list_groups(self) -> list[AccountGroup]:
        """List all groups in creation order."""
        return [
            mappers.group_from_document(group_id, document)
            for group_id, document in self._load_raw().items()
        ]

    def get_group(self, group_id: str) -> Optional[AccountGroup]:
        """Get group by ID.

        Returns:
            AccountGroup or None if not found
        """
        for group in self.list_groups():
            if group.id == group_id:
                return group
        return None

    def _require(self, groups: list[AccountGroup], group_id: str) -> int:
        for index, group in enumerate(groups):
            if group.id == group_id:
                return index
        raise NotFoundError(group_not_found(group_id))

    def create_group(
        self,
        name: Optional[str] = None,
        target_account_name: str = "",
        owner_override: str = JOINT_OWNER,
    ) -> AccountGroup:
        """Create a new empty group.

        Args:
            name: Group name, defaults to "Account Group N"
            target_account_name: Accounts ledger entry the group reconciles into
            owner_override: Owner used when the group creates a new entry

        Returns:
            The created group
        """
        groups = self.list_groups()
        now = datetime.now(UTC)
        group = AccountGroup(
            id=uuid.uuid4().hex,
            name=(name or "").strip() or f"Account Group {len(groups) + 1}",
            owner_override=owner_override.strip() or JOINT_OWNER,
            target_account_name=target_account_name.strip(),
            created_at=now,
            updated_at=now,
        )
        self._save([*groups, group], group.id)
        logger.info(f"Created account group '{group.name}' ({group.id})")
        return group

    def update_metadata(
        self,
        group_id: str,
        name: Optional[str] = None,
        target_account_name: Optional[str] = None,
        owner_override: Optional[str] = None,
    ) -> AccountGroup:
        """Merge the given fields into a group; None leaves a field unchanged.

        Raises:
            NotFoundError: If the group does not exist
        """
        groups = self.list_groups()
        index = self._require(groups, group_id)
        changes: dict[str, Any] = {}
        if name is not None and name.strip():
            changes["name"] = name.strip()
        if target_account_name is not None:
            changes["target_account_name"] = target_account_name.strip()
        if owner_override is not None and owner_override.strip():
            changes["owner_override"] = owner_override.strip()
        groups[index] = replace(groups[index], updated_at=datetime.now(UTC), **changes)
        self._save(groups, group_id)
        return groups[index]

    def delete_group(self, group_id: str) -> None:
        """Delete a group.

        Raises:
            NotFoundError: If the group does not exist
        """
        groups = self.list_groups()
        index = self._require(groups, group_id)
        del groups[index]
        self._save(groups, group_id)

    def add_member(self, group_id: str, source_account_id: str) -> AccountGroup:
        """Add a source account to a group, moving it out of any other group.

        Adding an existing member is a no-op.

        Raises:
            NotFoundError: If the group does not exist
        """
        groups = self.list_groups()
        index = self._require(groups, group_id)
        holders = {position for position, group in enumerate(groups) if source_account_id in group.member_ids}
        if holders == {index}:
            return groups[index]

        now = datetime.now(UTC)
        for position, group in enumerate(groups):
            if position != index and source_account_id in group.member_ids:
                groups[position] = replace(
                    group,
                    member_ids=tuple(m for m in group.member_ids if m != source_account_id),
                    updated_at=now,
                )
        target = groups[index]
        if source_account_id not in target.member_ids:
            target = replace(
                target,
                member_ids=(*target.member_ids, source_account_id),
                updated_at=now,
            )
        groups[index] = target
        self._save(groups, group_id)
        return target

    def remove_member(self, group_id: str, source_account_id: str) -> AccountGroup:
        """Remove a source account from a group; removing a non-member is a no-op.

        Raises:
            NotFoundError: If the group does not exist
        """
        groups = self.list_groups()
        index = self._require(groups, group_id)
        group = groups[index]
        if source_account_id not in group.member_ids:
            return group
        groups[index] = replace(
            group,
            member_ids=tuple(m for m in group.member_ids if m != source_account_id),
            updated_at=datetime.now(UTC),
        )
        self._save(groups, group_id)
        return groups[index]

    def forget_account(self, source_account_id: str) -> None:
        """Remove a deleted source account from every group."""
        groups = self.list_groups()
        if not any(source_account_id in group.member_ids for group in groups):
            return
        now = datetime.now(UTC)
        self._save(
            [
                replace(
                    group,
                    member_ids=tuple(m for m in group.member_ids if m != source_account_id),
                    updated_at=now,
                )
                if source_account_id in group.member_ids
                else group
                for group in groups
            ]
        )

    def balance(self, group_id: str, current_accounts: Sequence[SourceAccount]) -> Decimal:
        """Sum the current amounts of a group's members.

        Members missing from current_accounts, or whose amount is unset,
        contribute zero. An unknown group has a zero balance.
        """
        group = self.get_group(group_id)
        if group is None:
            return Decimal("0")
        return group_balance(group, current_accounts)

    def groups_with_members(self) -> list[AccountGroup]:
        """List groups that have at least one member."""
        return [group for group in self.list_groups() if group.member_ids]

    def group_for_account(self, source_account_id: str) -> Optional[AccountGroup]:
        """Return the first group containing the source account."""
        for group in self.list_groups():
            if source_account_id in group.member_ids:
                return group
        return None

    def ungrouped_accounts(self, source_accounts: Sequence[SourceAccount]) -> list[SourceAccount]:
        """Return the source accounts that are not in any group."""
        grouped = {member for group in self.list_groups() for member in group.member_ids}
        return [account for account in source_accounts if account.id not in grouped]


def group_balance(group: AccountGroup, current_accounts: Sequence[SourceAccount]) -> Decimal:
    """Sum the amounts of group members found in current_accounts."""
    by_id: dict[str, SourceAccount] = {}
    for account in current_accounts:
        by_id.setdefault(account.id, account)
    return sum(
        (amount_or_zero(by_id[member].amount) for member in group.member_ids if member in by_id),
        Decimal("0"),
    )
