"""Reconciliation of liquid asset values into the accounts ledger.

A run takes a batch of liquid asset accounts carrying the values entered
this session and writes them through to the accounts ledger:

* ``individual`` mode matches every account to its own entry (see
  :mod:`networth.domain.matching`).
* ``group`` mode sums the members of every group that has any in the batch
  and writes the result into the entry named by the group.

In both modes the change of every supplied amount since it was last
recorded is added to the category aggregates, keeping them in step with
the snapshot baselines.

A value of ``None`` always means "leave what is recorded alone". Every
mutation of a run is staged in memory and persisted with a single
``write_many`` call together with the run's snapshot, so a failed write
leaves every dataset as it was.
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Optional

from networth.database.base import DocumentStore
from networth.domain.aggregates import AggregateLedger
from networth.domain.categorization import bucket_amounts, categorize
from networth.domain.datasets import (
    AGGREGATES_KEY,
    GROUPS_KEY,
    SNAPSHOTS_KEY,
    TARGET_ACCOUNTS_KEY,
)
from networth.domain.entities import (
    DETAIL_FIELDS,
    AccountGroup,
    BucketTotals,
    LedgerEvent,
    Provenance,
    ReconcileResult,
    Snapshot,
    SnapshotAccount,
    SourceAccount,
    SyncStatus,
    TargetAccount,
    UpdateKind,
    UpdateMode,
)
from networth.domain.errors import PersistenceError, ValidationError, store_write_failed
from networth.domain.groups import GroupService, group_balance
from networth.domain.matching import EXACT_NAME, find_match_with_tier, find_target_by_name
from networth.domain.name_cache import AccountNameCache
from networth.domain.naming import name_for
from networth.domain.notifications import NotificationChannel
from networth.domain.snapshots import SnapshotService
from networth.domain.target_accounts import TargetAccountService

module_logger = logging.getLogger(__name__)

GROUP_ACCOUNT_TYPE = "Combined"
GROUP_INSTITUTION = "Multiple"


@dataclass
class _Staging:
    """Accounts ledger state of the period being reconciled."""

    accounts: dict[str, TargetAccount]
    candidates: list[TargetAccount]
    created: int = 0
    updated: int = 0
    groups: list[AccountGroup] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated)

    def put(self, account: TargetAccount, new: bool) -> None:
        self.accounts[account.entry_id] = account
        if new:
            self.candidates.append(account)
            self.created += 1
            return
        for index, candidate in enumerate(self.candidates):
            if candidate.entry_id == account.entry_id:
                self.candidates[index] = account
                break
        self.updated += 1


def _field_changes(
    kind: UpdateKind,
    amount: Optional[Decimal],
    details: Mapping[str, Optional[Decimal]],
) -> dict[str, Decimal]:
    """Return the entry fields a run of this kind may overwrite."""
    changes = {}
    if kind.writes_balance and amount is not None:
        changes["balance"] = amount
    if kind.writes_details:
        changes.update({name: value for name, value in details.items() if value is not None})
    return changes


def _sum_details(members: Iterable[SourceAccount]) -> dict[str, Optional[Decimal]]:
    """Sum each detail field over the members that supplied it."""
    totals: dict[str, Optional[Decimal]] = dict.fromkeys(DETAIL_FIELDS)
    for member in members:
        for name, value in member.details().items():
            if value is not None:
                totals[name] = (totals[name] or Decimal("0")) + value
    return totals


class ReconciliationService:
    """Runs reconciliation batches against the accounts ledger."""

    def __init__(
        self,
        store: DocumentStore,
        channel: Optional[NotificationChannel] = None,
        name_cache: Optional[AccountNameCache] = None,
        snapshots: Optional[SnapshotService] = None,
        groups: Optional[GroupService] = None,
        targets: Optional[TargetAccountService] = None,
        aggregates: Optional[AggregateLedger] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize reconciliation service.

        Collaborators that are not given are created over the same store.

        Args:
            store: Document store instance
            channel: Optional channel notified after a successful run
            name_cache: Rename cache consulted by exact-name matching
            snapshots: Snapshot record store
            groups: Group registry used by group mode
            targets: Accounts ledger service
            aggregates: Per-period category aggregates
            logger: Logger override
        """
        self.store = store
        self.channel = channel
        self.name_cache = name_cache or AccountNameCache(store)
        self.snapshots = snapshots or SnapshotService(store)
        self.groups = groups or GroupService(store, channel)
        self.targets = targets or TargetAccountService(
            store, self.name_cache, channel, self.groups
        )
        self.aggregates = aggregates or AggregateLedger(store)
        self.logger = logger or module_logger

    def reconcile(
        self,
        batch: Iterable[SourceAccount],
        mode: str = UpdateMode.INDIVIDUAL.value,
        update_kind: str = UpdateKind.BALANCE_ONLY.value,
        as_of: Optional[date] = None,
    ) -> ReconcileResult:
        """Reconcile a batch of liquid asset accounts.

        Args:
            batch: Accounts with the values entered this session; None
                values leave recorded data untouched
            mode: "individual" or "group"
            update_kind: "balance-only", "detailed" or
                "detailed-preserve-balance"
            as_of: Date of the update, defaults to today; its year selects
                the period

        Returns:
            ReconcileResult describing what was written

        Raises:
            ValidationError: If mode or update_kind is unknown
            PersistenceError: If the store rejects the write; nothing is saved
        """
        try:
            mode = UpdateMode(mode)
            kind = UpdateKind(update_kind)
        except ValueError as e:
            raise ValidationError(str(e)) from None
        as_of = as_of or date.today()
        year = as_of.year
        now = datetime.now(UTC)

        batch = self._unique(batch)
        if not batch:
            self.logger.info("Nothing to reconcile: empty batch")
            return ReconcileResult(
                changed=False, processed_count=0, groups_processed=0, method=mode.value, year=year
            )

        previous = self.snapshots.previous_amounts(year)
        accounts = self.targets.load_all()
        staging = _Staging(
            accounts=accounts,
            candidates=[account for account in accounts.values() if account.year == year],
        )

        documents: dict[str, Any] = {}
        bucket_deltas = BucketTotals()
        group_totals = BucketTotals()
        groups_processed = 0
        if mode is UpdateMode.INDIVIDUAL:
            processed = self._reconcile_individual(batch, kind, year, now, staging)
        else:
            processed, groups_processed, group_totals = self._reconcile_groups(
                batch, kind, year, now, staging
            )
            if groups_processed:
                documents[GROUPS_KEY] = self.groups.stage_document(staging.groups)

        # Snapshot baselines and aggregates move together in either mode
        bucket_deltas, owner_deltas = self._deltas(batch, previous)
        if owner_deltas:
            documents[AGGREGATES_KEY] = self.aggregates.stage_deltas(
                year, bucket_deltas, owner_deltas, now
            )

        snapshot = self._snapshot(batch, previous, kind, as_of, now)
        documents[SNAPSHOTS_KEY] = self.snapshots.stage_append(snapshot)
        if staging.changed:
            documents[TARGET_ACCOUNTS_KEY] = self.targets.stage_document(staging.accounts)

        if not self.store.write_many(documents):
            self.logger.error(f"Reconciliation for {year} failed; no changes were saved")
            raise PersistenceError(store_write_failed(documents))

        self._notify(mode, year, staging.changed, groups_processed)
        self.logger.info(
            f"Reconciled {processed} account(s) for {year} ({mode.value}, {kind.value}): "
            f"{staging.created} created, {staging.updated} updated"
        )
        return ReconcileResult(
            changed=staging.changed,
            processed_count=processed,
            groups_processed=groups_processed,
            method=mode.value,
            year=year,
            created_count=staging.created,
            updated_count=staging.updated,
            snapshot_id=snapshot.id,
            bucket_deltas=bucket_deltas,
            group_totals=group_totals,
        )

    def _unique(self, batch: Iterable[SourceAccount]) -> list[SourceAccount]:
        unique: dict[str, SourceAccount] = {}
        for account in batch:
            if account.id in unique:
                self.logger.warning(f"Account {account.id} appears twice in batch; using the first")
                continue
            unique[account.id] = account
        return list(unique.values())

    def _write(
        self,
        staging: _Staging,
        target: Optional[TargetAccount],
        changes: dict[str, Decimal],
        provenance: Provenance,
        template: dict[str, Any],
    ) -> TargetAccount:
        """Apply changes to target, or create an entry from template."""
        if any(name in changes for name in DETAIL_FIELDS):
            provenance = replace(provenance, last_detailed_update=provenance.updated_at)
        elif target is not None:
            provenance = replace(
                provenance, last_detailed_update=target.provenance.last_detailed_update
            )

        if target is not None:
            account = replace(target, provenance=provenance, **changes)
            staging.put(account, new=False)
            return account
        # Fields never written stay unset rather than zero
        account = TargetAccount(
            entry_id=f"entry_{uuid.uuid4().hex}",
            provenance=provenance,
            **template,
            **changes,
        )
        staging.put(account, new=True)
        return account

    def _reconcile_individual(
        self,
        batch: list[SourceAccount],
        kind: UpdateKind,
        year: int,
        now: datetime,
        staging: _Staging,
    ) -> int:
        name_mapping = self.name_cache.as_mapping()
        provenance = Provenance(
            updated_at=now,
            update_kind=kind.value,
            source=f"liquid-assets-individual-{kind.value}",
        )
        processed = 0
        for account in batch:
            changes = _field_changes(kind, account.amount, account.details())
            if not changes:
                continue
            # Ambiguous candidates resolve to the first in stored order
            target, tier = find_match_with_tier(account, staging.candidates, name_mapping)
            if target is None:
                self.logger.debug(f"No entry matches '{name_for(account)}'; creating one")
            elif tier != EXACT_NAME:
                self.logger.debug(
                    f"'{name_for(account)}' matched '{target.account_name}' structurally"
                )
            self._write(
                staging,
                target,
                changes,
                provenance,
                {
                    "year": year,
                    "owner": account.owner,
                    "account_name": name_for(account),
                    "account_type": account.account_type,
                    "institution": account.institution,
                },
            )
            processed += 1
        return processed

    def _deltas(
        self, batch: list[SourceAccount], previous: Mapping[str, Decimal]
    ) -> tuple[BucketTotals, dict[str, BucketTotals]]:
        """Bucket the change of every supplied amount since it was last recorded."""
        totals = BucketTotals()
        owners: dict[str, BucketTotals] = {}
        for account in batch:
            if account.amount is None:
                continue
            delta = account.amount - previous.get(account.id, Decimal("0"))
            bucket = categorize(account.account_type, account.tax_type)
            totals = totals.plus(bucket, delta)
            owners[account.owner] = owners.get(account.owner, BucketTotals()).plus(bucket, delta)
        return totals, owners

    def _reconcile_groups(
        self,
        batch: list[SourceAccount],
        kind: UpdateKind,
        year: int,
        now: datetime,
        staging: _Staging,
    ) -> tuple[int, int, BucketTotals]:
        by_id = {account.id: account for account in batch}
        staging.groups = self.groups.list_groups()
        claimed: set[str] = set()
        processed = 0
        groups_processed = 0
        totals = BucketTotals()

        for index, group in enumerate(staging.groups):
            # An account listed in several groups counts for the first only
            members = [
                by_id[member_id]
                for member_id in group.member_ids
                if member_id in by_id and member_id not in claimed
            ]
            claimed.update(member.id for member in members)
            if not members:
                continue
            if not group.target_account_name:
                self.logger.warning(f"Group '{group.name}' has no target account; skipping")
                continue

            supplied = any(member.amount is not None for member in members)
            balance = group_balance(group, members) if supplied else None
            changes = _field_changes(kind, balance, _sum_details(members))
            if not changes:
                continue

            target = find_target_by_name(group.target_account_name, staging.candidates)
            if target is None:
                target = find_target_by_name(
                    self.name_cache.current_name(group.target_account_name), staging.candidates
                )
            self._write(
                staging,
                target,
                changes,
                Provenance(
                    updated_at=now,
                    update_kind=kind.value,
                    source=f"liquid-assets-group-{kind.value}",
                    group_id=group.id,
                    group_name=group.name,
                ),
                {
                    "year": year,
                    "owner": group.owner_override,
                    "account_name": group.target_account_name,
                    "account_type": GROUP_ACCOUNT_TYPE,
                    "institution": GROUP_INSTITUTION,
                },
            )

            if balance is not None:
                first = members[0]
                self.logger.debug(
                    f"Bucketing group '{group.name}' by its first member "
                    f"({first.account_type}, {first.tax_type})"
                )
                totals = totals.plus(categorize(first.account_type, first.tax_type), balance)
            staging.groups[index] = replace(
                group,
                total_balance=balance if balance is not None else group.total_balance,
                last_sync=now,
            )
            processed += len(members)
            groups_processed += 1
        return processed, groups_processed, totals

    def _snapshot(
        self,
        batch: list[SourceAccount],
        previous: Mapping[str, Decimal],
        kind: UpdateKind,
        as_of: date,
        now: datetime,
    ) -> Snapshot:
        """Capture every account of the batch.

        Accounts left blank are recorded with their last known amount so the
        next run computes its deltas from it.
        """
        entries = []
        for account in batch:
            amount = account.amount if account.amount is not None else previous.get(account.id)
            entries.append(
                SnapshotAccount(
                    source_id=account.id,
                    account_name=name_for(account),
                    owner=account.owner,
                    tax_type=account.tax_type,
                    account_type=account.account_type,
                    institution=account.institution,
                    description=account.description,
                    amount=amount,
                    **account.details(),
                )
            )
        totals = bucket_amounts(
            (entry.account_type, entry.tax_type, entry.amount)
            for entry in entries
            if entry.amount is not None
        )
        return Snapshot(
            id=uuid.uuid4().hex,
            update_date=as_of,
            timestamp=now,
            update_kind=kind.value,
            accounts=tuple(entries),
            totals=totals,
        )

    def _notify(self, mode: UpdateMode, year: int, changed: bool, groups_processed: int) -> None:
        if self.channel is None:
            return
        payload = {"source": "liquid_assets", "year": year}
        self.channel.publish(LedgerEvent.SOURCE_CHANGED, payload)
        if changed:
            self.channel.publish(LedgerEvent.TARGET_CHANGED, payload)
        if mode is UpdateMode.GROUP and groups_processed:
            self.channel.publish(LedgerEvent.GROUPS_CHANGED, payload)

    def sync_status(self, year: int) -> SyncStatus:
        """Summarize how current the accounts ledger is for a year."""
        entries = self.targets.list_accounts(year)
        latest = self.snapshots.most_recent(year)
        return SyncStatus(
            year=year,
            has_target_data=bool(entries),
            target_account_count=len(entries),
            latest_snapshot_date=latest.update_date if latest else None,
            latest_snapshot_count=len(latest.accounts) if latest else 0,
            last_sync_time=latest.timestamp if latest else None,
        )
