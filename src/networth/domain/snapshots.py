"""Snapshot record store domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import SNAPSHOTS_KEY
from networth.domain.entities import LastUpdateInfo, RunSummary, Snapshot, UpdateKind
from networth.domain.errors import (
    NotFoundError,
    PersistenceError,
    snapshot_not_found,
    store_write_failed,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = 500


class SnapshotService:
    """Bounded, newest-first log of reconciliation runs.

    Records are never modified once appended. When more than ``retention``
    records exist the oldest are discarded.
    """

    def __init__(self, store: DocumentStore, retention: int = DEFAULT_RETENTION):
        """Initialize snapshot service.

        Args:
            store: Document store instance
            retention: Maximum number of records kept
        """
        self.store = store
        self.retention = max(int(retention), 1)

    def _load_raw(self) -> list[Any]:
        raw = self.store.read(SNAPSHOTS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed snapshot records document")
            return []
        return raw

    def list_snapshots(self, year: Optional[int] = None) -> list[Snapshot]:
        """List snapshots, newest first.

        Args:
            year: Optional period filter on the snapshot update date
        """
        snapshots = []
        for document in self._load_raw():
            snapshot = mappers.snapshot_from_document(document) if isinstance(document, dict) else None
            if snapshot is None:
                logger.debug("Skipping unreadable snapshot record")
                continue
            if year is None or snapshot.year == year:
                snapshots.append(snapshot)
        return sorted(snapshots, key=lambda s: (s.update_date, s.timestamp), reverse=True)

    def most_recent(self, year: Optional[int] = None) -> Optional[Snapshot]:
        """Return the newest snapshot, optionally within a year."""
        snapshots = self.list_snapshots(year)
        return snapshots[0] if snapshots else None

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        for snapshot in self.list_snapshots():
            if snapshot.id == snapshot_id:
                return snapshot
        return None

    def stage_append(self, snapshot: Snapshot) -> list[Any]:
        """Return the records document with snapshot added and retention applied."""
        records = [mappers.snapshot_to_document(snapshot), *self._load_raw()]
        if len(records) > self.retention:
            logger.info(f"Discarding {len(records) - self.retention} snapshot(s) beyond retention")
            del records[self.retention:]
        return records

    def append(self, snapshot: Snapshot) -> Snapshot:
        """Append a snapshot.

        Raises:
            PersistenceError: If the store rejects the write
        """
        if not self.store.write(SNAPSHOTS_KEY, self.stage_append(snapshot)):
            raise PersistenceError(store_write_failed([SNAPSHOTS_KEY]))
        return snapshot

    def delete_by_id(self, snapshot_id: str) -> None:
        """Delete a snapshot.

        Raises:
            NotFoundError: If no snapshot has this ID
        """
        records = self._load_raw()
        remaining = [
            record
            for record in records
            if not (isinstance(record, dict) and record.get("id") == snapshot_id)
        ]
        if len(remaining) == len(records):
            raise NotFoundError(snapshot_not_found(snapshot_id))
        if not self.store.write(SNAPSHOTS_KEY, remaining):
            raise PersistenceError(store_write_failed([SNAPSHOTS_KEY]))

    def previous_amounts(self, year: int) -> dict[str, Decimal]:
        """Return the last recorded amount of every source account in a year.

        Snapshots are searched in reverse order of recording, which is the
        order their deltas reached the aggregates. The first recorded amount
        found for a source id wins, so accounts left blank in later runs keep
        the value they were last given.
        """
        amounts: dict[str, Decimal] = {}
        recorded = sorted(self.list_snapshots(year), key=lambda s: s.timestamp, reverse=True)
        for snapshot in recorded:
            for account in snapshot.accounts:
                if account.source_id and account.amount is not None:
                    amounts.setdefault(account.source_id, account.amount)
        return amounts

    def last_update_info(self) -> LastUpdateInfo:
        """Summarize the most recent balance-only, detailed and overall runs."""
        snapshots = sorted(self.list_snapshots(), key=lambda s: s.timestamp, reverse=True)
        if not snapshots:
            return LastUpdateInfo(has_data=False)

        def summary(kinds: Optional[tuple[str, ...]]) -> Optional[RunSummary]:
            for snapshot in snapshots:
                if kinds is None or snapshot.update_kind in kinds:
                    return RunSummary(
                        update_date=snapshot.update_date,
                        timestamp=snapshot.timestamp,
                        accounts_count=len(snapshot.accounts),
                        update_kind=snapshot.update_kind,
                    )
            return None

        return LastUpdateInfo(
            has_data=True,
            last_balance_update=summary((UpdateKind.BALANCE_ONLY.value,)),
            last_detailed_update=summary(
                (UpdateKind.DETAILED.value, UpdateKind.DETAILED_PRESERVE_BALANCE.value)
            ),
            last_any_update=summary(None),
        )
