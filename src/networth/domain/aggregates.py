"""Per-period category aggregates of liquid asset amounts."""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import AGGREGATES_KEY
from networth.domain.entities import BucketTotals

logger = logging.getLogger(__name__)


class AggregateLedger:
    """Reads and stages the ``annual_data`` document.

    Each period entry holds ``totals`` and per-owner ``owners`` bucket sums.
    Deltas are added onto what is stored, so accounts left out of a run keep
    their previously recorded contribution. Keys other than the ones written
    here are kept as they are.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load_raw(self) -> dict[str, Any]:
        raw = self.store.read(AGGREGATES_KEY, {})
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed annual data document")
            return {}
        return raw

    def _period(self, year: int) -> dict[str, Any]:
        entry = self._load_raw().get(str(year))
        return entry if isinstance(entry, dict) else {}

    def get_totals(self, year: int) -> BucketTotals:
        """Return the stored bucket totals of a year."""
        return mappers.totals_from_document(self._period(year).get("totals"))

    def get_owner_totals(self, year: int) -> dict[str, BucketTotals]:
        """Return the stored bucket totals of every owner in a year."""
        owners = self._period(year).get("owners")
        if not isinstance(owners, dict):
            return {}
        return {owner: mappers.totals_from_document(totals) for owner, totals in owners.items()}

    def stage_deltas(
        self,
        year: int,
        deltas: BucketTotals,
        owner_deltas: Mapping[str, BucketTotals],
        updated_at: datetime,
    ) -> dict[str, Any]:
        """Return the annual data document with deltas applied to a year."""
        document = self._load_raw()
        entry = dict(self._period(year))
        entry["totals"] = mappers.totals_to_document(self.get_totals(year) + deltas)

        owners = entry.get("owners")
        owners = dict(owners) if isinstance(owners, dict) else {}
        for owner, delta in owner_deltas.items():
            current = mappers.totals_from_document(owners.get(owner))
            owners[owner] = mappers.totals_to_document(current + delta)
        entry["owners"] = owners
        entry["updated_at"] = updated_at.isoformat()

        document[str(year)] = entry
        return document
