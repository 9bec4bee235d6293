"""Persisted reconciliation settings."""

import logging
from dataclasses import replace
from typing import Optional

from networth.database import mappers
from networth.database.base import DocumentStore
from networth.domain.datasets import SETTINGS_KEY
from networth.domain.entities import SyncSettings, UpdateKind, UpdateMode
from networth.domain.errors import PersistenceError, ValidationError, store_write_failed

logger = logging.getLogger(__name__)


class SettingsService:
    """Reads and updates the sync settings document."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get_settings(self) -> SyncSettings:
        return mappers.settings_from_document(self.store.read(SETTINGS_KEY))

    def update_settings(
        self,
        snapshot_retention: Optional[int] = None,
        default_mode: Optional[str] = None,
        default_update_kind: Optional[str] = None,
    ) -> SyncSettings:
        """Merge the given values into the stored settings.

        Raises:
            ValidationError: If a value is out of range or not a known option
            PersistenceError: If the store rejects the write
        """
        changes = {}
        if snapshot_retention is not None:
            if snapshot_retention < 1:
                raise ValidationError("Snapshot retention must be at least 1")
            changes["snapshot_retention"] = snapshot_retention
        if default_mode is not None:
            try:
                changes["default_mode"] = UpdateMode(default_mode).value
            except ValueError:
                raise ValidationError(f"Unknown update mode: {default_mode}") from None
        if default_update_kind is not None:
            try:
                changes["default_update_kind"] = UpdateKind(default_update_kind).value
            except ValueError:
                raise ValidationError(f"Unknown update kind: {default_update_kind}") from None

        settings = replace(self.get_settings(), **changes)
        if not self.store.write(SETTINGS_KEY, mappers.settings_to_document(settings)):
            raise PersistenceError(store_write_failed([SETTINGS_KEY]))
        logger.info(f"Updated sync settings: {', '.join(sorted(changes)) or 'no changes'}")
        return settings
