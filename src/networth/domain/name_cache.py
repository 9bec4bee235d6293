"""Cache of accounts ledger renames."""

import logging
from typing import Optional

from networth.database.base import DocumentStore
from networth.domain.datasets import NAME_MAPPING_KEY
from networth.domain.errors import PersistenceError, store_write_failed

logger = logging.getLogger(__name__)


class AccountNameCache:
    """Maps generated account names to the names users renamed them to.

    The mapping is loaded from the store on first use and kept in memory
    until invalidate() or reload() is called. Pass the same instance to every
    service that needs it.
    """

    def __init__(self, store: DocumentStore):
        """Initialize the cache.

        Args:
            store: Document store holding the name mapping
        """
        self.store = store
        self._mapping: Optional[dict[str, str]] = None

    def _load(self) -> dict[str, str]:
        if self._mapping is None:
            stored = self.store.read(NAME_MAPPING_KEY, {})
            if not isinstance(stored, dict):
                logger.warning("Ignoring malformed name mapping document")
                stored = {}
            self._mapping = {
                str(old).strip(): str(new).strip()
                for old, new in stored.items()
                if str(old).strip() and str(new).strip()
            }
        return self._mapping

    def current_name(self, name: str) -> str:
        """Return the name an account is known by now.

        Chains of renames are followed; names without a mapping are returned
        trimmed.
        """
        mapping = self._load()
        current = name.strip()
        seen = {current}
        while current in mapping and mapping[current] not in seen:
            current = mapping[current]
            seen.add(current)
        return current

    def as_mapping(self) -> dict[str, str]:
        """Return every original name resolved to its current name."""
        mapping = self._load()
        return {old: self.current_name(old) for old in mapping}

    def record_rename(self, old_name: str, new_name: str) -> None:
        """Persist that old_name is now called new_name.

        Raises:
            PersistenceError: If the store rejects the write
        """
        old_name = old_name.strip()
        new_name = new_name.strip()
        if not old_name or not new_name or old_name == new_name:
            return
        mapping = dict(self._load())
        mapping[old_name] = new_name
        # Renaming back must not leave a loop behind
        mapping.pop(new_name, None)
        if not self.store.write(NAME_MAPPING_KEY, mapping):
            raise PersistenceError(store_write_failed([NAME_MAPPING_KEY]))
        self._mapping = mapping

    def invalidate(self) -> None:
        """Forget the in-memory mapping; the next lookup reads the store."""
        self._mapping = None

    def reload(self) -> None:
        """Re-read the mapping from the store now."""
        self.invalidate()
        self._load()
