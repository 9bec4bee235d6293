"""Full reset of every stored dataset."""

import logging
from typing import Optional

from networth.database.base import DocumentStore
from networth.domain.datasets import ALL_KEYS
from networth.domain.entities import LedgerEvent
from networth.domain.errors import PersistenceError, store_write_failed
from networth.domain.name_cache import AccountNameCache
from networth.domain.notifications import NotificationChannel

logger = logging.getLogger(__name__)


def reset_all_data(
    store: DocumentStore,
    channel: Optional[NotificationChannel] = None,
    name_cache: Optional[AccountNameCache] = None,
) -> list[str]:
    """Delete every dataset and announce the reset.

    Args:
        store: Document store instance
        channel: Optional channel that receives the full reset event
        name_cache: Optional cache to invalidate

    Returns:
        Keys of the datasets that existed and were removed

    Raises:
        PersistenceError: If the store rejects the delete; nothing is removed
    """
    stored = set(store.keys())
    removed = [key for key in ALL_KEYS if key in stored]
    if removed and not store.delete_many(removed):
        raise PersistenceError(store_write_failed(removed))
    if name_cache is not None:
        name_cache.invalidate()
    logger.info(f"Reset removed {len(removed)} dataset(s)")
    if channel is not None:
        channel.publish(LedgerEvent.FULL_RESET, {"keys": removed})
    return removed
