"""Domain layer for networth application."""

from networth.domain.source_accounts import SourceAccountService
from networth.domain.target_accounts import TargetAccountService
from networth.domain.groups import GroupService
from networth.domain.snapshots import SnapshotService
from networth.domain.settings import SettingsService
from networth.domain.reconciliation import ReconciliationService
from networth.domain.name_cache import AccountNameCache
from networth.domain.notifications import NotificationChannel
from networth.domain.reset import reset_all_data

__all__ = [
    "SourceAccountService",
    "TargetAccountService",
    "GroupService",
    "SnapshotService",
    "SettingsService",
    "ReconciliationService",
    "AccountNameCache",
    "NotificationChannel",
    "reset_all_data",
]
