"""Shared pytest fixtures for networth tests."""

import tempfile
import os
import pytest

from networth.database.factories import create_sqlite_store
from networth.domain.aggregates import AggregateLedger
from networth.domain.groups import GroupService
from networth.domain.name_cache import AccountNameCache
from networth.domain.notifications import NotificationChannel
from networth.domain.reconciliation import ReconciliationService
from networth.domain.settings import SettingsService
from networth.domain.snapshots import SnapshotService
from networth.domain.source_accounts import SourceAccountService
from networth.domain.target_accounts import TargetAccountService


@pytest.fixture
def temp_store():
    """Create a temporary document store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    # Cleanup
    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def channel():
    """Create a notification channel."""
    return NotificationChannel()


@pytest.fixture
def name_cache(temp_store):
    return AccountNameCache(temp_store)


@pytest.fixture
def group_service(temp_store, channel):
    """Create a GroupService with a temporary store."""
    return GroupService(temp_store, channel)


@pytest.fixture
def source_service(temp_store, channel, group_service):
    """Create a SourceAccountService with a temporary store."""
    return SourceAccountService(temp_store, channel, group_service)


@pytest.fixture
def target_service(temp_store, name_cache, channel, group_service):
    """Create a TargetAccountService with a temporary store."""
    return TargetAccountService(temp_store, name_cache, channel, group_service)


@pytest.fixture
def snapshot_service(temp_store):
    """Create a SnapshotService with a temporary store."""
    return SnapshotService(temp_store)


@pytest.fixture
def settings_service(temp_store):
    return SettingsService(temp_store)


@pytest.fixture
def aggregates(temp_store):
    return AggregateLedger(temp_store)


@pytest.fixture
def engine(temp_store, channel, name_cache, snapshot_service, group_service, target_service):
    """Create a ReconciliationService sharing the other fixtures' collaborators."""
    return ReconciliationService(
        temp_store,
        channel=channel,
        name_cache=name_cache,
        snapshots=snapshot_service,
        groups=group_service,
        targets=target_service,
    )


@pytest.fixture
def alice_ira(source_service):
    """Create Alice's Vanguard Roth IRA."""
    return source_service.create_account(
        owner="Alice", tax_type="Tax-Free", account_type="IRA", institution="Vanguard"
    )


@pytest.fixture
def bob_401k(source_service):
    """Create Bob's Fidelity traditional 401k."""
    return source_service.create_account(
        owner="Bob", tax_type="Tax-Deferred", account_type="401k", institution="Fidelity"
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
