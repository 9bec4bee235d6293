"""Domain model entities for networth.

These are pure data classes representing business concepts, independent of
how the document store lays them out. Monetary fields use ``None`` as the
single "unset" value: a blank amount means "keep what is already recorded",
never zero.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


JOINT_OWNER = "Joint"

DETAIL_FIELDS = ("contributions", "employer_match", "gains", "fees", "withdrawals")


class TaxType(str, Enum):
    """Tax treatment of a liquid asset account."""

    TAX_FREE = "Tax-Free"
    TAX_DEFERRED = "Tax-Deferred"
    AFTER_TAX = "After-Tax"
    CASH = "Cash"


class AccountType(str, Enum):
    """Kind of liquid asset account."""

    IRA = "IRA"
    BROKERAGE = "Brokerage"
    K401 = "401k"
    ESPP = "ESPP"
    HSA = "HSA"
    CASH = "Cash"


class UpdateMode(str, Enum):
    """How a reconciliation batch is routed onto the accounts ledger."""

    INDIVIDUAL = "individual"
    GROUP = "group"


class UpdateKind(str, Enum):
    """Which target fields a reconciliation run is allowed to write."""

    BALANCE_ONLY = "balance-only"
    DETAILED = "detailed"
    DETAILED_PRESERVE_BALANCE = "detailed-preserve-balance"

    @property
    def writes_balance(self) -> bool:
        return self is not UpdateKind.DETAILED_PRESERVE_BALANCE

    @property
    def writes_details(self) -> bool:
        return self is not UpdateKind.BALANCE_ONLY


class LedgerEvent(str, Enum):
    """Notifications published after a successful write."""

    GROUPS_CHANGED = "account-groups-changed"
    SOURCE_CHANGED = "liquid-assets-changed"
    TARGET_CHANGED = "account-data-changed"
    FULL_RESET = "full-reset"


@dataclass(frozen=True)
class SourceAccount:
    """Liquid asset account definition plus the values entered this session."""

    id: str
    owner: str
    tax_type: str
    account_type: str
    institution: str = ""
    description: str = ""
    amount: Optional[Decimal] = None
    contributions: Optional[Decimal] = None
    employer_match: Optional[Decimal] = None
    gains: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    withdrawals: Optional[Decimal] = None

    def details(self) -> dict[str, Optional[Decimal]]:
        """Return the detail fields keyed by name."""
        return {name: getattr(self, name) for name in DETAIL_FIELDS}

    def identity(self) -> "SourceAccount":
        """Return a copy with every value field cleared."""
        return replace(
            self,
            amount=None,
            **{name: None for name in DETAIL_FIELDS},
        )


@dataclass(frozen=True)
class Provenance:
    """Who last wrote a target account and how."""

    updated_at: Optional[datetime] = None
    update_kind: Optional[str] = None
    source: Optional[str] = None
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    last_detailed_update: Optional[datetime] = None


@dataclass(frozen=True)
class TargetAccount:
    """Entry of the independently edited accounts ledger.

    ``extra`` holds stored keys this package does not model, so they survive
    a read-modify-write cycle untouched.
    """

    entry_id: str
    year: int
    owner: str
    account_name: str
    account_type: str = ""
    institution: str = ""
    balance: Optional[Decimal] = None
    contributions: Optional[Decimal] = None
    employer_match: Optional[Decimal] = None
    gains: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    withdrawals: Optional[Decimal] = None
    provenance: Provenance = field(default_factory=Provenance)
    extra: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class AccountGroup:
    """User-defined many-to-one mapping of source accounts onto one target."""

    id: str
    name: str
    owner_override: str = JOINT_OWNER
    member_ids: tuple[str, ...] = ()
    target_account_name: str = ""
    total_balance: Decimal = Decimal("0")
    last_sync: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BucketTotals:
    """Amounts aggregated per category bucket."""

    tax_free: Decimal = Decimal("0")
    tax_deferred: Decimal = Decimal("0")
    brokerage: Decimal = Decimal("0")
    espp: Decimal = Decimal("0")
    hsa: Decimal = Decimal("0")
    cash: Decimal = Decimal("0")
    unclassified: Decimal = Decimal("0")

    def plus(self, bucket: str, amount: Decimal) -> "BucketTotals":
        """Return new totals with ``amount`` added to ``bucket``."""
        return replace(self, **{bucket: getattr(self, bucket) + amount})

    def __add__(self, other: "BucketTotals") -> "BucketTotals":
        return BucketTotals(
            **{name: getattr(self, name) + getattr(other, name) for name in BUCKETS}
        )

    @property
    def total(self) -> Decimal:
        return sum((getattr(self, name) for name in BUCKETS), Decimal("0"))

    def as_dict(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in BUCKETS}

    def is_zero(self) -> bool:
        return all(value == 0 for value in self.as_dict().values())


BUCKETS = (
    "tax_free",
    "tax_deferred",
    "brokerage",
    "espp",
    "hsa",
    "cash",
    "unclassified",
)


@dataclass(frozen=True)
class SnapshotAccount:
    """Source account as captured by a reconciliation run."""

    source_id: str
    account_name: str
    owner: str
    tax_type: str
    account_type: str
    institution: str = ""
    description: str = ""
    amount: Optional[Decimal] = None
    contributions: Optional[Decimal] = None
    employer_match: Optional[Decimal] = None
    gains: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    withdrawals: Optional[Decimal] = None


@dataclass(frozen=True)
class Snapshot:
    """Immutable record of one reconciliation run."""

    id: str
    update_date: date
    timestamp: datetime
    update_kind: str
    accounts: tuple[SnapshotAccount, ...]
    totals: BucketTotals

    @property
    def year(self) -> int:
        return self.update_date.year

    @property
    def total_amount(self) -> Decimal:
        return self.totals.total


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a reconciliation run."""

    changed: bool
    processed_count: int
    groups_processed: int
    method: str
    year: int
    created_count: int = 0
    updated_count: int = 0
    snapshot_id: Optional[str] = None
    bucket_deltas: BucketTotals = field(default_factory=BucketTotals)
    group_totals: BucketTotals = field(default_factory=BucketTotals)


@dataclass(frozen=True)
class SyncSettings:
    """Persisted reconciliation settings."""

    snapshot_retention: int = 500
    default_mode: str = UpdateMode.INDIVIDUAL.value
    default_update_kind: str = UpdateKind.BALANCE_ONLY.value


@dataclass(frozen=True)
class RunSummary:
    """Short description of a recorded run for "last updated" displays."""

    update_date: date
    timestamp: datetime
    accounts_count: int
    update_kind: str


@dataclass(frozen=True)
class LastUpdateInfo:
    """Most recent balance-only, detailed and overall runs."""

    has_data: bool
    last_balance_update: Optional[RunSummary] = None
    last_detailed_update: Optional[RunSummary] = None
    last_any_update: Optional[RunSummary] = None


@dataclass(frozen=True)
class SyncStatus:
    """Overview of how current the accounts ledger is for a period."""

    year: int
    has_target_data: bool
    target_account_count: int
    latest_snapshot_date: Optional[date]
    latest_snapshot_count: int
    last_sync_time: Optional[datetime]
