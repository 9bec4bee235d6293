"""Mapper functions to convert between domain models and stored JSON documents.

This is the serialization boundary: JSON ``null``, empty strings and missing
keys all collapse to ``None`` on the way in, and ``None`` is written back as
``null``. Decimals are stored as strings so no precision is lost.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from networth.domain import entities as domain
from networth.utils.amount_parser import amount_or_zero, coerce_amount
from networth.utils.date_parser import parse_stored_date, parse_timestamp


TARGET_FIELDS = (
    "entry_id",
    "year",
    "owner",
    "account_name",
    "account_type",
    "institution",
    "balance",
    *domain.DETAIL_FIELDS,
    "provenance",
)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def decimal_to_json(value: Optional[Decimal]) -> Optional[str]:
    """Serialize an optional amount."""
    return None if value is None else str(value)


def datetime_to_json(value: Optional[datetime | date]) -> Optional[str]:
    """Serialize an optional date or datetime."""
    return None if value is None else value.isoformat()


def source_account_from_document(document: Mapping[str, Any]) -> domain.SourceAccount:
    """Convert a stored or submitted source account to a domain SourceAccount."""
    return domain.SourceAccount(
        id=str(document.get("id") or ""),
        owner=_text(document.get("owner")),
        tax_type=_text(document.get("tax_type")),
        account_type=_text(document.get("account_type")),
        institution=_text(document.get("institution")),
        description=_text(document.get("description")),
        amount=coerce_amount(document.get("amount")),
        **{name: coerce_amount(document.get(name)) for name in domain.DETAIL_FIELDS},
    )


def source_account_to_document(
    account: domain.SourceAccount, include_values: bool = False
) -> dict[str, Any]:
    """Convert a SourceAccount to its JSON document.

    Only identity fields persist across sessions unless include_values is set.
    """
    document = {
        "id": account.id,
        "owner": account.owner,
        "tax_type": account.tax_type,
        "account_type": account.account_type,
        "institution": account.institution,
        "description": account.description,
    }
    if include_values:
        document["amount"] = decimal_to_json(account.amount)
        for name, value in account.details().items():
            document[name] = decimal_to_json(value)
    return document


def provenance_from_document(document: Any) -> domain.Provenance:
    """Convert the provenance block of a target document."""
    if not isinstance(document, Mapping):
        return domain.Provenance()
    return domain.Provenance(
        updated_at=parse_timestamp(document.get("updated_at")),
        update_kind=document.get("update_kind") or None,
        source=document.get("source") or None,
        group_id=document.get("group_id") or None,
        group_name=document.get("group_name") or None,
        last_detailed_update=parse_timestamp(document.get("last_detailed_update")),
    )


def provenance_to_document(provenance: domain.Provenance) -> dict[str, Any]:
    return {
        "updated_at": datetime_to_json(provenance.updated_at),
        "update_kind": provenance.update_kind,
        "source": provenance.source,
        "group_id": provenance.group_id,
        "group_name": provenance.group_name,
        "last_detailed_update": datetime_to_json(provenance.last_detailed_update),
    }


def target_account_from_document(
    entry_id: str, document: Mapping[str, Any]
) -> domain.TargetAccount:
    """Convert a stored accounts ledger entry to a domain TargetAccount."""
    try:
        year = int(document.get("year"))
    except (TypeError, ValueError):
        year = 0
    return domain.TargetAccount(
        entry_id=entry_id,
        year=year,
        owner=_text(document.get("owner")),
        account_name=_text(document.get("account_name")),
        account_type=_text(document.get("account_type")),
        institution=_text(document.get("institution")),
        balance=coerce_amount(document.get("balance")),
        **{name: coerce_amount(document.get(name)) for name in domain.DETAIL_FIELDS},
        provenance=provenance_from_document(document.get("provenance")),
        extra={key: value for key, value in document.items() if key not in TARGET_FIELDS},
    )


def target_account_to_document(account: domain.TargetAccount) -> dict[str, Any]:
    """Convert a TargetAccount back to its document, keeping unknown keys."""
    document = dict(account.extra)
    document.update(
        {
            "entry_id": account.entry_id,
            "year": account.year,
            "owner": account.owner,
            "account_name": account.account_name,
            "account_type": account.account_type,
            "institution": account.institution,
            "balance": decimal_to_json(account.balance),
            **{name: decimal_to_json(getattr(account, name)) for name in domain.DETAIL_FIELDS},
            "provenance": provenance_to_document(account.provenance),
        }
    )
    return document


def group_from_document(group_id: str, document: Mapping[str, Any]) -> domain.AccountGroup:
    """Convert a stored account group to a domain AccountGroup."""
    members = document.get("member_ids")
    if not isinstance(members, list):
        members = []
    return domain.AccountGroup(
        id=group_id,
        name=_text(document.get("name")),
        owner_override=_text(document.get("owner_override")) or domain.JOINT_OWNER,
        member_ids=tuple(dict.fromkeys(str(member) for member in members if member)),
        target_account_name=_text(document.get("target_account_name")),
        total_balance=amount_or_zero(document.get("total_balance")),
        last_sync=parse_timestamp(document.get("last_sync")),
        created_at=parse_timestamp(document.get("created_at")),
        updated_at=parse_timestamp(document.get("updated_at")),
    )


def group_to_document(group: domain.AccountGroup) -> dict[str, Any]:
    return {
        "id": group.id,
        "name": group.name,
        "owner_override": group.owner_override,
        "member_ids": list(group.member_ids),
        "target_account_name": group.target_account_name,
        "total_balance": str(group.total_balance),
        "last_sync": datetime_to_json(group.last_sync),
        "created_at": datetime_to_json(group.created_at),
        "updated_at": datetime_to_json(group.updated_at),
    }


def totals_from_document(document: Any) -> domain.BucketTotals:
    """Convert stored bucket totals; unknown buckets are ignored."""
    if not isinstance(document, Mapping):
        return domain.BucketTotals()
    return domain.BucketTotals(
        **{name: amount_or_zero(document.get(name)) for name in domain.BUCKETS}
    )


def totals_to_document(totals: domain.BucketTotals) -> dict[str, str]:
    return {name: str(value) for name, value in totals.as_dict().items()}


def snapshot_account_from_document(document: Mapping[str, Any]) -> domain.SnapshotAccount:
    return domain.SnapshotAccount(
        source_id=str(document.get("source_id") or ""),
        account_name=_text(document.get("account_name")),
        owner=_text(document.get("owner")),
        tax_type=_text(document.get("tax_type")),
        account_type=_text(document.get("account_type")),
        institution=_text(document.get("institution")),
        description=_text(document.get("description")),
        amount=coerce_amount(document.get("amount")),
        **{name: coerce_amount(document.get(name)) for name in domain.DETAIL_FIELDS},
    )


def snapshot_account_to_document(account: domain.SnapshotAccount) -> dict[str, Any]:
    return {
        "source_id": account.source_id,
        "account_name": account.account_name,
        "owner": account.owner,
        "tax_type": account.tax_type,
        "account_type": account.account_type,
        "institution": account.institution,
        "description": account.description,
        "amount": decimal_to_json(account.amount),
        **{name: decimal_to_json(getattr(account, name)) for name in domain.DETAIL_FIELDS},
    }


def snapshot_from_document(document: Mapping[str, Any]) -> Optional[domain.Snapshot]:
    """Convert a stored record to a Snapshot, or None if it is unusable."""
    update_date = parse_stored_date(document.get("update_date"))
    timestamp = parse_timestamp(document.get("timestamp"))
    if update_date is None or timestamp is None:
        return None
    accounts = document.get("accounts")
    if not isinstance(accounts, list):
        accounts = []
    return domain.Snapshot(
        id=str(document.get("id") or ""),
        update_date=update_date,
        timestamp=timestamp,
        update_kind=document.get("update_kind") or domain.UpdateKind.BALANCE_ONLY.value,
        accounts=tuple(
            snapshot_account_from_document(account)
            for account in accounts
            if isinstance(account, Mapping)
        ),
        totals=totals_from_document(document.get("totals")),
    )


def snapshot_to_document(snapshot: domain.Snapshot) -> dict[str, Any]:
    return {
        "id": snapshot.id,
        "update_date": snapshot.update_date.isoformat(),
        "timestamp": snapshot.timestamp.isoformat(),
        "year": snapshot.year,
        "update_kind": snapshot.update_kind,
        "accounts_count": len(snapshot.accounts),
        "accounts": [snapshot_account_to_document(account) for account in snapshot.accounts],
        "totals": totals_to_document(snapshot.totals),
        "total_amount": str(snapshot.total_amount),
    }


def settings_from_document(document: Any) -> domain.SyncSettings:
    """Convert stored sync settings, falling back to defaults per field."""
    defaults = domain.SyncSettings()
    if not isinstance(document, Mapping):
        return defaults
    try:
        retention = int(document.get("snapshot_retention", defaults.snapshot_retention))
    except (TypeError, ValueError):
        retention = defaults.snapshot_retention
    return domain.SyncSettings(
        snapshot_retention=max(retention, 1),
        default_mode=document.get("default_mode") or defaults.default_mode,
        default_update_kind=document.get("default_update_kind") or defaults.default_update_kind,
    )


def settings_to_document(settings: domain.SyncSettings) -> dict[str, Any]:
    return {
        "snapshot_retention": settings.snapshot_retention,
        "default_mode": settings.default_mode,
        "default_update_kind": settings.default_update_kind,
    }
