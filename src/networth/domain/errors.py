"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as duplicate account names."""


class PersistenceError(DomainError):
    """The document store rejected a write; nothing was committed."""


def source_account_not_found(account_id: str) -> str:
    """Return message for missing source account."""
    return f"Source account {account_id} not found"


def target_account_not_found(entry_id: str) -> str:
    """Return message for missing target account entry."""
    return f"Account entry {entry_id} not found"


def group_not_found(group: str) -> str:
    """Return message for missing account group."""
    return f"Account group '{group}' not found"


def snapshot_not_found(snapshot_id: str) -> str:
    """Return message for missing snapshot record."""
    return f"Snapshot {snapshot_id} not found"


def duplicate_source_account(name: str) -> str:
    """Return message for a source account whose generated name already exists."""
    return f"Account '{name}' already exists"


def store_write_failed(keys) -> str:
    """Return message when the document store refuses a write."""
    return f"Failed to persist {', '.join(sorted(keys))}; no changes were saved"
