"""Abstract document store interface."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping


class DocumentStore(ABC):
    """Abstract keyed JSON document store for networth.

    Every logical dataset (source accounts, target accounts, groups,
    snapshots, settings) is one JSON document. Callers read the whole
    document, modify it and write the whole document back.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    @abstractmethod
    def read(self, key: str, default: Any = None) -> Any:
        """Return the decoded document stored under key, or default."""
        pass

    @abstractmethod
    def write(self, key: str, value: Any) -> bool:
        """Replace the document stored under key. Returns success."""
        pass

    @abstractmethod
    def write_many(self, documents: Mapping[str, Any]) -> bool:
        """Replace several documents at once.

        Either every document is written or none is. Returns success.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the document stored under key.

        Returns True if it existed and was removed.
        """
        pass

    @abstractmethod
    def delete_many(self, keys: Iterable[str]) -> bool:
        """Remove several documents at once; missing keys are ignored.

        Either every document is removed or none is. Returns success.
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List the keys of all stored documents."""
        pass
