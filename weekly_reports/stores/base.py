from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union


@dataclass(frozen=True)
class ReportDescriptor:
    key: str
    size_bytes: int
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    etag: Optional[str] = None


class BaseObjectStore(ABC):
    @abstractmethod
    def iter_keys(self, prefix: str) -> Iterator[str]:
        """Yield every object key under ``prefix``, fetching pages on demand.

        Raises StoreUnavailable on transport or auth errors.
        """

    def list_keys(self, prefix: str) -> list[str]:
        return list(self.iter_keys(prefix))

    @abstractmethod
    def get_object(self, key: str, local_path: Union[str, Path]) -> Path:
        """Download ``key`` to ``local_path``, creating parent directories.

        Raises ObjectNotFound if the key no longer exists.
        """

    @abstractmethod
    def head_object(self, key: str) -> ReportDescriptor:
        """Fetch object metadata without transferring the body."""

    @abstractmethod
    def object_exists(self, key: str) -> bool:
        """Must not raise for a missing key; StoreUnavailable on transport failure."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
