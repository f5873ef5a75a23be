from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..schemas import GetReceipt, PingInfo, UpdateReceipt


class SearchBackend(ABC):
    """Capability object for every call the rollup makes against the backend.

    Calls are issued sequentially by a single thread.  Use the backend as a
    context manager so the connection is released on every exit path.
    """

    def __enter__(self) -> "SearchBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @abstractmethod
    def ping(self) -> PingInfo:
        raise NotImplementedError

    @abstractmethod
    def index_exists(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def create_index(
        self, name: str, properties: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Create ``name`` and return whether the backend acknowledged it."""
        raise NotImplementedError

    @abstractmethod
    def search(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def put(
        self,
        index: str,
        type_label: str,
        doc_id: str,
        body: Dict[str, Any],
        op_type: str = "create",
    ) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def get(self, index: str, type_label: str, doc_id: str) -> GetReceipt:
        raise NotImplementedError

    @abstractmethod
    def flush(self, index: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        index: str,
        doc_id: str,
        script: Dict[str, Any],
        upsert: Optional[Dict[str, Any]] = None,
    ) -> UpdateReceipt:
        raise NotImplementedError

    def close(self) -> None:
        return None
