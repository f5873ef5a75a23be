"""Elasticsearch implementation of :class:`SearchBackend`."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from elasticsearch import ApiError, NotFoundError

from ..schemas import GetReceipt, PingInfo, UpdateReceipt
from ._helpers import _create_client, _is_already_exists, _response_status
from .base import SearchBackend


class IndexAlreadyExists(Exception):
    """Raised by ``create_index`` when another writer created the index first."""


class ElasticBackend(SearchBackend):
    def __init__(
        self,
        hosts: List[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_certs: bool = True,
        timeout: float = 60.0,
    ) -> None:
        if not hosts:
            raise ValueError("At least one Elasticsearch host is required")
        self.hosts = list(hosts)
        self.client = _create_client(hosts, username, password, verify_certs, timeout)

    def close(self) -> None:
        self.client.close()

    def ping(self) -> PingInfo:
        response = self.client.info()
        version = str(response.get("version", {}).get("number", ""))
        return PingInfo(version=version, status_code=_response_status(response))

    def index_exists(self, name: str) -> bool:
        return bool(self.client.indices.exists(index=name))

    def create_index(
        self, name: str, properties: Optional[Dict[str, Any]] = None
    ) -> bool:
        kwargs: Dict[str, Any] = {"index": name}
        if properties:
            kwargs["mappings"] = {"properties": properties}
        try:
            response = self.client.indices.create(**kwargs)
        except ApiError as exc:
            if _is_already_exists(exc):
                raise IndexAlreadyExists(name) from exc
            raise
        return bool(response.get("acknowledged", False))

    def search(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = self.client.search(index=index, **body)
        return dict(getattr(response, "body", response))

    def put(
        self,
        index: str,
        type_label: str,
        doc_id: str,
        body: Dict[str, Any],
        op_type: str = "create",
    ) -> Dict[str, Any]:
        document = dict(body)
        document.setdefault("doc_type", type_label)
        response = self.client.index(
            index=index,
            id=doc_id,
            document=document,
            op_type=op_type,
        )
        return {
            "id": str(response.get("_id", doc_id)),
            "index": str(response.get("_index", index)),
            "type_label": type_label,
        }

    def get(self, index: str, type_label: str, doc_id: str) -> GetReceipt:
        try:
            response = self.client.get(index=index, id=doc_id)
        except NotFoundError:
            return GetReceipt(found=False, id=doc_id, index=index, type_label=type_label)
        source = response.get("_source") or {}
        stored_label = source.get("doc_type")
        # Documents written under another type label are invisible to this one.
        if stored_label and type_label and stored_label != type_label:
            return GetReceipt(found=False, id=doc_id, index=index, type_label=type_label)
        return GetReceipt(
            found=bool(response.get("found", True)),
            id=str(response.get("_id", doc_id)),
            index=str(response.get("_index", index)),
            type_label=stored_label or type_label,
            version=response.get("_version"),
            source=source,
        )

    def flush(self, index: str) -> None:
        self.client.indices.flush(index=index)

    def update(
        self,
        index: str,
        doc_id: str,
        script: Dict[str, Any],
        upsert: Optional[Dict[str, Any]] = None,
    ) -> UpdateReceipt:
        kwargs: Dict[str, Any] = {"index": index, "id": doc_id, "script": script}
        if upsert is not None:
            kwargs["upsert"] = upsert
        response = self.client.update(**kwargs)
        return UpdateReceipt(
            id=str(response.get("_id", doc_id)),
            index=str(response.get("_index", index)),
            new_version=int(response.get("_version", 0)),
            result=str(response.get("result", "")),
        )
