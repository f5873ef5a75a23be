from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from elasticsearch import ConflictError, NotFoundError

from esrollup.schemas import GetReceipt, PingInfo, UpdateReceipt
from esrollup.storage.base import SearchBackend


def api_error(cls, status: int, error: str):
    return cls(error, SimpleNamespace(status=status), {"error": error})


def make_response(buckets: List[Dict[str, Any]], outer_name: str = "timeline"):
    return {"hits": {"hits": []}, "aggregations": {outer_name: {"buckets": buckets}}}


def user_bucket(key: Any, *weeks: tuple, inner_name: str = "history"):
    return {
        "key": key,
        "doc_count": sum(count for _, count in weeks),
        inner_name: {
            "buckets": [
                {"key_as_string": label, "doc_count": count} for label, count in weeks
            ]
        },
    }


@dataclass
class InMemoryBackend(SearchBackend):
    response: Dict[str, Any] = field(default_factory=dict)
    version: str = "8.13.0"
    acknowledge: bool = True
    indices: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    versions: Dict[tuple, int] = field(default_factory=dict)
    searches: List[Dict[str, Any]] = field(default_factory=list)
    created: List[str] = field(default_factory=list)
    flushed: List[str] = field(default_factory=list)
    fail_on_put: Optional[int] = None
    closed: bool = False
    puts: int = 0

    def ping(self) -> PingInfo:
        return PingInfo(version=self.version, status_code=200)

    def index_exists(self, name: str) -> bool:
        return name in self.indices

    def create_index(self, name, properties=None) -> bool:
        self.indices.setdefault(name, {})
        self.created.append(name)
        return self.acknowledge

    def search(self, index, body):
        self.searches.append({"index": index, **body})
        return self.response

    def put(self, index, type_label, doc_id, body, op_type="create"):
        self.puts += 1
        if self.fail_on_put is not None and self.puts >= self.fail_on_put:
            raise api_error(ConflictError, 409, "version_conflict_engine_exception")
        docs = self.indices.setdefault(index, {})
        if op_type == "create" and doc_id in docs:
            raise api_error(ConflictError, 409, "version_conflict_engine_exception")
        docs[doc_id] = {"doc_type": type_label, **body}
        self.versions[(index, doc_id)] = self.versions.get((index, doc_id), 0) + 1
        return {"id": doc_id, "index": index, "type_label": type_label}

    def get(self, index, type_label, doc_id) -> GetReceipt:
        doc = self.indices.get(index, {}).get(doc_id)
        if doc is None:
            return GetReceipt(found=False, id=doc_id, index=index, type_label=type_label)
        return GetReceipt(
            found=True,
            id=doc_id,
            index=index,
            type_label=doc.get("doc_type"),
            version=self.versions[(index, doc_id)],
            source=dict(doc),
        )

    def flush(self, index: str) -> None:
        self.flushed.append(index)

    def update(self, index, doc_id, script, upsert=None) -> UpdateReceipt:
        docs = self.indices.setdefault(index, {})
        if doc_id not in docs:
            if upsert is None:
                raise api_error(NotFoundError, 404, "document_missing_exception")
            docs[doc_id] = dict(upsert)
            result = "created"
        else:
            # Only ``ctx._source.<field> += params.<name>`` is understood here.
            target, _, param = script["source"].partition("+=")
            source_field = target.strip().removeprefix("ctx._source.")
            param_name = param.strip().rstrip(";").removeprefix("params.")
            docs[doc_id][source_field] = (
                docs[doc_id].get(source_field, 0) + script["params"][param_name]
            )
            result = "updated"
        key = (index, doc_id)
        self.versions[key] = self.versions.get(key, 0) + 1
        return UpdateReceipt(
            id=doc_id, index=index, new_version=self.versions[key], result=result
        )

    def close(self) -> None:
        self.closed = True
