from __future__ import annotations

from typing import Any, Dict, List, Optional

from elasticsearch import ApiError, Elasticsearch, TransportError

# Exceptions the client raises for any failed request.
BACKEND_ERRORS = (ApiError, TransportError)

DERIVED_DOCUMENT_PROPERTIES: Dict[str, Any] = {
    "key": {"type": "keyword"},
    "marker": {"type": "keyword"},
    "count": {"type": "long"},
    "bucket": {"type": "keyword"},
    "doc_type": {"type": "keyword"},
    "created": {"type": "date"},
}


def _create_client(
    hosts: List[str],
    username: Optional[str],
    password: Optional[str],
    verify_certs: bool,
    timeout: float = 60.0,
) -> Elasticsearch:
    kwargs: Dict[str, Any] = {
        "hosts": hosts,
        "verify_certs": verify_certs,
        "request_timeout": timeout,
    }
    if username:
        kwargs["basic_auth"] = (username, password or "")
    return Elasticsearch(**kwargs)


def _is_already_exists(exc: ApiError) -> bool:
    err = getattr(exc, "error", None)
    return (
        err == "resource_already_exists_exception"
        or "resource_already_exists_exception" in str(exc)
    )


def _response_status(response: Any, default: int = 200) -> int:
    meta = getattr(response, "meta", None)
    status = getattr(meta, "status", None)
    return int(status) if isinstance(status, int) else default
