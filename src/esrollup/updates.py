"""Scripted in-place mutation of a single document, independent of rollups."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .errors import UpdateFailure, describe_backend_error
from .schemas import UpdateReceipt
from .storage import BACKEND_ERRORS
from .storage.base import SearchBackend

logger = logging.getLogger(__name__)


def apply_update(
    backend: SearchBackend,
    index: str,
    doc_id: str,
    script_expression: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    upsert: Optional[Dict[str, Any]] = None,
    lang: str = "painless",
) -> UpdateReceipt:
    """Run ``script_expression`` against ``index/doc_id``.

    When the document is missing and ``upsert`` is given, the upsert body
    is stored unchanged and the script does not run.  The returned
    ``new_version`` lets callers detect concurrent writers; the backend
    itself resolves races as last-write-wins.
    """
    script: Dict[str, Any] = {"source": script_expression, "lang": lang}
    if params:
        script["params"] = dict(params)
    try:
        receipt = backend.update(index, doc_id, script, upsert=upsert)
    except BACKEND_ERRORS as exc:
        raise UpdateFailure(
            f"update {index}/{doc_id}", describe_backend_error(exc)
        ) from exc
    logger.info(
        "Updated %s/%s: %s (version %d)",
        receipt.index,
        receipt.id,
        receipt.result,
        receipt.new_version,
    )
    return receipt
