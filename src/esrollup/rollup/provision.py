from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..errors import ProvisioningFailure, describe_backend_error
from ..schemas import ProvisionResult
from ..storage import BACKEND_ERRORS, DERIVED_DOCUMENT_PROPERTIES, IndexAlreadyExists
from ..storage.base import SearchBackend

logger = logging.getLogger(__name__)


def ensure_index(
    backend: SearchBackend,
    name: str,
    properties: Optional[Dict[str, Any]] = None,
) -> ProvisionResult:
    """Create ``name`` unless it already exists.

    An unacknowledged creation is logged and reported with
    ``acknowledged=False``; the run carries on because later writes may
    still succeed once the cluster settles.
    """
    if properties is None:
        properties = DERIVED_DOCUMENT_PROPERTIES
    try:
        if backend.index_exists(name):
            return ProvisionResult(created=False)
        acknowledged = backend.create_index(name, properties)
    except IndexAlreadyExists:
        logger.debug("Index %s was created concurrently", name)
        return ProvisionResult(created=False)
    except BACKEND_ERRORS as exc:
        raise ProvisioningFailure(
            f"create index {name}", describe_backend_error(exc)
        ) from exc

    if acknowledged:
        logger.info("Created index %s", name)
    else:
        logger.warning(
            "Creation of index %s was not acknowledged; writes may fail until it settles",
            name,
        )
    return ProvisionResult(created=True, acknowledged=acknowledged)
