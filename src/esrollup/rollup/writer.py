from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..errors import WriteFailure, describe_backend_error
from ..schemas import DerivedDocument, RollupTuple, WriteReceipt
from ..storage import BACKEND_ERRORS
from ..storage.base import SearchBackend
from ..utils.datetime import utc_now
from .ids import IdAllocator, IdentifierSequence

logger = logging.getLogger(__name__)


class RollupWriter:
    """Persist one derived document per rollup tuple under an explicit id."""

    def __init__(
        self,
        backend: SearchBackend,
        destination_index: str,
        *,
        ids: Optional[IdAllocator] = None,
        marker: str = "weekly",
        type_label: str = "tweet",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.backend = backend
        self.destination_index = destination_index
        self.ids = ids if ids is not None else IdentifierSequence()
        self.marker = marker
        self.type_label = type_label
        self.clock = clock

    def build_document(self, item: RollupTuple, doc_id: str) -> DerivedDocument:
        return DerivedDocument(
            id=doc_id,
            key=item.key,
            marker=self.marker,
            count=item.count,
            bucket=item.label,
            doc_type=self.type_label,
            created=self.clock(),
        )

    def write(
        self, item: RollupTuple, destination_index: Optional[str] = None
    ) -> WriteReceipt:
        index = destination_index or self.destination_index
        document = self.build_document(item, self.ids.next_id(item))
        try:
            response = self.backend.put(
                index,
                self.type_label,
                document.id,
                document.to_source(),
                op_type=self.ids.op_type,
            )
        except BACKEND_ERRORS as exc:
            raise WriteFailure(
                f"write {index}/{document.id}", describe_backend_error(exc)
            ) from exc
        logger.debug(
            "Indexed %s (%s) to index %s, type %s",
            response["id"],
            item.key,
            response["index"],
            response["type_label"],
        )
        return WriteReceipt(
            id=response["id"],
            index=response["index"],
            type_label=response["type_label"],
            created_at=document.created,
        )
