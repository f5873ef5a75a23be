"""Single-pass rollup: ping, provision, aggregate, walk, write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ..config import Settings
from ..errors import (
    ConnectivityFailure,
    QueryFailure,
    WriteFailure,
    describe_backend_error,
)
from ..storage import BACKEND_ERRORS
from ..storage.base import SearchBackend
from ..utils.datetime import utc_now
from .ids import create_id_allocator
from .provision import ensure_index
from .query import build_query
from .walker import walk
from .writer import RollupWriter

logger = logging.getLogger(__name__)


@dataclass
class RollupResult:
    backend_version: str = ""
    index_created: bool = False
    index_acknowledged: bool = True
    outer_buckets: int = 0
    skipped_buckets: int = 0
    skipped_inner_buckets: int = 0
    data_absent: bool = False
    tuples_written: int = 0
    ids_written: List[str] = field(default_factory=list)
    flushed: bool = False


def run_rollup(
    backend: SearchBackend,
    settings: Settings,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> RollupResult:
    """Run one rollup pass; any :class:`RollupError` aborts it where raised.

    Documents written before a failing write stay written.  There is no
    watermark, so a failed run is not resumable.
    """
    result = RollupResult()

    try:
        info = backend.ping()
    except BACKEND_ERRORS as exc:
        raise ConnectivityFailure("ping", describe_backend_error(exc)) from exc
    if info.status_code >= 400:
        raise ConnectivityFailure("ping", f"status {info.status_code}")
    result.backend_version = info.version
    logger.info(
        "Backend returned with code %d and version %s", info.status_code, info.version
    )

    destination = settings.rollup_destination_index
    provisioned = ensure_index(backend, destination)
    result.index_created = provisioned.created
    result.index_acknowledged = provisioned.acknowledged

    since: Optional[datetime] = None
    if settings.rollup_lookback_days > 0:
        since = clock() - timedelta(days=settings.rollup_lookback_days)
    query = build_query(
        settings.rollup_source_index,
        settings.rollup_group_field,
        settings.rollup_time_field,
        settings.rollup_interval,
        settings.rollup_bucket_size,
        settings.rollup_order,
        outer_name=settings.rollup_outer_agg,
        inner_name=settings.rollup_inner_agg,
        since=since,
    )
    try:
        response = backend.search(query.index, query.body)
    except BACKEND_ERRORS as exc:
        raise QueryFailure(
            f"search {query.index}", describe_backend_error(exc)
        ) from exc

    buckets = walk(response, query.outer_name, query.inner_name)
    result.data_absent = buckets.data_absent
    result.outer_buckets = len(buckets.outer_buckets)
    result.skipped_buckets = buckets.skipped_buckets
    result.skipped_inner_buckets = buckets.skipped_inner_buckets

    writer = RollupWriter(
        backend,
        destination,
        ids=create_id_allocator(
            settings.rollup_id_strategy, destination, settings.rollup_id_seed
        ),
        marker=settings.rollup_marker,
        type_label=settings.rollup_type_label,
        clock=clock,
    )
    for item in buckets:
        receipt = writer.write(item)
        result.ids_written.append(receipt.id)
        result.tuples_written += 1

    if settings.rollup_flush_destination and result.tuples_written:
        try:
            backend.flush(destination)
        except BACKEND_ERRORS as exc:
            raise WriteFailure(
                f"flush {destination}", describe_backend_error(exc)
            ) from exc
        result.flushed = True

    logger.info(
        "Rollup done: %d buckets, %d written to %s, %d skipped, %d unlabelled",
        result.outer_buckets,
        result.tuples_written,
        destination,
        result.skipped_buckets,
        result.skipped_inner_buckets,
    )
    return result
