"""Flatten a terms → date_histogram aggregation into rollup tuples."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..schemas import RollupTuple
from ..utils.datetime import epoch_ms_to_datetime
from .query import DEFAULT_INNER_AGG, DEFAULT_OUTER_AGG

logger = logging.getLogger(__name__)


def _inner_label(bucket: Mapping[str, Any]) -> Optional[str]:
    label = bucket.get("key_as_string")
    if isinstance(label, str) and label:
        return label
    key = bucket.get("key")
    if key is None or isinstance(key, bool):
        return None
    if isinstance(key, (int, float)):
        parsed = epoch_ms_to_datetime(key)
        if parsed:
            return parsed.isoformat()
    return str(key)


class BucketWalk:
    """Restartable view over the (outer, inner) bucket pairs of one response.

    Iterating yields one :class:`RollupTuple` per inner bucket of every
    outer bucket whose key is text.  Outer buckets keyed by anything else
    are dropped and counted in :attr:`skipped_buckets`; inner buckets with
    no usable label are dropped and counted in :attr:`skipped_inner_buckets`.
    """

    def __init__(
        self,
        response: Mapping[str, Any],
        outer_name: str = DEFAULT_OUTER_AGG,
        inner_name: str = DEFAULT_INNER_AGG,
    ) -> None:
        self.outer_name = outer_name
        self.inner_name = inner_name
        aggregations = response.get("aggregations") or {}
        outer = aggregations.get(outer_name)
        self.data_absent = not isinstance(outer, Mapping)
        self.outer_buckets: List[Dict[str, Any]] = (
            [] if self.data_absent else list(outer.get("buckets") or [])
        )
        self.skipped_buckets = sum(
            1 for bucket in self.outer_buckets if not isinstance(bucket.get("key"), str)
        )
        self.skipped_inner_buckets = sum(
            1
            for bucket in self.outer_buckets
            if isinstance(bucket.get("key"), str)
            for inner in self._inner_buckets(bucket)
            if _inner_label(inner) is None
        )
        if self.data_absent:
            logger.warning(
                "Aggregation %r missing from response; nothing to roll up", outer_name
            )
        elif self.skipped_buckets:
            logger.warning(
                "%d of %d %r buckets skipped: key is not text",
                self.skipped_buckets,
                len(self.outer_buckets),
                outer_name,
            )
        if self.skipped_inner_buckets:
            logger.warning(
                "%d %r buckets skipped: no key or label",
                self.skipped_inner_buckets,
                inner_name,
            )

    def _inner_buckets(self, bucket: Mapping[str, Any]) -> List[Dict[str, Any]]:
        histogram = bucket.get(self.inner_name)
        if not isinstance(histogram, Mapping):
            return []
        return list(histogram.get("buckets") or [])

    def __iter__(self) -> Iterator[RollupTuple]:
        for bucket in self.outer_buckets:
            key = bucket.get("key")
            if not isinstance(key, str):
                continue
            for inner in self._inner_buckets(bucket):
                label = _inner_label(inner)
                if label is None:
                    continue
                count = int(inner.get("doc_count", 0))
                logger.debug("key %r has %d docs in %r", key, count, label)
                yield RollupTuple(key, label, count)


def walk(
    response: Mapping[str, Any],
    outer_name: str = DEFAULT_OUTER_AGG,
    inner_name: str = DEFAULT_INNER_AGG,
) -> BucketWalk:
    return BucketWalk(response, outer_name, inner_name)
