"""Two-level bucket aggregation request: terms on a grouping key, with a
date histogram nested under every term bucket.

Building a query performs no I/O and no validation; bad field names or
intervals are reported by the backend when the query runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils.datetime import to_utc

CALENDAR_INTERVALS = {
    "minute",
    "1m",
    "hour",
    "1h",
    "day",
    "1d",
    "week",
    "1w",
    "month",
    "1M",
    "quarter",
    "1q",
    "year",
    "1y",
}

TERMS_ORDERS: Dict[str, Dict[str, str]] = {
    "count_desc": {"_count": "desc"},
    "count_asc": {"_count": "asc"},
    "key_asc": {"_key": "asc"},
    "key_desc": {"_key": "desc"},
}

DEFAULT_OUTER_AGG = "timeline"
DEFAULT_INNER_AGG = "history"


@dataclass(frozen=True)
class BucketQuery:
    index: str
    outer_name: str
    inner_name: str
    body: Dict[str, Any]


def histogram_interval(bucket_interval: str) -> Dict[str, str]:
    if bucket_interval in CALENDAR_INTERVALS:
        return {"calendar_interval": bucket_interval}
    return {"fixed_interval": bucket_interval}


def _match_query(
    time_field: str,
    since: Optional[datetime],
    until: Optional[datetime],
) -> Dict[str, Any]:
    if since is None and until is None:
        return {"match_all": {}}
    bounds: Dict[str, str] = {}
    if since is not None:
        bounds["gte"] = to_utc(since).isoformat()
    if until is not None:
        bounds["lt"] = to_utc(until).isoformat()
    return {"bool": {"filter": [{"range": {time_field: bounds}}]}}


def build_query(
    source_index: str,
    group_field: str,
    time_field: str,
    bucket_interval: str,
    bucket_size: int,
    order: str = "count_desc",
    *,
    outer_name: str = DEFAULT_OUTER_AGG,
    inner_name: str = DEFAULT_INNER_AGG,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> BucketQuery:
    histogram: Dict[str, Any] = {"field": time_field}
    histogram.update(histogram_interval(bucket_interval))

    body: Dict[str, Any] = {
        "query": _match_query(time_field, since, until),
        "size": 0,
        "aggs": {
            outer_name: {
                "terms": {
                    "field": group_field,
                    "size": bucket_size,
                    "order": TERMS_ORDERS.get(order, order),
                },
                "aggs": {inner_name: {"date_histogram": histogram}},
            }
        },
    }
    return BucketQuery(
        index=source_index,
        outer_name=outer_name,
        inner_name=inner_name,
        body=body,
    )
