from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List
from urllib.parse import urlsplit

ID_STRATEGIES = ("sequence", "deterministic")
BUCKET_ORDERS = ("count_desc", "count_asc", "key_asc", "key_desc")


def _env_bool(name: str, default: str = "0") -> bool:
    value = os.getenv(name, default)
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    elastic_hosts: str = os.getenv("ELASTICSEARCH_HOST", "http://127.0.0.1:9200")
    elastic_user: str = os.getenv("ELASTICSEARCH_USER", "")
    elastic_password: str = os.getenv("ELASTICSEARCH_PASSWORD", "")
    elastic_verify_certs: bool = _env_bool("ELASTICSEARCH_VERIFY_CERTS", "1")
    elastic_timeout_seconds: float = float(os.getenv("ELASTICSEARCH_TIMEOUT", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # ── Rollup ───────────────────────────────────────────────
    rollup_source_index: str = os.getenv("ROLLUP_SOURCE_INDEX", "logstash-twitter")
    rollup_destination_index: str = os.getenv(
        "ROLLUP_DESTINATION_INDEX", "twitter-weekly"
    )
    rollup_group_field: str = os.getenv("ROLLUP_GROUP_FIELD", "user.keyword")
    rollup_time_field: str = os.getenv("ROLLUP_TIME_FIELD", "@timestamp")
    rollup_interval: str = os.getenv("ROLLUP_INTERVAL", "week")
    rollup_bucket_size: int = int(os.getenv("ROLLUP_BUCKET_SIZE", "20"))
    rollup_order: str = os.getenv("ROLLUP_ORDER", "count_desc")
    rollup_outer_agg: str = os.getenv("ROLLUP_OUTER_AGG", "timeline")
    rollup_inner_agg: str = os.getenv("ROLLUP_INNER_AGG", "history")
    rollup_marker: str = os.getenv("ROLLUP_MARKER", "weekly")
    rollup_type_label: str = os.getenv("ROLLUP_TYPE_LABEL", "tweet")
    rollup_lookback_days: int = int(os.getenv("ROLLUP_LOOKBACK_DAYS", "0"))

    # Identifier allocation for derived documents
    rollup_id_strategy: str = os.getenv("ROLLUP_ID_STRATEGY", "sequence")
    rollup_id_seed: int = int(os.getenv("ROLLUP_ID_SEED", "1"))
    rollup_flush_destination: bool = _env_bool("ROLLUP_FLUSH_DESTINATION", "0")

    @property
    def elastic_hosts_list(self) -> List[str]:
        return [host.strip() for host in self.elastic_hosts.split(",") if host.strip()]


def get_settings() -> Settings:
    return Settings()


def log_level(settings: Settings) -> int:
    """Numeric level for ``LOG_LEVEL``; unknown names fall back to INFO."""
    level = logging.getLevelName(str(settings.log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def validate_settings(settings: Settings) -> None:
    """Raise ``ValueError`` naming the first misconfigured variable."""
    if not settings.elastic_hosts_list:
        raise ValueError("ELASTICSEARCH_HOST must list at least one host")
    for host in settings.elastic_hosts_list:
        parsed = urlsplit(host)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(
                f"ELASTICSEARCH_HOST entry {host!r} must look like scheme://host:port"
            )
    if not isinstance(logging.getLevelName(str(settings.log_level).upper()), int):
        raise ValueError(f"LOG_LEVEL {settings.log_level!r} is not a logging level")
    if settings.elastic_timeout_seconds <= 0:
        raise ValueError("ELASTICSEARCH_TIMEOUT must be > 0")

    required = {
        "ROLLUP_SOURCE_INDEX": settings.rollup_source_index,
        "ROLLUP_DESTINATION_INDEX": settings.rollup_destination_index,
        "ROLLUP_GROUP_FIELD": settings.rollup_group_field,
        "ROLLUP_TIME_FIELD": settings.rollup_time_field,
        "ROLLUP_INTERVAL": settings.rollup_interval,
        "ROLLUP_OUTER_AGG": settings.rollup_outer_agg,
        "ROLLUP_INNER_AGG": settings.rollup_inner_agg,
    }
    for name, value in required.items():
        if not str(value or "").strip():
            raise ValueError(f"{name} must not be empty")

    if settings.rollup_outer_agg == settings.rollup_inner_agg:
        raise ValueError("ROLLUP_INNER_AGG must differ from ROLLUP_OUTER_AGG")
    if settings.rollup_bucket_size < 1:
        raise ValueError("ROLLUP_BUCKET_SIZE must be >= 1")
    if settings.rollup_order not in BUCKET_ORDERS:
        raise ValueError(
            f"ROLLUP_ORDER must be one of {', '.join(BUCKET_ORDERS)}"
        )
    if settings.rollup_lookback_days < 0:
        raise ValueError("ROLLUP_LOOKBACK_DAYS must be >= 0")
    if settings.rollup_id_strategy not in ID_STRATEGIES:
        raise ValueError(
            f"ROLLUP_ID_STRATEGY must be one of {', '.join(ID_STRATEGIES)}"
        )
    if settings.rollup_id_seed < 0:
        raise ValueError("ROLLUP_ID_SEED must be >= 0")
