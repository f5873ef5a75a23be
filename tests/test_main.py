from __future__ import annotations

from dataclasses import replace

import pytest
from elasticsearch import ConnectionError as ESConnectionError

import esrollup.main as entry
from tests.in_memory_backend import InMemoryBackend, make_response, user_bucket


def test_main_runs_one_pass_and_closes_backend(monkeypatch):
    backend = InMemoryBackend(
        response=make_response([user_bucket("alice", ("2017-01-01", 3))])
    )
    settings = replace(
        entry.get_settings(),
        rollup_destination_index="twitter-weekly",
        rollup_outer_agg="timeline",
        rollup_inner_agg="history",
        rollup_id_strategy="sequence",
    )
    monkeypatch.setattr(entry, "get_settings", lambda: settings)
    monkeypatch.setattr(entry, "create_backend", lambda settings: backend)

    entry.main()

    assert backend.closed is True
    assert list(backend.indices["twitter-weekly"]) == [str(settings.rollup_id_seed)]


def test_main_exits_non_zero_on_fatal_failure(monkeypatch):
    class OfflineBackend(InMemoryBackend):
        def ping(self):
            raise ESConnectionError("connection refused")

    backend = OfflineBackend()
    monkeypatch.setattr(entry, "create_backend", lambda settings: backend)

    with pytest.raises(SystemExit) as excinfo:
        entry.main()

    assert excinfo.value.code == 1
    assert backend.closed is True


def test_main_exits_non_zero_on_invalid_settings(monkeypatch):
    invalid = replace(entry.get_settings(), rollup_bucket_size=0)
    monkeypatch.setattr(entry, "get_settings", lambda: invalid)

    def _unexpected(settings):
        raise AssertionError("backend must not be created")

    monkeypatch.setattr(entry, "create_backend", _unexpected)

    with pytest.raises(SystemExit) as excinfo:
        entry.main()

    assert excinfo.value.code == 1


def test_main_exits_non_zero_on_host_without_scheme(monkeypatch):
    invalid = replace(entry.get_settings(), elastic_hosts="localhost:9200")
    monkeypatch.setattr(entry, "get_settings", lambda: invalid)

    with pytest.raises(SystemExit) as excinfo:
        entry.main()

    assert excinfo.value.code == 1


def test_main_wraps_client_construction_errors(monkeypatch):
    def _reject(settings):
        raise ValueError("URL must include a 'scheme', 'host', and 'port' component")

    monkeypatch.setattr(entry, "create_backend", _reject)

    with pytest.raises(SystemExit) as excinfo:
        entry.main()

    assert excinfo.value.code == 1


def test_main_survives_unknown_log_level(monkeypatch):
    invalid = replace(entry.get_settings(), log_level="chatty")
    monkeypatch.setattr(entry, "get_settings", lambda: invalid)

    with pytest.raises(SystemExit) as excinfo:
        entry.main()

    assert excinfo.value.code == 1
