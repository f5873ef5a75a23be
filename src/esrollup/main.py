"""Run a single rollup pass.

Configuration comes from the environment (see :mod:`esrollup.config`).
``python -m esrollup.main`` or the ``esrollup`` console script.
"""

from __future__ import annotations

import logging

from .config import get_settings, log_level, validate_settings
from .errors import ConnectivityFailure, RollupError
from .rollup import run_rollup
from .storage.base import SearchBackend
from .storage.factory import create_backend

logger = logging.getLogger(__name__)


def _connect(settings) -> SearchBackend:
    try:
        return create_backend(settings)
    except ValueError as exc:
        raise ConnectivityFailure("connect", str(exc)) from exc


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=log_level(settings))
    try:
        validate_settings(settings)
    except ValueError as exc:
        logger.error("Invalid settings: %s", exc)
        raise SystemExit(1) from exc

    try:
        with _connect(settings) as backend:
            result = run_rollup(backend, settings)
    except RollupError as exc:
        logger.error("Rollup aborted: %s", exc)
        raise SystemExit(1) from exc

    logger.info(
        "Wrote %d rollup documents (ids %s..%s)",
        result.tuples_written,
        result.ids_written[0] if result.ids_written else "-",
        result.ids_written[-1] if result.ids_written else "-",
    )


if __name__ == "__main__":
    main()
