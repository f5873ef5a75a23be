"""Fatal error taxonomy for a rollup run.

Every fatal condition halts the run where it is detected.  Non-fatal
conditions (unacknowledged index creation, a missing aggregation in the
response, non-text bucket keys) are logged and counted on the run result
instead of being raised.
"""

from __future__ import annotations

from typing import Any, Optional

from elasticsearch import TransportError


class RollupError(Exception):
    """Base class for fatal rollup failures."""

    def __init__(self, operation: str, detail: Any = None) -> None:
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConnectivityFailure(RollupError):
    """Backend unreachable or ping failed."""


class ProvisioningFailure(RollupError):
    """Index creation request errored."""


class QueryFailure(RollupError):
    """Aggregation query errored."""


class WriteFailure(RollupError):
    """A derived document could not be written."""


class UpdateFailure(RollupError):
    """A scripted partial update was rejected."""


def describe_backend_error(exc: BaseException) -> Optional[str]:
    """Best-effort one-line summary of a backend exception."""
    if isinstance(exc, TransportError):
        # TransportError.__str__ hides the message behind a generic label.
        parts = [str(exc.message or type(exc).__name__)]
        parts.extend(str(err) for err in exc.errors or () if str(err))
        return "; ".join(parts)
    status = getattr(exc, "status_code", None)
    if status is None:
        meta = getattr(exc, "meta", None)
        status = getattr(meta, "status", None)
    error = getattr(exc, "error", None)
    text = str(exc) or type(exc).__name__
    if isinstance(status, int) and error:
        return f"{status} {error}: {text}"
    if isinstance(status, int):
        return f"{status}: {text}"
    return text
