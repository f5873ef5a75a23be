from __future__ import annotations

from typing import Union
from uuid import UUID, uuid5

from ..schemas import RollupTuple

# Namespace UUID for content-derived rollup document IDs
_NS_ROLLUP = UUID("5d0c6a3e-2f41-4b8e-9a57-1c3e8f0b7d24")


class IdentifierSequence:
    """Run-scoped counter; every call to :meth:`next_id` returns a larger id.

    Not shared between runs or processes.  A re-run starting from the same
    seed reuses ids, which surfaces as a create conflict on write.
    """

    op_type = "create"

    def __init__(self, seed: int = 1) -> None:
        if seed < 0:
            raise ValueError("seed must be >= 0")
        self._next = seed

    def next_id(self, item: RollupTuple) -> str:
        value = self._next
        self._next += 1
        return str(value)


class DeterministicIds:
    """Derive ids from (destination, key, label) so re-runs overwrite in place."""

    op_type = "index"

    def __init__(self, destination_index: str) -> None:
        self.destination_index = destination_index

    def next_id(self, item: RollupTuple) -> str:
        return str(
            uuid5(_NS_ROLLUP, f"{self.destination_index}|{item.key}|{item.label}")
        )


IdAllocator = Union[IdentifierSequence, DeterministicIds]


def create_id_allocator(
    strategy: str, destination_index: str, seed: int = 1
) -> IdAllocator:
    if strategy == "sequence":
        return IdentifierSequence(seed)
    if strategy == "deterministic":
        return DeterministicIds(destination_index)
    raise ValueError(f"Unknown id strategy: {strategy}")
