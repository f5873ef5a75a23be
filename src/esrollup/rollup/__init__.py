from .ids import DeterministicIds, IdentifierSequence, create_id_allocator
from .pipeline import RollupResult, run_rollup
from .provision import ensure_index
from .query import BucketQuery, build_query
from .walker import BucketWalk, walk
from .writer import RollupWriter

__all__ = [
    "BucketQuery",
    "BucketWalk",
    "DeterministicIds",
    "IdentifierSequence",
    "RollupResult",
    "RollupWriter",
    "build_query",
    "create_id_allocator",
    "ensure_index",
    "run_rollup",
    "walk",
]
