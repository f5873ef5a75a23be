from ._helpers import BACKEND_ERRORS, DERIVED_DOCUMENT_PROPERTIES
from .base import SearchBackend
from .elastic import ElasticBackend, IndexAlreadyExists
from .factory import create_backend

__all__ = [
    "BACKEND_ERRORS",
    "DERIVED_DOCUMENT_PROPERTIES",
    "SearchBackend",
    "ElasticBackend",
    "IndexAlreadyExists",
    "create_backend",
]
