"""
firestore-directives
GraphQL schema directives that resolve fields from a hierarchical document store
"""

__version__ = "0.1.0"

from .directives import DirectiveKind, directive_type_defs
from .exceptions import (
    ConfigurationError,
    DirectiveError,
    InvalidPathError,
    UnresolvedReferenceError,
)
from .paths import resolve, resolve_child
from .resolvers import ResolverConfig, install_resolvers
from .schema import build_directive_schema, make_executable_schema
from .serializer import shape, shape_many
from .store import MemoryDocumentStore, StoreProvider
from .walker import DirectiveRegistry, FieldRecord, TypeRecord, walk

__all__ = [
    "__version__",
    "ConfigurationError",
    "DirectiveError",
    "DirectiveKind",
    "DirectiveRegistry",
    "FieldRecord",
    "InvalidPathError",
    "MemoryDocumentStore",
    "ResolverConfig",
    "StoreProvider",
    "TypeRecord",
    "UnresolvedReferenceError",
    "build_directive_schema",
    "directive_type_defs",
    "install_resolvers",
    "make_executable_schema",
    "resolve",
    "resolve_child",
    "shape",
    "shape_many",
    "walk",
]
