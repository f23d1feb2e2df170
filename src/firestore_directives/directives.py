"""
Directive surface consumed by the schema walker and resolver installer.

Type-level directives describe where a type's documents live and which
fields are derived from store metadata:

    directive @collection(path: String) on OBJECT
    directive @documentID on FIELD_DEFINITION
    directive @timestamp on FIELD_DEFINITION
    directive @pathID on ARGUMENT_DEFINITION
    directive @where on ARGUMENT_DEFINITION

Resolver-attaching directives (names are configurable) mark the fields
that fetch from the store:

    directive @getDoc(path: String) on FIELD_DEFINITION
    directive @getDocs(path: String) on FIELD_DEFINITION
"""

from enum import Enum

COLLECTION = "collection"
DOCUMENT_ID = "documentID"
TIMESTAMP = "timestamp"
PATH_ID = "pathID"
WHERE = "where"

DEFAULT_FETCH_ONE = "getDoc"
DEFAULT_FETCH_MANY = "getDocs"


class DirectiveKind(Enum):
    """Closed set of directive kinds understood by the engine."""

    COLLECTION = "collection"
    DOCUMENT_ID = "documentID"
    TIMESTAMP = "timestamp"
    PATH_ID = "pathID"
    WHERE = "where"
    FETCH_ONE = "fetchOne"
    FETCH_MANY = "fetchMany"

    @property
    def is_fetch(self) -> bool:
        return self in (DirectiveKind.FETCH_ONE, DirectiveKind.FETCH_MANY)


_STATIC_KINDS = {
    COLLECTION: DirectiveKind.COLLECTION,
    DOCUMENT_ID: DirectiveKind.DOCUMENT_ID,
    TIMESTAMP: DirectiveKind.TIMESTAMP,
    PATH_ID: DirectiveKind.PATH_ID,
    WHERE: DirectiveKind.WHERE,
}


def directive_kind(
    name: str,
    fetch_one: str = DEFAULT_FETCH_ONE,
    fetch_many: str = DEFAULT_FETCH_MANY,
) -> DirectiveKind | None:
    """Map an SDL directive name to its kind, or None for directives we do not own."""
    if name == fetch_one:
        return DirectiveKind.FETCH_ONE
    if name == fetch_many:
        return DirectiveKind.FETCH_MANY
    return _STATIC_KINDS.get(name)


def directive_type_defs(
    fetch_one: str = DEFAULT_FETCH_ONE,
    fetch_many: str = DEFAULT_FETCH_MANY,
) -> str:
    """SDL declarations for every directive the engine consumes."""
    if fetch_one == fetch_many:
        raise ValueError("fetch-one and fetch-many directives need distinct names")

    return f"""
directive @{COLLECTION}(path: String) on OBJECT
directive @{DOCUMENT_ID} on FIELD_DEFINITION
directive @{TIMESTAMP} on FIELD_DEFINITION
directive @{PATH_ID} on ARGUMENT_DEFINITION
directive @{WHERE} on ARGUMENT_DEFINITION
directive @{fetch_one}(path: String) on FIELD_DEFINITION
directive @{fetch_many}(path: String) on FIELD_DEFINITION
"""
