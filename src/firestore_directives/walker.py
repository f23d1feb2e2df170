"""
Build-time schema walk.

Visits every object type once and records, per type, the storage path
template declared with ``@collection`` and per-field directive metadata.
The resulting registry is immutable and shared by every request.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from graphql import GraphQLObjectType, GraphQLSchema
from graphql.language import (
    DirectiveNode,
    ListTypeNode,
    NamedTypeNode,
    TypeNode,
)
from graphql.utilities import value_from_ast_untyped

from .directives import (
    DEFAULT_FETCH_MANY,
    DEFAULT_FETCH_ONE,
    DirectiveKind,
    directive_kind,
)
from .logging import get_logger

logger = get_logger(__name__)

ANY_TYPE = "Any"


@dataclass(frozen=True)
class FetchDirective:
    """Resolver-attaching directive on a field, with its optional literal path."""

    kind: DirectiveKind
    name: str
    path: Any = None

    @property
    def has_path(self) -> bool:
        return self.path is not None


@dataclass(frozen=True)
class FieldRecord:
    """Directive metadata for one field of an object type."""

    field_name: str
    type_name: str
    is_list: bool
    directives: frozenset[DirectiveKind] = frozenset()
    path_params: tuple[str, ...] = ()
    filter_params: tuple[str, ...] = ()
    fetch: FetchDirective | None = None

    @property
    def is_identifier(self) -> bool:
        return DirectiveKind.DOCUMENT_ID in self.directives

    @property
    def is_timestamp(self) -> bool:
        return DirectiveKind.TIMESTAMP in self.directives


@dataclass(frozen=True)
class TypeRecord:
    """Directive metadata for one object type."""

    type_name: str
    path_template: str | None = None
    fields: Mapping[str, FieldRecord] = field(default_factory=lambda: MappingProxyType({}))
    identifier_field: FieldRecord | None = None

    @property
    def is_collection(self) -> bool:
        return self.path_template is not None

    def directive_fields(self) -> tuple[FieldRecord, ...]:
        """Fields that carry at least one recognised directive."""
        return tuple(record for record in self.fields.values() if record.directives)


class DirectiveRegistry:
    """Read-only lookup tables produced by :func:`walk`."""

    def __init__(self, types: Mapping[str, TypeRecord]):
        self._types = MappingProxyType(dict(types))
        self._path_templates = MappingProxyType(
            {name: record.path_template for name, record in types.items() if record.is_collection}
        )
        self._field_metadata = MappingProxyType(
            {name: tuple(record.fields.values()) for name, record in types.items()}
        )

    @property
    def path_templates(self) -> Mapping[str, str]:
        """Type name -> storage path template, for ``@collection`` types only."""
        return self._path_templates

    @property
    def field_metadata(self) -> Mapping[str, tuple[FieldRecord, ...]]:
        """Type name -> every field record of that type."""
        return self._field_metadata

    def get(self, type_name: str) -> TypeRecord | None:
        return self._types.get(type_name)

    def identifier_field(self, type_name: str) -> FieldRecord | None:
        record = self._types.get(type_name)
        return record.identifier_field if record else None

    def directive_fields(self, type_name: str) -> tuple[FieldRecord, ...] | None:
        """Directive-bearing fields of a type, or None when the type is unknown."""
        record = self._types.get(type_name)
        if record is None:
            return None
        return record.directive_fields()

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __iter__(self):
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


def type_name_of(type_node: TypeNode) -> str:
    """Underlying type name of a field's declared type.

    List wrappers are stripped to the inner named type. Non-null wrappers
    collapse to ``Any`` because nullability is not tracked.
    """
    if isinstance(type_node, NamedTypeNode):
        return type_node.name.value
    if isinstance(type_node, ListTypeNode) and isinstance(type_node.type, NamedTypeNode):
        return type_node.type.name.value
    return ANY_TYPE


def directive_arguments(directive: DirectiveNode) -> dict[str, Any]:
    """Literal argument values of a directive usage, without type coercion."""
    return {
        argument.name.value: value_from_ast_untyped(argument.value)
        for argument in directive.arguments or ()
    }


def _collection_path(nodes: Iterable[Any]) -> Any:
    path = None
    for node in nodes:
        for directive in getattr(node, "directives", None) or ():
            if directive.name.value == DirectiveKind.COLLECTION.value:
                path = directive_arguments(directive).get("path")
    return path


def _tagged_arguments(field_node: Any, kind: DirectiveKind) -> tuple[str, ...]:
    names = []
    for argument in field_node.arguments or ():
        if any(d.name.value == kind.value for d in argument.directives or ()):
            names.append(argument.name.value)
    return tuple(names)


def _field_record(field_name: str, field_node: Any, fetch_one: str, fetch_many: str) -> FieldRecord:
    kinds: set[DirectiveKind] = set()
    fetch: FetchDirective | None = None

    for directive in field_node.directives or ():
        name = directive.name.value
        kind = directive_kind(name, fetch_one, fetch_many)
        if kind is None:
            continue
        kinds.add(kind)
        if kind.is_fetch:
            path = directive_arguments(directive).get("path")
            fetch = FetchDirective(kind=kind, name=name, path=path)

    return FieldRecord(
        field_name=field_name,
        type_name=type_name_of(field_node.type),
        is_list=isinstance(field_node.type, ListTypeNode),
        directives=frozenset(kinds),
        path_params=_tagged_arguments(field_node, DirectiveKind.PATH_ID),
        filter_params=_tagged_arguments(field_node, DirectiveKind.WHERE),
        fetch=fetch,
    )


def _type_record(type_: GraphQLObjectType, fetch_one: str, fetch_many: str) -> TypeRecord:
    fields: dict[str, FieldRecord] = {}
    identifier: FieldRecord | None = None

    for field_name, gql_field in type_.fields.items():
        if gql_field.ast_node is None:
            continue
        record = _field_record(field_name, gql_field.ast_node, fetch_one, fetch_many)
        fields[field_name] = record

        if record.is_identifier:
            if record.is_timestamp:
                logger.warning(
                    "Field declares both documentID and timestamp; documentID wins",
                    type_name=type_.name,
                    field=field_name,
                )
            if identifier is not None:
                logger.warning(
                    "Multiple documentID fields declared; last one wins",
                    type_name=type_.name,
                    previous=identifier.field_name,
                    field=field_name,
                )
            identifier = record

    path = _collection_path([type_.ast_node, *(type_.extension_ast_nodes or ())])
    return TypeRecord(
        type_name=type_.name,
        path_template=path,
        fields=MappingProxyType(fields),
        identifier_field=identifier,
    )


def walk(
    schema: GraphQLSchema,
    fetch_one: str = DEFAULT_FETCH_ONE,
    fetch_many: str = DEFAULT_FETCH_MANY,
) -> DirectiveRegistry:
    """Collect path templates and field metadata for every object type.

    The schema is not modified. Directive arguments are recorded as written;
    validating them is left to resolver installation.
    """
    types: dict[str, TypeRecord] = {}
    for type_name, type_ in schema.type_map.items():
        if type_name.startswith("__") or not isinstance(type_, GraphQLObjectType):
            continue
        types[type_name] = _type_record(type_, fetch_one, fetch_many)

    registry = DirectiveRegistry(types)
    logger.debug(
        "Schema walk complete",
        object_types=len(types),
        collections=sorted(registry.path_templates),
    )
    return registry
