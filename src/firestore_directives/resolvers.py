"""
Resolver installation for fetch-one / fetch-many fields.

Installation runs once per annotated field when the schema is built; the
installed resolver runs once per request. Each resolver reads the store
exactly once and shapes the result with the target type's metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphql import (
    GraphQLField,
    GraphQLObjectType,
    GraphQLResolveInfo,
    GraphQLSchema,
    get_named_type,
    get_nullable_type,
    is_list_type,
)

from .config import DEFAULT_PROVIDER_NAME
from .directives import DEFAULT_FETCH_MANY, DEFAULT_FETCH_ONE, DirectiveKind
from .exceptions import ConfigurationError
from .logging import get_logger
from .paths import collection_path, is_document_template, placeholder, resolve_child
from .serializer import shape, shape_many
from .store.base import DocumentStore
from .walker import DirectiveRegistry, FieldRecord, TypeRecord

if TYPE_CHECKING:
    from .config import Settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolverConfig:
    """Immutable configuration threaded into every installed resolver."""

    registry: DirectiveRegistry
    provider_name: str = DEFAULT_PROVIDER_NAME
    fetch_one: str = DEFAULT_FETCH_ONE
    fetch_many: str = DEFAULT_FETCH_MANY

    @classmethod
    def from_settings(cls, registry: DirectiveRegistry, settings: Settings) -> ResolverConfig:
        return cls(
            registry=registry,
            provider_name=settings.provider_name,
            fetch_one=settings.fetch_one_directive,
            fetch_many=settings.fetch_many_directive,
        )


def _lookup(container: Any, key: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(key)
    return getattr(container, key, None)


def find_store(context: Any, provider_name: str) -> DocumentStore:
    """Return the ``app`` of the context provider named ``provider_name``.

    Raises:
        ConfigurationError: If no such provider is present in the context.
    """
    for provider in _lookup(context, "providers") or ():
        if _lookup(provider, "name") == provider_name:
            app = _lookup(provider, "app")
            if app is not None:
                return app
    raise ConfigurationError(f"{provider_name} does not exist in context.")


def _is_list_shaped(return_type: Any) -> bool:
    return is_list_type(get_nullable_type(return_type))


def _matches(record: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(record.get(name) == value for name, value in filters.items())


class DocumentFieldResolver:
    """Resolver attached to one fetch-one / fetch-many field."""

    def __init__(self, config: ResolverConfig, parent_type: str, field: FieldRecord):
        self.config = config
        self.parent_type = parent_type
        self.field = field

    def __repr__(self) -> str:
        return f"<DocumentFieldResolver {self.parent_type}.{self.field.field_name}>"

    async def __call__(self, source: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        return await self.resolve(source, args, info.context, info)

    async def resolve(
        self,
        parent: Any,
        args: Mapping[str, Any],
        context: Any,
        info: GraphQLResolveInfo,
    ) -> Any:
        _ = parent
        store = find_store(context, self.config.provider_name)

        target_name = get_named_type(info.return_type).name
        target = self.config.registry.get(target_name)

        if _is_list_shaped(info.return_type):
            return await self._resolve_collection(store, target_name, target, args)
        return await self._resolve_document(store, target_name, target, args)

    async def _resolve_collection(
        self,
        store: DocumentStore,
        target_name: str,
        target: TypeRecord | None,
        args: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        path = collection_path(target, self.field, args)
        snapshot = await store.get_collection(path)
        if snapshot.empty:
            return []

        records = shape_many(self.config.registry.directive_fields(target_name), snapshot)

        filters = {
            name: args[name] for name in self.field.filter_params if args.get(name) is not None
        }
        if filters:
            records = [record for record in records if _matches(record, filters)]
        return records

    async def _resolve_document(
        self,
        store: DocumentStore,
        target_name: str,
        target: TypeRecord | None,
        args: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        path = collection_path(target, self.field, args)
        identifier = target.identifier_field if target is not None else None

        if identifier is not None and not is_document_template(path):
            if args.get(identifier.field_name) in (None, ""):
                return None
            path = resolve_child(path, placeholder(identifier.field_name), args)

        snapshot = await store.get_document(path)
        if not snapshot.exists:
            return {}

        metadata = self.config.registry.directive_fields(target_name)
        shaped = shape(metadata, snapshot.to_dict(), snapshot.id)
        return shaped if shaped is not None else snapshot.to_dict()


def _validate_field(
    config: ResolverConfig,
    type_name: str,
    gql_field: GraphQLField,
    record: FieldRecord,
) -> None:
    fetch = record.fetch
    label = f"{type_name}.{record.field_name}"

    if fetch.has_path and not isinstance(fetch.path, str):
        raise ConfigurationError(f"@{fetch.name} on {label}: 'path' must be a string")

    target_type = get_named_type(gql_field.type)
    if not isinstance(target_type, GraphQLObjectType):
        raise ConfigurationError(
            f"@{fetch.name} on {label} must return an object type, got {target_type.name}"
        )

    target = config.registry.get(target_type.name)
    template = target.path_template if target is not None else None
    if template is not None and not isinstance(template, str):
        raise ConfigurationError(f"@collection on {target_type.name}: 'path' must be a string")

    is_list = _is_list_shaped(gql_field.type)
    if fetch.kind is DirectiveKind.FETCH_MANY and not is_list:
        raise ConfigurationError(f"@{fetch.name} on {label} must return a list type")

    if template is None and not fetch.has_path:
        raise ConfigurationError(
            f"{target_type.name} has no @collection directive and @{fetch.name} "
            f"on {label} declares no path"
        )

    if is_list:
        return

    if record.path_params and template is not None:
        address = template
    else:
        address = fetch.path if fetch.has_path else template
    if is_document_template(address):
        return

    if target is None or target.identifier_field is None:
        raise ConfigurationError(
            f"@{fetch.name} on {label} looks up {target_type.name} by key, "
            f"but {target_type.name} has no @documentID field"
        )


def install_resolvers(schema: GraphQLSchema, config: ResolverConfig) -> GraphQLSchema:
    """Attach a :class:`DocumentFieldResolver` to every fetch-annotated field.

    Raises:
        ConfigurationError: If a fetch field cannot be resolved against the store.
    """
    installed = 0
    for type_record in config.registry:
        gql_type = schema.get_type(type_record.type_name)
        for record in type_record.fields.values():
            if record.fetch is None:
                continue

            gql_field = gql_type.fields[record.field_name]
            _validate_field(config, type_record.type_name, gql_field, record)
            gql_field.resolve = DocumentFieldResolver(config, type_record.type_name, record)
            installed += 1

            logger.debug(
                "Installed document resolver",
                type_name=type_record.type_name,
                field=record.field_name,
                directive=record.fetch.name,
            )

    logger.info("Directive resolvers installed", count=installed)
    return schema
