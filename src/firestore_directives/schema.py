"""
Executable schema assembly.

Builds an SDL-first schema with the directive declarations prepended,
binds the ``DateTime`` scalar, walks it once and installs the document
resolvers.
"""

import re
from datetime import date, datetime
from typing import Any

from graphql import (
    GraphQLError,
    GraphQLScalarType,
    GraphQLSchema,
    build_schema,
    get_introspection_query,
    graphql_sync,
)
from graphql import validate_schema as gql_validate_schema

from .config import Settings
from .directives import directive_type_defs
from .logging import get_logger
from .resolvers import ResolverConfig, install_resolvers
from .serializer import normalize_timestamp
from .walker import DirectiveRegistry, walk

logger = get_logger(__name__)

DATETIME_SCALAR = "DateTime"
_SCALAR_DECLARATION = re.compile(r"\bscalar\s+DateTime\b")


def serialize_datetime(value: Any) -> str:
    value = normalize_timestamp(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise GraphQLError(f"DateTime cannot represent value: {value!r}")


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return normalize_timestamp(value)
    if not isinstance(value, str):
        raise GraphQLError(f"DateTime cannot represent non-string value: {value!r}")
    try:
        return normalize_timestamp(datetime.fromisoformat(value))
    except ValueError as e:
        raise GraphQLError(f"DateTime cannot represent value: {value!r}") from e


def bind_datetime_scalar(schema: GraphQLSchema) -> None:
    """Give the schema's ``DateTime`` scalar ISO-8601 (de)serialization."""
    scalar = schema.get_type(DATETIME_SCALAR)
    if not isinstance(scalar, GraphQLScalarType):
        return
    scalar.serialize = serialize_datetime
    scalar.parse_value = parse_datetime


def build_directive_schema(
    type_defs: str,
    fetch_one: str = "getDoc",
    fetch_many: str = "getDocs",
    include_directive_defs: bool = True,
) -> GraphQLSchema:
    """Build a schema from SDL that uses the directive surface.

    The directive declarations (and a ``DateTime`` scalar, unless declared)
    are prepended to ``type_defs``.
    """
    sdl = ""
    if include_directive_defs:
        sdl = directive_type_defs(fetch_one, fetch_many)
    if not _SCALAR_DECLARATION.search(type_defs):
        sdl += f"scalar {DATETIME_SCALAR}\n"

    schema = build_schema(sdl + type_defs)
    bind_datetime_scalar(schema)
    return schema


def validate_schema(schema: GraphQLSchema) -> None:
    """Validate the schema structure and run an introspection smoke check.

    Raises:
        Exception: If the schema is invalid or introspection fails
    """
    try:
        errors = gql_validate_schema(schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        result = graphql_sync(schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def make_executable_schema(
    type_defs: str, settings: Settings | None = None
) -> tuple[GraphQLSchema, DirectiveRegistry]:
    """Build, walk, install and validate a directive-driven schema.

    Returns:
        The executable schema and the registry the resolvers were built from.
    """
    if settings is None:
        from .config import settings as default_settings

        settings = default_settings

    schema = build_directive_schema(
        type_defs,
        fetch_one=settings.fetch_one_directive,
        fetch_many=settings.fetch_many_directive,
    )
    registry = walk(schema, settings.fetch_one_directive, settings.fetch_many_directive)
    install_resolvers(schema, ResolverConfig.from_settings(registry, settings))
    validate_schema(schema)
    return schema, registry
