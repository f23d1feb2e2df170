"""
Store address interpolation.

Templates contain literal segments and ``{name}`` placeholders, e.g.
``users/{userId}/orders``. Every placeholder must be satisfied by the
argument map; substituted text is never scanned again, so an argument
value that itself looks like ``{other}`` stays literal.
"""

import re
from collections.abc import Mapping
from typing import Any

from .exceptions import ConfigurationError, InvalidPathError, UnresolvedReferenceError
from .walker import FieldRecord, TypeRecord

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")
SEPARATOR = "/"


def placeholder(name: str) -> str:
    return "{" + name + "}"


def is_document_template(template: str) -> bool:
    """Whether a template (or concrete path) addresses a document rather than a collection.

    Documents sit at even depth. A placeholder always fills exactly one segment.
    """
    return len(template.strip(SEPARATOR).split(SEPARATOR)) % 2 == 0


def extract_placeholders(template: str) -> list[str]:
    """Placeholder names in order of first appearance."""
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(template):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def _segment(name: str, value: Any) -> str:
    text = str(value)
    if not text or SEPARATOR in text:
        raise InvalidPathError(f"Value for '{name}' is not a valid path segment: {text!r}")
    return text


def resolve(template: str, args: Mapping[str, Any]) -> str:
    """Replace every placeholder in ``template`` with its argument value.

    Raises:
        UnresolvedReferenceError: If any placeholder has no (non-null) argument.
        InvalidPathError: If a value is empty or would add path segments.
    """
    names = extract_placeholders(template)
    missing = [name for name in names if args.get(name) is None]
    if missing:
        raise UnresolvedReferenceError(template, missing)

    values = {name: _segment(name, args[name]) for name in names}
    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], template)


def resolve_child(parent_path: str, child_template: str, args: Mapping[str, Any]) -> str:
    """Resolve ``child_template`` and anchor it under an already concrete parent path.

    The parent path is used verbatim; only the child part is interpolated.
    """
    child = resolve(child_template, args)
    return f"{parent_path.rstrip(SEPARATOR)}{SEPARATOR}{child.lstrip(SEPARATOR)}"


def select_template(
    target: TypeRecord | None, field: FieldRecord, args: Mapping[str, Any]
) -> tuple[str | None, Mapping[str, Any]]:
    """Pick the template for a fetch field and the arguments allowed to fill it.

    ``@pathID`` arguments parameterize the target type's collection path.
    Without them, a literal ``path`` on the fetch directive takes over from
    the type-level path, and any field argument may fill its placeholders.
    """
    type_template = target.path_template if target is not None else None
    fetch_path = field.fetch.path if field.fetch is not None else None

    if field.path_params and type_template is not None:
        return type_template, {name: args.get(name) for name in field.path_params}
    if fetch_path is not None:
        return fetch_path, args
    return type_template, args


def collection_path(target: TypeRecord | None, field: FieldRecord, args: Mapping[str, Any]) -> str:
    """Concrete address the fetch field reads from."""
    template, scope = select_template(target, field, args)
    if template is None:
        raise ConfigurationError(f"No path template available for field '{field.field_name}'")
    return resolve(template, scope)
