"""
Response shaping for stored records.

Identifier fields are injected from the record's storage key, timestamp
fields are normalized to timezone-aware UTC datetimes, and every other
field passes through from the raw record.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from .store.base import DocumentSnapshot
from .walker import FieldRecord


def normalize_timestamp(value: Any) -> Any:
    """Convert a store-native temporal value to an aware UTC datetime.

    Handles ``datetime`` (including Firestore's ``DatetimeWithNanoseconds``)
    and objects exposing ``to_datetime()`` or protobuf's ``ToDatetime()``.
    Non-temporal values are returned unchanged.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    for method in ("to_datetime", "ToDatetime"):
        convert = getattr(value, method, None)
        if callable(convert):
            return normalize_timestamp(convert())
    return value


def shape(
    field_metadata: Sequence[FieldRecord] | None,
    raw_record: Mapping[str, Any] | None,
    record_key: str,
) -> dict[str, Any] | None:
    """Build the API-facing record for one stored document.

    Returns None only when there is no metadata for the type; callers then
    fall back to the raw record.
    """
    if field_metadata is None:
        return None

    shaped = dict(raw_record or {})
    for record in field_metadata:
        if not record.directives:
            continue

        if record.is_identifier:
            shaped[record.field_name] = record_key
        elif record.is_timestamp:
            # Always present in the output; unset or falsy values become None
            value = shaped.get(record.field_name)
            shaped[record.field_name] = normalize_timestamp(value) if value else None

    return shaped


def shape_snapshot(
    field_metadata: Sequence[FieldRecord] | None, snapshot: DocumentSnapshot
) -> dict[str, Any] | None:
    return shape(field_metadata, snapshot.to_dict(), snapshot.id)


def shape_many(
    field_metadata: Sequence[FieldRecord] | None, snapshots: Iterable[DocumentSnapshot]
) -> list[dict[str, Any]]:
    """Shape each document independently, keeping store order.

    Documents that shape to nothing (no metadata, or an empty record) are
    omitted rather than returned as nulls or empty placeholders.
    """
    shaped = (shape_snapshot(field_metadata, snapshot) for snapshot in snapshots)
    return [record for record in shaped if record]
