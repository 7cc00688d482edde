"""
supplier_portal/records.py

Pure helpers for keeping a cached page of records in step with mutation
results. Nothing here touches the network or mutates its arguments.

Records are plain dicts as returned by the API; identity is the "id" key
compared as a string (the API serializes IDs as strings, callers may not).
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence

Record = dict[str, Any]


def same_id(record: Optional[Mapping[str, Any]], entity_id: Any) -> bool:
    return record is not None and str(record.get("id")) == str(entity_id)


def merge_record(record: Mapping[str, Any], changes: Mapping[str, Any]) -> Record:
    """Shallow field overwrite: keys absent from `changes` keep their value."""
    merged = dict(record)
    merged.update(changes)
    return merged


def merge_into(
    records: Sequence[Mapping[str, Any]],
    entity_id: Any,
    changes: Mapping[str, Any],
    merge: Callable[[Mapping[str, Any], Mapping[str, Any]], Record] = merge_record,
) -> list[Record]:
    """Merge `changes` into the record with `entity_id`; others are untouched."""
    return [merge(r, changes) if same_id(r, entity_id) else dict(r) for r in records]


def remove_by_id(records: Sequence[Mapping[str, Any]], entity_id: Any) -> list[Record]:
    return [dict(r) for r in records if not same_id(r, entity_id)]


def prepend(records: Sequence[Mapping[str, Any]], record: Mapping[str, Any]) -> list[Record]:
    """Put `record` first, dropping any stale copy with the same id."""
    return [dict(record)] + remove_by_id(records, record.get("id"))


def find_by_id(records: Sequence[Mapping[str, Any]], entity_id: Any) -> Optional[Record]:
    for record in records:
        if same_id(record, entity_id):
            return dict(record)
    return None
