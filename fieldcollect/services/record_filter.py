"""
Record filter engine - pure predicates over a snapshot of records
"""
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from fieldcollect.schemas.record import RecordFilters
from fieldcollect.utils.datetime_utils import UTC, ensure_utc

_NO_TIMESTAMP = datetime.min.replace(tzinfo=UTC)


def _contains(haystack: Optional[str], needle: str) -> bool:
    if haystack is None:
        return False
    return needle.casefold() in haystack.casefold()


def _build_predicates(filters: RecordFilters) -> List[Callable[[Any], bool]]:
    predicates: List[Callable[[Any], bool]] = []

    if filters.agent_id is not None:
        agent_id = filters.agent_id
        predicates.append(lambda r: r.collected_by == agent_id)

    # Landlord name only; tenant names are not searched
    if filters.search:
        search = filters.search
        predicates.append(lambda r: _contains(r.landlord_name, search))

    if filters.start_date is not None:
        start = ensure_utc(filters.start_date)
        predicates.append(
            lambda r: r.created_at is not None and ensure_utc(r.created_at) >= start
        )

    if filters.end_date is not None:
        end = ensure_utc(filters.end_date)
        predicates.append(
            lambda r: r.created_at is not None and ensure_utc(r.created_at) <= end
        )

    if filters.town:
        town = filters.town
        predicates.append(lambda r: _contains(r.town, town))

    if filters.area:
        area = filters.area
        predicates.append(lambda r: _contains(r.area, area))

    return predicates


def _newest_first_key(record: Any):
    created_at = ensure_utc(record.created_at)
    return created_at if created_at is not None else _NO_TIMESTAMP


def filter_records(records: Iterable[Any], filters: Optional[RecordFilters] = None) -> List[Any]:
    """
    Apply the present filters and order newest first.

    Args:
        records: records in insertion order
        filters: predicates to apply; absent fields impose no constraint

    Returns:
        New list sorted by created_at descending. Ties keep insertion order
        and records without created_at sort last.
    """
    predicates = _build_predicates(filters or RecordFilters())
    matched = [r for r in records if all(p(r) for p in predicates)]
    # sorted() stays stable with reverse=True
    return sorted(matched, key=_newest_first_key, reverse=True)
