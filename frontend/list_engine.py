"""
frontend/list_engine.py
Client-side derivation of the projects table from a fetched snapshot.

derive_view() runs two stages, in this order:
1. Sort on a single key (stable; missing values sort as "")
2. Filter by case-insensitive substring on name / assetType / model

Filtering happens after sorting, so hidden rows never affect the order of the
visible ones. Everything here is pure: no Streamlit, no network.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


class SortKey(str, Enum):
    """Sortable table columns (wire field names)."""
    name = "name"
    asset_type = "assetType"
    model = "model"
    created_at = "createdAt"
    updated_at = "updatedAt"


class SortDirection(str, Enum):
    ascending = "ascending"
    descending = "descending"


# Fields matched by the search box
SEARCH_FIELDS = ("name", "assetType", "model")


@dataclass(frozen=True)
class SortConfig:
    key: Optional[SortKey] = None
    direction: SortDirection = SortDirection.ascending


def request_sort(config: SortConfig, key: Union[SortKey, str]) -> SortConfig:
    """
    Next sort state after a column header click.

    Same key while ascending -> descending; any other request -> ascending on `key`.

    Raises:
        ValueError: if key is not a sortable column
    """
    sort_key = SortKey(key)
    if config.key == sort_key and config.direction == SortDirection.ascending:
        return SortConfig(key=sort_key, direction=SortDirection.descending)
    return SortConfig(key=sort_key, direction=SortDirection.ascending)


def sort_value(record: Mapping[str, Any], key: SortKey) -> str:
    value = record.get(key.value)
    if value is None:
        return ""
    return str(value)


def sort_projects(records: Iterable[Dict[str, Any]], config: SortConfig) -> List[Dict[str, Any]]:
    """Stable single-key sort. No key: input order is kept."""
    if config.key is None:
        return list(records)
    # sorted() is stable in both directions (reverse=True keeps ties in input order)
    return sorted(
        records,
        key=lambda record: sort_value(record, config.key),
        reverse=(config.direction == SortDirection.descending),
    )


def matches_search(record: Mapping[str, Any], term_lower: str) -> bool:
    for field in SEARCH_FIELDS:
        value = record.get(field)
        if value is None or value == "":
            continue
        if term_lower in str(value).lower():
            return True
    return False


def filter_projects(records: Iterable[Dict[str, Any]], search_term: str) -> List[Dict[str, Any]]:
    """Keep records whose name, assetType or model contains the term (case-insensitive)."""
    if not search_term:
        return list(records)
    term_lower = search_term.lower()
    return [record for record in records if matches_search(record, term_lower)]


def derive_view(
    records: Iterable[Dict[str, Any]],
    sort_config: Optional[SortConfig] = None,
    search_term: str = "",
) -> List[Dict[str, Any]]:
    """Rows to display: sort first, then filter."""
    ordered = sort_projects(records, sort_config or SortConfig())
    return filter_projects(ordered, search_term)


def sort_indicator(config: SortConfig, key: Union[SortKey, str]) -> str:
    """Arrow shown next to the active column header."""
    if config.key is None or config.key != SortKey(key):
        return ""
    return "↑" if config.direction == SortDirection.ascending else "↓"


def format_date(value: Optional[str]) -> str:
    """
    Render an ISO timestamp as a local calendar date (e.g. "1/31/2024").

    Empty input gives ""; unparsable input is returned unchanged.
    """
    if not value:
        return ""
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return value
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone()
    return f"{local.month}/{local.day}/{local.year}"
