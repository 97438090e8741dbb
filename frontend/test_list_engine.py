# frontend/test_list_engine.py
# Unit tests for client-side sort/filter of the projects table

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.list_engine import (
    SortConfig,
    SortDirection,
    SortKey,
    derive_view,
    filter_projects,
    format_date,
    request_sort,
    sort_indicator,
    sort_projects,
)


def names(rows):
    return [r["name"] for r in rows]


ASC = SortConfig(SortKey.name, SortDirection.ascending)
DESC = SortConfig(SortKey.name, SortDirection.descending)


# --------------------------------------------------------------------
# Sort
# --------------------------------------------------------------------

def test_no_sort_key_keeps_input_order():
    rows = [{"name": "B"}, {"name": "A"}, {"name": "C"}]
    assert names(sort_projects(rows, SortConfig())) == ["B", "A", "C"]


def test_sort_by_name_ascending_then_descending():
    rows = [{"name": "B"}, {"name": "A"}, {"name": "C"}]

    config = request_sort(SortConfig(), "name")
    assert names(derive_view(rows, config)) == ["A", "B", "C"]

    config = request_sort(config, "name")
    assert names(derive_view(rows, config)) == ["C", "B", "A"]


def test_sort_does_not_mutate_input():
    rows = [{"name": "B"}, {"name": "A"}]
    sort_projects(rows, ASC)
    assert names(rows) == ["B", "A"]


def test_missing_values_sort_as_empty_string():
    rows = [{"name": "B", "model": "CREFC"}, {"name": "A"}, {"name": "C", "model": None}]
    config = SortConfig(SortKey.model)
    assert names(sort_projects(rows, config)) == ["A", "C", "B"]


def test_sort_is_lexicographic_on_text():
    rows = [{"name": "b"}, {"name": "B"}, {"name": "10"}, {"name": "9"}]
    assert names(sort_projects(rows, ASC)) == ["10", "9", "B", "b"]


def test_sort_is_stable_for_equal_keys():
    rows = [
        {"name": "x1", "assetType": "Retail"},
        {"name": "x2", "assetType": "Office"},
        {"name": "x3", "assetType": "Retail"},
        {"name": "x4", "assetType": "Office"},
    ]
    asc = SortConfig(SortKey.asset_type, SortDirection.ascending)
    desc = SortConfig(SortKey.asset_type, SortDirection.descending)

    assert names(sort_projects(rows, asc)) == ["x2", "x4", "x1", "x3"]
    assert names(sort_projects(rows, desc)) == ["x1", "x3", "x2", "x4"]


def test_sorting_twice_is_idempotent():
    rows = [{"name": n, "city": c} for n, c in [("B", "1"), ("A", "2"), ("B", "3"), ("A", "4")]]
    once = sort_projects(rows, DESC)
    assert sort_projects(once, DESC) == once


def test_toggle_twice_restores_order_of_equal_groups():
    rows = [{"name": "A", "id": i} for i in range(4)] + [{"name": "B", "id": 9}]

    config = request_sort(SortConfig(), "name")
    first = sort_projects(rows, config)
    config = request_sort(request_sort(config, "name"), "name")

    assert config.direction == SortDirection.ascending
    assert sort_projects(rows, config) == first


def test_sort_by_timestamp_strings():
    rows = [
        {"name": "new", "createdAt": "2024-03-01T00:00:00.000Z"},
        {"name": "old", "createdAt": "2023-01-01T00:00:00.000Z"},
    ]
    assert names(sort_projects(rows, SortConfig(SortKey.created_at))) == ["old", "new"]


# --------------------------------------------------------------------
# Sort-key toggling
# --------------------------------------------------------------------

def test_request_sort_new_key_starts_ascending():
    config = request_sort(DESC, "assetType")
    assert config == SortConfig(SortKey.asset_type, SortDirection.ascending)


def test_request_sort_same_key_flips():
    assert request_sort(ASC, SortKey.name).direction == SortDirection.descending
    assert request_sort(DESC, SortKey.name).direction == SortDirection.ascending


def test_request_sort_rejects_unknown_key():
    with pytest.raises(ValueError):
        request_sort(SortConfig(), "address")


def test_sort_indicator():
    assert sort_indicator(ASC, "name") == "↑"
    assert sort_indicator(DESC, "name") == "↓"
    assert sort_indicator(ASC, "model") == ""
    assert sort_indicator(SortConfig(), "name") == ""


# --------------------------------------------------------------------
# Filter
# --------------------------------------------------------------------

def test_search_retail_keeps_relative_order():
    rows = [
        {"name": "one", "assetType": "Retail"},
        {"name": "two", "assetType": "Office"},
        {"name": "three", "assetType": "Retail"},
    ]
    assert names(filter_projects(rows, "retail")) == ["one", "three"]


def test_empty_search_returns_everything():
    rows = [{"name": "a"}, {"name": "b"}]
    assert filter_projects(rows, "") == rows


def test_search_matches_name_asset_type_and_model_only():
    rows = [
        {"name": "Oak Tower", "city": "Austin"},
        {"name": "Lot 9", "model": "CLIK IRR"},
        {"name": "Depot", "assetType": "Industrial"},
    ]
    assert names(filter_projects(rows, "oak")) == ["Oak Tower"]
    assert names(filter_projects(rows, "irr")) == ["Lot 9"]
    assert names(filter_projects(rows, "INDUS")) == ["Depot"]
    assert filter_projects(rows, "austin") == []


def test_absent_fields_never_match():
    rows = [{"name": None, "assetType": None}, {}]
    assert filter_projects(rows, "none") == []


@pytest.mark.parametrize("term", ["", "a", "retail", "zzz", "Self", " "])
def test_filter_is_subset(term):
    rows = [
        {"name": "Alpha", "assetType": "Retail"},
        {"name": "Beta", "assetType": "Self Storage", "model": "Self Storage template loan sizer"},
        {"name": "Gamma"},
    ]
    result = filter_projects(rows, term)
    assert all(r in rows for r in result)


def test_filter_applies_after_sort():
    rows = [
        {"name": "C", "assetType": "Retail"},
        {"name": "A", "assetType": "Office"},
        {"name": "B", "assetType": "Retail"},
    ]
    assert names(derive_view(rows, ASC, "retail")) == ["B", "C"]


# --------------------------------------------------------------------
# Dates
# --------------------------------------------------------------------

def test_format_date_empty():
    assert format_date("") == ""
    assert format_date(None) == ""


def test_format_date_unparsable_is_returned_unchanged():
    assert format_date("not a date") == "not a date"


def test_format_date_midday_is_stable_across_timezones():
    # Noon UTC lands on the same calendar date from UTC-11 to UTC+11
    assert format_date("2024-01-31T12:00:00.000Z") == "1/31/2024"
