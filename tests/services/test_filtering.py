from __future__ import annotations

from types import MappingProxyType

import pytest

from sheetpulse.services.filtering import FilterState, apply_filters, filter_options
from sheetpulse.services.normalizer.models import PLACEHOLDER, ProjectRecord

RECORDS = [
    ProjectRecord(project="X", owner="Ana", phase="UAT", rag_status="On Track", milestone="Launch", target_date="Mar 1"),
    ProjectRecord(project="Y", owner="Ben", phase="Build", rag_status="Delayed", milestone="Launch"),
    ProjectRecord(project="Z", owner="Ana", phase="UAT", rag_status="At Risk", milestone="Signoff"),
    ProjectRecord(project="W", phase="build"),
]


def test_empty_state_returns_everything() -> None:
    assert apply_filters(RECORDS, FilterState()) == RECORDS


def test_categorical_filters_combine_with_and() -> None:
    state = FilterState().with_selection("phase", "UAT").with_selection("milestone", "Launch")

    assert [record.project for record in apply_filters(RECORDS, state)] == ["X"]


def test_categorical_match_is_exact() -> None:
    state = FilterState().with_selection("phase", "Build")

    assert [record.project for record in apply_filters(RECORDS, state)] == ["Y"]


def test_query_matches_case_insensitive_substring() -> None:
    state = FilterState().with_query("  risk ")

    assert [record.project for record in apply_filters(RECORDS, state)] == ["Z"]
    assert state.query == "risk"


def test_query_searches_target_date_but_not_last_update() -> None:
    record = ProjectRecord(project="Q", target_date="Apr 2026", last_update="May 2026")

    assert apply_filters([record], FilterState(query="apr")) == [record]
    assert apply_filters([record], FilterState(query="may")) == []


def test_query_and_selection_combine() -> None:
    state = FilterState().with_selection("owner", "Ana").with_query("launch")

    assert [record.project for record in apply_filters(RECORDS, state)] == ["X"]


def test_filtering_is_a_subsequence() -> None:
    state = FilterState().with_selection("owner", "Ana")

    result = apply_filters(RECORDS, state)

    assert result == [record for record in RECORDS if record in result]


def test_clearing_a_selection() -> None:
    state = FilterState().with_selection("owner", "Ana").with_selection("owner", "")

    assert state.is_empty
    assert state.selection("owner") == ""


def test_state_is_immutable() -> None:
    state = FilterState().with_selection("owner", "Ana")

    assert isinstance(state.selections, MappingProxyType)
    with pytest.raises(TypeError):
        state.selections["owner"] = "Ben"  # type: ignore[index]
    assert state.cleared() == FilterState()


def test_unknown_filter_field_is_rejected() -> None:
    with pytest.raises(ValueError):
        FilterState().with_selection("rag_status", "Green")


def test_options_are_distinct_sorted_and_skip_placeholder() -> None:
    options = filter_options(RECORDS)

    assert options["owner"].options == ("Ana", "Ben")
    assert PLACEHOLDER not in options["owner"].options
    assert set(options["phase"].options) == {"Build", "UAT", "build"}
    assert options["milestone"].options == ("Launch", "Signoff")


def test_options_come_from_all_records_and_keep_selection() -> None:
    state = FilterState().with_selection("owner", "Ben")

    options = filter_options(RECORDS, state)

    assert options["owner"].options == ("Ana", "Ben")
    assert options["owner"].selected == "Ben"
    assert options["project"].selected == ""
