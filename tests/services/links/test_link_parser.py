"""Tests for link validation and classification."""

from __future__ import annotations

import pytest

from sheetpulse.core.errors import InvalidLink, UnsupportedHost
from sheetpulse.services.links import PreviewDescriptor, SourceDescriptor, build_sheet_view_url, parse_link

SHEET_ID = "1BHTM5Jx7xAyaRnzuyjD38-Iz5mlQddkA8s2J2ZatIXI"


@pytest.mark.parametrize(
    "link",
    [
        f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit",
        f"docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=0",
        f"https://docs.google.com/spreadsheets/u/1/d/{SHEET_ID}/edit?usp=sharing",
        f"http://docs.google.com/spreadsheets/d/{SHEET_ID}",
    ],
)
def test_document_id_is_segment_after_spreadsheets_d(link: str) -> None:
    parsed = parse_link(link)

    assert isinstance(parsed, SourceDescriptor)
    assert parsed.document_id == SHEET_ID


def test_missing_scheme_gets_https() -> None:
    parsed = parse_link(f"  docs.google.com/spreadsheets/d/{SHEET_ID}/edit  ")

    assert parsed.source_url.startswith("https://docs.google.com/")


def test_query_parameters_win_over_fragment() -> None:
    parsed = parse_link(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit?gid=42&sheet=Q3#gid=7&sheet=Other")

    assert isinstance(parsed, SourceDescriptor)
    assert parsed.sub_sheet_id == "42"
    assert parsed.tab_name == "Q3"


def test_fragment_used_when_query_parameter_absent() -> None:
    parsed = parse_link(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit?usp=sharing#gid=1893")

    assert isinstance(parsed, SourceDescriptor)
    assert parsed.sub_sheet_id == "1893"
    assert parsed.tab_name is None


def test_tab_name_is_url_decoded() -> None:
    parsed = parse_link(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/gviz/tq?sheet=Portfolio%20Status")

    assert isinstance(parsed, SourceDescriptor)
    assert parsed.tab_name == "Portfolio Status"
    assert parsed.sub_sheet_id is None


def test_non_numeric_gid_is_ignored() -> None:
    parsed = parse_link(f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=abc")

    assert isinstance(parsed, SourceDescriptor)
    assert parsed.sub_sheet_id is None


@pytest.mark.parametrize(
    "link",
    [
        "",
        "   ",
        None,
        "https://docs.google.com/spread sheets",
        "ftp://docs.google.com/x",
        "https://",
        "https://docs.google.com]/x",
        "https://[docs.google.com/x",
        "docs.google.com]/spreadsheets/d/abc",
    ],
)
def test_invalid_input_raises_invalid_link(link) -> None:
    with pytest.raises(InvalidLink):
        parse_link(link)


def test_bad_port_is_invalid_link() -> None:
    with pytest.raises(InvalidLink):
        parse_link("https://docs.google.com:notaport/spreadsheets/d/abc")


@pytest.mark.parametrize(
    "link",
    [
        "https://example.com/spreadsheets/d/abc/edit",
        "https://docs.google.com.evil.io/spreadsheets/d/abc",
        "https://notdocs.google.com/spreadsheets/d/abc",
        "https://google.com/",
        "localhost/spreadsheets/d/abc",
    ],
)
def test_unlisted_hosts_raise_unsupported_host(link: str) -> None:
    with pytest.raises(UnsupportedHost):
        parse_link(link)


def test_subdomains_of_allowed_hosts_are_accepted() -> None:
    parsed = parse_link("https://n-abc123.script.googleusercontent.com/macros/s/AKfy123/exec")

    assert isinstance(parsed, PreviewDescriptor)
    assert parsed.kind == "script"


@pytest.mark.parametrize(
    ("link", "kind", "preview"),
    [
        (
            "https://drive.google.com/file/d/FILE123/view?usp=sharing",
            "file",
            "https://drive.google.com/file/d/FILE123/preview",
        ),
        (
            "https://drive.google.com/open?id=FILE456",
            "file",
            "https://drive.google.com/file/d/FILE456/preview",
        ),
        (
            "https://docs.google.com/document/d/DOC1/edit",
            "document",
            "https://docs.google.com/document/d/DOC1/preview",
        ),
        (
            "https://docs.google.com/forms/d/e/FORM9/viewform",
            "form",
            "https://docs.google.com/forms/d/e/FORM9/viewform?embedded=true",
        ),
        (
            "https://lookerstudio.google.com/reporting/REP1/page/p_abc",
            "report",
            "https://lookerstudio.google.com/embed/reporting/REP1/page/p_abc",
        ),
        (
            "https://datastudio.google.com/u/0/reporting/REP2",
            "report",
            "https://lookerstudio.google.com/embed/reporting/REP2",
        ),
    ],
)
def test_non_tabular_links_become_previews(link: str, kind: str, preview: str) -> None:
    parsed = parse_link(link)

    assert isinstance(parsed, PreviewDescriptor)
    assert parsed.kind == kind
    assert parsed.preview_url == preview
    assert parsed.source_url == link


def test_published_sheet_is_preview_only() -> None:
    link = "https://docs.google.com/spreadsheets/d/e/2PACX-1vAbc/pubhtml"

    parsed = parse_link(link)

    assert isinstance(parsed, PreviewDescriptor)
    assert parsed.kind == "published_sheet"


def test_build_sheet_view_url_keeps_gid() -> None:
    descriptor = SourceDescriptor(document_id=SHEET_ID, sub_sheet_id="5")

    assert build_sheet_view_url(descriptor) == f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=5"


def test_descriptor_requires_document_id() -> None:
    with pytest.raises(ValueError):
        SourceDescriptor(document_id="")
