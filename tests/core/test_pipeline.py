from __future__ import annotations

import pytest

from sheetpulse.config import Settings
from sheetpulse.core.errors import EmptyResult, MalformedPayload
from sheetpulse.core.pipeline import StatusPipeline
from sheetpulse.services.links.models import SourceDescriptor
from sheetpulse.services.normalizer.models import PLACEHOLDER


class FakeFetcher:
    def __init__(self, text: str) -> None:
        self.text = text
        self.calls: list[SourceDescriptor] = []
        self.closed = False

    def fetch_text(self, descriptor: SourceDescriptor) -> str:
        self.calls.append(descriptor)
        return self.text

    def close(self) -> None:
        self.closed = True


def test_load_runs_fetch_decode_normalize(portfolio_text) -> None:
    fetcher = FakeFetcher(portfolio_text)
    pipeline = StatusPipeline(Settings(), fetcher=fetcher)
    descriptor = SourceDescriptor(document_id="doc")

    result = pipeline.load(descriptor)

    assert fetcher.calls == [descriptor]
    assert [record.project for record in result.records] == [
        "Township Expansion - North",
        "Digital Sales Portal",
        "CRM Data Cleansing",
        "Client Self-Service Enhancements",
    ]
    assert result.dropped_rows == 1
    first = result.records[0]
    assert first.progress == 72
    assert first.rag_status == "On Track"
    assert first.milestone == "Site utility handover"
    assert result.mapping is not None and result.mapping.missing_columns == []


def test_blank_cells_become_placeholder(gviz_text) -> None:
    text = gviz_text(["Project", "Owner", "Progress"], [["Alpha", "", "n/a"]])

    record = StatusPipeline(Settings(), fetcher=FakeFetcher(text)).load_text(text).records[0]

    assert record.owner == PLACEHOLDER
    assert record.phase == PLACEHOLDER
    assert record.progress is None


def test_no_rows_raises_empty_result(gviz_text) -> None:
    text = gviz_text(["Project"], [])

    with pytest.raises(EmptyResult):
        StatusPipeline(Settings(), fetcher=FakeFetcher(text)).load(SourceDescriptor(document_id="doc"))


def test_rows_without_project_raise_empty_result(gviz_text) -> None:
    text = gviz_text(["Project", "Owner"], [["", "Ana"], [None, "Ben"]])

    with pytest.raises(EmptyResult):
        StatusPipeline(Settings(), fetcher=FakeFetcher(text)).load_text(text)


def test_malformed_body_propagates() -> None:
    pipeline = StatusPipeline(Settings(), fetcher=FakeFetcher("<html>login</html>"))

    with pytest.raises(MalformedPayload):
        pipeline.load(SourceDescriptor(document_id="doc"))


def test_close_closes_fetcher() -> None:
    fetcher = FakeFetcher("")

    StatusPipeline(Settings(), fetcher=fetcher).close()

    assert fetcher.closed is True
