from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sheetpulse.config import Settings
from sheetpulse.services.feed.decoder import decode_text
from sheetpulse.services.feed.http import FeedFetcher
from sheetpulse.services.feed.models import ColumnDescriptor
from sheetpulse.services.links.models import SourceDescriptor
from sheetpulse.services.normalizer.mapping import (
    AliasTable,
    MappingReport,
    build_alias_table,
    describe_mapping,
    normalize_rows,
)
from sheetpulse.services.normalizer.models import ProjectRecord

from .errors import EmptyResult
from .logger import get_logger


@dataclass
class LoadResult:
    descriptor: SourceDescriptor | None
    records: list[ProjectRecord]
    columns: list[ColumnDescriptor] = field(default_factory=list)
    mapping: MappingReport | None = None
    dropped_rows: int = 0


class StatusPipeline:
    """Coordinates Fetch -> Decode -> Normalize for one source."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        fetcher: FeedFetcher | None = None,
        alias_table: AliasTable | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.logger = logger or get_logger()
        self.fetcher = fetcher or FeedFetcher(self.settings, logger=self.logger)
        self.alias_table = alias_table or build_alias_table(self.settings.mapping_path)

    def load(self, descriptor: SourceDescriptor) -> LoadResult:
        """Fetch and normalize ``descriptor``'s rows.

        Raises:
            HttpError, NetworkError: The fetch failed.
            MalformedPayload: The body could not be decoded.
            EmptyResult: No row carried a usable project name.
        """

        text = self.fetcher.fetch_text(descriptor)
        return self.load_text(text, descriptor=descriptor)

    def load_text(self, text: str, *, descriptor: SourceDescriptor | None = None) -> LoadResult:
        """Decode and normalize an already-fetched feed body."""

        table = decode_text(text)
        report = describe_mapping(table.keys, self.alias_table)
        if report.missing_columns:
            self.logger.warning("pipeline.mapping missing=%s", ",".join(report.missing_columns))
        records = normalize_rows(table.rows, self.alias_table)
        dropped = len(table.rows) - len(records)
        self.logger.info(
            "pipeline.load rows=%d records=%d dropped=%d",
            len(table.rows),
            len(records),
            dropped,
        )
        if not records:
            raise EmptyResult("No rows from Google Sheet")
        return LoadResult(
            descriptor=descriptor,
            records=records,
            columns=table.columns,
            mapping=report,
            dropped_rows=dropped,
        )

    def close(self) -> None:
        self.fetcher.close()
