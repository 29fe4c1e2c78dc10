"""Dashboard session state and its named transitions.

All mutations of the loaded records and the filter state go through
``load_succeeded``, ``load_failed``, ``filter_changed``, ``query_changed`` and
``reset``. Every transition re-renders from scratch through the ``Renderer``.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from sheetpulse.render.base import NullRenderer, Renderer
from sheetpulse.services.filtering.engine import FilterState, apply_filters, filter_options
from sheetpulse.services.links.models import ParsedLink, PreviewDescriptor, SourceDescriptor
from sheetpulse.services.links.parser import build_sheet_view_url, parse_link
from sheetpulse.services.normalizer.models import ProjectRecord
from sheetpulse.services.status.aggregate import EMPTY_KPIS, KpiSnapshot, compute_kpis
from sheetpulse.services.status.classifier import StatusClassifier
from sheetpulse_persist.stores.base_store import StoreError
from sheetpulse_persist.stores.source_store import SourceStore

from .errors import (
    EmptyResult,
    HttpError,
    InvalidLink,
    MalformedPayload,
    NetworkError,
    SheetPulseError,
    UnsupportedHost,
)
from .logger import get_logger
from .pipeline import StatusPipeline


@dataclass(frozen=True)
class DashboardState:
    source: SourceDescriptor | None = None
    records: tuple[ProjectRecord, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    feedback: str = ""


def describe_error(error: BaseException) -> str:
    """User-facing feedback for a failed parse or load."""

    if isinstance(error, InvalidLink):
        return str(error) or "Please provide a valid Google Sheets URL."
    if isinstance(error, UnsupportedHost):
        return f"Links from {error.host} are not supported. Use a Google Sheets, Drive, Forms or Looker Studio link."
    if isinstance(error, HttpError):
        if error.status in {401, 403}:
            return f"The sheet is not shared publicly (HTTP {error.status}). Share it as 'Anyone with the link' and retry."
        if error.status == 404:
            return "The sheet could not be found (HTTP 404). Check the link and try again."
        return f"The spreadsheet service returned HTTP {error.status}. Try again later."
    if isinstance(error, NetworkError):
        return f"Network problem while loading the sheet: {error}"
    if isinstance(error, MalformedPayload):
        return "The sheet response could not be read. Make sure the link points to a spreadsheet tab."
    if isinstance(error, EmptyResult):
        return "The sheet has no project rows. Add at least one row with a project name."
    return f"Unable to load project status: {error}"


class DashboardController:
    """Owns the session state for one dashboard."""

    def __init__(
        self,
        pipeline: StatusPipeline,
        renderer: Renderer | None = None,
        *,
        store: SourceStore | None = None,
        classifier: StatusClassifier | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.renderer = renderer or NullRenderer()
        self.store = store
        self.classifier = classifier or StatusClassifier(pipeline.settings.status_keywords)
        self.logger = logger or get_logger()
        self._state = DashboardState()
        self._lock = threading.RLock()
        self._generation = 0
        self._executor: ThreadPoolExecutor | None = None
        self._pending: Future | None = None

    # Read-only views -------------------------------------------------

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def visible_records(self) -> list[ProjectRecord]:
        state = self._state
        return apply_filters(state.records, state.filters)

    @property
    def kpis(self) -> KpiSnapshot:
        return compute_kpis(self.visible_records, self.classifier)

    # User events -----------------------------------------------------

    def start(self) -> ParsedLink | None:
        """Restore the saved source (or the configured default) and load it."""

        address = self._read_saved_address() or self.pipeline.settings.default_link
        if not address:
            self.load_failed(InvalidLink("No sheet source configured yet. Provide a Google Sheets link."))
            return None
        try:
            parsed = parse_link(address)
        except SheetPulseError as exc:
            self.logger.warning("controller.start ignoring saved source error=%s", type(exc).__name__)
            self.load_failed(exc)
            return None
        if isinstance(parsed, SourceDescriptor):
            self.load(parsed)
        else:
            self._show_preview(parsed)
        return parsed

    def submit_link(self, text: str) -> ParsedLink | None:
        """Parse user input, remember it, and load it when it is a sheet."""

        try:
            parsed = parse_link(text)
        except SheetPulseError as exc:
            self.logger.info("controller.submit rejected error=%s", type(exc).__name__)
            self.load_failed(exc)
            return None

        self._save_address(parsed.source_url)
        if isinstance(parsed, PreviewDescriptor):
            self._show_preview(parsed)
            return parsed

        self._set_feedback("Sheet source saved. Reloading project status from your provided link...")
        self.load(parsed)
        return parsed

    def load(self, descriptor: SourceDescriptor) -> bool:
        """Synchronously load ``descriptor``; returns True when rows were rendered."""

        generation = self._begin_load()
        try:
            result = self.pipeline.load(descriptor)
        except SheetPulseError as exc:
            return self.load_failed(exc, generation=generation)
        return self.load_succeeded(result.records, source=descriptor, generation=generation)

    def load_in_background(self, descriptor: SourceDescriptor) -> Future:
        """Run ``load`` on a worker thread, cancelling any superseded load."""

        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="sheetpulse-load")
            if self._pending is not None and not self._pending.done():
                cancelled = self._pending.cancel()
                self.logger.info("controller.load superseded cancelled=%s", cancelled)
            generation = self._begin_load()
            future = self._executor.submit(self._load_generation, descriptor, generation)
            self._pending = future
            return future

    # Transitions -----------------------------------------------------

    def load_succeeded(
        self,
        records: list[ProjectRecord],
        *,
        source: SourceDescriptor | None = None,
        generation: int | None = None,
    ) -> bool:
        with self._lock:
            if self._is_stale(generation):
                return False
            feedback = f"Loaded {len(records)} projects."
            if source is not None:
                feedback += f" Source: {build_sheet_view_url(source)}"
            self._state = DashboardState(
                source=source or self._state.source,
                records=tuple(records),
                filters=FilterState(),
                feedback=feedback,
            )
            self._render()
            return True

    def load_failed(self, error: BaseException, *, generation: int | None = None) -> bool:
        with self._lock:
            if self._is_stale(generation):
                return False
            self.logger.warning("controller.load_failed error=%s detail=%s", type(error).__name__, error)
            self._state = DashboardState(source=self._state.source, feedback=describe_error(error))
            self._render()
            return False

    def filter_changed(self, name: str, value: str | None) -> None:
        with self._lock:
            filters = self._state.filters.with_selection(name, value)
            self._state = DashboardState(
                source=self._state.source,
                records=self._state.records,
                filters=filters,
                feedback=self._state.feedback,
            )
            self._render()

    def query_changed(self, text: str | None) -> None:
        with self._lock:
            filters = self._state.filters.with_query(text)
            self._state = DashboardState(
                source=self._state.source,
                records=self._state.records,
                filters=filters,
                feedback=self._state.feedback,
            )
            self._render()

    def reset(self) -> None:
        """Clear every filter selection and the search query."""

        with self._lock:
            self._state = DashboardState(
                source=self._state.source,
                records=self._state.records,
                filters=FilterState(),
                feedback="Filters cleared.",
            )
            self._render()

    def refresh(self) -> None:
        """Re-render the current state without changing it."""

        with self._lock:
            self._render()

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True, cancel_futures=True)
        self.pipeline.close()

    # Internal helpers ------------------------------------------------

    def _load_generation(self, descriptor: SourceDescriptor, generation: int) -> bool:
        try:
            result = self.pipeline.load(descriptor)
        except SheetPulseError as exc:
            return self.load_failed(exc, generation=generation)
        return self.load_succeeded(result.records, source=descriptor, generation=generation)

    def _begin_load(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _is_stale(self, generation: int | None) -> bool:
        if generation is not None and generation != self._generation:
            self.logger.info("controller.load stale generation=%d current=%d", generation, self._generation)
            return True
        return False

    def _render(self) -> None:
        state = self._state
        if not state.records:
            self.renderer.render_kpis(EMPTY_KPIS)
            self.renderer.render_table(None)
            self.renderer.render_filter_options(filter_options((), state.filters))
            self.renderer.render_feedback(state.feedback)
            return
        visible = apply_filters(state.records, state.filters)
        self.renderer.render_kpis(compute_kpis(visible, self.classifier))
        self.renderer.render_table(visible if visible else None)
        self.renderer.render_filter_options(filter_options(state.records, state.filters))
        self.renderer.render_feedback(state.feedback)

    def _set_feedback(self, message: str) -> None:
        with self._lock:
            self._state = DashboardState(
                source=self._state.source,
                records=self._state.records,
                filters=self._state.filters,
                feedback=message,
            )
        self.renderer.render_feedback(message)

    def _show_preview(self, preview: PreviewDescriptor) -> None:
        message = f"This {preview.kind.replace('_', ' ')} link has no tabular data. Preview: {preview.preview_url}"
        with self._lock:
            self._generation += 1
            self._state = DashboardState(feedback=message)
            self._render()

    def _read_saved_address(self) -> str | None:
        if self.store is None:
            return None
        return self.store.read_last_source()

    def _save_address(self, address: str) -> None:
        if self.store is None:
            return
        try:
            self.store.save_last_source(address)
        except StoreError as exc:
            self.logger.warning("controller.save_source failed error=%s", exc)


__all__ = ["DashboardController", "DashboardState", "describe_error"]
