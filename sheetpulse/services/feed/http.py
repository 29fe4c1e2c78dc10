"""HTTP access to the spreadsheet tabular export endpoint."""

from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import quote, urlencode

import requests
from requests.exceptions import RequestException, Timeout

from sheetpulse.config import Settings
from sheetpulse.core.errors import HttpError, NetworkError
from sheetpulse.core.logger import get_logger
from sheetpulse.services.links.models import SourceDescriptor

EXPORT_BASE_URL = "https://docs.google.com/spreadsheets/d"
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
    "Accept": "application/json, text/javascript, */*",
}


def build_export_url(
    descriptor: SourceDescriptor,
    *,
    default_tab: str | None = None,
    base_url: str = EXPORT_BASE_URL,
) -> str:
    """Return the gviz export address for ``descriptor``.

    ``gid`` wins over ``sheet``; ``default_tab`` only applies when the link
    selected neither.
    """

    params = {"tqx": "out:json", "headers": "1"}
    if descriptor.sub_sheet_id:
        params["gid"] = descriptor.sub_sheet_id
    elif descriptor.tab_name:
        params["sheet"] = descriptor.tab_name
    elif default_tab:
        params["sheet"] = default_tab
    document = quote(descriptor.document_id, safe="")
    return f"{base_url.rstrip('/')}/{document}/gviz/tq?{urlencode(params)}"


class FeedFetcher:
    """Single-shot reader for the tabular export feed.

    Never retries; retry policy belongs to the caller.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._session.verify = self._settings.verify_tls
        self._session.trust_env = self._settings.trust_env
        if self._settings.proxies:
            self._session.proxies.update(self._settings.proxies)
        self._session.headers.setdefault("User-Agent", self._settings.user_agent)
        self._logger = logger or get_logger()

    def export_url(self, descriptor: SourceDescriptor) -> str:
        return build_export_url(descriptor, default_tab=self._settings.default_tab)

    def fetch_text(self, descriptor: SourceDescriptor, *, headers: Mapping[str, str] | None = None) -> str:
        """Fetch the raw feed body for ``descriptor``.

        Raises:
            HttpError: The endpoint answered with a non-success status.
            NetworkError: The transport failed (timeout, DNS, refused, TLS).
        """

        url = self.export_url(descriptor)
        request_headers = dict(NO_CACHE_HEADERS)
        request_headers.update(headers or {})
        self._logger.info("feed.fetch document=%s url=%s", descriptor.document_id, url)
        try:
            response = self._session.get(url, headers=request_headers, timeout=self._settings.timeout_sec)
        except Timeout as exc:
            self._logger.warning("feed.fetch timeout document=%s", descriptor.document_id)
            raise NetworkError("Timed out while contacting the spreadsheet service.") from exc
        except RequestException as exc:
            self._logger.warning(
                "feed.fetch connection_error document=%s error=%s",
                descriptor.document_id,
                type(exc).__name__,
            )
            raise NetworkError(f"Unable to reach the spreadsheet service ({type(exc).__name__}).") from exc

        status = response.status_code
        if not 200 <= status < 300:
            self._logger.warning("feed.fetch http_error document=%s status=%d", descriptor.document_id, status)
            raise HttpError(status, url=url)
        if not response.encoding:
            response.encoding = "utf-8"
        text = response.text
        self._logger.debug("feed.fetch ok document=%s bytes=%d", descriptor.document_id, len(text))
        return text

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["FeedFetcher", "build_export_url", "EXPORT_BASE_URL"]
