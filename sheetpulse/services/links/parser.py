"""Validate user-supplied addresses and turn them into typed descriptors."""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from sheetpulse.core.errors import InvalidLink, UnsupportedHost

from .models import ParsedLink, PreviewDescriptor, SourceDescriptor

DEFAULT_SCHEME = "https"

DOCUMENT_HOST = "docs.google.com"
DRIVE_HOST = "drive.google.com"
REPORT_HOST = "lookerstudio.google.com"

ALLOWED_DOMAINS: tuple[str, ...] = (
    DOCUMENT_HOST,
    DRIVE_HOST,
    "script.google.com",
    "script.googleusercontent.com",
    "forms.google.com",
    "forms.gle",
    REPORT_HOST,
    "datastudio.google.com",
)

_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_SHEET_PATH = re.compile(r"^/spreadsheets/(?:u/\d+/)?d/([a-zA-Z0-9_-]+)")
_FILE_PATH = re.compile(r"^/file/(?:u/\d+/)?d/([a-zA-Z0-9_-]+)")
_FOLDER_PATH = re.compile(r"^/drive/(?:u/\d+/)?folders/([a-zA-Z0-9_-]+)")
_DOCUMENT_PATH = re.compile(r"^/document/(?:u/\d+/)?d/([a-zA-Z0-9_-]+)")
_PRESENTATION_PATH = re.compile(r"^/presentation/(?:u/\d+/)?d/([a-zA-Z0-9_-]+)")
_FORM_PATH = re.compile(r"^/forms/(?:u/\d+/)?d/(e/)?([a-zA-Z0-9_-]+)")
_REPORT_PATH = re.compile(r"^(?:/u/\d+)?(?:/embed)?/reporting/([a-zA-Z0-9_-]+)(?:/page/([a-zA-Z0-9_-]+))?")
_SCRIPT_PATH = re.compile(r"^/macros/s/([a-zA-Z0-9_-]+)")

PUBLISHED_MARKER = "e"


def parse_link(text: str | None) -> ParsedLink:
    """Parse ``text`` into a ``SourceDescriptor`` or a ``PreviewDescriptor``.

    Raises:
        InvalidLink: The input is empty or not a parseable http(s) address.
        UnsupportedHost: The address is valid but its host is not allow-listed.
    """

    address = normalize_address(text)
    try:
        parts = urlsplit(address)
    except ValueError as exc:
        # unbalanced IPv6 brackets in the authority
        raise InvalidLink("Link is not a valid web address.") from exc
    host = _validated_host(parts)
    if not is_allowed_host(host):
        raise UnsupportedHost(host)

    match = _SHEET_PATH.match(parts.path)
    if match and match.group(1) != PUBLISHED_MARKER:
        query = parse_qs(parts.query)
        fragment = parse_qs(parts.fragment)
        gid = _pick("gid", query, fragment)
        if gid is not None and not gid.isdigit():
            gid = None
        return SourceDescriptor(
            document_id=match.group(1),
            sub_sheet_id=gid,
            tab_name=_pick("sheet", query, fragment),
            source_url=address,
        )
    return _preview_for(host, parts.path, parts.query, address)


def normalize_address(text: str | None) -> str:
    """Trim input and prepend the default scheme when it is missing."""

    address = (text or "").strip()
    if not address:
        raise InvalidLink("Please provide a Google Sheets link.")
    if any(ch.isspace() for ch in address):
        raise InvalidLink("Links cannot contain spaces.")
    if not _SCHEME_PATTERN.match(address):
        address = f"{DEFAULT_SCHEME}://{address}"
    return address


def is_allowed_host(host: str, allowed: Iterable[str] = ALLOWED_DOMAINS) -> bool:
    """Return True when ``host`` is an allow-listed domain or one of its subdomains."""

    host = host.lower().rstrip(".")
    return any(host == domain or host.endswith(f".{domain}") for domain in allowed)


def build_sheet_view_url(descriptor: SourceDescriptor) -> str:
    """Return the editor link for a spreadsheet descriptor."""

    url = f"https://{DOCUMENT_HOST}/spreadsheets/d/{quote(descriptor.document_id, safe='')}/edit"
    if descriptor.sub_sheet_id:
        url += f"#gid={descriptor.sub_sheet_id}"
    return url


def _validated_host(parts) -> str:
    if parts.scheme.lower() not in {"http", "https"}:
        raise InvalidLink(f"Unsupported link scheme: {parts.scheme}")
    try:
        parts.port
        host = (parts.hostname or "").rstrip(".")
    except ValueError as exc:
        raise InvalidLink("Link has an invalid host or port.") from exc
    if not host:
        raise InvalidLink("Link is missing a valid host name.")
    return host


def _pick(key: str, query: dict[str, list[str]], fragment: dict[str, list[str]]) -> str | None:
    for source in (query, fragment):
        values = source.get(key)
        if values and values[0].strip():
            return values[0].strip()
    return None


def _preview_for(host: str, path: str, query: str, address: str) -> PreviewDescriptor:
    if is_allowed_host(host, (DRIVE_HOST,)):
        match = _FILE_PATH.match(path)
        file_id = match.group(1) if match else None
        if file_id is None and path.rstrip("/") in {"/open", "/uc"}:
            file_id = _first(parse_qs(query).get("id"))
        if file_id:
            return PreviewDescriptor("file", f"https://{DRIVE_HOST}/file/d/{file_id}/preview", address)
        match = _FOLDER_PATH.match(path)
        if match:
            preview = f"https://{DRIVE_HOST}/embeddedfolderview?{urlencode({'id': match.group(1)})}#list"
            return PreviewDescriptor("drive", preview, address)
        return PreviewDescriptor("drive", address, address)

    if is_allowed_host(host, (DOCUMENT_HOST,)):
        if _SHEET_PATH.match(path):
            return PreviewDescriptor("published_sheet", address, address)
        match = _DOCUMENT_PATH.match(path)
        if match:
            return PreviewDescriptor("document", f"https://{DOCUMENT_HOST}/document/d/{match.group(1)}/preview", address)
        match = _PRESENTATION_PATH.match(path)
        if match:
            return PreviewDescriptor(
                "presentation", f"https://{DOCUMENT_HOST}/presentation/d/{match.group(1)}/preview", address
            )
        match = _FORM_PATH.match(path)
        if match:
            prefix = "e/" if match.group(1) else ""
            preview = f"https://{DOCUMENT_HOST}/forms/d/{prefix}{match.group(2)}/viewform?embedded=true"
            return PreviewDescriptor("form", preview, address)
        return PreviewDescriptor("other", address, address)

    if is_allowed_host(host, ("forms.gle", "forms.google.com")):
        return PreviewDescriptor("form", address, address)

    if is_allowed_host(host, (REPORT_HOST, "datastudio.google.com")):
        match = _REPORT_PATH.match(path)
        if match:
            preview = f"https://{REPORT_HOST}/embed/reporting/{match.group(1)}"
            if match.group(2):
                preview += f"/page/{match.group(2)}"
            return PreviewDescriptor("report", preview, address)
        return PreviewDescriptor("report", address, address)

    if _SCRIPT_PATH.match(path):
        return PreviewDescriptor("script", address, address)
    return PreviewDescriptor("other", address, address)


def _first(values: list[str] | None) -> str | None:
    if not values:
        return None
    return values[0].strip() or None


__all__ = [
    "ALLOWED_DOMAINS",
    "build_sheet_view_url",
    "is_allowed_host",
    "normalize_address",
    "parse_link",
]
