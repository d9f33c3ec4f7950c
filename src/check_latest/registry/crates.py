"""crates.io client: fetch a crate's release list and decode it into a VersionSet.

Retrieval is split in two. A transport fetches the raw response body for a
URL with a given User-Agent; decoding turns that body into model objects. The
blocking (``requests``) and awaitable (``aiohttp``) transports are
interchangeable, and decoding is shared between them.
"""
from __future__ import annotations

import json
import logging
import re
import urllib.parse
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import aiohttp

from ..common.http_client import async_safe_get, safe_get
from ..common.logging_utils import extra_context, is_debug_enabled, safe_url
from ..constants import Constants
from ..errors import DecodeError, InputError, VersionParseError
from ..versioning.models import Release, VersionSummary
from ..versioning.semver import SemanticVersion, parse_version
from ..versioning.version_set import VersionSet

logger = logging.getLogger(__name__)

CONTEXT = "crates.io"


class Transport(Protocol):
    """Blocking retrieval contract: return the response body for ``url``."""

    def fetch(self, url: str, user_agent: str) -> str:
        ...


class AsyncTransport(Protocol):
    """Awaitable retrieval contract: return the response body for ``url``."""

    async def fetch(self, url: str, user_agent: str) -> str:
        ...


class RequestsTransport:
    """Blocking transport backed by ``requests``."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout

    def fetch(self, url: str, user_agent: str) -> str:
        res = safe_get(
            url,
            context=CONTEXT,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=self.timeout,
        )
        return res.text


class AiohttpTransport:
    """Non-blocking transport backed by ``aiohttp``.

    Uses the given session when one is supplied (the caller owns it);
    otherwise opens a session per call and closes it afterwards.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        self._session = session
        self.timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout

    async def fetch(self, url: str, user_agent: str) -> str:
        headers = {"User-Agent": user_agent, "Accept": "application/json"}
        if self._session is not None:
            return await async_safe_get(self._session, url, context=CONTEXT, headers=headers)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await async_safe_get(session, url, context=CONTEXT, headers=headers)


def build_url(package_name: str, registry_url: Optional[str] = None) -> str:
    """Return the package-metadata URL for ``package_name``.

    Args:
        package_name: Crate name; it is percent-encoded as a single path segment.
        registry_url: Base of the crates API; defaults to Constants.REGISTRY_URL_CRATES.
    """
    if not package_name or not package_name.strip():
        raise InputError("package name must not be empty")
    base = registry_url or Constants.REGISTRY_URL_CRATES
    if not base.endswith("/"):
        base += "/"
    return base + urllib.parse.quote(package_name.strip(), safe="")


_FRACTION_RE = re.compile(r"(?<=\d)\.(\d+)")


def _pad_fraction(match) -> str:
    return "." + (match.group(1) + "000000")[:6]


def parse_timestamp(value: Any, *, field: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        raise DecodeError(f"Missing or non-string timestamp at '{field}'", field=field)
    text = value.strip()
    # fromisoformat only takes 3 or 6 fractional digits before Python 3.11
    text = _FRACTION_RE.sub(_pad_fraction, text, count=1)
    try:
        if text.endswith(("Z", "z")):
            parsed = datetime.fromisoformat(text[:-1]).replace(tzinfo=timezone.utc)
        else:
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise DecodeError(f"Invalid timestamp {value!r} at '{field}'", field=field) from exc
    return parsed.astimezone(timezone.utc)


def load_document(body: str) -> Dict[str, Any]:
    """Parse a response body as a JSON object."""
    try:
        document = json.loads(body)
    except (TypeError, ValueError) as exc:
        logger.warning("Couldn't decode %s response as JSON", CONTEXT)
        raise DecodeError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise DecodeError("Response JSON is not an object")
    return document


def _parse_field_version(value: Any, *, field: str) -> SemanticVersion:
    if not isinstance(value, str):
        raise DecodeError(f"Missing or non-string version at '{field}'", field=field)
    try:
        return parse_version(value)
    except VersionParseError as exc:
        raise DecodeError(f"Invalid version {value!r} at '{field}'", field=field) from exc


def _decode_release(entry: Any, index: int) -> Release:
    prefix = f"versions[{index}]"
    if not isinstance(entry, dict):
        raise DecodeError(f"'{prefix}' is not an object", field=prefix)
    yanked = entry.get("yanked", False)
    if not isinstance(yanked, bool):
        raise DecodeError(f"'{prefix}.yanked' is not a boolean", field=f"{prefix}.yanked")
    return Release(
        version=_parse_field_version(entry.get("num"), field=f"{prefix}.num"),
        published_at=parse_timestamp(entry.get("created_at"), field=f"{prefix}.created_at"),
        yanked=yanked,
    )


def decode_versions(document: Dict[str, Any]) -> VersionSet:
    """Build a VersionSet from the ``versions`` array of a crate document.

    Raises:
        DecodeError: If ``versions`` is missing or any entry is malformed.
            Entries are never skipped; one bad entry fails the whole decode.
    """
    entries = document.get("versions") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise DecodeError("Response has no 'versions' list", field="versions")
    try:
        releases: List[Release] = [_decode_release(entry, i) for i, entry in enumerate(entries)]
    except DecodeError as exc:
        logger.warning(
            "Couldn't decode %s release list: %s",
            CONTEXT,
            exc,
            extra=extra_context(event="decode", outcome="error", field=exc.field),
        )
        raise
    return VersionSet(releases)


def decode_summary(document: Dict[str, Any]) -> VersionSummary:
    """Build a VersionSummary from the ``crate`` object of a crate document."""
    crate = document.get("crate") if isinstance(document, dict) else None
    if not isinstance(crate, dict):
        raise DecodeError("Response has no 'crate' object", field="crate")
    return VersionSummary(
        max_version=_parse_field_version(crate.get("max_version"), field="crate.max_version"),
        newest_version=_parse_field_version(
            crate.get("newest_version"), field="crate.newest_version"
        ),
    )


def _fetch_document(
    package_name: str,
    user_agent: str,
    transport: Optional[Transport],
    registry_url: Optional[str],
) -> Dict[str, Any]:
    url = build_url(package_name, registry_url)
    if is_debug_enabled(logger):
        logger.debug(
            "Fetching release list",
            extra=extra_context(event="fetch", package=package_name, target=safe_url(url)),
        )
    body = (transport or RequestsTransport()).fetch(url, user_agent)
    return load_document(body)


async def _async_fetch_document(
    package_name: str,
    user_agent: str,
    transport: Optional[AsyncTransport],
    registry_url: Optional[str],
) -> Dict[str, Any]:
    url = build_url(package_name, registry_url)
    if is_debug_enabled(logger):
        logger.debug(
            "Fetching release list",
            extra=extra_context(event="fetch", package=package_name, target=safe_url(url)),
        )
    body = await (transport or AiohttpTransport()).fetch(url, user_agent)
    return load_document(body)


def get_versions(
    package_name: str,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> VersionSet:
    """Fetch and decode every published release of ``package_name``.

    crates.io rejects requests without a User-Agent that identifies the
    calling program, so ``user_agent`` should name it (e.g. ``"my-tool/1.0.0"``).

    Raises:
        TransportError: The request failed or returned a non-2xx status.
        DecodeError: The response could not be decoded into releases.
    """
    document = _fetch_document(package_name, user_agent, transport, registry_url)
    versions = decode_versions(document)
    logger.debug("Decoded %d releases for %s", len(versions), package_name)
    return versions


async def async_get_versions(
    package_name: str,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> VersionSet:
    """Awaitable form of get_versions."""
    document = await _async_fetch_document(package_name, user_agent, transport, registry_url)
    versions = decode_versions(document)
    logger.debug("Decoded %d releases for %s", len(versions), package_name)
    return versions


def get_summary(
    package_name: str,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> VersionSummary:
    """Fetch the registry's own max/newest version summary for ``package_name``."""
    document = _fetch_document(package_name, user_agent, transport, registry_url)
    return decode_summary(document)


async def async_get_summary(
    package_name: str,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> VersionSummary:
    """Awaitable form of get_summary."""
    document = await _async_fetch_document(package_name, user_agent, transport, registry_url)
    return decode_summary(document)
