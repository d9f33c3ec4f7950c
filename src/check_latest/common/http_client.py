"""Shared HTTP helpers used by the registry transports.

Encapsulates request/timeout error handling so the blocking and awaitable
transports report failures the same way: every failure becomes a
``TransportError`` carrying the URL and, when known, the status code.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
import requests

from ..constants import Constants
from ..errors import TransportError
from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _check_status(status_code: int, url: str, context: str) -> None:
    """Raise TransportError for any non-2xx status."""
    if 200 <= status_code < 300:
        return
    logger.warning(
        "%s request returned HTTP %s",
        context,
        status_code,
        extra=extra_context(
            event="http_response",
            component="http_client",
            outcome="non_2xx",
            status_code=status_code,
            target=safe_url(url),
            context=context,
        ),
    )
    raise TransportError(
        f"{context} request to {safe_url(url)} failed with HTTP {status_code}",
        url=url,
        status_code=status_code,
    )


def safe_get(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a blocking GET request with consistent error handling.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "crates.io").
        headers: Optional request headers.
        timeout: Seconds before giving up; defaults to Constants.REQUEST_TIMEOUT.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: A response with a 2xx status.

    Raises:
        TransportError: On timeout, connection failure, or non-2xx status.
    """
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = requests.get(url, timeout=timeout, headers=headers, **kwargs)
        except requests.Timeout as exc:
            logger.warning("%s request timed out after %s seconds", context, timeout)
            raise TransportError(
                f"{context} request to {safe_target} timed out after {timeout} seconds",
                url=url,
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning("%s connection error: %s", context, exc)
            raise TransportError(
                f"{context} request to {safe_target} failed: {exc}",
                url=url,
            ) from exc

    _check_status(res.status_code, url, context)
    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )
    return res


async def async_safe_get(
    session: aiohttp.ClientSession,
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
) -> str:
    """Perform a GET request on an aiohttp session and return the body text.

    Args:
        session: Open client session; its timeout settings apply.
        url: Target URL.
        context: Human-readable source tag for logs.
        headers: Optional request headers.

    Returns:
        str: The response body of a 2xx response.

    Raises:
        TransportError: On timeout, client error, or non-2xx status.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            async with session.get(url, headers=headers) as response:
                status_code = response.status
                _check_status(status_code, url, context)
                body = await response.text()
        except TransportError:
            raise
        except asyncio.TimeoutError as exc:
            logger.warning("%s request timed out", context)
            raise TransportError(
                f"{context} request to {safe_target} timed out",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            logger.warning("%s connection error: %s", context, exc)
            raise TransportError(
                f"{context} request to {safe_target} failed: {exc}",
                url=url,
            ) from exc

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )
    return body
