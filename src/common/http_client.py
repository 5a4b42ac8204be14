"""Shared HTTP helpers used by the NuGet feed clients.

Encapsulates the request timeout and DEBUG tracing so feed modules avoid
duplicating them. Transport failures are logged and re-raised; callers
decide whether a given failure is fatal or attributable to a source.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (Constants.CONNECT_TIMEOUT, Constants.READ_TIMEOUT)


def safe_get(
    url: str,
    *,
    context: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[Tuple[float, float]] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with a bounded timeout and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "nuget-v3").
        headers: Optional request headers, including any feed auth header.
        timeout: (connect, read) timeout pair in seconds.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        requests.Timeout: The connect or read timeout elapsed.
        requests.RequestException: Any other transport failure.
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
                    context=context
                )
            )
        try:
            res = requests.get(
                url,
                headers=dict(headers) if headers else None,
                timeout=timeout or DEFAULT_TIMEOUT,
                **kwargs
            )
        except requests.Timeout:
            logger.warning(
                "%s request timed out",
                context,
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="timeout",
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
            raise
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning(
                "%s connection error: %s",
                context,
                exc,
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="request_exception",
                    target=safe_target,
                    context=context
                )
            )
            raise
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == 200 else "non_success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res
