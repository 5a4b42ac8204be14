"""NuGet feed clients: version listings from V3 (JSON) and V2 (OData XML) feeds."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from constants import Constants, RepositoryType
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from versioning.errors import FeedParseError, PrivateSourceTimedOut
from versioning.models import FeedSource

import registry.nuget as nuget_pkg

logger = logging.getLogger(__name__)

# Some feeds wrap their JSON in zero-width characters or a BOM
_LEADING_ZERO_WIDTH = re.compile(r"\A[\u200B-\u200D\uFEFF]")
_TRAILING_ZERO_WIDTH = re.compile(r"[\u200B-\u200D\uFEFF]\Z")


@dataclass(frozen=True)
class V2Listing:
    """Raw body of a V2 feed response, paired with the source it came from."""
    body: str
    source: FeedSource


def remove_wrapping_zero_width_chars(text: str) -> str:
    """Strip one leading and one trailing zero-width character or BOM."""
    text = _LEADING_ZERO_WIDTH.sub("", text)
    return _TRAILING_ZERO_WIDTH.sub("", text)


def _request_headers(source: FeedSource, accept: Dict[str, str]) -> Dict[str, str]:
    headers = dict(accept)
    if source.auth_header:
        headers.update(source.auth_header)
    return headers


def _load_json(text: str, source: FeedSource) -> Any:
    try:
        return json.loads(remove_wrapping_zero_width_chars(text))
    except ValueError as exc:
        raise FeedParseError(source.repository_url, f"invalid JSON ({exc})") from exc


def _log_absent(source: FeedSource, url: str, status_code: int) -> None:
    logger.info(
        "NuGet feed returned no listing",
        extra=extra_context(
            event="http_response",
            component="client",
            outcome="absent",
            status_code=status_code,
            target=safe_url(url),
            repository_url=source.repository_url,
            package_manager="nuget",
        ),
    )


def _versions_from_search(data: Any, package_name: str, source: FeedSource) -> Optional[List[str]]:
    try:
        entries = data["data"]
        wanted = package_name.lower()
        match = next((d for d in entries if d["id"].lower() == wanted), None)
        if match is None:
            return None
        return [v["version"] for v in match["versions"]]
    except (KeyError, TypeError, AttributeError) as exc:
        raise FeedParseError(source.repository_url, f"unexpected search payload ({exc!r})") from exc


def fetch_v3_versions_from_search(
    source: FeedSource,
    package_name: str,
    *,
    default_repository_url: str = Constants.DEFAULT_REPOSITORY_URL,
    timeout: Optional[Tuple[float, float]] = None,
) -> Optional[List[str]]:
    """Query a V3 search endpoint; the search service omits unlisted versions.

    Raises:
        PrivateSourceTimedOut: A non-default source timed out or refused the connection.
        requests.RequestException: The default source failed at the transport level.
    """
    url = source.search_url
    try:
        res = nuget_pkg.safe_get(
            url,
            context="nuget-v3-search",
            headers=_request_headers(source, Constants.HEADERS_JSON),
            timeout=timeout,
        )
    except (requests.Timeout, requests.ConnectionError):
        if source.repository_url == default_repository_url:
            raise
        raise PrivateSourceTimedOut(source.repository_url)

    if res.status_code != 200:
        _log_absent(source, url, res.status_code)
        return None

    versions = _versions_from_search(_load_json(res.text, source), package_name, source)
    if versions is None and is_debug_enabled(logger):
        logger.debug(
            "Package not present in search results",
            extra=extra_context(
                event="decision",
                component="client",
                action="search",
                outcome="not_found",
                target=package_name,
                repository_url=source.repository_url,
                package_manager="nuget",
            ),
        )
    return versions


def fetch_v3_versions_from_index(
    source: FeedSource,
    *,
    timeout: Optional[Tuple[float, float]] = None,
) -> Optional[List[str]]:
    """Read the flat-container ``versions`` array of a V3 feed."""
    url = source.versions_url
    res = nuget_pkg.safe_get(
        url,
        context="nuget-v3",
        headers=_request_headers(source, Constants.HEADERS_JSON),
        timeout=timeout,
    )
    if res.status_code != 200:
        _log_absent(source, url, res.status_code)
        return None

    data = _load_json(res.text, source)
    try:
        return list(data["versions"])
    except (KeyError, TypeError) as exc:
        raise FeedParseError(source.repository_url, "missing 'versions' array") from exc


def fetch_v3_versions(
    source: FeedSource,
    package_name: str,
    *,
    default_repository_url: str = Constants.DEFAULT_REPOSITORY_URL,
    timeout: Optional[Tuple[float, float]] = None,
) -> Optional[List[str]]:
    """Fetch raw version strings from a V3 feed.

    Prefers the search endpoint and falls back to the versions index when
    the source does not expose one.

    Args:
        source: V3 feed source
        package_name: Package identifier (matched case-insensitively)
        default_repository_url: URL of the public registry whose timeouts stay generic
        timeout: (connect, read) timeout pair

    Returns:
        List of version strings, or None when the source has no listing
    """
    if source.repository_type is not RepositoryType.V3:
        raise ValueError(f"Expected a v3 source, got {source.repository_type.value}")
    if source.search_url:
        return fetch_v3_versions_from_search(
            source,
            package_name,
            default_repository_url=default_repository_url,
            timeout=timeout,
        )
    if source.versions_url:
        return fetch_v3_versions_from_index(source, timeout=timeout)
    return None


def fetch_v2_listing(
    source: FeedSource,
    *,
    timeout: Optional[Tuple[float, float]] = None,
) -> Optional[V2Listing]:
    """Fetch the OData/Atom listing of a V2 feed without parsing it.

    Returns:
        V2Listing with the raw body, or None on a non-success status
    """
    if source.repository_type is not RepositoryType.V2:
        raise ValueError(f"Expected a v2 source, got {source.repository_type.value}")
    if not source.versions_url:
        return None
    url = source.versions_url
    res = nuget_pkg.safe_get(
        url,
        context="nuget-v2",
        headers=_request_headers(source, Constants.HEADERS_XML),
        timeout=timeout,
    )
    if res.status_code != 200:
        _log_absent(source, url, res.status_code)
        return None
    return V2Listing(body=res.text, source=source)
