"""NuGet V2 feed parsing: turn an OData/Atom listing into version records."""

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from repository.url_normalize import first_source_url
from versioning.errors import FeedParseError
from versioning.models import VersionRecord
from versioning.version import parse_version

logger = logging.getLogger(__name__)


def _strip_namespaces(root: ET.Element) -> ET.Element:
    """Drop ``{uri}`` prefixes from every tag so plain paths work."""
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]
    return root


def _property_text(entry: ET.Element, name: str) -> Optional[str]:
    node = entry.find(f"properties/{name}")
    if node is None:
        return None
    return node.text or ""


def _is_unlisted(entry: ET.Element) -> bool:
    listed = _property_text(entry, "Listed")
    return listed is not None and listed.strip().lower() == "false"


def _extract_source_url(entry: ET.Element) -> Optional[str]:
    """First recognized source repository URL in ProjectUrl / ReleaseNotes."""
    texts = [_property_text(entry, "ProjectUrl"), _property_text(entry, "ReleaseNotes")]
    return first_source_url(" ".join(t for t in texts if t is not None))


def parse_v2_entries(body: str, repository_url: str) -> List[VersionRecord]:
    """Parse a V2 feed body into version records.

    Unlisted entries are dropped. Entries whose version string cannot be
    parsed are skipped.

    Args:
        body: Raw XML of the ``/feed`` document
        repository_url: Identifying URL of the feed source

    Returns:
        List of VersionRecord in document order

    Raises:
        FeedParseError: The XML is malformed or an entry has no (or an empty) Version
    """
    try:
        root = _strip_namespaces(ET.fromstring(body))
    except ET.ParseError as exc:
        raise FeedParseError(repository_url, f"invalid XML ({exc})") from exc

    if root.tag != "feed":
        return []

    records: List[VersionRecord] = []
    for entry in root.findall("entry"):
        if _is_unlisted(entry):
            continue

        raw_version = (_property_text(entry, "Version") or "").strip()
        if not raw_version:
            raise FeedParseError(repository_url, "entry without a Version property")

        try:
            version = parse_version(raw_version)
        except ValueError:
            if is_debug_enabled(logger):
                logger.debug("Skipping unparseable version", extra=extra_context(
                    event="decision", component="discovery", action="parse_v2_entries",
                    target=raw_version, outcome="skipped", package_manager="nuget"
                ))
            continue

        records.append(VersionRecord(
            version=version,
            repository_url=repository_url,
            manifest_url=None,
            source_url=_extract_source_url(entry),
        ))

    if is_debug_enabled(logger):
        logger.debug("Parsed V2 feed", extra=extra_context(
            event="function_exit", component="discovery", action="parse_v2_entries",
            count=len(records), repository_url=repository_url, package_manager="nuget"
        ))
    return records
