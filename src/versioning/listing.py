"""Aggregate version listings across every configured NuGet feed."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled, Timer
from constants import Constants, RepositoryType
from registry.nuget import client as nuget_client
from registry.nuget import discovery as nuget_discovery

from .models import FeedSource, FinderConfig, VersionRecord
from .version import parse_version

logger = logging.getLogger(__name__)

_INDEX_JSON = re.compile(r"index\.json$")


def manifest_url_for(versions_url: str, version: str, package_name: str) -> str:
    """Nuspec location of ``version``, derived from the flat-container index URL."""
    filename = Constants.NUSPEC_FILENAME.format(name=package_name.lower())
    return _INDEX_JSON.sub(lambda _: f"{version}/{filename}", versions_url)


class ListingAggregator:
    """Collect VersionRecords for one package from V3 and V2 sources.

    A source that answers without a listing contributes nothing; any other
    failure propagates and aborts the whole aggregation.
    """

    def __init__(self, package_name: str, sources: Sequence[FeedSource], config: Optional[FinderConfig] = None):
        self.package_name = package_name
        self.sources = list(sources)
        self.config = config or FinderConfig.from_env()

    def v3_records(self, source: FeedSource) -> List[VersionRecord]:
        """Records from a single V3 source."""
        raw_versions = nuget_client.fetch_v3_versions(
            source,
            self.package_name,
            default_repository_url=self.config.default_repository_url,
            timeout=self.config.timeout,
        )
        if not raw_versions:
            return []

        records = []
        for raw in raw_versions:
            try:
                version = parse_version(raw)
            except ValueError:
                self._log_skipped(raw, source)
                continue
            manifest_url = (
                manifest_url_for(source.versions_url, raw, self.package_name)
                if source.versions_url else None
            )
            records.append(VersionRecord(
                version=version,
                repository_url=source.repository_url,
                manifest_url=manifest_url,
                source_url=None,
            ))
        return records

    def v2_records(self, source: FeedSource) -> List[VersionRecord]:
        """Records from a single V2 source."""
        listing = nuget_client.fetch_v2_listing(source, timeout=self.config.timeout)
        if listing is None:
            return []
        return nuget_discovery.parse_v2_entries(listing.body, listing.source.repository_url)

    def _fetcher_for(self, source: FeedSource) -> Callable[[FeedSource], List[VersionRecord]]:
        if source.repository_type is RepositoryType.V3:
            return self.v3_records
        return self.v2_records

    def collect(self) -> List[VersionRecord]:
        """Fetch every source and concatenate the results.

        V3 sources come first, then V2 sources, each in configuration order.
        With ``max_workers`` above one the fetches run concurrently, but
        results are only returned once every source has finished.
        """
        ordered = (
            [s for s in self.sources if s.repository_type is RepositoryType.V3]
            + [s for s in self.sources if s.repository_type is RepositoryType.V2]
        )

        with Timer() as t:
            if self.config.max_workers > 1 and len(ordered) > 1:
                with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                    futures = [executor.submit(self._fetcher_for(s), s) for s in ordered]
                    per_source = [future.result() for future in futures]
            else:
                per_source = [self._fetcher_for(s)(s) for s in ordered]

        records = [record for chunk in per_source for record in chunk]
        logger.info(
            "Collected %d versions for %s from %d sources",
            len(records),
            self.package_name,
            len(ordered),
            extra=extra_context(
                event="aggregate",
                component="listing",
                action="collect",
                outcome="success",
                count=len(records),
                duration_ms=t.duration_ms(),
                target=self.package_name,
                package_manager="nuget",
            ),
        )
        return records

    def _log_skipped(self, raw: str, source: FeedSource) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Skipping unparseable version",
                extra=extra_context(
                    event="decision",
                    component="listing",
                    action="parse_version",
                    outcome="skipped",
                    target=raw,
                    repository_url=source.repository_url,
                    package_manager="nuget",
                ),
            )
