"""Pick the next NuGet version to propose for a dependency."""

import logging
from typing import Iterable, List, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled

from .advisory import SecurityAdvisory
from .filters import (
    filter_ignored_versions,
    filter_lower_versions,
    filter_prereleases,
    filter_vulnerable_versions,
)
from .listing import ListingAggregator
from .models import Dependency, FeedSource, FinderConfig, VersionRecord

logger = logging.getLogger(__name__)

_UNSET = object()


class VersionFinder:
    """Resolve the latest and lowest-secure versions for one dependency.

    An instance serves a single resolution request: the feed listing and
    both answers are computed at most once and then returned from the
    instance cache.
    """

    def __init__(
        self,
        dependency: Dependency,
        sources: Sequence[FeedSource],
        ignored_versions: Iterable[str] = (),
        security_advisories: Iterable[SecurityAdvisory] = (),
        raise_on_ignored: bool = False,
        config: Optional[FinderConfig] = None,
    ):
        self.dependency = dependency
        self.sources = list(sources)
        self.ignored_versions = list(ignored_versions)
        self.security_advisories = list(security_advisories)
        self.raise_on_ignored = raise_on_ignored
        self.config = config or FinderConfig.from_env()

        self._versions = _UNSET
        self._latest_version_details = _UNSET
        self._lowest_security_fix_version_details = _UNSET

    def versions(self) -> List[VersionRecord]:
        """All records published by every configured source."""
        if self._versions is _UNSET:
            aggregator = ListingAggregator(self.dependency.name, self.sources, self.config)
            self._versions = aggregator.collect()
        return self._versions

    def latest_version_details(self) -> Optional[VersionRecord]:
        """Highest version passing the prerelease and ignore filters."""
        if self._latest_version_details is _UNSET:
            possible = self.versions()
            possible = filter_prereleases(possible, self.dependency)
            possible = filter_ignored_versions(possible, self.ignored_versions, self.raise_on_ignored)
            self._latest_version_details = max(possible, key=lambda r: r.version, default=None)
            self._log_selection("latest_version", self._latest_version_details)
        return self._latest_version_details

    def lowest_security_fix_version_details(self) -> Optional[VersionRecord]:
        """Lowest non-vulnerable version newer than the current one."""
        if self._lowest_security_fix_version_details is _UNSET:
            possible = self.versions()
            possible = filter_prereleases(possible, self.dependency)
            possible = filter_ignored_versions(possible, self.ignored_versions, self.raise_on_ignored)
            possible = filter_vulnerable_versions(possible, self.security_advisories)
            possible = filter_lower_versions(possible, self.dependency.version)
            self._lowest_security_fix_version_details = min(possible, key=lambda r: r.version, default=None)
            self._log_selection("lowest_security_fix_version", self._lowest_security_fix_version_details)
        return self._lowest_security_fix_version_details

    def latest_version(self):
        """Version value of latest_version_details, or None."""
        details = self.latest_version_details()
        return details.version if details else None

    def lowest_security_fix_version(self):
        """Version value of lowest_security_fix_version_details, or None."""
        details = self.lowest_security_fix_version_details()
        return details.version if details else None

    def _log_selection(self, action: str, record: Optional[VersionRecord]) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Version selected" if record else "No eligible version",
                extra=extra_context(
                    event="decision",
                    component="finder",
                    action=action,
                    outcome="selected" if record else "none",
                    target=self.dependency.name,
                    version=str(record.version) if record else None,
                    repository_url=record.repository_url if record else None,
                    package_manager="nuget",
                ),
            )
