"""Data models for NuGet version resolution."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from constants import Constants, RepositoryType

from .version import NuGetVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSource:
    """A configured package feed, as produced by the feed locator."""
    repository_type: RepositoryType
    versions_url: Optional[str]
    repository_url: str
    search_url: Optional[str] = None
    auth_header: Optional[Mapping[str, str]] = None


@dataclass(frozen=True)
class VersionRecord:
    """One published version, normalized across feed protocols."""
    version: NuGetVersion
    repository_url: str
    manifest_url: Optional[str] = None  # v3 only
    source_url: Optional[str] = None  # v2 only


@dataclass(frozen=True)
class Dependency:
    """The dependency being updated."""
    name: str
    version: Optional[str] = None
    requirements: Tuple[Optional[str], ...] = ()


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid value for %s: %r", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive value for %s: %r", name, raw)
        return default
    return value


@dataclass(frozen=True)
class FinderConfig:
    """Runtime tunables for one resolution request."""
    default_repository_url: str = Constants.DEFAULT_REPOSITORY_URL
    connect_timeout: float = Constants.CONNECT_TIMEOUT
    read_timeout: float = Constants.READ_TIMEOUT
    max_workers: int = Constants.MAX_WORKERS

    @property
    def timeout(self) -> Tuple[float, float]:
        """(connect, read) pair handed to requests."""
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, **overrides) -> "FinderConfig":
        """Build a config from NUGET_FINDER_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        values = {
            "connect_timeout": _env_number(Constants.ENV_CONNECT_TIMEOUT, Constants.CONNECT_TIMEOUT, float),
            "read_timeout": _env_number(Constants.ENV_READ_TIMEOUT, Constants.READ_TIMEOUT, float),
            "max_workers": _env_number(Constants.ENV_MAX_WORKERS, Constants.MAX_WORKERS, int),
        }
        values.update(overrides)
        return cls(**values)


def default_feed_source(package_name: str) -> FeedSource:
    """The public nuget.org v3 feed for ``package_name``."""
    name = package_name.lower()
    return FeedSource(
        repository_type=RepositoryType.V3,
        versions_url=Constants.NUGET_V3_VERSIONS_URL.format(name=name),
        search_url=Constants.NUGET_V3_SEARCH_URL.format(name=name),
        repository_url=Constants.DEFAULT_REPOSITORY_URL,
    )
