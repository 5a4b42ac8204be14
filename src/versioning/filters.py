"""Eligibility filters applied to aggregated version records.

Each filter returns a subset of its input and never reorders or adds
records. The finder chains them in a fixed order.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled

from .advisory import SecurityAdvisory
from .errors import AllVersionsIgnored, RequirementParseError
from .models import Dependency, VersionRecord
from .requirement import NuGetRequirement, has_prerelease_token, requirements_array
from .version import NuGetVersion, is_prerelease, is_valid_version, parse_version, release_core

logger = logging.getLogger(__name__)


def _log_filtered(step: str, before: int, after: int) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            "Filter applied",
            extra=extra_context(
                event="filter",
                component="filters",
                action=step,
                count_before=before,
                count_after=after,
            ),
        )


def _related_to_current_prerelease(
    version: NuGetVersion, dependency: Dependency
) -> bool:
    """Whether a prerelease candidate is related to what the dependency already uses."""
    current = dependency.version
    if is_valid_version(current):
        current_version = parse_version(current)
        if is_prerelease(current_version) and release_core(current_version) == release_core(version):
            return True

    for requirement in dependency.requirements:
        if not requirement or not has_prerelease_token(requirement):
            continue
        try:
            if any(r.shares_release_with(version) for r in requirements_array(requirement)):
                return True
        except RequirementParseError:
            continue
    return False


def filter_prereleases(records: Sequence[VersionRecord], dependency: Dependency) -> List[VersionRecord]:
    """Drop prereleases unrelated to the current version or requirements."""
    kept = [
        r for r in records
        if not is_prerelease(r.version) or _related_to_current_prerelease(r.version, dependency)
    ]
    _log_filtered("filter_prereleases", len(records), len(kept))
    return kept


def filter_ignored_versions(
    records: Sequence[VersionRecord],
    ignored_versions: Iterable[str],
    raise_on_ignored: bool = False,
) -> List[VersionRecord]:
    """Drop versions matching any ignore requirement.

    Raises:
        AllVersionsIgnored: Everything was ignored and ``raise_on_ignored`` is set.
        RequirementParseError: An ignore requirement is malformed.
    """
    filtered = list(records)
    for requirement in ignored_versions:
        ignore_req = NuGetRequirement(requirement)
        filtered = [r for r in filtered if not ignore_req.satisfied_by(r.version)]

    if raise_on_ignored and not filtered and records:
        logger.warning(
            "All versions ignored",
            extra=extra_context(event="filter", component="filters", action="filter_ignored_versions",
                                outcome="all_ignored", count_before=len(records)),
        )
        raise AllVersionsIgnored()

    _log_filtered("filter_ignored_versions", len(records), len(filtered))
    return filtered


def filter_vulnerable_versions(
    records: Sequence[VersionRecord], advisories: Iterable[SecurityAdvisory]
) -> List[VersionRecord]:
    """Drop versions any advisory reports as vulnerable."""
    filtered = list(records)
    for advisory in advisories:
        filtered = [r for r in filtered if not advisory.vulnerable(r.version)]
    _log_filtered("filter_vulnerable_versions", len(records), len(filtered))
    return filtered


def filter_lower_versions(
    records: Sequence[VersionRecord], current_version: Optional[str]
) -> List[VersionRecord]:
    """Keep only versions strictly newer than ``current_version``.

    Raises:
        ValueError: ``current_version`` is missing or not a version.
    """
    current = parse_version(current_version)
    kept = [r for r in records if r.version > current]
    _log_filtered("filter_lower_versions", len(records), len(kept))
    return kept
