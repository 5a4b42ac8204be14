"""Exceptions raised while resolving NuGet versions."""

from typing import Optional


class NuGetFinderError(Exception):
    """Base class for version finder errors."""


class PrivateSourceTimedOut(NuGetFinderError):
    """A non-default feed did not answer its search endpoint in time."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"The following source timed out: {source}")


class AllVersionsIgnored(NuGetFinderError):
    """Every published version was excluded by an ignore condition."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "All updates for the dependency were ignored")


class FeedParseError(NuGetFinderError):
    """A feed response is missing data the protocol requires."""

    def __init__(self, repository_url: Optional[str], detail: str):
        self.repository_url = repository_url
        self.detail = detail
        super().__init__(f"Malformed response from {repository_url}: {detail}")


class RequirementParseError(NuGetFinderError, ValueError):
    """A requirement string could not be understood."""

    def __init__(self, requirement: str):
        self.requirement = requirement
        super().__init__(f"Illformed requirement: {requirement!r}")
