"""Security advisory predicates consumed by the vulnerability filter."""

from typing import Iterable, List, Optional, Protocol

from .requirement import NuGetRequirement
from .version import NuGetVersion


class SecurityAdvisory(Protocol):
    """Anything that can tell whether a version is affected."""

    def vulnerable(self, version: NuGetVersion) -> bool:
        ...


class VersionRangeAdvisory:
    """Advisory defined by vulnerable and (optionally) patched ranges.

    A version is vulnerable when it falls in any vulnerable range, or when
    safe ranges are given and it falls in none of them.
    """

    def __init__(
        self,
        vulnerable_versions: Optional[Iterable[str]] = None,
        safe_versions: Optional[Iterable[str]] = None,
        identifier: Optional[str] = None,
    ):
        self.identifier = identifier
        self.vulnerable_versions: List[NuGetRequirement] = [
            NuGetRequirement(r) for r in (vulnerable_versions or [])
        ]
        self.safe_versions: List[NuGetRequirement] = [
            NuGetRequirement(r) for r in (safe_versions or [])
        ]

    def vulnerable(self, version: NuGetVersion) -> bool:
        if any(r.satisfied_by(version) for r in self.vulnerable_versions):
            return True
        if self.safe_versions:
            return not any(r.satisfied_by(version) for r in self.safe_versions)
        return False

    def __repr__(self) -> str:
        return f"VersionRangeAdvisory({self.identifier or 'anonymous'})"
