"""NuGet version parsing on top of semantic_version.

NuGet versions may carry one to four numeric segments, a prerelease label
and build metadata. They are mapped onto ``NuGetVersion``, a
``semantic_version.Version`` that also orders by the fourth (revision)
segment, so the rest of the package can compare them with the standard
operators.
"""

import re
from typing import Optional

import semantic_version

VERSION_PATTERN = re.compile(
    r"^\s*v?(?P<release>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<prerelease>[0-9A-Za-z][0-9A-Za-z.-]*?))?"
    r"(?:\+(?P<build>[0-9A-Za-z.-]+))?\s*$"
)


class NuGetVersion(semantic_version.Version):
    """A semantic_version.Version with a NuGet revision segment.

    Ordering and equality follow NuGet: major, minor, patch and revision
    compare numerically, prerelease labels compare case-insensitively and
    sort below the release, and build metadata is ignored.
    """

    def __init__(self, major, minor=0, patch=0, revision=0, prerelease=(), build=()):
        super().__init__(
            major=major,
            minor=minor,
            patch=patch,
            prerelease=tuple(p.lower() for p in prerelease),
            build=build,
        )
        self.revision = revision

    @property
    def nuget_key(self) -> tuple:
        if self.prerelease:
            # Numeric identifiers sort below alphanumeric ones
            label = (0, tuple(
                (0, int(part), "") if part.isdigit() else (1, 0, part)
                for part in self.prerelease
            ))
        else:
            label = (1,)
        return (self.major, self.minor, self.patch, self.revision, label)

    def __str__(self):
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            version = f"{version}.{self.revision}"
        if self.prerelease:
            version = f"{version}-{'.'.join(self.prerelease)}"
        if self.build:
            version = f"{version}+{'.'.join(self.build)}"
        return version

    def __hash__(self):
        return hash(self.nuget_key)

    def __eq__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key == other.nuget_key

    def __ne__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key != other.nuget_key

    def __lt__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key < other.nuget_key

    def __le__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key <= other.nuget_key

    def __gt__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key > other.nuget_key

    def __ge__(self, other):
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.nuget_key >= other.nuget_key


def _clean_identifiers(label: str) -> tuple:
    """Split a dotted label, dropping empty parts and numeric leading zeros."""
    parts = []
    for part in label.split("."):
        if not part:
            continue
        if part.isdigit():
            part = str(int(part))
        parts.append(part)
    return tuple(parts)


def parse_version(value: str) -> NuGetVersion:
    """Parse a NuGet version string.

    Raises:
        ValueError: The string is not a NuGet version.
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid version: {value!r}")
    match = VERSION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid version: {value!r}")

    numbers = [int(n) for n in match.group("release").split(".")]
    major, minor, patch, revision = (numbers + [0, 0, 0, 0])[:4]

    return NuGetVersion(
        major=major,
        minor=minor,
        patch=patch,
        revision=revision,
        prerelease=_clean_identifiers(match.group("prerelease") or ""),
        build=_clean_identifiers(match.group("build") or ""),
    )


def is_valid_version(value: Optional[str]) -> bool:
    """Return True if ``value`` parses as a NuGet version."""
    if not value:
        return False
    try:
        parse_version(value)
    except ValueError:
        return False
    return True


def is_prerelease(version: NuGetVersion) -> bool:
    """Return True for versions carrying a prerelease label."""
    return bool(version.prerelease)


def release_core(version: NuGetVersion) -> NuGetVersion:
    """The numeric major.minor.patch.revision portion, without prerelease or build."""
    return NuGetVersion(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        revision=version.revision,
    )
