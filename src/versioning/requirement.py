"""NuGet requirement (version range) parsing and matching.

Understands the forms seen in NuGet manifests and in ignore conditions:

* interval notation: ``[1.0,2.0)``, ``(,1.5]``, ``[1.0,)``
* exact bracket: ``[1.2.3]``
* floating wildcards: ``*``, ``1.*``, ``1.2.*``, ``1.2.3-*``
* comparator clauses: ``>= 1.0``, ``< 2``, ``!= 1.1``, ``~> 1.2.0``, or a
  bare version meaning ``=``
"""

import re
from typing import List, Optional, Sequence, Tuple, Union

from .errors import RequirementParseError
from .version import NuGetVersion, parse_version, release_core

NUGET_RANGE_REGEX = re.compile(r"[(\[].*,.*[)\]]")

_COMPARATOR = re.compile(r"^\s*(?P<op>~>|>=|<=|!=|=|>|<)?\s*(?P<version>\S+)\s*$")

Constraint = Tuple[str, NuGetVersion]


def parse_requirement_string(string: str) -> Union[str, List[str]]:
    """Split an ignore/manifest requirement into its raw parts.

    A single bracketed range is returned unchanged; anything else is
    treated as a comma separated list of comparator clauses.
    """
    if NUGET_RANGE_REGEX.search(string):
        return string
    return [part.strip() for part in string.split(",")]


def has_prerelease_token(string: Optional[str]) -> bool:
    """Return True if any segment of the requirement contains a hyphen."""
    if not string:
        return False
    parts = parse_requirement_string(string)
    if isinstance(parts, str):
        parts = [parts]
    return any("-" in part for part in parts)


def _version(text: str, original: str) -> NuGetVersion:
    try:
        return parse_version(text)
    except ValueError as exc:
        raise RequirementParseError(original) from exc


def _bump(text: str, original: str) -> NuGetVersion:
    """Upper bound for ``~> text``: drop the last written segment and bump."""
    core = text.split("-", 1)[0].split("+", 1)[0]
    segments = core.split(".")
    if not all(s.isdigit() for s in segments):
        raise RequirementParseError(original)
    if len(segments) > 1:
        segments = segments[:-1]
    segments[-1] = str(int(segments[-1]) + 1)
    return _version(".".join(segments), original)


def _convert_range(string: str) -> List[Constraint]:
    inner = string.strip()
    opening, closing = inner[0], inner[-1]
    if opening not in "([" or closing not in ")]":
        raise RequirementParseError(string)
    body = inner[1:-1]

    if "," not in body:
        if opening != "[" or closing != "]" or not body.strip():
            raise RequirementParseError(string)
        return [("=", _version(body.strip(), string))]

    lower, upper = (part.strip() for part in body.split(",", 1))
    constraints: List[Constraint] = []
    if lower:
        constraints.append((">=" if opening == "[" else ">", _version(lower, string)))
    if upper:
        constraints.append(("<=" if closing == "]" else "<", _version(upper, string)))
    if not constraints:
        raise RequirementParseError(string)
    return constraints


def _convert_wildcard(string: str) -> List[Constraint]:
    req = string.strip()
    if req == "*-*":
        return [(">=", _version("0.0.0-a", string))]
    if req.startswith("*"):
        return [(">=", _version("0", string))]
    defined = req.split("*", 1)[0]
    suffix = "0" if defined.endswith(".") else "a"
    return _pessimistic(defined + suffix, string)


def _pessimistic(text: str, original: str) -> List[Constraint]:
    return [(">=", _version(text, original)), ("<", _bump(text, original))]


def _convert_clause(clause: str, original: str) -> List[Constraint]:
    if not clause:
        raise RequirementParseError(original)
    if clause.startswith(("(", "[")):
        return _convert_range(clause)
    if "*" in clause:
        return _convert_wildcard(clause)
    match = _COMPARATOR.match(clause)
    if not match:
        raise RequirementParseError(original)
    op = match.group("op") or "="
    if op == "~>":
        return _pessimistic(match.group("version"), original)
    return [(op, _version(match.group("version"), original))]


class NuGetRequirement:
    """A conjunction of version constraints.

    Args:
        requirement: A requirement string, or the list produced by
            parse_requirement_string.

    Raises:
        RequirementParseError: The requirement is not understood.
    """

    _OPS = {
        "=": lambda v, r: v == r,
        "!=": lambda v, r: v != r,
        ">": lambda v, r: v > r,
        ">=": lambda v, r: v >= r,
        "<": lambda v, r: v < r,
        "<=": lambda v, r: v <= r,
    }

    def __init__(self, requirement: Union[str, Sequence[str]]):
        self.raw = requirement
        if isinstance(requirement, str):
            clauses = parse_requirement_string(requirement)
            if isinstance(clauses, str):
                clauses = [clauses]
        else:
            clauses = list(requirement)

        self.constraints: List[Constraint] = []
        for clause in clauses:
            self.constraints.extend(_convert_clause(clause.strip(), str(requirement)))

    def satisfied_by(self, version: NuGetVersion) -> bool:
        """Return True if ``version`` meets every constraint."""
        return all(self._OPS[op](version, target) for op, target in self.constraints)

    def shares_release_with(self, version: NuGetVersion) -> bool:
        """Return True if any constraint version has the same release core."""
        core = release_core(version)
        return any(release_core(target) == core for _, target in self.constraints)

    def __repr__(self) -> str:
        rendered = ", ".join(f"{op} {target}" for op, target in self.constraints)
        return f"NuGetRequirement({rendered})"


def requirements_array(requirement_string: str) -> List[NuGetRequirement]:
    """Parse a declared requirement into its list of alternative requirements."""
    return [NuGetRequirement(requirement_string)]
