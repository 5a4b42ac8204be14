"""Source repository URL detection and normalization.

Recognizes GitHub, GitLab, Bitbucket and Azure DevOps repository URLs
embedded in free text (project URLs, release notes) and reduces them to a
canonical ``https://<host>/<owner>/<repo>`` form.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

_REPO_TAIL = r"(?:(?!\.git|\.\s)[\w.-])+"

_PROVIDER_PATTERNS: Dict[str, str] = {
    "github": (
        r"github\.com[/:](?P<repo>[\w.-]+/" + _REPO_TAIL + r")"
        r"(?:(?:/tree|/blob)/(?P<branch>[^/]+)/(?P<directory>.*)[#|/])?"
    ),
    "gitlab": (
        r"gitlab\.com[/:](?P<repo>[^/\s]+/(?:(?!\.git|\.\s)[^/\s])+)"
        r"(?:(?:/tree|/blob)/(?P<branch>[^/]+)/(?P<directory>.*)[#|/])?"
    ),
    "bitbucket": (
        r"bitbucket\.org[/:](?P<repo>[\w.-]+/" + _REPO_TAIL + r")"
        r"(?:/src/(?P<branch>[^/]+)/(?P<directory>.*)[#|/])?"
    ),
    "azure": (
        r"dev\.azure\.com[/:](?P<repo>[\w.-]+/(?:[\w.-]+/)?_git/" + _REPO_TAIL + r")"
    ),
}

_HOSTS: Dict[str, str] = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
    "azure": "dev.azure.com",
}

PROVIDER_REGEXES: Dict[str, "re.Pattern[str]"] = {
    name: re.compile(pattern) for name, pattern in _PROVIDER_PATTERNS.items()
}

# Combined scanner; group names are stripped so the alternation compiles.
SOURCE_REGEX = re.compile(
    "|".join(
        "(?:" + re.sub(r"\(\?P<\w+>", "(?:", pattern) + ")"
        for pattern in _PROVIDER_PATTERNS.values()
    )
)


@dataclass(frozen=True)
class RepoRef:
    """A recognized source repository reference."""
    host: str
    owner: str
    repo: str
    normalized_url: str
    directory: Optional[str] = None
    branch: Optional[str] = None


def normalize_repo_url(url: Optional[str]) -> Optional[RepoRef]:
    """Resolve a URL to a RepoRef on a recognized source host.

    Args:
        url: Candidate URL (scheme optional, ``.git`` suffix tolerated)

    Returns:
        RepoRef, or None when the URL does not point at a known host
    """
    if not url:
        return None
    for host, regex in PROVIDER_REGEXES.items():
        match = regex.search(url)
        if not match:
            continue
        repo_path = match.group("repo")
        owner, _, name = repo_path.partition("/")
        if not owner or not name:
            continue
        groups = match.groupdict()
        return RepoRef(
            host=host,
            owner=owner,
            repo=name.rsplit("/", 1)[-1],
            normalized_url=f"https://{_HOSTS[host]}/{repo_path}",
            directory=groups.get("directory"),
            branch=groups.get("branch"),
        )
    return None


def find_source_urls(text: Optional[str]) -> List[str]:
    """Return every substring of ``text`` that looks like a source repository URL."""
    if not text:
        return []
    return [m.group(0) for m in SOURCE_REGEX.finditer(text)]


def first_source_url(text: Optional[str]) -> Optional[str]:
    """Canonical URL of the first scanned candidate that resolves, if any."""
    for candidate in find_source_urls(text):
        ref = normalize_repo_url(candidate)
        if ref is not None:
            return ref.normalized_url
    return None
