"""NuGet registry package.

This package provides NuGet feed access for version resolution:
- client.py: HTTP interactions with V3 (JSON search / flat container) and V2 (OData XML) feeds
- discovery.py: V2 feed parsing, unlisted filtering and source URL extraction

Public API is preserved at registry.nuget without shims.
"""

# Patch points exposed for tests (e.g., monkeypatch in tests)
from common.http_client import safe_get  # noqa: F401

# Public API re-exports
from .discovery import parse_v2_entries  # noqa: F401
from .client import (  # noqa: F401
    V2Listing,
    fetch_v2_listing,
    fetch_v3_versions,
    remove_wrapping_zero_width_chars,
)

__all__ = [
    # Parsing
    "parse_v2_entries",
    # Client
    "V2Listing",
    "fetch_v2_listing",
    "fetch_v3_versions",
    "remove_wrapping_zero_width_chars",
    # Patch points for tests
    "safe_get",
]
