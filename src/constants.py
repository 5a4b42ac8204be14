"""Constants used in the project."""

from enum import Enum


class RepositoryType(Enum):
    """NuGet feed protocol generations.

    Args:
        Enum (string): Protocol generation tag of a feed source.
    """

    V2 = "v2"
    V3 = "v3"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_REPOSITORY_URL = "https://api.nuget.org/v3/index.json"
    NUGET_V3_SEARCH_URL = (
        "https://azuresearch-usnc.nuget.org/query"
        "?q=id:{name}&prerelease=true&semVerLevel=2.0.0"
    )
    NUGET_V3_VERSIONS_URL = "https://api.nuget.org/v3-flatcontainer/{name}/index.json"
    NUSPEC_FILENAME = "{name}.nuspec"
    LOG_FORMAT = "[%(levelname)s] %(message)s"

    # Timeouts in seconds for every outbound feed request
    CONNECT_TIMEOUT = 30
    READ_TIMEOUT = 30
    MAX_WORKERS = 1

    ENV_LOG_LEVEL = "NUGET_FINDER_LOG_LEVEL"
    ENV_CONNECT_TIMEOUT = "NUGET_FINDER_CONNECT_TIMEOUT"
    ENV_READ_TIMEOUT = "NUGET_FINDER_READ_TIMEOUT"
    ENV_MAX_WORKERS = "NUGET_FINDER_MAX_WORKERS"

    HEADERS_JSON = {"Accept": "application/json"}
    HEADERS_XML = {"Accept": "application/atom+xml,application/xml"}
