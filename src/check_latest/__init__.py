"""Check whether a newer release of a package is published on crates.io."""

from .checks import (
    async_get_max_minor_version,
    async_get_max_patch,
    async_get_max_version,
    async_get_newest_version,
    get_max_minor_version,
    get_max_patch,
    get_max_version,
    get_newest_version,
)
from .config import CheckConfig, default_user_agent
from .errors import (
    CheckLatestError,
    DecodeError,
    InputError,
    TransportError,
    VersionParseError,
    VersionSetConsumedError,
)
from .registry.crates import (
    AiohttpTransport,
    RequestsTransport,
    async_get_summary,
    async_get_versions,
    get_summary,
    get_versions,
)
from .versioning import (
    Release,
    SemanticVersion,
    VersionSet,
    VersionSummary,
    parse_version,
)

__version__ = "1.0.2"

__all__ = [
    "AiohttpTransport",
    "CheckConfig",
    "CheckLatestError",
    "DecodeError",
    "InputError",
    "Release",
    "RequestsTransport",
    "SemanticVersion",
    "TransportError",
    "VersionParseError",
    "VersionSet",
    "VersionSetConsumedError",
    "VersionSummary",
    "async_get_max_minor_version",
    "async_get_max_patch",
    "async_get_max_version",
    "async_get_newest_version",
    "async_get_summary",
    "async_get_versions",
    "default_user_agent",
    "get_max_minor_version",
    "get_max_patch",
    "get_max_version",
    "get_newest_version",
    "get_summary",
    "get_versions",
    "parse_version",
]
