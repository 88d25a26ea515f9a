"""k1s0 api_session library."""

from .config import deep_merge, load_options, parse_options
from .exceptions import (
    InvalidConfigurationError,
    SessionConnectionError,
    SessionError,
    SessionErrorCodes,
    TokenRequestError,
)
from .grants import ClientCredentialsGrant, Grant, PasswordGrant, RefreshTokenGrant
from .http_provider import HttpTokenProvider, TokenProviderConfig
from .manager import SessionManager, check_duration, is_duration_sufficient
from .memory import InMemorySessionStorage
from .models import (
    SESSION_TYPE_ID_DEFAULT,
    AccessToken,
    AccessTokenSession,
    DurationOptions,
    RefreshableAccessTokenSession,
    Session,
    SessionManagerOptions,
)
from .provider import TokenProvider
from .storage import (
    SessionStorage,
    SessionStorageWithGarbageCollection,
    SupportsExpirationSessionStorage,
)

__all__ = [
    "SESSION_TYPE_ID_DEFAULT",
    "AccessToken",
    "Session",
    "AccessTokenSession",
    "RefreshableAccessTokenSession",
    "DurationOptions",
    "SessionManagerOptions",
    "SessionStorage",
    "SupportsExpirationSessionStorage",
    "SessionStorageWithGarbageCollection",
    "InMemorySessionStorage",
    "TokenProvider",
    "HttpTokenProvider",
    "TokenProviderConfig",
    "Grant",
    "ClientCredentialsGrant",
    "PasswordGrant",
    "RefreshTokenGrant",
    "SessionManager",
    "check_duration",
    "is_duration_sufficient",
    "deep_merge",
    "parse_options",
    "load_options",
    "SessionError",
    "InvalidConfigurationError",
    "SessionConnectionError",
    "TokenRequestError",
    "SessionErrorCodes",
]
