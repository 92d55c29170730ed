"""PKCE login core package.

This namespace hosts reusable, **HTTP-agnostic** building blocks for the
OAuth 2.0 Authorization Code + PKCE flow against Spotify.

Sub-modules
-----------
pkce
    Verifier generation and S256 challenge derivation.
store
    Key-value storage protocol plus the verifier and session token stores.
service
    Authorization redirect and authorization-code exchange.
results
    ``Ok`` / ``Err`` values used at the orchestration boundary.
errors
    Exception types used by the login core and the API client.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .errors import (  # noqa: F401
    ApiError,
    ConfigurationError,
    MissingVerifierError,
    SpotilensError,
    TokenExchangeError,
    TokenExpiredError,
)
from .log_utils import get_flow_logger  # noqa: F401
from .pkce import (  # noqa: F401
    code_challenge_s256,
    derive_code_challenge,
    generate_code_verifier,
    random_string,
)
from .results import Err, Ok, Result, capture  # noqa: F401
from .service import AuthService, Navigator  # noqa: F401
from .store import (  # noqa: F401
    KeyValueStorage,
    MemoryStorage,
    SessionTokenStore,
    VerifierStore,
)

__all__ = [
    # errors
    "SpotilensError",
    "ConfigurationError",
    "MissingVerifierError",
    "TokenExchangeError",
    "TokenExpiredError",
    "ApiError",
    # logging helpers
    "get_flow_logger",
    # pkce
    "random_string",
    "generate_code_verifier",
    "code_challenge_s256",
    "derive_code_challenge",
    # results
    "Ok",
    "Err",
    "Result",
    "capture",
    # service
    "AuthService",
    "Navigator",
    # storage
    "KeyValueStorage",
    "MemoryStorage",
    "VerifierStore",
    "SessionTokenStore",
]
