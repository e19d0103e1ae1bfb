"""
Strategy Module - Black Box Interface

Purpose: Decide whether a request carries valid credentials
Interface: Strategy.authenticate(request), JWTStrategy, LocalStrategy,
           ComposedStrategy, FuncStrategy
Hidden: Token decoding, body parsing, lookup defaults

Any object with an async authenticate(request) method can take part, so
strategies can be swapped or combined without touching the middleware.
"""

from .compose import ComposedStrategy, compose_strategies
from .errors import (
    AuthenticationError,
    AuthenticationFailed,
    BodyParseError,
    CompositionExhausted,
    CredentialsMissing,
    LookupFailed,
    TokenInvalid,
    TokenNotFound,
    VerificationRejected,
)
from .interfaces import FuncStrategy, Strategy
from .jwt_strategy import (
    JWTStrategy,
    create_bearer_lookup,
    create_header_lookup,
    create_jwks_key_func,
    create_secret_key_func,
)
from .local_strategy import (
    Credentials,
    LocalStrategy,
    create_form_lookup,
    create_json_lookup,
)

__all__ = [
    "AuthenticationError",
    "AuthenticationFailed",
    "BodyParseError",
    "ComposedStrategy",
    "CompositionExhausted",
    "Credentials",
    "CredentialsMissing",
    "FuncStrategy",
    "JWTStrategy",
    "LocalStrategy",
    "LookupFailed",
    "Strategy",
    "TokenInvalid",
    "TokenNotFound",
    "VerificationRejected",
    "compose_strategies",
    "create_bearer_lookup",
    "create_form_lookup",
    "create_header_lookup",
    "create_json_lookup",
    "create_jwks_key_func",
    "create_secret_key_func",
]
