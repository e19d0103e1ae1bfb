"""
JWT bearer-token strategy.

Looks for a JWT (JSON Web Token) in the request, decodes and verifies it with
PyJWT, then hands the claims to an integrator-supplied verify function.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Union

import jwt
from fastapi import Request
from jwt import PyJWKClient

from .errors import TokenInvalid, TokenNotFound
from .interfaces import maybe_await, run_verify

logger = logging.getLogger(__name__)

Claims = Dict[str, Any]
JWTLookupFunc = Callable[[Request], Union[str, Awaitable[str]]]
JWTVerifyFunc = Callable[[Claims], Any]
KeyFunc = Callable[[Dict[str, Any]], Any]

DEFAULT_HEADER_NAME = "Authorization"
DEFAULT_BEARER_PREFIX = "Bearer "


def create_header_lookup(header_name: str) -> JWTLookupFunc:
    """Create a lookup returning the raw value of the given header."""

    def lookup(request: Request) -> str:
        token = request.headers.get(header_name)
        if not token:
            raise TokenNotFound(f"jwt not found in header {header_name}")
        return token

    return lookup


def create_bearer_lookup(
    header_name: str = DEFAULT_HEADER_NAME,
    prefix: str = DEFAULT_BEARER_PREFIX,
) -> JWTLookupFunc:
    """
    Create a lookup extracting a bearer token from a header.

    The prefix check is exact and case-sensitive, trailing space included.
    The prefix is stripped from the returned token.
    """
    header_lookup = create_header_lookup(header_name)

    def lookup(request: Request) -> str:
        value = header_lookup(request)
        if not value.startswith(prefix):
            raise TokenNotFound("bearer token not found in header")
        token = value[len(prefix):]
        if not token:
            raise TokenNotFound("bearer token not found in header")
        return token

    return lookup


def create_secret_key_func(secret: Union[str, bytes]) -> KeyFunc:
    """Create a key function that always returns a shared HMAC secret."""

    def key_func(header: Dict[str, Any]) -> Union[str, bytes]:
        return secret

    return key_func


def create_jwks_key_func(jwks_uri: str, lifespan: int = 3600) -> KeyFunc:
    """
    Create a key function resolving signing keys from a JWKS endpoint.

    Keys are looked up by the token's ``kid`` header and cached by PyJWKClient.
    """
    jwks_client = PyJWKClient(jwks_uri, cache_keys=True, lifespan=lifespan)

    def key_func(header: Dict[str, Any]) -> Any:
        kid = header.get("kid")
        if not kid:
            raise TokenInvalid("token header has no kid")
        return jwks_client.get_signing_key(kid).key

    return key_func


class JWTStrategy:
    """
    Authenticates requests carrying a signed JWT.

    Steps, each failure propagated to the caller:
    1. lookup extracts the raw token
    2. the token is parsed and its signature checked with the resolved key
    3. claims are taken from the decoded token
    4. verify judges the claims
    """

    def __init__(
        self,
        verify: Optional[JWTVerifyFunc],
        key_func: Optional[KeyFunc],
        lookup: Optional[JWTLookupFunc] = None,
        algorithms: Iterable[str] = ("HS256",),
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        leeway: int = 0,
        options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the strategy.

        Args:
            verify: Function judging decoded claims (required)
            key_func: Function returning key material for a token header (required)
            lookup: Function extracting the raw token, defaults to bearer header lookup
            algorithms: Accepted signing algorithms
            audience: Expected ``aud`` claim, checked when set
            issuer: Expected ``iss`` claim, checked when set
            leeway: Clock skew tolerance in seconds for time-based claims
            options: Extra PyJWT decode options

        Raises:
            ValueError: If verify or key_func is missing
        """
        if verify is None:
            raise ValueError("verify function is required by JWTStrategy")
        if key_func is None:
            raise ValueError("key function is required by JWTStrategy")

        self.verify = verify
        self.key_func = key_func
        self.lookup = lookup or create_bearer_lookup()
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer
        self.leeway = leeway
        self.options = dict(options or {})

        if not self.algorithms:
            raise ValueError("at least one algorithm is required by JWTStrategy")

    async def authenticate(self, request: Request) -> None:
        token = await maybe_await(self.lookup(request))
        claims = await self.decode(token)
        await run_verify(self.verify, claims, "claims rejected")

    async def decode(self, token: str) -> Claims:
        """
        Decode and verify a raw token.

        Raises:
            TokenInvalid: On any signature, structure, claim or key resolution error
        """
        try:
            header = jwt.get_unverified_header(token)
            key = await maybe_await(self.key_func(header))
            return jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway,
                options=self.options,
            )
        except TokenInvalid:
            raise
        except jwt.ExpiredSignatureError as e:
            logger.debug("JWT token expired")
            raise TokenInvalid(str(e)) from e
        except jwt.PyJWTError as e:
            logger.debug(f"Invalid JWT token: {e}")
            raise TokenInvalid(str(e)) from e
        except Exception as e:
            logger.debug(f"Key resolution failed: {e}")
            raise TokenInvalid(str(e)) from e
