"""
Strategy Factory following Black Box Design principles.

This factory:
- Constructs strategies and middleware based on configuration
- Wires integrator verify functions into them
- Returns only the public interfaces
"""

import logging
from typing import Callable, Iterable, Optional

from starlette.types import ASGIApp

from ..config.provider import ConfigProvider
from .middleware import AuthMiddleware, create_failure_handler
from .strategy import (
    ComposedStrategy,
    JWTStrategy,
    LocalStrategy,
    Strategy,
    create_bearer_lookup,
    create_form_lookup,
    create_jwks_key_func,
    create_secret_key_func,
)
from .strategy.jwt_strategy import JWTVerifyFunc
from .strategy.local_strategy import LocalVerifyFunc

logger = logging.getLogger(__name__)


class StrategyFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates strategies from configuration
    - Wires them into middleware
    - Leaves account logic to the verify functions it is given
    """

    def __init__(self, config_provider: ConfigProvider):
        self.config_provider = config_provider

    def build_jwt_strategy(self, verify: JWTVerifyFunc) -> JWTStrategy:
        """
        Build a bearer-token strategy.

        Args:
            verify: Function judging decoded claims

        Returns:
            JWTStrategy keyed by the configured secret or JWKS endpoint

        Raises:
            ValueError: If neither a secret nor a JWKS URI is configured
        """
        jwt_config = self.config_provider.get_jwt_config()
        lookup_config = self.config_provider.get_lookup_config()

        if jwt_config.jwks_uri:
            logger.info(f"Building JWT strategy with JWKS keys from {jwt_config.jwks_uri}")
            key_func = create_jwks_key_func(jwt_config.jwks_uri)
        elif jwt_config.secret:
            logger.info("Building JWT strategy with shared secret")
            key_func = create_secret_key_func(jwt_config.secret)
        else:
            raise ValueError("JWT_SECRET or JWT_JWKS_URI is required to build a JWT strategy")

        return JWTStrategy(
            verify=verify,
            key_func=key_func,
            lookup=create_bearer_lookup(lookup_config.header_name, lookup_config.bearer_prefix),
            algorithms=jwt_config.algorithms,
            audience=jwt_config.audience,
            issuer=jwt_config.issuer,
            leeway=jwt_config.leeway
        )

    def build_local_strategy(self, verify: LocalVerifyFunc) -> LocalStrategy:
        """Build a form-credential strategy using the configured field names."""
        lookup_config = self.config_provider.get_lookup_config()
        return LocalStrategy(
            verify=verify,
            lookup=create_form_lookup(lookup_config.username_field, lookup_config.password_field)
        )

    def build_middleware(
        self,
        strategies: Iterable[Strategy],
        fail_handler: Optional[ASGIApp] = None
    ) -> Callable[[ASGIApp], ASGIApp]:
        """
        Build a middleware factory over one or more strategies.

        Args:
            strategies: Strategies tried in order; a single one is used as is
            fail_handler: ASGI app for failures, defaults to a formatted 401

        Returns:
            Function wrapping an ASGI application in AuthMiddleware
        """
        strategies = list(strategies)
        strategy = strategies[0] if len(strategies) == 1 else ComposedStrategy(strategies)
        middleware_config = self.config_provider.get_middleware_config()

        if fail_handler is None:
            fail_handler = create_failure_handler(error_format=middleware_config.error_format)

        def middleware(app: ASGIApp) -> ASGIApp:
            return AuthMiddleware(
                app,
                strategy,
                fail_handler=fail_handler,
                skip_paths=middleware_config.skip_paths,
                log_attempts=middleware_config.log_attempts
            )

        return middleware
