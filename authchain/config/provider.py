"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol


@dataclass
class LookupConfig:
    """Where credentials are looked up in a request."""
    header_name: str = "Authorization"
    bearer_prefix: str = "Bearer "
    username_field: str = "username"
    password_field: str = "password"


@dataclass
class JWTConfig:
    """JWT verification configuration."""
    secret: Optional[str] = None
    jwks_uri: Optional[str] = None
    algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    audience: Optional[str] = None
    issuer: Optional[str] = None
    leeway: int = 0

    @property
    def is_configured(self) -> bool:
        """Check if a key source is available."""
        return bool(self.secret or self.jwks_uri)


@dataclass
class MiddlewareConfig:
    """Authentication middleware configuration."""
    error_format: str = "json"
    log_attempts: bool = True
    skip_paths: Dict[str, List[str]] = field(default_factory=dict)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_lookup_config(self) -> LookupConfig:
        """Get lookup configuration."""
        ...

    def get_jwt_config(self) -> JWTConfig:
        """Get JWT configuration."""
        ...

    def get_middleware_config(self) -> MiddlewareConfig:
        """Get middleware configuration."""
        ...


def parse_skip_paths(value: str) -> Dict[str, List[str]]:
    """
    Parse skip paths from ``/health:GET,/token:GET|POST,/docs:*``.

    A path without methods skips every method.
    """
    skip_paths: Dict[str, List[str]] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        path, _, methods = entry.partition(":")
        methods_list = [m.strip().upper() for m in methods.split("|") if m.strip()]
        skip_paths[path.strip()] = methods_list or ["*"]
    return skip_paths


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_lookup_config(self) -> LookupConfig:
        """Get lookup configuration from environment variables."""
        return LookupConfig(
            header_name=os.getenv("AUTH_HEADER_NAME", "Authorization"),
            bearer_prefix=os.getenv("AUTH_BEARER_PREFIX", "Bearer "),
            username_field=os.getenv("AUTH_USERNAME_FIELD", "username"),
            password_field=os.getenv("AUTH_PASSWORD_FIELD", "password")
        )

    def get_jwt_config(self) -> JWTConfig:
        """Get JWT configuration from environment variables."""
        leeway_env = os.getenv("JWT_LEEWAY", "0")
        try:
            leeway = int(leeway_env)
        except ValueError:
            raise ValueError(f"JWT_LEEWAY must be an integer number of seconds, got {leeway_env!r}")

        algorithms = [
            alg.strip() for alg in os.getenv("JWT_ALGORITHMS", "HS256").split(",") if alg.strip()
        ]
        if not algorithms:
            raise ValueError("JWT_ALGORITHMS must name at least one algorithm")

        return JWTConfig(
            secret=os.getenv("JWT_SECRET") or None,
            jwks_uri=os.getenv("JWT_JWKS_URI") or None,
            algorithms=algorithms,
            audience=os.getenv("JWT_AUDIENCE") or None,
            issuer=os.getenv("JWT_ISSUER") or None,
            leeway=leeway
        )

    def get_middleware_config(self) -> MiddlewareConfig:
        """Get middleware configuration from environment variables."""
        error_format = os.getenv("AUTH_ERROR_FORMAT", "json").lower()
        if error_format not in ("json", "jsonrpc"):
            raise ValueError(f"AUTH_ERROR_FORMAT must be 'json' or 'jsonrpc', got {error_format!r}")

        return MiddlewareConfig(
            error_format=error_format,
            log_attempts=os.getenv("AUTH_LOG_ATTEMPTS", "true").lower() == "true",
            skip_paths=parse_skip_paths(os.getenv("AUTH_SKIP_PATHS", ""))
        )
