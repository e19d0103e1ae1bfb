"""
Config Module - Black Box Interface

Purpose: Lookup, token and middleware configuration
Interface: ConfigProvider protocol, EnvConfigProvider
Hidden: Environment parsing and validation
"""

from .provider import (
    ConfigProvider,
    EnvConfigProvider,
    JWTConfig,
    LookupConfig,
    MiddlewareConfig,
)

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "JWTConfig",
    "LookupConfig",
    "MiddlewareConfig",
]
