"""Authentication error kinds raised by strategies."""
from typing import Optional


class AuthenticationError(Exception):
    """Base class for every expected authentication failure."""

    default_message = "Authentication error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class LookupFailed(AuthenticationError):
    """Credential material is absent or malformed at extraction time."""

    default_message = "Credentials lookup failed"


class TokenNotFound(LookupFailed):
    """No bearer token could be extracted from the request."""

    default_message = "JWT not found"


class CredentialsMissing(LookupFailed):
    """Username or password is missing from the request."""

    default_message = "Credentials are missing"


class BodyParseError(LookupFailed):
    """The request body could not be parsed."""

    default_message = "Request body could not be parsed"


class TokenInvalid(AuthenticationError):
    """Signature, structure or expiry check failed in the JWT library."""

    default_message = "Token is invalid"


class VerificationRejected(AuthenticationError):
    """The integrator's verify function declined the claims or credentials."""

    default_message = "Verification rejected"


class CompositionExhausted(AuthenticationError):
    """Every strategy in a composition failed."""

    default_message = "Authentication failed"


# Generic "all strategies failed" name.
AuthenticationFailed = CompositionExhausted
