"""
Local strategy: username and password taken from the request body.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from .errors import BodyParseError, CredentialsMissing
from .interfaces import maybe_await, run_verify

logger = logging.getLogger(__name__)

DEFAULT_USERNAME_FIELD = "username"
DEFAULT_PASSWORD_FIELD = "password"


@dataclass(frozen=True)
class Credentials:
    """Login credentials extracted for LocalStrategy."""
    username: str
    password: str = field(repr=False)


LocalLookupFunc = Callable[[Request], Union[Credentials, Awaitable[Credentials]]]
LocalVerifyFunc = Callable[[Credentials], Any]


def _build_credentials(username: Any, password: Any) -> Credentials:
    if not (isinstance(username, str) and isinstance(password, str) and username and password):
        raise CredentialsMissing()
    return Credentials(username=username, password=password)


def create_form_lookup(
    username_field: str = DEFAULT_USERNAME_FIELD,
    password_field: str = DEFAULT_PASSWORD_FIELD,
) -> LocalLookupFunc:
    """
    Create a lookup reading credentials from form data.

    The body is cached on the request before parsing so later readers see it
    unconsumed. The parsed form is closed on every exit path.
    """

    async def lookup(request: Request) -> Credentials:
        await request.body()
        try:
            async with request.form() as form:
                return _build_credentials(
                    form.get(username_field, ""),
                    form.get(password_field, ""),
                )
        except MultiPartException as e:
            logger.debug(f"Could not parse form body: {e.message}")
            raise BodyParseError(e.message) from e
        except HTTPException as e:
            # Starlette reports multipart errors as 400s inside an app scope
            logger.debug(f"Could not parse form body: {e.detail}")
            raise BodyParseError(str(e.detail)) from e

    return lookup


def create_json_lookup(
    username_field: str = DEFAULT_USERNAME_FIELD,
    password_field: str = DEFAULT_PASSWORD_FIELD,
) -> LocalLookupFunc:
    """Create a lookup reading credentials from a JSON object body."""

    async def lookup(request: Request) -> Credentials:
        body = await request.body()
        if not body:
            raise CredentialsMissing()
        try:
            data = json.loads(body)
        except ValueError as e:
            logger.debug(f"Could not parse JSON body: {e}")
            raise BodyParseError(str(e)) from e
        if not isinstance(data, dict):
            raise BodyParseError("JSON body must be an object")
        return _build_credentials(
            data.get(username_field, ""),
            data.get(password_field, ""),
        )

    return lookup


class LocalStrategy:
    """Authenticates users with username and password from the request body."""

    def __init__(
        self,
        verify: Optional[LocalVerifyFunc],
        lookup: Optional[LocalLookupFunc] = None,
    ):
        """
        Initialize the strategy.

        Credentials are taken from the "username" and "password" form fields
        unless a custom lookup is given. A verify function is required to
        check that the credentials are valid.

        Raises:
            ValueError: If verify is missing
        """
        if verify is None:
            raise ValueError("verify function is required by LocalStrategy")
        self.verify = verify
        self.lookup = lookup or create_form_lookup()

    async def authenticate(self, request: Request) -> None:
        credentials = await maybe_await(self.lookup(request))
        await run_verify(self.verify, credentials, "credentials rejected")
