"""Strategy interfaces following Black Box Design principles."""
import inspect
from typing import Any, Awaitable, Callable, Protocol, Union

from fastapi import Request

from .errors import AuthenticationError, VerificationRejected


class Strategy(Protocol):
    """Protocol for authentication strategies - allows swappable implementations."""

    async def authenticate(self, request: Request) -> None:
        """
        Authenticate a request.

        Args:
            request: Incoming request; must be left unmodified

        Raises:
            AuthenticationError: If the request does not carry valid credentials
        """
        ...


StrategyFunc = Callable[[Request], Union[None, Awaitable[None]]]


async def maybe_await(value: Any) -> Any:
    """Resolve the result of an integrator callable that may be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value


class FuncStrategy:
    """
    Adapter to allow the use of ordinary functions as a Strategy.

    If ``func`` takes a request and raises on failure, ``FuncStrategy(func)``
    is a Strategy that calls it. Any error it raises counts as a failed
    authentication, with the original kept as the cause. Both plain and
    coroutine functions are accepted.
    """

    def __init__(self, func: StrategyFunc):
        if not callable(func):
            raise ValueError("FuncStrategy requires a callable")
        self.func = func

    async def authenticate(self, request: Request) -> None:
        try:
            await maybe_await(self.func(request))
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(str(e) or None) from e

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"FuncStrategy({name})"


async def run_verify(verify: Callable[[Any], Any], value: Any, rejected_message: str) -> None:
    """
    Run an integrator verify function and normalise its outcome.

    Returning anything but ``False`` accepts. Raising rejects; the error's
    message is preserved and the original error is kept as the cause.
    """
    try:
        result = await maybe_await(verify(value))
    except AuthenticationError:
        raise
    except Exception as e:
        raise VerificationRejected(str(e) or rejected_message) from e
    if result is False:
        raise VerificationRejected(rejected_message)
