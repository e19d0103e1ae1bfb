"""Composition of strategies with first-success semantics."""
import logging
from typing import Iterable

from fastapi import Request

from .errors import AuthenticationError, CompositionExhausted
from .interfaces import Strategy

logger = logging.getLogger(__name__)


class ComposedStrategy:
    """
    Tries strategies in order and succeeds as soon as one does.

    Every strategy sees the same, unmodified request. When all of them fail
    a generic CompositionExhausted is raised; the individual reasons are only
    logged.
    """

    def __init__(self, strategies: Iterable[Strategy]):
        self.strategies = list(strategies)
        if not self.strategies:
            raise ValueError("at least one strategy is required for composition")

    async def authenticate(self, request: Request) -> None:
        for strategy in self.strategies:
            try:
                await strategy.authenticate(request)
            except AuthenticationError as e:
                logger.debug(f"{type(strategy).__name__} failed: {e}")
                continue
            return
        raise CompositionExhausted()


def compose_strategies(strategies: Iterable[Strategy]) -> ComposedStrategy:
    """Compose strategies so that authentication succeeds if any one succeeds."""
    return ComposedStrategy(strategies)
