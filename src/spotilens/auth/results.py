"""Result values used at the orchestration boundary.

Core operations raise :class:`~spotilens.auth.errors.SpotilensError`
subclasses; the startup flow wraps each call with :func:`capture` and branches
on ``Ok`` / ``Err`` explicitly instead of letting exceptions unwind.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from spotilens.auth.errors import SpotilensError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err:
    error: SpotilensError

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def detail(self) -> str:
        return self.error.status_message


Result = Union[Ok[T], Err]


async def capture(awaitable: Awaitable[T]) -> Result[T]:
    """Await *awaitable*, turning known failures into :class:`Err`.

    Unknown exceptions are programming errors and still propagate.
    """
    try:
        return Ok(await awaitable)
    except SpotilensError as exc:
        return Err(exc)


def as_result(outcome: T | BaseException) -> Result[T]:
    """Convert one ``asyncio.gather(..., return_exceptions=True)`` slot."""
    if isinstance(outcome, SpotilensError):
        return Err(outcome)
    if isinstance(outcome, BaseException):
        raise outcome
    return Ok(outcome)
