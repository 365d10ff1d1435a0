"""
Best-effort concurrency primitives.

``gather_settled`` runs awaitables concurrently and waits for every one of them
to finish, collecting each outcome instead of failing on the first error.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    """
    Outcome of one awaitable.

    Attributes:
        value: Result when the awaitable completed normally
        error: Exception raised by the awaitable, if any
    """

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_settled(aws: Iterable[Awaitable[T]]) -> list[Settled[T]]:
    """
    Await all awaitables concurrently and return their outcomes.

    Outcomes are returned in the same order as the input awaitables. Regular
    exceptions are captured in ``Settled.error``; cancellation still
    propagates.

    Examples:
        >>> outcomes = await gather_settled([fetch(a), fetch(b)])
        >>> [o.value for o in outcomes if o.ok]
    """
    results: list[Any] = await asyncio.gather(*aws, return_exceptions=True)

    settled: list[Settled[T]] = []
    for result in results:
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            settled.append(Settled(error=result))
        else:
            settled.append(Settled(value=result))
    return settled


__all__ = ["Settled", "gather_settled"]
