"""
Settle-all fan-out.

Runs several awaitables concurrently and reports each outcome on its own, as
an ``Ok`` or an ``Err``. A failing branch never cancels or hides its
siblings, so a page can render whatever did load.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, List, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: Exception

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok, Err]


async def settle_all(*awaitables: Awaitable[Any]) -> List[Result]:
    """Await every branch; results come back in argument order."""
    outcomes = await asyncio.gather(*awaitables, return_exceptions=True)

    results: List[Result] = []
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            results.append(Err(outcome))
        elif isinstance(outcome, BaseException):
            # Cancellation and interpreter exits are not branch failures
            raise outcome
        else:
            results.append(Ok(outcome))
    return results
