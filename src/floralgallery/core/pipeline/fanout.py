"""
Structured fan-out join: run independent branches concurrently and keep one
``Result`` per branch instead of dropping failures inside the branches.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, List, TypeVar

from floralgallery.core.errors import Result

T = TypeVar("T")


async def gather_settled(aws: Iterable[Awaitable[T]]) -> List[Result[T, Exception]]:
    """
    Await every branch and return their results in input order.

    Waits for all branches to settle. Ordinary exceptions become
    ``Result.err``; cancellation and other ``BaseException`` values are
    re-raised.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)

    results: List[Result[T, Exception]] = []
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            results.append(Result.err(outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(Result.ok(outcome))
    return results
