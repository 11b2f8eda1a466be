import asyncio
from typing import (
    Awaitable,
    Callable,
    Iterable,
    TypeVar,
)


T = TypeVar("T")
R = TypeVar("R")


async def run_all(
    targets: Iterable[T],
    probe: Callable[[T], Awaitable[R]],
    on_error: Callable[[T, Exception], Awaitable[R]],
) -> list[R]:
    """
    Run `probe` for every target concurrently and wait for all of them.

    No target can cancel or delay the others. The returned list maps 1:1
    onto `targets`: a probe that raised is replaced by whatever `on_error`
    builds for that target, normally a failed result.
    """
    targets = list(targets)
    if len(targets) == 0:
        return []

    outcomes = await asyncio.gather(
        *[
            asyncio.ensure_future(probe(target)) for target in targets
        ],
        return_exceptions=True,
    )

    results: list[R] = []
    for target, outcome in zip(targets, outcomes):
        # Cancellation and interpreter exits are not probe failures.
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome

        if isinstance(outcome, Exception):
            outcome = await on_error(target, outcome)

        results.append(outcome)

    return results
