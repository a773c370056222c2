"""Bounded-concurrency scheduling of per-target listing runs."""

import asyncio
from typing import Awaitable, Callable, Iterable

from blob_inventory.core import get_logger
from blob_inventory.core.exceptions import ValidationError
from blob_inventory.schemas import Target, TargetError, TargetResult, TargetState

logger = get_logger(__name__)

RunTarget = Callable[[Target], Awaitable[TargetResult]]


class ConcurrencyScheduler:
    """Runs one listing task per target with at most ``max_in_flight`` active.

    Targets are pulled from the input lazily: the next target is admitted only
    once any in-flight task has finished, so slots free up in completion order
    and an arbitrarily long target stream never creates more than
    ``max_in_flight`` tasks at a time.
    """

    def __init__(self, run_target: RunTarget, max_in_flight: int = 1):
        """Initialize the scheduler.

        Args:
            run_target: Coroutine function running one target to completion
            max_in_flight: Upper bound on simultaneously active targets

        Raises:
            ValidationError: If max_in_flight is lower than 1
        """
        if max_in_flight < 1:
            raise ValidationError(
                f"max_in_flight must be at least 1, got: {max_in_flight}"
            )
        self.run_target = run_target
        self.max_in_flight = max_in_flight
        self.in_flight = 0
        self.peak_in_flight = 0

    async def run(self, targets: Iterable[Target]) -> list[TargetResult]:
        """Run every target and wait for all of them.

        Returns:
            One TargetResult per target, in completion order
        """
        semaphore = asyncio.Semaphore(self.max_in_flight)
        results: list[TargetResult] = []
        tasks: set[asyncio.Task] = set()

        pending = iter(targets)
        while True:
            # Claim a slot first; the source may block (stdin) so it is read
            # off the event loop
            await semaphore.acquire()
            target = await asyncio.to_thread(next, pending, None)
            if target is None:
                semaphore.release()
                break
            task = asyncio.create_task(self._run_one(target, semaphore, results))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        if tasks:
            await asyncio.gather(*tasks)

        logger.info(
            "All targets finished",
            targets=len(results),
            failed=sum(1 for r in results if not r.ok),
            peak_in_flight=self.peak_in_flight,
        )
        return results

    async def _run_one(
        self,
        target: Target,
        semaphore: asyncio.Semaphore,
        results: list[TargetResult],
    ) -> None:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        logger.debug(
            "Target started", account=target.account, container=target.container
        )
        try:
            result = await self.run_target(target)
        except Exception as e:
            logger.exception(
                "Target run raised", account=target.account, container=target.container
            )
            result = TargetResult(
                target=target,
                state=TargetState.FATAL,
                error=TargetError(code=type(e).__name__, message=str(e)),
            )
        finally:
            self.in_flight -= 1
            semaphore.release()
        results.append(result)
