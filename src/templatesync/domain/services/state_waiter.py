"""Poll-until-stable state machine.

StateWaiter repeatedly calls a refresh function until it reports a target
state a configurable number of times in a row. Reads against an eventually
consistent API can flip back to a pending state after the first success, so a
single target observation is not trusted.

Phases:
    WAITING: the last refresh reported a pending state.
    CONFIRMING: target observed, fewer than the required consecutive times.
    DONE: target observed the required number of consecutive times.
    TIMED_OUT: the deadline passed before DONE.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any

from templatesync.core.exceptions import UnexpectedStateError, WaitTimeoutError
from templatesync.core.logging import get_logger

logger = get_logger(__name__)

STATUS_WAITING = "waiting"
STATUS_DONE = "done"

RefreshFunc = Callable[[], Awaitable[tuple[Any, str]]]


class WaitPhase(str, Enum):
    WAITING = "waiting"
    CONFIRMING = "confirming"
    DONE = "done"
    TIMED_OUT = "timed_out"


class StateWaiter:
    """Drive a refresh function until its result is stable.

    Attributes:
        phase: Current phase of the state machine.
        confirmations: Consecutive target observations so far.
        attempts: Number of refresh calls made.
    """

    def __init__(
        self,
        refresh: RefreshFunc,
        *,
        timeout: float,
        interval: float,
        pending: Sequence[str] = (STATUS_WAITING,),
        target: Sequence[str] = (STATUS_DONE,),
        continuous_target_occurrence: int = 1,
        delay: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the waiter.

        Args:
            refresh: Async callable returning ``(result, state)``.
            timeout: Seconds before giving up.
            interval: Seconds between refresh calls.
            pending: States that mean "keep waiting".
            target: States that mean "done".
            continuous_target_occurrence: Consecutive target observations required.
            delay: Seconds to wait before the first refresh.
            clock: Monotonic clock, injectable for tests.
            sleep: Async sleep, injectable for tests.
        """
        if continuous_target_occurrence < 1:
            raise ValueError("continuous_target_occurrence must be at least 1")

        self.refresh = refresh
        self.timeout = timeout
        self.interval = interval
        self.pending = list(pending)
        self.target = list(target)
        self.continuous_target_occurrence = continuous_target_occurrence
        self.delay = delay
        self._clock = clock
        self._sleep = sleep

        self.phase = WaitPhase.WAITING
        self.confirmations = 0
        self.attempts = 0
        self.last_state: str | None = None
        self._deadline: float | None = None

    def remaining(self) -> float:
        """Seconds left before the deadline, or the full timeout before wait() starts."""
        if self._deadline is None:
            return self.timeout
        return max(0.0, self._deadline - self._clock())

    def _observe(self, state: str) -> None:
        self.last_state = state
        if state in self.target:
            self.confirmations += 1
            if self.confirmations >= self.continuous_target_occurrence:
                self.phase = WaitPhase.DONE
            else:
                self.phase = WaitPhase.CONFIRMING
        elif state in self.pending:
            self.confirmations = 0
            self.phase = WaitPhase.WAITING
        else:
            raise UnexpectedStateError(state, self.pending + self.target)

    def _time_out(self) -> WaitTimeoutError:
        self.phase = WaitPhase.TIMED_OUT
        return WaitTimeoutError(self.timeout, self.last_state, self.attempts)

    async def wait(self) -> Any:
        """Poll until done.

        Returns:
            The result of the last refresh.

        Raises:
            WaitTimeoutError: If the deadline passes first.
            UnexpectedStateError: If a refresh reports an unknown state.
            Exception: Whatever the refresh function raises.
        """
        self._deadline = deadline = self._clock() + self.timeout

        if self.delay > 0:
            await self._sleep(self.delay)

        while True:
            if self._clock() >= deadline:
                raise self._time_out()

            self.attempts += 1
            result, state = await self.refresh()
            self._observe(state)

            logger.debug(
                "Polled state",
                state=state,
                phase=self.phase.value,
                confirmations=self.confirmations,
                attempt=self.attempts,
            )

            if self.phase is WaitPhase.DONE:
                return result

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise self._time_out()
            await self._sleep(min(self.interval, remaining))
