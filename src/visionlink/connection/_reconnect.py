# -*- coding: utf-8 -*-
"""Reconnection scheduling with exponential backoff and network gating."""
import asyncio
from typing import Awaitable, Callable

from .._logging import logger
from ..exception import ReconnectExhausted


class BackoffPolicy:
    """Exponential backoff: ``delay(n) = min(base * 2 ** n, cap)`` for a
    bounded number of attempts."""

    def __init__(
        self,
        base: float = 1.0,
        cap: float = 30.0,
        max_attempts: int = 12,
    ) -> None:
        """Initialize the policy.

        Args:
            base (`float`, defaults to `1.0`):
                The delay in seconds before the first attempt.
            cap (`float`, defaults to `30.0`):
                The maximum delay in seconds.
            max_attempts (`int`, defaults to `12`):
                The number of attempts before giving up.
        """
        self.base = base
        self.cap = cap
        self.max_attempts = max_attempts

    def delay(self, attempt: int) -> float:
        """Get the delay in seconds before the given attempt (0-based)."""
        # Avoid computing huge powers once the cap is reached
        if attempt >= 64:
            return self.cap
        return min(self.base * 2**attempt, self.cap)


class ReconnectController:
    """Schedule reconnection attempts after transport failures.

    The controller runs at most one scheduling task at a time. Each round
    waits `policy.delay(attempt_count)` and then awaits the `attempt`
    coroutine, which returns whether the connection became ready. While the
    host reports no usable network, the wait is suspended and no attempt
    is consumed; on recovery the current delay starts over immediately.
    """

    def __init__(
        self,
        policy: BackoffPolicy,
        attempt: Callable[[], Awaitable[bool]],
        on_exhausted: Callable[[ReconnectExhausted], None],
        on_scheduled: Callable[[int, float], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            policy (`BackoffPolicy`):
                The backoff policy.
            attempt (`Callable[[], Awaitable[bool]]`):
                The coroutine function that performs one connection attempt
                and returns True once the connection is ready.
            on_exhausted (`Callable[[ReconnectExhausted], None]`):
                Called once when all the attempts failed.
            on_scheduled (`Callable[[int, float], None] | None`, optional):
                Called with the 1-based attempt number and its delay each
                time an attempt is scheduled.
        """
        self.policy = policy
        self.attempt_count = 0

        self._attempt = attempt
        self._on_exhausted = on_exhausted
        self._on_scheduled = on_scheduled

        self._network_available = asyncio.Event()
        self._network_available.set()
        self._network_lost = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Whether a scheduling task is active."""
        return self._task is not None and not self._task.done()

    @property
    def network_available(self) -> bool:
        """Whether the host reports a usable network path."""
        return self._network_available.is_set()

    def schedule(self) -> None:
        """Start scheduling attempts, unless it's already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())

    def reset(self) -> None:
        """Reset the attempt counter, called once a connection is ready."""
        self.attempt_count = 0

    def cancel(self) -> None:
        """Stop scheduling, e.g. on a user initiated disconnect."""
        if (
            self._task is not None
            and not self._task.done()
            and self._task is not asyncio.current_task()
        ):
            self._task.cancel()
        self._task = None

    def set_network_available(self, available: bool) -> None:
        """Report the host network reachability.

        Args:
            available (`bool`):
                Whether the host has a usable network path.
        """
        if available == self.network_available:
            return

        logger.info(
            "Network path %s",
            "recovered" if available else "lost, suspending reconnection",
        )
        if available:
            self._network_lost.clear()
            self._network_available.set()
        else:
            self._network_available.clear()
            self._network_lost.set()

    async def _run(self) -> None:
        while True:
            if self.attempt_count >= self.policy.max_attempts:
                error = ReconnectExhausted(self.attempt_count)
                logger.error("%s", error)
                self._on_exhausted(error)
                return

            delay = self.policy.delay(self.attempt_count)
            if self._on_scheduled is not None:
                self._on_scheduled(self.attempt_count + 1, delay)
            logger.info(
                "Reconnection attempt %d/%d in %.1fs",
                self.attempt_count + 1,
                self.policy.max_attempts,
                delay,
            )

            await self._wait(delay)

            self.attempt_count += 1
            attempt_number = self.attempt_count
            if await self._attempt():
                logger.info(
                    "Reconnected after %d attempt(s)",
                    attempt_number,
                )
                self.reset()
                return

    async def _wait(self, delay: float) -> None:
        """Sleep for `delay` seconds with a usable network path, restarting
        the delay whenever the path is lost and recovered."""
        while True:
            await self._network_available.wait()

            lost = asyncio.create_task(self._network_lost.wait())
            try:
                done, _ = await asyncio.wait({lost}, timeout=delay)
            finally:
                lost.cancel()

            if not done:
                return
