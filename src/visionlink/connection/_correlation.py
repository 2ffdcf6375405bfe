# -*- coding: utf-8 -*-
"""Correlation of outbound calls with their responses."""
import asyncio
import itertools
from dataclasses import dataclass, field

import shortuuid

from .._logging import logger
from ..exception import (
    CallTimeout,
    ConnectionLost,
    FaultReason,
    RemoteCallError,
)
from ..protocol import ResponseFrame
from ..types import JSONObject


def _consume_exception(future: "asyncio.Future[JSONObject]") -> None:
    """Mark the error of a failed call as retrieved, so that a handle the
    caller never awaits is not reported by the event loop."""
    if not future.cancelled():
        future.exception()


@dataclass
class PendingCall:
    """An in-flight call, owned by the `CallCorrelator`."""

    id: str
    """The call id, unique within the owning connection."""

    method: str
    """The method (or turn kind) of the call."""

    issued_at: float
    """The loop time when the call was issued."""

    deadline: float
    """The loop time when the call times out."""

    future: "asyncio.Future[JSONObject]"
    """The completion handle handed to the caller."""

    timer: asyncio.TimerHandle | None = field(default=None, repr=False)
    """The handle of the deadline timer."""


class CallCorrelator:
    """Track in-flight calls by id, resolve them with the matching response
    and time them out otherwise.

    Every completion handle receives exactly one resolution: the response,
    a `CallTimeout`, or a `ConnectionLost` when the connection is torn
    down.
    """

    def __init__(
        self,
        id_prefix: str | None = None,
        default_timeout: float = 10.0,
    ) -> None:
        """Initialize the correlator.

        Args:
            id_prefix (`str | None`, optional):
                The prefix of the generated call ids, usually the id of the
                owning connection. A random one is used if not given.
            default_timeout (`float`, defaults to `10.0`):
                The deadline in seconds of calls issued without an explicit
                timeout.
        """
        self.id_prefix = id_prefix or shortuuid.uuid()
        self.default_timeout = default_timeout

        self._counter = itertools.count(1)
        self._pending: dict[str, PendingCall] = {}
        self._closed = False

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._pending

    @property
    def closed(self) -> bool:
        """Whether `cancel_all` was called."""
        return self._closed

    def next_id(self) -> str:
        """Allocate a new call id."""
        return f"{self.id_prefix}-{next(self._counter)}"

    def issue(
        self,
        method: str,
        timeout: float | None = None,
    ) -> PendingCall:
        """Record a new call and arm its deadline.

        This never waits on the transport; the caller sends the request
        frame itself and awaits `PendingCall.future` when it needs the
        result.

        Args:
            method (`str`):
                The method of the call, used in logs.
            timeout (`float | None`, optional):
                The deadline in seconds. Defaults to `default_timeout`.

        Returns:
            `PendingCall`:
                The pending call holding the allocated id and the completion
                handle.

        Raises:
            `ConnectionLost`:
                If the correlator was already cancelled.
        """
        if self._closed:
            raise ConnectionLost("The connection is being torn down")

        loop = asyncio.get_running_loop()
        timeout = self.default_timeout if timeout is None else timeout
        call_id = self.next_id()
        now = loop.time()

        pending = PendingCall(
            id=call_id,
            method=method,
            issued_at=now,
            deadline=now + timeout,
            future=loop.create_future(),
        )
        # Callers may drop the handle, e.g. a fire-and-forget call
        pending.future.add_done_callback(_consume_exception)
        pending.timer = loop.call_later(timeout, self._expire, call_id)
        self._pending[call_id] = pending

        logger.debug("Issued call %s (%s)", call_id, method)
        return pending

    def resolve(self, response: ResponseFrame) -> bool:
        """Deliver a response to the call with the same id.

        Unknown or stale ids (already resolved, timed out or cancelled) are
        dropped without any state change.

        Args:
            response (`ResponseFrame`):
                The response received from the server.

        Returns:
            `bool`:
                Whether a pending call was resolved.
        """
        pending = self._pending.pop(response.id, None)
        if pending is None:
            logger.debug("Dropping response for unknown call %s", response.id)
            return False

        self._disarm(pending)
        if pending.future.done():
            # The caller cancelled its handle
            return False

        if response.ok:
            pending.future.set_result(response.payload or {})
        else:
            error = response.error
            pending.future.set_exception(
                RemoteCallError(
                    code=error.code if error else None,
                    message=error.message if error else None,
                    call_id=response.id,
                ),
            )
        return True

    def cancel_all(
        self,
        message: str = "The connection was torn down",
        reason: FaultReason | None = None,
    ) -> int:
        """Fail every pending call with `ConnectionLost` and refuse new ones.

        Args:
            message (`str`, optional):
                The message of the `ConnectionLost` errors.
            reason (`FaultReason | None`, optional):
                The fault that caused the teardown, if any.

        Returns:
            `int`:
                The number of calls that were failed.
        """
        self._closed = True
        pending_calls = list(self._pending.values())
        self._pending.clear()

        failed = 0
        for pending in pending_calls:
            self._disarm(pending)
            if not pending.future.done():
                pending.future.set_exception(
                    ConnectionLost(message, reason=reason),
                )
                failed += 1

        if failed:
            logger.info("Cancelled %d pending call(s): %s", failed, message)
        return failed

    def discard(self, call_id: str) -> None:
        """Forget a call without resolving it, e.g. when its request could
        not be encoded."""
        pending = self._pending.pop(call_id, None)
        if pending is not None:
            self._disarm(pending)
            pending.future.cancel()

    def _expire(self, call_id: str) -> None:
        pending = self._pending.pop(call_id, None)
        if pending is None:
            return

        timeout = pending.deadline - pending.issued_at
        logger.warning(
            "Call %s (%s) timed out after %.1fs",
            call_id,
            pending.method,
            timeout,
        )
        if not pending.future.done():
            pending.future.set_exception(CallTimeout(call_id, timeout))

    @staticmethod
    def _disarm(pending: PendingCall) -> None:
        if pending.timer is not None:
            pending.timer.cancel()
            pending.timer = None
