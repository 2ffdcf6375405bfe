# -*- coding: utf-8 -*-
"""Unit tests for the call correlator."""
import asyncio
import gc
import unittest

from visionlink.connection import CallCorrelator
from visionlink.exception import (
    CallTimeout,
    ConnectionLost,
    FaultReason,
    RemoteCallError,
)
from visionlink.protocol import CallErrorInfo, ResponseFrame


class TestCallCorrelator(unittest.IsolatedAsyncioTestCase):
    """Test cases for CallCorrelator."""

    async def test_ids_are_unique(self) -> None:
        """Test that every issued call gets a distinct id."""
        correlator = CallCorrelator(id_prefix="conn")
        ids = {correlator.issue("m").id for _ in range(100)}
        self.assertEqual(len(ids), 100)
        self.assertTrue(all(call_id.startswith("conn-") for call_id in ids))
        self.assertEqual(len(correlator), 100)
        correlator.cancel_all()

    async def test_random_prefix(self) -> None:
        """Test that two correlators never share ids."""
        first, second = CallCorrelator(), CallCorrelator()
        self.assertNotEqual(first.next_id(), second.next_id())

    async def test_resolve_success(self) -> None:
        """Test that a response resolves the call with the same id."""
        correlator = CallCorrelator()
        pending = correlator.issue("chat.send")

        resolved = correlator.resolve(
            ResponseFrame(id=pending.id, ok=True, payload={"runId": "r1"}),
        )

        self.assertTrue(resolved)
        self.assertEqual(await pending.future, {"runId": "r1"})
        self.assertNotIn(pending.id, correlator)
        self.assertIsNone(pending.timer)

    async def test_resolve_without_payload(self) -> None:
        """Test that a successful response without payload gives {}."""
        correlator = CallCorrelator()
        pending = correlator.issue("m")
        correlator.resolve(ResponseFrame(id=pending.id, ok=True))
        self.assertEqual(await pending.future, {})

    async def test_resolve_error(self) -> None:
        """Test that a failed response raises RemoteCallError."""
        correlator = CallCorrelator()
        pending = correlator.issue("m")

        correlator.resolve(
            ResponseFrame(
                id=pending.id,
                ok=False,
                error=CallErrorInfo(code="E1", message="denied"),
            ),
        )

        with self.assertRaises(RemoteCallError) as context:
            await pending.future
        self.assertEqual(context.exception.code, "E1")
        self.assertEqual(context.exception.message, "denied")
        self.assertEqual(context.exception.call_id, pending.id)

    async def test_unknown_id_is_a_no_op(self) -> None:
        """Test that a response for an unknown id changes nothing."""
        correlator = CallCorrelator()
        pending = correlator.issue("m")

        self.assertFalse(
            correlator.resolve(ResponseFrame(id="unknown", ok=True)),
        )
        self.assertIn(pending.id, correlator)
        self.assertFalse(pending.future.done())
        correlator.cancel_all()

    async def test_second_response_is_ignored(self) -> None:
        """Test that a call is resolved exactly once."""
        correlator = CallCorrelator()
        pending = correlator.issue("m")
        correlator.resolve(ResponseFrame(id=pending.id, ok=True))
        self.assertFalse(
            correlator.resolve(
                ResponseFrame(id=pending.id, ok=False),
            ),
        )
        self.assertEqual(await pending.future, {})

    async def test_timeout(self) -> None:
        """Test that a call without response times out."""
        correlator = CallCorrelator()
        pending = correlator.issue("m", timeout=0.01)

        with self.assertRaises(CallTimeout) as context:
            await pending.future
        self.assertEqual(context.exception.call_id, pending.id)
        self.assertNotIn(pending.id, correlator)

        # A late response is dropped
        self.assertFalse(
            correlator.resolve(ResponseFrame(id=pending.id, ok=True)),
        )

    async def test_cancel_all_resolves_each_call_once(self) -> None:
        """Test that teardown fails every pending call exactly once."""
        correlator = CallCorrelator()
        calls = [correlator.issue("m") for _ in range(5)]
        correlator.resolve(ResponseFrame(id=calls[0].id, ok=True))

        failed = correlator.cancel_all(
            "heartbeat lost",
            reason=FaultReason.HEARTBEAT_TIMEOUT,
        )

        self.assertEqual(failed, 4)
        self.assertEqual(len(correlator), 0)
        self.assertEqual(await calls[0].future, {})
        for pending in calls[1:]:
            with self.assertRaises(ConnectionLost) as context:
                await pending.future
            self.assertEqual(
                context.exception.reason,
                FaultReason.HEARTBEAT_TIMEOUT,
            )
            self.assertIsNone(pending.timer)

    async def test_issue_after_cancel_all(self) -> None:
        """Test that a torn down correlator refuses new calls."""
        correlator = CallCorrelator()
        correlator.cancel_all()
        self.assertTrue(correlator.closed)
        with self.assertRaises(ConnectionLost):
            correlator.issue("m")

    async def test_dropped_handles_are_not_reported(self) -> None:
        """Test that failed calls nobody awaits are not reported by the
        event loop as never retrieved."""
        loop = asyncio.get_running_loop()
        contexts: list[dict] = []
        loop.set_exception_handler(
            lambda _loop, context: contexts.append(context),
        )
        try:
            correlator = CallCorrelator()
            for _ in range(3):
                correlator.issue("m")
            correlator.cancel_all()

            # Let the done callbacks run, then collect the handles
            await asyncio.sleep(0)
            gc.collect()
        finally:
            loop.set_exception_handler(None)

        self.assertEqual(contexts, [])

    async def test_discard(self) -> None:
        """Test that a discarded call is forgotten and cancelled."""
        correlator = CallCorrelator()
        pending = correlator.issue("m")
        correlator.discard(pending.id)
        self.assertNotIn(pending.id, correlator)
        self.assertTrue(pending.future.cancelled())

    async def test_default_timeout(self) -> None:
        """Test that the deadline defaults to the configured timeout."""
        correlator = CallCorrelator(default_timeout=7.0)
        pending = correlator.issue("m")
        self.assertAlmostEqual(pending.deadline - pending.issued_at, 7.0)
        correlator.cancel_all()


if __name__ == "__main__":
    unittest.main()
