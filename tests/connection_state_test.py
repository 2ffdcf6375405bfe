# -*- coding: utf-8 -*-
"""Unit tests for the connection state machine."""
import unittest

from visionlink.connection import (
    ConnectionState,
    TERMINATING_STATES,
    can_transition,
    check_transition,
)
from visionlink.exception import InvalidStateTransition


class TestConnectionState(unittest.TestCase):
    """Test cases for the legal transitions."""

    def test_happy_paths(self) -> None:
        """Test the transitions of both dialects and of a close."""
        paths = [
            # RPC dialect
            [
                ConnectionState.DISCONNECTED,
                ConnectionState.CONNECTING,
                ConnectionState.READY,
                ConnectionState.CLOSING,
                ConnectionState.DISCONNECTED,
            ],
            # Session dialect
            [
                ConnectionState.DISCONNECTED,
                ConnectionState.CONNECTING,
                ConnectionState.HANDSHAKE_IN_PROGRESS,
                ConnectionState.READY,
                ConnectionState.FAULTED,
            ],
        ]
        for path in paths:
            for current, target in zip(path, path[1:]):
                self.assertTrue(can_transition(current, target))
                check_transition(current, target)

    def test_faults_from_every_active_state(self) -> None:
        """Test that a fault can happen at any step of the setup."""
        for state in (
            ConnectionState.CONNECTING,
            ConnectionState.HANDSHAKE_IN_PROGRESS,
            ConnectionState.READY,
        ):
            self.assertTrue(can_transition(state, ConnectionState.FAULTED))

    def test_illegal_transitions(self) -> None:
        """Test a few illegal transitions."""
        illegal = [
            (ConnectionState.DISCONNECTED, ConnectionState.READY),
            (ConnectionState.READY, ConnectionState.HANDSHAKE_IN_PROGRESS),
            (ConnectionState.CLOSING, ConnectionState.FAULTED),
            (ConnectionState.FAULTED, ConnectionState.CONNECTING),
            (ConnectionState.FAULTED, ConnectionState.DISCONNECTED),
        ]
        for current, target in illegal:
            self.assertFalse(can_transition(current, target))
            with self.assertRaises(InvalidStateTransition):
                check_transition(current, target)

    def test_terminating_states(self) -> None:
        """Test the states that no longer accept work."""
        self.assertNotIn(ConnectionState.READY, TERMINATING_STATES)
        self.assertIn(ConnectionState.FAULTED, TERMINATING_STATES)
        self.assertIn(ConnectionState.CLOSING, TERMINATING_STATES)


if __name__ == "__main__":
    unittest.main()
