# -*- coding: utf-8 -*-
"""The errors delivered to a single caller."""
from ._exception_base import ConnectorError


class RemoteCallError(ConnectorError):
    """The server answered a call with `ok=false`."""

    def __init__(
        self,
        code: str | None,
        message: str | None = None,
        call_id: str | None = None,
    ) -> None:
        """Initialize the remote call error.

        Args:
            code (`str | None`):
                The error code reported by the server.
            message (`str | None`, optional):
                The error message reported by the server.
            call_id (`str | None`, optional):
                The id of the failed call.
        """
        super().__init__(message or f"remote call failed with code {code}")
        self.code = code
        self.call_id = call_id


class CallTimeout(ConnectorError):
    """The deadline of a call elapsed before a response arrived."""

    def __init__(self, call_id: str, timeout: float) -> None:
        """Initialize the call timeout error.

        Args:
            call_id (`str`):
                The id of the call that timed out.
            timeout (`float`):
                The deadline in seconds.
        """
        super().__init__(f"call {call_id} timed out after {timeout:g}s")
        self.call_id = call_id
        self.timeout = timeout


class NotConnected(ConnectorError):
    """A call, turn or frame was issued while the connection is not
    ready."""


class QueryInProgress(ConnectorError):
    """A scene query was issued while another one is still pending."""


class NotConfigured(ConnectorError):
    """The client is missing a required setting, e.g. the API key."""
