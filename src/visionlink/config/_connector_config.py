# -*- coding: utf-8 -*-
"""The timing configuration shared by all the backend clients."""
from pydantic import BaseModel, Field


class ConnectorConfig(BaseModel):
    """The timeouts, liveness, reconnection and throttling settings of a
    connection. All durations are in seconds.

    Example:
        .. code-block:: python

            config = ConnectorConfig(call_timeout=5.0, video_fps=2)
            client = RPCClient("wss://gateway.example.com/ws", config=config)
    """

    call_timeout: float = Field(default=10.0, gt=0)
    """The default deadline of a call or a turn."""

    connect_timeout: float = Field(default=3.0, gt=0)
    """The bound on waiting for the transport to report ready."""

    connect_poll_interval: float = Field(default=0.2, gt=0)
    """The polling step while waiting for the transport."""

    setup_timeout: float = Field(default=5.0, gt=0)
    """The bound on waiting for `setupComplete` in the session dialect."""

    heartbeat_interval: float = Field(default=20.0, gt=0)
    """The heartbeat period while the connection is ready."""

    heartbeat_grace: float = Field(default=10.0, gt=0)
    """How long to wait for inbound traffic after a heartbeat."""

    reconnect_enabled: bool = True
    """Whether to schedule reconnection attempts after a fault."""

    backoff_base: float = Field(default=1.0, gt=0)
    """The base delay of the exponential backoff."""

    backoff_cap: float = Field(default=30.0, gt=0)
    """The maximum delay between two reconnection attempts."""

    max_reconnect_attempts: int = Field(default=12, ge=1)
    """The number of attempts before reconnection is given up."""

    video_fps: float = Field(default=1.0, gt=0)
    """The target rate of outbound media frames, clamped to [1, 30] by the
    throttle."""
