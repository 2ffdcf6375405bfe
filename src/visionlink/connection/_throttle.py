# -*- coding: utf-8 -*-
"""Pacing of outbound media frames."""
from enum import Enum


class ThrottleDecision(str, Enum):
    """What to do with an offered frame."""

    EMIT = "emit"
    DROP = "drop"


class FrameThrottle:
    """Limit outbound frames to a target rate, keeping the newest frame.

    A frame offered before the minimum interval has elapsed since the last
    emission is dropped, never queued, so no backlog of stale frames is
    ever sent.
    """

    MIN_FPS = 1.0
    MAX_FPS = 30.0

    def __init__(self, target_fps: float = 1.0) -> None:
        """Initialize the throttle.

        Args:
            target_fps (`float`, defaults to `1.0`):
                The target frame rate, clamped to [`MIN_FPS`, `MAX_FPS`].
        """
        self.target_fps = min(
            max(float(target_fps), self.MIN_FPS),
            self.MAX_FPS,
        )
        self.min_interval = 1.0 / self.target_fps
        self.last_emit_at: float | None = None

    def offer(self, frame: bytes, now: float) -> ThrottleDecision:
        """Decide whether a frame should be sent.

        Args:
            frame (`bytes`):
                The encoded frame. Only its freshness matters here.
            now (`float`):
                The current monotonic timestamp in seconds.

        Returns:
            `ThrottleDecision`:
                `EMIT` if the frame should be sent now, `DROP` otherwise.
        """
        if (
            self.last_emit_at is not None
            and now - self.last_emit_at < self.min_interval
        ):
            return ThrottleDecision.DROP

        self.last_emit_at = now
        return ThrottleDecision.EMIT

    def reset(self) -> None:
        """Forget the last emission, so that the next frame is emitted."""
        self.last_emit_at = None
