# -*- coding: utf-8 -*-
"""The frames of the RPC dialect.

Each frame is one JSON object with a `type` field:

- ``{"type": "req", "id", "method", "params"}`` sent by the client,
- ``{"type": "res", "id", "ok", "payload", "error": {"code", "message"}}``
  answering exactly one request,
- ``{"type": "event", "event", "payload", "seq"}`` pushed by the server.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exception import MalformedPayload
from ..types import JSONObject
from ..value import decode_value, encode_value


class FrameType(str, Enum):
    """The frame types of the RPC dialect."""

    REQUEST = "req"
    RESPONSE = "res"
    EVENT = "event"


class RPCMethod(str, Enum):
    """The well-known methods of the gateway."""

    CONNECT = "connect"
    CHAT_SEND = "chat.send"
    CANCEL_RUN = "run/cancel"
    TOOL_RESULT = "tool.result"


class RPCEventName(str, Enum):
    """The well-known events pushed by the gateway."""

    AGENT_MESSAGE = "agent_message"
    TOOL_STATUS = "tool_status"
    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    ERROR = "error"


@dataclass
class CallErrorInfo:
    """The error object of a failed response."""

    code: str | None = None
    message: str | None = None


@dataclass
class RequestFrame:
    """A call issued by the client."""

    id: str
    method: str
    params: JSONObject = field(default_factory=dict)
    type: FrameType = field(default=FrameType.REQUEST, init=False)


@dataclass
class ResponseFrame:
    """The answer to one request."""

    id: str
    ok: bool
    payload: JSONObject | None = None
    error: CallErrorInfo | None = None
    type: FrameType = field(default=FrameType.RESPONSE, init=False)


@dataclass
class EventFrame:
    """An unsolicited event pushed by the server."""

    event: str
    payload: JSONObject | None = None
    seq: int | None = None
    type: FrameType = field(default=FrameType.EVENT, init=False)


RPCFrame = RequestFrame | ResponseFrame | EventFrame


def _frame_to_dict(frame: RPCFrame) -> dict[str, Any]:
    """Convert a frame to its wire object, leaving out empty optionals."""
    if isinstance(frame, RequestFrame):
        return {
            "type": frame.type.value,
            "id": frame.id,
            "method": frame.method,
            "params": frame.params,
        }

    if isinstance(frame, ResponseFrame):
        data: dict[str, Any] = {
            "type": frame.type.value,
            "id": frame.id,
            "ok": frame.ok,
        }
        if frame.payload is not None:
            data["payload"] = frame.payload
        if frame.error is not None:
            data["error"] = {
                key: value
                for key, value in (
                    ("code", frame.error.code),
                    ("message", frame.error.message),
                )
                if value is not None
            }
        return data

    if isinstance(frame, EventFrame):
        data = {"type": frame.type.value, "event": frame.event}
        if frame.payload is not None:
            data["payload"] = frame.payload
        if frame.seq is not None:
            data["seq"] = frame.seq
        return data

    raise TypeError(f"Expected an RPC frame, got {type(frame)}")


def encode_rpc_frame(frame: RPCFrame) -> str:
    """Serialize an RPC frame to a JSON text frame.

    Args:
        frame (`RPCFrame`):
            The frame to serialize.

    Returns:
        `str`:
            The JSON text.

    Raises:
        `ValueEncodingError`:
            If the params or payload contain unsupported values.
    """
    return encode_value(_frame_to_dict(frame)).decode("utf-8")


def _require_str(data: dict, key: str, frame_type: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise MalformedPayload(
            f"'{frame_type}' frame requires a non-empty string '{key}'",
        )
    return value


def _optional_mapping(data: dict, key: str) -> JSONObject | None:
    value = data.get(key)
    if value is not None and not isinstance(value, dict):
        raise MalformedPayload(f"'{key}' must be an object")
    return value


def decode_rpc_frame(data: bytes | bytearray | str) -> RPCFrame:
    """Parse a wire message of the RPC dialect.

    Args:
        data (`bytes | bytearray | str`):
            The raw message received from the transport.

    Returns:
        `RPCFrame`:
            The parsed request, response or event frame.

    Raises:
        `MalformedPayload`:
            If the message is not a structurally valid frame.
    """
    message = decode_value(data)
    if not isinstance(message, dict):
        raise MalformedPayload("RPC frame must be a JSON object")

    frame_type = message.get("type")

    if frame_type == FrameType.REQUEST.value:
        return RequestFrame(
            id=_require_str(message, "id", frame_type),
            method=_require_str(message, "method", frame_type),
            params=_optional_mapping(message, "params") or {},
        )

    if frame_type == FrameType.RESPONSE.value:
        ok = message.get("ok")
        if not isinstance(ok, bool):
            raise MalformedPayload("'res' frame requires a boolean 'ok'")
        error = _optional_mapping(message, "error")
        error_info = None
        if error is not None:
            code = error.get("code")
            error_info = CallErrorInfo(
                code=None if code is None else str(code),
                message=error.get("message"),
            )
        return ResponseFrame(
            id=_require_str(message, "id", frame_type),
            ok=ok,
            payload=_optional_mapping(message, "payload"),
            error=error_info,
        )

    if frame_type == FrameType.EVENT.value:
        seq = message.get("seq")
        if seq is not None and (
            isinstance(seq, bool) or not isinstance(seq, int)
        ):
            raise MalformedPayload("'seq' must be an integer")
        return EventFrame(
            event=_require_str(message, "event", frame_type),
            payload=_optional_mapping(message, "payload"),
            seq=seq,
        )

    raise MalformedPayload(f"Unknown RPC frame type {frame_type!r}")
