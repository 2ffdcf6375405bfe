# -*- coding: utf-8 -*-
"""The frame protocol of the two backend dialects.

- RPC dialect: request/response/event frames correlated by id
- Session dialect: setup handshake followed by content turns
"""

from ._rpc_frames import (
    FrameType,
    RPCMethod,
    RPCEventName,
    CallErrorInfo,
    RequestFrame,
    ResponseFrame,
    EventFrame,
    RPCFrame,
    encode_rpc_frame,
    decode_rpc_frame,
)
from ._session_frames import (
    SessionMessageType,
    SessionMessage,
    parse_session_message,
    build_setup_message,
    build_client_content,
    build_realtime_input,
    text_part,
    inline_data_part,
    extract_turn_text,
    is_turn_complete,
)

__all__ = [
    "FrameType",
    "RPCMethod",
    "RPCEventName",
    "CallErrorInfo",
    "RequestFrame",
    "ResponseFrame",
    "EventFrame",
    "RPCFrame",
    "encode_rpc_frame",
    "decode_rpc_frame",
    "SessionMessageType",
    "SessionMessage",
    "parse_session_message",
    "build_setup_message",
    "build_client_content",
    "build_realtime_input",
    "text_part",
    "inline_data_part",
    "extract_turn_text",
    "is_turn_complete",
]
