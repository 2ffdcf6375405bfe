# -*- coding: utf-8 -*-
"""The messages of the session dialect (live multimodal model API).

Every message is a JSON object keyed by exactly one of the known top-level
keys, e.g. ``{"setup": {...}}`` or ``{"serverContent": {...}}``. The
client must send `setup` first and wait for `setupComplete` before any
content is exchanged.

Reference:
    https://ai.google.dev/api/live
"""
import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exception import MalformedPayload
from ..types import JSONObject
from ..value import decode_value


class SessionMessageType(str, Enum):
    """The top-level keys of the session dialect."""

    SETUP = "setup"
    SETUP_COMPLETE = "setupComplete"
    CLIENT_CONTENT = "clientContent"
    SERVER_CONTENT = "serverContent"
    REALTIME_INPUT = "realtimeInput"
    GO_AWAY = "goAway"
    SESSION_RESUMPTION_UPDATE = "sessionResumptionUpdate"


_KNOWN_KEYS = {member.value: member for member in SessionMessageType}


@dataclass
class SessionMessage:
    """A parsed message of the session dialect."""

    type: SessionMessageType
    body: JSONObject = field(default_factory=dict)


def parse_session_message(data: bytes | bytearray | str) -> SessionMessage:
    """Parse a wire message of the session dialect.

    Unknown top-level keys (e.g. usage metadata) are ignored, but exactly
    one known key must be present.

    Args:
        data (`bytes | bytearray | str`):
            The raw message received from the transport.

    Returns:
        `SessionMessage`:
            The parsed message.

    Raises:
        `MalformedPayload`:
            If the message is not a JSON object carrying exactly one known
            top-level key with an object body.
    """
    message = decode_value(data)
    if not isinstance(message, dict):
        raise MalformedPayload("Session message must be a JSON object")

    keys = [key for key in message if key in _KNOWN_KEYS]
    if len(keys) != 1:
        raise MalformedPayload(
            "Session message must carry exactly one known key, got "
            f"{list(message.keys())}",
        )

    body = message[keys[0]]
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise MalformedPayload(f"'{keys[0]}' must be an object")

    return SessionMessage(type=_KNOWN_KEYS[keys[0]], body=body)


def build_setup_message(
    model_name: str,
    response_modalities: list[str] | None = None,
    instructions: str | None = None,
    temperature: float | None = None,
    vad_enabled: bool = True,
    resumption_handle: str | None = None,
    session_resumption: bool = False,
    generate_kwargs: JSONObject | None = None,
) -> JSONObject:
    """Build the `setup` message that opens a session.

    Args:
        model_name (`str`):
            The model name, without the "models/" prefix.
        response_modalities (`list[str] | None`, optional):
            The response modalities, "TEXT" and/or "AUDIO". Defaults to
            ["TEXT"].
        instructions (`str | None`, optional):
            The system instruction.
        temperature (`float | None`, optional):
            The sampling temperature.
        vad_enabled (`bool`, defaults to `True`):
            Whether the server detects user activity automatically. Disable
            it when the client decides when to query.
        resumption_handle (`str | None`, optional):
            The handle of a previous session to resume.
        session_resumption (`bool`, defaults to `False`):
            Whether to ask the server for resumption handles.
        generate_kwargs (`JSONObject | None`, optional):
            Extra fields merged into the generation config.

    Returns:
        `JSONObject`:
            The setup message.
    """
    generation_config: dict[str, Any] = {
        "responseModalities": response_modalities or ["TEXT"],
    }
    if temperature is not None:
        generation_config["temperature"] = temperature
    generation_config.update(generate_kwargs or {})

    setup: dict[str, Any] = {
        "model": f"models/{model_name}",
        "generationConfig": generation_config,
    }

    if instructions:
        setup["systemInstruction"] = {"parts": [{"text": instructions}]}

    # Automatic activity detection is on by default, only send it to
    # disable
    if not vad_enabled:
        setup["realtimeInputConfig"] = {
            "automaticActivityDetection": {"disabled": True},
        }

    if session_resumption or resumption_handle:
        setup["sessionResumption"] = (
            {"handle": resumption_handle} if resumption_handle else {}
        )

    return {SessionMessageType.SETUP.value: setup}


def text_part(text: str) -> JSONObject:
    """Build a text part of a content turn."""
    return {"text": text}


def inline_data_part(data: bytes, mime_type: str) -> JSONObject:
    """Build an inline media part of a content turn.

    Args:
        data (`bytes`):
            The encoded media, e.g. JPEG bytes.
        mime_type (`str`):
            The MIME type of the media, e.g. "image/jpeg".

    Returns:
        `JSONObject`:
            The part with base64 encoded data.
    """
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(data).decode("ascii"),
        },
    }


def build_client_content(
    parts: list[JSONObject],
    turn_complete: bool = True,
    role: str = "user",
) -> JSONObject:
    """Build a `clientContent` turn message.

    Args:
        parts (`list[JSONObject]`):
            The content parts, see `text_part` and `inline_data_part`.
        turn_complete (`bool`, defaults to `True`):
            Whether this message ends the client turn, asking the server to
            respond.
        role (`str`, defaults to `"user"`):
            The role of the turn.

    Returns:
        `JSONObject`:
            The client content message.
    """
    return {
        SessionMessageType.CLIENT_CONTENT.value: {
            "turns": [{"role": role, "parts": parts}],
            "turnComplete": turn_complete,
        },
    }


def build_realtime_input(data: bytes, mime_type: str) -> JSONObject:
    """Build a `realtimeInput` message carrying one media chunk.

    Args:
        data (`bytes`):
            The encoded media chunk, e.g. one JPEG frame.
        mime_type (`str`):
            The MIME type of the chunk.

    Returns:
        `JSONObject`:
            The realtime input message.
    """
    return {
        SessionMessageType.REALTIME_INPUT.value: {
            "mediaChunks": [
                {
                    "mimeType": mime_type,
                    "data": base64.b64encode(data).decode("ascii"),
                },
            ],
        },
    }


def extract_turn_text(server_content: JSONObject) -> str:
    """Concatenate the text parts of a `serverContent` body.

    Thought parts are skipped.

    Args:
        server_content (`JSONObject`):
            The body of a `serverContent` message.

    Returns:
        `str`:
            The text carried by the model turn, or an empty string.

    Raises:
        `MalformedPayload`:
            If `modelTurn` is not an object or its `parts` not a list.
    """
    model_turn = server_content.get("modelTurn")
    if model_turn is None:
        return ""
    if not isinstance(model_turn, dict):
        raise MalformedPayload("'modelTurn' must be an object")

    parts = model_turn.get("parts")
    if parts is None:
        return ""
    if not isinstance(parts, list):
        raise MalformedPayload("'modelTurn.parts' must be a list")

    texts = []
    for part in parts:
        if not isinstance(part, dict) or part.get("thought"):
            continue
        text = part.get("text")
        if isinstance(text, str):
            texts.append(text)
    return "".join(texts)


def is_turn_complete(server_content: JSONObject) -> bool:
    """Check whether a `serverContent` body ends the server turn.

    Raises:
        `MalformedPayload`:
            If `turnComplete` is present but not a boolean.
    """
    turn_complete = server_content.get("turnComplete")
    if turn_complete is None:
        return False
    if not isinstance(turn_complete, bool):
        raise MalformedPayload("'turnComplete' must be a boolean")
    return turn_complete
