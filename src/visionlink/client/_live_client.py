# -*- coding: utf-8 -*-
"""Google Gemini Multimodal Live API client used as a vision sensor.

The client streams camera frames through ``realtimeInput`` messages and
asks the model to describe the scene with ``clientContent`` turns. The
answers are text only.

Reference:
    https://ai.google.dev/api/live
"""
from ..connection import (
    ConnectionSessionBase,
    LiveConnectionSession,
    TransportBase,
)
from ..exception import NotConfigured, QueryInProgress
from ..protocol import build_setup_message, inline_data_part, text_part
from ..types import JSONObject, JSONSerializableObject
from ._client_base import BackendClientBase


DEFAULT_VISION_INSTRUCTIONS = (
    "You are a vision sensor for a smart glasses assistant. Your ONLY job "
    "is to describe what you see in the video feed.\n\n"
    "When asked to describe the scene:\n"
    "- Be concise but informative (2-3 sentences max)\n"
    "- Focus on the most relevant/interesting elements\n"
    "- Mention people, objects, text, actions happening\n"
    "- If you see text, read it out\n\n"
    "You do NOT make decisions or take actions. You only describe what you "
    "see."
)

DEFAULT_SCENE_PROMPT = "What do you see right now? Be concise."


class LiveVisionClient(BackendClientBase):
    """Client of the Gemini Multimodal Live API in vision sensor mode.

    The session is set up with text responses and without automatic
    activity detection, so the model only answers explicit turns.

    Example:
        .. code-block:: python

            client = LiveVisionClient(api_key="your-api-key")
            await client.connect()

            for frame in camera_frames():
                await client.offer_frame(frame)

            description = await client.describe_scene()
    """

    # Gemini Multimodal Live API WebSocket endpoint (v1beta)
    WEBSOCKET_URL = (
        "wss://generativelanguage.googleapis.com/ws/"
        "google.ai.generativelanguage.v1beta.GenerativeService."
        "BidiGenerateContent"
    )

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash-exp",
        instructions: str = DEFAULT_VISION_INSTRUCTIONS,
        response_modalities: list[str] | None = None,
        temperature: float | None = 0.7,
        vad_enabled: bool = False,
        session_resumption: bool = False,
        session_resumption_handle: str | None = None,
        base_url: str | None = None,
        generate_kwargs: dict[str, JSONSerializableObject] | None = None,
        **kwargs: object,
    ) -> None:
        """Initialize the live vision client.

        Args:
            api_key (`str`):
                The Google API key.
            model_name (`str`, defaults to `"gemini-2.0-flash-exp"`):
                The model name.
            instructions (`str`, optional):
                The system instruction. Defaults to a vision sensor prompt.
            response_modalities (`list[str] | None`, optional):
                The response modalities. Defaults to ["TEXT"].
            temperature (`float | None`, defaults to `0.7`):
                The sampling temperature.
            vad_enabled (`bool`, defaults to `False`):
                Whether the server detects user activity automatically.
            session_resumption (`bool`, defaults to `False`):
                Whether to ask the server for resumption handles, used
                when reconnecting.
            session_resumption_handle (`str | None`, optional):
                The handle of a previous session to resume.
            base_url (`str | None`, optional):
                The custom WebSocket URL.
            generate_kwargs (`dict[str, JSONSerializableObject] | None`, \
            optional):
                Additional generation parameters.
            **kwargs:
                The `config` and `transport_factory` of
                `BackendClientBase`.
        """
        super().__init__(**kwargs)
        self.api_key = api_key
        self.model_name = model_name
        self.instructions = instructions
        self.response_modalities = response_modalities or ["TEXT"]
        self.temperature = temperature
        self.vad_enabled = vad_enabled
        self.session_resumption = session_resumption
        self.session_resumption_handle = session_resumption_handle
        self.base_url = base_url or self.WEBSOCKET_URL
        self.generate_kwargs = generate_kwargs or {}

        self.last_scene_description = ""
        self._query_in_progress = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "gemini"

    @property
    def supports_media(self) -> bool:
        """Gemini Live API accepts streamed image frames."""
        return True

    def _get_websocket_url(self) -> str:
        """Get Gemini WebSocket URL with API key."""
        return f"{self.base_url}?key={self.api_key}"

    def _get_headers(self) -> dict[str, str]:
        """Get headers for Gemini WebSocket connection."""
        return {
            "Content-Type": "application/json",
        }

    def _build_setup_message(self) -> JSONObject:
        return build_setup_message(
            model_name=self.model_name,
            response_modalities=self.response_modalities,
            instructions=self.instructions,
            temperature=self.temperature,
            vad_enabled=self.vad_enabled,
            resumption_handle=self.session_resumption_handle,
            session_resumption=self.session_resumption,
            generate_kwargs=self.generate_kwargs,
        )

    def _create_session(
        self,
        transport: TransportBase,
    ) -> LiveConnectionSession:
        return LiveConnectionSession(
            transport,
            setup_message=self._build_setup_message(),
            **self._session_kwargs(),
        )

    def _carry_over(self, previous: ConnectionSessionBase) -> None:
        if (
            self.session_resumption
            and isinstance(previous, LiveConnectionSession)
            and previous.resumption_handle
        ):
            self.session_resumption_handle = previous.resumption_handle

    async def _send_media(
        self,
        session: ConnectionSessionBase,
        data: bytes,
        mime_type: str,
    ) -> None:
        assert isinstance(session, LiveConnectionSession)
        await session.send_media(data, mime_type)

    async def connect(self) -> None:
        """Open a new session with the Gemini Live API.

        Raises:
            `NotConfigured`:
                If the API key is empty.
            `ConnectionFault`:
                The fault of the failed attempt.
        """
        if not self.api_key:
            raise NotConfigured("The Gemini API key is not set")
        await super().connect()

    # =========================================================================
    # Turns
    # =========================================================================

    async def send_turn(
        self,
        text: str | None = None,
        images: list[bytes] | None = None,
        mime_type: str = "image/jpeg",
        timeout: float | None = None,
    ) -> str:
        """Send a user turn and wait for the complete answer.

        Args:
            text (`str | None`, optional):
                The text of the turn.
            images (`list[bytes] | None`, optional):
                The encoded images of the turn.
            mime_type (`str`, defaults to `"image/jpeg"`):
                The MIME type of the images.
            timeout (`float | None`, optional):
                The deadline in seconds, defaults to `call_timeout`.

        Returns:
            `str`:
                The text of the model turn.

        Raises:
            `ValueError`:
                If the turn has neither text nor images.
            `NotConnected`:
                If the client is not ready.
            `CallTimeout`:
                If the model did not complete its turn in time.
            `ConnectionLost`:
                If the connection was torn down meanwhile.
        """
        parts = [text_part(text)] if text else []
        parts.extend(
            inline_data_part(image, mime_type) for image in images or []
        )
        if not parts:
            raise ValueError("A turn needs text or images")

        session = self._require_session()
        assert isinstance(session, LiveConnectionSession)
        future = await session.send_turn(parts, timeout)
        payload = await future

        answer = payload.get("text")
        return answer if isinstance(answer, str) else ""

    async def describe_scene(
        self,
        prompt: str = DEFAULT_SCENE_PROMPT,
        timeout: float | None = None,
    ) -> str:
        """Ask the model to describe what the camera currently sees.

        Only one query may be pending at a time.

        Args:
            prompt (`str`, optional):
                The question asked to the model.
            timeout (`float | None`, optional):
                The deadline in seconds, defaults to `call_timeout`.

        Returns:
            `str`:
                The scene description, also kept in
                `last_scene_description`.

        Raises:
            `NotConnected`:
                If the client is not ready.
            `QueryInProgress`:
                If another query is still pending.
        """
        self._require_session()
        if self._query_in_progress:
            raise QueryInProgress("A query is already in progress")

        self._query_in_progress = True
        try:
            description = await self.send_turn(text=prompt, timeout=timeout)
        finally:
            self._query_in_progress = False

        self.last_scene_description = description
        return description
