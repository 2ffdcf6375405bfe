# -*- coding: utf-8 -*-
"""The client of an agent gateway speaking the RPC dialect."""
import asyncio
import base64

from ..connection import RPCConnectionSession, TransportBase
from ..protocol import RPCMethod
from ..types import JSONObject, JSONSerializableObject
from ._client_base import BackendClientBase


class RPCClient(BackendClientBase):
    """Client of an agent gateway exchanging request, response and event
    frames over a WebSocket.

    Every call is correlated with its response by id, and fails with
    `RemoteCallError`, `CallTimeout` or `ConnectionLost` otherwise. Server
    events are delivered to the subscribers as `ConnectorServerEvent`.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        **kwargs: object,
    ) -> None:
        """Initialize the RPC client.

        Args:
            url (`str`):
                The WebSocket endpoint of the gateway.
            token (`str | None`, optional):
                The bearer token sent with the opening handshake.
            **kwargs:
                The `config` and `transport_factory` of
                `BackendClientBase`.
        """
        super().__init__(**kwargs)
        self.url = url
        self.token = token

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "gateway"

    def _get_websocket_url(self) -> str:
        """Get the gateway endpoint URL."""
        return self.url

    def _get_headers(self) -> dict[str, str]:
        """Get the authentication headers."""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _create_session(
        self,
        transport: TransportBase,
    ) -> RPCConnectionSession:
        return RPCConnectionSession(transport, **self._session_kwargs())

    def _require_rpc_session(self) -> RPCConnectionSession:
        session = self._require_session()
        assert isinstance(session, RPCConnectionSession)
        return session

    # =========================================================================
    # Calls
    # =========================================================================

    async def send_call(
        self,
        method: str,
        params: JSONObject | None = None,
        timeout: float | None = None,
    ) -> "asyncio.Future[JSONObject]":
        """Send a request without waiting for its response.

        Args:
            method (`str`):
                The method name.
            params (`JSONObject | None`, optional):
                The parameters of the call.
            timeout (`float | None`, optional):
                The deadline in seconds, defaults to `call_timeout`.

        Returns:
            `asyncio.Future[JSONObject]`:
                The completion handle of the call.

        Raises:
            `NotConnected`:
                If the client is not ready.
            `ValueEncodingError`:
                If the params cannot be encoded.
        """
        session = self._require_rpc_session()
        return await session.send_call(method, params, timeout)

    async def call(
        self,
        method: str,
        params: JSONObject | None = None,
        timeout: float | None = None,
    ) -> JSONObject:
        """Send a request and wait for the response payload.

        Raises:
            `RemoteCallError`:
                If the server answered with an error.
            `CallTimeout`:
                If no response arrived before the deadline.
            `ConnectionLost`:
                If the connection was torn down meanwhile.
        """
        future = await self.send_call(method, params, timeout)
        return await future

    async def send_chat(
        self,
        text: str,
        images: list[bytes] | None = None,
        mime_type: str = "image/jpeg",
        timeout: float | None = None,
    ) -> JSONObject:
        """Send a chat message to the agent, optionally with images.

        Args:
            text (`str`):
                The message text.
            images (`list[bytes] | None`, optional):
                The encoded images attached to the message.
            mime_type (`str`, defaults to `"image/jpeg"`):
                The MIME type of the images.
            timeout (`float | None`, optional):
                The deadline in seconds.

        Returns:
            `JSONObject`:
                The response payload, usually carrying the run id.
        """
        params: JSONObject = {"message": text}
        if images:
            params["attachments"] = [
                {
                    "type": "image",
                    "mimeType": mime_type,
                    "data": base64.b64encode(image).decode("ascii"),
                }
                for image in images
            ]
        return await self.call(RPCMethod.CHAT_SEND.value, params, timeout)

    async def cancel_run(
        self,
        run_id: str,
        timeout: float | None = None,
    ) -> JSONObject:
        """Cancel a running agent run."""
        return await self.call(
            RPCMethod.CANCEL_RUN.value,
            {"runId": run_id},
            timeout,
        )

    async def send_tool_result(
        self,
        call_id: str,
        result: JSONSerializableObject,
        timeout: float | None = None,
    ) -> JSONObject:
        """Answer a tool call requested by the agent.

        Args:
            call_id (`str`):
                The id of the tool call.
            result (`JSONSerializableObject`):
                The tool execution result.
            timeout (`float | None`, optional):
                The deadline in seconds.
        """
        return await self.call(
            RPCMethod.TOOL_RESULT.value,
            {"callId": call_id, "result": result},
            timeout,
        )
