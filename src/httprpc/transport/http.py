# httprpc/transport/http.py
import logging

import anyio
from fastapi import Request, Response
from starlette.requests import ClientDisconnect

from ..server.dispatcher import RPCDispatcher

logger = logging.getLogger("httprpc.transport")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class HTTPTransport:
    def __init__(self, dispatcher: RPCDispatcher):
        self.dispatcher = dispatcher

    async def handle(self, request: Request) -> Response:
        logger.debug("----------------")
        try:
            raw = await request.body()
        except ClientDisconnect as e:
            logger.error(f"Cannot read request body: {e!r}")
            return self._make_response(b"")

        # Dispatch blocks until the handler returns; keep it off the event loop.
        out = await anyio.to_thread.run_sync(self.dispatcher.dispatch, raw)
        return self._make_response(out or b"")

    async def preflight(self) -> Response:
        return self._make_response(b"")

    def _make_response(self, content: bytes) -> Response:
        return Response(content=content, media_type="application/json", headers=CORS_HEADERS)
