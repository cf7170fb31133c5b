# httprpc/client/client.py
import logging
from typing import Any, Optional, Type

import httpx
from pydantic import BaseModel

from httprpc.errors import NO_RESPONSE, RemoteError

logger = logging.getLogger("httprpc.client")


def _is_error_response(data: Any) -> bool:
    return isinstance(data, dict) and set(data) == {"Error"}


class HTTPRPCClient:
    """Calls ``Service.Method`` on an httprpc server."""

    def __init__(self, url: str, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def call(self, method: str, params: Any = None, reply_type: Optional[Type[BaseModel]] = None) -> Any:
        """
        Post ``{"Method": method, "Params": params}`` and return the reply.

        Raises RemoteError when the server answers with an error envelope and
        RPCError (NoResponse) when it drops the request.
        """
        if isinstance(params, BaseModel):
            params = params.model_dump(mode="json", by_alias=True)
        payload = {"Method": method, "Params": params}

        logger.debug(f"Calling {method} at {self.url}")
        resp = await self.client.post(self.url, json=payload)
        resp.raise_for_status()
        if not resp.content:
            raise NO_RESPONSE(method)

        data = resp.json()
        if _is_error_response(data):
            raise RemoteError(data["Error"])
        if reply_type is not None:
            return reply_type.model_validate(data)
        return data

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self) -> "HTTPRPCClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
