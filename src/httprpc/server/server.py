from __future__ import annotations

import logging
from typing import Any, Dict

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from httprpc.config import ServerSettings
from httprpc.server.dispatcher import RPCDispatcher
from httprpc.server.registry import ServiceDescriptor, ServiceRegistry
from httprpc.transport.http import HTTPTransport


# ──────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────
def _configure_logging(level: str | int = "INFO"):
    logger = logging.getLogger("httprpc")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# ──────────────────────────────────────────────────────────────
# Main Server Class
# ──────────────────────────────────────────────────────────────
class RPCServer:
    """
    Registers service objects and serves them over HTTP.

        server = RPCServer(settings={"port": 8001})
        server.register(Arith())
        server.run()

    Everything must be registered before the app is built; building the app
    freezes the registry.
    """

    def __init__(
        self,
        name: str | None = None,
        settings: ServerSettings | dict | None = None,
    ):
        # normalize settings: accept dataclass or dict or None
        if settings is None:
            self._settings: ServerSettings = ServerSettings()
        elif isinstance(settings, ServerSettings):
            self._settings = settings
        elif isinstance(settings, dict):
            self._settings = ServerSettings(**settings)
        else:
            raise TypeError("settings must be ServerSettings | dict | None")

        self._name = name or "httprpc"
        self._logger = logging.getLogger("httprpc.server")
        self._registry = ServiceRegistry(self._settings)
        self._app: FastAPI | None = None

        _configure_logging(self._settings.log_level)
        self._logger.info(f"Initialized {self._name}")

    # ───── Properties ─────
    @property
    def name(self) -> str:
        return self._name

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    @property
    def app(self) -> FastAPI:
        if self._app is None:
            self._setup_fastapi_app()
        return self._app

    # ───── Register ─────
    def register(self, impl: Any, name: str | None = None) -> ServiceDescriptor:
        return self._registry.register(impl, name=name)

    def list_services(self) -> Dict[str, dict]:
        return self._registry.list_services()

    # ───── Run ─────
    def run(self, *, host: str | None = None, port: int | None = None) -> None:
        """Run the HTTP server until interrupted."""
        host = host or self._settings.host
        port = port or self._settings.port
        self._logger.info(f"RPC Server starting at http://{host}:{port}{self._settings.mount_path}")
        anyio.run(self._run_http_async, host, port)

    async def _run_http_async(self, host: str, port: int):
        config = uvicorn.Config(
            self.app,
            host=host,
            port=port,
            log_level=self._settings.log_level.lower() if isinstance(self._settings.log_level, str) else "info",
        )
        server = uvicorn.Server(config)
        await server.serve()

    # ───── FastAPI App Setup ─────
    def _setup_fastapi_app(self):
        self._registry.freeze()
        dispatcher = RPCDispatcher(self._registry, strict_errors=self._settings.strict_errors)
        transport = HTTPTransport(dispatcher)

        app = FastAPI(title=self._name)

        # RPC endpoint
        path = self._settings.mount_path
        app.add_api_route(path, transport.handle, methods=["POST", "GET"])
        app.add_api_route(path, transport.preflight, methods=["OPTIONS"])

        # Introspection endpoint
        async def methods_endpoint():
            return JSONResponse(content={"result": self.list_services()})

        app.get("/methods")(methods_endpoint)
        self._app = app
