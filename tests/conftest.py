from __future__ import annotations

import pytest
from pydantic import BaseModel

from httprpc.server.registry import ServiceRegistry
from httprpc.server.server import RPCServer


class Counter(BaseModel):
    Field: int = 0


class ServiceA:
    """Sample service: three remote methods and one local helper."""

    def MethodX(self, args: Counter, reply: Counter) -> Exception | None:
        reply.Field = args.Field + 1
        return None

    def Boom(self, args: Counter, reply: Counter) -> Exception | None:
        reply.Field = 99
        return RuntimeError("boom")

    def Raises(self, args: Counter, reply: Counter) -> Exception | None:
        raise ValueError("kaboom")

    def helper(self, value: int) -> int:
        return value


@pytest.fixture
def service_a() -> ServiceA:
    return ServiceA()


@pytest.fixture
def registry(service_a: ServiceA) -> ServiceRegistry:
    registry = ServiceRegistry()
    registry.register(service_a)
    return registry


@pytest.fixture
def server(service_a: ServiceA) -> RPCServer:
    server = RPCServer(name="test", settings={"log_level": "DEBUG"})
    server.register(service_a)
    return server
