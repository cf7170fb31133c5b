from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from httprpc.config import ServerSettings
from httprpc.errors import RegistrationRejected
from httprpc.server.validation import validate_method

logger = logging.getLogger("httprpc.registry")


# ──────────────────────────────────────────────────────────────
# MethodDescriptor – Holds bound handler + metadata
# ──────────────────────────────────────────────────────────────
@dataclass
class MethodDescriptor:
    """
    One remotely callable method of a service.

    Callable (behaves like the bound handler) and counts its calls. The
    counter is guarded by a lock owned by the descriptor, since concurrent
    requests may hit the same method.
    """

    name: str
    """Method name (as exposed)."""

    arg_type: type
    """Type of the argument the handler receives."""

    reply_type: type
    """Type of the reply the handler fills in."""

    handle: Callable[[Any, Any], Exception | None]
    """Handler bound to the service receiver."""

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)
    _num_calls: int = field(default=0, init=False, repr=False, compare=False)

    def __call__(self, argv: Any, replyv: Any) -> Exception | None:
        with self._lock:
            self._num_calls += 1
        return self.handle(argv, replyv)

    @property
    def num_calls(self) -> int:
        with self._lock:
            return self._num_calls

    def to_json(self) -> dict:
        return {
            "arg_type": _type_name(self.arg_type),
            "reply_type": _type_name(self.reply_type),
            "num_calls": self.num_calls,
        }


@dataclass
class ServiceDescriptor:
    name: str
    receiver: Any
    methods: Dict[str, MethodDescriptor] = field(default_factory=dict)

    def to_json(self) -> dict:
        return {name: m.to_json() for name, m in self.methods.items()}


def _type_name(t: Any) -> str:
    return getattr(t, "__qualname__", None) or str(t)


# ──────────────────────────────────────────────────────────────
# ServiceRegistry
# ──────────────────────────────────────────────────────────────
class ServiceRegistry:
    """Service name -> ServiceDescriptor table, filled at startup and read-only once frozen."""

    def __init__(self, settings: ServerSettings | None = None):
        self._settings = settings or ServerSettings()
        self._services: Dict[str, ServiceDescriptor] = {}
        self._frozen = False

    # ───── Properties ─────
    @property
    def services(self) -> Dict[str, ServiceDescriptor]:
        return dict(self._services)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if not self._frozen:
            logger.debug(f"Registry frozen with services: {sorted(self._services)}")
        self._frozen = True

    # ───── Register ─────
    def register(self, impl: Any, name: str | None = None) -> ServiceDescriptor:
        """Expose every method of ``impl`` that has the remote-call shape.

        Methods that do not qualify are logged and skipped; they never abort
        the registration of the others.
        """
        if self._frozen:
            raise RuntimeError("registry is frozen: services must be registered before serving")
        if inspect.isclass(impl):
            raise TypeError(f"register expects an instance, got class {impl.__name__}")

        service_name = name or type(impl).__name__
        if "." in service_name:
            raise ValueError(f"service name {service_name!r} must not contain '.'")

        if service_name in self._services:
            if not self._settings.warn_on_duplicate:
                raise ValueError(f"Service '{service_name}' already registered")
            logger.warning(f"Service '{service_name}' already registered, replacing it")

        service = ServiceDescriptor(name=service_name, receiver=impl)
        for mname, _ in inspect.getmembers(type(impl), inspect.isfunction):
            handle = getattr(impl, mname)
            if not inspect.ismethod(handle):
                # staticmethod: no receiver to bind
                continue
            try:
                arg_type, reply_type = validate_method(mname, handle)
            except RegistrationRejected as e:
                logger.log(e.level, f"{service_name}: {e}")
                continue
            service.methods[mname] = MethodDescriptor(
                name=mname, arg_type=arg_type, reply_type=reply_type, handle=handle
            )

        if not service.methods:
            logger.warning(f"Service '{service_name}' has no exported methods of suitable type")

        self._services[service_name] = service
        logger.info(f"Registered service {service_name}: {sorted(service.methods)}")
        return service

    # ───── Lookup ─────
    def get_service(self, name: str) -> ServiceDescriptor | None:
        return self._services.get(name)

    def get_method(self, service_name: str, method_name: str) -> MethodDescriptor | None:
        service = self._services.get(service_name)
        if service is None:
            return None
        return service.methods.get(method_name)

    # ───── Introspection ─────
    def list_services(self) -> Dict[str, dict]:
        return {name: s.to_json() for name, s in self._services.items()}
