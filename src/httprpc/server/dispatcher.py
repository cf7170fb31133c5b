# httprpc/server/dispatcher.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from httprpc.codec import decode_envelope, decode_params, encode_error, encode_reply, zero_value
from httprpc.errors import ILL_FORMED_METHOD, UNKNOWN_METHOD, UNKNOWN_SERVICE, RPCError

if TYPE_CHECKING:
    from httprpc.server.registry import MethodDescriptor, ServiceRegistry

logger = logging.getLogger("httprpc.dispatcher")


def _call_handler(method: "MethodDescriptor", argv: Any, replyv: Any) -> Exception | None:
    """
    Call the bound handler with (argv, replyv) and return its error value.
    A raised exception counts as the returned error.
    """
    try:
        err = method(argv, replyv)
    except Exception as e:
        logger.exception(f"Handler {method.name} raised")
        return e

    if err is not None and not isinstance(err, Exception):
        return TypeError(f"method {method.name} returned {type(err).__name__}, not Exception | None")
    return err


class RPCDispatcher:
    """Turns one raw request payload into one response payload."""

    def __init__(self, registry: "ServiceRegistry", strict_errors: bool = False):
        self.registry = registry
        self.strict_errors = strict_errors

    def dispatch(self, data: bytes) -> bytes | None:
        """
        Returns the response body, or None when the request is dropped
        (lookup, decode and encode failures outside strict mode).
        """
        try:
            envelope = decode_envelope(data)
            logger.debug(f"Request: {envelope!r}")
            method = self.lookup(envelope.Method)
            argv = decode_params(envelope.Params, method.arg_type)
        except RPCError as e:
            return self._reject(e)

        # Reply is an out-parameter the handler fills in place.
        replyv = zero_value(method.reply_type)
        err = _call_handler(method, argv, replyv)

        if err is not None:
            out = encode_error(str(err))
        else:
            try:
                out = encode_reply(replyv, method.reply_type)
            except RPCError as e:
                return self._reject(e)

        logger.debug(out.decode(errors="replace"))
        return out

    def lookup(self, identifier: str) -> "MethodDescriptor":
        parts = identifier.split(".")
        if len(parts) != 2 or not all(parts):
            raise ILL_FORMED_METHOD(identifier)
        service_name, method_name = parts

        if self.registry.get_service(service_name) is None:
            raise UNKNOWN_SERVICE(service_name)
        method = self.registry.get_method(service_name, method_name)
        if method is None:
            raise UNKNOWN_METHOD(identifier)
        return method

    def _reject(self, error: RPCError) -> bytes | None:
        if not self.strict_errors:
            logger.error(f"{error.kind}: {error.message} (request dropped)")
            return None
        logger.error(f"{error.kind}: {error.message}")
        return encode_error(error.message)
