"""Method-shape contract for remotely exposed handlers.

A handler qualifies when it looks like::

    def Multiply(self, args: Args, reply: Reply) -> Exception | None:
        reply.C = args.A * args.B
        return None

``args`` and ``reply`` must be reference types (mutated in place): a non-frozen
pydantic model, or one of the mutable built-ins. Their classes must be public
or built-in. The return annotation must be exactly ``Exception | None``.
"""

from __future__ import annotations

import inspect
import logging
import types
from typing import Any, Callable, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from httprpc.errors import RegistrationRejected

MUTABLE_BUILTINS = (dict, list)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def is_exported(name: str) -> bool:
    """Is this a public (no leading underscore) name?"""
    return bool(name) and not name.startswith("_")


def is_builtin_type(t: Any) -> bool:
    return inspect.isclass(t) and t.__module__ == "builtins"


def is_exported_or_builtin_type(t: Any) -> bool:
    t = get_origin(t) or t
    if not inspect.isclass(t):
        return False
    return is_builtin_type(t) or is_exported(t.__name__)


def is_reference_type(t: Any) -> bool:
    """Can a value of this type be handed to a handler and filled in place?"""
    if get_origin(t) in MUTABLE_BUILTINS:
        return True
    if not inspect.isclass(t) or get_origin(t) is not None:
        return False
    if t in MUTABLE_BUILTINS:
        return True
    if issubclass(t, BaseModel):
        return not t.model_config.get("frozen", False)
    return False


def is_error_type(hint: Any) -> bool:
    # Exception | None, spelled either way
    if get_origin(hint) not in (Union, types.UnionType):
        return False
    return set(get_args(hint)) == {Exception, type(None)}


def _type_name(t: Any) -> str:
    return getattr(t, "__qualname__", None) or repr(t)


def validate_method(name: str, handle: Callable[..., Any]) -> tuple[type, type]:
    """Check one bound method against the remote-call shape.

    Returns ``(arg_type, reply_type)``; raises ``RegistrationRejected`` at the
    first rule the method breaks.
    """
    if not is_exported(name):
        raise RegistrationRejected(name, "is not exported", logging.DEBUG)

    # Method needs two ins beyond the receiver: args, reply.
    params = list(inspect.signature(handle).parameters.values())
    if len(params) != 2 or any(p.kind not in _POSITIONAL for p in params):
        raise RegistrationRejected(name, f"has wrong number of ins: {len(params)}")

    try:
        hints = get_type_hints(getattr(handle, "__func__", handle))
    except Exception as e:
        raise RegistrationRejected(name, f"has unresolvable annotations: {e}")

    arg_type = hints.get(params[0].name)
    if arg_type is None:
        raise RegistrationRejected(name, "argument type not annotated")
    if not is_reference_type(arg_type):
        raise RegistrationRejected(name, f"argument type not a reference type: {_type_name(arg_type)}")
    if not is_exported_or_builtin_type(arg_type):
        raise RegistrationRejected(name, f"argument type not exported: {_type_name(arg_type)}")

    reply_type = hints.get(params[1].name)
    if reply_type is None:
        raise RegistrationRejected(name, "reply type not annotated")
    if not is_reference_type(reply_type):
        raise RegistrationRejected(name, f"reply type not a reference type: {_type_name(reply_type)}")
    if not is_exported_or_builtin_type(reply_type):
        raise RegistrationRejected(name, f"reply type not exported: {_type_name(reply_type)}")

    # Method needs one out: Exception | None.
    if inspect.iscoroutinefunction(handle):
        raise RegistrationRejected(name, "is a coroutine function, returns an awaitable not Exception | None")
    if "return" not in hints:
        raise RegistrationRejected(name, "return type not annotated")
    if not is_error_type(hints["return"]):
        raise RegistrationRejected(name, f"returns {hints['return']!r} not Exception | None")

    return arg_type, reply_type
