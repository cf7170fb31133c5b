# httprpc/codec.py
"""
Wire codec: the only two serialization boundaries of a call.

Decoding happens in two passes. The envelope is parsed first, which yields the
routing string and the raw ``Params`` value. Once the method is resolved, the
``Params`` value is validated against the method's argument type.
"""
from __future__ import annotations

import inspect
import types
from functools import lru_cache
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from httprpc.errors import ENCODING_FAILURE, MALFORMED_ENVELOPE
from httprpc.schemas import ErrorResponse, RequestEnvelope


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def zero_value(tp: Any) -> Any:
    """Return the zero value of ``tp``; model fields without a default are zero-filled."""
    if tp is None or tp is type(None) or tp is Any:
        return None

    origin = get_origin(tp)
    if origin is Annotated:
        return zero_value(get_args(tp)[0])
    if origin in (Union, types.UnionType):
        return None
    if origin is Literal:
        return get_args(tp)[0]
    if origin is not None:
        tp = origin

    if inspect.isclass(tp) and issubclass(tp, BaseModel):
        values = {
            name: zero_value(info.annotation)
            for name, info in tp.model_fields.items()
            if info.is_required()
        }
        return tp.model_construct(**values)
    if inspect.isclass(tp) and tp.__module__ == "builtins":
        try:
            return tp()
        except TypeError:
            return None
    return None


# ───── Pass 1 ─────
def decode_envelope(data: bytes) -> RequestEnvelope:
    try:
        return RequestEnvelope.model_validate_json(data)
    except ValidationError as e:
        raise MALFORMED_ENVELOPE(_first_error(e))


# ───── Pass 2 ─────
def decode_params(params: Any, arg_type: Any) -> Any:
    """Decode the envelope's ``Params`` into a fresh zero-valued ``arg_type``.

    Fields missing from ``params`` keep their zero value, and a missing
    ``params`` leaves the whole argument zero.
    """
    if params is None:
        return zero_value(arg_type)

    try:
        return _adapter(arg_type).validate_python(_fill_zeros(params, arg_type))
    except ValidationError as e:
        raise MALFORMED_ENVELOPE(_first_error(e))


def _fill_zeros(value: Any, tp: Any) -> Any:
    """Add zero values for required model fields missing from ``value``, at any depth."""
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is Annotated:
        return _fill_zeros(value, args[0])
    if origin in (Union, types.UnionType):
        # Optional[Model] with an object present: fill as the model
        for arg in args:
            if inspect.isclass(arg) and issubclass(arg, BaseModel) and isinstance(value, dict):
                return _fill_zeros(value, arg)
        return value

    if inspect.isclass(tp) and issubclass(tp, BaseModel) and isinstance(value, dict):
        filled = dict(value)
        for name, info in tp.model_fields.items():
            key = info.alias or name
            present = key if key in filled else name if name in filled else None
            if present is not None:
                filled[present] = _fill_zeros(filled[present], info.annotation)
            elif info.is_required():
                filled[key] = zero_value(info.annotation)
        return filled

    if origin in (list, set, frozenset) and args and isinstance(value, list):
        return [_fill_zeros(item, args[0]) for item in value]
    if origin is tuple and args and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return [_fill_zeros(item, args[0]) for item in value]
        return [_fill_zeros(item, t) for item, t in zip(value, args)] + value[len(args):]
    if origin is dict and len(args) == 2 and isinstance(value, dict):
        return {k: _fill_zeros(v, args[1]) for k, v in value.items()}
    return value


# ───── Responses ─────
def encode_reply(reply: Any, reply_type: Any) -> bytes:
    try:
        return _adapter(reply_type).dump_json(reply, warnings=False)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise ENCODING_FAILURE(str(e))


def encode_error(message: str) -> bytes:
    return ErrorResponse(Error=message).model_dump_json().encode()


def _first_error(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return str(e)
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]
