"""Tests for the method-shape validator."""

from __future__ import annotations

import logging
from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict

from httprpc.errors import RegistrationRejected
from httprpc.server.validation import (
    is_error_type,
    is_exported,
    is_exported_or_builtin_type,
    is_reference_type,
    validate_method,
)


class Args(BaseModel):
    A: int = 0


class _Hidden(BaseModel):
    x: int = 0


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = 0


class Shapes:
    def Good(self, args: Args, reply: Args) -> Exception | None:
        return None

    def GoodBuiltins(self, args: dict, reply: list[int]) -> Optional[Exception]:
        return None

    def _private(self, args: Args, reply: Args) -> Exception | None:
        return None

    def OneIn(self, args: Args) -> Exception | None:
        return None

    def ThreeIns(self, a: Args, b: Args, c: Args) -> Exception | None:
        return None

    def VarArgs(self, *args: Args) -> Exception | None:
        return None

    def ValueArg(self, args: int, reply: Args) -> Exception | None:
        return None

    def HiddenArg(self, args: _Hidden, reply: Args) -> Exception | None:
        return None

    def ValueReply(self, args: Args, reply: str) -> Exception | None:
        return None

    def FrozenReply(self, args: Args, reply: Frozen) -> Exception | None:
        return None

    def HiddenReply(self, args: Args, reply: _Hidden) -> Exception | None:
        return None

    def Unannotated(self, args, reply):
        return None

    def NoReturnHint(self, args: Args, reply: Args):
        return None

    def ReturnsDict(self, args: Args, reply: Args) -> dict:
        return {}

    def ReturnsNone(self, args: Args, reply: Args) -> None:
        return None

    def ReturnsValueError(self, args: Args, reply: Args) -> Optional[ValueError]:
        return None

    async def Coroutine(self, args: Args, reply: Args) -> Exception | None:
        return None


def _validate(name: str):
    return validate_method(name, getattr(Shapes(), name))


class TestPredicates:
    def test_is_exported(self) -> None:
        assert is_exported("Multiply")
        assert is_exported("multiply")
        assert not is_exported("_multiply")
        assert not is_exported("__init__")
        assert not is_exported("")

    def test_reference_types(self) -> None:
        assert is_reference_type(Args)
        assert is_reference_type(_Hidden)
        assert is_reference_type(dict)
        assert is_reference_type(list)
        assert is_reference_type(dict[str, int])

    def test_value_types_are_not_reference_types(self) -> None:
        for t in (int, str, float, bool, tuple, Frozen, None, Optional[Args]):
            assert not is_reference_type(t), t

    def test_exported_or_builtin(self) -> None:
        assert is_exported_or_builtin_type(Args)
        assert is_exported_or_builtin_type(dict)
        assert is_exported_or_builtin_type(list[int])
        assert not is_exported_or_builtin_type(_Hidden)

    def test_error_type(self) -> None:
        assert is_error_type(Exception | None)
        assert is_error_type(Optional[Exception])
        assert not is_error_type(Exception)
        assert not is_error_type(Optional[ValueError])
        assert not is_error_type(type(None))
        assert not is_error_type(dict)


class TestValidateMethod:
    def test_accepts_model_shape(self) -> None:
        assert _validate("Good") == (Args, Args)

    def test_accepts_builtin_shape(self) -> None:
        assert _validate("GoodBuiltins") == (dict, list[int])

    @pytest.mark.parametrize(
        "name, reason",
        [
            ("OneIn", "wrong number of ins: 1"),
            ("ThreeIns", "wrong number of ins: 3"),
            ("VarArgs", "wrong number of ins"),
            ("ValueArg", "argument type not a reference type"),
            ("HiddenArg", "argument type not exported"),
            ("ValueReply", "reply type not a reference type"),
            ("FrozenReply", "reply type not a reference type"),
            ("HiddenReply", "reply type not exported"),
            ("Unannotated", "argument type not annotated"),
            ("NoReturnHint", "return type not annotated"),
            ("ReturnsDict", "not Exception | None"),
            ("ReturnsNone", "not Exception | None"),
            ("ReturnsValueError", "not Exception | None"),
            ("Coroutine", "coroutine"),
        ],
    )
    def test_rejects(self, name: str, reason: str) -> None:
        with pytest.raises(RegistrationRejected) as exc_info:
            _validate(name)

        assert exc_info.value.method == name
        assert reason in str(exc_info.value)
        assert exc_info.value.level == logging.WARNING

    def test_unexported_rejected_quietly(self) -> None:
        with pytest.raises(RegistrationRejected) as exc_info:
            _validate("_private")

        assert exc_info.value.level == logging.DEBUG
