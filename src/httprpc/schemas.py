# httprpc/schemas.py
from typing import Any
from pydantic import BaseModel, model_validator


class RequestEnvelope(BaseModel):
    """Routing part of a request; ``Params`` stays untyped until the method is known.

    Keys match case-insensitively (``Method``, ``method``, ``METHOD``); an exact
    spelling wins over a case-folded one.
    """

    Method: str
    Params: Any = None
    Id: Any = None

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        folded = dict(data)
        for name in cls.model_fields:
            if name in data:
                continue
            for key, value in data.items():
                if isinstance(key, str) and key.lower() == name.lower():
                    folded[name] = value
                    break
        return folded


class ErrorResponse(BaseModel):
    Error: str
