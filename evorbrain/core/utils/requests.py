"""Request parsing shared by the API controllers."""

from __future__ import annotations

from typing import Type, TypeVar

import pydantic
from flask import request
from pydantic import BaseModel

from evorbrain.core.errors import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _errors(exc: pydantic.ValidationError) -> list:
    # ctx may hold the raised exception object, which is not JSON serialisable
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def validate(schema_cls: Type[SchemaT], data) -> SchemaT:
    try:
        return schema_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        details = _errors(exc)
        message = details[0]["msg"] if details else "Invalid input"
        raise ValidationError(message, details=details) from exc


def parse_body(schema_cls: Type[SchemaT]) -> SchemaT:
    payload = request.get_json(silent=True) or {}
    return validate(schema_cls, payload)


def parse_query(schema_cls: Type[SchemaT]) -> SchemaT:
    data = {k: v for k, v in request.args.items()}
    return validate(schema_cls, data)
