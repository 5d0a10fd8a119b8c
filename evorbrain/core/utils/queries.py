"""Query helpers shared by the domain services."""

from __future__ import annotations

from typing import Type, TypeVar

from sqlalchemy import case, func, select

from evorbrain.core.errors import NotFoundError
from evorbrain.core.utils.validation import require_uuid
from evorbrain.extensions import db

ModelT = TypeVar("ModelT")


def get_or_raise(model: Type[ModelT], entity_id: str, entity: str) -> ModelT:
    """Load a row by primary key or raise ``NotFoundError``."""
    require_uuid(entity_id, entity.lower())
    obj = db.session.get(model, entity_id)
    if obj is None:
        raise NotFoundError(entity, entity_id)
    return obj


def rank(column, values):
    """ORDER BY expression ranking ``column`` by its position in ``values``."""
    return case({value: index for index, value in enumerate(values, start=1)}, value=column, else_=len(values) + 1)


def max_value(column, default: int = -1) -> int:
    return db.session.execute(select(func.coalesce(func.max(column), default))).scalar_one()
