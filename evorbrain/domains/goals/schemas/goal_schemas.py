"""Goal schemas."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from evorbrain.core.utils.validation import check_not_past, clean_description, clean_name

GoalStatus = Literal["active", "paused", "completed", "cancelled"]


class GoalCreate(BaseModel):
    life_area_id: str
    title: str
    description: Optional[str] = None
    target_date: Optional[dt.date] = None
    status: GoalStatus = "active"

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return clean_name(value, field="Title")

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_description(value)

    @field_validator("target_date")
    @classmethod
    def check_target_date(cls, value: Optional[dt.date]) -> Optional[dt.date]:
        return check_not_past(value)


class GoalUpdate(GoalCreate):
    life_area_id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[GoalStatus] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        return clean_name(value, field="Title") if value is not None else None


class GoalListFilter(BaseModel):
    life_area_id: Optional[str] = None
    status: Optional[GoalStatus] = None
    include_archived: bool = False
