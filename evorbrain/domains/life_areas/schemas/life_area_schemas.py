"""Life area schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from evorbrain.core.utils.validation import clean_color, clean_description, clean_name


class LifeAreaCreate(BaseModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return clean_name(value)

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_description(value)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return clean_color(value)


class LifeAreaUpdate(LifeAreaCreate):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return clean_name(value) if value is not None else None


class LifeAreaListFilter(BaseModel):
    include_archived: bool = False


class ReorderRequest(BaseModel):
    ids: List[str] = Field(min_length=1)
