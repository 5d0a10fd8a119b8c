"""Tag schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

from evorbrain.core.utils.validation import clean_color, clean_name

TAG_NAME_MAX_LENGTH = 50


class TagCreate(BaseModel):
    name: str
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return clean_name(value, max_length=TAG_NAME_MAX_LENGTH)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        return clean_color(value)
