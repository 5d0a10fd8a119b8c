"""Request schemas shared by the archive/restore endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class RestoreRequest(BaseModel):
    cascade: bool = False
