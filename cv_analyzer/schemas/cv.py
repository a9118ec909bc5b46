from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CVRecord(BaseModel):
    id: int
    user_id: str
    filename: str = Field(max_length=255)
    content: str
    created_at: datetime
    updated_at: datetime


class CVSummary(BaseModel):
    id: int
    filename: str
    created_at: datetime


class CVListResponse(BaseModel):
    items: list[CVSummary]
    total: int = Field(ge=0)
