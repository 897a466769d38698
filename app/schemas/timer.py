"""Pydantic schemas for timers, stored and served with camelCase keys."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TimerCreate(BaseModel):
    description: Optional[str] = None

    model_config = {
        "json_schema_extra": {"example": {"description": "draft proposal"}},
    }


class Timer(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    description: str
    # Epoch milliseconds.
    start: int
    is_active: bool = True
    progress: int = 0
    end: Optional[int] = None
    duration: Optional[int] = None

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
