"""Pydantic schemas for Strategy API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class StrategyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = ""

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class StrategyUpdate(StrategyCreate):
    pass


class StrategyRead(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
