"""Strategy model — a named tag that trades can be grouped under."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Strategy(SQLModel, table=True):
    __tablename__ = "strategy"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
