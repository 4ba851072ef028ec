"""Player (athlete) model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Player(SQLModel, table=True):
    """Athlete contact record with messaging preferences."""

    __tablename__ = "players"

    id: str = Field(primary_key=True, max_length=36)
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    phone: Optional[str] = Field(default=None, max_length=32)

    email_opt_in: bool = Field(default=True)
    sms_opt_in: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
