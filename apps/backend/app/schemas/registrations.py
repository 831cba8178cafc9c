# apps/backend/app/schemas/registrations.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class RegistrationIn(BaseModel):
    name: Optional[Any] = None
    email: Optional[Any] = None
    phone: Optional[Any] = None

    session_id: Optional[Any] = None
    campaign_id: Optional[Any] = None
    game_id: Optional[Any] = None

    # kept only when they are real numbers
    score: Optional[Any] = None
    duration_ms: Optional[Any] = None


class RegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    session_id: Optional[str] = None
    campaign_id: Optional[str] = None
    game_id: Optional[str] = None
    name: str
    email: str
    phone: str
    score: Optional[int] = None
    duration_ms: Optional[int] = None


class RegistrationList(BaseModel):
    rows: List[RegistrationOut]
