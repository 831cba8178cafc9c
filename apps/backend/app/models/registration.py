# apps/backend/app/models/registration.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base
from app.models.event import PK
from app.telemetry_utils import utcnow


class Registration(Base):
    __tablename__ = "registrations"

    id: Mapped[int] = mapped_column(PK, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False, index=True)

    session_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    campaign_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)
    game_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)

    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
