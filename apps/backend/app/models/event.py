# apps/backend/app/models/event.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base
from app.telemetry_utils import utcnow

# BIGINT ids on Postgres, INTEGER on SQLite so autoincrement keeps working
PK = BigInteger().with_variant(Integer(), "sqlite")
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(PK, primary_key=True)
    received_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    client_ts: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    campaign_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)
    game_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(120), nullable=True, index=True)
    anonymous_user_id: Mapped[str | None] = mapped_column(String(120), nullable=True)

    event_name: Mapped[str] = mapped_column(String(80), nullable=False)
    props: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)


Index("idx_events_event_ts", Event.event_name, Event.client_ts)
