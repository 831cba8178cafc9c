from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.event import Event
from app.schemas.events import EventIn
from app.services.dedup import should_drop_duplicate_view
from app.telemetry_utils import clean_optional, parse_ts, sanitize_short, utcnow

logger = logging.getLogger(__name__)

EVENT_NAME_MAX = 80
ID_MAX = 120


def _validate(raw: Any) -> EventIn | None:
    if not isinstance(raw, dict):
        return None
    try:
        return EventIn.model_validate(raw)
    except ValidationError:
        return None


def _build_event(evt: EventIn, received_at: datetime) -> Event:
    return Event(
        received_at=received_at,
        client_ts=parse_ts(evt.client_ts),
        campaign_id=clean_optional(evt.campaign_id, ID_MAX),
        game_id=clean_optional(evt.game_id, ID_MAX),
        session_id=clean_optional(evt.session_id, ID_MAX),
        anonymous_user_id=clean_optional(evt.anonymous_user_id, ID_MAX),
        event_name=sanitize_short(evt.event_name, EVENT_NAME_MAX),
        props=evt.props or {},
    )


def _store(db: Session, row: Event, now: datetime) -> bool:
    if should_drop_duplicate_view(
        db,
        event_name=row.event_name,
        session_id=row.session_id,
        anonymous_user_id=row.anonymous_user_id,
        client_ts=row.client_ts,
        now=now,
    ):
        logger.debug("dropped duplicate %s for session=%s anon=%s", row.event_name, row.session_id, row.anonymous_user_id)
        return False

    db.add(row)
    # later events in the same batch must see this row in the dedup query
    db.flush()
    return True


def ingest_batch(db: Session, raw_events: Iterable[Any], now: datetime | None = None) -> int:
    """
    Store a batch of raw client events in one transaction.

    Malformed entries are skipped before the transaction starts; duplicate
    views are dropped silently. Returns the number of rows written.
    """
    received_at = now or utcnow()

    valid: list[EventIn] = []
    skipped = 0
    for raw in raw_events:
        evt = _validate(raw)
        if evt is None:
            skipped += 1
            continue
        valid.append(evt)

    if skipped:
        logger.debug("skipped %d malformed events", skipped)

    stored = 0
    try:
        for evt in valid:
            if _store(db, _build_event(evt, received_at), received_at):
                stored += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    return stored


def record_pixel(
    db: Session,
    *,
    event_name: str | None,
    campaign_id: str | None = None,
    game_id: str | None = None,
    session_id: str | None = None,
    anonymous_user_id: str | None = None,
    client_ts: str | None = None,
    url: str | None = None,
    referrer: str | None = None,
    extra: str | None = None,
    now: datetime | None = None,
) -> bool:
    """Store one event from the pixel endpoint. Returns False when deduplicated."""
    received_at = now or utcnow()

    row = Event(
        received_at=received_at,
        client_ts=parse_ts(sanitize_short(client_ts, 60)) or received_at,
        campaign_id=clean_optional(campaign_id, ID_MAX),
        game_id=clean_optional(game_id, ID_MAX),
        session_id=clean_optional(session_id, ID_MAX),
        anonymous_user_id=clean_optional(anonymous_user_id, ID_MAX),
        event_name=sanitize_short(event_name or "pixel", EVENT_NAME_MAX),
        props={
            "url": sanitize_short(url, 500),
            "referrer": sanitize_short(referrer, 500),
            "extra": sanitize_short(extra, 900) if extra else None,
        },
    )

    try:
        stored = _store(db, row, received_at)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return stored
