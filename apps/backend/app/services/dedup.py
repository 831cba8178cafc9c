"""
Ingestion-time duplicate suppression for view events.

Some ad/CDN iframes fire the view beacon twice for one impression. A view is
dropped when the same (event_name, session_id) was stored with a client
timestamp within the dedup window; without a session the anonymous user id is
the key instead.

The window reaches both ways from the candidate's client timestamp, so a
batch replayed out of order still collapses to one view. Anything more than
the window apart, earlier or later, is kept.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.event import Event
from app.telemetry_utils import utcnow

# Aggregation counts page_view as a view too, but only banner_view is
# collapsed on the way in.
INGEST_DEDUP_EVENTS = frozenset({"banner_view"})


def seen_recently(
    db: Session,
    *,
    event_name: str,
    session_id: str | None,
    anonymous_user_id: str | None,
    at: datetime,
    window: timedelta,
) -> bool:
    if session_id:
        same_actor = Event.session_id == session_id
    elif anonymous_user_id:
        same_actor = Event.anonymous_user_id == anonymous_user_id
    else:
        return False

    stmt = (
        select(Event.id)
        .where(
            Event.event_name == event_name,
            same_actor,
            Event.client_ts >= at - window,
            Event.client_ts <= at + window,
        )
        .limit(1)
    )
    return db.execute(stmt).first() is not None


def should_drop_duplicate_view(
    db: Session,
    *,
    event_name: str,
    session_id: str | None,
    anonymous_user_id: str | None,
    client_ts: datetime | None,
    now: datetime | None = None,
) -> bool:
    if event_name not in INGEST_DEDUP_EVENTS:
        return False

    return seen_recently(
        db,
        event_name=event_name,
        session_id=session_id,
        anonymous_user_id=anonymous_user_id,
        at=client_ts or now or utcnow(),
        window=timedelta(seconds=settings.dedup_window_seconds),
    )
