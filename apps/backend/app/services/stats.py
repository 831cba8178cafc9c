"""
Dashboard stats: daily series, totals, conversion rates and funnel over a
window of whole UTC days ending today.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.event import Event
from app.models.registration import Registration
from app.telemetry_utils import day_key, epoch_seconds, utcnow

EVENT_KINDS = {
    "game_start": "starts",
    "card_draw": "starts",
    "win": "wins",
    "popout_click": "wins",
    "banner_click": "clicks",
    "banner_view": "views",
    "page_view": "views",
}

COUNTERS = ("starts", "wins", "regs", "views", "clicks")


def clamp_days(days: Any) -> int:
    try:
        days = int(days)
    except (TypeError, ValueError):
        days = settings.stats_default_days
    return max(1, min(settings.stats_max_days, days))


def window_bounds(days: int, now: datetime) -> tuple[datetime, datetime]:
    """[00:00 of the oldest day, 00:00 of tomorrow)"""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=days - 1), today + timedelta(days=1)


def window_days(days: int, now: datetime) -> list[str]:
    start, _ = window_bounds(days, now)
    return [day_key(start + timedelta(days=i)) for i in range(days)]


def _props(row: Any) -> dict:
    props = getattr(row, "props", None)
    return props if isinstance(props, dict) else {}


def matches_banner_url(props: dict, banner_url: str) -> bool:
    # substring match covers the prefix case too
    u = str(props.get("url") or "")
    ref = str(props.get("referrer") or "")
    return banner_url in u or banner_url in ref


def _empty(date: str) -> dict:
    out = {"date": date}
    out.update({c: 0 for c in COUNTERS})
    return out


def aggregate(
    events: Iterable[Any],
    registrations: Iterable[Any],
    *,
    days: int,
    now: datetime,
    bucket_seconds: int | None = None,
) -> dict:
    """
    Fold already-filtered events and registrations into the stats payload.

    Views are collapsed a second time here: one view per
    (day, campaign, game, url, bucket_seconds slot), whatever happened at
    ingestion.
    """
    bucket_seconds = bucket_seconds or settings.view_bucket_seconds

    series = [_empty(d) for d in window_days(days, now)]
    by_day = {o["date"]: o for o in series}
    totals = {c: 0 for c in COUNTERS}

    view_seen: set[tuple] = set()

    for r in events:
        kind = EVENT_KINDS.get(r.event_name)
        if kind is None or r.client_ts is None:
            continue
        day = by_day.get(day_key(r.client_ts))
        if day is None:
            continue

        if kind == "views":
            # props is free-form client JSON, url may not be a string
            url = str(_props(r).get("url") or "")
            slot = math.floor(epoch_seconds(r.client_ts) / bucket_seconds)
            key = (day["date"], r.campaign_id or "", r.game_id or "", url, slot)
            if key in view_seen:
                continue
            view_seen.add(key)

        day[kind] += 1
        totals[kind] += 1

    for r in registrations:
        day = by_day.get(day_key(r.created_at))
        if day is None:
            continue
        day["regs"] += 1
        totals["regs"] += 1

    return {
        "totals": totals,
        "rates": conversion_rates(totals),
        "series": series,
        "funnel": funnel(totals),
    }


def _ratio(num: int, den: int) -> float:
    return num / den if den else 0


def conversion_rates(totals: dict) -> dict:
    return {
        "winRate": _ratio(totals["wins"], totals["starts"]),
        "regRateFromStarts": _ratio(totals["regs"], totals["starts"]),
        "regRateFromWins": _ratio(totals["regs"], totals["wins"]),
    }


def funnel(totals: dict) -> list[dict]:
    return [
        {"label": "Views", "value": totals["views"]},
        {"label": "Starts", "value": totals["starts"]},
        {"label": "Wins", "value": totals["wins"]},
        {"label": "Registrations", "value": totals["regs"]},
    ]


def compute_stats(
    db: Session,
    *,
    days: Any = None,
    banner_id: str | None = None,
    banner_url: str | None = None,
    game_id: str | None = None,
    now: datetime | None = None,
) -> dict:
    now = now or utcnow()
    days = clamp_days(settings.stats_default_days if days is None else days)
    start, end = window_bounds(days, now)

    banner_id = (banner_id or "").strip()
    banner_url = (banner_url or "").strip()
    game_id = (game_id or "").strip()

    ev_q = select(
        Event.event_name, Event.client_ts, Event.campaign_id, Event.game_id, Event.props
    ).where(Event.client_ts.is_not(None), Event.client_ts >= start, Event.client_ts < end)
    reg_q = select(Registration.created_at).where(
        Registration.created_at >= start, Registration.created_at < end
    )

    # banners link to events by game_id, there is no FK
    for value in (game_id, banner_id):
        if value:
            ev_q = ev_q.where(Event.game_id == value)
            reg_q = reg_q.where(Registration.game_id == value)

    events = db.execute(ev_q).all()
    if banner_url:
        events = [r for r in events if matches_banner_url(_props(r), banner_url)]

    registrations = db.execute(reg_q).all()

    return aggregate(events, registrations, days=days, now=now)
