from datetime import timedelta

import pytest

from app.db import engine
from app.models.event import Event
from app.services.ingest import ingest_batch
from app.telemetry_utils import PIXEL_GIF, utcnow


def iso_now(offset_s: int = 0) -> str:
    return (utcnow() + timedelta(seconds=offset_s)).isoformat() + "Z"


def all_events(db):
    db.expire_all()
    return db.query(Event).order_by(Event.id).all()


def test_batch_is_stored(client, db):
    r = client.post(
        "/api/events",
        json={
            "events": [
                {
                    "event_name": "game_start",
                    "client_ts": iso_now(),
                    "campaign_id": "spring",
                    "game_id": "wheel",
                    "session_id": "s1",
                    "props": {"url": "https://example.com/a"},
                },
                {"event_name": "win", "client_ts": iso_now(), "session_id": "s1"},
            ]
        },
    )
    assert r.status_code == 200
    assert r.json() == {"ok": True, "ingested": 2}

    rows = all_events(db)
    assert [e.event_name for e in rows] == ["game_start", "win"]
    assert rows[0].props == {"url": "https://example.com/a"}
    assert rows[0].campaign_id == "spring"
    assert rows[1].props == {}


def test_malformed_entries_are_skipped(client, db):
    r = client.post(
        "/api/events",
        json={
            "events": [
                None,
                "banner_view",
                {"session_id": "s1"},
                {"event_name": ""},
                {"event_name": "win", "props": [1, 2]},
                {"event_name": "banner_click", "game_id": 7},
            ]
        },
    )
    assert r.status_code == 200

    rows = all_events(db)
    assert len(rows) == 1
    assert rows[0].event_name == "banner_click"
    assert rows[0].game_id == "7"


def test_event_name_is_capped(client, db):
    client.post("/api/events", json={"events": [{"event_name": "x" * 200}]})
    assert len(all_events(db)[0].event_name) == 80


def test_too_many_events_rejected(client, db):
    r = client.post("/api/events", json={"events": [{"event_name": "win"}] * 501})
    assert r.status_code == 400
    assert all_events(db) == []


def test_batch_must_be_a_list(client):
    assert client.post("/api/events", json={"events": "nope"}).status_code == 422
    assert client.post("/api/events", json={}).status_code == 422


def test_duplicates_still_counted_as_ingested(client, db):
    evt = {"event_name": "banner_view", "client_ts": iso_now(), "session_id": "s1"}
    r = client.post("/api/events", json={"events": [evt, evt]})
    assert r.json()["ingested"] == 2
    assert len(all_events(db)) == 1


def test_pixel_records_event(client, db):
    r = client.get(
        "/api/pixel.gif",
        params={
            "event": "banner_view",
            "campaign_id": "spring",
            "game_id": "wheel",
            "session_id": "s9",
            "ts": iso_now(),
            "ref": "https://news.example.com",
        },
        headers={"referer": "https://cdn.example.com/banner.html"},
    )
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/gif"
    assert r.headers["cache-control"].startswith("no-store")
    assert r.content == PIXEL_GIF

    rows = all_events(db)
    assert len(rows) == 1
    assert rows[0].event_name == "banner_view"
    assert rows[0].props == {
        "url": "https://cdn.example.com/banner.html",
        "referrer": "https://news.example.com",
        "extra": None,
    }


def test_pixel_defaults(client, db):
    client.get("/api/pixel.gif", params={"anon": "u1"})
    rows = all_events(db)
    assert rows[0].event_name == "pixel"
    assert rows[0].anonymous_user_id == "u1"
    assert rows[0].client_ts is not None


def test_pixel_applies_view_dedup(client, db):
    params = {"event": "banner_view", "session_id": "s1", "ts": iso_now()}
    first = client.get("/api/pixel.gif", params=params)
    second = client.get("/api/pixel.gif", params=params)
    assert first.content == second.content == PIXEL_GIF
    assert len(all_events(db)) == 1


def test_pixel_survives_storage_failure(client):
    Event.__table__.drop(bind=engine)

    r = client.get("/api/pixel.gif", params={"event": "banner_view", "session_id": "s1"})
    assert r.status_code == 200
    assert r.content == PIXEL_GIF


def test_start_session(client):
    a = client.post("/api/sessions/start").json()["session_id"]
    b = client.post("/api/sessions/start").json()["session_id"]
    assert a and b and a != b


def test_health_and_version(client):
    assert client.get("/healthz").json() == {"ok": True}
    assert "version" in client.get("/api/version").json()


def test_batch_rolls_back_when_a_row_fails(db, monkeypatch):
    real_flush = db.flush
    calls = {"n": 0}

    def flaky_flush(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("disk full")
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(db, "flush", flaky_flush)

    batch = [
        {"event_name": "game_start", "client_ts": iso_now(), "session_id": "s1"},
        {"event_name": "win", "client_ts": iso_now(), "session_id": "s1"},
        {"event_name": "banner_click", "client_ts": iso_now(), "session_id": "s1"},
    ]
    with pytest.raises(RuntimeError):
        ingest_batch(db, batch)

    monkeypatch.undo()
    assert calls["n"] == 2
    assert all_events(db) == []
