# apps/backend/app/routes/stats.py
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.banner import Banner
from app.models.event import Event
from app.schemas.banners import MetaOut
from app.schemas.stats import StatsOut
from app.services.stats import compute_stats

router = APIRouter()

@router.get("/stats", response_model=StatsOut)
def stats(
  db: Session = Depends(get_db),
  days: int | None = None,
  banner_id: str | None = None,
  banner_url: str | None = None,
  game_id: str | None = None,
):
  # out-of-range days are clamped, not rejected
  return compute_stats(db, days=days, banner_id=banner_id, banner_url=banner_url, game_id=game_id)

@router.get("/meta", response_model=MetaOut)
def meta(db: Session = Depends(get_db)):
  banners = db.execute(select(Banner).order_by(Banner.name)).scalars().all()
  games = db.execute(
    select(Event.game_id)
    .where(Event.game_id.is_not(None), Event.game_id != "")
    .distinct()
    .order_by(Event.game_id)
  ).scalars().all()
  return {"banners": banners, "games": list(games)}
