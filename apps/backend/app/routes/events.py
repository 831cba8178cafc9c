# apps/backend/app/routes/events.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db import get_db
from app.schemas.events import EventBatchIn, IngestOut
from app.services.ingest import ingest_batch, record_pixel
from app.telemetry_utils import PIXEL_GIF, PIXEL_HEADERS, new_session_id

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/sessions/start")
def start_session():
  return {"session_id": new_session_id()}

@router.post("/events", response_model=IngestOut)
def ingest_events(batch: EventBatchIn, db: Session = Depends(get_db)):
  if len(batch.events) > settings.max_batch_events:
    raise HTTPException(status_code=400, detail="Invalid events batch")

  stored = ingest_batch(db, batch.events)
  logger.debug("batch of %d events, %d stored", len(batch.events), stored)

  # dropped duplicates are not reported back
  return IngestOut(ingested=len(batch.events))

@router.get("/pixel.gif")
def pixel(request: Request, db: Session = Depends(get_db)):
  """
  Fallback tracking for pages where fetch is blocked by CSP/CORS.
  Always answers with the gif, whatever happens to the event.
  """
  qp = request.query_params
  try:
    record_pixel(
      db,
      event_name=qp.get("event") or qp.get("event_name"),
      campaign_id=qp.get("campaign_id"),
      game_id=qp.get("game_id"),
      session_id=qp.get("session_id"),
      anonymous_user_id=qp.get("anon") or qp.get("anonymous_user_id"),
      client_ts=qp.get("ts"),
      url=qp.get("url") or request.headers.get("referer"),
      referrer=qp.get("ref"),
      extra=qp.get("extra"),
    )
  except SQLAlchemyError:
    logger.exception("pixel event not stored")

  return Response(content=PIXEL_GIF, media_type="image/gif", headers=PIXEL_HEADERS)
