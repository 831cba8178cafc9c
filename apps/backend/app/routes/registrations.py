# apps/backend/app/routes/registrations.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.registrations import RegistrationIn, RegistrationList
from app.services.registrations import RegistrationError, create_registration, list_registrations

router = APIRouter(prefix="/registrations")


@router.post("")
def registrations_create(body: RegistrationIn, db: Session = Depends(get_db)):
    try:
        create_registration(db, body)
    except RegistrationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True}


@router.get("", response_model=RegistrationList)
def registrations_list(
    q: str | None = None,
    banner_id: str | None = None,
    game_id: str | None = None,
    db: Session = Depends(get_db),
):
    return {"rows": list_registrations(db, q=q, banner_id=banner_id, game_id=game_id)}
