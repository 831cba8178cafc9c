# apps/backend/app/routes/banners.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.banners import BannerIn, BannerList, BannerOut
from app.services.banners import (
    BannerError,
    create_banner,
    delete_banner,
    get_banner,
    list_banners,
    update_banner,
)

router = APIRouter(prefix="/banners")


def _http(e: BannerError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=BannerList)
def banners_list(db: Session = Depends(get_db)):
    return {"rows": list_banners(db)}


@router.post("")
def banners_create(body: BannerIn, db: Session = Depends(get_db)):
    try:
        banner = create_banner(db, body)
    except BannerError as e:
        raise _http(e)
    return {"ok": True, "id": banner.id}


@router.get("/{pk}", response_model=BannerOut)
def banners_get(pk: int, db: Session = Depends(get_db)):
    try:
        return get_banner(db, pk)
    except BannerError as e:
        raise _http(e)


@router.put("/{pk}")
def banners_update(pk: int, body: BannerIn, db: Session = Depends(get_db)):
    try:
        update_banner(db, pk, body)
    except BannerError as e:
        raise _http(e)
    return {"ok": True}


@router.delete("/{pk}")
def banners_delete(pk: int, db: Session = Depends(get_db)):
    try:
        delete_banner(db, pk)
    except BannerError as e:
        raise _http(e)
    return {"ok": True}
