from __future__ import annotations

import logging
import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.banner import Banner
from app.schemas.banners import BannerIn

logger = logging.getLogger(__name__)

BANNER_ID_RE = re.compile(r"^[a-zA-Z0-9._-]+$")
URL_RE = re.compile(r"^https?://", re.IGNORECASE)


class BannerError(Exception):
    status_code = 400


class BannerNotFound(BannerError):
    status_code = 404


class BannerConflict(BannerError):
    status_code = 409


def clean_banner(data: BannerIn) -> dict:
    if not data.banner_id or not data.name or not data.url:
        raise BannerError("Missing banner_id, name or url")

    banner_id = str(data.banner_id).strip()[:120]
    name = str(data.name).strip()[:120]
    url = str(data.url).strip()[:800]

    if not BANNER_ID_RE.match(banner_id):
        raise BannerError("banner_id should be letters/numbers/._-")
    if not URL_RE.match(url):
        raise BannerError("URL must start with http(s)://")

    return {"banner_id": banner_id, "name": name, "url": url}


def list_banners(db: Session) -> list[Banner]:
    stmt = select(Banner).order_by(Banner.created_at.desc(), Banner.id.desc())
    return list(db.execute(stmt).scalars().all())


def get_banner(db: Session, pk: int) -> Banner:
    banner = db.get(Banner, pk)
    if not banner:
        raise BannerNotFound("Banner not found")
    return banner


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("banner uniqueness conflict: %s", e.orig)
        raise BannerConflict("banner_id or url already exists") from e
    except Exception:
        db.rollback()
        raise


def create_banner(db: Session, data: BannerIn) -> Banner:
    banner = Banner(**clean_banner(data))
    db.add(banner)
    _commit(db)
    db.refresh(banner)
    return banner


def update_banner(db: Session, pk: int, data: BannerIn) -> Banner:
    values = clean_banner(data)
    banner = get_banner(db, pk)
    for k, v in values.items():
        setattr(banner, k, v)
    _commit(db)
    db.refresh(banner)
    return banner


def delete_banner(db: Session, pk: int) -> None:
    banner = get_banner(db, pk)
    db.delete(banner)
    _commit(db)
