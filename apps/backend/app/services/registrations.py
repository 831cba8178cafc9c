from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.registration import Registration
from app.schemas.registrations import RegistrationIn
from app.telemetry_utils import clean_optional, finite_number

LIST_LIMIT = 1000


class RegistrationError(Exception):
    pass


def create_registration(db: Session, data: RegistrationIn) -> Registration:
    if not data.name or not data.email or not data.phone:
        raise RegistrationError("Missing fields")

    reg = Registration(
        session_id=clean_optional(data.session_id),
        campaign_id=clean_optional(data.campaign_id),
        game_id=clean_optional(data.game_id),
        name=str(data.name)[:200],
        email=str(data.email)[:254],
        phone=str(data.phone)[:64],
        score=finite_number(data.score),
        duration_ms=finite_number(data.duration_ms),
    )
    try:
        db.add(reg)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(reg)
    return reg


def list_registrations(
    db: Session,
    *,
    q: str | None = None,
    banner_id: str | None = None,
    game_id: str | None = None,
    limit: int = LIST_LIMIT,
) -> list[Registration]:
    stmt = select(Registration)

    for value in ((game_id or "").strip(), (banner_id or "").strip()):
        if value:
            stmt = stmt.where(Registration.game_id == value)

    q = (q or "").strip().lower()
    if q:
        stmt = stmt.where(
            or_(
                func.lower(Registration.name).contains(q, autoescape=True),
                func.lower(Registration.email).contains(q, autoescape=True),
                func.lower(Registration.phone).contains(q, autoescape=True),
            )
        )

    stmt = stmt.order_by(Registration.created_at.desc(), Registration.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())
