from __future__ import annotations

from fastapi import APIRouter

from app.routes.banners import router as banners_router
from app.routes.events import router as events_router
from app.routes.registrations import router as registrations_router
from app.routes.stats import router as stats_router

router = APIRouter()

# ingestion
router.include_router(events_router, tags=["events"])
router.include_router(registrations_router, tags=["registrations"])

# dashboard
router.include_router(stats_router, tags=["stats"])
router.include_router(banners_router, tags=["banners"])
