# apps/backend/main.py

from __future__ import annotations

import logging
import time
from pathlib import Path

from dotenv import load_dotenv

# -----------------------------------------------------------------------------
# Load .env (MUST be before importing anything that needs env)
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent  # .../apps/backend
ENV_PATH = BASE_DIR / ".env"
load_dotenv(ENV_PATH)

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

import app.models  # noqa: E402,F401  registers every table on Base.metadata
from app.api.routes import router as api_router  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.db import Base, engine  # noqa: E402

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("collector")

# -----------------------------------------------------------------------------
# Create app
# -----------------------------------------------------------------------------
app = FastAPI(title=settings.app_name, version="0.1.0")

# -----------------------------------------------------------------------------
# CORS
# -----------------------------------------------------------------------------
origins = settings.origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Request log
# -----------------------------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    response = await call_next(request)
    latency_ms = int((time.perf_counter() - t0) * 1000)
    logger.info("%s %s %s %dms", request.method, request.url.path, response.status_code, latency_ms)
    return response


# -----------------------------------------------------------------------------
# DB init
# -----------------------------------------------------------------------------
@app.on_event("startup")
def _startup_create_tables():
    # no migrations: create tables if they don't exist
    Base.metadata.create_all(bind=engine)


# -----------------------------------------------------------------------------
# Routers
# -----------------------------------------------------------------------------
app.include_router(api_router, prefix="/api")


# -----------------------------------------------------------------------------
# Basic health check
# -----------------------------------------------------------------------------
@app.get("/healthz")
def health():
    return {"ok": True}


@app.get("/api/version")
def version():
    return {"version": settings.app_version}
