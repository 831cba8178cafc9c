# apps/backend/app/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from app.core.config import settings

DATABASE_URL = settings.database_url.strip()

if not DATABASE_URL:
  # Fail fast: better to know immediately in logs
  raise RuntimeError("DATABASE_URL is not set")


def _engine_kwargs(url: str) -> dict:
  if not url.startswith("sqlite"):
    return dict(pool_pre_ping=True, pool_size=5, max_overflow=10)

  kwargs = dict(connect_args={"check_same_thread": False})
  if url in ("sqlite://", "sqlite:///:memory:"):
    # one shared connection, otherwise every checkout sees an empty database
    kwargs["poolclass"] = StaticPool
  return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
  db = SessionLocal()
  try:
    yield db
  finally:
    db.close()
