# apps/backend/app/schemas/banners.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class BannerIn(BaseModel):
    # validated in the service so errors come back as 400 with a readable message
    banner_id: Optional[Any] = None
    name: Optional[Any] = None
    url: Optional[Any] = None


class BannerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    banner_id: str
    name: str
    url: str


class BannerList(BaseModel):
    rows: List[BannerOut]


class BannerMeta(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    banner_id: str
    name: str
    url: str


class MetaOut(BaseModel):
    banners: List[BannerMeta]
    games: List[str]
