# apps/backend/app/schemas/events.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

class EventIn(BaseModel):
  event_name: str = Field(..., min_length=1)

  # ISO string coming from client. We'll parse it best-effort.
  client_ts: Optional[str] = None

  campaign_id: Optional[str] = None
  game_id: Optional[str] = None
  session_id: Optional[str] = None
  anonymous_user_id: Optional[str] = None

  props: Dict[str, Any] = Field(default_factory=dict)

  @field_validator(
    "event_name", "client_ts", "campaign_id", "game_id", "session_id", "anonymous_user_id",
    mode="before",
  )
  @classmethod
  def _scalars_as_str(cls, v):
    # clients send numeric ids now and then
    if isinstance(v, (int, float)) and not isinstance(v, bool):
      return str(v)
    return v

  @field_validator("props", mode="before")
  @classmethod
  def _null_props(cls, v):
    return {} if v is None else v

class EventBatchIn(BaseModel):
  # items are validated one by one so a bad entry doesn't sink the batch
  events: List[Any]

class IngestOut(BaseModel):
  ok: bool = True
  ingested: int
