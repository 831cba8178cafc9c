# app/models/__init__.py
# Import all models here so SQLAlchemy registers them into Base.metadata.

from app.models.event import Event  # noqa: F401
from app.models.registration import Registration  # noqa: F401
from app.models.banner import Banner  # noqa: F401
