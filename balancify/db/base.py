# db/base.py

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, matching the plain DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Define the common base class for all models
class Base(AsyncAttrs, DeclarativeBase):
    __abstract__ = True

    # Questionnaire answers and analysis payloads are stored as JSON documents
    type_annotation_map = {
        dict[str, Any]: JSON,
    }
