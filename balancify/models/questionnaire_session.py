# models/questionnaire_session.py

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.base import Base, utc_now
from ..db.enums import EnumString, SessionStatus


class QuestionnaireSession(Base):
    """
    Progress of a multi-step questionnaire. Created when the user starts,
    updated on each step, then completed or expired after the TTL.
    """
    __tablename__ = "questionnaire_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_name: Mapped[str] = mapped_column(String(255))

    status: Mapped[SessionStatus] = mapped_column(EnumString(SessionStatus, 20), default=SessionStatus.ACTIVE)
    current_step: Mapped[int] = mapped_column(Integer, default=0)
    form_data: Mapped[dict[str, Any]] = mapped_column(default=dict)

    # Set once the completed questionnaire has been submitted
    questionnaire_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
