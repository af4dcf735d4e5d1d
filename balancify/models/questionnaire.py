# models/questionnaire.py

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.base import Base, utc_now


def _new_id() -> str:
    return str(uuid.uuid4())


class Questionnaire(Base):
    """A submitted questionnaire, stored as the normalized financial profile."""
    __tablename__ = "questionnaires"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # The normalized FinancialProfile (JSON mode dump)
    data: Mapped[dict[str, Any]]

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    analysis: Mapped[Optional["FinancialAnalysis"]] = relationship(back_populates="questionnaire", uselist=False)


class FinancialAnalysis(Base):
    """The computed analysis for a questionnaire. One per questionnaire."""
    __tablename__ = "financial_analyses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    questionnaire_id: Mapped[str] = mapped_column(ForeignKey("questionnaires.id"), unique=True, index=True)

    spending_breakdown: Mapped[dict[str, Any]]
    needs_wants_analysis: Mapped[dict[str, Any]]
    goal_timeline: Mapped[dict[str, Any]]
    # {"goals": [...]} so the column stays a JSON object
    individual_goals: Mapped[dict[str, Any]]
    insights: Mapped[dict[str, Any]]
    recommendations: Mapped[dict[str, Any]]
    insights_source: Mapped[str] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    questionnaire: Mapped["Questionnaire"] = relationship(back_populates="analysis")
