# services/session_service.py

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import utc_now
from ..db.enums import SessionStatus
from ..models.questionnaire_session import QuestionnaireSession
from ..schemas.session import SessionOut
from ..utils.exceptions import RecordNotFoundError, SessionExpiredError, SessionStateError
from ..utils.logger import app_logger


class SessionService:
    """
    Lifecycle of a questionnaire session: create -> update on each step -> complete,
    or expire once it is older than the TTL. Expiry is evaluated on read and persisted.
    """

    def __init__(self, db: AsyncSession, ttl_hours: int = 24):
        self.db = db
        self.ttl = timedelta(hours=ttl_hours)

    def expires_at(self, session: QuestionnaireSession) -> datetime:
        return session.started_at + self.ttl

    def to_schema(self, session: QuestionnaireSession) -> SessionOut:
        # SessionStatus is a plain Enum, so the wire value is set explicitly
        return SessionOut(
            id=session.id,
            user_name=session.user_name,
            status=session.status.value.lower(),
            current_step=session.current_step,
            form_data=session.form_data or {},
            questionnaire_id=session.questionnaire_id,
            started_at=session.started_at,
            last_updated=session.last_updated,
            expires_at=self.expires_at(session),
        )

    async def create(self, user_name: str) -> QuestionnaireSession:
        now = utc_now()
        session = QuestionnaireSession(
            user_name=user_name.strip(),
            status=SessionStatus.ACTIVE,
            current_step=0,
            form_data={},
            started_at=now,
            last_updated=now,
        )
        self.db.add(session)
        await self.db.flush()
        app_logger.info(f"Questionnaire session {session.id} started.")
        return session

    async def get(self, session_id: str, now: Optional[datetime] = None) -> QuestionnaireSession:
        """Returns the session, marking it EXPIRED first when the TTL has passed."""
        session = await self.db.get(QuestionnaireSession, session_id)
        if session is None:
            app_logger.info(f"Questionnaire session {session_id} not found.")
            raise RecordNotFoundError(f"Session {session_id} not found.")

        now = now or utc_now()
        if session.status == SessionStatus.ACTIVE and now >= self.expires_at(session):
            session.status = SessionStatus.EXPIRED
            session.last_updated = now
            # Must survive the rollback of the error response that follows
            await self.db.commit()
            app_logger.info(f"Questionnaire session {session_id} expired.")

        return session

    async def _get_active(self, session_id: str, now: Optional[datetime] = None) -> QuestionnaireSession:
        session = await self.get(session_id, now)
        if session.status == SessionStatus.EXPIRED:
            raise SessionExpiredError(f"Session {session_id} has expired.")
        if session.status == SessionStatus.COMPLETED:
            raise SessionStateError(f"Session {session_id} is already completed.")
        return session

    async def update_progress(
        self, session_id: str, form_data: Dict[str, Any], current_step: int, now: Optional[datetime] = None
    ) -> QuestionnaireSession:
        session = await self._get_active(session_id, now)

        # Reassign so the JSON column is flagged dirty
        session.form_data = {**(session.form_data or {}), **form_data}
        session.current_step = current_step
        session.last_updated = now or utc_now()
        await self.db.flush()
        return session

    async def complete(
        self, session_id: str, questionnaire_id: Optional[str] = None, now: Optional[datetime] = None
    ) -> QuestionnaireSession:
        session = await self._get_active(session_id, now)

        session.status = SessionStatus.COMPLETED
        if questionnaire_id:
            session.questionnaire_id = questionnaire_id
        session.last_updated = now or utc_now()
        await self.db.flush()
        app_logger.info(f"Questionnaire session {session_id} completed.")
        return session
