# api/v1/session.py

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings
from ...db.enums import SessionStatus
from ...schemas.session import SessionComplete, SessionCreate, SessionOut, SessionProgressUpdate
from ...services.session_service import SessionService
from ...utils.exceptions import RecordNotFoundError, SessionExpiredError, SessionStateError
from ..dependencies import get_db, get_settings

router = APIRouter(
    prefix="/sessions",
    tags=["Questionnaire Sessions"]
)

DBDependency = Annotated[AsyncSession, Depends(get_db)]


def get_session_service(db: DBDependency, settings: Settings = Depends(get_settings)) -> SessionService:
    return SessionService(db, ttl_hours=settings.session_ttl_hours)


ServiceDependency = Annotated[SessionService, Depends(get_session_service)]


def session_http_error(e: Exception) -> HTTPException:
    # SessionExpiredError is a SessionStateError, so it is checked first
    if isinstance(e, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, SessionExpiredError):
        return HTTPException(status_code=status.HTTP_410_GONE, detail=str(e))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("", response_model=SessionOut, status_code=status.HTTP_201_CREATED, summary="Start a questionnaire session")
async def create_session(payload: SessionCreate, service: ServiceDependency):
    session = await service.create(payload.user_name)
    return service.to_schema(session)


@router.get("/{session_id}", response_model=SessionOut, summary="Get a questionnaire session")
async def get_session(session_id: str, service: ServiceDependency):
    try:
        session = await service.get(session_id)
    except RecordNotFoundError as e:
        raise session_http_error(e)

    # The service has already committed the expiry
    if session.status == SessionStatus.EXPIRED:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=f"Session {session_id} has expired.")
    return service.to_schema(session)


@router.put("/{session_id}/progress", response_model=SessionOut, summary="Save questionnaire progress")
async def update_progress(session_id: str, payload: SessionProgressUpdate, service: ServiceDependency):
    try:
        session = await service.update_progress(session_id, payload.form_data, payload.current_step)
    except (RecordNotFoundError, SessionStateError) as e:
        raise session_http_error(e)
    return service.to_schema(session)


@router.post("/{session_id}/complete", response_model=SessionOut, summary="Mark a questionnaire session as completed")
async def complete_session(session_id: str, service: ServiceDependency, payload: Optional[SessionComplete] = None):
    try:
        session = await service.complete(session_id, payload.questionnaire_id if payload else None)
    except (RecordNotFoundError, SessionStateError) as e:
        raise session_http_error(e)
    return service.to_schema(session)
