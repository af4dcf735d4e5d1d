# api/v1/questionnaire.py

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...schemas.analysis import AnalysisResponse
from ...services.analysis_service import AnalysisService
from ...services.insight_service import InsightService
from ...utils.exceptions import ProfileValidationError, RecordNotFoundError
from ..dependencies import get_db, get_insight_service

router = APIRouter(tags=["Questionnaire & Analysis"])

# Define the dependency types for convenience
DBDependency = Annotated[AsyncSession, Depends(get_db)]
InsightDependency = Annotated[InsightService, Depends(get_insight_service)]


def validation_http_error(e: ProfileValidationError) -> HTTPException:
    """Field-level 422 body: {"detail": [{"field": ..., "message": ...}]}"""
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=[{"field": e.field, "message": e.message}],
    )


@router.post(
    "/questionnaire",
    response_model=AnalysisResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit questionnaire answers and get the full financial analysis"
)
async def submit_questionnaire(
    db: DBDependency,
    insight_service: InsightDependency,
    answers: Dict[str, Any] = Body(..., description="Raw questionnaire answers; missing fields take defaults."),
):
    """
    Normalizes the answers, stores them, and returns the spending breakdown, needs/wants split,
    goal timeline, per-goal feasibility and narrative insights.
    """
    try:
        return await AnalysisService(db, insight_service).submit(answers)
    except ProfileValidationError as e:
        raise validation_http_error(e)


@router.get(
    "/analysis/{questionnaire_id}",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Get the stored analysis of a questionnaire"
)
async def get_analysis(questionnaire_id: str, db: DBDependency, insight_service: InsightDependency):
    try:
        return await AnalysisService(db, insight_service).get(questionnaire_id)
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
