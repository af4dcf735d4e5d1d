# api/v1/simulation.py

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...schemas.simulation import SimulationRequest, SimulationResponse
from ...services.insight_service import InsightService
from ...services.simulation_service import SimulationService
from ...utils.exceptions import ProfileValidationError, RecordNotFoundError
from ..dependencies import get_db, get_insight_service
from .questionnaire import validation_http_error

router = APIRouter(tags=["What-If Simulator"])

DBDependency = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    "/simulate",
    response_model=SimulationResponse,
    status_code=status.HTTP_200_OK,
    summary="Run a what-if simulation against a stored or inline profile"
)
async def simulate(
    request: SimulationRequest,
    db: DBDependency,
    insight_service: InsightService = Depends(get_insight_service),
):
    """
    Applies the percentage adjustments, re-runs the numeric engine and returns the
    before/after comparison plus the projection series. Nothing is stored.
    """
    try:
        return await SimulationService(db, insight_service).simulate(request)
    except RecordNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ProfileValidationError as e:
        raise validation_http_error(e)
