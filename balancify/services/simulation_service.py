# services/simulation_service.py

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.simulation import SimulationRequest, SimulationResponse
from ..utils.logger import app_logger
from .insight_service import InsightContext, InsightService, build_simulation_insights
from .projection_logic.profile_normalizer import normalize_profile
from .projection_logic.simulator import simulate_profile
from .questionnaire_service import QuestionnaireService


class SimulationService:
    """What-if runs against a stored questionnaire or an inline profile. Nothing is persisted."""

    def __init__(self, db: AsyncSession, insight_service: InsightService):
        self.db = db
        self.insight_service = insight_service

    async def simulate(self, request: SimulationRequest) -> SimulationResponse:
        if request.questionnaire_id:
            # Raises RecordNotFoundError for unknown ids
            profile = await QuestionnaireService(self.db).fetch(request.questionnaire_id)
        else:
            profile = normalize_profile(request.profile)

        params = request.simulation
        run = simulate_profile(profile, params)
        result = run.result

        # Narrative text describes the adjusted profile
        context = InsightContext(profile=run.simulated_profile, analysis=run.simulated_analysis)
        bundle = await self.insight_service.generate(context)

        app_logger.info(
            f"Simulation run (income +{params.income_increase}%, expenses -{params.expense_reduction}%, "
            f"savings +{params.additional_savings}%, investment +{params.investment_boost}%): "
            f"monthly savings delta {result.comparison.monthly_savings_delta}."
        )

        return SimulationResponse(
            **dict(result),
            insights=build_simulation_insights(bundle, result),
            insights_source=bundle.source,
        )
