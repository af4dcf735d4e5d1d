# services/analysis_service.py

from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.analysis import AnalysisResponse
from ..utils.logger import app_logger
from .insight_service import InsightContext, InsightService
from .projection_logic.profile_normalizer import normalize_profile
from .projection_logic.simulator import analyze_profile
from .questionnaire_service import QuestionnaireService


class AnalysisService:
    """
    Orchestrates one questionnaire submission:
    normalize -> store -> numeric analysis -> narrative insights -> store analysis.
    """

    def __init__(self, db: AsyncSession, insight_service: InsightService):
        self.db = db
        self.insight_service = insight_service
        self.questionnaires = QuestionnaireService(db)

    async def submit(self, raw_profile: Mapping[str, Any]) -> AnalysisResponse:
        # Raises ProfileValidationError before anything is stored
        profile = normalize_profile(raw_profile)
        questionnaire_id = await self.questionnaires.store(profile)

        # The numbers are final before the insight call starts
        result = analyze_profile(profile)
        bundle = await self.insight_service.generate(InsightContext(profile=profile, analysis=result))

        analysis = await self.questionnaires.save_analysis(questionnaire_id, result, bundle)
        app_logger.info(
            f"Analysis {analysis.id} stored for questionnaire {questionnaire_id} "
            f"({len(profile.financial_goals)} goals, insights: {bundle.source.value})."
        )

        return AnalysisResponse(
            questionnaire_id=questionnaire_id,
            analysis_id=analysis.id,
            spending_breakdown=result.spending_breakdown,
            needs_wants_analysis=result.needs_wants_analysis,
            goal_timeline=result.goal_timeline,
            individual_goals=result.individual_goals,
            insights=bundle.insights,
            recommendations=bundle.recommendations,
            insights_source=bundle.source,
        )

    async def get(self, questionnaire_id: str) -> AnalysisResponse:
        return await self.questionnaires.get_analysis(questionnaire_id)
