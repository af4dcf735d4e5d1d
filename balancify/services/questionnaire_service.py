# services/questionnaire_service.py

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.questionnaire import FinancialAnalysis, Questionnaire
from ..schemas.analysis import AnalysisResponse, AnalysisResult
from ..schemas.profile import FinancialProfile
from ..utils.exceptions import RecordNotFoundError
from ..utils.logger import app_logger
from .insight_service import InsightBundle
from .projection_logic.profile_normalizer import normalize_profile


class QuestionnaireService:
    """
    Persistence for submitted questionnaires and their analyses.
    Commits are left to the request-scoped session (see api.dependencies.get_db).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def store(self, profile: FinancialProfile) -> str:
        questionnaire = Questionnaire(data=profile.model_dump(mode="json"))
        self.db.add(questionnaire)
        await self.db.flush()
        return questionnaire.id

    async def fetch(self, questionnaire_id: str) -> FinancialProfile:
        """Loads a stored profile. JSON floats are read back into Decimals through the normalizer."""
        questionnaire = await self.db.get(Questionnaire, questionnaire_id)
        if questionnaire is None:
            app_logger.info(f"Questionnaire {questionnaire_id} not found.")
            raise RecordNotFoundError(f"Questionnaire {questionnaire_id} not found.")
        return normalize_profile(questionnaire.data)

    async def save_analysis(self, questionnaire_id: str, result: AnalysisResult, bundle: InsightBundle) -> FinancialAnalysis:
        analysis = FinancialAnalysis(
            questionnaire_id=questionnaire_id,
            spending_breakdown=result.spending_breakdown.model_dump(mode="json"),
            needs_wants_analysis=result.needs_wants_analysis.model_dump(mode="json"),
            goal_timeline=result.goal_timeline.model_dump(mode="json"),
            individual_goals={"goals": [goal.model_dump(mode="json") for goal in result.individual_goals]},
            insights=bundle.insights.model_dump(mode="json"),
            recommendations=bundle.recommendations.model_dump(mode="json"),
            insights_source=bundle.source.value,
        )
        self.db.add(analysis)
        await self.db.flush()
        return analysis

    async def get_analysis(self, questionnaire_id: str) -> AnalysisResponse:
        stmt = select(FinancialAnalysis).where(FinancialAnalysis.questionnaire_id == questionnaire_id)
        result = await self.db.execute(stmt)
        analysis = result.scalars().first()

        if analysis is None:
            app_logger.info(f"No analysis stored for questionnaire {questionnaire_id}.")
            raise RecordNotFoundError(f"Analysis for questionnaire {questionnaire_id} not found.")

        return AnalysisResponse(
            questionnaire_id=questionnaire_id,
            analysis_id=analysis.id,
            spending_breakdown=analysis.spending_breakdown,
            needs_wants_analysis=analysis.needs_wants_analysis,
            goal_timeline=analysis.goal_timeline,
            individual_goals=analysis.individual_goals.get("goals", []),
            insights=analysis.insights,
            recommendations=analysis.recommendations,
            insights_source=analysis.insights_source,
        )
