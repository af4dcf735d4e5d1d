# schemas/simulation.py

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..db.enums import InsightSource
from ..services.projection_logic.allocation_config import MAX_AMOUNT
from .analysis import GoalFeasibility, GoalTimeline, NeedsWantsAnalysis, SpendingBreakdown
from .common import CamelModel, Money


class SimulationParameters(BaseModel):
    """Percentage knobs for a what-if run. Ephemeral: supplied per request, never persisted."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    income_increase: Decimal = Field(Decimal(0), ge=Decimal(0), le=Decimal(100), description="Income increase (%).")
    expense_reduction: Decimal = Field(Decimal(0), ge=Decimal(0), le=Decimal(100), description="Reduction of housing, dining, shopping and subscriptions (%).")
    additional_savings: Decimal = Field(Decimal(0), ge=Decimal(0), le=Decimal(100), description="Extra savings as a share of current income (%).")
    investment_boost: Decimal = Field(Decimal(0), ge=Decimal(0), le=Decimal(100), description="Increase of the monthly investment (%).")
    goal_target: Optional[Decimal] = Field(None, gt=Decimal(0), le=MAX_AMOUNT, description="Goal amount to project against. Defaults to the primary goal's target.")


class SimulationRequest(BaseModel):
    """Either a stored questionnaire id or an inline raw profile, plus the simulation knobs."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    questionnaire_id: Optional[str] = None
    profile: Optional[Dict[str, Any]] = Field(None, description="Raw questionnaire answers (normalized server-side).")
    simulation: SimulationParameters = Field(default_factory=SimulationParameters)

    @model_validator(mode="after")
    def _require_profile_source(self):
        if not self.questionnaire_id and self.profile is None:
            raise ValueError("Either questionnaireId or profile must be provided.")
        return self


class ProjectionPoint(CamelModel):
    month: int
    label: str
    current_amount: Money
    simulated_amount: Optional[Money] = None
    goal_target: Money
    delta: Optional[Money] = None
    milestone: Optional[str] = None


class Projections(CamelModel):
    monthly_data: List[ProjectionPoint]
    goal_timeline: List[ProjectionPoint]


class SavingsComparison(CamelModel):
    original_income: Money
    simulated_income: Money
    original_monthly_savings: Money
    simulated_monthly_savings: Money
    monthly_savings_delta: Money
    annual_savings_delta: Money
    goal_target: Money
    original_time_to_goal: Optional[int] = None
    simulated_time_to_goal: Optional[int] = None
    months_saved: Optional[int] = None


class GoalComparison(CamelModel):
    description: str
    before: GoalFeasibility
    after: GoalFeasibility


class SimulationResult(CamelModel):
    """Numeric what-if output. Always complete, independent of the insight service."""
    comparison: SavingsComparison
    original_breakdown: SpendingBreakdown
    simulated_breakdown: SpendingBreakdown
    original_needs_wants: NeedsWantsAnalysis
    simulated_needs_wants: NeedsWantsAnalysis
    original_goal_timeline: GoalTimeline
    simulated_goal_timeline: GoalTimeline
    individual_goals: List[GoalComparison]
    projections: Projections


class SimulationInsights(CamelModel):
    goal_achievability: str
    time_to_goal: str
    savings_impact: str
    recommendations: List[str]


class SimulationResponse(SimulationResult):
    insights: SimulationInsights
    insights_source: InsightSource
