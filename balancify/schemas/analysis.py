# schemas/analysis.py

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field

from ..db.enums import Feasibility, GoalCategory, GoalPriority, InsightSource
from .common import CamelModel, Money


class SpendingBreakdown(CamelModel):
    """Ten monthly categories derived from the profile. Always recomputed, never stored independently."""

    housing: Money = Decimal(0)
    food: Money = Decimal(0)
    transportation: Money = Decimal(0)
    entertainment: Money = Decimal(0)
    shopping: Money = Decimal(0)
    subscriptions: Money = Decimal(0)
    loans: Money = Decimal(0)
    investments: Money = Decimal(0)
    savings: Money = Decimal(0)
    other: Money = Decimal(0)

    def total(self) -> Decimal:
        return sum((getattr(self, name) for name in type(self).model_fields), Decimal(0))


class NeedsWantsAnalysis(CamelModel):
    needs: Dict[str, Money]
    wants: Dict[str, Money]
    needs_percentage: int = Field(..., ge=0, le=100)
    wants_percentage: int = Field(..., ge=0, le=100)


class Milestone(CamelModel):
    month: int
    amount: Money
    description: str


class GoalTimeline(CamelModel):
    """
    Savings trajectory towards the primary goal.
    time_to_goal is None (JSON null) when the monthly contribution is zero.
    """
    goal_description: str
    current_savings: Money
    target_amount: Money
    monthly_contribution: Money
    time_to_goal: Optional[int] = None
    is_reachable: bool = True
    milestones: List[Milestone] = Field(default_factory=list)


class GoalFeasibility(CamelModel):
    description: str
    category: GoalCategory
    priority: GoalPriority
    target_amount: Money
    current_amount: Money
    remaining_amount: Money
    timeline_months: int
    monthly_available: Money
    monthly_required: Money
    # Display value, clamped to the 120-month window. None when unreachable.
    time_to_achieve: Optional[int] = None
    is_reachable: bool = True
    exceeds_display_horizon: bool = False
    feasibility: Feasibility


class FinancialInsights(CamelModel):
    spending_patterns: str
    optimization_opportunities: str
    investment_recommendations: str
    risk_analysis: str
    goal_achievability: str


class Recommendations(CamelModel):
    immediate: List[str]
    short_term: List[str]
    long_term: List[str]
    emergency_fund: str
    investment_strategy: str


class AnalysisResult(CamelModel):
    """Numeric engine output for one profile (no narrative text)."""
    spending_breakdown: SpendingBreakdown
    needs_wants_analysis: NeedsWantsAnalysis
    goal_timeline: GoalTimeline
    individual_goals: List[GoalFeasibility]


class AnalysisResponse(AnalysisResult):
    """Response of POST /api/questionnaire."""
    questionnaire_id: str
    analysis_id: str
    insights: FinancialInsights
    recommendations: Recommendations
    insights_source: InsightSource
