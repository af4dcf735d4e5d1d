# services/projection_logic/simulator.py

from decimal import Decimal
from typing import NamedTuple, Optional

from ...schemas.analysis import AnalysisResult
from ...schemas.profile import FinancialProfile
from ...schemas.simulation import GoalComparison, Projections, SavingsComparison, SimulationParameters, SimulationResult
from .allocation_config import COMPARISON_WINDOW_MONTHS, GOAL_TIMELINE_PADDING_MONTHS, MAX_PROJECTION_HORIZON_MONTHS
from .breakdown_calculator import calculate_spending_breakdown
from .goal_calculator import calculate_individual_goals, months_to_cover, select_primary_goal
from .needs_wants_calculator import analyze_needs_vs_wants
from .timeline_generator import build_goal_timeline, generate_projection_series, monthly_contribution

HUNDRED = Decimal(100)

# Categories an expense reduction applies to
REDUCIBLE_EXPENSES = ("housing_expenses", "dining_monthly", "shopping_monthly", "subscription_cost")


def analyze_profile(profile: FinancialProfile) -> AnalysisResult:
    """Runs the full numeric engine on one normalized profile."""
    spending = calculate_spending_breakdown(profile)
    return AnalysisResult(
        spending_breakdown=spending,
        needs_wants_analysis=analyze_needs_vs_wants(profile, spending),
        goal_timeline=build_goal_timeline(profile),
        individual_goals=calculate_individual_goals(profile.financial_goals, profile),
    )


def apply_simulation(profile: FinancialProfile, params: SimulationParameters) -> FinancialProfile:
    """
    Returns a derived copy of the profile with the what-if adjustments applied.
    The extra savings are a share of the income before any increase.
    """
    income = profile.monthly_income
    reduction_factor = Decimal(1) - params.expense_reduction / HUNDRED

    updates = {
        "monthly_income": income * (Decimal(1) + params.income_increase / HUNDRED),
        "preferred_savings": profile.preferred_savings + income * params.additional_savings / HUNDRED,
        "monthly_investment": profile.monthly_investment * (Decimal(1) + params.investment_boost / HUNDRED),
    }
    for field in REDUCIBLE_EXPENSES:
        updates[field] = max(Decimal(0), getattr(profile, field) * reduction_factor)

    return profile.model_copy(update=updates)


def _goal_timeline_horizon(simulated_time_to_goal: Optional[int]) -> int:
    if simulated_time_to_goal is None:
        return MAX_PROJECTION_HORIZON_MONTHS
    return max(1, min(simulated_time_to_goal + GOAL_TIMELINE_PADDING_MONTHS, MAX_PROJECTION_HORIZON_MONTHS))


class SimulationRun(NamedTuple):
    result: SimulationResult
    simulated_profile: FinancialProfile
    simulated_analysis: AnalysisResult


def simulate_profile(profile: FinancialProfile, params: SimulationParameters) -> SimulationRun:
    """Comparison result together with the adjusted profile and its analysis."""
    original = analyze_profile(profile)
    simulated_profile = apply_simulation(profile, params)
    simulated = analyze_profile(simulated_profile)

    original_rate = monthly_contribution(profile)
    simulated_rate = monthly_contribution(simulated_profile)
    monthly_delta = simulated_rate - original_rate

    goal_target = params.goal_target
    if goal_target is None:
        goal_target = select_primary_goal(profile.financial_goals).target_amount

    original_time = months_to_cover(goal_target, original_rate)
    simulated_time = months_to_cover(goal_target, simulated_rate)
    months_saved = None
    if original_time is not None and simulated_time is not None:
        months_saved = original_time - simulated_time

    comparison = SavingsComparison(
        original_income=profile.monthly_income,
        simulated_income=simulated_profile.monthly_income,
        original_monthly_savings=original_rate,
        simulated_monthly_savings=simulated_rate,
        monthly_savings_delta=monthly_delta,
        annual_savings_delta=monthly_delta * 12,
        goal_target=goal_target,
        original_time_to_goal=original_time,
        simulated_time_to_goal=simulated_time,
        months_saved=months_saved,
    )

    projections = Projections(
        monthly_data=generate_projection_series(
            original_rate, goal_target, COMPARISON_WINDOW_MONTHS, simulated_rate=simulated_rate
        ),
        goal_timeline=generate_projection_series(
            original_rate, goal_target, _goal_timeline_horizon(simulated_time), simulated_rate=simulated_rate
        ),
    )

    individual_goals = [
        GoalComparison(description=before.description, before=before, after=after)
        for before, after in zip(original.individual_goals, simulated.individual_goals)
    ]

    result = SimulationResult(
        comparison=comparison,
        original_breakdown=original.spending_breakdown,
        simulated_breakdown=simulated.spending_breakdown,
        original_needs_wants=original.needs_wants_analysis,
        simulated_needs_wants=simulated.needs_wants_analysis,
        original_goal_timeline=original.goal_timeline,
        simulated_goal_timeline=simulated.goal_timeline,
        individual_goals=individual_goals,
        projections=projections,
    )
    return SimulationRun(result=result, simulated_profile=simulated_profile, simulated_analysis=simulated)


def run_simulation(profile: FinancialProfile, params: SimulationParameters) -> SimulationResult:
    return simulate_profile(profile, params).result
