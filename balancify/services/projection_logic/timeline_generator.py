# services/projection_logic/timeline_generator.py

from decimal import Decimal
from typing import List, Optional

from ...schemas.analysis import GoalTimeline, Milestone
from ...schemas.profile import FinancialGoal, FinancialProfile
from ...schemas.simulation import ProjectionPoint
from .allocation_config import MAX_PROJECTION_HORIZON_MONTHS, MILESTONE_INTERVAL_MONTHS
from .goal_calculator import months_to_cover, select_primary_goal


def monthly_contribution(profile: FinancialProfile) -> Decimal:
    """Everything the user puts aside each month: preferred savings plus investments."""
    return profile.preferred_savings + profile.monthly_investment


def clamp_horizon(horizon_months: int) -> int:
    return max(1, min(int(horizon_months), MAX_PROJECTION_HORIZON_MONTHS))


def milestone_label(month: int) -> Optional[str]:
    if month % MILESTONE_INTERVAL_MONTHS == 0:
        return f"Year {month // MILESTONE_INTERVAL_MONTHS} milestone"
    return None


def build_goal_timeline(profile: FinancialProfile, goal: Optional[FinancialGoal] = None) -> GoalTimeline:
    """
    Savings trajectory towards one goal (the primary goal when none is given).

    time_to_goal counts from zero towards the full target, matching what the dashboard
    chart plots. Milestones are yearly and stop at the goal or at the projection cap,
    whichever comes first.
    """
    if goal is None:
        goal = select_primary_goal(profile.financial_goals)

    contribution = monthly_contribution(profile)
    time_to_goal = months_to_cover(goal.target_amount, contribution)

    last_month = MAX_PROJECTION_HORIZON_MONTHS if time_to_goal is None else min(time_to_goal, MAX_PROJECTION_HORIZON_MONTHS)

    milestones: List[Milestone] = []
    for month in range(MILESTONE_INTERVAL_MONTHS, last_month + 1, MILESTONE_INTERVAL_MONTHS):
        milestones.append(
            Milestone(
                month=month,
                amount=goal.current_amount + contribution * month,
                description=milestone_label(month),
            )
        )

    return GoalTimeline(
        goal_description=goal.description,
        current_savings=goal.current_amount,
        target_amount=goal.target_amount,
        monthly_contribution=contribution,
        time_to_goal=time_to_goal,
        is_reachable=time_to_goal is not None,
        milestones=milestones,
    )


def generate_projection_series(
    current_rate: Decimal,
    goal_target: Decimal,
    horizon_months: int,
    simulated_rate: Optional[Decimal] = None,
    starting_balance: Decimal = Decimal(0),
) -> List[ProjectionPoint]:
    """
    One cumulative point per month, optionally with a simulated column alongside.

    The horizon is always clamped into [1, 60] so the series stays finite however
    small the monthly rate is.
    """
    points: List[ProjectionPoint] = []

    for month in range(1, clamp_horizon(horizon_months) + 1):
        current_amount = starting_balance + current_rate * month
        simulated_amount = None
        delta = None
        if simulated_rate is not None:
            simulated_amount = starting_balance + simulated_rate * month
            delta = simulated_amount - current_amount

        points.append(
            ProjectionPoint(
                month=month,
                label=f"Month {month}",
                current_amount=current_amount,
                simulated_amount=simulated_amount,
                goal_target=goal_target,
                delta=delta,
                milestone=milestone_label(month),
            )
        )

    return points
