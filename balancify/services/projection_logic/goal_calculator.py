# services/projection_logic/goal_calculator.py

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence

from ...db.enums import Feasibility, GoalPriority
from ...schemas.analysis import GoalFeasibility
from ...schemas.profile import FinancialGoal, FinancialProfile
from .allocation_config import (
    GOAL_DISPLAY_HORIZON_MONTHS,
    INVESTMENT_SHARE_FOR_GOALS,
    LOW_FEASIBILITY_THRESHOLD,
    MEDIUM_FEASIBILITY_THRESHOLD,
)

PRIORITY_ORDER = {GoalPriority.HIGH: 0, GoalPriority.MEDIUM: 1, GoalPriority.LOW: 2}


def monthly_available_for_goals(profile: FinancialProfile) -> Decimal:
    """All preferred savings plus 30% of the monthly investment can fund each goal."""
    return profile.preferred_savings + profile.monthly_investment * INVESTMENT_SHARE_FOR_GOALS


def months_to_cover(amount: Decimal, monthly_rate: Decimal) -> Optional[int]:
    """
    ceil(amount / monthly_rate); 0 when nothing is left, None when nothing is contributed.
    None is the 'unreachable' sentinel and serializes as JSON null.
    """
    if amount <= 0:
        return 0
    if monthly_rate <= 0:
        return None
    return int(math.ceil(amount / monthly_rate))


def classify_feasibility(required_monthly: Decimal, monthly_available: Decimal) -> Feasibility:
    """
    Low when the goal needs more than 80% of what is available each month,
    Medium above 50%, High otherwise. Strict '>' at both thresholds.
    """
    if monthly_available <= 0:
        return Feasibility.LOW
    if required_monthly > monthly_available * LOW_FEASIBILITY_THRESHOLD:
        return Feasibility.LOW
    if required_monthly > monthly_available * MEDIUM_FEASIBILITY_THRESHOLD:
        return Feasibility.MEDIUM
    return Feasibility.HIGH


def evaluate_goal(goal: FinancialGoal, monthly_available: Decimal) -> GoalFeasibility:
    remaining = max(Decimal(0), goal.target_amount - goal.current_amount)

    # Required pace to finish within the user's own timeline (never beyond the display window)
    window = min(goal.timeline_months, GOAL_DISPLAY_HORIZON_MONTHS)
    required_monthly = remaining / Decimal(window)

    months = months_to_cover(remaining, monthly_available)
    time_to_achieve = None if months is None else min(months, GOAL_DISPLAY_HORIZON_MONTHS)

    return GoalFeasibility(
        description=goal.description,
        category=goal.category,
        priority=goal.priority,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        remaining_amount=remaining,
        timeline_months=goal.timeline_months,
        monthly_available=monthly_available,
        monthly_required=required_monthly.quantize(Decimal("1"), rounding=ROUND_HALF_UP),
        time_to_achieve=time_to_achieve,
        is_reachable=months is not None,
        exceeds_display_horizon=months is not None and months > GOAL_DISPLAY_HORIZON_MONTHS,
        # The tier uses the unrounded required pace; the display clamp plays no part
        feasibility=Feasibility.HIGH if remaining == 0 else classify_feasibility(required_monthly, monthly_available),
    )


def calculate_individual_goals(goals: Sequence[FinancialGoal], profile: FinancialProfile) -> List[GoalFeasibility]:
    """Per-goal time-to-achieve and feasibility tier, in the order the user entered them."""
    monthly_available = monthly_available_for_goals(profile)
    return [evaluate_goal(goal, monthly_available) for goal in goals]


def select_primary_goal(goals: Sequence[FinancialGoal]) -> FinancialGoal:
    """First goal of the highest priority present. Goals are never empty after normalization."""
    return min(goals, key=lambda goal: PRIORITY_ORDER[goal.priority])
