from decimal import Decimal

from balancify.db.enums import Feasibility, GoalPriority
from balancify.schemas.profile import FinancialGoal
from balancify.services.projection_logic.goal_calculator import (
    calculate_individual_goals,
    classify_feasibility,
    evaluate_goal,
    monthly_available_for_goals,
    months_to_cover,
    select_primary_goal,
)
from balancify.services.projection_logic.profile_normalizer import normalize_profile


def goal(target, timeline=24, current=0, priority=GoalPriority.MEDIUM, description="Goal"):
    return FinancialGoal(
        description=description,
        target_amount=Decimal(target),
        current_amount=Decimal(current),
        timeline_months=timeline,
        priority=priority,
    )


def test_available_is_savings_plus_thirty_percent_of_investment():
    profile = normalize_profile({"preferred_savings": 10000, "monthly_investment": 5000})
    assert monthly_available_for_goals(profile) == Decimal(11500)


def test_high_medium_low_tiers():
    available = Decimal(11500)

    high = evaluate_goal(goal(60000), available)
    medium = evaluate_goal(goal(168000), available)
    low = evaluate_goal(goal(1800000), available)

    assert high.feasibility == Feasibility.HIGH
    assert high.monthly_required == Decimal(2500)
    assert high.time_to_achieve == 6
    assert medium.feasibility == Feasibility.MEDIUM
    assert low.feasibility == Feasibility.LOW


def test_thresholds_are_strict():
    # exactly 50% of available is still High, exactly 80% is still Medium
    assert classify_feasibility(Decimal(5000), Decimal(10000)) == Feasibility.HIGH
    assert classify_feasibility(Decimal(8000), Decimal(10000)) == Feasibility.MEDIUM


def test_zero_available_is_low_and_unreachable():
    result = evaluate_goal(goal(100000), Decimal(0))

    assert result.feasibility == Feasibility.LOW
    assert result.time_to_achieve is None
    assert result.is_reachable is False
    assert result.model_dump(mode="json")["time_to_achieve"] is None


def test_time_to_achieve_is_clamped_for_display():
    result = evaluate_goal(goal(1800000), Decimal(11500))

    # ceil(1800000 / 11500) = 157
    assert result.time_to_achieve == 120
    assert result.exceeds_display_horizon is True
    assert result.is_reachable is True


def test_current_amount_reduces_what_remains():
    result = evaluate_goal(goal(100000, current=40000, timeline=12), Decimal(10000))

    assert result.remaining_amount == Decimal(60000)
    assert result.monthly_required == Decimal(5000)
    assert result.time_to_achieve == 6


def test_funded_goal_needs_nothing():
    result = evaluate_goal(goal(50000, current=50000), Decimal(0))
    assert result.remaining_amount == Decimal(0)
    assert result.monthly_required == Decimal(0)
    assert result.time_to_achieve == 0
    assert result.is_reachable is True
    assert result.feasibility == Feasibility.HIGH


def test_months_to_cover_nothing_left_is_zero_months():
    assert months_to_cover(Decimal(0), Decimal(0)) == 0
    assert months_to_cover(Decimal(100), Decimal(0)) is None
    assert months_to_cover(Decimal(100), Decimal(30)) == 4


def test_more_contribution_never_worsens_feasibility():
    target = goal(250000, timeline=36)
    ranks = [evaluate_goal(target, Decimal(rate)).feasibility.rank for rate in (0, 1000, 5000, 8000, 12000, 20000, 50000)]
    assert ranks == sorted(ranks)


def test_goals_keep_input_order(sample_profile):
    results = calculate_individual_goals(sample_profile.financial_goals, sample_profile)
    assert [r.description for r in results] == ["Emergency fund", "New car"]
    assert all(r.monthly_available == Decimal(11500) for r in results)


def test_primary_goal_is_first_of_highest_priority():
    goals = [
        goal(1000, priority=GoalPriority.MEDIUM, description="a"),
        goal(2000, priority=GoalPriority.HIGH, description="b"),
        goal(3000, priority=GoalPriority.HIGH, description="c"),
    ]
    assert select_primary_goal(goals).description == "b"
