from decimal import Decimal

import pytest

from balancify.services.projection_logic.profile_normalizer import normalize_profile
from balancify.services.projection_logic.timeline_generator import build_goal_timeline, generate_projection_series


def profile_with(savings, investment, target=1800000, current=0):
    return normalize_profile({
        "preferred_savings": savings,
        "monthly_investment": investment,
        "financial_goals": [{"description": "Home", "target_amount": target, "current_amount": current, "priority": "high"}],
    })


def test_time_to_goal_from_monthly_contribution():
    timeline = build_goal_timeline(profile_with(10000, 5000))

    assert timeline.monthly_contribution == Decimal(15000)
    assert timeline.time_to_goal == 120
    assert timeline.is_reachable is True
    assert timeline.goal_description == "Home"


def test_yearly_milestones_stop_at_projection_cap():
    timeline = build_goal_timeline(profile_with(10000, 5000, current=20000))

    assert [m.month for m in timeline.milestones] == [12, 24, 36, 48, 60]
    assert timeline.milestones[0].description == "Year 1 milestone"
    assert timeline.milestones[0].amount == Decimal(20000 + 15000 * 12)
    assert timeline.current_savings == Decimal(20000)


def test_milestones_stop_at_goal():
    timeline = build_goal_timeline(profile_with(10000, 0, target=300000))
    assert timeline.time_to_goal == 30
    assert [m.month for m in timeline.milestones] == [12, 24]


def test_zero_contribution_is_unreachable():
    timeline = build_goal_timeline(profile_with(0, 0))

    assert timeline.time_to_goal is None
    assert timeline.is_reachable is False
    assert len(timeline.milestones) == 5
    assert timeline.model_dump(mode="json", by_alias=True)["timeToGoal"] is None


def test_series_has_both_columns():
    points = generate_projection_series(Decimal(1000), Decimal(50000), 24, simulated_rate=Decimal(1500))

    assert len(points) == 24
    assert points[0].label == "Month 1"
    assert points[9].current_amount == Decimal(10000)
    assert points[9].simulated_amount == Decimal(15000)
    assert points[9].delta == Decimal(5000)
    assert points[11].milestone == "Year 1 milestone"
    assert points[10].milestone is None
    assert all(p.goal_target == Decimal(50000) for p in points)


def test_series_without_simulation_leaves_column_empty():
    points = generate_projection_series(Decimal(100), Decimal(1000), 3, starting_balance=Decimal(500))
    assert [p.current_amount for p in points] == [Decimal(600), Decimal(700), Decimal(800)]
    assert all(p.simulated_amount is None and p.delta is None for p in points)


@pytest.mark.parametrize("horizon, rate, expected", [
    (10_000, Decimal("0.01"), 60),
    (61, Decimal(1), 60),
    (0, Decimal(100), 1),
    (-5, Decimal(0), 1),
    (37, Decimal(250), 37),
])
def test_series_length_is_bounded(horizon, rate, expected):
    assert len(generate_projection_series(rate, Decimal(100000), horizon)) == expected
