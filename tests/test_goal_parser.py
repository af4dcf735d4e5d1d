from decimal import Decimal

from balancify.services.projection_logic.goal_parser import parse_goal_text


def test_parses_description_and_amount():
    goals = parse_goal_text("Purchase house for 400000")
    assert len(goals) == 1
    assert goals[0].description == "Purchase house"
    assert goals[0].target_amount == Decimal("400000")


def test_parses_several_goals_and_strips_rupee_sign():
    goals = parse_goal_text("Car ₹500000, Vacation for 80000")
    assert [(g.description, g.target_amount) for g in goals] == [("Car", Decimal("500000")), ("Vacation", Decimal("80000"))]


def test_unparseable_parts_are_skipped():
    goals = parse_goal_text("be rich, Laptop 90000, travel more")
    assert [g.description for g in goals] == ["Laptop"]


def test_empty_text_yields_nothing():
    assert parse_goal_text("") == []
    assert parse_goal_text("no numbers here") == []
