from decimal import Decimal

import pytest

from balancify.services.projection_logic.breakdown_calculator import (
    calculate_entertainment_cost,
    calculate_spending_breakdown,
    round_half_up,
)
from balancify.services.projection_logic.profile_normalizer import normalize_profile


def test_housing_and_food_for_basic_profile():
    profile = normalize_profile({
        "monthly_income": 50000,
        "housing_expenses": 15000,
        "utility_bills": 2000,
        "groceries_weekly": 2000,
        "dining_monthly": 3000,
    })
    spending = calculate_spending_breakdown(profile)

    assert spending.food == Decimal(11000)
    assert spending.housing == Decimal(17000)
    assert spending.entertainment == Decimal(0)
    assert spending.other == Decimal(22000)


def test_entertainment_uses_impulse_and_hours():
    profile = normalize_profile({"impulse_shopping": 3, "entertainment_hours": 7})
    # 3 * 500 * 0.7 = 1050
    assert calculate_entertainment_cost(profile) == Decimal(1050)


def test_entertainment_rounds_half_up():
    profile = normalize_profile({"impulse_shopping": 1, "entertainment_hours": "0.05"})
    # 500 * 0.005 = 2.5
    assert calculate_entertainment_cost(profile) == Decimal(3)


def test_loans_only_count_when_flagged():
    without = calculate_spending_breakdown(normalize_profile({"has_loans": "No", "loan_repayment": 5000}))
    with_loans = calculate_spending_breakdown(normalize_profile({"has_loans": "Yes", "loan_repayment": 5000}))

    assert without.loans == Decimal(0)
    assert with_loans.loans == Decimal(5000)


def test_other_is_floored_at_zero(sample_profile):
    spending = calculate_spending_breakdown(sample_profile)
    assert spending.other == Decimal(0)
    assert spending.savings == Decimal(10000)
    assert spending.investments == Decimal(5000)


@pytest.mark.parametrize("answers", [
    {},
    {"monthly_income": 10000, "housing_expenses": 30000},
    {"monthly_income": 80000, "groceries_weekly": 1500, "shopping_monthly": 9000, "impulse_shopping": 5, "entertainment_hours": 20},
    {"monthly_income": 120000, "has_loans": "Yes", "loan_repayment": 25000, "preferred_savings": 30000, "monthly_investment": 20000},
])
def test_other_is_income_minus_named_categories(answers):
    profile = normalize_profile(answers)
    spending = calculate_spending_breakdown(profile)

    named = spending.total() - spending.other
    assert spending.other == max(Decimal(0), profile.monthly_income - named)
    assert spending.other >= 0


def test_round_half_up():
    assert round_half_up(Decimal("2.5")) == Decimal(3)
    assert round_half_up(Decimal("2.4999")) == Decimal(2)


def test_largest_accepted_amounts_still_compute():
    profile = normalize_profile({
        "monthly_income": "1e15", "groceries_weekly": "1e15", "dining_monthly": "1e15",
        "impulse_shopping": 5, "entertainment_hours": "1e15",
    })
    spending = calculate_spending_breakdown(profile)
    assert spending.food == Decimal("5e15")
    assert spending.other == Decimal(0)
