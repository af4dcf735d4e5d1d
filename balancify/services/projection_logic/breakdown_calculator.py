from decimal import Decimal, ROUND_HALF_UP

from ...schemas.analysis import SpendingBreakdown
from ...schemas.profile import FinancialProfile
from .allocation_config import ENTERTAINMENT_BASE_RATE, ENTERTAINMENT_HOURS_NORMALIZER, WEEKS_PER_MONTH


def round_half_up(value: Decimal) -> Decimal:
    """Rounds to a whole amount, halves away from zero (2.5 -> 3)."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def calculate_entertainment_cost(profile: FinancialProfile) -> Decimal:
    """
    Estimates monthly entertainment spend from behaviour rather than a reported amount.

    The formula is: Entertainment = round(impulse_shopping * 500 * (entertainment_hours / 10))
    """
    base_rate = Decimal(profile.impulse_shopping) * ENTERTAINMENT_BASE_RATE
    frequency_multiplier = profile.entertainment_hours / ENTERTAINMENT_HOURS_NORMALIZER
    return round_half_up(base_rate * frequency_multiplier)


def calculate_spending_breakdown(profile: FinancialProfile) -> SpendingBreakdown:
    """
    Derives the ten monthly spending categories from a normalized profile.

    'other' is whatever income is left after the nine named categories, floored at zero.
    """
    monthly_groceries = profile.groceries_weekly * WEEKS_PER_MONTH
    loan_payment = profile.loan_repayment if profile.has_loans == "Yes" else Decimal(0)

    categories = {
        "housing": profile.housing_expenses + profile.utility_bills,
        "food": monthly_groceries + profile.dining_monthly,
        "transportation": profile.transport_monthly,
        "entertainment": calculate_entertainment_cost(profile),
        "shopping": profile.shopping_monthly,
        "subscriptions": profile.subscription_cost,
        "loans": loan_payment,
        "investments": profile.monthly_investment,
        "savings": profile.preferred_savings,
    }

    allocated = sum(categories.values(), Decimal(0))
    categories["other"] = max(Decimal(0), profile.monthly_income - allocated)

    return SpendingBreakdown(**categories)
