from decimal import Decimal

from ...schemas.analysis import NeedsWantsAnalysis, SpendingBreakdown
from ...schemas.profile import FinancialProfile
from .allocation_config import FOOD_DINING_OUT_RATIO, FOOD_ESSENTIAL_RATIO
from .breakdown_calculator import round_half_up


def _percentage(part: Decimal, total: Decimal) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(part / total * 100))


def analyze_needs_vs_wants(profile: FinancialProfile, spending: SpendingBreakdown) -> NeedsWantsAnalysis:
    """
    Splits the breakdown into essential and discretionary buckets using fixed ratios:
    70% of food is essential, 30% is dining out. Investments and savings belong to neither.

    Both percentages are 0 when there is no spending at all. Otherwise they sum to 100 +/- 1
    because each is rounded independently.
    """
    needs = {
        "housing": spending.housing,
        "food_essential": round_half_up(spending.food * FOOD_ESSENTIAL_RATIO),
        "transportation": spending.transportation,
        "utilities": profile.utility_bills,
        "loan_payments": spending.loans,
    }

    wants = {
        "dining_out": round_half_up(spending.food * FOOD_DINING_OUT_RATIO),
        "entertainment": spending.entertainment,
        "shopping": spending.shopping,
        "subscriptions": spending.subscriptions,
        "other": spending.other,
    }

    total_needs = sum(needs.values(), Decimal(0))
    total_wants = sum(wants.values(), Decimal(0))
    total_spending = total_needs + total_wants

    return NeedsWantsAnalysis(
        needs=needs,
        wants=wants,
        needs_percentage=_percentage(total_needs, total_spending),
        wants_percentage=_percentage(total_wants, total_spending),
    )
