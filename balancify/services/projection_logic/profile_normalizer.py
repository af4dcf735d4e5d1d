# services/projection_logic/profile_normalizer.py

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...db.enums import GoalCategory, GoalPriority
from ...schemas.profile import FinancialGoal, FinancialProfile
from ...utils.exceptions import ProfileValidationError
from .allocation_config import DEFAULT_GOAL, MAX_AMOUNT, MAX_GOAL_TIMELINE_MONTHS, MIN_GOAL_TIMELINE_MONTHS
from .goal_parser import parse_goal_text

# --- FIELD DEFAULTS ---

MONEY_FIELDS = (
    "monthly_income", "side_income_amount", "housing_expenses", "utility_bills",
    "groceries_weekly", "dining_monthly", "shopping_monthly", "subscription_cost",
    "commute_cost", "transport_monthly", "loan_repayment", "monthly_investment",
    "preferred_savings",
)

# field -> (minimum, maximum, default)
SCALE_FIELDS = {
    "impulse_shopping": (1, 5, 1),
    "impulse_control": (1, 5, 1),
    "saving_behavior": (1, 10, 1),
    "expense_reduction": (1, 10, 1),
    "financial_discipline": (1, 5, 1),
}

# field -> (allowed values, fallback)
CHOICE_FIELDS = {
    "side_income": (("Yes", "No"), "No"),
    "bonus_pay": (("Yes", "No", "Sometimes"), "No"),
    "housing_status": (("Rent", "Own", "Living with family"), "Rent"),
    "food_ordering": (("Daily", "Few times a week", "Rarely"), "Rarely"),
    "online_shopping": (("Daily", "Weekly", "Monthly", "Rarely"), "Rarely"),
    "transport_mode": (("Public Transport", "Own Vehicle", "Both"), "Public Transport"),
    "has_loans": (("Yes", "No"), "No"),
    "loan_type": (("Education", "Car", "Home", "Personal", "Credit Card"), "Personal"),
    "track_spending": (("Yes", "No"), "No"),
    "risk_taking": (("Low", "Medium", "High"), "Low"),
}

LIST_FIELDS = ("subscriptions", "investment_types")


# --- COERCION HELPERS ---

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_decimal(field: str, value: Any, default: Decimal = Decimal(0)) -> Decimal:
    """
    Converts a lenient client value into a non-negative Decimal.
    Blank values take the default; values that are not numbers at all, or exceed MAX_AMOUNT, are rejected.
    """
    if _is_blank(value):
        return default

    # bool is an int subclass, but True is not an amount
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise ProfileValidationError(field, f"expected a number, got {type(value).__name__}")

    text = value.strip().replace(",", "").replace("₹", "") if isinstance(value, str) else str(value)
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ProfileValidationError(field, f"'{value}' is not a number")

    if not number.is_finite():
        raise ProfileValidationError(field, "must be a finite number")
    if number > MAX_AMOUNT:
        raise ProfileValidationError(field, "amount too large")

    # Spending amounts are never negative
    return max(number, Decimal(0))


def _coerce_int(field: str, value: Any, minimum: int, maximum: Optional[int], default: int) -> int:
    if _is_blank(value):
        return default
    number = int(coerce_decimal(field, value).to_integral_value())
    if number < minimum:
        number = minimum
    if maximum is not None and number > maximum:
        number = maximum
    return number


def _coerce_choice(value: Any, allowed: Sequence[str], fallback: str) -> str:
    # Checkbox-style flags may arrive as booleans
    if isinstance(value, bool) and "Yes" in allowed:
        return "Yes" if value else "No"
    if isinstance(value, str):
        for option in allowed:
            if value.strip().lower() == option.lower():
                return option
    return fallback


def _coerce_string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Goals come from a form (snake_case) or from the client goal type (camelCase)."""
    for key in keys:
        if key in raw:
            return raw[key]
    return None


# --- GOALS ---

def normalize_goal(raw_goal: Mapping[str, Any], index: int = 0) -> Optional[FinancialGoal]:
    """Normalizes one structured goal. Returns None when the goal has no positive target."""
    prefix = f"financial_goals[{index}]"

    target = coerce_decimal(f"{prefix}.target_amount", _pick(raw_goal, "target_amount", "targetAmount", "amount"))
    if target <= 0:
        return None

    current = coerce_decimal(f"{prefix}.current_amount", _pick(raw_goal, "current_amount", "currentAmount"))
    timeline = _coerce_int(
        f"{prefix}.timeline_months",
        _pick(raw_goal, "timeline_months", "timelineMonths"),
        MIN_GOAL_TIMELINE_MONTHS,
        MAX_GOAL_TIMELINE_MONTHS,
        DEFAULT_GOAL["timeline_months"],
    )

    description = raw_goal.get("description")
    if not isinstance(description, str) or not description.strip():
        description = f"Goal {index + 1}"

    priority = _coerce_choice(raw_goal.get("priority"), [p.value for p in GoalPriority], GoalPriority.MEDIUM.value)
    category = _coerce_choice(raw_goal.get("category"), [c.value for c in GoalCategory], GoalCategory.OTHER.value)

    reasoning = raw_goal.get("reasoning")

    return FinancialGoal(
        description=description.strip(),
        target_amount=target,
        current_amount=min(current, target),
        timeline_months=timeline,
        priority=GoalPriority(priority),
        category=GoalCategory(category),
        target_date=_coerce_date(_pick(raw_goal, "target_date", "targetDate")),
        reasoning=reasoning.strip() if isinstance(reasoning, str) and reasoning.strip() else None,
    )


def normalize_goals(raw_goals: Any) -> List[FinancialGoal]:
    goals: List[FinancialGoal] = []

    if isinstance(raw_goals, str):
        # Legacy free-text answer
        goals = parse_goal_text(raw_goals)
    elif isinstance(raw_goals, (list, tuple)):
        for index, raw_goal in enumerate(raw_goals):
            if isinstance(raw_goal, FinancialGoal):
                goals.append(raw_goal)
            elif isinstance(raw_goal, Mapping):
                goal = normalize_goal(raw_goal, index)
                if goal is not None:
                    goals.append(goal)

    if not goals:
        goals = [FinancialGoal(**DEFAULT_GOAL)]
    return goals


# --- PROFILE ---

def normalize_profile(raw: Mapping[str, Any]) -> FinancialProfile:
    """
    Turns a raw (possibly partial) questionnaire submission into a complete FinancialProfile.

    Every field has a default, so an empty submission is valid. Only values that cannot
    be read as the expected type at all raise ProfileValidationError.
    """
    if not isinstance(raw, Mapping):
        raise ProfileValidationError("profile", "expected an object of questionnaire answers")

    data: Dict[str, Any] = {}

    for field in MONEY_FIELDS:
        data[field] = coerce_decimal(field, raw.get(field))

    for field, (minimum, maximum, default) in SCALE_FIELDS.items():
        data[field] = _coerce_int(field, raw.get(field), minimum, maximum, default)

    for field, (allowed, fallback) in CHOICE_FIELDS.items():
        data[field] = _coerce_choice(raw.get(field), allowed, fallback)

    for field in LIST_FIELDS:
        data[field] = _coerce_string_list(raw.get(field))

    data["household_size"] = _coerce_int("household_size", raw.get("household_size"), 1, None, 1)
    data["entertainment_hours"] = coerce_decimal("entertainment_hours", raw.get("entertainment_hours"))
    data["financial_goals"] = normalize_goals(raw.get("financial_goals"))

    return FinancialProfile(**data)
