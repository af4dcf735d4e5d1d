# services/projection_logic/allocation_config.py

from decimal import Decimal
from typing import Any, Dict

# --- Projection Engine Constants ---
# Heuristics the dashboard numbers are built on. Changing any of these changes every
# stored analysis, so they are kept in one place.

# 1. ENTERTAINMENT PROXY: impulse_shopping (1-5) * 500 * (weekly hours / 10)
ENTERTAINMENT_BASE_RATE = Decimal("500")
ENTERTAINMENT_HOURS_NORMALIZER = Decimal("10")

# Groceries are captured weekly; a month is counted as 4 weeks
WEEKS_PER_MONTH = Decimal("4")

# 2. NEEDS/WANTS SPLIT OF FOOD
FOOD_ESSENTIAL_RATIO = Decimal("0.7")
FOOD_DINING_OUT_RATIO = Decimal("0.3")

# 3. GOAL FUNDING POLICY
# All preferred savings plus 30% of the monthly investment are available to every goal.
INVESTMENT_SHARE_FOR_GOALS = Decimal("0.30")
LOW_FEASIBILITY_THRESHOLD = Decimal("0.8")     # required > 80% of available -> Low
MEDIUM_FEASIBILITY_THRESHOLD = Decimal("0.5")  # required > 50% of available -> Medium

# Display clamp for per-goal time-to-achieve (10 years). Does not affect the feasibility tier.
GOAL_DISPLAY_HORIZON_MONTHS = 120

# 4. PROJECTION SERIES BOUNDS
MAX_PROJECTION_HORIZON_MONTHS = 60
COMPARISON_WINDOW_MONTHS = 24
GOAL_TIMELINE_PADDING_MONTHS = 6
MILESTONE_INTERVAL_MONTHS = 12

# 5. GOAL TIMELINE LIMITS
MIN_GOAL_TIMELINE_MONTHS = 1
MAX_GOAL_TIMELINE_MONTHS = 600

# Used when the questionnaire carries no usable goal
DEFAULT_GOAL: Dict[str, Any] = {
    "description": "Emergency Fund",
    "target_amount": Decimal("500000"),
    "current_amount": Decimal("0"),
    "timeline_months": 24,
    "priority": "high",
    "category": "emergency",
}

# 6. INPUT LIMITS
# Largest amount accepted for any money field. Keeps every intermediate value well
# inside the 28-digit decimal context used by the calculators.
MAX_AMOUNT = Decimal("1e15")
