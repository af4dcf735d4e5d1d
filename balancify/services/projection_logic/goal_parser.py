import re
from decimal import Decimal
from typing import List

from ...schemas.profile import FinancialGoal

# "<description> [for] <amount>" at the end of a comma-separated part, e.g. "House for 400000", "Car 500000"
GOAL_PATTERN = re.compile(r"(.+?)(?:\s+for)?\s*(\d+)$", re.IGNORECASE)


def parse_goal_text(goals_text: str) -> List[FinancialGoal]:
    """
    Best-effort extraction of goals typed as free text.

    Parts that do not end in an amount are skipped; this never raises.
    """
    goals: List[FinancialGoal] = []
    if not goals_text:
        return goals

    for part in goals_text.split(","):
        part = part.strip().replace("₹", "")
        match = GOAL_PATTERN.match(part)
        if not match:
            continue

        description = match.group(1).strip()
        amount = Decimal(match.group(2))
        if description and amount > 0:
            goals.append(FinancialGoal(description=description, target_amount=amount))

    return goals
