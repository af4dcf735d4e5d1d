# schemas/profile.py

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.enums import GoalCategory, GoalPriority
from .common import Money, Quantity

YesNo = Literal["Yes", "No"]


class FinancialGoal(BaseModel):
    """A structured goal. Immutable once an analysis has been computed."""
    model_config = ConfigDict(frozen=True)

    description: str = Field(..., description="What the user is saving for.")
    target_amount: Money = Field(..., gt=Decimal(0), description="Amount needed to reach the goal.")
    current_amount: Money = Field(Decimal(0), ge=Decimal(0), description="Already saved towards the goal (never above target).")
    timeline_months: int = Field(24, ge=1, le=600, description="Desired months to reach the goal.")
    priority: GoalPriority = GoalPriority.MEDIUM
    category: GoalCategory = GoalCategory.OTHER
    target_date: Optional[date] = None
    reasoning: Optional[str] = None


class FinancialProfile(BaseModel):
    """
    Normalized questionnaire answers. Produced only by the profile normalizer;
    every downstream calculator consumes this type and never the raw submission.
    """
    model_config = ConfigDict(frozen=True)

    # --- Salary & Income ---
    monthly_income: Money = Decimal(0)
    side_income: YesNo = "No"
    side_income_amount: Money = Decimal(0)
    bonus_pay: Literal["Yes", "No", "Sometimes"] = "No"

    # --- Living Situation ---
    housing_status: Literal["Rent", "Own", "Living with family"] = "Rent"
    housing_expenses: Money = Decimal(0)
    utility_bills: Money = Decimal(0)
    household_size: int = Field(1, ge=1)

    # --- Food & Dining ---
    groceries_weekly: Money = Decimal(0)
    dining_monthly: Money = Decimal(0)
    food_ordering: Literal["Daily", "Few times a week", "Rarely"] = "Rarely"

    # --- Shopping Habits ---
    shopping_monthly: Money = Decimal(0)
    impulse_shopping: int = Field(1, ge=1, le=5)
    online_shopping: Literal["Daily", "Weekly", "Monthly", "Rarely"] = "Rarely"

    # --- Subscriptions & Entertainment ---
    subscriptions: List[str] = Field(default_factory=list)
    subscription_cost: Money = Decimal(0)
    entertainment_hours: Quantity = Field(Decimal(0), ge=Decimal(0), description="Entertainment hours per week.")

    # --- Travel & Transportation ---
    commute_cost: Money = Decimal(0)
    transport_mode: Literal["Public Transport", "Own Vehicle", "Both"] = "Public Transport"
    transport_monthly: Money = Decimal(0)

    # --- Debt / Loans ---
    has_loans: YesNo = "No"
    loan_repayment: Money = Decimal(0)
    loan_type: Literal["Education", "Car", "Home", "Personal", "Credit Card"] = "Personal"

    # --- Investments & Goals ---
    investment_types: List[str] = Field(default_factory=list)
    monthly_investment: Money = Decimal(0)
    financial_goals: List[FinancialGoal] = Field(default_factory=list)

    # --- Budgeting Behaviour & Mindset ---
    track_spending: YesNo = "No"
    impulse_control: int = Field(1, ge=1, le=5)
    saving_behavior: int = Field(1, ge=1, le=10)
    risk_taking: Literal["Low", "Medium", "High"] = "Low"

    # --- Commitment & Willingness ---
    expense_reduction: int = Field(1, ge=1, le=10, description="Willingness to reduce expenses (1-10).")
    preferred_savings: Money = Decimal(0)
    financial_discipline: int = Field(1, ge=1, le=5)
