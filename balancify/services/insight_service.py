# services/insight_service.py

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import requests
from pydantic.alias_generators import to_camel

from ..db.enums import Feasibility, InsightSource
from ..schemas.analysis import AnalysisResult, FinancialInsights, Recommendations
from ..schemas.profile import FinancialProfile
from ..schemas.simulation import SimulationInsights, SimulationResult
from ..utils.exceptions import ExternalServiceError
from ..utils.logger import app_logger

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

# Structured-output schema sent with every request (Gemini uses upper-case OpenAPI types)
_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "insights": {
            "type": "OBJECT",
            "properties": {
                "spendingPatterns": _STRING,
                "optimizationOpportunities": _STRING,
                "investmentRecommendations": _STRING,
                "riskAnalysis": _STRING,
                "goalAchievability": _STRING,
            },
            "required": [
                "spendingPatterns", "optimizationOpportunities", "investmentRecommendations",
                "riskAnalysis", "goalAchievability",
            ],
        },
        "recommendations": {
            "type": "OBJECT",
            "properties": {
                "immediate": _STRING_LIST,
                "shortTerm": _STRING_LIST,
                "longTerm": _STRING_LIST,
                "emergencyFund": _STRING,
                "investmentStrategy": _STRING,
            },
            "required": ["immediate", "shortTerm", "longTerm", "emergencyFund", "investmentStrategy"],
        },
    },
    "required": ["insights", "recommendations"],
}


@dataclass(frozen=True)
class InsightContext:
    """Everything the narrative step may look at. The numbers are already final."""
    profile: FinancialProfile
    analysis: AnalysisResult


@dataclass(frozen=True)
class InsightBundle:
    insights: FinancialInsights
    recommendations: Recommendations
    source: InsightSource


# --- PROVIDERS ---

class InsightProvider(ABC):
    source = InsightSource.EXTERNAL

    @abstractmethod
    def generate(self, context: InsightContext) -> Mapping[str, Any]:
        """
        Returns a raw payload {"insights": {...}, "recommendations": {...}} with camelCase keys.
        Raises ExternalServiceError when no usable payload can be produced.
        """


class FallbackInsightProvider(InsightProvider):
    """Offline provider used when no API key is configured."""
    source = InsightSource.FALLBACK

    def generate(self, context: InsightContext) -> Mapping[str, Any]:
        return {
            "insights": build_fallback_insights(context).model_dump(by_alias=True),
            "recommendations": build_fallback_recommendations(context).model_dump(by_alias=True),
        }


class GeminiInsightProvider(InsightProvider):
    """Calls the Google Generative Language REST API once per analysis."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-pro", timeout: float = 20.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def build_prompt(self, context: InsightContext) -> str:
        profile = context.profile
        analysis = context.analysis
        spending = json.dumps(analysis.spending_breakdown.model_dump(mode="json"))
        goals = ", ".join(
            f"{goal.description} (₹{goal.target_amount} in {goal.timeline_months} months, {goal.priority.value} priority)"
            for goal in profile.financial_goals
        )
        investment_types = ", ".join(profile.investment_types) or "none"

        return (
            "Analyze this financial profile and provide insights and actionable recommendations.\n\n"
            f"Income: ₹{profile.monthly_income}\n"
            f"Spending Breakdown: {spending}\n"
            f"Needs vs Wants: {analysis.needs_wants_analysis.needs_percentage}% needs, "
            f"{analysis.needs_wants_analysis.wants_percentage}% wants\n"
            f"Financial Discipline: {profile.financial_discipline}/5\n"
            f"Risk Tolerance: {profile.risk_taking}\n"
            f"Investment Types: {investment_types}\n"
            f"Willingness to reduce expenses: {profile.expense_reduction}/10\n"
            f"Financial goals: {goals}\n\n"
            "insights: spendingPatterns, optimizationOpportunities, investmentRecommendations, "
            "riskAnalysis, goalAchievability.\n"
            "recommendations: immediate (1-3 months), shortTerm (3-12 months), longTerm (1+ years), "
            "emergencyFund, investmentStrategy."
        )

    def generate(self, context: InsightContext) -> Mapping[str, Any]:
        body = {
            "contents": [{"parts": [{"text": self.build_prompt(context)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

        try:
            response = requests.post(
                GEMINI_API_URL.format(model=self.model),
                headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            # Covers connection errors, timeouts and non-2xx (including 429 quota exhaustion)
            raise ExternalServiceError(f"Insight request failed: {e}", e)
        except ValueError as e:
            raise ExternalServiceError("Insight service returned a non-JSON body", e)

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            payload = json.loads(text)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ExternalServiceError("Empty or malformed response from insight model", e)

        if not isinstance(payload, dict):
            raise ExternalServiceError("Insight payload is not a JSON object")
        return payload


# --- TEMPLATES ---

def _weakest_feasibility(analysis: AnalysisResult) -> Feasibility:
    return min((goal.feasibility for goal in analysis.individual_goals), key=lambda tier: tier.rank, default=Feasibility.HIGH)


def build_fallback_insights(context: InsightContext) -> FinancialInsights:
    profile = context.profile
    analysis = context.analysis
    needs_wants = analysis.needs_wants_analysis
    spending = analysis.spending_breakdown

    largest_want = max(needs_wants.wants.items(), key=lambda item: item[1], default=("other", Decimal(0)))[0]

    if _weakest_feasibility(analysis) == Feasibility.HIGH:
        achievability = "Your plan is achievable at the current trajectory."
    elif analysis.goal_timeline.is_reachable:
        achievability = (
            f"Your primary goal needs about {analysis.goal_timeline.time_to_goal} months at the current rate; "
            "some goals need a higher monthly contribution."
        )
    else:
        achievability = "Your goals are not reachable until you set aside money every month."

    return FinancialInsights(
        spending_patterns=(
            f"{needs_wants.needs_percentage}% of your spending goes to needs and "
            f"{needs_wants.wants_percentage}% to wants."
        ),
        optimization_opportunities=(
            f"Your largest discretionary category is {largest_want.replace('_', ' ')}. "
            "Further optimization is possible with consistent tracking."
        ),
        investment_recommendations=(
            f"Consider a diversified investment portfolio suited to your {profile.risk_taking.lower()} risk profile."
        ),
        risk_analysis=(
            f"Financial discipline is {profile.financial_discipline}/5 with "
            f"₹{spending.savings + spending.investments} set aside each month."
        ),
        goal_achievability=achievability,
    )


def build_fallback_recommendations(context: InsightContext) -> Recommendations:
    return Recommendations(
        immediate=["Track all expenses", "Set up automatic savings"],
        short_term=["Build emergency fund", "Optimize subscriptions"],
        long_term=["Increase investment allocation", "Plan for major purchases"],
        emergency_fund="Build 6 months of expenses as emergency fund",
        investment_strategy="Diversify across equity and debt instruments",
    )


def _pick_text(payload: Mapping[str, Any], alias: str, name: str) -> Optional[str]:
    value = payload.get(alias, payload.get(name))
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _pick_list(payload: Mapping[str, Any], alias: str, name: str) -> Optional[List[str]]:
    value = payload.get(alias, payload.get(name))
    if not isinstance(value, list):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items or None


def merge_with_templates(payload: Mapping[str, Any], context: InsightContext) -> tuple:
    """
    Field-by-field merge of an external payload over the templates.
    Returns (insights, recommendations, number of fields taken from the payload).
    """
    raw_insights = payload.get("insights") if isinstance(payload.get("insights"), Mapping) else {}
    raw_recommendations = payload.get("recommendations") if isinstance(payload.get("recommendations"), Mapping) else {}

    insights: Dict[str, Any] = build_fallback_insights(context).model_dump()
    recommendations: Dict[str, Any] = build_fallback_recommendations(context).model_dump()
    used = 0

    for name in FinancialInsights.model_fields:
        value = _pick_text(raw_insights, to_camel(name), name)
        if value is not None:
            insights[name] = value
            used += 1

    for name in Recommendations.model_fields:
        if isinstance(recommendations[name], list):
            value = _pick_list(raw_recommendations, to_camel(name), name)
        else:
            value = _pick_text(raw_recommendations, to_camel(name), name)
        if value is not None:
            recommendations[name] = value
            used += 1

    return FinancialInsights(**insights), Recommendations(**recommendations), used


# --- SERVICE ---

class InsightService:
    """
    Runs the narrative step after the numbers are computed.
    Never raises: timeouts and provider failures degrade to template text.
    """

    def __init__(self, provider: InsightProvider, timeout: float = 20.0):
        self.provider = provider
        self.timeout = timeout

    async def generate(self, context: InsightContext) -> InsightBundle:
        try:
            # The blocking call runs in a worker thread; on timeout the request stops waiting for it
            loop = asyncio.get_running_loop()
            payload = await asyncio.wait_for(loop.run_in_executor(None, self.provider.generate, context), timeout=self.timeout)
        except asyncio.TimeoutError:
            app_logger.warning(f"Insight provider timed out after {self.timeout}s, using fallback text.")
            return self._fallback(context)
        except ExternalServiceError as e:
            app_logger.warning(f"Insight provider failed, using fallback text: {e}")
            return self._fallback(context)
        except Exception as e:
            app_logger.warning(f"Unexpected insight provider error, using fallback text: {e}", exc_info=True)
            return self._fallback(context)

        if not isinstance(payload, Mapping):
            app_logger.warning("Insight provider returned a non-object payload, using fallback text.")
            return self._fallback(context)

        insights, recommendations, used = merge_with_templates(payload, context)
        if used == 0:
            return InsightBundle(insights, recommendations, InsightSource.FALLBACK)
        return InsightBundle(insights, recommendations, self.provider.source)

    def _fallback(self, context: InsightContext) -> InsightBundle:
        return InsightBundle(
            insights=build_fallback_insights(context),
            recommendations=build_fallback_recommendations(context),
            source=InsightSource.FALLBACK,
        )


def build_simulation_insights(bundle: InsightBundle, result: SimulationResult) -> SimulationInsights:
    """Condenses the narrative for the simulated profile into the what-if panel text."""
    comparison = result.comparison

    if comparison.simulated_time_to_goal is None:
        time_to_goal = "Not reachable at the current savings rate"
    else:
        time_to_goal = f"{comparison.simulated_time_to_goal} months"

    return SimulationInsights(
        goal_achievability=bundle.insights.goal_achievability,
        time_to_goal=time_to_goal,
        savings_impact=f"₹{comparison.monthly_savings_delta:,.0f} additional monthly savings",
        recommendations=(bundle.recommendations.immediate + bundle.recommendations.short_term)[:3],
    )
