from decimal import Decimal
from typing import Any, Mapping

import pytest
from fastapi.testclient import TestClient

from balancify.api.dependencies import get_insight_provider
from balancify.app import create_app
from balancify.config import Settings
from balancify.services.insight_service import InsightProvider
from balancify.services.projection_logic.profile_normalizer import normalize_profile
from balancify.utils.exceptions import ExternalServiceError

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


class FailingInsightProvider(InsightProvider):
    def generate(self, context) -> Mapping[str, Any]:
        raise ExternalServiceError("quota exhausted")


class StaticInsightProvider(InsightProvider):
    def __init__(self, payload):
        self.payload = payload

    def generate(self, context) -> Mapping[str, Any]:
        return self.payload


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "api_key": API_KEY,
        "gemini_api_key": "",
        "insight_timeout_seconds": 2.0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def failing_insights(app):
    app.dependency_overrides[get_insight_provider] = lambda: FailingInsightProvider()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def sample_answers():
    """A typical salaried profile with structured goals."""
    return {
        "monthly_income": 50000,
        "housing_expenses": 15000,
        "utility_bills": 2000,
        "groceries_weekly": 2000,
        "dining_monthly": 3000,
        "shopping_monthly": 4000,
        "subscription_cost": 500,
        "transport_monthly": 2500,
        "impulse_shopping": 2,
        "entertainment_hours": 5,
        "has_loans": "No",
        "monthly_investment": 5000,
        "preferred_savings": 10000,
        "risk_taking": "Medium",
        "financial_discipline": 4,
        "investment_types": ["Mutual Funds", "Fixed Deposits"],
        "financial_goals": [
            {"description": "Emergency fund", "target_amount": 300000, "timeline_months": 24, "priority": "high", "category": "emergency"},
            {"description": "New car", "target_amount": 800000, "timeline_months": 48, "priority": "medium", "category": "purchase"},
        ],
    }


@pytest.fixture
def sample_profile(sample_answers):
    return normalize_profile(sample_answers)


def money(value) -> Decimal:
    return Decimal(str(value))
