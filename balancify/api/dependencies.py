# balancify/api/dependencies.py

import secrets
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings
from ..services.insight_service import FallbackInsightProvider, GeminiInsightProvider, InsightProvider, InsightService

# --- DATABASE DEPENDENCY ---

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yields an AsyncSession from the factory created in the application lifespan.
    Commits when the endpoint finishes, rolls back on any exception.
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# --- INSIGHT PROVIDER ---

def get_insight_provider(settings: Settings = Depends(get_settings)) -> InsightProvider:
    """The external provider is used only when an API key is configured."""
    if settings.gemini_api_key:
        return GeminiInsightProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.insight_timeout_seconds,
        )
    return FallbackInsightProvider()


def get_insight_service(
    provider: InsightProvider = Depends(get_insight_provider),
    settings: Settings = Depends(get_settings),
) -> InsightService:
    return InsightService(provider, timeout=settings.insight_timeout_seconds)


# --- API KEY VALIDATION ---

def verify_api_key(
    settings: Settings = Depends(get_settings),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
):
    """
    FastAPI Dependency to validate the API key sent in the X-API-Key header.
    """
    expected_key = settings.api_key

    # Check 1: Server Configuration Error (500)
    if not expected_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error: BALANCIFY_API_KEY not set for secure validation."
        )

    # Check 2: Key Validation (401 Unauthorized)
    if not x_api_key or not secrets.compare_digest(x_api_key, expected_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API Key provided for Balancify Backend Access"
        )

    return x_api_key
