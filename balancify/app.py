# balancify/app.py (Balancify Backend: questionnaire analysis + what-if simulator)

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import verify_api_key
from .api.v1.questionnaire import router as questionnaire_router
from .api.v1.session import router as session_router
from .api.v1.simulation import router as simulation_router
from .config import Settings, get_settings
from .db.database import build_engine, build_session_factory, create_db_and_tables
from .utils.logger import app_logger


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # --- Application Lifespan Context ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # STARTUP: engine, session factory and tables
        app_logger.info("Application Startup: Initializing database engine...")
        engine = build_engine(settings.database_url)
        await create_db_and_tables(engine)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)

        yield

        # SHUTDOWN: Database Cleanup
        app_logger.info("Application Shutdown: Disposing database engine...")
        await engine.dispose()

    app = FastAPI(
        title="Balancify Backend",
        description="Personal-finance questionnaire analysis: spending breakdown, goal feasibility, projections and what-if simulation.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root Endpoint (basic health check, no API key)
    @app.get("/", tags=["Health"])
    def read_root():
        return {"message": "Balancify backend is running. API endpoints are under /api/..."}

    # All API routes require the X-API-Key header
    api_router = APIRouter(dependencies=[Depends(verify_api_key)])
    api_router.include_router(questionnaire_router)
    api_router.include_router(simulation_router)
    api_router.include_router(session_router)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
