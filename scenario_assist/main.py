"""
Scenario Assist API - Locator Reliability and Scenario Analysis

Endpoints:
- POST /analysis/issues - Structural risks and readiness score
- POST /analysis/suggestions - Step-targeted recorder suggestions
- POST /analysis/locator-insights - Critical locator resolutions
- POST /analysis/normalize-locators - Steps with locator bundles filled in
- POST /explain/script - Plain-English script walkthrough
- POST /explain/failure - Replay failure classification
- POST /explain/organize - Naming, tags and suites
- POST /assistant/prompt - Assistant prompt document
- POST /assistant/coach/hints, /assistant/coach/ask - Recorder coaching
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scenario_assist import __version__
from scenario_assist.routers import analysis, assistant, explain, health
from scenario_assist.services.flow_inference import get_flow_pattern_table
from scenario_assist.utils.config import settings, validate_settings
from scenario_assist.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    validate_settings()
    table = get_flow_pattern_table()
    logger.info(
        f"Scenario Assist API starting (env={settings.ENVIRONMENT}, "
        f"flow_signals={len(table.signals)})"
    )
    yield
    logger.info("Scenario Assist API shutting down...")


app = FastAPI(
    title="Scenario Assist API",
    description="Locator reliability and scenario analysis for recorded mobile flows",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["health"])
app.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
app.include_router(explain.router, prefix="/explain", tags=["explain"])
app.include_router(assistant.router, prefix="/assistant", tags=["assistant"])


@app.get("/")
async def root():
    return {
        "service": "Scenario Assist API",
        "version": __version__,
        "docs": "/docs" if settings.ENABLE_DOCS else None,
        "endpoints": [
            "/analysis/issues",
            "/analysis/suggestions",
            "/analysis/locator-insights",
            "/analysis/normalize-locators",
            "/explain/script",
            "/explain/failure",
            "/explain/organize",
            "/assistant/prompt",
            "/assistant/coach/hints",
            "/assistant/coach/ask",
            "/assistant/integration-areas",
        ]
    }


def run():
    """Start the API with uvicorn."""
    import uvicorn

    uvicorn.run("scenario_assist.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
