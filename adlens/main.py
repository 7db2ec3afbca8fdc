"""ADLENS — FastAPI Application Entry Point.

Resilient Meta Ads insights and report assembly over HTTP.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from adlens.api.insight_routes import router as insights_router
from adlens.connectors.meta.account import account_resolver
from adlens.connectors.meta.client import MetaClient
from adlens.connectors.meta.endpoints import MetaInsights
from adlens.config import settings
from adlens.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("ADLENS starting up...")
    if not settings.meta_access_token:
        logger.error("META_ACCESS_TOKEN is not set; Meta API calls will fail")
    client = MetaClient()
    # One resolver per process: the ad account id is discovered at most once
    app.state.insights = MetaInsights(client, account_resolver(client))
    yield
    await client.close()
    logger.info("ADLENS shut down")


app = FastAPI(
    title="ADLENS",
    description="Resilient Meta Ads insights: normalized metrics, bulk fetches and period-over-period reports.",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(insights_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "adlens",
        "version": VERSION,
        "api_version": settings.meta_api_version,
    }
