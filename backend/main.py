"""
FastAPI Backend for Creator Radar

This is the main entry point for the API server. It provides:
- POST /api/analyze - run the staged analysis, streamed as NDJSON events
- GET /api/health - liveness check

Architecture Decision:
- No database - nothing outlives a single request/response
- Provider credentials are read lazily; a missing key fails the stage that
  needs it, not the server startup
"""

# Load .env BEFORE any application imports that read os.environ
from dotenv import load_dotenv
load_dotenv()

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routes import analyze
from backend.api.schemas import HealthResponse
from creator_radar import __version__
from creator_radar.config import configure_logging, get_settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    logger.info(
        "server_start",
        version=__version__,
        analysis_provider_configured=bool(settings.mino_api_url and settings.mino_api_key),
        trends_provider_configured=bool(settings.perplexity_api_key),
    )
    yield


app = FastAPI(
    title="Creator Radar API",
    description="Streaming multi-stage analysis of creator content",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# API routes - mounted under /api prefix for production
# =============================================================================

app.include_router(analyze.router, prefix="/api", tags=["Analysis"])

# Also keep routes without prefix for backward compatibility (dev proxy strips /api)
app.include_router(analyze.router, tags=["Analysis (compat)"], include_in_schema=False)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# =============================================================================
# Run with: python -m backend.main
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8100))
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
