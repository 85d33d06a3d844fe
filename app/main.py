import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

from app.api.deps import get_repository
from app.api.v1.router import v1_router
from app.config import settings
from app.services import supabase_client

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# OpenAPI tag metadata
# ---------------------------------------------------------------------------
TAG_METADATA = [
    {
        "name": "events",
        "description": "Campus events: browse with search, department, date and type "
        "filters; create, update and delete events.",
    },
    {
        "name": "recommendations",
        "description": "AI recommendations: describe your interests and get the best "
        "matching events, each with a reason and a 0-100 match score.",
    },
    {
        "name": "health",
        "description": "System health: event store connectivity, oracle configuration "
        "and the oracle call log.",
    },
]


async def _validate_startup() -> dict[str, str]:
    """Validate critical dependencies at startup. Returns issues dict."""
    issues: dict[str, str] = {}

    # 1. Event store connectivity
    if not supabase_client.is_configured():
        issues["event_store"] = "SUPABASE_URL / SUPABASE_KEY not set"
        logger.warning("Startup check: event store not configured")
    elif await get_repository().ping():
        logger.info("Startup check: event store connection OK")
    else:
        issues["event_store"] = "unreachable"
        logger.error("Startup check: event store connection FAILED")

    # 2. Oracle credential
    if settings.GEMINI_API_KEY:
        logger.info("Startup check: Gemini model %s configured", settings.GEMINI_MODEL)
    else:
        issues["oracle"] = "GEMINI_API_KEY not set"
        logger.warning(
            "Startup check: GEMINI_API_KEY not set (recommendations will come back empty)"
        )

    return issues


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("  EventSync starting")
    logger.info("=" * 60)

    startup_issues = await _validate_startup()
    if startup_issues:
        logger.warning("Startup completed with issues: %s", list(startup_issues))
    else:
        logger.info("Application startup complete, all checks passed")

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title="EventSync API",
    summary="Campus event discovery with AI recommendations",
    description=(
        "## Overview\n\n"
        "Browse, filter and create campus events, and get personalized event "
        "recommendations from a free-text description of your interests.\n\n"
        "## Stack\n\n"
        "FastAPI + Supabase + Gemini (generateContent) + httpx"
    ),
    version="0.1.0",
    openapi_tags=TAG_METADATA,
    lifespan=lifespan,
    # Swagger UI moves to /swagger; /docs serves Scalar
    docs_url="/swagger",
    redoc_url=None,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/", tags=["default"], summary="API entry", include_in_schema=False)
async def root():
    return {
        "message": "EventSync API",
        "version": "0.1.0",
        "docs": "/docs",
        "swagger": "/swagger",
        "openapi": "/openapi.json",
    }


@app.get("/docs", include_in_schema=False)
async def scalar_html():
    return get_scalar_api_reference(
        openapi_url=app.openapi_url,
        title=app.title,
    )
