"""FastAPI application entry point.

Team Directory Service - the back-office API for managing internal and
external teams, their members, and the company organization chart.
"""

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from routers.v1 import router as v1_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Team Directory Service",
    description="""
    Back-office API for the agency's team directory.

    ## Features

    - Internal and external teams with active member counts
    - Team members with roles, employment status and reporting lines
    - Organization chart built from the reports-to hierarchy

    ## Authentication

    All team endpoints require a Bearer token issued by the configured
    OpenID Connect provider:
    ```
    Authorization: Bearer <token>
    ```
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the ``{"success": false, "error": ...}`` envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report invalid request bodies and query parameters as 400s."""
    logger.info("Rejected invalid request to %s: %d issue(s)", request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid input data",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Check if the service is running.",
)
async def health_check() -> dict:
    """Return service health status."""
    return {
        "status": "healthy",
        "service": "team-directory-service",
        "version": "1.0.0",
    }


# Include API routers
app.include_router(
    v1_router,
    prefix="/api",
)

logger.info("Team Directory Service initialized")
