import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from models.verification import VerificationSummary
from routes.verification_routes import router as verification_router

# Configure logging based on settings
handlers = [logging.StreamHandler()]
if settings.log_file:
    handlers.append(logging.FileHandler(settings.log_file))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown events."""
    # Startup
    logger.info("Starting Carrier Verification API...")
    if settings.fmcsa_web_key:
        logger.info("QC Mobile webKey configured, SAFER scrape is the fallback")
    else:
        logger.info("No QC Mobile webKey, using SAFER scrape only")

    yield

    # Shutdown
    logger.info("Shutting down Carrier Verification API...")


# OpenAPI tags for better documentation organization
tags_metadata = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring API status",
    },
    {
        "name": "verification",
        "description": "Carrier lookups against the FMCSA SAFER Company Snapshot",
    },
]

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="""
    ## Overview
    Verifies freight carriers by MC or USDOT number against the public
    FMCSA SAFER Company Snapshot and returns a normalized carrier record.

    ## Outcomes
    - **Found**: `found: true` with the extracted record
    - **Not found**: `found: false` with no `error` - SAFER has no such carrier
    - **Unavailable**: `found: false` with an `error` - SAFER could not be reached;
      the carrier may still exist

    ## Authentication
    None. The verification endpoints are public.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health",
         tags=["health"],
         summary="Health Check",
         description="Check the health status of the API",
         response_description="Health status information")
async def health_check():
    """Check API health status.

    Returns:
        dict: Health status and version
    """
    return {
        "status": "healthy",
        "version": settings.app_version
    }

# Root endpoint
@app.get("/",
         summary="API Information",
         description="Get basic information about the Carrier Verification API",
         response_description="API metadata")
async def root():
    """Get basic API information.

    Returns:
        dict: API name, version, and documentation URL
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "documentation": "/docs"
    }

app.include_router(verification_router)

# Error handlers
@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 Not Found errors.

    Args:
        request: The incoming request
        exc: The exception that was raised
    """
    # If it's an HTTPException with a detail, preserve it
    if hasattr(exc, 'detail'):
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail}
        )
    return JSONResponse(
        status_code=404,
        content={"error": "Resource not found", "path": str(request.url)}
    )

@app.exception_handler(500)
async def internal_error_handler(request, exc):
    """Handle 500 Internal Server errors.

    Args:
        request: The incoming request
        exc: The exception that was raised
    """
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc):
    """Return 400 for request input that does not parse.

    Malformed verification input is a client error like a bad MC or DOT
    number, so it gets the same status. verify-dot-mc callers get their
    usual envelope.

    Args:
        request: The incoming request
        exc: The validation error
    """
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    if request.url.path.startswith("/functions/"):
        summary = VerificationSummary(status="error", message="Invalid request body")
        return JSONResponse(status_code=400, content=summary.to_response())
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())}
    )
