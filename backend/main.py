"""
Travelers Claim Orchestrator - Main Application Entry Point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from claim_orch.core import logger, settings
from claim_orch.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from claim_orch.api.routes import travelers
from claim_orch.services.upstream.errors import OrchestrationError


API_PREFIX = "/travelers/claim/api-orch/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} in {settings.APP_ENV} mode")
    logger.debug(f"Claims platform: {settings.TRAVELERS_CLAIM_SERVER_URL}")
    yield
    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Orchestrates FNOL and payment workflows on the Travelers claims platform",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGIN_ALLOWED.split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Include API Routers
app.include_router(travelers.router, prefix=API_PREFIX, tags=["Travelers Claim"])


@app.exception_handler(OrchestrationError)
async def orchestration_error_handler(request: Request, exc: OrchestrationError) -> JSONResponse:
    """Workflow failures surface as 500 with the error kind and failing step."""
    logger.error(
        f"{request.method} {request.url.path} failed at step {exc.step} ({exc.code}): {exc.message}"
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "code": exc.code,
            "step": exc.step,
        },
    )


@app.get("/")
@app.get("/healthcheck")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "env": settings.APP_ENV,
    }


@app.get("/api")
async def get_api():
    """List of API routes."""
    # The OpenAPI paths cover routes mounted through include_router too
    paths = app.openapi()["paths"]
    return {
        "status": "200",
        "data": [
            {"route": path, "method": method.upper()}
            for path, operations in paths.items()
            for method in sorted(operations)
        ],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
