"""
FastAPI application entry point.

This module initializes the FastAPI application, configures middleware,
registers the error handlers and the API routers.
"""
import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import AnalysisError
from .core.logging_config import configure_logging

from .api.routers import analyze

# Ensure logging is configured before the application starts serving requests.
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


app = FastAPI(
    title="DataLens API",
    version="1.0.0",
    description="Upload a CSV or Excel file and get an AI-generated summary, KPIs and chart recommendations",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    """Turn pipeline failures into ``{error, details}`` bodies."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} failed: {exc.__class__.__name__}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """The only request input is the ``dataset`` file; anything else in its place is no upload."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} rejected: {problems}")
    return JSONResponse(
        status_code=400,
        content={"error": "No file uploaded.", "details": problems},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Data analysis failed. Please check the file format and content.",
            "details": f"{exc.__class__.__name__}: {exc}",
        },
    )


app.include_router(analyze.router)


@app.get("/")
async def root():
    """Root endpoint returning API information."""
    return {
        "message": "DataLens API",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment monitoring."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "datalens-api",
        "llm_configured": bool(settings.gemini_api_key.strip()),
    }
