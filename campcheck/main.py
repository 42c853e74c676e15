# File: campcheck/main.py
import time
import logging
from typing import Callable
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from campcheck.api.v1.api import api_router
from campcheck.core.config import settings
from campcheck.core.exceptions import AttendanceError
from campcheck.core.scheduler import start_scheduler, stop_scheduler

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL))
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Dashboards and scanning stations are served from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Must stay False with allow_origins=["*"]
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time"],
    max_age=3600,
)

# Request logging middleware (AFTER CORS)
@app.middleware("http")
async def log_requests(request: Request, call_next: Callable) -> Response:
    """Log all requests with timing"""
    start_time = time.time()
    logger.info(f"{request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response

@app.exception_handler(AttendanceError)
async def attendance_error_handler(request: Request, exc: AttendanceError) -> JSONResponse:
    """Render service errors with their status; TransientIO tells the client to retry"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")

    content = {"error": type(exc).__name__, "detail": exc.message}
    if exc.details is not None:
        content["details"] = exc.details

    headers = {"Retry-After": "1"} if exc.status_code == 503 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT
    }

@app.on_event("startup")
async def startup_event():
    logger.info(f"🚀 Starting {settings.PROJECT_NAME}")
    logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
    logger.info(f"📡 API V1 prefix: {settings.API_V1_STR}")

    if settings.ENABLE_SCHEDULER:
        start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    if settings.ENABLE_SCHEDULER:
        stop_scheduler()

app.include_router(api_router, prefix=settings.API_V1_STR)
