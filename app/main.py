"""
Screen time quiz API

Students study a material, pass a generated quiz and earn screen time.
Run with ``uvicorn app.main:app``.
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from app.config import settings
from app.database import init_db
from app.api import materials, quizzes, rewards
from app.services.exceptions import QuizServiceError
from app.utils.cache import cache_service
from app.utils.rate_limiter import rate_limiter

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Never counted against the global request budget
UNLIMITED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Students study materials, pass generated quizzes and earn screen time",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def rate_limit_and_log(request: Request, call_next):
    """Global per-client rate limit, then one log line per request"""
    started = time.time()

    if request.url.path not in UNLIMITED_PATHS:
        try:
            await rate_limiter.check_rate_limit(request)
        except HTTPException as e:
            return JSONResponse(status_code=e.status_code, content=e.detail)

    response = await call_next(request)

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {time.time() - started:.3f}s"
    )
    return response


@app.exception_handler(QuizServiceError)
async def quiz_service_exception_handler(request: Request, exc: QuizServiceError):
    """Map domain errors to their status code and error code"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{exc.error_code} on {request.url.path}: {str(exc)}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "message": str(exc), **exc.extra()}
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # Rate limit rejections already carry a structured body
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http_error", "message": exc.detail, "status_code": exc.status_code}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "detail": str(exc) if settings.DEBUG else None
        }
    )


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "cache": "enabled" if cache_service.redis_client is not None else "disabled",
    }


@app.get("/")
async def root():
    """Entry points of the API"""
    return {
        "service": settings.APP_NAME,
        "materials": "/api/materials/",
        "quizzes": "/api/quizzes/{material_id}/start",
        "dashboard": "/api/dashboard",
        "docs": "/docs",
    }


app.include_router(materials.router)
app.include_router(quizzes.router)
app.include_router(rewards.router)


@app.on_event("startup")
async def create_tables():
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    init_db()
