from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from app.api import quotes, regions
from app.core.config import settings
from app.core.errors import LookupNotFoundError, RateTableError
from app.core.redis import init_redis, close_redis, get_redis
from app.core.metrics import request_count, request_duration, redis_connected, get_metrics_text
from app.services.rate_tables import load_rate_tables
from app.services.regions import load_region_directory
import time
import logging

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)

            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    logger.info(f"Loading rate tables from {settings.DATA_DIR}")
    app.state.rate_tables = load_rate_tables(settings.DATA_DIR)
    app.state.region_directory = load_region_directory(settings.DATA_DIR)
    logger.info(f"{len(app.state.rate_tables)} rate tables loaded")

    logger.info("Initializing Redis connection...")
    try:
        if await init_redis() is not None:
            redis_connected.set(1)
            logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        redis_connected.set(0)

    yield

    logger.info("Application shutting down...")
    await close_redis()
    redis_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(regions.router)


REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _describe_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in REQUEST_LOCATIONS]
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    if not loc:
        return "Request body is required"
    field = loc[0]
    if error.get("type") == "missing":
        return f"{field} is required"
    return f"{field} is invalid: {error.get('msg')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = _describe_validation_error(errors[0]) if errors else "Invalid request"
    logger.info(f"Rejected {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(LookupNotFoundError)
async def lookup_exception_handler(request: Request, exc: LookupNotFoundError):
    logger.warning(f"Lookup failed on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=404, content={"message": exc.message})


@app.exception_handler(RateTableError)
async def rate_table_exception_handler(request: Request, exc: RateTableError):
    logger.error(f"Malformed rate data on {request.url.path}: {exc.message}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check():
    redis = get_redis()
    tables = getattr(app.state, "rate_tables", None)

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if redis is not None else "disconnected",
            "rate_tables": len(tables) if tables is not None else 0,
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    tables = getattr(app.state, "rate_tables", None)

    if tables is None or len(tables) == 0:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Rate tables not loaded"}
        )

    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }


def run():
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower())
