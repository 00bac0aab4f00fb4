# calchub/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn
import time
import logging

from calchub.api.calculators import router as calculators_router
from calchub.api.favorites import router as favorites_router
from calchub.api.history import router as history_router
from calchub.api.tracking import router as tracking_router
from calchub.calculators.registry import CALCULATORS
from calchub.core.config import settings
from calchub.core.translations import validate_translation
from calchub.db.database import init_db, check_db_connection
from calchub.security.error_handlers import error_handler

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Silence noisy third-party loggers
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('aiosqlite').setLevel(logging.WARNING)

if settings.DEBUG:
    logging.getLogger('calchub').setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)


def check_translations() -> int:
    """Log missing translation keys for every calculator and locale. Returns the number of gaps."""
    gaps = 0
    for calculator in CALCULATORS.values():
        for locale in settings.SUPPORTED_LOCALES:
            missing = validate_translation(calculator, locale)
            if not missing:
                continue
            gaps += len(missing)
            if locale == settings.DEFAULT_LOCALE:
                logger.error(f"❌ {calculator.id}/{locale} is missing: {', '.join(missing)}")
            else:
                logger.debug(f"{calculator.id}/{locale} falls back to {settings.DEFAULT_LOCALE} for {len(missing)} keys")
    return gaps


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting up Calchub Calculator API...")

    try:
        await init_db()
        logger.info("✅ Database initialized successfully")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise

    gaps = check_translations()
    logger.info(f"🌐 Loaded {len(CALCULATORS)} calculators, {gaps} translation gaps")

    yield

    logger.info("👋 Shutting down Calchub Calculator API")


# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Multilingual calculator catalog",
    lifespan=lifespan
)

# CORS middleware
cors_origins = settings.CORS_ORIGINS
logger.info(f"🌐 CORS origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.time()
    client_host = request.client.host if request.client else 'unknown'

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"❌ Error processing {request.method} {request.url.path}: {e} ({process_time:.3f}s)")
        raise

    process_time = time.time() - start_time
    if request.url.path == "/favicon.ico":
        logger.debug(f"📄 Static: {request.url.path} {response.status_code}")
    else:
        logger.info(
            f"📨 {request.method} {request.url.path} from {client_host} "
            f"-> {response.status_code} ({process_time:.3f}s)"
        )
    return response


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def secure_http_exception_handler(request: Request, exc: StarletteHTTPException):
    return await error_handler.handle_http_exception(request, exc)


@app.exception_handler(RequestValidationError)
async def secure_validation_exception_handler(request: Request, exc: RequestValidationError):
    return await error_handler.handle_validation_error(request, exc)


@app.exception_handler(Exception)
async def secure_general_exception_handler(request: Request, exc: Exception):
    return await error_handler.handle_internal_error(request, exc)


@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon to prevent 404s"""
    return Response(status_code=204)


# Health and status endpoints
@app.get("/health")
async def health_check():
    database_ok = await check_db_connection()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "disconnected",
        "service": "calchub",
        "version": settings.API_VERSION,
        "calculators": len(CALCULATORS),
        "locales": settings.SUPPORTED_LOCALES,
        "timestamp": time.time()
    }


@app.get("/ping")
async def ping():
    return {"ping": "pong", "timestamp": time.time()}


@app.get("/")
async def root():
    """API root with endpoint information"""
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "calculators": {
                "list": "/api/calculators",
                "detail": "/api/calculators/{id_or_slug}",
                "calculate": "/api/calculators/{calculator_id}/calculate",
                "preset": "/api/calculators/{calculator_id}/presets/{preset_id}"
            },
            "favorites": "/api/favorites",
            "history": "/api/history",
            "track": "/api/track"
        },
        "timestamp": time.time()
    }


@app.get("/api")
async def api_info():
    return {
        "name": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "categories": sorted({calc.config.category.value for calc in CALCULATORS.values()}),
        "default_locale": settings.DEFAULT_LOCALE,
        "features": {
            "favorites": True,
            "history": True,
            "tracking": settings.TRACKING_ENABLED
        }
    }


# Include routers with logging
logger.info("📋 Registering API routers...")

for router, tag in (
    (calculators_router, "Calculators"),
    (favorites_router, "Favorites"),
    (history_router, "History"),
    (tracking_router, "Tracking"),
):
    try:
        app.include_router(router, prefix="/api", tags=[tag])
        logger.info(f"✅ {tag} router registered")
    except Exception as e:
        logger.error(f"❌ Failed to register {tag} router: {e}")


if __name__ == "__main__":
    logger.info("🚀 Starting server directly...")
    uvicorn.run(
        "calchub.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
