"""
License API - client authentication, entitlements and user administration
"""

from datetime import datetime, timezone
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from routers.admin_router import admin_router
from routers.client_router import client_router
from database import init_db, close_db
from config.settings import settings
from backend.utils.responses import error_response
from services.errors import LicenseServiceError

# Logging setup - write ALL events to <log_dir>/app.log
settings.log_dir.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(settings.log_dir / "app.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# ============================================================================
# FASTAPI APP SETUP
# ============================================================================

app = FastAPI(title="License API")


# Uncaught exception middleware - logs all unhandled exceptions and returns 500
class UncaughtExceptionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Uncaught exception: {e}\n{traceback.format_exc()}")
            return error_response("internal_error", status=500, message="Internal Server Error")


app.add_middleware(UncaughtExceptionMiddleware)

# CORS MUST be near the bottom
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "User-Agent"],
)

# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(LicenseServiceError)
async def license_error_handler(request: Request, exc: LicenseServiceError):
    return error_response(exc.code, status=exc.status_code, message=exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
    message = f"Missing or invalid fields: {', '.join(fields)}" if fields else "Invalid request"
    return error_response("validation_error", status=400, message=message)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response("internal_error", status=500, message="Database error")

# ============================================================================
# LIFECYCLE
# ============================================================================

def _mask(secret: str) -> str:
    return f"***{secret[-4:]}" if len(secret) > 4 else "***"


@app.on_event("startup")
async def initialize_database():
    """Initialize the database and create all tables."""
    try:
        await init_db(seed_demo_user=settings.seed_demo_user)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


@app.on_event("startup")
async def log_banner():
    logger.info("=== License API Server ===")
    logger.info(f"Listening on http://{settings.host}:{settings.port}")
    logger.info(f"API key: {_mask(settings.api_key)}  User agent: {settings.user_agent}  Version: {settings.app_version}")
    for route in app.routes:
        methods = getattr(route, "methods", None)
        if methods and route.path.startswith("/api"):
            logger.info(f"  {','.join(sorted(methods)):<6} {route.path}")


@app.on_event("shutdown")
async def shutdown_database():
    """Close the database before the process exits."""
    logger.info("Shutting down server...")
    await close_db()

# ============================================================================
# ROUTES
# ============================================================================

app.include_router(client_router)
app.include_router(admin_router)


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


# Serve update artifacts as downloads
class UpdateFiles(StaticFiles):
    async def get_response(self, path, scope):
        response = await super().get_response(path, scope)
        if response.status_code == 200:
            response.headers["Content-Type"] = "application/octet-stream"
            response.headers["Content-Disposition"] = "attachment"
        return response


settings.updates_dir.mkdir(parents=True, exist_ok=True)
app.mount("/updates", UpdateFiles(directory=str(settings.updates_dir)), name="updates")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
