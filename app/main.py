import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED, UPLOAD_DIR
from .database import create_tables, dispose_engine, init_engine
from .domain.accounts.router import router as accounts_router
from .domain.admin.router import router as admin_router
from .domain.appointments.router import router as appointments_router
from .domain.doctors.router import router as doctors_router
from .domain.notifications.router import router as notifications_router
from .errors import register_exception_handlers
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("passlib").setLevel(logging.ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_engine()
    try:
        create_tables()
        logger.info("Database tables created successfully")
    except Exception as e:
        # Another worker may have created them first
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield

    logger.info("Application shutting down...")
    dispose_engine()


app = FastAPI(title="DocSpot API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json", "/uploads"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(accounts_router)
app.include_router(notifications_router)
app.include_router(doctors_router)
app.include_router(appointments_router)
app.include_router(admin_router)

# Locally stored appointment documents (unused when R2 is configured)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    return {"message": "DocSpot API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
