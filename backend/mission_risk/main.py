"""
FastAPI application entry point for interplanetary mission risk assessment.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from mission_risk.config import get_settings
from mission_risk.db.database import init_db
from mission_risk.core.estimators import EstimatorFactory
from contextlib import asynccontextmanager
import logging

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting mission risk assessment API")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    try:
        EstimatorFactory.register_all()
        logger.info(f"Registered {len(EstimatorFactory.list_estimators())} risk estimators")
    except Exception as e:
        logger.error(f"Failed to register estimators: {e}")

    # Untrained estimator is usable immediately; retraining swaps it later
    try:
        state = get_estimator_handle().ensure()
        logger.info(f"Risk estimator ready: {state.estimator.get_estimator_name()}")
    except Exception as e:
        logger.error(f"Failed to initialize risk estimator, using deterministic scoring: {e}")

    yield

    # Shutdown
    logger.info("Shutting down mission risk assessment API")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Backend API for interplanetary mission passenger and mission risk assessment",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import and include routers
from mission_risk.api import passengers, missions, assessments, risks, events
from mission_risk.api.deps import get_estimator_handle, get_mission_repository, get_person_repository

# Include all API routers with /api prefix
app.include_router(
    passengers.router,
    prefix="/api",
    tags=["passengers"]
)
app.include_router(
    missions.router,
    prefix="/api",
    tags=["missions"]
)
app.include_router(
    assessments.router,
    prefix="/api",
    tags=["assessments"]
)
app.include_router(
    risks.router,
    prefix="/api",
    tags=["risks"]
)
app.include_router(
    events.router,
    prefix="/api",
    tags=["events"]
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        from mission_risk.db.database import SessionLocal
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()

        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "database": "connected",
            "estimators_registered": len(EstimatorFactory.list_estimators()),
            "passengers": len(get_person_repository()),
            "missions": len(get_mission_repository())
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "error": str(e)
        }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Interplanetary Mission Risk Assessment API",
        "version": settings.app_version,
        "docs": "/api/docs",
        "endpoints": {
            "passengers": "/api/passengers",
            "missions": "/api/missions",
            "assessments": "/api/assessments",
            "risks": "/api/risks",
            "events": "/api/events"
        }
    }
