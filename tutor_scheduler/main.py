import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import LOG_LEVEL
from .database import Base, engine
from .exceptions import SchedulingError
from .logging_config import setup_logging
from . import models  # noqa: F401  (registers tables on Base)
from .routes import slot_ranking, slot_requests, slot_weights, lessons

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("🚀 Tutor Scheduler API started")
    yield
    logger.info("Application shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Tutor Scheduler API",
    description="Slot ranking and conflict resolution for independent tutors",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routers
app.include_router(slot_ranking.router, prefix="/slot-ranking", tags=["slot-ranking"])
app.include_router(slot_requests.router, prefix="/slot-requests", tags=["slot-requests"])
app.include_router(slot_weights.router, prefix="/slot-weights", tags=["slot-weights"])
app.include_router(lessons.router, prefix="/lessons", tags=["lessons"])


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Tutor Scheduler API",
        "version": "1.0.0",
        "endpoints": {
            "rank": "POST /slot-ranking/rank - Rank proposed slots for a client",
            "select": "POST /slot-ranking/select - Book a ranked slot",
            "replace": "POST /slot-ranking/replace - Replace the conflicting lesson with a ranked slot",
            "requests": "GET/POST /slot-requests/ - Proposed slots, POST /slot-requests/{id}/rank|accept|reject",
            "weights": "GET/PUT/DELETE /slot-weights/me - Ranking preferences",
            "lessons": "GET /lessons/ - Lessons, GET /lessons/stats, PATCH /lessons/{id}/status",
        },
        "authentication": "Bearer token in Authorization header",
        "swagger_ui": "/docs - Interactive API documentation",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


# This allows running the app directly with: python -m tutor_scheduler.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tutor_scheduler.main:app", host="0.0.0.0", port=8000, reload=True)
