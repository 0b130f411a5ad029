# mentor_match/main.py
import logging
from fastapi import FastAPI

from .config import get_settings
from .database import create_db_and_tables, ping_database
from .routers import profile_router, mentorship_router, chat_router

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mentor Match API",
    description="Mentor/mentee matching, request lifecycle and per-match chat.",
    version="1.0.0",
)

# Include routers
app.include_router(profile_router.router)
app.include_router(mentorship_router.router)
app.include_router(chat_router.router)

@app.on_event("startup")
def startup_event():
    """Initialize application on startup"""
    logger.info("Application startup event triggered.")
    create_db_and_tables()
    logger.info("Startup sequence completed successfully.")

@app.get("/health")
def health_check():
    """Health check endpoint"""
    try:
        ping_database()
        return {"status": "healthy", "database": "ok"}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
