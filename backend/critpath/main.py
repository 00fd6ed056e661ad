"""
Critpath - task service with Critical Path Method scheduling.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager

from critpath import __version__
from critpath.database import init_db
from critpath.routes import tasks, dependencies, schedule, images
from critpath.exceptions import register_exception_handlers
from critpath.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Critpath API...")
    await init_db()
    logger.info("Database initialized")
    yield
    logger.info("Shutting down Critpath API...")


app = FastAPI(
    title="Critpath",
    description="Task service with dependency tracking and Critical Path Method scheduling",
    version=__version__,
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
app.include_router(dependencies.router, prefix="/dependencies", tags=["Dependencies"])
app.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])
app.include_router(images.router, prefix="/images", tags=["Images"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
