"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from task_manager.api import auth, tasks
from task_manager.config import get_settings
from task_manager.database import init_db
from task_manager.errors import register_exception_handlers
from task_manager.logging_setup import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    setup_logging(settings.log_level)
    if settings.auto_create_tables:
        init_db()
    logger.info(f"Task Manager API starting ({settings.environment})")
    yield


app = FastAPI(
    title="Task Manager API",
    description="Personal task tracking with token authentication",
    version=API_VERSION,
    lifespan=lifespan,
)

# Any origin in development, a fixed allow-list elsewhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(tasks.router)


@app.get("/")
async def root():
    """Describe the API."""
    return {
        "success": True,
        "message": "Task Management API is running",
        "version": API_VERSION,
        "endpoints": {"auth": "/api/auth", "tasks": "/api/tasks"},
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
