from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from src.core.database import init_db
from src.core.exceptions import AppException
from src.core.logger import configure_logging
from src.core.response.handlers import (
    app_exception_handler,
    global_exception_handler,
    request_validation_exception_handler,
)
from src.core.config import settings

# Import routers from apps
from src.apps.blog import post_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create database tables
    await init_db()
    logger.info("Database ready: %s", settings.ASYNC_DATABASE_URL.split("://", 1)[0])
    yield
    # Shutdown: Clean up resources if needed
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_INFO,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Adjust in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception handlers, all answering with the response envelope
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with health check."""
    return {"message": "Server is running!", "status": "healthy", "version": settings.PROJECT_VERSION}


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "message": "Service is running normally"}


# Include app routers
app.include_router(post_router)


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload in development
        log_level=settings.LOG_LEVEL.lower(),
    )
