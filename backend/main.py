"""
Teacher Admin - Backend Application

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from teacher_admin import __version__
from teacher_admin.api import api_router
from teacher_admin.core.config import get_config, get_log_path, get_public_root, get_upload_tmp_dir
from teacher_admin.core.logging import get_logger, setup_logging

# Record startup time globally
_startup_time = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes resources on startup and cleans up on shutdown.
    """
    global _startup_time
    _startup_time = datetime.utcnow().isoformat()
    logger = setup_logging()
    logger.info("Starting Teacher Admin backend...")
    logger.debug("Log level: %s, log file: %s", get_config().logging.level, get_log_path())

    # Do not init or migrate database on startup; run the init-db script once manually.

    logger.info(f"Public storage ready: {get_public_root()}")
    logger.info(f"Upload temp directory: {get_upload_tmp_dir()}")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


def create_app() -> FastAPI:
    """Build the application from the current configuration."""
    config = get_config()

    app = FastAPI(
        title=config.app.name,
        description="Administrative backend for teacher records and photos",
        version=__version__,
        lifespan=lifespan,
    )

    # Request logging middleware (flow-wise: log each request and response)
    @app.middleware("http")
    async def log_requests(request, call_next):
        logger = get_logger()
        method = request.method
        path = request.url.path
        logger.debug("Request started: %s %s", method, path)
        response = await call_next(request)
        logger.debug("Request completed: %s %s -> %s", method, path, response.status_code)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    # Stored photos are reachable at <public_url_prefix>/<photo>
    app.mount(
        config.storage.public_url_prefix,
        StaticFiles(directory=str(get_public_root())),
        name="public",
    )

    @app.get("/")
    async def root():
        """Root endpoint - health check."""
        return {
            "name": config.app.name,
            "version": __version__,
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint with startup time."""
        return {
            "status": "healthy",
            "startup_time": _startup_time,
            "timestamp": datetime.utcnow().isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        "main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
    )
