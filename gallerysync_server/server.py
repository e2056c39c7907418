"""
GallerySync Server - Main FastAPI Application

This module contains the main FastAPI application for the GallerySync server.
It serves the authoritative image metadata catalog and the sync endpoint
that client replicas reconcile against.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from gallerysync_server import __version__
from gallerysync_server import database
from gallerysync_server.managers.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


# ==================== Configuration ====================

DB_PATH = os.environ.get("GALLERYSYNC_DB_PATH", "database/gallerysync.db")
HOST = os.environ.get("GALLERYSYNC_HOST", "0.0.0.0")
PORT = int(os.environ.get("GALLERYSYNC_PORT", "4000"))


def ConfigureLogging(logs_dir: Path = Path("logs")) -> Path:
    """
    Configure logging to write to both console and a rotating daily file

    Returns:
        Path: Log file path
    """
    logs_dir.mkdir(exist_ok=True)
    log_filename = logs_dir / f"gallerysync-server-{datetime.now().strftime('%Y-%m-%d')}.log"

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            # Console handler
            logging.StreamHandler(),
            # File handler with rotation (max 10MB per file, keep 10 backup files)
            RotatingFileHandler(
                log_filename,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=10,
                encoding='utf-8'
            )
        ]
    )
    return log_filename


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    Manages database initialization and cleanup
    """
    # Startup
    logger.info("GallerySync Server starting up...")

    created_here = database.db_manager is None
    if created_here:
        database.db_manager = DatabaseManager(DB_PATH)
    database.db_manager.InitializeDatabase()
    logger.info("Database initialized successfully")

    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("GallerySync Server shutting down...")
    if created_here:
        database.db_manager.Dispose()
        database.db_manager = None
    logger.info("Shutdown complete")


# ==================== FastAPI Application ====================

app = FastAPI(
    title="GallerySync Server",
    description="Authoritative image metadata catalog and replica sync service",
    version=__version__,
    lifespan=lifespan
)

# ==================== CORS Middleware ====================

# The desktop client's renderer calls the API from its own origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Include Routers ====================

from gallerysync_server.routes import status, images, sync

app.include_router(status.router)
app.include_router(images.router)
app.include_router(sync.router)


# ==================== Main Entry Point ====================

def main():
    """
    Run the server using uvicorn
    """
    ConfigureLogging()
    logger.info(f"Starting GallerySync Server on {HOST}:{PORT} (database: {DB_PATH})")

    uvicorn.run(
        "gallerysync_server.server:app",
        host=HOST,
        port=PORT,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
