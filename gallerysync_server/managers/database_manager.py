"""
GallerySync Server - Database Manager

This module manages database connection and initialization for the
authoritative image catalog.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gallerysync_server.models.database import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages database connection, initialization, and sessions
    """

    def __init__(self, db_path: str = "database/gallerysync.db"):
        """
        Initialize database manager

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        if db_dir and str(db_dir) != '.':
            db_dir.mkdir(parents=True, exist_ok=True)

        # Sessions are opened per request, which may run on a different thread
        # than the one that created the pooled connection
        self.engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def InitializeDatabase(self) -> None:
        """
        Initialize the database, creating tables if they don't exist
        """
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database ready at {self.db_path}")

    def GetSession(self):
        """
        Get a new database session

        Returns:
            Session: SQLAlchemy session
        """
        return self.SessionLocal()

    def Dispose(self) -> None:
        """Release all pooled connections"""
        self.engine.dispose()
