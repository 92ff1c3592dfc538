"""Database engine and session handling for the profile store."""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import config
from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """SQLAlchemy engine plus a transactional session factory."""

    def __init__(self, database_url: Optional[str] = None, create_schema: bool = True):
        self.database_url = database_url or config.DATABASE_URL

        if self.database_url.startswith("sqlite"):
            # One shared connection keeps in-memory databases alive across threads
            self.engine = create_engine(
                self.database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(self.database_url, pool_pre_ping=True)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        if create_schema:
            self.create_tables()

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)
        logger.debug(f"Profile store schema ready at {self.engine.url!r}")

    def drop_tables(self):
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Session that commits on success and rolls back on any error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        self.engine.dispose()
