"""
Database models for the local record store.
"""
import uuid
from sqlalchemy import create_engine, Column, String, DateTime, JSON, Index
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

Base = declarative_base()

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class Record(Base):
    """A user's record stored as a JSON document."""
    __tablename__ = "records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False)
    kind = Column(String(32), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_records_user_kind", "user_id", "kind"),)

    def to_dict(self):
        return {**self.data, "id": self.id, "user_id": self.user_id}


class Database:
    """Database manager."""

    def __init__(self, database_url: str = "sqlite:///finance.db"):
        if database_url in IN_MEMORY_URLS:
            # One shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool
            )
        else:
            self.engine = create_engine(database_url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init_db(self):
        """Initialize database tables."""
        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()
