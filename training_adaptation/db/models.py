"""Database models for persisted response profiles."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseProfileRecord(Base):
    """Learned response profile of one athlete under one methodology."""

    __tablename__ = "response_profiles"
    __table_args__ = (UniqueConstraint("athlete_id", "methodology", name="uq_profile_athlete_methodology"),)

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String(100), nullable=False, index=True)
    methodology = Column(String(20), nullable=False)  # daniels, lydiard, pfitzinger, hudson, custom
    state = Column(Text, nullable=False)  # JSON encoded profile
    response_count = Column(Integer, default=0)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return (f"<ResponseProfileRecord(athlete_id={self.athlete_id}, methodology={self.methodology}, "
                f"responses={self.response_count})>")
