# calchub/models/models.py
from sqlalchemy import Column, String, DateTime, UniqueConstraint, Index, Uuid
from sqlalchemy import JSON
from sqlalchemy.orm import declarative_base
from datetime import datetime
import uuid

Base = declarative_base()


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    calculator_id = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint('user_id', 'calculator_id', name='unique_favorite_per_user'),)


class HistoryEntry(Base):
    __tablename__ = "history_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False)
    calculator_id = Column(String(100), nullable=False)
    locale = Column(String(10), nullable=False, default="en")
    inputs = Column(JSON, nullable=False, default=dict)  # {"values": {...}, "units": {...}}
    results = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_history_user_created', 'user_id', 'created_at'),
    )


class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    calculator_id = Column(String(100), nullable=False, index=True)
    event = Column(String(50), nullable=False)
    locale = Column(String(10), nullable=True)
    user_id = Column(String(255), nullable=True)  # anonymous events have no user
    properties = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
