"""
SQLAlchemy ORM models for Disaster Data Platform.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class IngestionLog(Base):
    """Track stored upload batches."""

    __tablename__ = "ingestion_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    source_name: Mapped[str] = mapped_column(String(255), nullable=False)
    started_at: Mapped[datetime] = mapped_column()
    completed_at: Mapped[Optional[datetime]] = mapped_column()
    status: Mapped[str] = mapped_column(String(20), default="running")
    records_processed: Mapped[int] = mapped_column(Integer, default=0)
    records_loaded: Mapped[int] = mapped_column(Integer, default=0)
    records_failed: Mapped[int] = mapped_column(Integer, default=0)
    error_message: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    events: Mapped[list["StoredEvent"]] = relationship(back_populates="batch")

    def __repr__(self) -> str:
        return f"<IngestionLog(id={self.id}, source={self.source_name}, status={self.status})>"


class StoredEvent(Base):
    """
    A normalized disaster event of the current batch.

    Datetimes are stored as naive UTC.
    """

    __tablename__ = "disaster_events"
    __table_args__ = (
        Index("ix_disaster_events_type", "type"),
        Index("ix_disaster_events_country", "country"),
    )

    pk: Mapped[int] = mapped_column(Integer, primary_key=True)
    batch_id: Mapped[Optional[int]] = mapped_column(ForeignKey("ingestion_logs.id"))
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    event_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    sub_type: Mapped[Optional[str]] = mapped_column(String(100))
    start_date: Mapped[datetime] = mapped_column(nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column()

    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[Optional[str]] = mapped_column(String(255))
    city: Mapped[Optional[str]] = mapped_column(String(255))
    fallback_level: Mapped[str] = mapped_column(String(10), nullable=False)

    deaths: Mapped[int] = mapped_column(Integer, default=0)
    injured: Mapped[Optional[int]] = mapped_column(Integer)
    missing: Mapped[Optional[int]] = mapped_column(Integer)
    affected: Mapped[Optional[int]] = mapped_column(Integer)
    displaced: Mapped[Optional[int]] = mapped_column(Integer)
    economic_loss_usd: Mapped[Optional[float]] = mapped_column(Float)
    insured_loss_usd: Mapped[Optional[float]] = mapped_column(Float)
    reconstruction_cost_usd: Mapped[Optional[float]] = mapped_column(Float)
    aid_contribution_usd: Mapped[Optional[float]] = mapped_column(Float)
    infrastructure_damage: Mapped[Optional[str]] = mapped_column(Text)
    severity_level: Mapped[int] = mapped_column(Integer, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    source_url: Mapped[Optional[str]] = mapped_column(String(255))

    # Relationships
    batch: Mapped[Optional["IngestionLog"]] = relationship(back_populates="events")

    def __repr__(self) -> str:
        return f"<StoredEvent(id={self.event_id}, type={self.type}, country={self.country})>"
