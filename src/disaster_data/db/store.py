"""
Persistence of the current event batch.

Only one batch is kept: storing a new upload replaces the previous
events wholesale. Ingestion logs accumulate as history.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from disaster_data.config import DisasterType, EventSource, FallbackLevel
from disaster_data.core.models import DisasterEvent, DisasterImpact, Location
from disaster_data.db.models import IngestionLog, StoredEvent
from disaster_data.ingestion.base import IngestionResult

LOGGER = logging.getLogger(__name__)


def _to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _to_aware_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def to_stored(event: DisasterEvent, position: int) -> StoredEvent:
    """Map a DisasterEvent to its ORM row."""
    impact = event.impact
    return StoredEvent(
        position=position,
        event_id=event.id,
        name=event.name,
        type=event.type.value,
        sub_type=event.sub_type,
        start_date=_to_naive_utc(event.start_date),
        end_date=_to_naive_utc(event.end_date),
        lat=event.location.lat,
        lng=event.location.lng,
        country=event.location.country,
        region=event.location.region,
        city=event.location.city,
        fallback_level=event.fallback_level.value,
        deaths=impact.deaths,
        injured=impact.injured,
        missing=impact.missing,
        affected=impact.affected,
        displaced=impact.displaced,
        economic_loss_usd=impact.economic_loss_usd,
        insured_loss_usd=impact.insured_loss_usd,
        reconstruction_cost_usd=impact.reconstruction_cost_usd,
        aid_contribution_usd=impact.aid_contribution_usd,
        infrastructure_damage=impact.infrastructure_damage,
        severity_level=impact.severity_level,
        description=event.description,
        source=event.source.value,
        source_url=event.source_url,
    )


def from_stored(row: StoredEvent) -> DisasterEvent:
    """Rebuild a DisasterEvent from its ORM row."""
    return DisasterEvent(
        id=row.event_id,
        name=row.name,
        type=DisasterType(row.type),
        sub_type=row.sub_type,
        start_date=_to_aware_utc(row.start_date),
        end_date=_to_aware_utc(row.end_date),
        location=Location(
            lat=row.lat,
            lng=row.lng,
            country=row.country,
            region=row.region,
            city=row.city,
        ),
        impact=DisasterImpact(
            deaths=row.deaths,
            severity_level=row.severity_level,
            injured=row.injured,
            missing=row.missing,
            affected=row.affected,
            displaced=row.displaced,
            economic_loss_usd=row.economic_loss_usd,
            insured_loss_usd=row.insured_loss_usd,
            reconstruction_cost_usd=row.reconstruction_cost_usd,
            aid_contribution_usd=row.aid_contribution_usd,
            infrastructure_damage=row.infrastructure_damage,
        ),
        description=row.description,
        source=EventSource(row.source),
        source_url=row.source_url,
        fallback_level=FallbackLevel(row.fallback_level),
    )


def replace_events(
    session: Session,
    events: Iterable[DisasterEvent],
    source_name: str,
    result: IngestionResult | None = None,
) -> int:
    """
    Replace the stored batch with a new one.

    Args:
        session: SQLAlchemy session.
        events: The new batch, in display order.
        source_name: Upload name recorded in the ingestion log.
        result: Ingestion result whose counts and timings are logged.

    Returns:
        Number of events stored.
    """
    events = list(events)
    now = datetime.now(timezone.utc)

    log = IngestionLog(
        source_name=source_name,
        started_at=_to_naive_utc(result.started_at if result else now),
        completed_at=_to_naive_utc(result.completed_at if result and result.completed_at else now),
        status="success",
        records_processed=result.records_processed if result else len(events),
        records_loaded=len(events),
        records_failed=result.records_failed if result else 0,
    )
    if result and result.errors:
        log.error_message = "\n".join(result.errors[:10])  # Keep first 10 errors

    removed = session.execute(delete(StoredEvent)).rowcount
    session.add(log)
    session.flush()

    for position, event in enumerate(events):
        row = to_stored(event, position)
        row.batch_id = log.id
        session.add(row)
    session.flush()

    LOGGER.info("Replaced %d stored events with %d from %s", removed or 0, len(events), source_name)
    return len(events)


def load_events(session: Session, limit: int | None = None) -> list[DisasterEvent]:
    """Stored events in their original order."""
    stmt = select(StoredEvent).order_by(StoredEvent.position)
    if limit is not None:
        stmt = stmt.limit(limit)
    return [from_stored(row) for row in session.scalars(stmt)]


def count_events(session: Session) -> int:
    """Number of stored events."""
    return session.scalar(select(func.count()).select_from(StoredEvent)) or 0


def latest_batch(session: Session) -> IngestionLog | None:
    """The most recent ingestion log entry."""
    return session.scalars(select(IngestionLog).order_by(IngestionLog.id.desc()).limit(1)).first()


def table_stats(session: Session) -> dict[str, int]:
    """Row counts per store table."""
    return {
        model.__tablename__: session.scalar(select(func.count()).select_from(model)) or 0
        for model in (StoredEvent, IngestionLog)
    }
