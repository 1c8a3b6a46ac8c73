"""
Health & Monitoring API Router

Database health check with row counts for the rights and pricing tables.
"""
import logging
import time
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy import text, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel

from rightsdesk.config import settings
from rightsdesk.database import get_db
from rightsdesk.models import (
    Territory,
    Broadcaster,
    Event,
    RightsPackage,
    RightsEvent,
    EventPricing,
    PricingHistoryEntry,
    PricingTierConfig,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


class DatabaseStats(BaseModel):
    """Database statistics response"""
    status: str
    connected: bool
    response_time_ms: float
    database_size: Optional[str] = None
    tables: dict


class FullHealthResponse(BaseModel):
    """Complete health check response"""
    status: str
    timestamp: datetime
    database: DatabaseStats
    api_version: str


@router.get("/db", response_model=FullHealthResponse)
def check_database_health(db: Session = Depends(get_db)) -> FullHealthResponse:
    """
    Database health check with detailed statistics.

    Returns:
    - Connection status
    - Response time
    - Table row counts
    - Database size (PostgreSQL only)
    """
    start_time = time.time()
    connected = False
    db_size = None
    tables_stats = {}

    try:
        db.execute(text("SELECT 1"))
        connected = True

        tables_stats = {
            "territories": db.execute(select(func.count(Territory.code))).scalar() or 0,
            "broadcasters": db.execute(select(func.count(Broadcaster.id))).scalar() or 0,
            "events": db.execute(select(func.count(Event.id))).scalar() or 0,
            "rights_packages": db.execute(select(func.count(RightsPackage.id))).scalar() or 0,
            "rights_events": db.execute(select(func.count(RightsEvent.id))).scalar() or 0,
            "event_pricing": db.execute(select(func.count(EventPricing.id))).scalar() or 0,
            "event_pricing_history": db.execute(select(func.count(PricingHistoryEntry.id))).scalar() or 0,
            "pricing_config": db.execute(select(func.count(PricingTierConfig.id))).scalar() or 0,
        }

        if db.get_bind().dialect.name == "postgresql":
            result = db.execute(text("SELECT pg_size_pretty(pg_database_size(current_database()))"))
            db_size = result.scalar()
        else:
            db_size = "N/A"

    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        connected = False
        tables_stats = {"error": str(e)}

    response_time = (time.time() - start_time) * 1000  # ms

    return FullHealthResponse(
        status="healthy" if connected else "unhealthy",
        timestamp=datetime.now(),
        database=DatabaseStats(
            status="connected" if connected else "disconnected",
            connected=connected,
            response_time_ms=round(response_time, 2),
            database_size=db_size,
            tables=tables_stats,
        ),
        api_version=settings.app_version,
    )
