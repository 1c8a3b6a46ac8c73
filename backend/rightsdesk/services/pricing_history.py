"""
Pricing History

Append-only log of price and tier changes per pricing row.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.models import PricingHistoryEntry
from rightsdesk.schemas.common import PriceChangeType

logger = logging.getLogger(__name__)


@dataclass
class PriceSnapshot:
    """Tier and price at one point in time"""
    tier: Optional[str]
    price: Optional[Decimal]


class PricingHistoryRecorder:
    """Writes and reads history entries; never updates or deletes them"""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        event_pricing_id: UUID,
        previous: Optional[PriceSnapshot],
        new: PriceSnapshot,
        change_type: PriceChangeType,
        actor_id: Optional[UUID] = None,
    ) -> PricingHistoryEntry:
        """Add an entry to the current unit of work (flushed, not committed)"""
        entry = PricingHistoryEntry(
            event_pricing_id=event_pricing_id,
            previous_price=previous.price if previous else None,
            previous_tier=previous.tier if previous else None,
            new_price=new.price,
            new_tier=new.tier,
            change_type=change_type.value,
            changed_by=actor_id,
        )
        self.db.add(entry)
        self.db.flush()

        logger.debug(
            f"History {change_type.value} for pricing {event_pricing_id}: "
            f"{previous.price if previous else None} -> {new.price}"
        )
        return entry

    def list_history(self, limit: int = 100) -> List[PricingHistoryEntry]:
        """Most recent entries across all events"""
        query = (
            select(PricingHistoryEntry)
            .order_by(PricingHistoryEntry.created_at.desc())
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())

    def list_for_pricing(self, event_pricing_id: UUID) -> List[PricingHistoryEntry]:
        """Entries of one pricing row, oldest first"""
        query = (
            select(PricingHistoryEntry)
            .where(PricingHistoryEntry.event_pricing_id == event_pricing_id)
            .order_by(PricingHistoryEntry.created_at)
        )
        return list(self.db.execute(query).scalars().all())
