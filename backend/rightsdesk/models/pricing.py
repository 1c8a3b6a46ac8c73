"""
Pricing Models

EventPricing holds one row per event with computed and manual values,
PricingHistoryEntry is the append-only change log and PricingTierConfig
stores the price band of each tier.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Numeric, event
from sqlalchemy.orm import relationship

from rightsdesk.database import Base
from rightsdesk.models.types import GUID, TimestampMixin, utcnow


class EventPricing(Base, TimestampMixin):
    """
    Event Pricing

    Effective tier/price = manual if is_manual_override else computed.
    """
    __tablename__ = "event_pricing"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    event_id = Column(
        GUID,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    computed_tier = Column(String(10))   # gold, silver, bronze
    computed_price = Column(Numeric(10, 2))
    computation_date = Column(DateTime(timezone=True))
    manual_tier = Column(String(10))
    manual_price = Column(Numeric(10, 2))
    is_manual_override = Column(Boolean, default=False, nullable=False)
    updated_by = Column(GUID)

    # Relationships
    event = relationship("Event")
    history = relationship(
        "PricingHistoryEntry",
        back_populates="event_pricing",
        lazy="dynamic",
        passive_deletes=True,
    )

    def __repr__(self):
        return (
            f"<EventPricing(event_id={self.event_id}, "
            f"is_manual_override={self.is_manual_override})>"
        )


class PricingHistoryEntry(Base):
    """
    Pricing History Entry (append-only)

    change_type: initial, automatic, manual
    """
    __tablename__ = "event_pricing_history"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    event_pricing_id = Column(
        GUID,
        ForeignKey("event_pricing.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    previous_price = Column(Numeric(10, 2))
    new_price = Column(Numeric(10, 2))
    previous_tier = Column(String(10))
    new_tier = Column(String(10))
    change_type = Column(String(20), nullable=False)
    changed_by = Column(GUID)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Relationships
    event_pricing = relationship("EventPricing", back_populates="history")

    def __repr__(self):
        return f"<PricingHistoryEntry(change_type={self.change_type}, new_price={self.new_price})>"


class PricingTierConfig(Base, TimestampMixin):
    """
    Pricing Tier Band

    min_price <= base_price <= max_price, checked before every write.
    """
    __tablename__ = "pricing_config"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    tier = Column(String(10), unique=True, nullable=False)
    min_price = Column(Numeric(10, 2), nullable=False)
    base_price = Column(Numeric(10, 2), nullable=False)
    max_price = Column(Numeric(10, 2), nullable=False)

    def __repr__(self):
        return f"<PricingTierConfig(tier={self.tier}, base_price={self.base_price})>"


class HistoryImmutableError(RuntimeError):
    """Raised when a flush tries to rewrite or remove a history entry"""


@event.listens_for(PricingHistoryEntry, "before_update")
def _reject_history_update(mapper, connection, target):
    raise HistoryImmutableError(f"Pricing history entry {target.id} is append-only")


@event.listens_for(PricingHistoryEntry, "before_delete")
def _reject_history_delete(mapper, connection, target):
    raise HistoryImmutableError(f"Pricing history entry {target.id} cannot be deleted")
