"""
SQLAlchemy ORM Models

Export all models for easy importing.
"""
from rightsdesk.models.types import GUID, TimestampMixin
from rightsdesk.models.territory import Territory
from rightsdesk.models.broadcaster import Broadcaster
from rightsdesk.models.event import Event
from rightsdesk.models.rights import RightsPackage, RightsEvent
from rightsdesk.models.pricing import (
    EventPricing,
    PricingHistoryEntry,
    PricingTierConfig,
    HistoryImmutableError,
)
from rightsdesk.models.profile import AdminProfile

__all__ = [
    "GUID",
    "TimestampMixin",
    "Territory",
    "Broadcaster",
    "Event",
    "RightsPackage",
    "RightsEvent",
    "EventPricing",
    "PricingHistoryEntry",
    "PricingTierConfig",
    "HistoryImmutableError",
    "AdminProfile",
]
