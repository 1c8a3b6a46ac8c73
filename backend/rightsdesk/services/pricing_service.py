"""
Pricing Service

Effective pricing, manual overrides, reverts and recomputation.

Every mutation writes the pricing row and its history entry in one unit of
work (see run_in_transaction). Overrides are validated against the locked,
freshly loaded row inside that unit; a rejected request rolls it back.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.config import Settings, get_settings
from rightsdesk.exceptions import NotFoundError, RightsDeskError, ValidationError
from rightsdesk.models import AdminProfile, Event, EventPricing, PricingHistoryEntry
from rightsdesk.models.types import utcnow
from rightsdesk.schemas.common import PriceChangeType, PricingTier
from rightsdesk.schemas.pricing import PricingOverrideRequest
from rightsdesk.services.pricing_history import PriceSnapshot, PricingHistoryRecorder
from rightsdesk.services.pricing_signal import PricingSignal, get_pricing_signal
from rightsdesk.services.tier_config_service import TierConfigService
from rightsdesk.services.transaction import run_in_transaction

logger = logging.getLogger(__name__)

RECOMPUTABLE_EVENT_STATUSES = ("draft", "published")


def effective_pricing(row: EventPricing, default_price: Decimal) -> PriceSnapshot:
    """
    Resolve the tier and price used downstream.

    Manual values win only while is_manual_override is set; otherwise
    manual fields are ignored entirely.
    """
    if row.is_manual_override:
        tier = row.manual_tier or row.computed_tier or PricingTier.BRONZE.value
        if row.manual_price is not None:
            price = row.manual_price
        elif row.computed_price is not None:
            price = row.computed_price
        else:
            price = default_price
        return PriceSnapshot(tier=tier, price=price)

    return PriceSnapshot(
        tier=row.computed_tier or PricingTier.BRONZE.value,
        price=row.computed_price,
    )


@dataclass
class BatchRecomputeResult:
    processed: int = 0
    failed: List[Dict[str, Any]] = field(default_factory=list)


class PricingService:
    """Service class for per-event pricing"""

    def __init__(
        self,
        db: Session,
        signal: Optional[PricingSignal] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.signal = signal or get_pricing_signal(self.settings)
        self.tiers = TierConfigService(db)
        self.history = PricingHistoryRecorder(db)

    # ============== Reads ==============

    def require_event(self, event_id: UUID) -> Event:
        event = self.db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def get_pricing(self, event_id: UUID) -> Optional[EventPricing]:
        """Pricing row of an event, if any"""
        return self.db.execute(
            select(EventPricing).where(EventPricing.event_id == event_id)
        ).scalar_one_or_none()

    def require_pricing(self, event_id: UUID) -> EventPricing:
        row = self.get_pricing(event_id)
        if not row:
            raise NotFoundError("Event pricing", event_id)
        return row

    def effective(self, row: EventPricing) -> PriceSnapshot:
        return effective_pricing(row, self.settings.default_price)

    def _lock_pricing(self, event_id: UUID) -> Optional[EventPricing]:
        return self.db.execute(
            select(EventPricing)
            .where(EventPricing.event_id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    # ============== Override ==============

    def _check_override(self, row: Optional[EventPricing], data: PricingOverrideRequest) -> None:
        """Validate the resulting manual price against the resulting tier band"""
        manual_price = data.manual_price
        if manual_price is None and row is not None:
            manual_price = row.manual_price
        if manual_price is None:
            return

        if data.manual_tier is not None:
            tier = data.manual_tier.value
        elif row is not None and (row.manual_tier or row.computed_tier):
            tier = row.manual_tier or row.computed_tier
        else:
            tier = PricingTier.BRONZE.value

        band = self.tiers.require_band(tier)
        if not (band.min_price <= manual_price <= band.max_price):
            raise ValidationError(
                f"Manual price {manual_price} is outside the {tier} band "
                f"[{band.min_price}, {band.max_price}]"
            )

    def set_override(
        self,
        event_id: UUID,
        data: PricingOverrideRequest,
        actor_id: Optional[UUID] = None,
    ) -> Optional[EventPricing]:
        """
        Turn on (or adjust) a manual override.

        Upserts the pricing row and appends a 'manual' history entry whose
        previous values are the effective values before the change.
        isManualOverride=false delegates to revert_to_computed.
        """
        if not data.is_manual_override:
            return self.revert_to_computed(event_id, actor_id)

        self.require_event(event_id)

        def work() -> EventPricing:
            row = self._lock_pricing(event_id)
            self._check_override(row, data)
            previous = None
            if row is None:
                row = EventPricing(event_id=event_id, is_manual_override=False)
                self.db.add(row)
                self.db.flush()
            else:
                previous = self.effective(row)

            row.is_manual_override = True
            if data.manual_tier is not None:
                row.manual_tier = data.manual_tier.value
            if data.manual_price is not None:
                row.manual_price = data.manual_price
            row.updated_by = actor_id
            self.db.flush()

            self.history.record(row.id, previous, self.effective(row), PriceChangeType.MANUAL, actor_id)
            return row

        row = run_in_transaction(self.db, work, "set_override")
        self.db.refresh(row)

        logger.info(
            f"Manual override on event {event_id} by {actor_id}: "
            f"{row.manual_tier} / {row.manual_price}"
        )
        return row

    def revert_to_computed(self, event_id: UUID, actor_id: Optional[UUID] = None) -> Optional[EventPricing]:
        """
        Drop the manual override and go back to computed values.

        No-op when the event has no row or is not overridden.
        """
        self.require_event(event_id)
        reverted = False

        def work() -> Optional[EventPricing]:
            nonlocal reverted
            reverted = False
            locked = self._lock_pricing(event_id)
            if locked is None or not locked.is_manual_override:
                return locked

            previous = self.effective(locked)
            locked.is_manual_override = False
            locked.manual_tier = None
            locked.manual_price = None
            locked.updated_by = actor_id
            self.db.flush()

            self.history.record(locked.id, previous, self.effective(locked), PriceChangeType.AUTOMATIC, actor_id)
            reverted = True
            return locked

        row = run_in_transaction(self.db, work, "revert_to_computed")
        if not reverted:
            return row
        self.db.refresh(row)

        logger.info(f"Event {event_id} reverted to computed pricing by {actor_id}")
        return row

    # ============== Recompute ==============

    def recompute(self, event_id: UUID, actor_id: Optional[UUID] = None) -> EventPricing:
        """
        Ask the pricing signal for a new computed price.

        Manual fields are left alone. A new row gets an 'initial' entry; an
        existing row gets an 'automatic' entry only when the computed value
        changed.
        """
        event = self.require_event(event_id)
        price = self.signal.suggest(event)
        tier = self.tiers.tier_for_price(price).value
        computed = PriceSnapshot(tier=tier, price=price)

        def work() -> EventPricing:
            row = self._lock_pricing(event_id)
            if row is None:
                row = EventPricing(
                    event_id=event_id,
                    computed_tier=tier,
                    computed_price=price,
                    computation_date=utcnow(),
                    is_manual_override=False,
                    updated_by=actor_id,
                )
                self.db.add(row)
                self.db.flush()
                self.history.record(row.id, None, self.effective(row), PriceChangeType.INITIAL, actor_id)
                return row

            previous = PriceSnapshot(tier=row.computed_tier, price=row.computed_price)
            row.computed_tier = tier
            row.computed_price = price
            row.computation_date = utcnow()
            row.updated_by = actor_id
            self.db.flush()

            if previous != computed:
                self.history.record(row.id, previous, computed, PriceChangeType.AUTOMATIC, actor_id)
            return row

        row = run_in_transaction(self.db, work, "recompute")
        self.db.refresh(row)

        logger.info(f"Recomputed event {event_id}: {tier} / {price}")
        return row

    def recompute_batch(
        self,
        event_ids: Optional[Sequence[UUID]] = None,
        actor_id: Optional[UUID] = None,
    ) -> BatchRecomputeResult:
        """Recompute many events; one failure does not stop the batch"""
        if event_ids is None:
            event_ids = list(self.db.execute(
                select(Event.id)
                .where(Event.status.in_(RECOMPUTABLE_EVENT_STATUSES))
                .order_by(Event.event_date)
            ).scalars().all())

        result = BatchRecomputeResult()
        for event_id in dict.fromkeys(event_ids):
            try:
                self.recompute(event_id, actor_id)
                result.processed += 1
            except RightsDeskError as e:
                logger.warning(f"Recompute failed for event {event_id}: {e}")
                result.failed.append({"event_id": event_id, "error": e.message})

        logger.info(f"Batch recompute: processed={result.processed} failed={len(result.failed)}")
        return result

    # ============== History ==============

    def _compose_history(self, entries: List[PricingHistoryEntry]) -> List[Dict[str, Any]]:
        """Attach event titles and actor display names to history entries"""
        pricing_ids = {entry.event_pricing_id for entry in entries}
        actor_ids = {entry.changed_by for entry in entries if entry.changed_by}

        events_by_pricing: Dict[UUID, Event] = {}
        if pricing_ids:
            rows = self.db.execute(
                select(EventPricing.id, Event)
                .join(Event, EventPricing.event_id == Event.id)
                .where(EventPricing.id.in_(pricing_ids))
            ).all()
            events_by_pricing = {pricing_id: event for pricing_id, event in rows}

        names: Dict[UUID, str] = {}
        if actor_ids:
            profiles = self.db.execute(
                select(AdminProfile).where(AdminProfile.user_id.in_(actor_ids))
            ).scalars().all()
            names = {profile.user_id: profile.display_name for profile in profiles}

        composed = []
        for entry in entries:
            event = events_by_pricing.get(entry.event_pricing_id)
            composed.append({
                "id": entry.id,
                "event_pricing_id": entry.event_pricing_id,
                "event_id": event.id if event else None,
                "event_title": event.display_title if event else None,
                "previous_price": entry.previous_price,
                "new_price": entry.new_price,
                "previous_tier": entry.previous_tier,
                "new_tier": entry.new_tier,
                "change_type": entry.change_type,
                "changed_by": entry.changed_by,
                "changed_by_name": names.get(entry.changed_by),
                "created_at": entry.created_at,
            })
        return composed

    def list_history(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Newest entries across all events"""
        return self._compose_history(self.history.list_history(limit))

    def history_for_event(self, event_id: UUID) -> List[Dict[str, Any]]:
        """Entries of one event, oldest first"""
        self.require_event(event_id)
        row = self.get_pricing(event_id)
        if row is None:
            return []
        return self._compose_history(self.history.list_for_pricing(row.id))
