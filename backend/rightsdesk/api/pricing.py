"""
Pricing API Router

Endpoints for event pricing, manual overrides, tier bands and history.
"""
from typing import Iterator, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rightsdesk.api.dependencies import Actor, require_role
from rightsdesk.config import get_settings
from rightsdesk.database import get_db
from rightsdesk.exceptions import NotFoundError
from rightsdesk.models import EventPricing
from rightsdesk.schemas.common import AdminRole, PricingTier
from rightsdesk.schemas.pricing import (
    PricingOverrideRequest,
    EventPricingResponse,
    BatchRecomputeRequest,
    BatchRecomputeFailure,
    BatchRecomputeResponse,
    TierConfigResponse,
    TierConfigUpdate,
    PricingHistoryResponse,
)
from rightsdesk.services.pricing_service import PricingService
from rightsdesk.services.pricing_signal import PricingSignal, get_pricing_signal
from rightsdesk.services.tier_config_service import TierConfigService

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


def get_signal() -> Iterator[PricingSignal]:
    """Request-scoped pricing signal, closed once the response is sent"""
    signal = get_pricing_signal(get_settings())
    try:
        yield signal
    finally:
        signal.close()


def _pricing_response(service: PricingService, row: Optional[EventPricing], event_id: UUID) -> EventPricingResponse:
    if row is None:
        raise NotFoundError("Event pricing", event_id)

    effective = service.effective(row)
    return EventPricingResponse(
        id=row.id,
        event_id=row.event_id,
        computed_tier=row.computed_tier,
        computed_price=row.computed_price,
        computation_date=row.computation_date,
        manual_tier=row.manual_tier,
        manual_price=row.manual_price,
        is_manual_override=row.is_manual_override,
        effective_tier=effective.tier,
        effective_price=effective.price,
        updated_at=row.updated_at,
    )


# ============== Tier bands ==============

@router.get("/config", response_model=List[TierConfigResponse])
def list_tier_configs(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[TierConfigResponse]:
    """Get the price band of each tier, gold first."""
    service = TierConfigService(db)
    return [TierConfigResponse.model_validate(c) for c in service.list_configs()]


@router.put("/config/{tier}", response_model=TierConfigResponse)
def update_tier_config(
    tier: PricingTier,
    data: TierConfigUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.OWNER)),
) -> TierConfigResponse:
    """
    Update a tier band (owner only).

    Values are merged with the stored band and must satisfy
    min_price <= base_price <= max_price.
    """
    service = TierConfigService(db)
    return TierConfigResponse.model_validate(service.update_config(tier, data, actor.user_id))


# ============== History ==============

@router.get("/history", response_model=List[PricingHistoryResponse])
def list_pricing_history(
    limit: int = Query(100, ge=1, le=500, description="Maximum entries to return"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[PricingHistoryResponse]:
    """Get the most recent pricing changes, newest first."""
    service = PricingService(db)
    return [PricingHistoryResponse(**entry) for entry in service.list_history(limit)]


# ============== Recompute ==============

@router.post("/recompute", response_model=BatchRecomputeResponse)
def recompute_batch(
    data: Optional[BatchRecomputeRequest] = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
    signal: PricingSignal = Depends(get_signal),
) -> BatchRecomputeResponse:
    """
    Recompute many events.

    Without eventIds every draft or published event is recomputed.
    Failures are reported per event and do not stop the batch.
    """
    service = PricingService(db, signal=signal)
    result = service.recompute_batch(data.event_ids if data else None, actor.user_id)
    return BatchRecomputeResponse(
        processed=result.processed,
        failed=[BatchRecomputeFailure(**failure) for failure in result.failed],
    )


# ============== Per event ==============

@router.get("/{event_id}", response_model=EventPricingResponse)
def get_event_pricing(
    event_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> EventPricingResponse:
    """Get an event's pricing with its effective tier and price."""
    service = PricingService(db)
    service.require_event(event_id)
    return _pricing_response(service, service.get_pricing(event_id), event_id)


@router.get("/{event_id}/history", response_model=List[PricingHistoryResponse])
def get_event_pricing_history(
    event_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[PricingHistoryResponse]:
    """Get one event's pricing changes, oldest first."""
    service = PricingService(db)
    return [PricingHistoryResponse(**entry) for entry in service.history_for_event(event_id)]


@router.post("/{event_id}/override", response_model=EventPricingResponse)
def set_pricing_override(
    event_id: UUID,
    data: PricingOverrideRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> EventPricingResponse:
    """
    Set or clear a manual override.

    manualPrice must fall within the band of the resulting tier.
    isManualOverride=false reverts to computed values.
    """
    service = PricingService(db)
    row = service.set_override(event_id, data, actor.user_id)
    return _pricing_response(service, row, event_id)


@router.post("/{event_id}/revert", response_model=EventPricingResponse)
def revert_pricing(
    event_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> EventPricingResponse:
    """Return to computed values. No-op when not overridden."""
    service = PricingService(db)
    row = service.revert_to_computed(event_id, actor.user_id)
    return _pricing_response(service, row, event_id)


@router.post("/{event_id}/recompute", response_model=EventPricingResponse)
def recompute_pricing(
    event_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
    signal: PricingSignal = Depends(get_signal),
) -> EventPricingResponse:
    """Recompute the automatic price from the pricing signal."""
    service = PricingService(db, signal=signal)
    row = service.recompute(event_id, actor.user_id)
    return _pricing_response(service, row, event_id)
