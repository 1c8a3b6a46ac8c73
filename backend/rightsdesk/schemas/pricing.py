"""
Pricing Schemas

Pydantic models for event pricing, overrides, tier bands and history.
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from rightsdesk.schemas.common import RequestModel, PricingTier, PriceChangeType


class PricingOverrideRequest(RequestModel):
    """Body of POST /api/pricing/{event_id}/override"""
    is_manual_override: bool
    manual_tier: Optional[PricingTier] = None
    manual_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class EventPricingResponse(BaseModel):
    """Pricing row with its effective values resolved"""
    id: UUID
    event_id: UUID
    computed_tier: Optional[PricingTier] = None
    computed_price: Optional[Decimal] = None
    computation_date: Optional[datetime] = None
    manual_tier: Optional[PricingTier] = None
    manual_price: Optional[Decimal] = None
    is_manual_override: bool
    effective_tier: PricingTier
    effective_price: Optional[Decimal] = None
    updated_at: datetime


class BatchRecomputeRequest(RequestModel):
    """Recompute many events; all draft/published events when event_ids is omitted"""
    event_ids: Optional[List[UUID]] = None


class BatchRecomputeFailure(BaseModel):
    """Event that could not be recomputed"""
    event_id: UUID
    error: str


class BatchRecomputeResponse(BaseModel):
    """Batch recompute outcome"""
    processed: int
    failed: List[BatchRecomputeFailure]


# ============== Tier bands ==============

class TierConfigResponse(BaseModel):
    """Tier band response schema"""
    id: UUID
    tier: PricingTier
    min_price: Decimal
    base_price: Decimal
    max_price: Decimal
    updated_at: datetime

    model_config = {"from_attributes": True}


class TierConfigUpdate(RequestModel):
    """Partial tier band update, merged with stored values before validation"""
    min_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    base_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    max_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)

    @model_validator(mode="after")
    def check_provided_order(self):
        values = [v for v in (self.min_price, self.base_price, self.max_price) if v is not None]
        if values != sorted(values):
            raise ValueError("prices must satisfy min_price <= base_price <= max_price")
        return self


# ============== History ==============

class PricingHistoryResponse(BaseModel):
    """History entry composed with event title and actor display name"""
    id: UUID
    event_pricing_id: UUID
    event_id: Optional[UUID] = None
    event_title: Optional[str] = None
    previous_price: Optional[Decimal] = None
    new_price: Optional[Decimal] = None
    previous_tier: Optional[PricingTier] = None
    new_tier: Optional[PricingTier] = None
    change_type: PriceChangeType
    changed_by: Optional[UUID] = None
    changed_by_name: Optional[str] = None
    created_at: datetime
