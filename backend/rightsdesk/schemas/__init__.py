"""
Pydantic Schemas

Export all schemas for easy importing.
"""
from rightsdesk.schemas.common import (
    RequestModel,
    AdminRole,
    BroadcasterStatus,
    ScopeType,
    PackageStatus,
    RightsStatus,
    Exclusivity,
    Platform,
    PricingTier,
    PriceChangeType,
)
from rightsdesk.schemas.territory import (
    TerritoryResponse,
    TerritoriesByRegionResponse,
)
from rightsdesk.schemas.broadcaster import (
    BroadcasterCreate,
    BroadcasterUpdate,
    BroadcasterStatusChange,
    BroadcasterResponse,
    BroadcasterListResponse,
)
from rightsdesk.schemas.rights import (
    PackageCreate,
    PackageUpdate,
    PackageResponse,
    PackageListResponse,
    RightsEventCreate,
    RightsEventUpdate,
    RightsStatusChange,
    RightsEventResponse,
    RightsEventListResponse,
    RightsEventCreateResponse,
    ConflictResponse,
    BulkRightsCreate,
    BulkRightsResponse,
    SuggestionResponse,
    RightsResolveResponse,
)
from rightsdesk.schemas.pricing import (
    PricingOverrideRequest,
    EventPricingResponse,
    BatchRecomputeRequest,
    BatchRecomputeResponse,
    TierConfigResponse,
    TierConfigUpdate,
    PricingHistoryResponse,
)

__all__ = [
    # Common
    "RequestModel",
    "AdminRole",
    "BroadcasterStatus",
    "ScopeType",
    "PackageStatus",
    "RightsStatus",
    "Exclusivity",
    "Platform",
    "PricingTier",
    "PriceChangeType",
    # Territory
    "TerritoryResponse",
    "TerritoriesByRegionResponse",
    # Broadcaster
    "BroadcasterCreate",
    "BroadcasterUpdate",
    "BroadcasterStatusChange",
    "BroadcasterResponse",
    "BroadcasterListResponse",
    # Rights
    "PackageCreate",
    "PackageUpdate",
    "PackageResponse",
    "PackageListResponse",
    "RightsEventCreate",
    "RightsEventUpdate",
    "RightsStatusChange",
    "RightsEventResponse",
    "RightsEventListResponse",
    "RightsEventCreateResponse",
    "ConflictResponse",
    "BulkRightsCreate",
    "BulkRightsResponse",
    "SuggestionResponse",
    "RightsResolveResponse",
    # Pricing
    "PricingOverrideRequest",
    "EventPricingResponse",
    "BatchRecomputeRequest",
    "BatchRecomputeResponse",
    "TierConfigResponse",
    "TierConfigUpdate",
    "PricingHistoryResponse",
]
