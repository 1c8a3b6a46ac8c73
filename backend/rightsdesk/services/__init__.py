"""
Services Package

Business logic layer for the API.
"""
from rightsdesk.services.territory_service import TerritoryService, normalize_codes
from rightsdesk.services.broadcaster_service import BroadcasterService
from rightsdesk.services.package_service import PackageService
from rightsdesk.services.rights_service import RightsService, effective_territories
from rightsdesk.services.conflict_service import Conflict, ConflictDetector
from rightsdesk.services.suggestion_service import Suggestion, SuggestionRanker
from rightsdesk.services.tier_config_service import TierConfigService
from rightsdesk.services.pricing_signal import (
    PricingSignal,
    HttpPricingSignal,
    RuleBasedPricingSignal,
    get_pricing_signal,
)
from rightsdesk.services.pricing_history import PriceSnapshot, PricingHistoryRecorder
from rightsdesk.services.pricing_service import PricingService, effective_pricing
from rightsdesk.services.transaction import run_in_transaction

__all__ = [
    "TerritoryService",
    "normalize_codes",
    "BroadcasterService",
    "PackageService",
    "RightsService",
    "effective_territories",
    "Conflict",
    "ConflictDetector",
    "Suggestion",
    "SuggestionRanker",
    "TierConfigService",
    "PricingSignal",
    "HttpPricingSignal",
    "RuleBasedPricingSignal",
    "get_pricing_signal",
    "PriceSnapshot",
    "PricingHistoryRecorder",
    "PricingService",
    "effective_pricing",
    "run_in_transaction",
]
