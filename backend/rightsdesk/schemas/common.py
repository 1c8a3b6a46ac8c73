"""
Common Schemas

Shared base models and enums matching database values.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from enum import Enum


class RequestModel(BaseModel):
    """Request body base accepting both camelCase and snake_case keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Enum definitions matching database values

class AdminRole(str, Enum):
    """Console roles, highest first"""
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    SUPPORT = "support"


ROLE_RANK = {
    AdminRole.OWNER: 4,
    AdminRole.ADMIN: 3,
    AdminRole.EDITOR: 2,
    AdminRole.SUPPORT: 1,
}


class BroadcasterStatus(str, Enum):
    """Valid broadcaster status"""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


class ScopeType(str, Enum):
    """Contractual breadth of a rights package"""
    SPORT = "sport"
    COMPETITION = "competition"
    SEASON = "season"


# Suggestion ranking: lower is more specific
SCOPE_PRIORITY = {
    ScopeType.SEASON: 1,
    ScopeType.COMPETITION: 2,
    ScopeType.SPORT: 3,
}


class PackageStatus(str, Enum):
    """Valid rights package status"""
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"


class RightsStatus(str, Enum):
    """Valid rights grant status"""
    DRAFT = "draft"
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class Exclusivity(str, Enum):
    """Valid exclusivity levels"""
    EXCLUSIVE = "exclusive"
    SHARED = "shared"
    NON_EXCLUSIVE = "non_exclusive"


class Platform(str, Enum):
    """Valid distribution platforms"""
    OTT = "ott"
    LINEAR = "linear"
    BOTH = "both"


class PricingTier(str, Enum):
    """Valid pricing tiers"""
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


# Tier lookup order when deriving a tier from a price
TIER_ORDER = [PricingTier.GOLD, PricingTier.SILVER, PricingTier.BRONZE]


class PriceChangeType(str, Enum):
    """Valid pricing history change types"""
    INITIAL = "initial"
    AUTOMATIC = "automatic"
    MANUAL = "manual"
