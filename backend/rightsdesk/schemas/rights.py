"""
Rights Schemas

Pydantic models for rights packages, per-event grants, conflict
detection and broadcaster suggestions.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from rightsdesk.schemas.common import (
    RequestModel,
    BroadcasterStatus,
    ScopeType,
    PackageStatus,
    RightsStatus,
    Exclusivity,
    Platform,
)


# ============== Packages ==============

class PackageCreate(RequestModel):
    """Rights package creation payload"""
    broadcaster_id: UUID
    name: str = Field(..., min_length=1, max_length=300)
    scope_type: ScopeType
    sport_id: Optional[UUID] = None
    league_id: Optional[UUID] = None
    season: Optional[str] = Field(None, max_length=20)
    start_at: datetime
    end_at: datetime
    is_exclusive_default: bool = False
    territories_default: List[str] = Field(default_factory=list)
    status: PackageStatus = PackageStatus.DRAFT


class PackageUpdate(RequestModel):
    """Partial rights package update"""
    name: Optional[str] = Field(None, min_length=1, max_length=300)
    sport_id: Optional[UUID] = None
    league_id: Optional[UUID] = None
    season: Optional[str] = Field(None, max_length=20)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    is_exclusive_default: Optional[bool] = None
    territories_default: Optional[List[str]] = None


class PackageResponse(BaseModel):
    """Rights package response schema"""
    id: UUID
    broadcaster_id: UUID
    name: str
    scope_type: ScopeType
    sport_id: Optional[UUID] = None
    league_id: Optional[UUID] = None
    season: Optional[str] = None
    start_at: datetime
    end_at: datetime
    is_exclusive_default: bool
    territories_default: List[str]
    status: PackageStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PackageListResponse(BaseModel):
    """List of packages response"""
    items: List[PackageResponse]
    total: int


# ============== Grants ==============

class RightsEventCreate(RequestModel):
    """
    Grant creation payload.

    Omitted exclusivity and allowed territories are taken from the package.
    """
    event_id: UUID
    broadcaster_id: UUID
    package_id: Optional[UUID] = None
    rights_live: bool = True
    rights_replay: bool = False
    rights_highlights: bool = False
    replay_window_hours: Optional[int] = Field(None, ge=1)
    territories_allowed: Optional[List[str]] = None
    territories_blocked: List[str] = Field(default_factory=list)
    exclusivity: Optional[Exclusivity] = None
    platform: Platform = Platform.BOTH
    status: RightsStatus = RightsStatus.DRAFT
    expires_at: Optional[datetime] = None


class RightsEventUpdate(RequestModel):
    """Partial grant update (status changes go through transitions)"""
    rights_live: Optional[bool] = None
    rights_replay: Optional[bool] = None
    rights_highlights: Optional[bool] = None
    replay_window_hours: Optional[int] = Field(None, ge=1)
    territories_allowed: Optional[List[str]] = None
    territories_blocked: Optional[List[str]] = None
    exclusivity: Optional[Exclusivity] = None
    platform: Optional[Platform] = None
    expires_at: Optional[datetime] = None


class RightsStatusChange(RequestModel):
    """Grant status transition"""
    status: RightsStatus


class RightsEventResponse(BaseModel):
    """Grant response schema"""
    id: UUID
    event_id: UUID
    broadcaster_id: UUID
    package_id: Optional[UUID] = None
    rights_live: bool
    rights_replay: bool
    rights_highlights: bool
    replay_window_hours: Optional[int] = None
    territories_allowed: List[str]
    territories_blocked: List[str]
    exclusivity: Exclusivity
    platform: Platform
    status: RightsStatus
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RightsEventListResponse(BaseModel):
    """List of grants response"""
    items: List[RightsEventResponse]
    total: int


# ============== Conflicts ==============

class ConflictResponse(BaseModel):
    """Existing exclusive grant overlapping a candidate grant"""
    right_id: UUID
    event_id: UUID
    event_title: str
    broadcaster_id: UUID
    broadcaster_name: str
    territories: List[str]


class RightsEventCreateResponse(BaseModel):
    """Created grant plus advisory conflicts (never blocking)"""
    right: RightsEventResponse
    conflicts: List[ConflictResponse]


class BulkRightsCreate(RequestModel):
    """Assign one broadcaster's rights to many events"""
    broadcaster_id: UUID
    event_ids: List[UUID] = Field(..., min_length=1)
    package_id: Optional[UUID] = None
    rights_live: bool = True
    rights_replay: bool = True
    rights_highlights: bool = False
    replay_window_hours: Optional[int] = Field(168, ge=1)
    territories_allowed: List[str] = Field(..., min_length=1)
    exclusivity: Exclusivity = Exclusivity.NON_EXCLUSIVE
    platform: Platform = Platform.BOTH
    status: RightsStatus = RightsStatus.ACTIVE
    skip_conflicts: bool = True


class BulkRightsResponse(BaseModel):
    """Bulk assignment outcome"""
    created: List[RightsEventResponse]
    skipped_event_ids: List[UUID]
    conflicts: List[ConflictResponse]


# ============== Suggestions ==============

class SuggestedBroadcaster(BaseModel):
    """Broadcaster summary inside a suggestion"""
    id: UUID
    name: str
    logo_url: Optional[str] = None
    status: BroadcasterStatus


class SuggestionResponse(BaseModel):
    """Broadcaster suggested through a matching package"""
    broadcaster: SuggestedBroadcaster
    match_type: ScopeType
    priority: int
    package_id: UUID
    package_name: str


# ============== Resolution ==============

class ResolvedBroadcaster(BaseModel):
    """Broadcaster holding rights in a country"""
    id: UUID
    name: str
    logo_url: Optional[str] = None


class ResolvedRights(BaseModel):
    """Rights of the primary grant for a country"""
    live: bool
    replay: bool
    highlights: bool
    replay_until: Optional[datetime] = None
    platform: Platform
    exclusivity: Exclusivity


class RightsResolveResponse(BaseModel):
    """Who may show an event in a country"""
    authorized: bool
    event_id: UUID
    country: str
    broadcaster: Optional[ResolvedBroadcaster] = None
    rights: Optional[ResolvedRights] = None
    multiple_broadcasters: bool = False
    all_broadcasters: List[ResolvedBroadcaster] = Field(default_factory=list)
