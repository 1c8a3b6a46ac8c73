"""
Rights API Router

Endpoints for per-event rights grants, exclusivity conflict checks,
broadcaster suggestions and per-country resolution.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from rightsdesk.api.dependencies import Actor, parse_uuid_list, require_role, split_csv
from rightsdesk.database import get_db
from rightsdesk.repositories.package_repository import SqlPackageRepository
from rightsdesk.schemas.common import AdminRole, Exclusivity, RightsStatus
from rightsdesk.schemas.rights import (
    RightsEventCreate,
    RightsEventUpdate,
    RightsStatusChange,
    RightsEventResponse,
    RightsEventListResponse,
    RightsEventCreateResponse,
    ConflictResponse,
    BulkRightsCreate,
    BulkRightsResponse,
    SuggestedBroadcaster,
    SuggestionResponse,
    ResolvedBroadcaster,
    ResolvedRights,
    RightsResolveResponse,
)
from rightsdesk.services.conflict_service import Conflict
from rightsdesk.services.rights_service import RightsService
from rightsdesk.services.suggestion_service import SuggestionRanker

router = APIRouter(prefix="/api/rights", tags=["rights"])


def _conflict_response(conflict: Conflict) -> ConflictResponse:
    return ConflictResponse(
        right_id=conflict.right_id,
        event_id=conflict.event_id,
        event_title=conflict.event_title,
        broadcaster_id=conflict.broadcaster_id,
        broadcaster_name=conflict.broadcaster_name,
        territories=conflict.territories,
    )


@router.get("", response_model=RightsEventListResponse)
def list_rights(
    event_id: Optional[UUID] = Query(None, alias="eventId"),
    broadcaster_id: Optional[UUID] = Query(None, alias="broadcasterId"),
    status_filter: Optional[RightsStatus] = Query(None, alias="status"),
    exclusivity: Optional[Exclusivity] = Query(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> RightsEventListResponse:
    """
    Get rights grants, newest first.

    - **eventId**: Filter by event
    - **broadcasterId**: Filter by broadcaster
    - **status**: Filter by status
    - **exclusivity**: Filter by exclusivity
    """
    service = RightsService(db)
    items = service.list_rights(
        event_id=event_id,
        broadcaster_id=broadcaster_id,
        status=status_filter,
        exclusivity=exclusivity,
    )
    return RightsEventListResponse(
        items=[RightsEventResponse.model_validate(r) for r in items],
        total=len(items),
    )


@router.get("/conflicts", response_model=List[ConflictResponse])
def find_conflicts(
    event_ids: Optional[List[str]] = Query(None, alias="eventIds"),
    territories: Optional[List[str]] = Query(None),
    exclusivity: Exclusivity = Query(...),
    exclude_broadcaster_id: Optional[UUID] = Query(None, alias="excludeBroadcasterId"),
    exclude_right_id: Optional[UUID] = Query(None, alias="excludeRightId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[ConflictResponse]:
    """
    Find active exclusive grants overlapping a candidate grant.

    List parameters accept repeated values or a comma-separated list.
    Only an 'exclusive' candidate can conflict. Results are advisory.
    """
    service = RightsService(db)
    conflicts = service.find_conflicts(
        parse_uuid_list(event_ids, "eventIds"),
        split_csv(territories),
        exclusivity,
        exclude_broadcaster_id=exclude_broadcaster_id,
        exclude_right_id=exclude_right_id,
    )
    return [_conflict_response(c) for c in conflicts]


@router.get("/suggestions", response_model=List[SuggestionResponse])
def suggest_broadcasters(
    event_date: datetime = Query(..., alias="eventDate"),
    sport_id: Optional[UUID] = Query(None, alias="sportId"),
    league_id: Optional[UUID] = Query(None, alias="leagueId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[SuggestionResponse]:
    """
    Suggest broadcasters for an event from matching active packages.

    Ordered season, competition, then sport; each broadcaster appears once.
    """
    ranker = SuggestionRanker(SqlPackageRepository(db))
    suggestions = ranker.suggest_broadcasters(sport_id, league_id, event_date)
    return [
        SuggestionResponse(
            broadcaster=SuggestedBroadcaster(
                id=s.broadcaster_id,
                name=s.broadcaster_name,
                logo_url=s.broadcaster_logo_url,
                status=s.broadcaster_status,
            ),
            match_type=s.match_type,
            priority=s.priority,
            package_id=s.package_id,
            package_name=s.package_name,
        )
        for s in suggestions
    ]


@router.get("/resolve", response_model=RightsResolveResponse)
def resolve_rights(
    event_id: UUID = Query(..., alias="eventId"),
    country: str = Query(..., min_length=2, max_length=2),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> RightsResolveResponse:
    """
    Which broadcaster may show a published event in a country.

    Blocked territories win over allowed ones; an empty allow list
    means worldwide. The first grant (exclusive first) is the primary one.
    """
    service = RightsService(db)
    event, grants = service.resolve(event_id, country)
    country_code = country.strip().upper()

    if not grants:
        return RightsResolveResponse(authorized=False, event_id=event.id, country=country_code)

    primary = grants[0]
    all_broadcasters = [
        ResolvedBroadcaster(id=g.broadcaster.id, name=g.broadcaster.name, logo_url=g.broadcaster.logo_url)
        for g in grants
    ]
    return RightsResolveResponse(
        authorized=True,
        event_id=event.id,
        country=country_code,
        broadcaster=all_broadcasters[0],
        rights=ResolvedRights(
            live=primary.right.rights_live,
            replay=primary.replay_until is not None,
            highlights=primary.right.rights_highlights,
            replay_until=primary.replay_until,
            platform=primary.right.platform,
            exclusivity=primary.right.exclusivity,
        ),
        multiple_broadcasters=len(grants) > 1,
        all_broadcasters=all_broadcasters,
    )


@router.post("/bulk", response_model=BulkRightsResponse, status_code=status.HTTP_201_CREATED)
def bulk_assign_rights(
    data: BulkRightsCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> BulkRightsResponse:
    """
    Assign one broadcaster the same rights on many events.

    With skipConflicts (default) events with exclusivity conflicts are skipped.
    """
    service = RightsService(db)
    result = service.bulk_assign(data, actor.user_id)
    return BulkRightsResponse(
        created=[RightsEventResponse.model_validate(r) for r in result.created],
        skipped_event_ids=result.skipped_event_ids,
        conflicts=[_conflict_response(c) for c in result.conflicts],
    )


@router.get("/{right_id}", response_model=RightsEventResponse)
def get_right(
    right_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> RightsEventResponse:
    """Get a single rights grant by ID."""
    service = RightsService(db)
    return RightsEventResponse.model_validate(service.require_right(right_id))


@router.post("", response_model=RightsEventCreateResponse, status_code=status.HTTP_201_CREATED)
def create_right(
    data: RightsEventCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> RightsEventCreateResponse:
    """
    Create a rights grant.

    Overlapping exclusive grants are reported in `conflicts`; they never
    prevent the write.
    """
    service = RightsService(db)
    right, conflicts = service.create_right(data, actor.user_id)
    return RightsEventCreateResponse(
        right=RightsEventResponse.model_validate(right),
        conflicts=[_conflict_response(c) for c in conflicts],
    )


@router.patch("/{right_id}", response_model=RightsEventCreateResponse)
def update_right(
    right_id: UUID,
    data: RightsEventUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> RightsEventCreateResponse:
    """Update a draft or active grant; conflicts are re-evaluated."""
    service = RightsService(db)
    right, conflicts = service.update_right(right_id, data, actor.user_id)
    return RightsEventCreateResponse(
        right=RightsEventResponse.model_validate(right),
        conflicts=[_conflict_response(c) for c in conflicts],
    )


@router.post("/{right_id}/status", response_model=RightsEventResponse)
def change_right_status(
    right_id: UUID,
    data: RightsStatusChange,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> RightsEventResponse:
    """Move a grant through draft -> active -> expired/revoked."""
    service = RightsService(db)
    return RightsEventResponse.model_validate(service.change_status(right_id, data.status, actor.user_id))


@router.post("/{right_id}/revoke", response_model=RightsEventResponse)
def revoke_right(
    right_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> RightsEventResponse:
    """Revoke a grant. The row stays queryable."""
    service = RightsService(db)
    return RightsEventResponse.model_validate(service.revoke_right(right_id, actor.user_id))


@router.delete("/{right_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_right(
    right_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.EDITOR)),
) -> Response:
    """Delete a draft grant. Active grants must be revoked instead."""
    service = RightsService(db)
    service.delete_right(right_id, actor.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
