"""
Broadcasters API Router

Endpoints for Broadcaster operations.
"""
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rightsdesk.api.dependencies import Actor, require_role
from rightsdesk.database import get_db
from rightsdesk.schemas.common import AdminRole, BroadcasterStatus
from rightsdesk.schemas.broadcaster import (
    BroadcasterCreate,
    BroadcasterUpdate,
    BroadcasterStatusChange,
    BroadcasterResponse,
    BroadcasterListResponse,
)
from rightsdesk.services.broadcaster_service import BroadcasterService

router = APIRouter(prefix="/api/broadcasters", tags=["broadcasters"])


@router.get("", response_model=BroadcasterListResponse)
def list_broadcasters(
    status_filter: Optional[BroadcasterStatus] = Query(None, alias="status", description="Filter by status"),
    search: Optional[str] = Query(None, description="Name contains"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> BroadcasterListResponse:
    """
    Get broadcasters ordered by name.

    - **status**: Optional status filter
    - **search**: Optional case-insensitive name filter
    """
    service = BroadcasterService(db)
    items = service.list_broadcasters(status=status_filter, search=search)
    return BroadcasterListResponse(
        items=[BroadcasterResponse.model_validate(b) for b in items],
        total=len(items),
    )


@router.get("/{broadcaster_id}", response_model=BroadcasterResponse)
def get_broadcaster(
    broadcaster_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> BroadcasterResponse:
    """Get a single broadcaster by ID."""
    service = BroadcasterService(db)
    return BroadcasterResponse.model_validate(service.require_broadcaster(broadcaster_id))


@router.post("", response_model=BroadcasterResponse, status_code=status.HTTP_201_CREATED)
def create_broadcaster(
    data: BroadcasterCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> BroadcasterResponse:
    """Create a broadcaster in 'pending' or 'active' status."""
    service = BroadcasterService(db)
    return BroadcasterResponse.model_validate(service.create_broadcaster(data, actor.user_id))


@router.patch("/{broadcaster_id}", response_model=BroadcasterResponse)
def update_broadcaster(
    broadcaster_id: UUID,
    data: BroadcasterUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> BroadcasterResponse:
    """Update descriptive fields of a broadcaster."""
    service = BroadcasterService(db)
    return BroadcasterResponse.model_validate(
        service.update_broadcaster(broadcaster_id, data, actor.user_id)
    )


@router.post("/{broadcaster_id}/status", response_model=BroadcasterResponse)
def change_broadcaster_status(
    broadcaster_id: UUID,
    data: BroadcasterStatusChange,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> BroadcasterResponse:
    """
    Move a broadcaster to another status.

    Allowed: pending -> active|suspended, active -> suspended, suspended -> active.
    """
    service = BroadcasterService(db)
    return BroadcasterResponse.model_validate(
        service.change_status(broadcaster_id, data.status, actor.user_id)
    )
