"""
Rights Packages API Router

Endpoints for Rights Package operations.
"""
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from rightsdesk.api.dependencies import Actor, require_role
from rightsdesk.database import get_db
from rightsdesk.schemas.common import AdminRole, PackageStatus, ScopeType
from rightsdesk.schemas.rights import (
    PackageCreate,
    PackageUpdate,
    PackageResponse,
    PackageListResponse,
)
from rightsdesk.services.package_service import PackageService

router = APIRouter(prefix="/api/packages", tags=["packages"])


@router.get("", response_model=PackageListResponse)
def list_packages(
    broadcaster_id: Optional[UUID] = Query(None, alias="broadcasterId"),
    status_filter: Optional[PackageStatus] = Query(None, alias="status"),
    scope_type: Optional[ScopeType] = Query(None, alias="scopeType"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> PackageListResponse:
    """
    Get rights packages.

    - **broadcasterId**: Filter by broadcaster
    - **status**: Filter by status
    - **scopeType**: Filter by scope (sport, competition, season)
    """
    service = PackageService(db)
    items = service.list_packages(broadcaster_id=broadcaster_id, status=status_filter, scope_type=scope_type)
    return PackageListResponse(
        items=[PackageResponse.model_validate(p) for p in items],
        total=len(items),
    )


@router.get("/{package_id}", response_model=PackageResponse)
def get_package(
    package_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> PackageResponse:
    """Get a single rights package by ID."""
    service = PackageService(db)
    return PackageResponse.model_validate(service.require_package(package_id))


@router.post("", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
def create_package(
    data: PackageCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> PackageResponse:
    """Create a rights package for a broadcaster."""
    service = PackageService(db)
    return PackageResponse.model_validate(service.create_package(data, actor.user_id))


@router.patch("/{package_id}", response_model=PackageResponse)
def update_package(
    package_id: UUID,
    data: PackageUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> PackageResponse:
    """Update a draft or active rights package."""
    service = PackageService(db)
    return PackageResponse.model_validate(service.update_package(package_id, data, actor.user_id))


@router.post("/{package_id}/activate", response_model=PackageResponse)
def activate_package(
    package_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> PackageResponse:
    """Move a draft package to active."""
    service = PackageService(db)
    return PackageResponse.model_validate(
        service.change_status(package_id, PackageStatus.ACTIVE, actor.user_id)
    )


@router.post("/{package_id}/expire", response_model=PackageResponse)
def expire_package(
    package_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> PackageResponse:
    """Move an active package to expired."""
    service = PackageService(db)
    return PackageResponse.model_validate(
        service.change_status(package_id, PackageStatus.EXPIRED, actor.user_id)
    )


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_package(
    package_id: UUID,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.ADMIN)),
) -> Response:
    """Delete a draft package. Active packages must be expired instead."""
    service = PackageService(db)
    service.delete_package(package_id, actor.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
