"""
Package Service

Business logic for Rights Package operations.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.exceptions import NotFoundError, ValidationError
from rightsdesk.models import RightsPackage
from rightsdesk.models.types import ensure_utc
from rightsdesk.schemas.common import PackageStatus, ScopeType
from rightsdesk.schemas.rights import PackageCreate, PackageUpdate
from rightsdesk.services.broadcaster_service import BroadcasterService
from rightsdesk.services.lifecycle import check_initial_state, check_transition
from rightsdesk.services.territory_service import TerritoryService

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = {PackageStatus.DRAFT.value, PackageStatus.ACTIVE.value}


def validate_window(start_at: datetime, end_at: datetime) -> None:
    if ensure_utc(start_at) > ensure_utc(end_at):
        raise ValidationError("start_at must be on or before end_at")


def validate_scope(scope_type: str, sport_id: Optional[UUID], league_id: Optional[UUID]) -> None:
    """Each scope needs the identifier it matches on"""
    if scope_type == ScopeType.SPORT.value and not sport_id:
        raise ValidationError("sport_id is required for sport-scoped packages")
    if scope_type in (ScopeType.COMPETITION.value, ScopeType.SEASON.value) and not league_id:
        raise ValidationError(f"league_id is required for {scope_type}-scoped packages")


class PackageService:
    """Service class for Rights Package operations"""

    def __init__(self, db: Session):
        self.db = db
        self.territories = TerritoryService(db)
        self.broadcasters = BroadcasterService(db)

    def list_packages(
        self,
        broadcaster_id: Optional[UUID] = None,
        status: Optional[PackageStatus] = None,
        scope_type: Optional[ScopeType] = None,
    ) -> List[RightsPackage]:
        """Get packages, most recent window first"""
        query = select(RightsPackage)

        if broadcaster_id:
            query = query.where(RightsPackage.broadcaster_id == broadcaster_id)

        if status:
            query = query.where(RightsPackage.status == status.value)

        if scope_type:
            query = query.where(RightsPackage.scope_type == scope_type.value)

        query = query.order_by(RightsPackage.start_at.desc(), RightsPackage.name)
        return list(self.db.execute(query).scalars().all())

    def get_package(self, package_id: UUID) -> Optional[RightsPackage]:
        """Get a single package by ID"""
        return self.db.get(RightsPackage, package_id)

    def require_package(self, package_id: UUID) -> RightsPackage:
        package = self.get_package(package_id)
        if not package:
            raise NotFoundError("Rights package", package_id)
        return package

    def create_package(self, data: PackageCreate, actor_id: Optional[UUID] = None) -> RightsPackage:
        """Create a package after validating window, scope and territories"""
        self.broadcasters.require_broadcaster(data.broadcaster_id)
        check_initial_state("rights_package", data.status.value)
        validate_window(data.start_at, data.end_at)
        validate_scope(data.scope_type.value, data.sport_id, data.league_id)
        territories = self.territories.validate_codes(data.territories_default)

        package = RightsPackage(
            broadcaster_id=data.broadcaster_id,
            name=data.name,
            scope_type=data.scope_type.value,
            sport_id=data.sport_id,
            league_id=data.league_id,
            season=data.season,
            start_at=data.start_at,
            end_at=data.end_at,
            is_exclusive_default=data.is_exclusive_default,
            territories_default=territories,
            status=data.status.value,
        )
        self.db.add(package)
        self.db.commit()
        self.db.refresh(package)

        logger.info(
            f"Package {package.id} ({package.scope_type}) created for broadcaster "
            f"{package.broadcaster_id} by {actor_id}"
        )
        return package

    def update_package(
        self,
        package_id: UUID,
        data: PackageUpdate,
        actor_id: Optional[UUID] = None,
    ) -> RightsPackage:
        """Update a draft or active package"""
        package = self.require_package(package_id)
        if package.status not in EDITABLE_STATUSES:
            raise ValidationError(f"Package in status '{package.status}' cannot be edited", package_id)

        changes = data.model_dump(exclude_unset=True)
        if "territories_default" in changes:
            changes["territories_default"] = self.territories.validate_codes(
                changes["territories_default"] or []
            )

        validate_window(
            changes.get("start_at", package.start_at),
            changes.get("end_at", package.end_at),
        )
        validate_scope(
            package.scope_type,
            changes.get("sport_id", package.sport_id),
            changes.get("league_id", package.league_id),
        )

        for field_name, value in changes.items():
            setattr(package, field_name, value)

        self.db.commit()
        self.db.refresh(package)

        logger.info(f"Package {package_id} updated by {actor_id}: {sorted(changes)}")
        return package

    def change_status(
        self,
        package_id: UUID,
        status: PackageStatus,
        actor_id: Optional[UUID] = None,
    ) -> RightsPackage:
        """Activate or expire a package"""
        package = self.require_package(package_id)
        check_transition("rights_package", package.status, status.value, package_id)

        previous = package.status
        package.status = status.value
        self.db.commit()
        self.db.refresh(package)

        logger.info(f"Package {package_id} status {previous} -> {status.value} by {actor_id}")
        return package

    def delete_package(self, package_id: UUID, actor_id: Optional[UUID] = None) -> None:
        """Hard delete, drafts only"""
        package = self.require_package(package_id)
        if package.status != PackageStatus.DRAFT.value:
            raise ValidationError("Only draft packages can be deleted; expire it instead", package_id)

        self.db.delete(package)
        self.db.commit()
        logger.info(f"Draft package {package_id} deleted by {actor_id}")
