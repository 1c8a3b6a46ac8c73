"""
Package Repository

Filtered reads over rights packages valid at a given instant.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rightsdesk.models import RightsPackage, Broadcaster
from rightsdesk.schemas.common import PackageStatus


@dataclass
class PackageCandidate:
    """Active package together with its broadcaster"""
    package_id: UUID
    package_name: str
    scope_type: str
    sport_id: Optional[UUID]
    league_id: Optional[UUID]
    broadcaster_id: UUID
    broadcaster_name: str
    broadcaster_logo_url: Optional[str]
    broadcaster_status: str


class PackageRepository:
    """Interface/base class for rights package reads."""

    def find_active_packages_on(self, event_date: datetime) -> List[PackageCandidate]:
        raise NotImplementedError


class SqlPackageRepository(PackageRepository):
    """PackageRepository backed by the rights_packages table"""

    def __init__(self, db: Session):
        self.db = db

    def find_active_packages_on(self, event_date: datetime) -> List[PackageCandidate]:
        query = (
            select(RightsPackage, Broadcaster)
            .join(Broadcaster, RightsPackage.broadcaster_id == Broadcaster.id)
            .where(
                RightsPackage.status == PackageStatus.ACTIVE.value,
                RightsPackage.start_at <= event_date,
                RightsPackage.end_at >= event_date,
            )
        )

        return [
            PackageCandidate(
                package_id=package.id,
                package_name=package.name,
                scope_type=package.scope_type,
                sport_id=package.sport_id,
                league_id=package.league_id,
                broadcaster_id=broadcaster.id,
                broadcaster_name=broadcaster.name,
                broadcaster_logo_url=broadcaster.logo_url,
                broadcaster_status=broadcaster.status,
            )
            for package, broadcaster in self.db.execute(query).all()
        ]
