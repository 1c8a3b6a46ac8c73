"""
Territories API Router

Read-only territory catalog.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rightsdesk.api.dependencies import Actor, require_role
from rightsdesk.database import get_db
from rightsdesk.schemas.common import AdminRole
from rightsdesk.schemas.territory import TerritoryResponse, TerritoriesByRegionResponse
from rightsdesk.services.territory_service import TerritoryService

router = APIRouter(prefix="/api/territories", tags=["territories"])


@router.get("", response_model=List[TerritoryResponse])
def list_territories(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> List[TerritoryResponse]:
    """Get all territories ordered by name."""
    service = TerritoryService(db)
    return [TerritoryResponse.model_validate(t) for t in service.list_territories()]


@router.get("/by-region", response_model=TerritoriesByRegionResponse)
def list_territories_by_region(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(AdminRole.SUPPORT)),
) -> TerritoriesByRegionResponse:
    """
    Get territories grouped by region.

    Territories without a region are listed under "Other".
    """
    service = TerritoryService(db)
    grouped = service.territories_by_region()
    return TerritoriesByRegionResponse(
        regions={
            region: [TerritoryResponse.model_validate(t) for t in territories]
            for region, territories in grouped.items()
        }
    )
