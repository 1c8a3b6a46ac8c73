"""
Territory Schemas

Pydantic models for Territory endpoints.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional


class TerritoryResponse(BaseModel):
    """Territory response schema"""
    code: str
    name: str
    region: Optional[str] = None

    model_config = {"from_attributes": True}


class TerritoriesByRegionResponse(BaseModel):
    """Territories grouped by region label"""
    regions: Dict[str, List[TerritoryResponse]]
