"""
Broadcaster Schemas

Pydantic models for Broadcaster endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from rightsdesk.schemas.common import RequestModel, BroadcasterStatus


class BroadcasterBase(RequestModel):
    """Base broadcaster schema"""
    name: str = Field(..., min_length=1, max_length=200)
    legal_name: Optional[str] = Field(None, max_length=300)
    logo_url: Optional[str] = Field(None, max_length=1000)
    contact_email: Optional[str] = Field(None, max_length=320)


class BroadcasterCreate(BroadcasterBase):
    """Broadcaster creation payload"""
    status: BroadcasterStatus = BroadcasterStatus.PENDING


class BroadcasterUpdate(RequestModel):
    """Partial broadcaster update"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    legal_name: Optional[str] = Field(None, max_length=300)
    logo_url: Optional[str] = Field(None, max_length=1000)
    contact_email: Optional[str] = Field(None, max_length=320)


class BroadcasterStatusChange(RequestModel):
    """Broadcaster status transition"""
    status: BroadcasterStatus


class BroadcasterResponse(BaseModel):
    """Broadcaster response schema"""
    id: UUID
    name: str
    legal_name: Optional[str] = None
    logo_url: Optional[str] = None
    contact_email: Optional[str] = None
    status: BroadcasterStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BroadcasterListResponse(BaseModel):
    """List of broadcasters response"""
    items: List[BroadcasterResponse]
    total: int
