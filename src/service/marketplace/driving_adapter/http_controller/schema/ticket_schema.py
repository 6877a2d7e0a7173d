"""
Ticket API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.marketplace.domain.entity.ticket_entity import VerificationStatus


class TicketCreateRequest(BaseModel):
    """Vendor-supplied fields only; status, visibility and advertisement are ignored"""

    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {
                'title': 'Dhaka to Chittagong Express',
                'origin': 'Dhaka',
                'destination': 'Chittagong',
                'transport_type': 'bus',
                'price': 25.5,
                'quantity': 40,
                'departure_at': '2030-01-01T08:00:00Z',
                'perks': ['AC', 'Wi-Fi'],
                'image_url': '',
            }
        },
    )

    title: str
    origin: str
    destination: str
    transport_type: str
    price: float
    quantity: int
    departure_at: datetime
    perks: List[str] = Field(default_factory=list)
    image_url: str = ''


class TicketUpdateRequest(BaseModel):
    """Partial edit; protected fields (quantity, verification, ...) are rejected"""

    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    transport_type: Optional[str] = None
    price: Optional[float] = None
    departure_at: Optional[datetime] = None
    perks: Optional[List[str]] = None
    image_url: Optional[str] = None


class VerificationRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'status': 'approved'}})

    status: str


class AdvertiseRequest(BaseModel):
    advertised: bool


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    origin: str
    destination: str
    transport_type: str
    price: float
    quantity: int
    departure_at: datetime
    perks: List[str]
    image_url: str
    vendor_email: str
    verification_status: VerificationStatus
    is_advertised: bool
    is_hidden: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
