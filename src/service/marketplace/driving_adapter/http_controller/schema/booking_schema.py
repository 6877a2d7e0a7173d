"""
Booking API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.service.marketplace.domain.entity.booking_entity import BookingDecision, BookingStatus


class BookingCreateRequest(BaseModel):
    """Only the ticket and the quantity come from the client; prices are computed server side"""

    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={'example': {'ticket_id': '0192...', 'quantity': 2}},
    )

    ticket_id: str
    quantity: int


class BookingDecisionRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'decision': 'accept'}})

    decision: BookingDecision


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str
    user_email: str
    vendor_email: str
    quantity: int
    unit_price: float
    total_price: float
    ticket_title: str
    ticket_image_url: str
    origin: str
    destination: str
    departure_at: datetime
    status: BookingStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
