"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.marketplace.driven_adapter.model.advertisement_slot_model import (
    AdvertisementSlotModel,
)
from src.service.marketplace.driven_adapter.model.booking_model import BookingModel
from src.service.marketplace.driven_adapter.model.ticket_model import TicketModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel

__all__ = [
    'AdvertisementSlotModel',
    'BookingModel',
    'TicketModel',
    'UserModel',
]
