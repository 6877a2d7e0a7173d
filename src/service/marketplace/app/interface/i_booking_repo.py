from abc import ABC, abstractmethod
from typing import Iterable, List

from src.service.marketplace.domain.entity.booking_entity import Booking, BookingStatus


class IBookingRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_email: str) -> List[Booking]:
        pass

    @abstractmethod
    async def list_by_vendor(self, *, vendor_email: str) -> List[Booking]:
        pass

    @abstractmethod
    async def update_status_if(
        self, *, booking: Booking, expected_statuses: Iterable[BookingStatus]
    ) -> Booking | None:
        """
        Persist booking.status (and paid_at) only if the stored status is still
        one of `expected_statuses`.

        Returns:
            The updated booking, or None when the stored status moved on
        """
        pass
