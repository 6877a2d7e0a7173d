"""
Ticket Repository Interface

Every inventory or advertisement mutation is a single conditional write so
that two concurrent requests can never both pass the same check.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping

from src.service.marketplace.app.dto.ticket_query import TicketQuery
from src.service.marketplace.domain.entity.ticket_entity import Ticket


class ITicketRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: str) -> Ticket | None:
        pass

    @abstractmethod
    async def list_by_vendor(self, *, vendor_email: str) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_query(self, *, query: TicketQuery) -> List[Ticket]:
        pass

    @abstractmethod
    async def update_fields(self, *, ticket_id: str, fields: Mapping[str, Any]) -> Ticket | None:
        pass

    @abstractmethod
    async def delete(self, *, ticket_id: str) -> bool:
        pass

    @abstractmethod
    async def decrement_quantity_if_available(self, *, ticket_id: str, amount: int) -> Ticket | None:
        """
        Atomically subtract `amount` from the remaining quantity.

        Returns:
            The updated ticket, or None when the ticket is absent, not publicly
            listable, or the result would be negative (nothing is written then)

        Raises:
            ConflictError: the write lost a race for a lock and may be retried
        """
        pass

    @abstractmethod
    async def hide_all_for_vendor(self, *, vendor_email: str) -> int:
        """Hide every ticket owned by the vendor in one statement; returns the count."""
        pass

    @abstractmethod
    async def count_advertised(self) -> int:
        pass

    @abstractmethod
    async def advertise_if_slot_available(self, *, ticket_id: str, max_slots: int) -> Ticket | None:
        """
        Set is_advertised and claim one slot, as one check-and-set.

        Returns:
            The advertised ticket, or None when every slot is taken; in that
            case the caller must roll back the transaction

        Raises:
            NotFoundError: the ticket does not exist
        """
        pass

    @abstractmethod
    async def withdraw_advertisement(self, *, ticket_id: str) -> Ticket | None:
        """Clear is_advertised and release its slot (no-op when not advertised)."""
        pass
