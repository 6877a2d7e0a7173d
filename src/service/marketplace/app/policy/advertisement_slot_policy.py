from src.platform.exception.exceptions import NotFoundError, SlotsExhaustedError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo
from src.service.marketplace.domain.entity.ticket_entity import Ticket


class AdvertisementSlotPolicy:
    """At most `max_slots` tickets of the whole catalog are advertised at once."""

    def __init__(self, *, max_slots: int) -> None:
        self.max_slots = max_slots

    @Logger.io
    async def promote(self, *, ticket_repo: ITicketRepo, ticket: Ticket) -> Ticket:
        if ticket.is_advertised:
            return ticket

        assert ticket.id is not None
        promoted = await ticket_repo.advertise_if_slot_available(
            ticket_id=ticket.id, max_slots=self.max_slots
        )
        if promoted is None:
            raise SlotsExhaustedError(
                f'All {self.max_slots} advertisement slots are in use'
            )

        Logger.base.info(f'📣 [ADVERTISE] Ticket {ticket.id} promoted')
        return promoted

    @Logger.io
    async def withdraw(self, *, ticket_repo: ITicketRepo, ticket: Ticket) -> Ticket:
        if not ticket.is_advertised:
            return ticket

        assert ticket.id is not None
        withdrawn = await ticket_repo.withdraw_advertisement(ticket_id=ticket.id)
        if withdrawn is None:
            raise NotFoundError('Ticket not found')

        Logger.base.info(f'📣 [ADVERTISE] Ticket {ticket.id} withdrawn')
        return withdrawn
