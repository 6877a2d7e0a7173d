from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo


class FraudCascadePolicy:
    """
    Hides every ticket of a vendor flagged as fraud, whatever its verification status.

    Runs inside the caller's unit of work so the fraud flag and the hidden
    tickets are committed (or rolled back) together.
    """

    @staticmethod
    @Logger.io
    async def on_vendor_marked_fraudulent(*, ticket_repo: ITicketRepo, vendor_email: str) -> int:
        hidden_count = await ticket_repo.hide_all_for_vendor(vendor_email=vendor_email)
        Logger.base.info(f'🚫 [FRAUD-CASCADE] Hid {hidden_count} tickets of vendor {vendor_email}')
        return hidden_count
