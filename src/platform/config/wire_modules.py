"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.marketplace.app.command import (
    change_user_role_use_case,
    create_booking_use_case,
    create_ticket_use_case,
    decide_booking_use_case,
    delete_ticket_use_case,
    mark_vendor_fraudulent_use_case,
    register_user_use_case,
    set_ticket_advertised_use_case,
    set_ticket_verification_use_case,
    settle_booking_payment_use_case,
    update_ticket_use_case,
)
from src.service.marketplace.app.query import (
    get_ticket_use_case,
    list_bookings_use_case,
    list_tickets_use_case,
    user_query_use_case,
)
from src.service.marketplace.driving_adapter.http_controller import user_controller
from src.service.marketplace.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    register_user_use_case,
    change_user_role_use_case,
    mark_vendor_fraudulent_use_case,
    create_ticket_use_case,
    update_ticket_use_case,
    delete_ticket_use_case,
    set_ticket_verification_use_case,
    set_ticket_advertised_use_case,
    create_booking_use_case,
    decide_booking_use_case,
    settle_booking_payment_use_case,
    user_query_use_case,
    get_ticket_use_case,
    list_tickets_use_case,
    list_bookings_use_case,
    user_controller,
    role_auth,
]
