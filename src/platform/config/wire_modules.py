"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    create_test_ticket_use_case,
    create_ticket_type_use_case,
    initialize_payment_use_case,
    register_free_ticket_use_case,
    verify_payment_use_case,
)
from src.service.ticketing.app.query import (
    get_platform_balance_use_case,
    list_ticket_types_use_case,
    list_user_tickets_use_case,
)
from src.service.ticketing.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    initialize_payment_use_case,
    verify_payment_use_case,
    register_free_ticket_use_case,
    create_test_ticket_use_case,
    create_ticket_type_use_case,
    list_ticket_types_use_case,
    list_user_tickets_use_case,
    get_platform_balance_use_case,
    current_user,
]
