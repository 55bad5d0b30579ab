"""Business services for the overtime engine."""

from overtime_engine.services.notifications import (
    Notification,
    NotificationDispatcher,
    NotificationType,
)
from overtime_engine.services.repository import (
    ConcurrentModificationError,
    RequestNotFoundError,
    RequestRepository,
    SqlAlchemyRequestRepository,
)
from overtime_engine.services.request_service import (
    RequestLifecycleService,
    TicketNumberUnavailableError,
    UnauthorizedActorError,
    generate_ticket_number,
    select_rejection_reason,
)
from overtime_engine.services.state_machine import (
    ApprovalAction,
    InvalidTransitionError,
    OTRequestStateMachine,
)

__all__ = [
    "ApprovalAction",
    "ConcurrentModificationError",
    "InvalidTransitionError",
    "Notification",
    "NotificationDispatcher",
    "NotificationType",
    "OTRequestStateMachine",
    "RequestLifecycleService",
    "RequestNotFoundError",
    "RequestRepository",
    "SqlAlchemyRequestRepository",
    "TicketNumberUnavailableError",
    "UnauthorizedActorError",
    "generate_ticket_number",
    "select_rejection_reason",
]
