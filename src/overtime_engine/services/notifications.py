"""Notification fan-out after successful transitions.

Delivery (push, email) is owned by the surrounding application; this module
only routes a Notification to registered handlers. Dispatch is
fire-and-forget:
- Handlers are isolated (one failing handler doesn't stop the others)
- Failures are logged and returned, never raised into the transition
- Sync and async handlers are both accepted
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Union
from uuid import UUID

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """What happened to the request, from the recipient's point of view."""

    SUPERVISOR_VERIFICATION_REQUESTED = "supervisor_verification_requested"
    RESPECTIVE_SUPERVISOR_CONFIRMATION_REQUESTED = "respective_supervisor_confirmation_requested"
    RESPECTIVE_SUPERVISOR_CONFIRMED = "respective_supervisor_confirmed"
    RESPECTIVE_SUPERVISOR_DENIED = "respective_supervisor_denied"
    SUPERVISOR_CONFIRMED = "supervisor_confirmed"
    SUPERVISOR_VERIFIED = "supervisor_verified"
    HR_CERTIFICATION_REQUESTED = "hr_certification_requested"
    HR_CERTIFIED = "hr_certified"
    RETURNED_FOR_AMENDMENT = "returned_for_amendment"
    MANAGEMENT_APPROVED = "management_approved"
    HR_RECERTIFICATION_REQUESTED = "hr_recertification_requested"
    REJECTED = "rejected"
    RESUBMITTED = "resubmitted"


@dataclass(frozen=True)
class Notification:
    """A single notification about one request."""

    request_id: UUID
    notification_type: NotificationType
    recipient_id: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


NotificationHandler = Callable[[Notification], Union[None, Awaitable[None]]]


@dataclass
class HandlerRegistration:
    """Registration of a notification handler."""

    handler: NotificationHandler
    notification_types: set[NotificationType] | None  # None = all types


class NotificationDispatcher:
    """Routes notifications to registered handlers.

    Usage:
        dispatcher = NotificationDispatcher()
        dispatcher.on(NotificationType.REJECTED, send_push_to_employee)
        dispatcher.on_all(write_notification_row)

        errors = await dispatcher.dispatch(notification)
    """

    def __init__(self) -> None:
        self._handlers: list[HandlerRegistration] = []

    def on(
        self,
        notification_type: NotificationType | list[NotificationType],
        handler: NotificationHandler,
    ) -> None:
        """Register handler for specific notification type(s)."""
        if isinstance(notification_type, list):
            types = set(notification_type)
        else:
            types = {notification_type}
        self._handlers.append(HandlerRegistration(handler=handler, notification_types=types))

    def on_all(self, handler: NotificationHandler) -> None:
        """Register handler for all notifications."""
        self._handlers.append(HandlerRegistration(handler=handler, notification_types=None))

    def off(self, handler: NotificationHandler) -> None:
        """Unregister a handler."""
        self._handlers = [reg for reg in self._handlers if reg.handler != handler]

    async def dispatch(self, notification: Notification) -> list[Exception]:
        """Deliver to all matching handlers.

        Returns list of any exceptions raised by handlers.
        """
        errors: list[Exception] = []
        tasks: list[asyncio.Task[None]] = []

        for reg in self._handlers:
            if (
                reg.notification_types is not None
                and notification.notification_type not in reg.notification_types
            ):
                continue

            try:
                result = reg.handler(notification)
            except Exception as e:
                logger.exception(
                    "Handler %s failed for %s on request %s",
                    reg.handler,
                    notification.notification_type.value,
                    notification.request_id,
                )
                errors.append(e)
                continue

            if inspect.isawaitable(result):
                tasks.append(
                    asyncio.ensure_future(self._await_handler(reg.handler, result, notification))
                )

        if tasks:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    errors.append(result)

        return errors

    async def dispatch_many(self, notifications: list[Notification]) -> list[Exception]:
        """Dispatch several notifications in order."""
        errors: list[Exception] = []
        for notification in notifications:
            errors.extend(await self.dispatch(notification))
        return errors

    async def _await_handler(
        self,
        handler: NotificationHandler,
        pending: Awaitable[Any],
        notification: Notification,
    ) -> None:
        """Await async handler with error logging."""
        try:
            await pending
        except Exception:
            logger.exception(
                "Async handler %s failed for %s on request %s",
                handler,
                notification.notification_type.value,
                notification.request_id,
            )
            raise
