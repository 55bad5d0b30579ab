"""Persistence collaborator for OT requests."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence
from uuid import UUID

from sqlalchemy import inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from overtime_engine.config import get_settings
from overtime_engine.models import (
    OTRequest,
    OTSettings,
    OTStatus,
    RequestAuditEvent,
    ResubmissionHistory,
)
from overtime_engine.validators.submission_window import SubmissionPolicy

logger = logging.getLogger(__name__)


class RequestNotFoundError(Exception):
    """Raised when a request id does not exist."""

    def __init__(self, request_id: UUID):
        self.request_id = request_id
        super().__init__(f"OT request {request_id} not found")


class ConcurrentModificationError(Exception):
    """Raised when a request left its expected status before the write landed.

    Retryable: re-read the request and re-validate the action.
    """

    def __init__(self, request_id: UUID, expected_status: str):
        self.request_id = request_id
        self.expected_status = expected_status
        super().__init__(
            f"OT request {request_id} is no longer in status "
            f"'{OTStatus(expected_status).value}'"
        )


class RequestRepository(Protocol):
    """Narrow persistence interface used by the lifecycle service."""

    async def load_request(self, request_id: UUID) -> OTRequest: ...

    async def load_requests_by_ids(self, request_ids: Sequence[UUID]) -> list[OTRequest]: ...

    async def save_request(self, request: OTRequest, expected_prior_status: OTStatus) -> None: ...

    async def add_request(self, request: OTRequest) -> OTRequest: ...

    async def ticket_number_exists(self, ticket_number: str) -> bool: ...

    async def bulk_update(self, request_ids: Sequence[UUID], values: dict[str, Any]) -> int: ...

    async def add_resubmission_history(self, entry: ResubmissionHistory) -> None: ...

    async def add_audit_event(self, event: RequestAuditEvent) -> None: ...

    async def load_policy(self) -> SubmissionPolicy: ...


class SqlAlchemyRequestRepository:
    """RequestRepository backed by an AsyncSession.

    Status writes are compare-and-swap: the UPDATE only matches while the row
    still holds the status the caller validated against.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load_request(self, request_id: UUID) -> OTRequest:
        request = await self.session.get(OTRequest, request_id)
        if request is None:
            raise RequestNotFoundError(request_id)
        return request

    async def load_requests_by_ids(self, request_ids: Sequence[UUID]) -> list[OTRequest]:
        if not request_ids:
            return []
        result = await self.session.execute(
            select(OTRequest).where(OTRequest.id.in_(list(request_ids)))
        )
        return list(result.scalars().all())

    async def save_request(self, request: OTRequest, expected_prior_status: OTStatus) -> None:
        """Write pending changes if the stored status is still the expected one.

        Raises ConcurrentModificationError (after discarding the in-memory
        changes) when another writer got there first.
        """
        state = inspect(request)
        values = {
            attr.key: getattr(request, attr.key)
            for attr in state.mapper.column_attrs
            if state.attrs[attr.key].history.has_changes()
        }

        # Nothing changed: rewrite the expected status so the guard still runs
        values = values or {"status": expected_prior_status}

        # Pending changes must only reach the row through the guarded UPDATE
        with self.session.no_autoflush:
            result = await self.session.execute(
                update(OTRequest)
                .where(
                    OTRequest.id == request.id,
                    OTRequest.status == expected_prior_status,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            matched = result.rowcount or 0

            # Reload either way: on success to clear dirty state, on conflict to
            # drop the rejected changes and expose the winner's status.
            await self.session.refresh(request)

        if matched != 1:
            logger.warning(
                "Status conflict on OT request %s (expected %s, found %s)",
                request.id,
                OTStatus(expected_prior_status).value,
                OTStatus(request.status).value,
            )
            raise ConcurrentModificationError(request.id, expected_prior_status)

    async def add_request(self, request: OTRequest) -> OTRequest:
        self.session.add(request)
        await self.session.flush()
        await self.session.refresh(request)
        return request

    async def ticket_number_exists(self, ticket_number: str) -> bool:
        result = await self.session.execute(
            select(OTRequest.id).where(OTRequest.ticket_number == ticket_number).limit(1)
        )
        return result.first() is not None

    async def bulk_update(self, request_ids: Sequence[UUID], values: dict[str, Any]) -> int:
        """Set-based update keyed by id only; returns rows matched."""
        if not request_ids:
            return 0
        result = await self.session.execute(
            update(OTRequest)
            .where(OTRequest.id.in_(list(request_ids)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        # Objects already in the identity map still hold pre-update values
        targeted = set(request_ids)
        cached = [
            obj
            for obj in list(self.session.identity_map.values())
            if isinstance(obj, OTRequest) and obj.id in targeted
        ]
        for obj in cached:
            await self.session.refresh(obj)
        return result.rowcount or 0

    async def add_resubmission_history(self, entry: ResubmissionHistory) -> None:
        self.session.add(entry)
        await self.session.flush()

    async def add_audit_event(self, event: RequestAuditEvent) -> None:
        self.session.add(event)
        await self.session.flush()

    async def load_policy(self) -> SubmissionPolicy:
        """Policy from ot_settings, or the configured defaults when unset."""
        result = await self.session.execute(select(OTSettings).order_by(OTSettings.id).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            settings = get_settings()
            return SubmissionPolicy(
                cutoff_window_days=settings.cutoff_window_days,
                grace_period_enabled=settings.grace_period_enabled,
            )
        return SubmissionPolicy(
            cutoff_window_days=row.cutoff_window_days,
            grace_period_enabled=row.grace_period_enabled,
        )
