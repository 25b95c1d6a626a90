"""Persistence for responses and their file attachments.

Write operations report failures as :class:`PersistenceOutcome` values
instead of raising, so callers decide how to unwind a partial write.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from django.db import DatabaseError, transaction

from .models import FileAttachment, Response, ResponseDetail

logger = logging.getLogger(__name__)


def innermost_message(exc: BaseException) -> str:
    """Message of the exception's direct cause when it has one."""

    cause = exc.__cause__
    if cause is not None and str(cause):
        return str(cause)
    return str(exc) or exc.__class__.__name__


@dataclass(frozen=True)
class PersistenceError:
    operation: str
    message: str


@dataclass(frozen=True)
class PersistenceOutcome:
    error: Optional[PersistenceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> "PersistenceOutcome":
        return cls()

    @classmethod
    def failure(cls, operation: str, exc: BaseException) -> "PersistenceOutcome":
        return cls(PersistenceError(operation=operation, message=innermost_message(exc)))


def _attempt(operation: str, write: Callable[[], object]) -> PersistenceOutcome:
    try:
        with transaction.atomic():
            write()
    except DatabaseError as exc:
        logger.warning("%s failed: %s", operation, exc)
        return PersistenceOutcome.failure(operation, exc)
    return PersistenceOutcome.success()


class ResponseRepository:
    def insert(self, response: Response) -> PersistenceOutcome:
        """Save a new response; on success ``response.pk`` is assigned."""

        return _attempt("insert response", response.save)

    def save_details(self, response: Response, details: Sequence[ResponseDetail]) -> PersistenceOutcome:
        for position, detail in enumerate(details):
            detail.response = response
            detail.position = position
        return _attempt("insert response details", lambda: ResponseDetail.objects.bulk_create(details))

    def delete(self, response_id: int) -> PersistenceOutcome:
        return _attempt(
            "delete response",
            lambda: Response.objects.filter(pk=response_id).delete(),
        )

    def delete_by_form_id(self, form_id: str) -> int:
        _, per_model = Response.objects.filter(form_id=form_id).delete()
        return per_model.get(Response._meta.label, 0)

    def get_by_id(self, response_id) -> Optional[Response]:
        return Response.objects.prefetch_related("details").filter(pk=response_id).first()

    def get_by_form_id(self, form_id: str) -> List[Response]:
        return list(Response.objects.prefetch_related("details").filter(form_id=form_id))


class FileAttachmentRepository:
    """Attachment writes are staged by :meth:`add_range` and flushed by :meth:`save_changes`."""

    def __init__(self) -> None:
        self._pending: List[FileAttachment] = []

    def add_range(self, attachments: Sequence[FileAttachment]) -> PersistenceOutcome:
        self._pending.extend(attachments)
        return PersistenceOutcome.success()

    def save_changes(self) -> PersistenceOutcome:
        pending, self._pending = self._pending, []
        if not pending:
            return PersistenceOutcome.success()
        return _attempt("insert file attachments", lambda: FileAttachment.objects.bulk_create(pending))

    def discard_pending(self) -> None:
        self._pending = []

    def get_by_response_id(self, response_id: int) -> List[FileAttachment]:
        return list(FileAttachment.objects.filter(response_id=response_id))

    def get_by_response_and_question(self, response_id: int, question_id: str) -> Optional[FileAttachment]:
        return (
            FileAttachment.objects.filter(response_id=response_id, question_id=question_id)
            .order_by("id")
            .first()
        )
