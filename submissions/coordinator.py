"""Validate, format and persist a single form submission."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from django.db import DatabaseError
from django.utils import timezone

from forms.repositories import FormRepository

from .attachments import AttachmentProcessor
from .formatting import format_answer
from .identity import ClaimSet, Identity, resolve_identity
from .models import Response, ResponseDetail
from .payloads import SubmissionRequest
from .repositories import (
    FileAttachmentRepository,
    PersistenceOutcome,
    ResponseRepository,
)
from .transactions import TransactionProvider
from .validation import UNPUBLISHED_FORM_MESSAGE, SubmissionValidator

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Response submitted successfully"
INVALID_USER_MESSAGE = "Invalid user ID."
MISSING_FORM_MESSAGE = "Form ID is required."
UNKNOWN_FORM_MESSAGE = "Invalid form ID."
PERSISTENCE_ERROR_PREFIX = "Error submitting response: "


class SubmissionState(str, Enum):
    VALIDATING = "validating"
    FORMATTING = "formatting"
    PERSISTING = "persisting"
    COMMITTED = "committed"
    REJECTED = "rejected"
    ROLLED_BACK = "rolled_back"


class SubmissionErrorKind(str, Enum):
    INVALID_IDENTITY = "invalid_identity"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    PERSISTENCE_FAILURE = "persistence_failure"


CLEANUP_OK = "ok"
CLEANUP_FAILED = "failed"


@dataclass
class SubmissionTrace:
    """What happened during a submission, including work the caller never sees."""

    states: List[SubmissionState] = field(default_factory=list)
    response_id: Optional[int] = None
    cleanup: Optional[str] = None

    def enter(self, state: SubmissionState) -> None:
        self.states.append(state)

    @property
    def state(self) -> Optional[SubmissionState]:
        return self.states[-1] if self.states else None

    @property
    def cleanup_attempted(self) -> bool:
        return self.cleanup is not None


@dataclass
class SubmissionResult:
    success: bool
    message: str
    data: Optional[Response] = None
    error_kind: Optional[SubmissionErrorKind] = None
    trace: SubmissionTrace = field(default_factory=SubmissionTrace)

    def as_tuple(self) -> Tuple[bool, str, Optional[Response]]:
        return self.success, self.message, self.data


class SubmissionCoordinator:
    def __init__(
        self,
        form_repository: Optional[FormRepository] = None,
        response_repository: Optional[ResponseRepository] = None,
        attachment_repository: Optional[FileAttachmentRepository] = None,
        transactions: Optional[TransactionProvider] = None,
        validator: Optional[SubmissionValidator] = None,
        attachment_processor: Optional[AttachmentProcessor] = None,
        identity_resolver: Callable[[Optional[ClaimSet]], Optional[Identity]] = resolve_identity,
        clock: Callable[[], object] = timezone.now,
    ) -> None:
        self.form_repository = form_repository or FormRepository()
        self.response_repository = response_repository or ResponseRepository()
        self.attachment_repository = attachment_repository or FileAttachmentRepository()
        self.transactions = transactions or TransactionProvider()
        self.validator = validator or SubmissionValidator()
        self.attachment_processor = attachment_processor or AttachmentProcessor()
        self.identity_resolver = identity_resolver
        self.clock = clock

    def submit(self, request: SubmissionRequest, claims: Optional[ClaimSet]) -> SubmissionResult:
        trace = SubmissionTrace()

        identity = self.identity_resolver(claims)
        if identity is None:
            return self._reject(trace, SubmissionErrorKind.INVALID_IDENTITY, INVALID_USER_MESSAGE)

        form_id = (request.form_id or "").strip()
        if not form_id:
            return self._reject(trace, SubmissionErrorKind.INVALID_INPUT, MISSING_FORM_MESSAGE)

        form = self.form_repository.get_by_id(form_id)
        if form is None:
            return self._reject(trace, SubmissionErrorKind.NOT_FOUND, UNKNOWN_FORM_MESSAGE)

        trace.enter(SubmissionState.VALIDATING)
        errors = self.validator.validate(form, request.answers, request.file_uploads)
        if errors:
            kind = (
                SubmissionErrorKind.INVALID_INPUT
                if errors[0] == UNPUBLISHED_FORM_MESSAGE
                else SubmissionErrorKind.VALIDATION_FAILED
            )
            return self._reject(trace, kind, errors[0])

        return self._persist(form, identity, request, trace)

    def _reject(self, trace: SubmissionTrace, kind: SubmissionErrorKind, message: str) -> SubmissionResult:
        trace.enter(SubmissionState.REJECTED)
        logger.info("Submission rejected (%s): %s", kind.value, message)
        return SubmissionResult(False, message, None, kind, trace)

    def _persist(
        self,
        form,
        identity: Identity,
        request: SubmissionRequest,
        trace: SubmissionTrace,
    ) -> SubmissionResult:
        submitted_at = self.clock()
        response = Response(form_id=form.id, user_id=identity.user_id, submitted_at=submitted_at)
        trx = None
        try:
            trx = self.transactions.begin()
            outcome = self._write(form, request, response, trace)
            if outcome.ok:
                trx.commit()
        except Exception as exc:
            logger.exception("Unexpected error while persisting a response to form %s", form.id)
            outcome = PersistenceOutcome.failure("submit response", exc)

        if not outcome.ok:
            return self._roll_back(trx, response, trace, outcome.error.message)

        trace.enter(SubmissionState.COMMITTED)
        logger.info("Response %s submitted to form %s", response.pk, form.id)
        return SubmissionResult(True, SUCCESS_MESSAGE, response, None, trace)

    def _write(
        self,
        form,
        request: SubmissionRequest,
        response: Response,
        trace: SubmissionTrace,
    ) -> PersistenceOutcome:
        trace.enter(SubmissionState.FORMATTING)
        outcome = self.response_repository.insert(response)
        if not outcome.ok:
            return outcome
        trace.response_id = response.pk

        questions = {question.question_id: question for question in form.questions.all()}
        details: List[ResponseDetail] = []
        for answer in request.answers:
            question = questions.get(answer.question_id)
            value = answer.answer or ""
            if question is not None:
                value = format_answer(question, answer.answer)
            details.append(ResponseDetail(question_id=answer.question_id, answer=value))

        prepared = self.attachment_processor.prepare(
            request.file_uploads,
            response,
            response.submitted_at,
            answered_question_ids={detail.question_id for detail in details},
        )
        for summary in prepared.summaries:
            details.append(ResponseDetail(question_id=summary.question_id, answer=summary.answer))

        trace.enter(SubmissionState.PERSISTING)
        outcome = self.response_repository.save_details(response, details)
        if not outcome.ok or not prepared.attachments:
            return outcome
        outcome = self.attachment_repository.add_range(prepared.attachments)
        if not outcome.ok:
            return outcome
        outcome = self.attachment_repository.save_changes()
        if outcome.ok:
            logger.debug(
                "Stored %s detail(s) and %s attachment(s) for response %s",
                len(details),
                len(prepared.attachments),
                response.pk,
            )
        return outcome

    def _roll_back(self, trx, response: Response, trace: SubmissionTrace, message: str) -> SubmissionResult:
        self.attachment_repository.discard_pending()
        if trx is not None:
            try:
                trx.rollback()
            except DatabaseError:
                logger.exception("Rolling back the submission transaction failed")

        if trace.response_id is not None:
            trace.cleanup = self._delete_response(trace.response_id)

        trace.enter(SubmissionState.ROLLED_BACK)
        logger.error("Submission to form %s rolled back: %s", response.form_id, message)
        return SubmissionResult(
            False,
            PERSISTENCE_ERROR_PREFIX + message,
            None,
            SubmissionErrorKind.PERSISTENCE_FAILURE,
            trace,
        )

    def _delete_response(self, response_id: int) -> str:
        try:
            outcome = self.response_repository.delete(response_id)
        except Exception:
            logger.warning("Compensating delete of response %s raised", response_id, exc_info=True)
            return CLEANUP_FAILED
        if not outcome.ok:
            logger.warning("Compensating delete of response %s failed: %s", response_id, outcome.error.message)
            return CLEANUP_FAILED
        return CLEANUP_OK
