"""Tests for response submission processing."""
from __future__ import annotations

import base64
import binascii
import json
from typing import List
from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from forms.models import Form, Option, Question

from .attachments import AttachmentProcessor, decode_content, encoded_size
from .coordinator import (
    CLEANUP_FAILED,
    CLEANUP_OK,
    SubmissionCoordinator,
    SubmissionErrorKind,
    SubmissionState,
)
from .formatting import format_answer
from .identity import NAME_ID_CLAIM, NAME_IDENTIFIER_CLAIM, ClaimSet, Identity, resolve_identity
from .models import FileAttachment, Response, ResponseDetail
from .payloads import AnswerInput, FileUpload, SubmissionRequest
from .repositories import (
    FileAttachmentRepository,
    PersistenceOutcome,
    ResponseRepository,
    innermost_message,
)
from .validation import SubmissionLimits, SubmissionValidator

MIB = 1024 * 1024


def _claims(user_id: str = "1") -> ClaimSet:
    return ClaimSet({NAME_IDENTIFIER_CLAIM: user_id, "role": "Learner"})


def _create_form(status: str = Form.PUBLISHED, form_id: str = "form1") -> Form:
    return Form.objects.create(id=form_id, title="Onboarding", status=status)


def _add_question(form: Form, question_id: str, text: str, qtype: str = "text", required: bool = False, options=()):
    question = Question.objects.create(
        form=form,
        question_id=question_id,
        question_text=text,
        type=qtype,
        required=required,
        order=form.questions.count(),
    )
    for position, (option_id, value) in enumerate(options):
        Option.objects.create(question=question, option_id=option_id, value=value, order=position)
    return question


def _upload(question_id: str = "q1", name: str = "document.pdf", size: int = 1024, file_type: str = "application/pdf"):
    return FileUpload(
        question_id=question_id,
        file_name=name,
        file_type=file_type,
        file_size=size,
        base64_content=base64.b64encode(b"%PDF-1.4").decode(),
    )


class IdentityTests(SimpleTestCase):
    def test_standard_claim(self) -> None:
        self.assertEqual(resolve_identity(_claims("7")), Identity(user_id=7))

    def test_falls_back_to_name_id_claim(self) -> None:
        self.assertEqual(resolve_identity(ClaimSet({NAME_ID_CLAIM: "2"})), Identity(user_id=2))

    def test_standard_claim_takes_precedence(self) -> None:
        claims = ClaimSet({NAME_IDENTIFIER_CLAIM: "3", NAME_ID_CLAIM: "4"})
        self.assertEqual(resolve_identity(claims).user_id, 3)

    def test_rejects_unusable_values(self) -> None:
        for value in ["abc", "0", "-5", ""]:
            with self.subTest(value=value):
                self.assertIsNone(resolve_identity(_claims(value)))
        self.assertIsNone(resolve_identity(ClaimSet()))
        self.assertIsNone(resolve_identity(None))


class AnswerFormattingTests(TestCase):
    def setUp(self) -> None:
        self.form = _create_form()
        self.checkbox = _add_question(
            self.form,
            "q1",
            "Select Options",
            "checkbox",
            options=[("opt1", "Option 1"), ("opt2", "Option 2"), ("opt3", "Option 3")],
        )
        self.radio = _add_question(self.form, "q2", "Select One", "Radio", options=[("opt1", "Option 1")])
        self.text = _add_question(self.form, "q3", "Comments")

    def test_checkbox_answer_becomes_option_ids(self) -> None:
        self.assertEqual(format_answer(self.checkbox, "Option 1, Option 2"), '["opt1","opt2"]')

    def test_ids_follow_raw_answer_order(self) -> None:
        self.assertEqual(format_answer(self.checkbox, "Option 3,Option 1"), '["opt3","opt1"]')

    def test_unmatched_tokens_are_dropped(self) -> None:
        self.assertEqual(format_answer(self.checkbox, "Option 2, Nope"), '["opt2"]')

    def test_no_match_keeps_raw_answer(self) -> None:
        self.assertEqual(format_answer(self.radio, "Unknown Option"), "Unknown Option")
        self.assertEqual(format_answer(self.checkbox, ","), ",")
        self.assertEqual(format_answer(self.checkbox, "option 1"), "option 1")

    def test_free_text_is_unchanged(self) -> None:
        self.assertEqual(format_answer(self.text, "  hello, world "), "  hello, world ")
        self.assertEqual(format_answer(self.text, None), "")

    def test_formatting_is_repeatable(self) -> None:
        first = format_answer(self.checkbox, "Option 2, Option 1")
        second = format_answer(self.checkbox, "Option 2, Option 1")
        self.assertEqual(first, second)

    def test_options_on_untyped_question_are_matched(self) -> None:
        question = _add_question(self.form, "q4", "Rating", "scale", options=[("low", "Low"), ("high", "High")])
        self.assertEqual(format_answer(question, "High"), '["high"]')

    def test_option_without_id_contributes_empty_string(self) -> None:
        question = _add_question(self.form, "q5", "Pick", "radio", options=[("", "Blank id")])
        self.assertEqual(format_answer(question, "Blank id"), '[""]')


class SubmissionValidatorTests(TestCase):
    def setUp(self) -> None:
        self.limits = SubmissionLimits.build(5 * MIB, ["application/pdf", "image/png", "text/plain"])
        self.validator = SubmissionValidator(self.limits)
        self.form = _create_form()

    def test_unpublished_form(self) -> None:
        draft = _create_form(status=Form.DRAFT, form_id="draft")
        self.assertEqual(
            self.validator.validate(draft, [], []),
            ["Cannot submit to an unpublished form."],
        )

    def test_required_question_needs_non_blank_answer(self) -> None:
        _add_question(self.form, "q1", "Full name", required=True)
        for answers in ([], [AnswerInput("q1", "   ")], [AnswerInput("q1", None)], [AnswerInput("q2", "x")]):
            with self.subTest(answers=answers):
                self.assertEqual(
                    self.validator.validate(self.form, answers, []),
                    ["Question 'Full name' is required."],
                )
        self.assertEqual(self.validator.validate(self.form, [AnswerInput("q1", "Ada")], []), [])

    def test_required_file_question_needs_upload(self) -> None:
        _add_question(self.form, "q1", "Upload Document", "FileUpload", required=True)
        self.assertEqual(
            self.validator.validate(self.form, [AnswerInput("q1", "text instead")], []),
            ["File upload for 'Upload Document' is required."],
        )
        self.assertEqual(self.validator.validate(self.form, [], [_upload("q1")]), [])

    def test_file_alias_counts_as_upload_question(self) -> None:
        _add_question(self.form, "q1", "Resume", "file", required=True)
        errors = self.validator.validate(self.form, [], [])
        self.assertEqual(errors, ["File upload for 'Resume' is required."])

    def test_first_failing_question_wins(self) -> None:
        _add_question(self.form, "q1", "First", required=True)
        _add_question(self.form, "q2", "Second", required=True)
        self.assertEqual(self.validator.validate(self.form, [], []), ["Question 'First' is required."])

    def test_oversized_upload(self) -> None:
        errors = self.validator.validate(self.form, [], [_upload(size=6 * MIB, file_type="application/exe")])
        self.assertEqual(len(errors), 1)
        self.assertIn("exceeds maximum size of 5MB", errors[0])

    def test_upload_at_limit_is_accepted(self) -> None:
        self.assertEqual(self.validator.validate(self.form, [], [_upload(size=5 * MIB)]), [])

    def test_oversized_content_without_declared_size(self) -> None:
        content = base64.b64encode(b"\0" * (6 * MIB)).decode()
        upload = FileUpload("q1", "big.pdf", "application/pdf", 0, content)
        errors = self.validator.validate(self.form, [], [upload])
        self.assertEqual(errors, ["File 'big.pdf' exceeds maximum size of 5MB."])

    def test_understated_size_uses_content_length(self) -> None:
        content = base64.b64encode(b"\0" * (6 * MIB)).decode()
        upload = FileUpload("q1", "big.pdf", "application/pdf", 10, content)
        self.assertIn("exceeds maximum size of 5MB", self.validator.validate(self.form, [], [upload])[0])

    def test_malformed_content(self) -> None:
        upload = FileUpload("q1", "broken.pdf", "application/pdf", 12, "not base64!!")
        self.assertEqual(
            self.validator.validate(self.form, [], [upload]),
            ["File 'broken.pdf' is not valid base64 content."],
        )

    def test_disallowed_type(self) -> None:
        errors = self.validator.validate(self.form, [], [_upload(name="file.exe", file_type="application/exe")])
        self.assertEqual(errors, ["File type 'application/exe' is not allowed."])

    def test_type_comparison_ignores_case(self) -> None:
        self.assertEqual(self.validator.validate(self.form, [], [_upload(file_type="Application/PDF")]), [])

    def test_limits_can_be_overridden(self) -> None:
        validator = SubmissionValidator(SubmissionLimits.build(1024, ["application/zip"]))
        errors = validator.validate(self.form, [], [_upload(size=2048, file_type="application/zip")])
        self.assertIn("exceeds maximum size of", errors[0])
        self.assertEqual(validator.validate(self.form, [], [_upload(size=10, file_type="application/zip")]), [])

    def test_default_limits_come_from_settings(self) -> None:
        with self.settings(FORMBUILDER_MAX_UPLOAD_BYTES=10, FORMBUILDER_ALLOWED_UPLOAD_TYPES=["text/plain"]):
            limits = SubmissionValidator().limits
        self.assertEqual(limits.max_file_size, 10)
        self.assertEqual(limits.allowed_file_types, frozenset({"text/plain"}))


class AttachmentProcessorTests(TestCase):
    def setUp(self) -> None:
        self.response = Response(form_id="form1", user_id=1)

    def test_uploads_for_one_question_stay_separate(self) -> None:
        uploads = [_upload("q1", "a.pdf"), _upload("q1", "b.pdf"), _upload("q2", "c.pdf")]
        prepared = AttachmentProcessor().prepare(uploads, self.response, None)

        self.assertEqual([a.file_name for a in prepared.attachments], ["a.pdf", "b.pdf", "c.pdf"])
        self.assertTrue(all(a.response is self.response for a in prepared.attachments))
        self.assertEqual([s.question_id for s in prepared.summaries], ["q1", "q2"])
        self.assertIn("a.pdf", prepared.summaries[0].answer)
        self.assertIn("b.pdf", prepared.summaries[0].answer)

    def test_existing_answer_suppresses_summary(self) -> None:
        prepared = AttachmentProcessor().prepare([_upload("q1")], self.response, None, answered_question_ids={"q1"})
        self.assertEqual(len(prepared.attachments), 1)
        self.assertEqual(prepared.summaries, [])

    def test_missing_size_is_derived_from_content(self) -> None:
        upload = FileUpload("q1", "notes.txt", "text/plain", 0, base64.b64encode(b"hello").decode())
        prepared = AttachmentProcessor().prepare([upload], self.response, None)
        self.assertEqual(prepared.attachments[0].file_size, 5)
        self.assertEqual(encoded_size(""), 0)

    def test_content_is_decoded(self) -> None:
        upload = FileUpload("q1", "notes.txt", "text/plain", 0, "aGVs\nbG8=")
        prepared = AttachmentProcessor().prepare([upload], self.response, None)
        self.assertEqual(prepared.attachments[0].base64_content, "aGVsbG8=")
        self.assertEqual(decode_content(prepared.attachments[0]), b"hello")

    def test_malformed_content_raises(self) -> None:
        upload = FileUpload("q1", "broken.pdf", "application/pdf", 12, "not base64!!")
        with self.assertRaises(binascii.Error):
            AttachmentProcessor().prepare([upload], self.response, None)


class InnermostMessageTests(SimpleTestCase):
    def test_prefers_direct_cause(self) -> None:
        try:
            raise DatabaseError("outer") from ValueError("inner")
        except DatabaseError as exc:
            self.assertEqual(innermost_message(exc), "inner")

    def test_uses_own_message_without_cause(self) -> None:
        self.assertEqual(innermost_message(RuntimeError("boom")), "boom")


class FailingAttachmentRepository(FileAttachmentRepository):
    def save_changes(self) -> PersistenceOutcome:
        self.discard_pending()
        try:
            raise DatabaseError("attachment write failed") from OSError("disk quota exceeded")
        except DatabaseError as exc:
            return PersistenceOutcome.failure("insert file attachments", exc)


class RaisingAttachmentRepository(FileAttachmentRepository):
    def save_changes(self) -> PersistenceOutcome:
        raise RuntimeError("storage unavailable") from ConnectionError("connection reset")


class RecordingResponseRepository(ResponseRepository):
    def __init__(self, fail_delete: bool = False) -> None:
        self.deleted: List[int] = []
        self.fail_delete = fail_delete

    def delete(self, response_id: int) -> PersistenceOutcome:
        self.deleted.append(response_id)
        if self.fail_delete:
            raise DatabaseError("delete failed")
        return super().delete(response_id)


class SubmissionCoordinatorTests(TestCase):
    def setUp(self) -> None:
        self.form = _create_form()
        self.coordinator = SubmissionCoordinator()

    def _submit(self, answers=(), uploads=(), form_id: str = "form1", claims=None, coordinator=None):
        request = SubmissionRequest(form_id=form_id, answers=list(answers), file_uploads=list(uploads))
        return (coordinator or self.coordinator).submit(request, claims if claims is not None else _claims())

    def test_valid_submission(self) -> None:
        _add_question(self.form, "q1", "Question 1", required=True)

        result = self._submit([AnswerInput("q1", "Answer 1")])

        self.assertTrue(result.success)
        self.assertEqual(result.message, "Response submitted successfully")
        self.assertIsNotNone(result.data.pk)
        self.assertEqual(result.data.user_id, 1)
        self.assertEqual(result.data.form_id, "form1")
        self.assertEqual(list(result.data.details.values_list("question_id", "answer")), [("q1", "Answer 1")])
        self.assertEqual(
            result.trace.states,
            [
                SubmissionState.VALIDATING,
                SubmissionState.FORMATTING,
                SubmissionState.PERSISTING,
                SubmissionState.COMMITTED,
            ],
        )
        self.assertFalse(result.trace.cleanup_attempted)

    def test_invalid_user(self) -> None:
        result = self._submit(claims=ClaimSet())
        self.assertEqual(result.as_tuple(), (False, "Invalid user ID.", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.INVALID_IDENTITY)
        self.assertEqual(Response.objects.count(), 0)

    def test_name_id_claim_fallback(self) -> None:
        result = self._submit(claims=ClaimSet({NAME_ID_CLAIM: "2"}))
        self.assertTrue(result.success)
        self.assertEqual(Response.objects.get().user_id, 2)

    def test_empty_form_id(self) -> None:
        result = self._submit(form_id="")
        self.assertEqual(result.as_tuple(), (False, "Form ID is required.", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.INVALID_INPUT)

    def test_unknown_form(self) -> None:
        result = self._submit(form_id="invalid")
        self.assertEqual(result.as_tuple(), (False, "Invalid form ID.", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.NOT_FOUND)

    def test_unpublished_form_writes_nothing(self) -> None:
        _create_form(status=Form.DRAFT, form_id="draft")
        result = self._submit([AnswerInput("q1", "x")], [_upload()], form_id="draft")
        self.assertEqual(result.as_tuple(), (False, "Cannot submit to an unpublished form.", None))
        self.assertEqual(result.trace.state, SubmissionState.REJECTED)
        self.assertEqual(Response.objects.count(), 0)
        self.assertEqual(FileAttachment.objects.count(), 0)

    def test_missing_required_answer(self) -> None:
        _add_question(self.form, "q1", "Required Question", required=True)
        result = self._submit([])
        self.assertEqual(result.as_tuple(), (False, "Question 'Required Question' is required.", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.VALIDATION_FAILED)

    def test_oversized_file_on_form_without_questions(self) -> None:
        result = self._submit(uploads=[_upload("q1", "large.pdf", size=6 * MIB)])
        self.assertFalse(result.success)
        self.assertIn("exceeds maximum size of 5MB", result.message)
        self.assertIsNone(result.data)
        self.assertEqual(Response.objects.count(), 0)

    def test_checkbox_answer_is_formatted(self) -> None:
        _add_question(
            self.form,
            "q1",
            "Select Options",
            "checkbox",
            options=[("opt1", "Option 1"), ("opt2", "Option 2"), ("opt3", "Option 3")],
        )
        result = self._submit([AnswerInput("q1", "Option 1, Option 2")])
        self.assertTrue(result.success)
        self.assertEqual(ResponseDetail.objects.get().answer, '["opt1","opt2"]')

    def test_unmatched_radio_answer_is_kept(self) -> None:
        _add_question(self.form, "q1", "Select One", "radio", options=[("opt1", "Option 1")])
        self._submit([AnswerInput("q1", "Unknown Option")])
        self.assertEqual(ResponseDetail.objects.get().answer, "Unknown Option")

    def test_file_uploads_are_saved_with_one_detail_per_question(self) -> None:
        _add_question(self.form, "q1", "Documents", "fileupload", required=True)

        result = self._submit(uploads=[_upload("q1", "a.pdf"), _upload("q1", "b.pdf")])

        self.assertTrue(result.success)
        attachments = FileAttachment.objects.filter(response=result.data)
        self.assertEqual(sorted(attachments.values_list("file_name", flat=True)), ["a.pdf", "b.pdf"])
        details = list(result.data.details.all())
        self.assertEqual(len(details), 1)
        self.assertEqual(details[0].question_id, "q1")
        self.assertIn("a.pdf", details[0].answer)
        self.assertIn("b.pdf", details[0].answer)

    def test_text_answer_wins_over_upload_summary(self) -> None:
        result = self._submit([AnswerInput("q1", "typed text")], [_upload("q1")])
        self.assertTrue(result.success)
        self.assertEqual(list(result.data.details.values_list("answer", flat=True)), ["typed text"])
        self.assertEqual(FileAttachment.objects.count(), 1)

    def test_attachment_failure_rolls_back_and_deletes_response(self) -> None:
        responses = RecordingResponseRepository()
        coordinator = SubmissionCoordinator(
            response_repository=responses,
            attachment_repository=FailingAttachmentRepository(),
        )

        result = self._submit([AnswerInput("q1", "x")], [_upload()], coordinator=coordinator)

        self.assertEqual(result.as_tuple(), (False, "Error submitting response: disk quota exceeded", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.PERSISTENCE_FAILURE)
        self.assertIsNotNone(result.trace.response_id)
        self.assertEqual(responses.deleted, [result.trace.response_id])
        self.assertEqual(result.trace.cleanup, CLEANUP_OK)
        self.assertEqual(result.trace.state, SubmissionState.ROLLED_BACK)
        self.assertEqual(Response.objects.count(), 0)
        self.assertEqual(ResponseDetail.objects.count(), 0)
        self.assertEqual(FileAttachment.objects.count(), 0)

    def test_unexpected_exception_reports_inner_message(self) -> None:
        coordinator = SubmissionCoordinator(attachment_repository=RaisingAttachmentRepository())
        with self.assertLogs("submissions.coordinator", level="ERROR"):
            result = self._submit(uploads=[_upload()], coordinator=coordinator)
        self.assertFalse(result.success)
        self.assertEqual(result.message, "Error submitting response: connection reset")
        self.assertEqual(Response.objects.count(), 0)

    def test_failed_cleanup_does_not_mask_original_error(self) -> None:
        responses = RecordingResponseRepository(fail_delete=True)
        coordinator = SubmissionCoordinator(
            response_repository=responses,
            attachment_repository=FailingAttachmentRepository(),
        )
        result = self._submit(uploads=[_upload()], coordinator=coordinator)
        self.assertEqual(result.message, "Error submitting response: disk quota exceeded")
        self.assertEqual(len(responses.deleted), 1)
        self.assertEqual(result.trace.cleanup, CLEANUP_FAILED)

    def test_response_insert_failure_skips_cleanup(self) -> None:
        responses = RecordingResponseRepository()
        failure = PersistenceOutcome.failure("insert response", DatabaseError("table locked"))
        with mock.patch.object(responses, "insert", return_value=failure):
            result = self._submit(coordinator=SubmissionCoordinator(response_repository=responses))
        self.assertEqual(result.message, "Error submitting response: table locked")
        self.assertEqual(responses.deleted, [])
        self.assertIsNone(result.trace.cleanup)

    def test_transaction_that_cannot_open(self) -> None:
        responses = RecordingResponseRepository()
        transactions = mock.Mock()
        transactions.begin.side_effect = DatabaseError("connection refused")
        coordinator = SubmissionCoordinator(response_repository=responses, transactions=transactions)

        with self.assertLogs("submissions.coordinator", level="ERROR"):
            result = self._submit(coordinator=coordinator)

        self.assertEqual(result.as_tuple(), (False, "Error submitting response: connection refused", None))
        self.assertEqual(result.error_kind, SubmissionErrorKind.PERSISTENCE_FAILURE)
        self.assertEqual(responses.deleted, [])
        self.assertIsNone(result.trace.cleanup)
        self.assertEqual(Response.objects.count(), 0)

    def test_oversized_content_without_declared_size_writes_nothing(self) -> None:
        content = base64.b64encode(b"\0" * (6 * MIB)).decode()
        upload = FileUpload("q1", "big.pdf", "application/pdf", 0, content)
        result = self._submit(uploads=[upload])
        self.assertEqual(result.as_tuple(), (False, "File 'big.pdf' exceeds maximum size of 5MB.", None))
        self.assertEqual(Response.objects.count(), 0)
        self.assertEqual(FileAttachment.objects.count(), 0)


class ResponseApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.form = _create_form()
        _add_question(self.form, "q1", "Name", required=True)
        _add_question(self.form, "q2", "Attachment", "fileupload")

    def _post(self, payload, claims=None):
        headers = {}
        if claims is not False:
            headers["HTTP_X_AUTH_CLAIMS"] = json.dumps(claims or {NAME_IDENTIFIER_CLAIM: "1"})
        return self.client.post(reverse("response-list"), payload, format="json", **headers)

    def _payload(self):
        return {
            "form_id": "form1",
            "answers": [{"question_id": "q1", "answer": "Ada"}],
            "file_uploads": [
                {
                    "question_id": "q2",
                    "file_name": "test.pdf",
                    "file_type": "application/pdf",
                    "file_size": 3,
                    "base64_content": base64.b64encode(b"\x01\x02\x03").decode(),
                }
            ],
        }

    def test_submit_and_read_back(self) -> None:
        response = self._post(self._payload())
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["message"], "Response submitted successfully")
        response_id = response.data["responseId"]

        listing = self.client.get(reverse("response-list"), {"form_id": "form1"})
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.data), 1)

        detail = self.client.get(reverse("response-detail", args=[response_id]))
        self.assertEqual(detail.status_code, 200)
        self.assertEqual([d["question_id"] for d in detail.data["details"]], ["q1", "q2"])

        with_files = self.client.get(reverse("response-files", args=[response_id]))
        self.assertEqual(with_files.status_code, 200)
        self.assertEqual(with_files.data["files"][0]["file_name"], "test.pdf")
        self.assertNotIn("base64_content", with_files.data["files"][0])

        download = self.client.get(reverse("response-file-download", args=[response_id, "q2"]))
        self.assertEqual(download.status_code, 200)
        self.assertEqual(download["Content-Type"], "application/pdf")
        self.assertIn('filename="test.pdf"', download["Content-Disposition"])
        self.assertEqual(download.content, b"\x01\x02\x03")

    def test_rejected_submission(self) -> None:
        payload = self._payload()
        payload["answers"] = []
        response = self._post(payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"success": False, "message": "Question 'Name' is required."})

    def test_malformed_file_content_is_rejected(self) -> None:
        payload = self._payload()
        payload["file_uploads"][0]["base64_content"] = "not base64!!"
        response = self._post(payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "File 'test.pdf' is not valid base64 content.")
        self.assertEqual(Response.objects.count(), 0)
        self.assertEqual(FileAttachment.objects.count(), 0)

    def test_missing_claims(self) -> None:
        response = self._post(self._payload(), claims=False)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Invalid user ID.")

    def test_malformed_claims_header(self) -> None:
        response = self.client.post(
            reverse("response-list"), self._payload(), format="json", HTTP_X_AUTH_CLAIMS="not json"
        )
        self.assertEqual(response.status_code, 401)

    def test_unknown_response(self) -> None:
        response = self.client.get(reverse("response-detail", args=["999"]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "Response not found")

    def test_invalid_response_id(self) -> None:
        for name, args in [
            ("response-detail", ["invalid"]),
            ("response-files", ["invalid"]),
            ("response-file-download", ["invalid", "q1"]),
        ]:
            with self.subTest(name=name):
                response = self.client.get(reverse(name, args=args))
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.data, {"success": False, "message": "Invalid response ID"})

    def test_missing_file(self) -> None:
        submitted = self._post(self._payload())
        response = self.client.get(
            reverse("response-file-download", args=[submitted.data["responseId"], "q1"])
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "File not found")

    def test_listing_requires_form_id(self) -> None:
        response = self.client.get(reverse("response-list"))
        self.assertEqual(response.status_code, 400)
