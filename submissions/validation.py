"""Schema checks applied to a submission before anything is written."""
from __future__ import annotations

import binascii
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence

from django.conf import settings

from .attachments import decode_upload, effective_size
from .payloads import AnswerInput, FileUpload

UNPUBLISHED_FORM_MESSAGE = "Cannot submit to an unpublished form."


@dataclass(frozen=True)
class SubmissionLimits:
    """Upload constraints enforced by :class:`SubmissionValidator`."""

    max_file_size: int
    allowed_file_types: FrozenSet[str]

    @classmethod
    def build(cls, max_file_size: int, allowed_file_types: Iterable[str]) -> "SubmissionLimits":
        return cls(
            max_file_size=int(max_file_size),
            allowed_file_types=frozenset(value.strip().lower() for value in allowed_file_types),
        )

    @classmethod
    def from_settings(cls) -> "SubmissionLimits":
        return cls.build(
            settings.FORMBUILDER_MAX_UPLOAD_BYTES,
            settings.FORMBUILDER_ALLOWED_UPLOAD_TYPES,
        )

    @property
    def max_file_size_label(self) -> str:
        megabytes = self.max_file_size / (1024 * 1024)
        if megabytes.is_integer():
            return f"{int(megabytes)}MB"
        return f"{megabytes:.1f}MB"

    def is_allowed_type(self, file_type: Optional[str]) -> bool:
        return (file_type or "").strip().lower() in self.allowed_file_types


class SubmissionValidator:
    def __init__(self, limits: Optional[SubmissionLimits] = None) -> None:
        self.limits = limits or SubmissionLimits.from_settings()

    def validate(
        self,
        form,
        answers: Sequence[AnswerInput],
        file_uploads: Sequence[FileUpload],
    ) -> List[str]:
        """Return an empty list when the submission is acceptable.

        Otherwise the list holds the single message of the first failing rule.
        """

        if not form.is_published:
            return [UNPUBLISHED_FORM_MESSAGE]

        answered = {
            answer.question_id
            for answer in answers
            if (answer.answer or "").strip()
        }
        uploaded = {upload.question_id for upload in file_uploads}

        for question in form.questions.all():
            if not question.required:
                continue
            if question.is_file_upload:
                if question.question_id not in uploaded:
                    return [f"File upload for '{question.question_text}' is required."]
            elif question.question_id not in answered:
                return [f"Question '{question.question_text}' is required."]

        for upload in file_uploads:
            if effective_size(upload) > self.limits.max_file_size:
                return [
                    f"File '{upload.file_name}' exceeds maximum size of "
                    f"{self.limits.max_file_size_label}."
                ]
            if not self.limits.is_allowed_type(upload.file_type):
                return [f"File type '{upload.file_type}' is not allowed."]
            try:
                decode_upload(upload)
            except binascii.Error:
                return [f"File '{upload.file_name}' is not valid base64 content."]

        return []
