"""Turn validated file uploads into attachment rows."""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import Collection, Dict, List, Sequence

from .models import FileAttachment, Response
from .payloads import FileUpload


@dataclass(frozen=True)
class AttachmentSummary:
    question_id: str
    answer: str


@dataclass
class PreparedAttachments:
    attachments: List[FileAttachment] = field(default_factory=list)
    summaries: List[AttachmentSummary] = field(default_factory=list)


def group_by_question(file_uploads: Sequence[FileUpload]) -> Dict[str, List[FileUpload]]:
    grouped: Dict[str, List[FileUpload]] = {}
    for upload in file_uploads:
        grouped.setdefault(upload.question_id, []).append(upload)
    return grouped


def encoded_size(base64_content: str) -> int:
    """Byte length of the payload behind a base64 string, without decoding it."""

    content = "".join((base64_content or "").split())
    if not content:
        return 0
    padding = len(content) - len(content.rstrip("="))
    return max((len(content) * 3) // 4 - padding, 0)


def effective_size(upload: FileUpload) -> int:
    return max(upload.file_size or 0, encoded_size(upload.base64_content))


def decode_upload(upload: FileUpload) -> bytes:
    """Decode strictly; raises ``binascii.Error`` for malformed content."""

    return base64.b64decode("".join((upload.base64_content or "").split()), validate=True)


def decode_content(attachment: FileAttachment) -> bytes:
    return base64.b64decode(attachment.base64_content)


def summarize(uploads: Sequence[FileUpload]) -> str:
    names = ", ".join(upload.file_name for upload in uploads)
    if len(uploads) == 1:
        return f"Uploaded file: {names}"
    return f"Uploaded {len(uploads)} files: {names}"


class AttachmentProcessor:
    def prepare(
        self,
        file_uploads: Sequence[FileUpload],
        response: Response,
        uploaded_at: datetime,
        answered_question_ids: Collection[str] = (),
    ) -> PreparedAttachments:
        """Build one attachment per upload and one summary per upload question.

        Uploads sharing a question id stay separate rows. No summary is built
        for a question that already has an answer. Content is decoded here, so
        malformed base64 raises ``binascii.Error``.
        """

        prepared = PreparedAttachments()
        for question_id, uploads in group_by_question(file_uploads).items():
            for upload in uploads:
                content = decode_upload(upload)
                prepared.attachments.append(
                    FileAttachment(
                        response=response,
                        question_id=question_id,
                        file_name=upload.file_name,
                        file_type=upload.file_type,
                        file_size=upload.file_size or len(content),
                        base64_content=base64.b64encode(content).decode("ascii"),
                        uploaded_at=uploaded_at,
                    )
                )
            if question_id not in answered_question_ids:
                prepared.summaries.append(AttachmentSummary(question_id, summarize(uploads)))
        return prepared
