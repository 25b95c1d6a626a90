"""Database models for collected form responses."""
from __future__ import annotations

from django.db import models


class Response(models.Model):
    """One user's submission against a form."""

    form_id = models.CharField(max_length=64, db_index=True)
    user_id = models.IntegerField()
    submitted_at = models.DateTimeField()

    class Meta:
        ordering = ["-submitted_at", "id"]

    def __str__(self) -> str:
        return f"Response {self.pk} to {self.form_id}"


class ResponseDetail(models.Model):
    """The persisted answer to one question within a response."""

    response = models.ForeignKey(Response, related_name="details", on_delete=models.CASCADE)
    question_id = models.CharField(max_length=64)
    answer = models.TextField(blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"{self.question_id}: {self.answer[:40]}"


class FileAttachment(models.Model):
    """An uploaded file tied to a response and a question."""

    response = models.ForeignKey(Response, related_name="attachments", on_delete=models.CASCADE)
    question_id = models.CharField(max_length=64)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=255)
    file_size = models.BigIntegerField(default=0)
    base64_content = models.TextField()
    uploaded_at = models.DateTimeField()

    class Meta:
        ordering = ["id"]
        indexes = [models.Index(fields=["response", "question_id"], name="attachment_response_question_idx")]

    def __str__(self) -> str:
        return f"{self.file_name} ({self.file_type})"
