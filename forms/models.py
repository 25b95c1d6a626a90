"""Database models for form definitions."""
from __future__ import annotations

import uuid

from django.db import models


def _generate_form_id() -> str:
    return uuid.uuid4().hex


class Form(models.Model):
    """A form definition with a draft/published lifecycle."""

    DRAFT = "draft"
    PUBLISHED = "published"

    STATUS_CHOICES = [
        (DRAFT, "Draft"),
        (PUBLISHED, "Published"),
    ]

    id = models.CharField(primary_key=True, max_length=64, default=_generate_form_id, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=DRAFT)
    created_by = models.CharField(max_length=255, blank=True)
    published_by = models.CharField(max_length=255, blank=True)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"

    @property
    def is_published(self) -> bool:
        return self.status == self.PUBLISHED

    @property
    def is_draft(self) -> bool:
        return self.status == self.DRAFT


class Question(models.Model):
    """One prompt within a form."""

    TEXT = "text"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE_UPLOAD = "fileupload"

    FILE_UPLOAD_TYPES = frozenset({"fileupload", "file"})
    CHOICE_TYPES = frozenset({"radio", "checkbox", "dropdown", "select"})

    form = models.ForeignKey(Form, related_name="questions", on_delete=models.CASCADE)
    question_id = models.CharField(max_length=64)
    question_text = models.CharField(max_length=500)
    type = models.CharField(max_length=32, default=TEXT)
    required = models.BooleanField(default=False)
    description = models.TextField(blank=True)
    description_enabled = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]
        unique_together = ("form", "question_id")

    def __str__(self) -> str:
        return f"{self.question_text} ({self.type})"

    @property
    def normalized_type(self) -> str:
        return (self.type or "").strip().lower()

    @property
    def is_file_upload(self) -> bool:
        return self.normalized_type in self.FILE_UPLOAD_TYPES

    @property
    def is_choice(self) -> bool:
        return self.normalized_type in self.CHOICE_TYPES


class Option(models.Model):
    """A selectable choice owned by a single question."""

    question = models.ForeignKey(Question, related_name="options", on_delete=models.CASCADE)
    option_id = models.CharField(max_length=64, blank=True)
    value = models.CharField(max_length=500)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["question", "option_id"],
                condition=~models.Q(option_id=""),
                name="unique_option_id_per_question",
            )
        ]

    def __str__(self) -> str:
        return self.value
