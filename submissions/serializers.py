"""Serializers for submissions and stored responses."""
from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from .models import FileAttachment, Response, ResponseDetail
from .payloads import AnswerInput, FileUpload, SubmissionRequest


class AnswerInputSerializer(serializers.Serializer):
    question_id = serializers.CharField(max_length=64)
    answer = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False, default="")


class FileUploadSerializer(serializers.Serializer):
    question_id = serializers.CharField(max_length=64)
    file_name = serializers.CharField(max_length=255)
    file_type = serializers.CharField(max_length=255)
    file_size = serializers.IntegerField(min_value=0, required=False, default=0)
    base64_content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, default="")


class SubmissionRequestSerializer(serializers.Serializer):
    form_id = serializers.CharField(required=False, allow_blank=True, default="")
    answers = AnswerInputSerializer(many=True, required=False, default=list)
    file_uploads = FileUploadSerializer(many=True, required=False, allow_null=True, default=list)

    def to_submission(self) -> SubmissionRequest:
        data: Dict[str, Any] = self.validated_data
        return SubmissionRequest(
            form_id=data.get("form_id") or "",
            answers=[AnswerInput(**answer) for answer in data.get("answers") or []],
            file_uploads=[FileUpload(**upload) for upload in data.get("file_uploads") or []],
        )


class ResponseDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = ResponseDetail
        fields = ["question_id", "answer"]


class ResponseSerializer(serializers.ModelSerializer):
    details = ResponseDetailSerializer(many=True, read_only=True)

    class Meta:
        model = Response
        fields = ["id", "form_id", "user_id", "submitted_at", "details"]


class FileAttachmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = FileAttachment
        fields = ["id", "question_id", "file_name", "file_type", "file_size", "uploaded_at"]


class ResponseWithFilesSerializer(ResponseSerializer):
    files = serializers.SerializerMethodField()

    class Meta(ResponseSerializer.Meta):
        fields = ResponseSerializer.Meta.fields + ["files"]

    def get_files(self, instance: Response):
        attachments = self.context.get("attachments")
        if attachments is None:
            attachments = instance.attachments.all()
        return FileAttachmentSerializer(attachments, many=True).data
