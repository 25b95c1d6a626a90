"""API views for submitting and reading responses."""
from __future__ import annotations

from django.http import HttpResponse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .attachments import decode_content
from .coordinator import SubmissionCoordinator
from .repositories import FileAttachmentRepository, ResponseRepository
from .serializers import (
    ResponseSerializer,
    ResponseWithFilesSerializer,
    SubmissionRequestSerializer,
)

INVALID_RESPONSE_ID = "Invalid response ID"


def _parse_response_id(raw: str):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _invalid_response_id() -> Response:
    return Response(
        {"success": False, "message": INVALID_RESPONSE_ID},
        status=status.HTTP_400_BAD_REQUEST,
    )


class ResponseCollectionView(APIView):
    coordinator_class = SubmissionCoordinator

    def get(self, request: Request) -> Response:
        form_id = request.query_params.get("form_id", "")
        if not form_id:
            return Response(
                {"success": False, "message": "Form ID is required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        responses = ResponseRepository().get_by_form_id(form_id)
        return Response(ResponseSerializer(responses, many=True).data)

    def post(self, request: Request) -> Response:
        payload_serializer = SubmissionRequestSerializer(data=request.data)
        payload_serializer.is_valid(raise_exception=True)

        result = self.coordinator_class().submit(payload_serializer.to_submission(), request.auth)
        if not result.success:
            return Response(
                {"success": False, "message": result.message},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(
            {
                "success": True,
                "message": result.message,
                "responseId": result.data.pk,
                "response": ResponseSerializer(result.data).data,
            }
        )


class ResponseDetailView(APIView):
    def get(self, request: Request, response_id: str) -> Response:
        pk = _parse_response_id(response_id)
        if pk is None:
            return _invalid_response_id()
        response = ResponseRepository().get_by_id(pk)
        if response is None:
            return Response({"detail": "Response not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ResponseSerializer(response).data)


class ResponseFilesView(APIView):
    def get(self, request: Request, response_id: str) -> Response:
        pk = _parse_response_id(response_id)
        if pk is None:
            return _invalid_response_id()
        response = ResponseRepository().get_by_id(pk)
        if response is None:
            return Response({"detail": "Response not found"}, status=status.HTTP_404_NOT_FOUND)
        attachments = FileAttachmentRepository().get_by_response_id(pk)
        serializer = ResponseWithFilesSerializer(response, context={"attachments": attachments})
        return Response(serializer.data)


class FileDownloadView(APIView):
    def get(self, request: Request, response_id: str, question_id: str):
        pk = _parse_response_id(response_id)
        if pk is None:
            return _invalid_response_id()
        attachment = FileAttachmentRepository().get_by_response_and_question(pk, question_id)
        if attachment is None:
            return Response({"detail": "File not found"}, status=status.HTTP_404_NOT_FOUND)
        download = HttpResponse(decode_content(attachment), content_type=attachment.file_type)
        download["Content-Disposition"] = f'attachment; filename="{attachment.file_name}"'
        return download
