"""API views for form definitions."""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from submissions.identity import resolve_identity
from submissions.repositories import ResponseRepository

from .models import Form
from .repositories import FormRepository
from .serializers import FormLayoutSerializer, FormSerializer

logger = logging.getLogger(__name__)


def _caller_reference(request) -> str:
    identity = resolve_identity(request.auth)
    return str(identity.user_id) if identity is not None else ""


class FormViewSet(viewsets.ModelViewSet):
    queryset = Form.objects.prefetch_related("questions__options").all()
    serializer_class = FormSerializer
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["title", "description"]
    ordering_fields = ["title", "created_at", "updated_at"]
    ordering = ["-created_at"]

    def perform_create(self, serializer):  # type: ignore[override]
        serializer.save(created_by=_caller_reference(self.request))

    def perform_update(self, serializer):  # type: ignore[override]
        if not serializer.instance.is_draft:
            raise serializers.ValidationError({"status": "Only draft forms can be modified."})
        with transaction.atomic():
            serializer.save()

    def destroy(self, request, *args, **kwargs):  # type: ignore[override]
        form = self.get_object()
        with transaction.atomic():
            deleted = ResponseRepository().delete_by_form_id(form.id)
            form.delete()
        logger.info("Form %s deleted with %s response(s)", kwargs.get("pk"), deleted)
        return Response(
            {
                "success": True,
                "message": f"Form and {deleted} response(s) deleted successfully",
            }
        )

    @action(detail=True, methods=["post"], url_path="publish")
    def publish(self, request, *args, **kwargs):  # type: ignore[override]
        """Open a draft form for submissions."""

        form = self.get_object()
        if not form.questions.exists():
            return Response(
                {"detail": "Cannot publish a form without questions."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        form.status = Form.PUBLISHED
        form.published_by = _caller_reference(request)
        form.published_at = timezone.now()
        form.save(update_fields=["status", "published_by", "published_at", "updated_at"])
        serializer = self.get_serializer(form)
        return Response(serializer.data)

    @action(detail=False, methods=["get"], url_path="published")
    def published(self, request, *args, **kwargs):  # type: ignore[override]
        """List forms that currently accept submissions."""

        forms = FormRepository().get_by_status(Form.PUBLISHED)
        return Response(FormLayoutSerializer(forms, many=True).data)


@api_view(["GET"])
def health(request):  # type: ignore[override]
    """Readiness endpoint for orchestration tooling."""

    return Response({"status": "ok"})
