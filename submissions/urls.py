"""Route registration for response endpoints."""
from __future__ import annotations

from django.urls import path

from .views import (
    FileDownloadView,
    ResponseCollectionView,
    ResponseDetailView,
    ResponseFilesView,
)

urlpatterns = [
    path("responses/", ResponseCollectionView.as_view(), name="response-list"),
    path("responses/<str:response_id>/", ResponseDetailView.as_view(), name="response-detail"),
    path("responses/<str:response_id>/files/", ResponseFilesView.as_view(), name="response-files"),
    path(
        "responses/<str:response_id>/files/<str:question_id>/",
        FileDownloadView.as_view(),
        name="response-file-download",
    ),
]
