"""Lookups for form definitions used by the submission pipeline."""
from __future__ import annotations

from typing import List, Optional

from .models import Form


class FormRepository:
    def _queryset(self):
        return Form.objects.prefetch_related("questions__options")

    def get_by_id(self, form_id: str) -> Optional[Form]:
        if not form_id:
            return None
        return self._queryset().filter(pk=form_id).first()

    def get_by_status(self, status: str) -> List[Form]:
        return list(self._queryset().filter(status=status))
