"""Explicit commit/rollback handles over Django's atomic blocks."""
from __future__ import annotations

from typing import Optional

from django.db import DEFAULT_DB_ALIAS, transaction


class AtomicTransaction:
    """An ``atomic()`` block entered on :meth:`begin` and left on commit or rollback."""

    def __init__(self, using: Optional[str] = None) -> None:
        self.using = using or DEFAULT_DB_ALIAS
        self._atomic = transaction.atomic(using=self.using)
        self._open = False

    def begin(self) -> "AtomicTransaction":
        self._atomic.__enter__()
        self._open = True
        return self

    def commit(self) -> None:
        if not self._open:
            return
        self._open = False
        self._atomic.__exit__(None, None, None)

    def rollback(self) -> None:
        if not self._open:
            return
        self._open = False
        transaction.set_rollback(True, using=self.using)
        self._atomic.__exit__(None, None, None)


class TransactionProvider:
    def __init__(self, using: Optional[str] = None) -> None:
        self.using = using

    def begin(self) -> AtomicTransaction:
        return AtomicTransaction(self.using).begin()
