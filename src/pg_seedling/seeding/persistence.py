"""Persistence engine interface used by the seeding orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Mapping, Sequence

from pg_seedling.schema.provider import ModelHandle


class TransactionScope(ABC):
    """Handle valid only inside an open transaction."""

    @abstractmethod
    def bulk_insert(
        self,
        model: ModelHandle,
        records: Sequence[Mapping[str, Any]],
    ) -> int:
        """Insert every record as one operation and return the row count."""


class PersistenceEngine(ABC):
    """Commit-on-success, rollback-on-exception transactional writer."""

    @abstractmethod
    def begin_transaction(self) -> AbstractContextManager[TransactionScope]:
        """Open an all-or-nothing transaction scope."""
