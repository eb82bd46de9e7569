"""Shared pieces of the resource lifecycle layer.

A lifecycle engine drives each resource through create, read, update, delete
and import. Client errors are wrapped in ResourceError so the engine can show a
summary plus the underlying detail for a failed plan/apply step.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from ..core.superset import HTTPStatusError, SupersetAdminClient

ModelT = TypeVar("ModelT")


class ResourceError(Exception):
    """Failed lifecycle step with a short summary and a detail message."""

    def __init__(self, summary: str, detail: str):
        self.summary = summary
        self.detail = detail
        super().__init__(f"{summary}: {detail}")

    def to_dict(self) -> dict:
        return {"summary": self.summary, "detail": self.detail}


class Resource(ABC, Generic[ModelT]):
    """Lifecycle callbacks for one managed entity type."""

    type_name: str = ""

    def __init__(self, client: SupersetAdminClient):
        self.client = client

    @abstractmethod
    def create(self, plan: ModelT) -> ModelT:
        raise NotImplementedError

    @abstractmethod
    def read(self, state: ModelT) -> ModelT:
        raise NotImplementedError

    @abstractmethod
    def update(self, plan: ModelT, state: ModelT) -> ModelT:
        raise NotImplementedError

    @abstractmethod
    def delete(self, state: ModelT) -> None:
        raise NotImplementedError

    @abstractmethod
    def import_state(self, import_id: str) -> ModelT:
        raise NotImplementedError


def is_not_found(exc: Exception) -> bool:
    return isinstance(exc, HTTPStatusError) and exc.status_code == 404


def reconcile_ids(prior: Optional[List[int]], observed: List[int]) -> List[int]:
    """Keep the prior ordering when the server returned the same ids in another order."""
    if prior is not None and Counter(prior) == Counter(observed):
        return list(prior)
    return list(observed)


def timestamp() -> str:
    """Current time in RFC 3339."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
