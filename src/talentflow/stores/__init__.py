"""Persistence collaborators for assessments, submissions and sessions."""

from __future__ import annotations

from .base import AssessmentStore, SessionProvider, StoreError, SubmissionStore
from .filesystem import JsonFileStore, JsonSessionFile
from .memory import InMemoryStore, StaticSession

__all__ = [
    "AssessmentStore",
    "InMemoryStore",
    "JsonFileStore",
    "JsonSessionFile",
    "SessionProvider",
    "StaticSession",
    "StoreError",
    "SubmissionStore",
]
