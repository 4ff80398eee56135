"""Request bodies for the JSON API.

Fields are optional and loosely typed on purpose: missing or mistyped values
are rejected by the services with an ``InvalidArgument`` (400) instead of
FastAPI's default 422.
"""
from typing import Any, Optional

from pydantic import BaseModel


class CredentialsPayload(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ScorePayload(BaseModel):
    game: Optional[str] = None
    score: Any = None


class PurchasePayload(BaseModel):
    id: Optional[str] = None


class QuizPayload(BaseModel):
    count: Any = None


class DiyPayload(BaseModel):
    items: Any = None
