from __future__ import annotations

from fastapi import Request

from greenquest.services.catalog import Catalog
from greenquest.services.llm import GroqClient


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_llm_client(request: Request) -> GroqClient:
    return request.app.state.llm_client
