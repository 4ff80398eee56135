from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from greenquest.errors import InvalidArgument
from greenquest.schemas import DiyPayload, QuizPayload
from greenquest.services import prompts
from greenquest.services.llm import GroqClient
from greenquest.services.suggestions import parse_quiz, parse_suggestions
from greenquest.utils.state import get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["assistant"])


@router.post("/quiz/generate")
async def generate_quiz(payload: Optional[QuizPayload] = None, llm: GroqClient = Depends(get_llm_client)) -> dict:
    count = prompts.clamp_quiz_count(payload.count if payload else None)
    text = await llm.complete(prompts.quiz_prompt(count), temperature=0.8, max_tokens=1200)
    return {"success": True, "questions": parse_quiz(text)}


@router.post("/diy-suggestions")
async def diy_suggestions(payload: DiyPayload, llm: GroqClient = Depends(get_llm_client)) -> dict:
    items = payload.items
    if not isinstance(items, str) or not items.strip():
        raise InvalidArgument("Please provide items")
    logger.info("Requesting DIY suggestions for: %.200s", items)
    text = await llm.complete(prompts.diy_prompt(items), temperature=0.7, max_tokens=1024)
    return {"success": True, "suggestions": parse_suggestions(text), "raw": text}
