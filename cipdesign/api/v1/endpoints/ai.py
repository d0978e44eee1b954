# cipdesign/api/v1/endpoints/ai.py
from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from loguru import logger

from cipdesign.schemas import (
    AssistantMessage,
    ChatRequest,
    ChatResponse,
    ValidationRequest,
    ValidationResponse,
)
from cipdesign.services.ai_chat import AIChatService

router = APIRouter()


@lru_cache
def get_chat_service() -> AIChatService:
    return AIChatService()


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, svc: AIChatService = Depends(get_chat_service)):
    try:
        content = svc.generate_response(payload.messages, payload.system_context)
    except Exception:
        logger.exception("🔥 AI chat error")
        raise HTTPException(status_code=500, detail="Internal server error")
    return ChatResponse(message=AssistantMessage(content=content))


@router.post("/chat/stream")
def chat_stream(payload: ChatRequest, svc: AIChatService = Depends(get_chat_service)):
    return StreamingResponse(
        svc.generate_streaming_response(payload.messages, payload.system_context),
        media_type="text/plain; charset=utf-8",
    )


@router.post("/validate", response_model=ValidationResponse)
def validate(payload: ValidationRequest, svc: AIChatService = Depends(get_chat_service)):
    """파라미터 경고 (advisory only, 계산 결과에는 영향 없음)"""
    try:
        warnings = svc.validate_parameters(payload.parameters, payload.system_type)
    except Exception:
        logger.exception("🔥 Parameter validation error")
        raise HTTPException(status_code=500, detail="Internal server error")
    return ValidationResponse(warnings=warnings)
