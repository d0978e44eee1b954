# cipdesign/schemas/ai.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import Field

from .common import AppBaseModel


class ChatMessage(AppBaseModel):
    role: Literal["user", "assistant"]
    content: str


class SystemContext(AppBaseModel):
    system_type: str = Field(..., alias="systemType")
    current_parameters: Optional[Any] = Field(None, alias="currentParameters")
    design_results: Optional[Any] = Field(None, alias="designResults")


class ChatRequest(AppBaseModel):
    messages: List[ChatMessage]
    system_context: SystemContext = Field(..., alias="systemContext")


class AssistantMessage(AppBaseModel):
    role: Literal["assistant"] = "assistant"
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChatResponse(AppBaseModel):
    message: AssistantMessage


class ValidationRequest(AppBaseModel):
    parameters: Any = None
    system_type: str = Field(..., alias="systemType")


class ValidationResponse(AppBaseModel):
    warnings: List[str] = Field(default_factory=list)
