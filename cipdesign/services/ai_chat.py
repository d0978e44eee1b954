# cipdesign/services/ai_chat.py
from __future__ import annotations

import json
from typing import Any, Dict, Iterator, List, Optional, Sequence

from loguru import logger

from cipdesign.core.config import settings
from cipdesign.schemas import ChatMessage, SystemContext, system_display_name
from cipdesign.services.llm import chat_complete, create_openai_client

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 800
CHAT_HISTORY_WINDOW = 10  # 최근 메시지만 컨텍스트로 전달

UNAVAILABLE_REPLY = "❌ AI service is not available. Please check your OpenAI API configuration."
ERROR_REPLY = "❌ I encountered an error while processing your request. Please try again in a moment."
EMPTY_REPLY = "I apologize, but I couldn't generate a response. Please try again."

# cip-ro 파라미터 권장 범위
FLOW_GPM_LOW = 30
FLOW_GPM_HIGH = 60
TARGET_TEMP_C_MAX = 45
STAGE_RATIO_RANGE = (1.2, 2.0)


def _num(params: Dict[str, Any], key: str) -> Optional[float]:
    v = params.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return float(v)


def validate_parameters(parameters: Any, system_type: str) -> List[str]:
    """파라미터 경고 (advisory only). 값이 없거나 0 이면 해당 규칙은 건너뜀."""
    warnings: List[str] = []
    if system_type != "cip-ro" or not isinstance(parameters, dict):
        return warnings

    flow = _num(parameters, "perVesselFlowGPM")
    if flow:
        if flow < FLOW_GPM_LOW:
            warnings.append("⚠️ Flow rate below 30 GPM may result in poor cleaning efficiency")
        if flow > FLOW_GPM_HIGH:
            warnings.append("⚠️ Flow rate above 60 GPM may cause membrane damage")

    target = _num(parameters, "targetTempC")
    if target and target > TARGET_TEMP_C_MAX:
        warnings.append("🌡️ Target temperature above 45°C may damage RO membranes")

    v1 = _num(parameters, "vesselsStage1")
    v2 = _num(parameters, "vesselsStage2")
    if v1 and v2:
        ratio = v1 / v2
        lo, hi = STAGE_RATIO_RANGE
        if ratio < lo or ratio > hi:
            warnings.append(
                "📊 Consider optimizing stage 1:stage 2 vessel ratio (typically 1.2-2.0:1)"
            )

    return warnings


class AIChatService:
    """설계 어시스턴트: LLM 대화 + 로컬 규칙 기반 파라미터 경고."""

    def __init__(self, client: Any = None):
        self.client = client if client is not None else create_openai_client()

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------
    def get_system_prompt(self, ctx: SystemContext) -> str:
        prompt = f"""You are an expert water treatment system engineer specializing in {ctx.system_type.upper()} systems.

Core Expertise:
- Membrane cleaning (CIP) systems for reverse osmosis
- Ion exchange systems for softening and demineralization
- Media filtration systems (multimedia, activated carbon)
- Ultrafiltration membrane systems

Your role is to provide helpful, accurate, and practical guidance to engineers designing water treatment systems.

Guidelines:
1. Give specific, actionable advice with concrete values when possible
2. Explain the engineering principles behind recommendations
3. Reference industry standards (AWWA, NSF, FDA) when relevant
4. Consider safety, efficiency, and cost optimization
5. Provide troubleshooting help for common issues

Current Context:
- System Type: {system_display_name(ctx.system_type)}
- User is working on system design and may need guidance on parameters, specifications, or optimization"""

        if ctx.current_parameters:
            prompt += f"\n- Current Parameters: {json.dumps(ctx.current_parameters, indent=2, default=str)}"
        if ctx.design_results:
            prompt += f"\n- Design Results: {json.dumps(ctx.design_results, indent=2, default=str)}"

        prompt += "\n\nAlways be helpful and provide specific guidance. Focus on engineering value."
        return prompt

    def _messages(
        self, messages: Sequence[ChatMessage], ctx: SystemContext
    ) -> List[Dict[str, str]]:
        history = [
            {"role": m.role, "content": m.content}
            for m in list(messages)[-CHAT_HISTORY_WINDOW:]
        ]
        return [{"role": "system", "content": self.get_system_prompt(ctx)}] + history

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------
    def generate_response(
        self, messages: Sequence[ChatMessage], ctx: SystemContext
    ) -> str:
        if self.client is None:
            return UNAVAILABLE_REPLY

        try:
            content = chat_complete(
                self.client,
                self._messages(messages, ctx),
                temperature=CHAT_TEMPERATURE,
                max_tokens=CHAT_MAX_TOKENS,
            )
        except Exception:
            logger.exception("🔥 AI chat error")
            return ERROR_REPLY

        return content or EMPTY_REPLY

    def generate_streaming_response(
        self, messages: Sequence[ChatMessage], ctx: SystemContext
    ) -> Iterator[str]:
        if self.client is None:
            yield UNAVAILABLE_REPLY
            return

        try:
            stream = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=self._messages(messages, ctx),
                temperature=CHAT_TEMPERATURE,
                max_tokens=CHAT_MAX_TOKENS,
                stream=True,
            )
            for chunk in stream:
                choices = getattr(chunk, "choices", None) or []
                if not choices:
                    continue
                content = getattr(choices[0].delta, "content", None)
                if content:
                    yield content
        except Exception:
            logger.exception("🔥 AI streaming error")
            yield ERROR_REPLY

    def validate_parameters(self, parameters: Any, system_type: str) -> List[str]:
        return validate_parameters(parameters, system_type)
