# cipdesign/services/llm.py
# OpenAI chat-completions 래퍼
# - BOM specification/comments 문구 보강 (enhance_cip_design)
# - 키가 없거나 테스트 환경이면 클라이언트 None → 호출 측에서 조용히 skip
# - 재시도 없음 (max_retries=0), 실패/파싱 오류 시 원본 결과 그대로 반환

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

from loguru import logger
from openai import OpenAI

from cipdesign.core.config import settings
from cipdesign.schemas import BomLine, CIPDesignResult, CIPInput

ENHANCE_TEMPERATURE = 0.3
ENHANCE_MAX_TOKENS = 2000

ENHANCE_SYSTEM_PROMPT = """You are an expert water treatment system engineer specializing in CIP (Clean-in-Place) systems for reverse osmosis membranes.

Your task is to enhance the specifications and comments in a Bill of Materials (BOM) to make them more professional, detailed, and useful for procurement and installation.

Guidelines:
1. Keep all technical specifications accurate and precise
2. Add relevant industry standards and certifications (ASME, NSF, FDA, AWWA, etc.)
3. Include detailed installation and operational notes
4. Use professional engineering terminology
5. Add safety considerations and warnings where relevant
6. Include typical lead times, vendor alternatives, and availability notes
7. Add quality assurance and testing requirements
8. Include maintenance schedules and replacement intervals

For each BOM item, enhance:
- Specification: detailed with standards, materials, ratings, and performance criteria
- Comments: installation notes, maintenance requirements, alternatives, and best practices

Keep the same number of items in the same order. Do not rename items or change quantities and costs.
Return only the enhanced BOM as a JSON array."""


# ==============================================================================
# Client
# ==============================================================================
def create_openai_client() -> Optional[OpenAI]:
    """키가 없거나 APP_ENV=test 이면 None."""
    if not settings.llm_available:
        return None

    kwargs: Dict[str, Any] = {
        "api_key": settings.OPENAI_API_KEY,
        "timeout": settings.LLM_TIMEOUT_S,
        "max_retries": 0,
    }
    if settings.OPENAI_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_BASE_URL
    return OpenAI(**kwargs)


def chat_complete(
    client: Any,
    messages: List[Dict[str, str]],
    *,
    temperature: float,
    max_tokens: int,
) -> str:
    logger.info(
        "LLM: Calling model={} max_tokens={} messages={}",
        settings.OPENAI_MODEL, max_tokens, len(messages),
    )
    response = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    return choices[0].message.content or ""


# ==============================================================================
# Parsing / merge helpers
# ==============================================================================
def extract_json_array(text: str) -> Optional[List[Any]]:
    """응답에서 JSON 배열 추출 (markdown 코드펜스로 감싸져 있어도 허용)."""
    if not text:
        return None
    match = re.search(r"\[[\s\S]*\]", text)
    raw = match.group(0) if match else text
    try:
        parsed = json.loads(raw)
    except (ValueError, TypeError):
        return None
    return parsed if isinstance(parsed, list) else None


def _text_or(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return fallback


def merge_enhanced_bom(
    original: List[BomLine], enhanced: List[Any]
) -> Optional[List[BomLine]]:
    """
    LLM 결과를 원본 BOM 위에 인덱스 단위로 병합.
    - 라인 수가 다르면 None (malformed 취급)
    - item 이름/순서, qty, 가격은 원본 고정 (문구만 교체)
    - 누락·빈 문자열 필드는 원본 값 사용
    """
    if len(enhanced) != len(original):
        return None

    merged: List[BomLine] = []
    for base, raw in zip(original, enhanced):
        node = raw if isinstance(raw, dict) else {}
        merged.append(
            base.model_copy(
                update={
                    "specification": _text_or(node.get("specification"), base.specification),
                    "comments": _text_or(node.get("comments"), base.comments),
                }
            )
        )
    return merged


def build_enhance_prompt(inp: CIPInput, result: CIPDesignResult) -> str:
    summary = result.summary
    heater = summary.heater_kw if summary.heater_kw is not None else "None"
    bom_json = json.dumps(
        [line.model_dump(by_alias=True) for line in result.bom], indent=2, ensure_ascii=False
    )
    input_json = json.dumps(inp.model_dump(by_alias=True), indent=2)
    return f"""Please enhance the following CIP system BOM with comprehensive, professional specifications and comments.

System Context:
- System Type: Membrane Cleaning System (CIP for Reverse Osmosis)
- Design Flow: {summary.fmax:g} GPM maximum
- Tank Size: {summary.tank_gal} gallons
- Heater Power: {heater} kW
- Application: Industrial water treatment membrane cleaning

Input Parameters:
{input_json}

Current BOM (to be enhanced):
{bom_json}

Return only the enhanced BOM array in valid JSON format, one object per item with the keys
item, specification, comments."""


# ==============================================================================
# Entry point
# ==============================================================================
def enhance_cip_design(
    inp: CIPInput,
    result: CIPDesignResult,
    *,
    client: Any = None,
) -> CIPDesignResult:
    """
    BOM 문구 보강. 어떤 실패든 원본 result 를 그대로 돌려준다.
    client 를 주입하지 않으면 settings 기준으로 생성 (불가하면 skip).
    """
    client = client if client is not None else create_openai_client()
    if client is None:
        return result

    try:
        content = chat_complete(
            client,
            [
                {"role": "system", "content": ENHANCE_SYSTEM_PROMPT},
                {"role": "user", "content": build_enhance_prompt(inp, result)},
            ],
            temperature=ENHANCE_TEMPERATURE,
            max_tokens=ENHANCE_MAX_TOKENS,
        )
    except Exception:
        logger.exception("⚠️ LLM enhancement call failed, keeping computed BOM")
        return result

    enhanced = extract_json_array(content)
    if enhanced is None:
        logger.warning("⚠️ LLM enhancement returned no JSON array, keeping computed BOM")
        return result

    merged = merge_enhanced_bom(result.bom, enhanced)
    if merged is None:
        logger.warning(
            "⚠️ LLM enhancement line count mismatch ({} != {}), keeping computed BOM",
            len(enhanced), len(result.bom),
        )
        return result

    logger.info("LLM: BOM enhanced ({} lines)", len(merged))
    return result.model_copy(update={"bom": merged})
