"""
LLM-powered analysis that turns a VSL transcript into a structured script.

The model is asked for a structured output constrained by the strict
VSL script JSON schema, and the reply is validated again on arrival. Nothing
is repaired or defaulted: a reply that does not match the schema is rejected.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAI

from .config import get_openai_config
from .prompts import VSL_EXTRACTION_SYSTEM_PROMPT, VSL_EXTRACTION_USER_TEMPLATE
from .schema import (
    VSL_SCRIPT_JSON_SCHEMA,
    VSL_SCRIPT_SCHEMA_NAME,
    ScriptAnalysis,
    ScriptValidationError,
    parse_script_analysis,
)

logger = logging.getLogger(__name__)

ModelCall = Callable[[str], str]


@lru_cache(maxsize=1)
def _get_openai_client() -> OpenAI:
    cfg = get_openai_config()
    return OpenAI(api_key=cfg.api_key, base_url=cfg.api_base)


def build_messages(transcript_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": VSL_EXTRACTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": VSL_EXTRACTION_USER_TEMPLATE.format(transcript=transcript_text.strip()),
        },
    ]


def structured_response_format() -> Dict[str, Any]:
    """Response format asking the provider to enforce the VSL script schema."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": VSL_SCRIPT_SCHEMA_NAME,
            "strict": True,
            "schema": VSL_SCRIPT_JSON_SCHEMA,
        },
    }


def _call_extraction_model(transcript_text: str) -> str:
    """Call the LLM with the VSL extraction prompt and return the raw JSON text."""
    client = _get_openai_client()
    cfg = get_openai_config()

    logger.info("Calling %s for VSL script extraction", cfg.llm_model_name)

    response = client.chat.completions.create(
        model=cfg.llm_model_name,
        messages=build_messages(transcript_text),
        response_format=structured_response_format(),
    )

    message = response.choices[0].message
    refusal = getattr(message, "refusal", None)
    if refusal:
        raise ScriptValidationError(f"Model refused to produce a VSL script: {refusal}")
    return message.content or ""


def analyse_vsl_transcript(
    transcript_text: str,
    *,
    video_id: Optional[str] = None,
    model_call: Optional[ModelCall] = None,
) -> ScriptAnalysis:
    """
    Extract a validated ScriptAnalysis from a transcript.

    Args:
        transcript_text: Non-empty transcript.
        video_id: Only used for log context.
        model_call: Optional replacement for the provider call (transcript -> raw JSON).

    Raises:
        ScriptValidationError: If the reply is empty or violates the schema.
    """
    call = model_call or _call_extraction_model
    raw_output = call(transcript_text)
    if not raw_output or not raw_output.strip():
        raise ScriptValidationError("Model returned an empty response")

    analysis = parse_script_analysis(raw_output)
    logger.info(
        "[%s] Extracted VSL script with %d sections",
        video_id or "-", len(analysis.sections),
    )
    return analysis


__all__ = [
    "analyse_vsl_transcript",
    "build_messages",
    "structured_response_format",
]
