"""
Strict output schema for VSL script extraction.

Two views of the same contract live here:

- pydantic models (``ScriptAnalysis`` and friends) used to validate whatever the
  generative model sends back. Validation is strict: unknown keys, values
  outside the closed enumerations, out-of-range ratings and type mismatches are
  rejected rather than coerced.
- ``VSL_SCRIPT_JSON_SCHEMA``, the JSON Schema handed to the provider as a
  structured-output constraint. Its enumerations are generated from the same
  Enum classes so the two views cannot drift apart.

Wire names are camelCase (``keyPoints``, ``overallRating``); Python attributes
are snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

RATING_MIN = 1
RATING_MAX = 10


class SectionPurpose(str, Enum):
    """Marketing purpose a VSL section serves."""

    HOOK = "hook"
    PROBLEM_IDENTIFICATION = "problem_identification"
    SOLUTION_INTRODUCTION = "solution_introduction"
    CREDIBILITY_BUILDING = "credibility_building"
    SOCIAL_PROOF = "social_proof"
    OBJECTION_HANDLING = "objection_handling"
    URGENCY_SCARCITY = "urgency_scarcity"
    CALL_TO_ACTION = "call_to_action"
    BONUS_OFFER = "bonus_offer"
    GUARANTEE = "guarantee"
    SUMMARY_RECAP = "summary_recap"


class SectionTone(str, Enum):
    """Tone or emotional approach of a VSL section."""

    URGENT = "urgent"
    EMPATHETIC = "empathetic"
    AUTHORITATIVE = "authoritative"
    CONVERSATIONAL = "conversational"
    PERSUASIVE = "persuasive"
    EDUCATIONAL = "educational"
    EMOTIONAL = "emotional"
    LOGICAL = "logical"
    TESTIMONIAL = "testimonial"
    REASSURING = "reassuring"


class _StrictModel(BaseModel):
    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SectionTimestamps(_StrictModel):
    start: str
    end: str


class VSLSection(_StrictModel):
    title: str
    content: str
    purpose: SectionPurpose
    tone: SectionTone
    key_points: List[str]
    # Required but nullable: absent markers are null, never empty strings.
    timestamps: Optional[SectionTimestamps]


class Effectiveness(_StrictModel):
    strengths: List[str]
    improvements: List[str]
    overall_rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)


class ScriptAnalysis(_StrictModel):
    """Structured breakdown of a VSL transcript."""

    overall_strategy: str
    target_audience: str
    main_offer: str
    sections: List[VSLSection]
    effectiveness: Effectiveness

    def to_wire(self) -> Dict[str, Any]:
        """Return the camelCase, JSON-ready representation."""
        return self.model_dump(mode="json", by_alias=True)


class ScriptValidationError(ValueError):
    """Raised when a model response does not match the VSL script schema."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = list(errors or [])
        super().__init__(message)


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def parse_script_analysis(raw: str | bytes) -> ScriptAnalysis:
    """
    Validate a raw JSON response against the schema.

    This is the only place model output enters the system.

    Raises:
        ScriptValidationError: If the payload is not valid JSON or violates
            any field, enumeration or range constraint.
    """
    try:
        return ScriptAnalysis.model_validate_json(raw)
    except ValidationError as exc:
        errors = [
            {
                "field": _format_location(err.get("loc", ())),
                "type": err.get("type"),
                "message": err.get("msg"),
            }
            for err in exc.errors()
        ]
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors[:5])
        if len(errors) > 5:
            summary += f"; ... ({len(errors) - 5} more)"
        raise ScriptValidationError(
            f"Model output violates the VSL script schema ({len(errors)} error(s)): {summary}",
            errors,
        ) from exc


# ---------------------------------------------------------------------------
# JSON Schema sent to the provider
# ---------------------------------------------------------------------------

def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _string_list(description: str) -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _object(properties: Dict[str, Any], description: Optional[str] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }
    if description:
        schema["description"] = description
    return schema


VSL_SECTION_JSON_SCHEMA = _object(
    {
        "title": _string("Title or heading of the section"),
        "content": _string("The script content of the section"),
        "purpose": {
            "type": "string",
            "enum": [purpose.value for purpose in SectionPurpose],
            "description": "The marketing purpose this section serves",
        },
        "tone": {
            "type": "string",
            "enum": [tone.value for tone in SectionTone],
            "description": "The tone or emotional approach of the section",
        },
        "keyPoints": _string_list("Key points or takeaways of the section"),
        "timestamps": {
            "anyOf": [
                _object(
                    {
                        "start": _string("Approximate start time in the transcript"),
                        "end": _string("Approximate end time in the transcript"),
                    }
                ),
                {"type": "null"},
            ],
            "description": "Estimated time markers, or null when not identifiable",
        },
    }
)

VSL_SCRIPT_JSON_SCHEMA = _object(
    {
        "overallStrategy": _string("Overall marketing strategy and approach"),
        "targetAudience": _string("Intended target audience of the VSL"),
        "mainOffer": _string("Primary product, service or offer being promoted"),
        "sections": {
            "type": "array",
            "items": VSL_SECTION_JSON_SCHEMA,
            "description": "Ordered VSL sections",
        },
        "effectiveness": _object(
            {
                "strengths": _string_list("What makes this VSL effective"),
                "improvements": _string_list("Potential areas for improvement"),
                "overallRating": {
                    "type": "integer",
                    "minimum": RATING_MIN,
                    "maximum": RATING_MAX,
                    "description": "Overall effectiveness rating out of 10",
                },
            },
            "Assessment of the VSL's effectiveness",
        ),
    }
)

VSL_SCRIPT_SCHEMA_NAME = "vsl_script"


__all__ = [
    "SectionPurpose",
    "SectionTone",
    "SectionTimestamps",
    "VSLSection",
    "Effectiveness",
    "ScriptAnalysis",
    "ScriptValidationError",
    "parse_script_analysis",
    "VSL_SCRIPT_JSON_SCHEMA",
    "VSL_SCRIPT_SCHEMA_NAME",
    "RATING_MIN",
    "RATING_MAX",
]
