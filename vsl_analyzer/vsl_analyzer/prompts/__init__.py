"""
Prompt templates for the VSL extraction pipeline.
"""

from .vsl_extraction import VSL_EXTRACTION_SYSTEM_PROMPT, VSL_EXTRACTION_USER_TEMPLATE

__all__ = ["VSL_EXTRACTION_SYSTEM_PROMPT", "VSL_EXTRACTION_USER_TEMPLATE"]
