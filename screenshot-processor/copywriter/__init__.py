# Copy generation for slide headlines and subheadlines
# Rule-based by default, LLM-backed when a provider key is configured

import logging
from typing import List, Optional

from providers import GeminiProvider, OpenAIProvider, ProviderRouter
from showcase.errors import ConfigurationError

from .base import (
    BrandContext, CopyGenerator, CopyMetadata, CopyRequest, GeneratedCopy,
    enforce_length, truncate_at_word,
)
from .llm import LLMCopyGenerator, parse_copy_json
from .rule_based import RuleBasedCopyGenerator, string_hash

logger = logging.getLogger(__name__)

GENERATOR_MODES = ("auto", "rule_based", "llm")


def create_copy_generator(
    mode: str = "auto",
    openai_api_key: Optional[str] = None,
    openai_base_url: Optional[str] = None,
    openai_model: Optional[str] = None,
    gemini_api_keys: Optional[List[str]] = None,
    gemini_model: Optional[str] = None,
    fallback_to_rules: bool = True,
) -> CopyGenerator:
    """
    Build the copy generator for a configuration.

    Args:
        mode: "auto" (LLM when a key is set, else rules), "rule_based" or "llm"
        openai_api_key: Key for the primary provider
        openai_base_url: Optional OpenAI-compatible gateway
        openai_model: Primary model
        gemini_api_keys: Keys for the fallback provider
        gemini_model: Fallback model
        fallback_to_rules: Use rule-based copy when every provider fails

    Raises:
        ConfigurationError: Unknown mode, or "llm" without any API key
    """
    if mode not in GENERATOR_MODES:
        raise ConfigurationError(f"Unknown copy generator mode: {mode}", context={"allowed": list(GENERATOR_MODES)})

    has_keys = bool(openai_api_key) or bool(gemini_api_keys)

    if mode == "rule_based" or (mode == "auto" and not has_keys):
        logger.info("Copy generator: rule-based")
        return RuleBasedCopyGenerator()

    if not has_keys:
        raise ConfigurationError("LLM copy generator requires OPENAI_API_KEY or GEMINI_API_KEYS")

    router = ProviderRouter(
        primary=OpenAIProvider(api_key=openai_api_key or "", base_url=openai_base_url, model=openai_model),
        fallback=GeminiProvider(api_keys=list(gemini_api_keys or []), model=gemini_model),
    )
    logger.info(f"Copy generator: LLM (rule-based fallback {'on' if fallback_to_rules else 'off'})")
    return LLMCopyGenerator(router, fallback=RuleBasedCopyGenerator() if fallback_to_rules else None)


__all__ = [
    "BrandContext",
    "CopyGenerator",
    "CopyMetadata",
    "CopyRequest",
    "GeneratedCopy",
    "enforce_length",
    "truncate_at_word",
    "LLMCopyGenerator",
    "parse_copy_json",
    "RuleBasedCopyGenerator",
    "string_hash",
    "create_copy_generator",
]
