# LLM providers with automatic failover

from .base import LLMProvider, LLMResponse, GenerationConfig, TaskType
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider, parse_api_keys
from .router import ProviderRouter

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "GenerationConfig",
    "TaskType",
    "OpenAIProvider",
    "GeminiProvider",
    "parse_api_keys",
    "ProviderRouter",
]
