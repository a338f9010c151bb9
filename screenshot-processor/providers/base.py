"""
Base LLM Provider Interface

Abstract base class for the LLM providers used for marketing copy
(OpenAI-compatible endpoint, Gemini).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from enum import Enum


class TaskType(Enum):
    """Types of tasks for model selection."""
    COPYWRITING = "copywriting"    # Slide headlines and subheadlines
    SIMPLE = "simple"              # Health probes, short checks


@dataclass
class GenerationConfig:
    """Configuration for text generation."""
    temperature: float = 0.0
    top_p: float = 0.95
    top_k: int = 40
    max_tokens: int = 512
    json_mode: bool = False


@dataclass
class LLMResponse:
    """Unified response from LLM providers."""
    text: str
    model_used: str
    provider: str
    tokens_used: Optional[int] = None
    error: Optional[str] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Providers never raise on upstream failures; they return an LLMResponse
    with `error` set so the router can fail over.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available and configured."""
        pass

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        system: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text response from prompt.

        Args:
            prompt: User prompt
            model: Optional model override
            config: Generation configuration
            system: Optional system instruction

        Returns:
            LLMResponse with generated text
        """
        pass

    def get_model_for_task(self, task_type: TaskType) -> str:
        """
        Get the best model for a given task type.
        Override in subclasses for provider-specific model selection.
        """
        return "default"
