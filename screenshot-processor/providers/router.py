"""
Provider Router - Automatic Failover Between LLM Providers

Routes requests to OpenAI (primary) with automatic fallback to Gemini.
"""

import logging
from typing import Optional

from .base import LLMProvider, TaskType, GenerationConfig, LLMResponse

logger = logging.getLogger(__name__)


class ProviderRouter:
    """
    Routes LLM requests with automatic failover.

    Primary: OpenAI-compatible chat completions
    Fallback: Direct Gemini SDK

    Usage:
        router = ProviderRouter(OpenAIProvider(), GeminiProvider())
        response = await router.generate_text(prompt, task_type=TaskType.COPYWRITING)
    """

    def __init__(
        self,
        primary: LLMProvider,
        fallback: Optional[LLMProvider] = None,
        failure_threshold: int = 3,
    ):
        """
        Initialize router with providers.

        Args:
            primary: Primary provider
            fallback: Optional fallback provider
            failure_threshold: Consecutive primary failures before it is skipped
        """
        self.primary = primary
        self.fallback = fallback

        # Circuit breaker state
        self._primary_failures = 0
        self._primary_failure_threshold = failure_threshold
        self._primary_disabled = False

        fallback_name = fallback.name if fallback else "none"
        logger.info(f"ProviderRouter initialized: primary={primary.name}, fallback={fallback_name}")

    @property
    def primary_disabled(self) -> bool:
        return self._primary_disabled

    def reset_primary(self):
        """Re-enable the primary provider."""
        self._primary_failures = 0
        self._primary_disabled = False
        logger.info("Primary provider reset")

    def _record_primary_failure(self):
        self._primary_failures += 1
        if self._primary_failures >= self._primary_failure_threshold:
            self._primary_disabled = True
            logger.warning(f"Primary provider disabled after {self._primary_failures} failures")

    def is_available(self) -> bool:
        """True when any provider is configured."""
        return self.primary.is_available() or bool(self.fallback and self.fallback.is_available())

    def get_active_provider(self) -> Optional[LLMProvider]:
        """Get the provider the next request will try first."""
        if not self._primary_disabled and self.primary.is_available():
            return self.primary
        if self.fallback and self.fallback.is_available():
            return self.fallback
        return None

    async def generate_text(
        self,
        prompt: str,
        task_type: TaskType = TaskType.COPYWRITING,
        model: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        system: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text with automatic failover.

        Args:
            prompt: User prompt
            task_type: Task type for model selection
            model: Optional model override
            config: Generation config
            system: Optional system instruction

        Returns:
            LLMResponse from whichever provider succeeds, or the last error
        """
        last_response: Optional[LLMResponse] = None

        if not self._primary_disabled and self.primary.is_available():
            model_name = model or self.primary.get_model_for_task(task_type)

            logger.info(f"Trying primary ({self.primary.name}) with model {model_name}")
            response = await self.primary.generate_text(prompt, model_name, config, system)

            if not response.error:
                self._primary_failures = 0
                return response

            logger.warning(f"Primary failed: {response.error}")
            self._record_primary_failure()
            last_response = response

        if self.fallback and self.fallback.is_available():
            model_name = model or self.fallback.get_model_for_task(task_type)

            logger.info(f"Falling back to {self.fallback.name} with model {model_name}")
            return await self.fallback.generate_text(prompt, model_name, config, system)

        if last_response is not None:
            return last_response

        return LLMResponse(
            text="",
            model_used="none",
            provider="none",
            error="all_providers_unavailable",
        )
