"""
LLM copy generator.

Asks the provider router for a JSON object with headline and subheadline,
parses it leniently and enforces the length limits. Optionally falls back
to the rule-based generator when the providers fail.
"""

import json
import logging
import re
from typing import Optional, Tuple

from providers.base import GenerationConfig, TaskType
from providers.router import ProviderRouter
from showcase.constants import HEADLINE_MAX_LENGTH, SUBHEADLINE_MAX_LENGTH
from showcase.errors import CopyGenerationError
from showcase.templates import SlideType

from .base import CopyGenerator, CopyMetadata, CopyRequest, GeneratedCopy
from .rule_based import RuleBasedCopyGenerator

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = " ".join([
    "You are a conversion-focused copywriter for App Store screenshots.",
    "Return only valid JSON with keys: headline, subheadline.",
    f"Constraints: headline <= {HEADLINE_MAX_LENGTH} chars, subheadline <= {SUBHEADLINE_MAX_LENGTH} chars.",
    'Avoid generic phrases like "the app you need" or "experience X today".',
    "Do not include emojis, quotes, or additional keys.",
])

USER_PROMPT = """appName: {app_name}
slideType: {slide_type}
valueBullet: {value_bullet}
locale: {locale}
tone: {tone}"""


def hard_truncate(text: str, max_length: int) -> str:
    """Cut to max_length, ending in "..." when anything was removed."""
    text = text.strip()
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def parse_copy_json(response_text: str) -> Optional[dict]:
    """Extract a JSON object from an LLM response. Returns None if none parses."""
    response_text = response_text.strip()

    try:
        data = json.loads(response_text)
        return data if isinstance(data, dict) else None
    except json.JSONDecodeError:
        pass

    # Fenced code block
    code_block_match = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", response_text, re.DOTALL)
    if code_block_match:
        try:
            return json.loads(code_block_match.group(1))
        except json.JSONDecodeError:
            pass

    # First {...} span in surrounding prose
    json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group())
        except json.JSONDecodeError:
            pass

    return None


class LLMCopyGenerator(CopyGenerator):
    """Copy generation through the OpenAI/Gemini provider router."""

    def __init__(
        self,
        router: ProviderRouter,
        model: Optional[str] = None,
        fallback: Optional[RuleBasedCopyGenerator] = None,
        max_tokens: int = 200,
    ):
        """
        Args:
            router: Provider router
            model: Optional model override for every provider
            fallback: Rule-based generator used when the providers fail.
                Without one, failures raise CopyGenerationError.
            max_tokens: Completion token cap
        """
        self.router = router
        self.model = model
        self.fallback = fallback
        self.config = GenerationConfig(temperature=0.0, max_tokens=max_tokens, json_mode=True)

    @property
    def name(self) -> str:
        active = self.router.get_active_provider()
        return f"llm({active.name if active else 'unavailable'})"

    def is_available(self) -> bool:
        return self.router.is_available()

    def build_prompt(self, request: CopyRequest) -> str:
        return USER_PROMPT.format(
            app_name=request.app_name,
            slide_type=SlideType(request.slide_type).value,
            value_bullet=request.value_bullet or "(none)",
            locale=request.locale,
            tone=request.brand_context.tone or "(none)",
        )

    async def _request_copy(self, request: CopyRequest) -> Tuple[str, str, str]:
        """Returns (headline, subheadline, model) as written by the model."""
        if not self.router.is_available():
            raise CopyGenerationError("No LLM provider is configured")

        response = await self.router.generate_text(
            prompt=self.build_prompt(request),
            task_type=TaskType.COPYWRITING,
            model=self.model,
            config=self.config,
            system=SYSTEM_PROMPT,
        )

        if response.error:
            raise CopyGenerationError(
                "LLM copy generation failed",
                context={"provider": response.provider, "error": response.error},
            )

        data = parse_copy_json(response.text)
        if data is None:
            raise CopyGenerationError("LLM response is not valid JSON", context={"provider": response.provider})

        headline = data.get("headline")
        subheadline = data.get("subheadline")
        if not isinstance(headline, str) or not isinstance(subheadline, str):
            raise CopyGenerationError(
                "LLM response missing required fields",
                context={"provider": response.provider, "keys": sorted(data)},
            )

        return headline, subheadline, response.model_used

    async def generate_copy(self, request: CopyRequest) -> GeneratedCopy:
        """
        Generate copy for one slide.

        Raises:
            CopyGenerationError: Providers failed and no fallback is set
        """
        try:
            raw_headline, raw_subheadline, model = await self._request_copy(request)
        except CopyGenerationError as e:
            if self.fallback is None:
                raise
            logger.warning(f"LLM copy failed for {SlideType(request.slide_type).value} slide, using rule-based copy: {e}")
            copy = self.fallback.write(request)
            return GeneratedCopy(
                headline=copy.headline,
                subheadline=copy.subheadline,
                locale=copy.locale,
                metadata=CopyMetadata(model=copy.metadata.model, truncated=copy.metadata.truncated, fallback_used=True),
            )

        headline = hard_truncate(raw_headline, HEADLINE_MAX_LENGTH)
        subheadline = hard_truncate(raw_subheadline, SUBHEADLINE_MAX_LENGTH)

        return GeneratedCopy(
            headline=headline,
            subheadline=subheadline,
            locale=request.locale,
            metadata=CopyMetadata(
                model=model,
                truncated=headline != raw_headline.strip() or subheadline != raw_subheadline.strip(),
            ),
        )
