import pytest

from copywriter import (
    CopyRequest, LLMCopyGenerator, RuleBasedCopyGenerator, create_copy_generator,
    parse_copy_json, string_hash, truncate_at_word,
)
from copywriter.llm import hard_truncate
from providers.base import LLMProvider, LLMResponse
from providers.router import ProviderRouter
from showcase.errors import ConfigurationError, CopyGenerationError
from showcase.templates import SlideType


class FakeProvider(LLMProvider):
    """Returns canned responses and records prompts."""

    def __init__(self, responses, available=True, name="fake"):
        self._responses = list(responses)
        self._available = available
        self._name = name
        self.calls = []

    @property
    def name(self):
        return self._name

    def is_available(self):
        return self._available

    async def generate_text(self, prompt, model=None, config=None, system=None):
        self.calls.append({"prompt": prompt, "system": system, "config": config})
        return self._responses.pop(0)


def ok(text):
    return LLMResponse(text=text, model_used="fake-model", provider="fake")


def failed(error="boom"):
    return LLMResponse(text="", model_used="fake-model", provider="fake", error=error)


# ============== Rule-based ==============

def test_string_hash_is_stable():
    assert string_hash("") == 0
    assert string_hash("a") == 97
    assert string_hash("ab") == 97 * 31 + 98
    assert string_hash("MyApp") == string_hash("MyApp")


def test_string_hash_wraps_to_32_bits():
    value = string_hash("A fairly long value bullet that overflows the hash")
    assert 0 <= value <= 2 ** 31


@pytest.mark.asyncio
@pytest.mark.parametrize("slide_type,bullet", [
    (SlideType.HERO, None),
    (SlideType.FEATURE, "Track habits"),
    (SlideType.CLOSING, None),
])
async def test_rule_based_is_deterministic(copy_generator, slide_type, bullet):
    request = CopyRequest(slide_type=slide_type, app_name="MyApp", value_bullet=bullet)
    first = await copy_generator.generate_copy(request)
    second = await copy_generator.generate_copy(request)

    assert first == second
    assert first.metadata.model == "rule-based"
    assert not first.metadata.fallback_used
    assert first.locale == "en-US"


@pytest.mark.asyncio
async def test_rule_based_feature_headline_uses_bullet(copy_generator):
    copy = await copy_generator.generate_copy(
        CopyRequest(slide_type=SlideType.FEATURE, app_name="MyApp", value_bullet="Track habits")
    )
    assert copy.headline in ("Track habits", "✓ Track habits")


@pytest.mark.asyncio
async def test_rule_based_respects_length_limits(copy_generator):
    bullet = "Synchronize every single workout across all of your devices automatically"
    copy = await copy_generator.generate_copy(
        CopyRequest(slide_type=SlideType.FEATURE, app_name="A" * 50, value_bullet=bullet)
    )
    assert len(copy.headline) <= 32
    assert len(copy.subheadline) <= 60
    assert copy.metadata.truncated


@pytest.mark.asyncio
async def test_rule_based_long_app_name(copy_generator):
    copy = await copy_generator.generate_copy(CopyRequest(slide_type=SlideType.HERO, app_name="X" * 50))
    assert len(copy.headline) <= 32
    assert copy.headline.endswith("…")


@pytest.mark.asyncio
async def test_rule_based_requires_app_name(copy_generator):
    with pytest.raises(CopyGenerationError):
        await copy_generator.generate_copy(CopyRequest(slide_type=SlideType.HERO, app_name="  "))


def test_truncate_at_word():
    assert truncate_at_word("short", 32) == ("short", False)
    assert truncate_at_word("Track every habit you care about", 20) == ("Track every habit", True)
    text, truncated = truncate_at_word("Supercalifragilisticexpialidocious", 10)
    assert text == "Supercali…"
    assert truncated


# ============== LLM ==============

def test_parse_copy_json_variants():
    assert parse_copy_json('{"headline": "A", "subheadline": "B"}') == {"headline": "A", "subheadline": "B"}
    assert parse_copy_json('```json\n{"headline": "A", "subheadline": "B"}\n```')["headline"] == "A"
    assert parse_copy_json('Sure! {"headline": "A", "subheadline": "B"} Enjoy.')["subheadline"] == "B"
    assert parse_copy_json("no json here") is None
    assert parse_copy_json("[1, 2]") is None


def test_hard_truncate():
    assert hard_truncate("x" * 40, 32) == "x" * 29 + "..."
    assert hard_truncate("fits", 32) == "fits"


@pytest.mark.asyncio
async def test_llm_generator_parses_and_enforces_limits():
    provider = FakeProvider([ok('{"headline": "%s", "subheadline": "Short"}' % ("H" * 40))])
    generator = LLMCopyGenerator(ProviderRouter(provider))

    copy = await generator.generate_copy(
        CopyRequest(slide_type=SlideType.FEATURE, app_name="MyApp", value_bullet="Track habits")
    )

    assert copy.headline == "H" * 29 + "..."
    assert copy.subheadline == "Short"
    assert copy.metadata.truncated
    assert copy.metadata.model == "fake-model"
    assert "valueBullet: Track habits" in provider.calls[0]["prompt"]
    assert "headline <= 32" in provider.calls[0]["system"]
    assert provider.calls[0]["config"].json_mode


@pytest.mark.asyncio
async def test_llm_generator_raises_without_fallback():
    generator = LLMCopyGenerator(ProviderRouter(FakeProvider([failed()])))
    with pytest.raises(CopyGenerationError):
        await generator.generate_copy(CopyRequest(slide_type=SlideType.HERO, app_name="MyApp"))


@pytest.mark.asyncio
async def test_llm_generator_rejects_missing_fields():
    generator = LLMCopyGenerator(ProviderRouter(FakeProvider([ok('{"headline": "Only headline"}')])))
    with pytest.raises(CopyGenerationError):
        await generator.generate_copy(CopyRequest(slide_type=SlideType.HERO, app_name="MyApp"))


@pytest.mark.asyncio
async def test_llm_generator_falls_back_to_rules():
    rules = RuleBasedCopyGenerator()
    generator = LLMCopyGenerator(ProviderRouter(FakeProvider([ok("not json")])), fallback=rules)
    request = CopyRequest(slide_type=SlideType.CLOSING, app_name="MyApp")

    copy = await generator.generate_copy(request)
    expected = rules.write(request)

    assert copy.headline == expected.headline
    assert copy.metadata.fallback_used
    assert copy.metadata.model == "rule-based"


@pytest.mark.asyncio
async def test_llm_generator_unavailable_uses_fallback():
    generator = LLMCopyGenerator(
        ProviderRouter(FakeProvider([], available=False)),
        fallback=RuleBasedCopyGenerator(),
    )
    assert not generator.is_available()
    copy = await generator.generate_copy(CopyRequest(slide_type=SlideType.HERO, app_name="MyApp"))
    assert copy.metadata.fallback_used


# ============== Factory ==============

def test_factory_auto_without_keys_is_rule_based():
    assert isinstance(create_copy_generator("auto"), RuleBasedCopyGenerator)


def test_factory_auto_with_key_is_llm():
    generator = create_copy_generator("auto", openai_api_key="sk-test")
    assert isinstance(generator, LLMCopyGenerator)
    assert generator.fallback is not None


def test_factory_llm_without_fallback():
    generator = create_copy_generator("llm", gemini_api_keys=["key-1"], fallback_to_rules=False)
    assert isinstance(generator, LLMCopyGenerator)
    assert generator.fallback is None


def test_factory_rejects_bad_configuration():
    with pytest.raises(ConfigurationError):
        create_copy_generator("llm")
    with pytest.raises(ConfigurationError):
        create_copy_generator("magic")
