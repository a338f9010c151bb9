from types import SimpleNamespace

import pytest

from providers import GeminiProvider, OpenAIProvider, ProviderRouter, parse_api_keys
from providers.base import GenerationConfig, LLMProvider, LLMResponse, TaskType


class StubProvider(LLMProvider):
    def __init__(self, name, responses=None, available=True):
        self._name = name
        self._responses = list(responses or [])
        self._available = available
        self.calls = 0

    @property
    def name(self):
        return self._name

    def is_available(self):
        return self._available

    async def generate_text(self, prompt, model=None, config=None, system=None):
        self.calls += 1
        return self._responses.pop(0)


def response(provider, error=None):
    return LLMResponse(text="" if error else '{"headline": "A"}', model_used="m", provider=provider, error=error)


class FakeCompletions:
    def __init__(self, content=None, exc=None):
        self.content = content
        self.exc = exc
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc:
            raise self.exc
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))],
            usage=SimpleNamespace(total_tokens=42),
        )


def openai_with(completions):
    provider = OpenAIProvider(api_key="sk-test")
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider


def test_parse_api_keys():
    assert parse_api_keys("a, b,,c ") == ["a", "b", "c"]
    assert parse_api_keys("") == []
    assert parse_api_keys(None) == []


@pytest.mark.asyncio
async def test_router_uses_primary_when_healthy():
    primary = StubProvider("primary", [response("primary")])
    fallback = StubProvider("fallback", [response("fallback")])
    router = ProviderRouter(primary, fallback)

    result = await router.generate_text("prompt")

    assert result.provider == "primary"
    assert fallback.calls == 0


@pytest.mark.asyncio
async def test_router_fails_over():
    primary = StubProvider("primary", [response("primary", error="rate_limit")])
    fallback = StubProvider("fallback", [response("fallback")])
    router = ProviderRouter(primary, fallback)

    result = await router.generate_text("prompt")

    assert result.provider == "fallback"
    assert not result.error


@pytest.mark.asyncio
async def test_router_returns_primary_error_without_fallback():
    primary = StubProvider("primary", [response("primary", error="api_error")])
    router = ProviderRouter(primary)

    result = await router.generate_text("prompt")

    assert result.error == "api_error"


@pytest.mark.asyncio
async def test_router_nothing_configured():
    router = ProviderRouter(StubProvider("primary", available=False), StubProvider("fallback", available=False))
    assert not router.is_available()
    assert router.get_active_provider() is None

    result = await router.generate_text("prompt")
    assert result.error == "all_providers_unavailable"


@pytest.mark.asyncio
async def test_circuit_breaker_skips_failing_primary():
    primary = StubProvider("primary", [response("primary", error="x")] * 2)
    fallback = StubProvider("fallback", [response("fallback")] * 3)
    router = ProviderRouter(primary, fallback, failure_threshold=2)

    await router.generate_text("1")
    await router.generate_text("2")
    assert router.primary_disabled
    assert router.get_active_provider() is fallback

    await router.generate_text("3")
    assert primary.calls == 2
    assert fallback.calls == 3

    router.reset_primary()
    assert router.get_active_provider() is primary


@pytest.mark.asyncio
async def test_openai_provider_success_sends_system_and_json_mode():
    completions = FakeCompletions(content='{"headline": "Hi", "subheadline": "There"}')
    provider = openai_with(completions)

    result = await provider.generate_text("prompt", config=GenerationConfig(json_mode=True), system="be brief")

    assert result.error is None
    assert result.tokens_used == 42
    assert result.model_used == "gpt-4o-mini"
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "be brief"}
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["temperature"] == 0.0


@pytest.mark.asyncio
async def test_openai_provider_reports_errors_instead_of_raising():
    provider = openai_with(FakeCompletions(exc=RuntimeError("socket closed")))
    result = await provider.generate_text("prompt")
    assert result.error.startswith("unexpected:")


@pytest.mark.asyncio
async def test_openai_provider_empty_content():
    provider = openai_with(FakeCompletions(content=""))
    result = await provider.generate_text("prompt")
    assert result.error == "empty_response"


def test_openai_availability():
    assert OpenAIProvider(api_key="sk-test").is_available()
    assert not OpenAIProvider(api_key="").is_available()


def test_openai_model_override():
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4.1-mini")
    assert provider.get_model_for_task(TaskType.COPYWRITING) == "gpt-4.1-mini"


@pytest.mark.asyncio
async def test_gemini_without_keys():
    provider = GeminiProvider(api_keys=[])
    assert not provider.is_available()
    result = await provider.generate_text("prompt")
    assert result.error == "no_api_keys_available"


def test_gemini_key_rotation_skips_failed_keys():
    provider = GeminiProvider(api_keys=["key-aaaaaa", "key-bbbbbb"])
    assert provider._get_current_key() == "key-aaaaaa"
    provider._mark_key_failed("key-aaaaaa")
    assert provider._get_current_key() == "key-bbbbbb"
