"""Tests for the Gemini model invocation layer."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from paperpress.config import Config
from paperpress.core.credentials import KEYS_SETTING
from paperpress.exceptions import (
    CredentialsExhaustedError,
    LLMError,
    QuotaExhaustedError,
)
from paperpress.providers.llm import gemini as gemini_module
from paperpress.providers.llm.gemini import GeminiProvider

ZERO_QUOTA = "429 Quota exceeded for metric: generate_content_free_tier_requests, limit: 0"
RATE_LIMITED = "429 Resource has been exhausted (e.g. check quota)."
SUSPENDED = "403 PERMISSION_DENIED: Consumer has been suspended"


@pytest.fixture
def config():
    return Config(
        settings_path=None,
        gemini_model_pro="pro-model",
        gemini_model_flash="flash-model",
        gemini_model_fallback="fallback-model",
    )


@pytest.fixture
def fake_genai(monkeypatch):
    genai = MagicMock()
    types = MagicMock()
    monkeypatch.setattr(gemini_module, "genai", genai)
    monkeypatch.setattr(gemini_module, "types", types)
    return genai


@pytest.fixture
def provider(config, make_pool, sleeps, fake_genai):
    return GeminiProvider(config, pool=make_pool(["key-A"]), sleep=sleeps)


def scripted_models(genai, failures, response):
    """Make GenerativeModel(name) fail with ``failures[name]`` or return ``response``."""
    created = []

    def make_model(name, **kwargs):
        model = MagicMock()
        model.name = name
        model.kwargs = kwargs
        if name in failures:
            model.generate_content.side_effect = Exception(failures[name])
        else:
            model.generate_content.return_value = response
        created.append(model)
        return model

    genai.GenerativeModel.side_effect = make_model
    return created


class TestResolveModel:
    """Tier to model mapping."""

    @pytest.mark.parametrize("requested,expected", [
        ("pro", "pro-model"),
        ("gemini-pro-latest", "pro-model"),
        ("PRO", "pro-model"),
        ("flash", "flash-model"),
        ("anything-else", "flash-model"),
        (None, "flash-model"),
    ])
    def test_mapping(self, provider, requested, expected):
        assert provider.resolve_model(requested) == expected

    def test_default_model(self, provider):
        assert provider.get_default_model() == "flash-model"


class TestGenerateContent:
    """Request construction."""

    def test_binds_key_and_builds_model(self, provider, fake_genai):
        response = SimpleNamespace(text="hello")
        created = scripted_models(fake_genai, {}, response)

        result = provider.generate_content("pro", "be brief", "Say hello")

        assert result is response
        fake_genai.configure.assert_called_with(api_key="key-A")
        assert created[0].name == "pro-model"
        assert created[0].kwargs["system_instruction"] == "be brief"
        assert created[0].kwargs["tools"] is None
        created[0].generate_content.assert_called_once_with("Say hello", generation_config=None)

    def test_json_output_sets_mime_type(self, provider, fake_genai):
        scripted_models(fake_genai, {}, SimpleNamespace(text="{}"))
        schema = {"type": "OBJECT"}

        provider.generate_content("flash", "sys", "prompt", json_output=True, response_schema=schema)

        gemini_module.types.GenerationConfig.assert_called_once_with(
            response_mime_type="application/json",
            response_schema=schema,
        )

    def test_google_search_enables_tool(self, provider, fake_genai):
        created = scripted_models(fake_genai, {}, SimpleNamespace(text="x"))
        provider.generate_content("pro", "sys", "prompt", google_search=True)
        assert created[0].kwargs["tools"] == "google_search_retrieval"

    def test_generate_returns_text(self, provider, fake_genai):
        scripted_models(fake_genai, {}, SimpleNamespace(text="generated"))
        assert provider.generate("prompt", model="flash") == "generated"


class TestFallbackModel:
    """Degraded path for flash quota exhaustion."""

    def test_flash_quota_falls_back(self, provider, fake_genai, sleeps):
        response = SimpleNamespace(text="from fallback")
        created = scripted_models(fake_genai, {"flash-model": ZERO_QUOTA}, response)

        result = provider.generate_content("flash", "sys", "prompt")

        assert result is response
        assert [m.name for m in created] == ["flash-model", "fallback-model"]
        assert sleeps.calls == []

    def test_fallback_after_all_keys_exhausted(self, config, make_pool, sleeps, fake_genai):
        provider = GeminiProvider(config, pool=make_pool(["key-A", "key-B"]), sleep=sleeps)
        response = SimpleNamespace(text="ok")
        created = scripted_models(fake_genai, {"flash-model": RATE_LIMITED}, response)

        assert provider.generate_content(None, "sys", "prompt") is response
        assert [m.name for m in created] == ["flash-model", "flash-model", "fallback-model"]

    def test_suspended_keys_do_not_fall_back(self, config, make_pool, sleeps, fake_genai):
        provider = GeminiProvider(config, pool=make_pool(["key-A", "key-B"]), sleep=sleeps)
        created = scripted_models(fake_genai, {"flash-model": SUSPENDED}, None)

        with pytest.raises(CredentialsExhaustedError) as excinfo:
            provider.generate_content("flash", "sys", "prompt")

        assert excinfo.value.reason == "suspended"
        assert [m.name for m in created] == ["flash-model", "flash-model"]
        assert sleeps.calls == [10.0]

    def test_fallback_failure_surfaces(self, provider, fake_genai):
        scripted_models(
            fake_genai,
            {"flash-model": ZERO_QUOTA, "fallback-model": ZERO_QUOTA},
            None,
        )
        with pytest.raises(QuotaExhaustedError):
            provider.generate_content("flash", "sys", "prompt")

    def test_pro_model_does_not_fall_back(self, provider, fake_genai):
        created = scripted_models(fake_genai, {"pro-model": ZERO_QUOTA}, None)
        with pytest.raises(QuotaExhaustedError):
            provider.generate_content("pro", "sys", "prompt")
        assert [m.name for m in created] == ["pro-model"]

    def test_non_quota_errors_do_not_fall_back(self, provider, fake_genai):
        created = scripted_models(fake_genai, {"flash-model": "400 Invalid argument"}, None)
        with pytest.raises(LLMError) as excinfo:
            provider.generate_content("flash", "sys", "prompt")
        assert not isinstance(excinfo.value, CredentialsExhaustedError)
        assert [m.name for m in created] == ["flash-model"]


class TestPoolWiring:
    """Provider built from config alone."""

    def test_builds_pool_from_config(self, fake_genai, sleeps):
        config = Config(settings_path=None, gemini_api_key="env-key")
        provider = GeminiProvider(config, sleep=sleeps)
        scripted_models(fake_genai, {}, SimpleNamespace(text="ok"))

        provider.generate("prompt")
        fake_genai.configure.assert_called_with(api_key="env-key")

    def test_stored_keys_take_precedence(self, fake_genai, sleeps):
        config = Config(settings_path=None, gemini_api_key="env-key")
        provider = GeminiProvider(config, sleep=sleeps)
        provider.pool.store.set(KEYS_SETTING, ["stored-key"])
        scripted_models(fake_genai, {}, SimpleNamespace(text="ok"))

        provider.generate("prompt")
        fake_genai.configure.assert_called_with(api_key="stored-key")


class TestResponseHelpers:
    """Response text and grounding extraction."""

    def test_blocked_response_raises(self):
        class Blocked:
            @property
            def text(self):
                raise ValueError("no parts")

        with pytest.raises(LLMError, match="no text"):
            GeminiProvider.response_text(Blocked())

    def test_none_text_is_empty(self):
        assert GeminiProvider.response_text(SimpleNamespace(text=None)) == ""

    def test_grounding_sources(self):
        chunks = [
            SimpleNamespace(web=SimpleNamespace(uri="https://a.org", title="A")),
            SimpleNamespace(web=None),
            SimpleNamespace(web=SimpleNamespace(uri="https://b.org", title=None)),
        ]
        response = SimpleNamespace(
            candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))]
        )
        sources = GeminiProvider.grounding_sources(response)
        assert [s.uri for s in sources] == ["https://a.org", "https://b.org"]
        assert sources[0].title == "A"

    def test_grounding_sources_missing(self):
        assert GeminiProvider.grounding_sources(SimpleNamespace(candidates=[])) == []
        assert GeminiProvider.grounding_sources(SimpleNamespace()) == []
