"""Unit tests for extraction provider selection and retries."""

import pytest

from resumecloner.utils import llm
from resumecloner.utils.llm import ExtractionProvider, ExtractionResponse, default_model, get_provider


class FlakyProvider(ExtractionProvider):
    """Fails with TimeoutError a set number of times, then answers."""

    _provider_prefix = "flaky"
    _retryable_exception = TimeoutError
    _retry_message = "Timed out"

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0
        self.update_model("v1")

    def _call_api(self, payload, media_type, prompt):
        self.calls += 1
        if self.calls <= self.failures:
            raise TimeoutError("slow")
        return ExtractionResponse(text="{}", model=self.model)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(llm.time, "sleep", lambda seconds: None)


@pytest.mark.unit
def test_retry_then_succeed():
    provider = FlakyProvider(failures=2)
    response = provider.extract(b"x", "image/png", "prompt")

    assert response.text == "{}"
    assert provider.calls == 3
    assert provider.name == "flaky/v1"


@pytest.mark.unit
def test_retry_gives_up():
    provider = FlakyProvider(failures=5)
    with pytest.raises(TimeoutError):
        provider.extract(b"x", "image/png", "prompt")
    assert provider.calls == llm.MAX_RETRIES


@pytest.mark.unit
def test_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("carrier-pigeon")


@pytest.mark.unit
def test_gemini_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        get_provider("gemini")


@pytest.mark.unit
def test_default_model_from_environment(monkeypatch):
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    assert default_model("openai") == "gpt-4o"

    monkeypatch.setenv("OPENAI_MODEL", "gpt-4.1")
    assert default_model("openai") == "gpt-4.1"
