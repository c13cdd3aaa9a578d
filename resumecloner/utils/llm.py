"""
Extraction provider abstraction.

Provides a provider-agnostic interface for multimodal model calls (resume image or
PDF in, structured text out) with automatic retries on transient errors.
"""

import base64
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Callable, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Retry configuration
MAX_RETRIES = 3
BASE_DELAY = 1.0
MAX_OUTPUT_TOKENS = 8192

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODELS = {
    "gemini": "gemini-flash-latest",
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
) -> T:
    """
    Execute operation with exponential backoff retry on specific exception.

    Args:
        operation: Callable that performs the API request and returns result
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "Service unavailable")
    """
    for attempt in range(MAX_RETRIES):
        try:
            return operation()
        except retryable_exception:
            if attempt == MAX_RETRIES - 1:
                raise
            delay = BASE_DELAY * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(delay)


@dataclass
class ExtractionResponse:
    """Raw response from an extraction provider."""

    text: str
    model: str


class ExtractionProvider(ABC):
    """
    Abstract base for extraction providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "gemini")
    - Set self._retryable_exception to the exception type that triggers retry
    - Set self._retry_message for logging during retries
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception]
    _retry_message: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @abstractmethod
    def _call_api(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        """Make a single API call (no retries). Implemented by subclasses."""
        pass

    def extract(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        """Send the document to the model with automatic retry on transient errors."""
        return _retry_with_backoff(
            partial(self._call_api, payload, media_type, prompt),
            self._retryable_exception,
            self._retry_message,
        )


class GeminiProvider(ExtractionProvider):
    """Google Gemini provider (inline image/PDF parts, JSON response mode)."""

    _provider_prefix = "gemini"
    _retry_message = "Service unavailable"

    def __init__(self, model: str = None):
        # Lazy import - google-genai is heavy, only load if this provider is used
        try:
            from google import genai
            from google.genai import errors
        except ImportError:
            raise ImportError("google-genai package required. Install with: pip install google-genai")

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
        if not api_key:
            raise ValueError("GEMINI_API_KEY environment variable not set")

        self.client = genai.Client(api_key=api_key)
        self._retryable_exception = errors.ServerError
        self.update_model(model or default_model("gemini"))

    def _call_api(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        from google.genai import types

        response = self.client.models.generate_content(
            model=self.model,
            contents=[types.Part.from_bytes(data=payload, mime_type=media_type), prompt],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                max_output_tokens=MAX_OUTPUT_TOKENS,
            ),
        )
        return ExtractionResponse(text=response.text or "", model=self.model)


class AnthropicProvider(ExtractionProvider):
    """Anthropic Claude provider (base64 image or document blocks)."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(self, model: str = None):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.Anthropic(api_key=api_key)
        self._retryable_exception = anthropic.InternalServerError
        self.update_model(model or default_model("anthropic"))

    def _call_api(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        block_type = "document" if media_type == "application/pdf" else "image"
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": block_type,
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": base64.b64encode(payload).decode("ascii"),
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        text = "".join(block.text for block in response.content if block.type == "text")
        return ExtractionResponse(text=text, model=self.model)


class OpenAIProvider(ExtractionProvider):
    """OpenAI GPT provider (data URI image or file parts, JSON object mode)."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"

    def __init__(self, model: str = None):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.client = openai.OpenAI(api_key=api_key)
        self._retryable_exception = openai.RateLimitError
        self.update_model(model or default_model("openai"))

    def _call_api(self, payload: bytes, media_type: str, prompt: str) -> ExtractionResponse:
        data_uri = f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"
        if media_type == "application/pdf":
            part = {"type": "file", "file": {"filename": "resume.pdf", "file_data": data_uri}}
        else:
            part = {"type": "image_url", "image_url": {"url": data_uri}}

        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            response_format={"type": "json_object"},
            messages=[{"role": "user", "content": [part, {"type": "text", "text": prompt}]}],
        )
        return ExtractionResponse(text=response.choices[0].message.content or "", model=self.model)


# --- Provider Factory ---


def default_model(provider_name: str) -> str:
    """Model for a provider: <PROVIDER>_MODEL from the environment, else the built-in default."""
    return os.getenv(f"{provider_name.upper()}_MODEL", DEFAULT_MODELS[provider_name])


def get_provider(provider_name: str = None, model: str = None) -> ExtractionProvider:
    """
    Get an extraction provider instance.

    Args:
        provider_name: "gemini", "anthropic" or "openai" (default: from EXTRACTION_PROVIDER env var)
        model: Model name (default: provider-specific default)

    Returns:
        ExtractionProvider instance
    """
    if provider_name is None:
        provider_name = os.getenv("EXTRACTION_PROVIDER", DEFAULT_PROVIDER)
    provider_name = provider_name.lower()

    if provider_name == "gemini":
        return GeminiProvider(model=model)
    elif provider_name == "anthropic":
        return AnthropicProvider(model=model)
    elif provider_name == "openai":
        return OpenAIProvider(model=model)
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'gemini', 'anthropic' or 'openai'")
