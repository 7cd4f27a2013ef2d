"""Completion gateway: provider selection, HTTP calls, retry logic, and JSON parsing."""

from __future__ import annotations

import json
import logging
import random
import re
import threading
import time
from typing import Protocol, runtime_checkable

import httpx
from google import genai
from google.genai import types
from google.genai.errors import APIError, ClientError, ServerError

from .config import Settings
from .errors import MalformedCompletion, ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are a helpful AI assistant that provides structured, JSON-formatted responses when requested."
TEMPERATURE = 0.3

# Retry configuration (same provider only; there is no cross-provider failover)
MAX_RETRIES = 3
BASE_DELAY = 2  # seconds
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_MODEL = "llama-3.3-70b-versatile"
OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_MODEL = "gpt-4o-mini"
GEMINI_MODEL = "gemini-2.5-flash"

# Concurrency limiter: prevents thundering-herd 429s when many scoring
# threads call the provider at once.
_completion_semaphore = threading.Semaphore(30)


def _backoff(attempt: int) -> float:
    return BASE_DELAY * (2**attempt) + random.uniform(0, 1)  # noqa: S311


@runtime_checkable
class CompletionProvider(Protocol):
    """A black box that turns a prompt into completion text."""

    name: str

    def complete(self, prompt: str) -> str:
        """Return the completion text, or raise ``ProviderError``."""
        ...


class OpenAICompatibleProvider:
    """Chat-completions provider for OpenAI and OpenAI-compatible APIs (Groq)."""

    def __init__(self, name: str, api_key: str, base_url: str, model: str, timeout: float = 30.0) -> None:
        self.name = name
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self._model,
            "temperature": TEMPERATURE,
            "messages": [
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ],
        }

    def complete(self, prompt: str) -> str:
        url = f"{self._base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}

        for attempt in range(MAX_RETRIES):
            try:
                with _completion_semaphore, httpx.Client(timeout=self._timeout) as client:
                    resp = client.post(url, json=self._payload(prompt), headers=headers)
            except httpx.HTTPError as exc:
                raise ProviderError(f"{self.name} transport error: {exc}") from exc

            if resp.status_code in _RETRYABLE_STATUS and attempt < MAX_RETRIES - 1:
                delay = _backoff(attempt)
                logger.warning("%s returned %s, retrying in %.1fs", self.name, resp.status_code, delay)
                time.sleep(delay)
                continue

            if not resp.is_success:
                raise ProviderError(
                    f"{self.name} request failed ({resp.status_code}): {resp.text[:200]}",
                    status_code=resp.status_code,
                )

            try:
                data = resp.json()
            except ValueError as exc:
                raise ProviderError(f"{self.name} returned a non-JSON body") from exc
            return _first_choice_text(data)

        raise ProviderError(f"{self.name} failed after {MAX_RETRIES} attempts")  # pragma: no cover


def _first_choice_text(data: object) -> str:
    """Pull ``choices[0].message.content`` out of a chat-completions body.

    Any other shape yields ``""``, which callers treat as a malformed completion.
    """
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


class GeminiProvider:
    """Google Gemini provider backed by the ``google-genai`` SDK."""

    name = "gemini"

    def __init__(self, api_key: str, model: str = GEMINI_MODEL, timeout: float = 30.0) -> None:
        self._model = model
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def complete(self, prompt: str) -> str:
        try:
            return call_gemini(self._client, prompt, model=self._model)
        except APIError as exc:
            raise ProviderError(f"gemini request failed: {exc}", status_code=getattr(exc, "code", None)) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"gemini transport error: {exc}") from exc


def call_gemini(
    client: genai.Client,
    prompt: str,
    model: str = GEMINI_MODEL,
    temperature: float = TEMPERATURE,
) -> str:
    """Make a Gemini API call with retry logic.

    Retries on 429 (rate limit) and 5xx (overloaded) with exponential backoff.
    """
    last_exception: Exception | None = None

    for attempt in range(MAX_RETRIES):
        try:
            with _completion_semaphore:
                response = client.models.generate_content(
                    model=model,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        system_instruction=SYSTEM_MESSAGE,
                        temperature=temperature,
                    ),
                )
            return (response.text or "").strip()
        except ServerError as e:
            last_exception = e
            if attempt < MAX_RETRIES - 1:
                time.sleep(_backoff(attempt))
        except ClientError as e:
            if "429" in str(e) or "RESOURCE_EXHAUSTED" in str(e):
                last_exception = e
                if attempt < MAX_RETRIES - 1:
                    time.sleep(_backoff(attempt))
            else:
                raise

    raise last_exception  # type: ignore[misc]


class CompletionGateway:
    """Routes every completion of a run to the single provider chosen at start-up."""

    def __init__(self, provider: CompletionProvider | None) -> None:
        self._provider = provider

    @property
    def provider_name(self) -> str | None:
        return self._provider.name if self._provider is not None else None

    def complete(self, prompt: str) -> str:
        """Send *prompt* to the configured provider and return the raw text.

        Raises:
            ProviderUnavailable: No provider credential was configured.
            ProviderError: The provider call failed.
        """
        if self._provider is None:
            raise ProviderUnavailable(
                "No completion provider configured (set GROQ_API_KEY, OPENAI_API_KEY or GOOGLE_API_KEY)"
            )
        return self._provider.complete(prompt)


def create_gateway(settings: Settings) -> CompletionGateway:
    """Build the gateway for the highest-priority provider that has a credential."""
    provider_name = settings.active_provider
    if provider_name is None:
        logger.warning("No completion provider credential found; keyword fallbacks will be used")
        return CompletionGateway(None)

    api_key = settings.provider_keys[provider_name]
    provider: CompletionProvider
    if provider_name == "groq":
        provider = OpenAICompatibleProvider("groq", api_key, GROQ_BASE_URL, GROQ_MODEL, settings.llm_timeout)
    elif provider_name == "openai":
        provider = OpenAICompatibleProvider("openai", api_key, OPENAI_BASE_URL, OPENAI_MODEL, settings.llm_timeout)
    else:
        provider = GeminiProvider(api_key, timeout=settings.llm_timeout)

    logger.info("Using completion provider: %s", provider_name)
    return CompletionGateway(provider)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ``` or ``` ... ```)."""
    return re.sub(r"```(?:json)?\s*\n?", "", text).strip()


def parse_json(text: str) -> dict | list:
    """Extract and parse JSON from a completion that may contain markdown fences.

    Handles responses like:
        ```json\n{...}\n```
        ```\n[...]\n```
        Some text {json} more text
        Raw JSON
    """
    if not text or not text.strip():
        raise MalformedCompletion("Empty response from provider")

    stripped = strip_code_fences(text)

    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    # Try extracting the outermost JSON object { ... }
    match = re.search(r"\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}", text, re.DOTALL)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    # Try extracting a JSON array [ ... ]
    match = re.search(r"\[[\s\S]*\]", text)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    raise MalformedCompletion(f"Could not parse JSON from response: {text[:200]}")


def parse_json_object(text: str) -> dict:
    """Like :func:`parse_json` but insists on a JSON object."""
    data = parse_json(text)
    if not isinstance(data, dict):
        raise MalformedCompletion(f"Expected a JSON object, got {type(data).__name__}")
    return data
