"""
Provider gateway

Single seam between the pipeline and the text-completion providers. Each
provider satisfies ``complete(prompt, config) -> str``; the rest of the
pipeline never branches on which one is in use.

A gateway call is one best-effort attempt: no retries, no streaming. The
credential is checked before any request goes out.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings
from openai import OpenAI, OpenAIError

from .exceptions import ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)


MIN_OUTPUT_TOKENS = 1
MAX_OUTPUT_TOKENS = 8000


def _setting(name: str, default: str = "") -> str:
    return os.environ.get(name) or getattr(settings, name, default) or default


@dataclass(frozen=True)
class CompletionConfig:
    """
    Per-call completion parameters.

    ``model`` of None means "the provider's configured default".
    """

    temperature: float = 0.3
    max_output_tokens: int = 1500
    timeout: float = 60.0
    model: Optional[str] = None

    def __post_init__(self):
        try:
            temperature = float(self.temperature)
        except (TypeError, ValueError):
            temperature = 0.3
        object.__setattr__(self, "temperature", max(0.0, min(1.0, temperature)))

        try:
            max_tokens = int(self.max_output_tokens)
        except (TypeError, ValueError):
            max_tokens = 1500
        object.__setattr__(
            self,
            "max_output_tokens",
            max(MIN_OUTPUT_TOKENS, min(MAX_OUTPUT_TOKENS, max_tokens)),
        )

    def with_model(self, model: str) -> "CompletionConfig":
        return replace(self, model=model)


@dataclass(frozen=True)
class Completion:
    """
    One prompt/response pair, kept only long enough to be logged.
    """

    provider: str
    model: str
    temperature: float
    max_output_tokens: int
    prompt_chars: int
    text: str


class CompletionGateway:
    """
    Base class for provider implementations.
    """

    name = ""
    display_name = ""
    api_key_setting = ""
    model_setting = ""
    default_model = ""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else _setting(self.api_key_setting)
        self.model = model or _setting(self.model_setting, self.default_model)

    def is_available(self) -> bool:
        return bool(self.api_key)

    def complete(self, prompt: str, config: CompletionConfig) -> str:
        """
        Send ``prompt`` to the provider and return the raw completion text.

        Raises:
            ProviderUnavailable: no credential configured.
            ProviderError: the call failed, timed out or returned garbage.
        """
        if not self.is_available():
            raise ProviderUnavailable(
                f"{self.display_name} is not configured. Set {self.api_key_setting} to enable it."
            )

        model = config.model or self.model
        text = self._invoke(prompt, config.with_model(model))
        completion = Completion(
            provider=self.name,
            model=model,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
            prompt_chars=len(prompt),
            text=text,
        )
        logger.info(
            "Completion via %s model=%s temperature=%.2f max_tokens=%d prompt_chars=%d completion_chars=%d",
            completion.provider,
            completion.model,
            completion.temperature,
            completion.max_output_tokens,
            completion.prompt_chars,
            len(completion.text),
        )
        return completion.text

    def _invoke(self, prompt: str, config: CompletionConfig) -> str:
        raise NotImplementedError


class GroqGateway(CompletionGateway):
    """
    Groq chat completions over its OpenAI-compatible HTTP endpoint.
    """

    name = "groq"
    display_name = "Groq"
    api_key_setting = "GROQ_API_KEY"
    model_setting = "GROQ_MODEL"
    default_model = "llama-3.1-8b-instant"
    default_url = "https://api.groq.com/openai/v1/chat/completions"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, url: Optional[str] = None):
        super().__init__(api_key=api_key, model=model)
        self.url = url or _setting("GROQ_API_URL", self.default_url)

    def _invoke(self, prompt: str, config: CompletionConfig) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": config.temperature,
            "max_tokens": config.max_output_tokens,
        }

        try:
            response = requests.post(self.url, headers=headers, json=payload, timeout=config.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as exc:
            logger.error("Groq request timed out after %ss", config.timeout)
            raise ProviderError("The AI provider timed out. Please try again.") from exc
        except (requests.RequestException, ValueError) as exc:
            logger.error("Groq request failed: %s", exc)
            raise ProviderError() from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Groq response missing choices: %s", str(data)[:300])
            raise ProviderError() from exc
        return content or ""


class OpenAIGateway(CompletionGateway):
    """
    OpenAI Responses API in plain text mode.
    """

    name = "openai"
    display_name = "OpenAI"
    api_key_setting = "OPENAI_API_KEY"
    model_setting = "OPENAI_MODEL"
    default_model = "gpt-4o-mini"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        super().__init__(api_key=api_key, model=model)
        self._client = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, max_retries=0)
        return self._client

    def _invoke(self, prompt: str, config: CompletionConfig) -> str:
        try:
            response = self.client.responses.create(
                model=config.model,
                input=prompt,
                temperature=config.temperature,
                max_output_tokens=config.max_output_tokens,
                timeout=config.timeout,
            )
        except OpenAIError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ProviderError() from exc
        return self._response_text(response)

    def _response_text(self, response: Any) -> str:
        output_text_parts: List[str] = []
        for item in getattr(response, "output", []) or []:
            for block in getattr(item, "content", []) or []:
                if getattr(block, "type", None) == "output_text":
                    output_text_parts.append(getattr(block, "text", ""))

        text = "".join(output_text_parts)
        # SDK convenience property fallback
        if not text and hasattr(response, "output_text"):
            text = getattr(response, "output_text", "") or ""
        return text


PROVIDERS = {
    GroqGateway.name: GroqGateway,
    OpenAIGateway.name: OpenAIGateway,
}


def default_provider_name() -> str:
    return _setting("LLM_PROVIDER", GroqGateway.name).lower()


def get_gateway(name: Optional[str] = None) -> CompletionGateway:
    """
    Return the gateway for ``name`` (or the configured default).

    Raises ProviderUnavailable for unknown providers or missing credentials.
    """
    provider_name = (name or default_provider_name()).lower()
    gateway_class = PROVIDERS.get(provider_name)
    if gateway_class is None:
        raise ProviderUnavailable(
            f"Unknown AI provider '{provider_name}'. Choose one of: {', '.join(sorted(PROVIDERS))}."
        )

    gateway = gateway_class()
    if not gateway.is_available():
        raise ProviderUnavailable(
            f"{gateway.display_name} is not configured. Set {gateway.api_key_setting} to enable it."
        )
    return gateway


def available_providers() -> List[Dict[str, object]]:
    providers = []
    for name, gateway_class in PROVIDERS.items():
        gateway = gateway_class()
        providers.append(
            {
                "name": name,
                "display_name": gateway.display_name,
                "model": gateway.model,
                "available": gateway.is_available(),
            }
        )
    return providers
