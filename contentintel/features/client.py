"""
LLM client shared by the four analysis engines.

Talks to any OpenAI-compatible endpoint (OpenAI itself, an integration
proxy, or TogetherAI). Every call asks for a JSON object and is bounded
by a timeout; the SDK's own retries are off because a failed call is
answered with a fallback report instead.
"""

import logging
import os
import threading
from typing import Any, Dict, List, Optional

from contentintel.utils.errors import AnalysisError, EngineTimeoutError, ModelLoadError

DEFAULT_MODELS: Dict[str, str] = {
    "openai": "gpt-4o-mini",
    "togetherai": "meta-llama/Llama-3.3-70B-Instruct-Turbo",
}

# None lets the SDK pick its default endpoint
PROVIDER_BASE_URLS: Dict[str, Optional[str]] = {
    "openai": None,
    "togetherai": "https://api.together.xyz/v1",
}

# Environment variables searched for a key, in order
PROVIDER_KEY_VARS: Dict[str, tuple] = {
    "openai": ("OPENAI_API_KEY", "AI_INTEGRATIONS_OPENAI_API_KEY"),
    "togetherai": ("TOGETHER_API_KEY", "TOGETHERAI_API_KEY"),
}

BASE_URL_VAR = "AI_INTEGRATIONS_OPENAI_BASE_URL"


def _env_reference(value: str) -> Optional[str]:
    """Variable name of a literal "${VAR}" value, else None."""
    if value.startswith("${") and value.endswith("}"):
        return value[2:-1]
    return None


class LLMClient:
    """
    Chat-completions wrapper with a lazily created, shared SDK client.

    One instance serves every engine and every worker thread. The SDK
    client is built on first use under a lock, so a missing API key only
    surfaces when an engine actually runs.
    """

    def __init__(
        self,
        provider: str = "openai",
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        timeout: float = 60.0,
    ):
        self.provider = provider.lower()
        self.model = model or DEFAULT_MODELS.get(self.provider, DEFAULT_MODELS["openai"])
        self.default_temperature = temperature
        self.default_max_tokens = max_tokens
        self.timeout = timeout
        self._api_key = self._resolve_api_key(api_key)
        self._base_url = self._resolve_base_url(base_url)
        self._client = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger("llm_client")

    @property
    def model_id(self) -> str:
        return f"{self.provider}/{self.model}"

    @property
    def client(self):
        """The SDK client, built once on first access."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._create_client()
        return self._client

    @staticmethod
    def _messages(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Ask for one JSON object and return the raw reply text.

        Args:
            system_prompt: Role, schema and guidelines.
            user_prompt: The content under analysis.
            temperature: Sampling temperature; the client default when None.
            max_tokens: Reply budget; the client default when None.

        Raises:
            EngineTimeoutError: The provider did not answer within `timeout`.
            ModelLoadError: No API key is configured.
            AnalysisError: The call failed or the reply was empty.
        """
        from openai import APITimeoutError

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": self._messages(system_prompt, user_prompt),
            "response_format": {"type": "json_object"},
            "temperature": self.default_temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
            "timeout": self.timeout,
        }

        try:
            response = self.client.chat.completions.create(**request)
        except APITimeoutError as e:
            raise EngineTimeoutError("llm_client", self.timeout) from e
        except ModelLoadError:
            raise
        except Exception as e:
            raise AnalysisError(
                f"LLM API call failed: {e}", engine_name="llm_client", original_error=e
            ) from e

        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise AnalysisError("LLM returned an empty response", engine_name="llm_client")
        self.logger.debug(f"{self.model_id} replied with {len(text)} characters")
        return text

    def _resolve_api_key(self, api_key: Optional[str]) -> Optional[str]:
        """Explicit key, then a "${VAR}" reference, then the provider's variables."""
        if api_key:
            var_name = _env_reference(api_key)
            if var_name is None:
                return api_key
            if os.environ.get(var_name):
                return os.environ[var_name]

        for var_name in PROVIDER_KEY_VARS.get(self.provider, ()):
            if os.environ.get(var_name):
                return os.environ[var_name]
        return None

    def _resolve_base_url(self, base_url: Optional[str]) -> Optional[str]:
        if base_url and _env_reference(base_url) is None:
            return base_url
        if self.provider == "openai":
            return os.environ.get(BASE_URL_VAR) or None
        return PROVIDER_BASE_URLS.get(self.provider)

    def _create_client(self):
        if not self._api_key:
            names = " or ".join(PROVIDER_KEY_VARS.get(self.provider, ("OPENAI_API_KEY",)))
            raise ModelLoadError(
                f"No API key found for {self.provider}. Set {names}.",
                model_name=self.provider,
            )

        from openai import OpenAI

        options: Dict[str, Any] = {
            "api_key": self._api_key,
            "timeout": self.timeout,
            "max_retries": 0,
        }
        if self._base_url:
            options["base_url"] = self._base_url
        self.logger.debug(f"Creating {self.provider} client (model {self.model})")
        return OpenAI(**options)


def create_llm_client(config: Dict[str, Any]) -> LLMClient:
    """Build the shared client from the 'llm' config section."""
    return LLMClient(
        provider=config.get("provider", "openai"),
        model=config.get("model"),
        api_key=config.get("api_key"),
        base_url=config.get("base_url"),
        temperature=config.get("temperature", 0.2),
        max_tokens=config.get("max_tokens", 4096),
        timeout=config.get("timeout", 60.0),
    )
