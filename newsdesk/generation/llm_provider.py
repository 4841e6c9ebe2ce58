"""Text generation provider interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union

import openai
from openai import OpenAI

from .errors import GenerationConfigError, GenerationError, RateLimitedError


class TextGenerator(ABC):
    """Abstract base class for text generation providers."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Full prompt text

        Returns:
            Generated text, stripped

        Raises:
            RateLimitedError: the service asked us to slow down
            GenerationError: any other failure
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class OpenAITextGenerator(TextGenerator):
    """OpenAI chat completions implementation."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        temperature: float = 0.4,
        max_tokens: int = 2000,
    ) -> None:
        """
        Initialize OpenAI generator.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL for OpenAI-compatible APIs
            timeout: Request timeout in seconds
        """
        # Rate limits are retried by RetryPolicy
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.total_tokens = 0
        self.api_calls = 0

    def generate(self, prompt: str) -> str:
        """Generate text using OpenAI."""
        self.api_calls += 1
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.RateLimitError as e:
            raise RateLimitedError(str(e)) from e
        except openai.APIError as e:
            raise GenerationError(str(e)) from e

        if response.usage:
            self.total_tokens += response.usage.total_tokens

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise GenerationError("Empty completion")
        return content.strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


class MockTextGenerator(TextGenerator):
    """Mock generator for dry runs and testing.

    Scripted responses are returned in order; an exception instance in the
    script is raised instead of returned. Without a script every call returns
    a numbered placeholder.
    """

    def __init__(self, responses: Optional[Iterable[Union[str, Exception]]] = None) -> None:
        """Initialize mock generator."""
        self.responses: List[Union[str, Exception]] = list(responses or [])
        self.calls: List[str] = []

    def generate(self, prompt: str) -> str:
        """Mock generation."""
        self.calls.append(prompt)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response.strip()
        return f"मॉक पुनर्लेखन {len(self.calls)}"

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "model": "mock",
        }


def build_text_generator(llm_config: Dict[str, Any]) -> TextGenerator:
    """Build a generator from Config.get_llm_config().

    Raises GenerationConfigError when the provider is unknown or the API key is missing.
    """
    provider = (llm_config.get("provider") or "openai").lower()

    if provider == "mock":
        return MockTextGenerator()

    if provider == "openai":
        api_key = llm_config.get("api_key")
        if not api_key:
            env_name = llm_config.get("api_key_env") or "OPENAI_API_KEY"
            raise GenerationConfigError(f"No API key configured; set {env_name}")
        return OpenAITextGenerator(
            api_key=api_key,
            model=llm_config.get("model") or "gpt-4o-mini",
            base_url=llm_config.get("base_url"),
            timeout=llm_config.get("timeout") or 60.0,
        )

    raise GenerationConfigError(f"Unsupported LLM provider: {provider}")
