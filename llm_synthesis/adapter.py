"""LLM adapters for insight generation.

Provides a base interface and concrete adapters for OpenAI-compatible
APIs and a deterministic mock for testing.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional

SYSTEM_PROMPT = (
    "You are a senior business analyst with expertise in sales data analysis. "
    "Provide clear, actionable insights with specific metrics and percentages. "
    "Always include dollar amounts and growth rates where relevant."
)


class LLMAdapterError(Exception):
    """Raised when the model endpoint cannot be reached or rejects the call."""


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The fully formatted user prompt.

        Returns:
            Raw string response from the model (expected to be JSON).
        """


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 1000,
        temperature: float = 0.3,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_tokens: Maximum tokens in the completion.
            temperature: Sampling temperature.
            api_key: API key for the endpoint.
            base_url: Optional base URL for OpenAI-compatible endpoints.
        """
        from openai import OpenAI

        client_kwargs: dict = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    def generate(self, prompt: str) -> str:
        """Call the chat completion API with the analyst system prompt.

        Raises:
            LLMAdapterError: On any transport, auth or API error.
        """
        from openai import OpenAIError

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                stream=False,
            )
        except OpenAIError as exc:
            raise LLMAdapterError(str(exc) or "Failed to generate insights") from exc
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Fixed mock response used for local testing.
# ---------------------------------------------------------------------------
_MOCK_RESPONSE = {
    "summary": "Mock summary for testing purposes.",
    "insights": "Sales are concentrated in the top region; growth is stable.",
    "recommendations": [
        "Verify integration with the dashboard.",
        "Upload a real dataset for meaningful insights.",
    ],
}

_MOCK_RESPONSE_JSON = json.dumps(_MOCK_RESPONSE, indent=2)


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed response.

    Used for local testing and CI pipelines where no LLM API
    is available.
    """

    def __init__(self, response: Optional[str] = None) -> None:
        self._response = _MOCK_RESPONSE_JSON if response is None else response
        self.prompts: list = []

    def generate(self, prompt: str) -> str:
        """Record the prompt and return the fixed response."""
        self.prompts.append(prompt)
        return self._response
