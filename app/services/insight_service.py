"""
app/services/insight_service.py

Natural-language insight generation over the filtered dataset.

Failures are reported as InsightGenerationError and never touch the
session's dataset. There is no automatic retry; callers re-trigger.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.config import LLMSettings, get_llm_settings
from app.domain.dataset import FilterState, MetricsSummary
from app.services.insight_summary import build_insight_summary
from llm_synthesis.adapter import BaseLLMAdapter, LLMAdapterError, MockLLMAdapter, OpenAILLMAdapter
from llm_synthesis.prompt_builder import InsightPromptBuilder
from llm_synthesis.schema import InsightReport
from llm_synthesis.validator import LLMOutputValidationError, parse_insight_output

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "OpenAI API key not configured. Please add LLM_API_KEY or OPENAI_API_KEY "
    "to your environment variables."
)


class InsightGenerationError(RuntimeError):
    """
    Raised when insights cannot be generated for the current selection.
    """


def build_adapter(settings: LLMSettings) -> BaseLLMAdapter:
    """Instantiate the adapter selected by ``LLM_ADAPTER``.

    LLM_ADAPTER=mock   -> MockLLMAdapter  (testing, no API key required)
    LLM_ADAPTER=openai -> OpenAILLMAdapter (default)

    Raises:
        InsightGenerationError: When the OpenAI adapter has no API key.
    """
    if settings.adapter == "mock":
        return MockLLMAdapter()
    if not settings.api_key:
        raise InsightGenerationError(MISSING_KEY_MESSAGE)
    return OpenAILLMAdapter(
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        api_key=settings.api_key,
        base_url=settings.base_url,
    )


class InsightService:
    """
    Builds the statistical summary, prompts the model and parses the reply.
    """

    def __init__(
        self,
        *,
        adapter: BaseLLMAdapter | None = None,
        settings: LLMSettings | None = None,
        prompt_builder: InsightPromptBuilder | None = None,
    ) -> None:
        self._adapter = adapter
        self._settings = settings
        self._prompt_builder = prompt_builder or InsightPromptBuilder()

    def _resolve_adapter(self) -> BaseLLMAdapter:
        if self._adapter is None:
            self._adapter = build_adapter(self._settings or get_llm_settings())
        return self._adapter

    def generate(
        self,
        *,
        metrics: MetricsSummary,
        filter_state: FilterState,
    ) -> InsightReport:
        """
        Generate a summary, insights and recommendations for *metrics*.

        Raises:
            InsightGenerationError: No data, missing key, transport failure
                or an unusable model reply.
        """
        if metrics.record_count == 0:
            raise InsightGenerationError("No data available for the current filters.")

        adapter = self._resolve_adapter()
        summary = build_insight_summary(metrics=metrics, filter_state=filter_state)
        prompt = self._prompt_builder.build_prompt(summary.text)

        try:
            raw = adapter.generate(prompt)
            report = parse_insight_output(raw)
        except LLMAdapterError as exc:
            logger.warning("Insight generation failed: %s", exc)
            raise InsightGenerationError(str(exc)) from exc
        except LLMOutputValidationError as exc:
            logger.warning("Insight reply rejected: %s", exc)
            raise InsightGenerationError("Failed to generate insights") from exc

        logger.info(
            "Insights generated records=%d recommendations=%d",
            metrics.record_count,
            len(report.recommendations),
        )
        return report


@lru_cache(maxsize=1)
def get_insight_service() -> InsightService:
    return InsightService()
