"""Structured output schema for generated sales insights."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_RECOMMENDATION = "Review the generated insights for actionable recommendations"


class InsightReport(BaseModel):
    """Only allowed output contract for the insight generator."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    summary: str = Field(min_length=1)
    insights: str = Field(min_length=1)
    recommendations: List[str] = Field(default_factory=list)

    @classmethod
    def from_free_text(cls, content: str) -> "InsightReport":
        """Wrap a non-JSON model reply so it can still be displayed."""
        text = content.strip()
        return cls(
            summary=text[:200] + "...",
            insights=text,
            recommendations=[FALLBACK_RECOMMENDATION],
        )
