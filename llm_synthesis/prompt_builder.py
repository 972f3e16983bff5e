"""Structured prompt builder for sales insight generation."""

import json

_EXAMPLE_OUTPUT = json.dumps(
    {
        "summary": "Executive summary here",
        "insights": "Detailed insights with metrics",
        "recommendations": ["recommendation 1", "recommendation 2", "recommendation 3"],
    },
    indent=2,
)

_TASK = """\
Please provide:
1. A concise executive summary (2-3 sentences)
2. 3-5 key insights with specific metrics
3. 2-3 actionable recommendations
"""


class InsightPromptBuilder:
    """Builds the user prompt sent to the insight generator."""

    def build_prompt(self, summary_text: str) -> str:
        """Wrap a plain-text statistical summary with task and format instructions.

        Args:
            summary_text: Output of the statistical summary builder.

        Returns:
            A fully formatted prompt string ready for LLM consumption.
        """
        return (
            "Analyze this business dataset and provide insights:\n\n"
            f"{summary_text.strip()}\n\n"
            f"{_TASK}\n"
            "Format as JSON with this structure:\n"
            f"{_EXAMPLE_OUTPUT}\n"
        )
