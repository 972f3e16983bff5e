"""Parsing layer for raw insight-generator output.

Valid JSON is validated against the InsightReport schema. Replies that are
not a JSON object are wrapped as free text rather than rejected.
"""

import json
import logging
import re
from typing import List

from pydantic import ValidationError

from llm_synthesis.schema import InsightReport

logger = logging.getLogger(__name__)


class LLMOutputValidationError(Exception):
    """Raised when a JSON reply does not satisfy the InsightReport schema.

    Attributes:
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed validation.
    """

    def __init__(self, errors: List[str], raw_response: str) -> None:
        self.errors = errors
        self.raw_response = raw_response
        super().__init__("LLM output validation failed: " + "; ".join(errors))


def _strip_markdown_fences(text: str) -> str:
    """Remove optional markdown code fences wrapping JSON."""
    stripped = text.strip()
    match = re.match(
        r"^```(?:json)?\s*\n?(.*?)\n?\s*```$",
        stripped,
        re.DOTALL,
    )
    if match:
        return match.group(1).strip()
    return stripped


def parse_insight_output(raw_response: str) -> InsightReport:
    """Parse a raw model reply into an InsightReport.

    Steps:
        1. Strip optional markdown fences.
        2. Parse as JSON; non-JSON or non-object replies become free text.
        3. Validate against InsightReport.

    Raises:
        LLMOutputValidationError: If the reply is an empty string or a JSON
            object missing required fields.
    """
    if not raw_response or not raw_response.strip():
        raise LLMOutputValidationError(["empty response"], raw_response or "")

    cleaned = _strip_markdown_fences(raw_response)
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError):
        logger.info("Insight reply is not JSON; using free-text fallback")
        return InsightReport.from_free_text(raw_response)

    if not isinstance(data, dict):
        return InsightReport.from_free_text(raw_response)

    # Some models return insights as a list of bullet strings.
    if isinstance(data.get("insights"), list):
        data["insights"] = "\n".join(str(item) for item in data["insights"])

    try:
        return InsightReport.model_validate(data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        ]
        raise LLMOutputValidationError(errors, raw_response) from exc
