"""Extraction of code and explanation from raw model output."""

import logging
import re

from ccgen.domain.models.generated_code import ParsedResponse

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "typescript"

# Opening fence with optional language tag, then a newline, then a non-greedy body.
_FENCE_PATTERN = re.compile(r"```(\w+)?\n(.*?)```", re.DOTALL)


def parse_response(raw: str) -> ParsedResponse:
    """Split a model response into code and explanation.

    Only the first fenced block is used. Its language tag (default
    "typescript") and stripped body become the code; everything outside that
    block, stripped, becomes the explanation (None when empty). Later fenced
    blocks are left inside the explanation.

    When the response has no fenced block the whole (stripped) text is taken
    as code. This never raises.

    Args:
        raw: Raw response text from the model

    Returns:
        ParsedResponse with content, language and explanation
    """
    match = _FENCE_PATTERN.search(raw)

    if match is None:
        logger.warning("No fenced code block found in response; using the full text as code")
        return ParsedResponse(content=raw.strip(), language=DEFAULT_LANGUAGE, explanation=None)

    language = match.group(1) or DEFAULT_LANGUAGE
    content = match.group(2).strip()

    remainder = raw[: match.start()] + raw[match.end() :]
    explanation = remainder.strip().strip("\n")

    return ParsedResponse(
        content=content,
        language=language,
        explanation=explanation or None,
    )
