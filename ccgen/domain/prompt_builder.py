"""Prompt builder for code generation requests.

Composes the fixed system instructions with the user's request. The request
template asks the model to answer inside a fenced code block followed by a
short explanation, which is what the response parser expects.
"""

import logging

logger = logging.getLogger(__name__)

FENCE = "```"

DEFAULT_SYSTEM_PROMPT = """You are an experienced software engineer.
Generate high-quality code for the request you are given.

Meet the following requirements:
- For TypeScript, prioritize type safety
- Prefer functional programming and keep side effects to a minimum
- Include appropriate comments in the code
- Handle errors
- Aim for a testable design"""

REQUEST_TEMPLATE = """Generate code based on the following request:

{prompt}

Return the generated code in this format:
```typescript
// write the code here
```

Also include a short explanation of the code."""


class PromptBuilder:
    """Builds the text sent to a backend.

    The user prompt is embedded verbatim. A prompt that contains a fence marker
    is still accepted, but logged, because a model that echoes it can shift
    which block the parser picks up as code.
    """

    @staticmethod
    def default_system_prompt() -> str:
        """Return the fixed system instruction block."""
        return DEFAULT_SYSTEM_PROMPT

    @staticmethod
    def request_prompt(user_prompt: str) -> str:
        """Embed the user's request in the fixed request template."""
        if FENCE in user_prompt:
            logger.warning(
                "Prompt contains a code fence marker; the response may contain extra fenced blocks"
            )
        return REQUEST_TEMPLATE.format(prompt=user_prompt)

    @classmethod
    def build(cls, user_prompt: str, system_prompt: str | None = None) -> str:
        """Build a single prompt: system instructions, blank line, request.

        Args:
            user_prompt: The natural-language request
            system_prompt: Optional replacement for the default system prompt

        Returns:
            Full prompt text for backends without a separate system field
        """
        system = system_prompt or cls.default_system_prompt()
        return f"{system}\n\n{cls.request_prompt(user_prompt)}"
