"""Official agent provider using the Claude Agent SDK.

Drives a bounded multi-turn agent session through claude-agent-sdk's query()
and reads the final ResultMessage. Authentication is ambient: the Claude Code
CLI must be installed and logged in (`claude login`).
"""

import asyncio
import contextlib
import logging
import shutil
from typing import Any

from ccgen.domain.errors import GenerationAborted, NoResultError, ProviderError
from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.generation_request import GenerationRequest
from ccgen.domain.prompt_builder import PromptBuilder
from ccgen.domain.providers.code_provider import CodeProvider
from ccgen.domain.response_parser import parse_response

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Claude Code SDK (Official)"
DEFAULT_MODEL_NAME = "claude-via-official-sdk"
DEFAULT_MAX_TURNS = 3
SDK_MISSING = "claude-agent-sdk is not installed (pip install claude-agent-sdk)"


class OfficialAgentProvider(CodeProvider):
    """Code provider backed by a Claude Agent SDK session.

    Requirements:
        - claude-agent-sdk package must be installed
        - Claude Code CLI must be installed and authenticated

    The session is capped at request.max_turns (default 3). Every message is
    collected in arrival order; the result message is looked up in the full
    sequence afterwards rather than assumed to be last.
    """

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return provider metadata."""
        return {
            "name": "official",
            "description": "Claude Code agent via the official Agent SDK",
            "requires_config": False,
            "config_keys": [],
            "default_model": DEFAULT_MODEL_NAME,
            "supports_system_prompt": False,
            "supports_abort": True,
        }

    def validate(self) -> None:
        """Verify SDK and CLI are available.

        Raises:
            ProviderError: If SDK not installed or CLI not found
        """
        try:
            from claude_agent_sdk import query  # noqa: F401
        except ImportError as e:
            raise ProviderError(SDK_MISSING) from e

        if shutil.which("claude") is None:
            raise ProviderError(
                "Claude Code CLI not found. "
                "Install from: https://docs.anthropic.com/claude-code"
            )

    async def generate_code(
        self,
        request: GenerationRequest,
        *,
        abort: asyncio.Event | None = None,
    ) -> GeneratedCode:
        """Run an agent session and parse its final result.

        Args:
            request: Generation request; max_turns bounds the session
            abort: Optional event that terminates the session immediately

        Returns:
            GeneratedCode with cost, session id and turn count from the result message

        Raises:
            NoResultError: If the session ends without a usable result message
            GenerationAborted: If abort is set before the session ends
            ProviderError: If the SDK fails
        """
        try:
            from claude_agent_sdk import query
            from claude_agent_sdk.types import ResultMessage
        except ImportError as e:
            raise ProviderError(SDK_MISSING) from e

        logger.info("Starting code generation with the official Claude Code SDK")

        prompt = PromptBuilder.build(request.prompt)
        options = self._build_options(request)

        try:
            messages = await self._collect_messages(query(prompt=prompt, options=options), abort)
        except ProviderError:
            raise
        except Exception as e:
            raise self._wrap_sdk_error(e) from e

        result_message = next((m for m in messages if isinstance(m, ResultMessage)), None)
        final_result = getattr(result_message, "result", None) if result_message else None
        if not final_result:
            raise NoResultError("No result message received from the Claude Code SDK")

        parsed = parse_response(final_result)

        return GeneratedCode(
            content=parsed.content,
            language=parsed.language,
            explanation=parsed.explanation,
            provider_name=PROVIDER_NAME,
            model_name=request.model or DEFAULT_MODEL_NAME,
            cost_usd=result_message.total_cost_usd,
            session_id=result_message.session_id,
            num_turns=result_message.num_turns,
        )

    def _build_options(self, request: GenerationRequest) -> "ClaudeAgentOptions":
        """Build ClaudeAgentOptions from the request.

        Args:
            request: Generation request

        Returns:
            Configured ClaudeAgentOptions
        """
        from claude_agent_sdk import ClaudeAgentOptions

        return ClaudeAgentOptions(
            model=request.model,
            max_turns=request.max_turns or DEFAULT_MAX_TURNS,
        )

    async def _collect_messages(self, stream, abort: asyncio.Event | None) -> list[Any]:
        """Consume the message stream to its end, or until abort is set.

        Args:
            stream: Async iterator of SDK messages
            abort: Optional abort event

        Returns:
            All messages in arrival order

        Raises:
            GenerationAborted: If abort is set first
        """
        messages: list[Any] = []

        async def consume() -> None:
            async for message in stream:
                messages.append(message)
                self._log_progress(message)

        if abort is None:
            await consume()
            return messages

        consumer = asyncio.ensure_future(consume())
        waiter = asyncio.ensure_future(abort.wait())
        try:
            await asyncio.wait({consumer, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Also runs when the caller cancels us; the stream must not outlive this call
            waiter.cancel()
            if not consumer.done():
                consumer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await consumer

        if consumer.cancelled():
            logger.warning(f"Agent session aborted after {len(messages)} message(s)")
            raise GenerationAborted("Claude Code session was aborted before a result arrived")

        # Re-raises any SDK error from the stream
        consumer.result()
        return messages

    def _log_progress(self, message: Any) -> None:
        from claude_agent_sdk.types import AssistantMessage, ResultMessage

        if isinstance(message, AssistantMessage):
            logger.info("Claude is responding...")
        elif isinstance(message, ResultMessage):
            logger.info(f"Cost: ${message.total_cost_usd}, turns: {message.num_turns}")

    def _wrap_sdk_error(self, error: Exception) -> ProviderError:
        """Wrap SDK exceptions with actionable error messages.

        Args:
            error: The exception from the SDK

        Returns:
            ProviderError with actionable message
        """
        error_type = type(error).__name__

        if error_type == "CLINotFoundError":
            return ProviderError(
                "Claude Code CLI not found. "
                "Install from: https://docs.anthropic.com/claude-code"
            )
        elif error_type == "ProcessError":
            return ProviderError(f"Claude Code process failed: {error}")
        elif error_type == "CLIJSONDecodeError":
            return ProviderError(
                f"Invalid response from Claude Code CLI (malformed JSON): {error}"
            )
        elif error_type == "TimeoutError" or "timeout" in str(error).lower():
            return ProviderError(f"Claude Code timed out. Consider increasing max_turns: {error}")
        else:
            return ProviderError(f"Claude Agent SDK error ({error_type}): {error}")
