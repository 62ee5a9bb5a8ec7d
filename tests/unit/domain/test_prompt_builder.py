"""Unit tests for PromptBuilder."""

import logging

from ccgen.domain.prompt_builder import DEFAULT_SYSTEM_PROMPT, PromptBuilder


class TestDefaultSystemPrompt:

    def test_covers_engineering_requirements(self):
        prompt = PromptBuilder.default_system_prompt()

        assert "type safety" in prompt
        assert "side effects" in prompt
        assert "comments" in prompt
        assert "errors" in prompt.lower()
        assert "testable" in prompt

    def test_is_multi_line(self):
        assert len(PromptBuilder.default_system_prompt().splitlines()) > 3


class TestRequestPrompt:

    def test_embeds_user_prompt_verbatim(self):
        text = PromptBuilder.request_prompt("add two numbers {x} %s")

        assert "add two numbers {x} %s" in text

    def test_asks_for_fenced_block_and_explanation(self):
        text = PromptBuilder.request_prompt("anything")

        assert "```typescript" in text
        assert "explanation" in text

    def test_does_not_include_system_prompt(self):
        text = PromptBuilder.request_prompt("anything")

        assert DEFAULT_SYSTEM_PROMPT not in text

    def test_warns_on_fence_in_prompt(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ccgen.domain.prompt_builder"):
            text = PromptBuilder.request_prompt("fix this:\n```\nbroken\n```")

        assert "code fence" in caplog.text
        # Still embedded without escaping
        assert "```\nbroken\n```" in text

    def test_no_warning_for_plain_prompt(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ccgen.domain.prompt_builder"):
            PromptBuilder.request_prompt("plain")

        assert caplog.records == []


class TestBuild:

    def test_default_system_prompt_then_request(self):
        text = PromptBuilder.build("add two numbers")

        expected = f"{DEFAULT_SYSTEM_PROMPT}\n\n{PromptBuilder.request_prompt('add two numbers')}"
        assert text == expected

    def test_custom_system_prompt_replaces_default(self):
        text = PromptBuilder.build("add two numbers", "Be terse.")

        assert text.startswith("Be terse.\n\n")
        assert DEFAULT_SYSTEM_PROMPT not in text

    def test_empty_custom_system_prompt_uses_default(self):
        text = PromptBuilder.build("add two numbers", "")

        assert text.startswith(DEFAULT_SYSTEM_PROMPT)

    def test_is_deterministic(self):
        assert PromptBuilder.build("x") == PromptBuilder.build("x")
