"""Tests for the file triage agent and its response parsing."""

from __future__ import annotations

import pytest

from review_agents.triage import FileTriager, parse_file_list, strip_code_fence
from review_tools.base import ToolErrorCode, ToolStatus
from review_tools.llm.base import LLMConfig, LLMMessage, LLMProvider, LLMResponse
from review_tools.llm.prompts import TRIAGE_TEMPLATE, PromptManager
from review_tools.llm.providers import MockProvider
from review_tools.llm.tool import LLMTool


def _triager(responses: list[str]) -> tuple[FileTriager, MockProvider]:
    provider = MockProvider(LLMConfig(api_key="test", model="low"), responses)
    template = PromptManager().get_template(TRIAGE_TEMPLATE)
    return FileTriager(LLMTool(provider), template), provider


class _FailingProvider(LLMProvider):
    async def generate(self, messages: list[LLMMessage], **kwargs) -> LLMResponse:
        raise RuntimeError("connection refused")


def test_strip_code_fence() -> None:
    assert strip_code_fence('```json\n["a.go"]\n```') == '["a.go"]'
    assert strip_code_fence('`["a.go"]`') == '["a.go"]'
    assert strip_code_fence('  ["a.go"]  ') == '["a.go"]'


def test_parse_mixed_fence_noise() -> None:
    response = '`["a.go", "b.png", "`c.md`"]`'
    assert parse_file_list(response) == ["a.go", "b.png", "c.md"]


@pytest.mark.parametrize(
    "response",
    ["not json", '{"files": ["a.go"]}', '["a.go", 3]', ""],
)
def test_parse_rejects_invalid_responses(response: str) -> None:
    with pytest.raises(ValueError):
        parse_file_list(response)


def test_triage_filters_untrusted_paths(change_set) -> None:
    triager, _ = _triager(['```json\n["a.go", "b.png", "c.md", "a.go"]\n```'])
    result = triager.run(change_set)

    assert result.status == ToolStatus.SUCCESS
    assert result.output == ["a.go", "c.md"]


def test_triage_prompt_carries_commit_and_files(change_set) -> None:
    triager, provider = _triager(["[]"])
    result = triager.run(change_set)

    assert result.output == []
    (messages,) = provider.calls
    assert len(messages) == 1
    assert messages[0].role == "user"
    prompt = messages[0].content
    assert "Message: Fix parser" in prompt
    assert change_set.diff in prompt
    assert "a.go\nc.md" in prompt


def test_triage_parse_failure_is_an_error(change_set) -> None:
    triager, _ = _triager(["Sure! Here are the files: a.go"])
    result = triager.run(change_set)

    assert result.status == ToolStatus.ERROR
    assert result.error_code == ToolErrorCode.VALIDATION_ERROR


def test_triage_model_failure_is_an_error(change_set) -> None:
    tool = LLMTool(_FailingProvider(LLMConfig(api_key="test", model="low")))
    triager = FileTriager(tool, PromptManager().get_template(TRIAGE_TEMPLATE))
    result = triager.run(change_set)

    assert result.error_code == ToolErrorCode.DEPENDENCY_ERROR
    assert "connection refused" in result.error_message
