"""File triage agent.

Asks the low-cost model which of the changed files deserve a full review.
The model's answer is untrusted: it is parsed into a list of strings first
and then run through the same text-file allowlist as git-derived paths.
"""

from __future__ import annotations

import json
import re

from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult
from review_tools.git.changeset import ChangeSet, filter_text_files
from review_tools.llm.prompts import PromptTemplate
from review_tools.llm.tool import LLMTool

_LANGUAGE_TAG = re.compile(r"^json\s*\n?", re.IGNORECASE)


def strip_code_fence(response: str) -> str:
    """Remove surrounding backtick fences and a leading `json` language tag."""
    text = response.strip().strip("`").strip()
    return _LANGUAGE_TAG.sub("", text, count=1).strip()


def parse_file_list(response: str) -> list[str]:
    """Parse a triage response into raw path strings.

    Raises:
        ValueError: The response is not a JSON array of strings
    """
    text = strip_code_fence(response)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse LLM response as JSON: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of paths, got {type(data).__name__}")

    paths = []
    for item in data:
        if not isinstance(item, str):
            raise ValueError(f"Expected file path strings, got {item!r}")
        paths.append(item.strip().strip("`").strip())
    return paths


class FileTriager(BaseTool[ChangeSet, list[str]]):
    """Select the files the critical review should see in full."""

    def __init__(self, llm_tool: LLMTool, template: PromptTemplate) -> None:
        super().__init__("FileTriager")
        self.llm_tool = llm_tool
        self.template = template

    def build_prompt(self, change_set: ChangeSet) -> str:
        return self.template.render(
            commit_info=change_set.describe(),
            changed_files="\n".join(change_set.files) or "(none)",
        )

    def execute(self, input_data: ChangeSet) -> ToolResult[list[str]]:
        prompt = self.build_prompt(input_data)

        result = self.llm_tool.run(prompt)
        if not result.ok or result.output is None:
            return ToolResult.error(
                error_code=ToolErrorCode.DEPENDENCY_ERROR,
                error_message=f"triage model call failed: {result.error_message}",
            )

        try:
            proposed = parse_file_list(result.output.content)
        except ValueError as e:
            return ToolResult.error(
                error_code=ToolErrorCode.VALIDATION_ERROR,
                error_message=str(e),
            )

        files = filter_text_files(proposed)
        dropped = len(proposed) - len(files)
        if dropped:
            logger.warning(f"Dropped {dropped} non-text or duplicate path(s) from triage")

        logger.info(f"Triage selected {len(files)} file(s): {', '.join(files) or '-'}")
        return ToolResult.success(output=files)
