"""Critical review agent.

Fetches the triaged files at the reviewed commit and asks the high-end model
for a critical review of the change. The model's answer is returned as-is.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult
from review_tools.git.changeset import ChangeSet
from review_tools.git.repository import GitRepository
from review_tools.llm.prompts import PromptTemplate
from review_tools.llm.tool import LLMTool

FileContents = dict[str, str]


def fetch_file_contents(
    repository: GitRepository, rev: str, files: list[str]
) -> FileContents:
    """Read `files` as of commit `rev`.

    Files that are missing at `rev`, are directories or are not UTF-8 text are
    skipped with a warning.
    """
    contents: FileContents = {}
    for path in files:
        try:
            contents[path] = repository.read_file(rev, path)
        except (FileNotFoundError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading file {path}: {e}")
    return contents


def render_file_blocks(contents: FileContents) -> str:
    """Render `--- path ---` blocks in insertion order."""
    return "".join(f"\n--- {path} ---\n{text}\n" for path, text in contents.items())


@dataclass(frozen=True)
class ReviewRequest:
    """Input of the critical review: the change plus the fetched file contents."""

    change_set: ChangeSet
    contents: FileContents


class CriticalReviewer(BaseTool[ReviewRequest, str]):
    """Produce the free-text review.

    The optional `system` instruction is prepended to the rendered prompt,
    separated by a blank line, and sent as part of the single user message.
    """

    def __init__(
        self, llm_tool: LLMTool, template: PromptTemplate, system: str = ""
    ) -> None:
        super().__init__("CriticalReviewer")
        self.llm_tool = llm_tool
        self.template = template
        self.system = system

    def build_prompt(self, request: ReviewRequest) -> str:
        prompt = self.template.render(
            commit_info=request.change_set.describe(),
            file_contents=render_file_blocks(request.contents),
        )
        if self.system:
            prompt = f"{self.system}\n\n{prompt}"
        return prompt

    def execute(self, input_data: ReviewRequest) -> ToolResult[str]:
        prompt = self.build_prompt(input_data)
        logger.info(
            f"Requesting review from {self.llm_tool.model} "
            f"with {len(input_data.contents)} file(s)"
        )

        result = self.llm_tool.run(prompt)
        if not result.ok or result.output is None:
            return ToolResult.error(
                error_code=ToolErrorCode.DEPENDENCY_ERROR,
                error_message=f"review model call failed: {result.error_message}",
            )

        review = result.output.content
        if not review.strip():
            return ToolResult.error(
                error_code=ToolErrorCode.VALIDATION_ERROR,
                error_message="review model returned an empty response",
            )

        return ToolResult.success(output=review)
