"""End-to-end commit review pipeline.

Runs the stages strictly in order, each consuming the previous stage's
output:

1. resolve the commit range
2. extract the diff and the touched text files
3. triage: the low model picks the files to read
4. fetch those files at the newer commit
5. critical review: the high model reviews the change
6. append file links to the review

Any failing stage aborts the run with `PipelineAbort`; only file reads and
link generation degrade gracefully.
"""

from __future__ import annotations

from dataclasses import dataclass

from git.exc import InvalidGitRepositoryError
from loguru import logger

from review_tools.base import ToolErrorCode, ToolResult
from review_tools.git.changeset import ChangeSet, ChangeSetExtractor
from review_tools.git.repository import GitRepository
from review_tools.git.revisions import RevisionInput, RevisionResolver
from review_tools.llm.base import LLMConfig
from review_tools.llm.prompts import REVIEW_TEMPLATE, TRIAGE_TEMPLATE, PromptManager
from review_tools.llm.tool import LLMTool, create_llm_tool

from .config import ReviewConfig
from .report import ReportComposer
from .reviewer import CriticalReviewer, ReviewRequest, fetch_file_contents
from .triage import FileTriager

BENIGN_ERROR_CODES = frozenset({ToolErrorCode.INSUFFICIENT_HISTORY})


class PipelineAbort(Exception):
    """A fatal stage failure; carries the failing operation and error code."""

    def __init__(
        self, operation: str, message: str, error_code: ToolErrorCode | None = None
    ) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.error_code = error_code

    @property
    def benign(self) -> bool:
        """True for early exits that are not errors (e.g. too little history)."""
        return self.error_code in BENIGN_ERROR_CODES

    @classmethod
    def from_result(cls, operation: str, result: ToolResult) -> PipelineAbort:
        return cls(operation, result.error_message or "unknown error", result.error_code)


@dataclass(frozen=True)
class ReviewOutcome:
    """Everything a run produced, for printing and delivery."""

    change_set: ChangeSet
    files: tuple[str, ...]
    review: str
    report: str


def _unwrap[T](operation: str, result: ToolResult[T]) -> T:
    if not result.ok or result.output is None:
        raise PipelineAbort.from_result(operation, result)
    return result.output


def build_prompt_manager(config: ReviewConfig) -> PromptManager:
    """Built-in templates, with any file overrides from the config applied."""
    manager = PromptManager()
    overrides = {
        TRIAGE_TEMPLATE: config.triage_prompt_path,
        REVIEW_TEMPLATE: config.review_prompt_path,
    }
    for name, path in overrides.items():
        if not path:
            continue
        try:
            manager.override_from_file(name, path)
        except (OSError, ValueError) as e:
            raise PipelineAbort(f"load {name} prompt", str(e)) from e
    return manager


def build_llm_tools(
    config: ReviewConfig, provider_type: str = "openai"
) -> tuple[LLMTool, LLMTool]:
    """Triage (low) and review (high) tools sharing endpoint and token."""

    def _config(model: str) -> LLMConfig:
        return LLMConfig(
            api_key=config.token,
            model=model,
            base_url=config.base_url or None,
            timeout=config.timeout,
        )

    triage_config = _config(config.low_model)
    review_config = _config(config.high_model)
    logger.debug(f"Triage model settings: {triage_config.to_dict()}")
    logger.debug(f"Review model settings: {review_config.to_dict()}")

    triage_tool = create_llm_tool(triage_config, provider_type, "triage_llm")
    review_tool = create_llm_tool(review_config, provider_type, "review_llm")
    return triage_tool, review_tool


class ReviewPipeline:
    """Sequential orchestrator for one review run."""

    def __init__(
        self,
        config: ReviewConfig,
        repository: GitRepository,
        triage_tool: LLMTool,
        review_tool: LLMTool,
        prompt_manager: PromptManager | None = None,
    ) -> None:
        self.config = config
        self.repository = repository
        prompts = prompt_manager or build_prompt_manager(config)

        self.resolver = RevisionResolver(repository)
        self.extractor = ChangeSetExtractor(repository)
        self.triager = FileTriager(triage_tool, prompts.get_template(TRIAGE_TEMPLATE))
        self.reviewer = CriticalReviewer(
            review_tool, prompts.get_template(REVIEW_TEMPLATE), system=config.system
        )
        self.composer = ReportComposer(repository)

    @classmethod
    def from_config(cls, config: ReviewConfig) -> ReviewPipeline:
        """Wire real collaborators: the git repo and OpenAI-compatible models."""
        try:
            repository = GitRepository(config.repo_path)
        except (InvalidGitRepositoryError, ValueError) as e:
            raise PipelineAbort("open repository", str(e)) from e

        triage_tool, review_tool = build_llm_tools(config)
        return cls(config, repository, triage_tool, review_tool)

    def run(self) -> ReviewOutcome:
        """Run every stage and return the composed report.

        Raises:
            PipelineAbort: A fatal stage failed; nothing should be printed
        """
        revision_input = RevisionInput(
            hashes=self.config.hashes,
            recent=self.config.recent,
            skip_merges=self.config.skip_merges,
        )
        commit_range = _unwrap("resolve commit range", self.resolver.run(revision_input))
        change_set = _unwrap("extract change set", self.extractor.run(commit_range))

        files = _unwrap("triage files", self.triager.run(change_set))
        contents = fetch_file_contents(self.repository, commit_range.newer.sha, files)
        logger.info(f"Read {len(contents)} of {len(files)} selected file(s)")

        review = _unwrap(
            "critical review",
            self.reviewer.run(ReviewRequest(change_set=change_set, contents=contents)),
        )
        report = self.composer.compose(review, files)

        return ReviewOutcome(
            change_set=change_set, files=tuple(files), review=review, report=report
        )
