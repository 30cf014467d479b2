"""
Change set extraction.

Derives the unified diff and the list of touched files for a `CommitRange`.
Only files with a plain-text extension survive, which keeps binary and
generated artefacts away from the models.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePosixPath

from git.exc import GitCommandError
from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult
from review_tools.git.repository import GitRepository
from review_tools.git.revisions import CommitRange

TEXT_FILE_EXTENSIONS = frozenset(
    {
        ".txt",
        ".md",
        ".go",
        ".py",
        ".js",
        ".html",
        ".css",
        ".json",
        ".xml",
        ".yaml",
        ".yml",
        ".toml",
        ".ini",
        ".cfg",
        ".conf",
    }
)


def is_text_file(path: str) -> bool:
    """True if `path` has an allowlisted text extension (case-insensitive)."""
    return PurePosixPath(path).suffix.lower() in TEXT_FILE_EXTENSIONS


def unique_paths(paths: Iterable[str]) -> list[str]:
    """Strip entries, drop blanks and keep the first occurrence of each path."""
    stripped = (path.strip() for path in paths)
    return list(dict.fromkeys(path for path in stripped if path))


def filter_text_files(paths: Iterable[str]) -> list[str]:
    """Deduplicated, allowlisted paths in order of first appearance."""
    return [path for path in unique_paths(paths) if is_text_file(path)]


@dataclass(frozen=True)
class ChangeSet:
    """Diff and touched files for a commit range."""

    commit_range: CommitRange
    diff: str
    files: tuple[str, ...]

    def describe(self) -> str:
        """Commit metadata block handed to both model calls."""
        return (
            f"Commit: {self.commit_range.newer.sha}\n\n"
            f"Message: {self.commit_range.messages}\n\n"
            f"Diff:\n{self.diff}"
        )


class ChangeSetExtractor(BaseTool[CommitRange, ChangeSet]):
    """
    Build a `ChangeSet` from a resolved range.

    Files come from a name-only log over every commit in the range, not just
    the endpoints. When the log is empty (two unrelated hashes given in
    ancestor order) the endpoint diff's name listing is used instead.
    """

    def __init__(self, repository: GitRepository) -> None:
        super().__init__("ChangeSetExtractor")
        self.repository = repository

    def execute(self, input_data: CommitRange) -> ToolResult[ChangeSet]:
        older = input_data.older.sha
        newer = input_data.newer.sha

        try:
            diff = self.repository.diff(older, newer)
            listing = self.repository.log_names(older, newer)
            if not listing:
                logger.debug("Range log lists no files, using endpoint diff names")
                listing = self.repository.diff_names(older, newer)
        except GitCommandError as e:
            return ToolResult.error(
                error_code=ToolErrorCode.PROCESSING_ERROR,
                error_message=str(e),
            )

        touched = unique_paths(listing)
        files = filter_text_files(touched)
        skipped = len(touched) - len(files)
        if skipped:
            logger.info(f"Skipping {skipped} non-text file(s)")

        logger.info(f"Change set: {len(files)} file(s), {len(diff)} diff bytes")
        return ToolResult.success(
            output=ChangeSet(commit_range=input_data, diff=diff, files=tuple(files)),
            metrics=self._create_metrics(files_processed=len(files)),
        )
