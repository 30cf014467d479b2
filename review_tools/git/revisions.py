"""
Revision resolution.

Turns the hash inputs given on the command line into the ordered pair of
commits the review compares, along with the commit messages that describe
the change.
"""

from dataclasses import dataclass

from git.exc import GitCommandError
from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult
from review_tools.git.repository import GitRepository

MERGE_MARKER = "Merge"


@dataclass(frozen=True)
class CommitRef:
    """A resolved commit: full sha plus its message."""

    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


@dataclass(frozen=True)
class CommitRange:
    """Ordered pair of commits under review; `newer` is diffed against `older`."""

    newer: CommitRef
    older: CommitRef
    messages: str  # commit metadata shown to the models

    def __post_init__(self) -> None:
        if not self.newer.sha or not self.older.sha:
            raise ValueError("CommitRange requires both endpoints")


@dataclass(frozen=True)
class RevisionInput:
    """
    Revision selection from the command line.

    At most one of `hashes` (exactly two entries) and `recent` is honoured;
    `hashes` wins when both are set.
    """

    hashes: tuple[str, ...] = ()
    recent: int | None = None
    skip_merges: bool = True


def is_merge_message(message: str) -> bool:
    """True if the message starts with the merge marker word."""
    words = message.split(maxsplit=1)
    return bool(words) and words[0] == MERGE_MARKER


def join_messages(
    messages: list[tuple[str, str]], skip_merges: bool = True
) -> str:
    """Concatenate `(sha, message)` pairs, dropping merge commits if requested."""
    kept = [
        f"{sha[:8]}: {message}"
        for sha, message in messages
        if not (skip_merges and is_merge_message(message))
    ]
    return "\n\n".join(kept)


class RevisionResolver(BaseTool[RevisionInput, CommitRange]):
    """
    Resolve zero, one or two hashes (or the N most recent commits) into a
    `CommitRange`.

    - two hashes: used as given, newer first; no ancestry check
    - one hash: that commit and its first parent
    - `recent=N`: HEAD and `HEAD~N`, with every message in between
    - nothing: HEAD and its first parent

    A root commit has no parent to compare against and is reported as
    `NO_PARENT_COMMIT` rather than diffed against an empty tree.
    """

    def __init__(self, repository: GitRepository) -> None:
        super().__init__("RevisionResolver")
        self.repository = repository

    def validate_input(self, input_data: RevisionInput) -> bool:
        if len(input_data.hashes) not in (0, 1, 2):
            return False
        if input_data.recent is not None and input_data.recent < 1:
            return False
        return True

    def execute(self, input_data: RevisionInput) -> ToolResult[CommitRange]:
        if not self.validate_input(input_data):
            return ToolResult.error(
                error_code=ToolErrorCode.INVALID_INPUT,
                error_message="expected zero, one or two hashes and a positive --recent",
            )

        try:
            if len(input_data.hashes) == 2:
                commit_range = self._resolve_pair(*input_data.hashes)
            elif len(input_data.hashes) == 1:
                commit_range = self._resolve_with_parent(input_data.hashes[0])
            elif input_data.recent is not None:
                commit_range = self._resolve_recent(
                    input_data.recent, input_data.skip_merges
                )
            else:
                commit_range = self._resolve_with_parent("HEAD")
        except _NoParentError as e:
            return ToolResult.error(
                error_code=e.code,
                error_message=str(e),
            )
        except (GitCommandError, ValueError) as e:
            return ToolResult.error(
                error_code=ToolErrorCode.PROCESSING_ERROR,
                error_message=str(e),
            )

        logger.info(
            f"Reviewing {commit_range.older.short_sha}..{commit_range.newer.short_sha}"
        )
        return ToolResult.success(output=commit_range)

    def _ref(self, sha: str) -> CommitRef:
        return CommitRef(sha=sha, message=self.repository.message(sha))

    def _resolve_pair(self, newer: str, older: str) -> CommitRange:
        newer_ref = self._ref(self.repository.resolve(newer))
        older_ref = self._ref(self.repository.resolve(older))
        return CommitRange(
            newer=newer_ref, older=older_ref, messages=newer_ref.message
        )

    def _resolve_with_parent(self, rev: str) -> CommitRange:
        sha = self.repository.resolve(rev)
        parent = self.repository.parent_of(sha)
        if parent is None:
            raise _NoParentError(
                ToolErrorCode.NO_PARENT_COMMIT,
                f"commit {sha[:8]} has no parent commit to compare against",
            )

        newer_ref = self._ref(sha)
        return CommitRange(
            newer=newer_ref, older=self._ref(parent), messages=newer_ref.message
        )

    def _resolve_recent(self, count: int, skip_merges: bool) -> CommitRange:
        head = self.repository.head()
        base = self.repository.ancestor(head, count)
        if base is None:
            raise _NoParentError(
                ToolErrorCode.INSUFFICIENT_HISTORY,
                f"history is shorter than {count} commits; nothing to compare",
            )

        messages = join_messages(
            list(self.repository.iter_messages(base, head)), skip_merges=skip_merges
        )
        return CommitRange(
            newer=self._ref(head), older=self._ref(base), messages=messages
        )


class _NoParentError(Exception):
    def __init__(self, code: ToolErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
