"""Tests for commit range resolution."""

from __future__ import annotations

from review_tools.base import ToolErrorCode, ToolStatus
from review_tools.git.revisions import (
    RevisionInput,
    RevisionResolver,
    is_merge_message,
    join_messages,
)


def test_default_resolves_head_and_parent(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput())

    assert result.status == ToolStatus.SUCCESS
    assert result.output.newer.sha == git_history.shas[3]
    assert result.output.older.sha == git_history.shas[2]
    assert result.output.messages == "Write the guide"


def test_single_hash_uses_parent(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(hashes=(git_history.shas[1][:10],)))

    assert result.ok
    assert result.output.newer.sha == git_history.shas[1]
    assert result.output.older.sha == git_history.shas[0]
    assert result.output.newer.message == "Add logo and config"


def test_two_hashes_kept_in_given_order(git_history) -> None:
    """An explicit pair is used as-is, even when `older` is the descendant."""
    first, last = git_history.shas[0], git_history.shas[3]
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(hashes=(first, last)))

    assert result.ok
    assert (result.output.newer.sha, result.output.older.sha) == (first, last)


def test_root_commit_has_no_parent(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(hashes=(git_history.shas[0],)))

    assert result.status == ToolStatus.ERROR
    assert result.error_code == ToolErrorCode.NO_PARENT_COMMIT
    assert "no parent" in result.error_message


def test_unknown_hash_is_an_error(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(hashes=("0123456789abcdef",)))

    assert result.error_code == ToolErrorCode.PROCESSING_ERROR


def test_too_many_hashes_rejected(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(hashes=("a", "b", "c")))

    assert result.error_code == ToolErrorCode.INVALID_INPUT


def test_recent_skips_merge_messages(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(recent=3))

    assert result.ok
    assert result.output.newer.sha == git_history.shas[3]
    assert result.output.older.sha == git_history.shas[0]
    messages = result.output.messages
    assert "Write the guide" in messages
    assert "Add logo and config" in messages
    assert "Merge branch" not in messages
    assert messages.index("Write the guide") < messages.index("Add logo and config")


def test_recent_can_keep_merge_messages(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(recent=2, skip_merges=False))

    assert "Merge branch 'feature'" in result.output.messages


def test_recent_beyond_history_is_benign(git_history) -> None:
    resolver = RevisionResolver(git_history.repository)
    result = resolver.run(RevisionInput(recent=10))

    assert result.error_code == ToolErrorCode.INSUFFICIENT_HISTORY


def test_is_merge_message() -> None:
    assert is_merge_message("Merge pull request #4 from org/branch")
    assert not is_merge_message("Merged the parser fixes")
    assert not is_merge_message("")


def test_join_messages_prefixes_short_sha() -> None:
    joined = join_messages(
        [("1" * 40, "Fix bug"), ("2" * 40, "Merge branch 'x'"), ("3" * 40, "Add test")]
    )
    assert joined == "11111111: Fix bug\n\n33333333: Add test"
