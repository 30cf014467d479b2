"""Tests for change set extraction and text-file filtering."""

from __future__ import annotations

from review_tools.base import ToolErrorCode
from review_tools.git.changeset import (
    ChangeSetExtractor,
    filter_text_files,
    is_text_file,
    unique_paths,
)
from review_tools.git.revisions import CommitRange, CommitRef, RevisionInput, RevisionResolver


def _range(git_history, hashes=(), recent=None) -> CommitRange:
    result = RevisionResolver(git_history.repository).run(
        RevisionInput(hashes=hashes, recent=recent)
    )
    assert result.ok
    return result.output


def test_is_text_file() -> None:
    assert is_text_file("src/main.go")
    assert is_text_file("README.MD")
    assert is_text_file("deploy/values.yml")
    assert not is_text_file("assets/logo.png")
    assert not is_text_file("Makefile")
    assert not is_text_file("archive.tar.gz")


def test_filter_is_idempotent() -> None:
    paths = ["a.go", "b.png", "a.go", "", "  c.md  ", "d.bin"]
    once = filter_text_files(paths)

    assert once == ["a.go", "c.md"]
    assert filter_text_files(once) == once


def test_unique_paths_keeps_first_appearance() -> None:
    listing = ["x.py", "y.py", "", "x.py", "z.py", "y.py", "x.py"]
    assert unique_paths(listing) == ["x.py", "y.py", "z.py"]


def test_extract_single_commit(git_history) -> None:
    commit_range = _range(git_history, hashes=(git_history.shas[1],))
    result = ChangeSetExtractor(git_history.repository).run(commit_range)

    assert result.ok
    change_set = result.output
    assert set(change_set.files) == {"app.py", "config.yaml"}
    assert "+++ b/app.py" in change_set.diff
    assert "+print('v2')" in change_set.diff


def test_extract_range_covers_every_commit(git_history) -> None:
    commit_range = _range(git_history, recent=3)
    result = ChangeSetExtractor(git_history.repository).run(commit_range)

    files = result.output.files
    assert files.count("app.py") == 1
    assert set(files) == {"app.py", "docs/guide.md", "config.yaml"}
    assert "logo.png" not in files
    # newest commit listed first by the log
    assert files.index("docs/guide.md") < files.index("config.yaml")


def test_reversed_pair_falls_back_to_endpoint_names(git_history) -> None:
    commit_range = _range(git_history, hashes=(git_history.shas[0], git_history.shas[3]))
    result = ChangeSetExtractor(git_history.repository).run(commit_range)

    assert result.ok
    assert set(result.output.files) == {"app.py", "config.yaml", "docs/guide.md"}


def test_extraction_failure_is_an_error(git_history) -> None:
    bogus = CommitRange(
        newer=CommitRef(sha="f" * 40, message=""),
        older=CommitRef(sha="e" * 40, message=""),
        messages="",
    )
    result = ChangeSetExtractor(git_history.repository).run(bogus)

    assert result.error_code == ToolErrorCode.PROCESSING_ERROR
    assert result.output is None


def test_describe_includes_commit_message_and_diff(change_set) -> None:
    text = change_set.describe()

    assert text.startswith(f"Commit: {'b' * 40}")
    assert "Message: Fix parser" in text
    assert text.endswith(change_set.diff)


def test_non_ascii_paths_are_listed_verbatim(git_history, add_commit) -> None:
    sha = add_commit({"café.py": "x = 1\n", "docs/über.md": "Hallo\n"}, "Add accents")

    result = ChangeSetExtractor(git_history.repository).run(
        _range(git_history, hashes=(sha,))
    )

    assert result.ok
    assert result.output.files == ("café.py", "docs/über.md")


def test_endpoint_names_keep_non_ascii_paths(git_history, add_commit) -> None:
    sha = add_commit({"naïve.txt": "plain\n"}, "Add naïve notes")

    names = git_history.repository.diff_names(git_history.shas[3], sha)

    assert names == ["naïve.txt"]
