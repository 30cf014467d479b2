"""Shared fixtures: a small throwaway git history and canned change sets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from git import Actor, Repo

from review_tools.git.changeset import ChangeSet
from review_tools.git.repository import GitRepository
from review_tools.git.revisions import CommitRange, CommitRef

ACTOR = Actor("Test Author", "author@example.com")

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\xff\xfe"


@dataclass
class GitHistory:
    """Four-commit history on branch `main`, oldest first in `shas`."""

    path: Path
    repo: Repo
    repository: GitRepository
    shas: list[str]


def _commit(repo: Repo, files: dict[str, str | bytes], message: str) -> str:
    root = Path(repo.working_tree_dir)
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    repo.index.add(list(files))
    return repo.index.commit(message, author=ACTOR, committer=ACTOR).hexsha


@pytest.fixture
def git_history(tmp_path: Path) -> GitHistory:
    """
    c1 (root)  README.md, app.py
    c2         app.py, logo.png, config.yaml
    c3         "Merge branch 'feature'" touching app.py
    c4         app.py, docs/guide.md
    """
    repo = Repo.init(tmp_path)
    shas = [
        _commit(
            repo,
            {"README.md": "# demo\n", "app.py": "print('v1')\n"},
            "Initial commit",
        )
    ]
    repo.git.branch("-M", "main")
    shas.append(
        _commit(
            repo,
            {
                "app.py": "print('v2')\n",
                "logo.png": PNG_BYTES,
                "config.yaml": "debug: true\n",
            },
            "Add logo and config",
        )
    )
    shas.append(
        _commit(repo, {"app.py": "print('v3')\n"}, "Merge branch 'feature'")
    )
    shas.append(
        _commit(
            repo,
            {"app.py": "print('v4')\n", "docs/guide.md": "Guide\n"},
            "Write the guide",
        )
    )
    repo.create_remote("origin", "git@github.com:org/repo.git")

    return GitHistory(
        path=tmp_path,
        repo=repo,
        repository=GitRepository(tmp_path),
        shas=shas,
    )


@pytest.fixture
def change_set() -> ChangeSet:
    """A change set built by hand, no repository needed."""
    commit_range = CommitRange(
        newer=CommitRef(sha="b" * 40, message="Fix parser"),
        older=CommitRef(sha="a" * 40, message="Previous"),
        messages="Fix parser",
    )
    return ChangeSet(
        commit_range=commit_range,
        diff="--- a/a.go\n+++ b/a.go\n@@ -1 +1 @@\n-x\n+y\n",
        files=("a.go", "c.md"),
    )


@pytest.fixture
def add_commit(git_history: GitHistory):
    """Commit extra files on top of `git_history` and return the new sha."""

    def _add(files: dict[str, str | bytes], message: str) -> str:
        sha = _commit(git_history.repo, files, message)
        git_history.shas.append(sha)
        return sha

    return _add
