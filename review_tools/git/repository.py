"""
Git repository access.

Thin GitPython wrapper exposing the handful of version-control queries the
review pipeline needs. Every method either returns plain text/shas or raises
the underlying GitPython exception; deciding what is fatal is left to the
tools built on top of it.
"""

from collections.abc import Iterator
from pathlib import Path

from git import Commit, Repo
from git.exc import BadName, BadObject, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger


class GitRepository:
    """
    리뷰 파이프라인이 사용하는 Git 저장소 래퍼.

    이 클래스는 다음 기능을 제공합니다:
    1. 리비전(HEAD, 해시, 부모 커밋) 해석
    2. 두 커밋 사이의 diff 및 로그 조회
    3. 특정 커밋 시점의 파일 내용 조회
    4. 원격 URL 및 현재 브랜치 조회
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """
        Open the repository at `repo_path`.

        Args:
            repo_path: Path to the working tree (relative or absolute)

        Raises:
            InvalidGitRepositoryError: Path is not inside a Git repository
            ValueError: Path does not exist or is not a directory
        """
        self.repo_path = Path(repo_path).resolve()

        if not self.repo_path.exists():
            raise ValueError(f"Repository path does not exist: {self.repo_path}")

        if not self.repo_path.is_dir():
            raise ValueError(f"Repository path is not a directory: {self.repo_path}")

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise InvalidGitRepositoryError(
                f"Invalid Git repository: {self.repo_path}"
            ) from err

        logger.debug(f"Git repository opened: {self.repo.working_dir}")

    def commit(self, rev: str) -> Commit:
        """Return the commit object for `rev`, raising ValueError if unknown."""
        try:
            return self.repo.commit(rev)
        except (BadName, BadObject, ValueError) as err:
            raise ValueError(f"Unknown revision: {rev}") from err

    def head(self) -> str:
        """Full sha of the current HEAD."""
        return self.commit("HEAD").hexsha

    def resolve(self, rev: str) -> str:
        """Full sha for any revision expression."""
        return self.commit(rev).hexsha

    def parent_of(self, rev: str) -> str | None:
        """Sha of the first parent of `rev`, or None for a root commit."""
        parents = self.commit(rev).parents
        if not parents:
            return None
        return parents[0].hexsha

    def ancestor(self, rev: str, generations: int) -> str | None:
        """Follow first parents `generations` times; None if history ends first."""
        commit = self.commit(rev)
        for _ in range(generations):
            if not commit.parents:
                return None
            commit = commit.parents[0]
        return commit.hexsha

    def message(self, rev: str) -> str:
        """Full commit message of `rev`."""
        message = self.commit(rev).message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="ignore")
        return message.strip()

    def iter_messages(self, older: str, newer: str) -> Iterator[tuple[str, str]]:
        """Yield `(sha, message)` for commits in `older..newer`, newest first."""
        for commit in self.repo.iter_commits(f"{older}..{newer}"):
            message = commit.message
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="ignore")
            yield commit.hexsha, message.strip()

    def diff(self, older: str, newer: str) -> str:
        """Unified diff from `older` to `newer`, restricted to the tree root."""
        return self.repo.git.diff(older, newer, "--", ".")

    def diff_names(self, older: str, newer: str) -> list[str]:
        """Paths in the endpoint diff, unquoted, in git's order."""
        output = self.repo.git.diff("-z", "--name-only", older, newer, "--", ".")
        return _split_nul(output)

    def log_names(self, older: str, newer: str) -> list[str]:
        """Paths touched by every commit in `older..newer`, newest commit first.

        Paths repeat once per commit that touches them.
        """
        output = self.repo.git.log(
            "-z", "--name-only", "--pretty=format:", f"{older}..{newer}"
        )
        return _split_nul(output)

    def current_branch(self) -> str:
        """Abbreviated name of the checked-out branch (`HEAD` when detached)."""
        return self.repo.git.rev_parse("--abbrev-ref", "HEAD").strip()

    def remote_url(self, remote: str = "origin") -> str:
        """Configured URL of `remote`."""
        return self.repo.git.config("--get", f"remote.{remote}.url").strip()

    def read_file(self, rev: str, path: str) -> str:
        """
        Text content of `path` as stored in commit `rev`.

        Raises:
            FileNotFoundError: Path is absent from the commit or is a directory
            UnicodeDecodeError: Blob is not UTF-8 text
        """
        try:
            item = self.commit(rev).tree / path
        except KeyError as err:
            raise FileNotFoundError(f"{path} not found at {rev[:8]}") from err

        if item.type != "blob":
            raise FileNotFoundError(f"{path} is not a file at {rev[:8]}")

        return item.data_stream.read().decode("utf-8")


def _split_nul(output: str) -> list[str]:
    """Split `-z` output; NUL terminators keep non-ASCII paths unquoted."""
    return [entry for entry in output.replace("\n", "\0").split("\0") if entry]
