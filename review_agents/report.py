"""Report composition: appends browsable links to the changed files."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from git.exc import GitCommandError
from loguru import logger

from review_tools.git.repository import GitRepository

LINKS_HEADING = "Changed Files:"


def remote_to_web_url(remote_url: str) -> str | None:
    """Turn a git remote URL into the repository's https base URL.

    - `user@host:path` (scp-like SSH) becomes `https://host/path`
    - `https://...` is kept, minus any embedded credentials
    - anything else is unsupported and yields None

    A trailing `.git` is removed in both supported cases.
    """
    url = remote_url.strip().removesuffix("/").removesuffix(".git")

    if url.startswith("https://"):
        parts = urlsplit(url)
        netloc = parts.hostname or ""
        if parts.port:
            netloc = f"{netloc}:{parts.port}"
        return urlunsplit(("https", netloc, parts.path, "", ""))

    if "://" not in url and "@" in url and ":" in url:
        user_host, _, path = url.partition(":")
        host = user_host.rpartition("@")[2]
        if not host or not path:
            return None
        return f"https://{host}/{path.lstrip('/')}"

    return None


def file_link(base_url: str, branch: str, path: str) -> str:
    return f"{base_url}/blob/{branch}/{path}"


def render_links_section(base_url: str, branch: str, files: list[str]) -> str:
    """Markdown list of file links under the `Changed Files:` heading."""
    lines = [f"- [{path}]({file_link(base_url, branch, path)})" for path in files]
    return f"\n\n{LINKS_HEADING}\n" + "\n".join(lines) + "\n"


class ReportComposer:
    """Append a `Changed Files:` section to the review text.

    Links are cosmetic: when the remote URL or branch cannot be determined,
    or the remote uses an unsupported scheme, the review is returned
    unchanged and a warning is logged.
    """

    def __init__(self, repository: GitRepository, branch: str | None = None) -> None:
        self.repository = repository
        self.branch = branch

    def compose(self, review: str, files: list[str]) -> str:
        if not files:
            return review

        try:
            remote_url = self.repository.remote_url()
            branch = self.branch or self.repository.current_branch()
        except GitCommandError as e:
            logger.warning(f"Skipping file links, git query failed: {e}")
            return review

        base_url = remote_to_web_url(remote_url)
        if base_url is None:
            logger.warning(f"Unsupported Git URL format: {remote_url}")
            return review

        return review + render_links_section(base_url, branch, files)
