"""Run configuration for the commit review pipeline.

Settings come from three places: `.env` files (via python-dotenv), the
process environment, and command-line flags. They are collected once into a
frozen `ReviewConfig` that is passed explicitly to every stage.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

ENV_BASE_URL = "OR_BASE"
ENV_TOKEN = "OR_TOKEN"
ENV_LOW_MODEL = "OR_LOW"
ENV_HIGH_MODEL = "OR_HIGH"


def load_env(env_file: str | None = None) -> None:
    """Load `.env` from the working directory if present, then `env_file`.

    Values from `env_file` override both `.env` and the inherited environment.
    """
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)

    if env_file:
        if not Path(env_file).exists():
            logger.warning(f"Environment file not found: {env_file}")
            return
        load_dotenv(dotenv_path=env_file, override=True)
        logger.debug(f"Loaded environment from {env_file}")


@dataclass(frozen=True)
class ReviewConfig:
    """Everything one review run needs, fixed at startup."""

    base_url: str = ""
    token: str = ""
    low_model: str = ""
    high_model: str = ""
    webhook: str = ""
    system: str = ""
    triage_prompt_path: str | None = None
    review_prompt_path: str | None = None
    repo_path: str = "."
    hashes: tuple[str, ...] = field(default_factory=tuple)
    recent: int | None = None
    skip_merges: bool = True
    timeout: float = 120.0

    @classmethod
    def from_sources(
        cls, args: argparse.Namespace, environ: Mapping[str, str] | None = None
    ) -> ReviewConfig:
        """Build the config from parsed CLI flags and an environment mapping."""
        env = os.environ if environ is None else environ

        hashes: tuple[str, ...] = ()
        if getattr(args, "review_hashes", None):
            hashes = tuple(args.review_hashes)
        elif getattr(args, "review_hash", None):
            hashes = (args.review_hash,)

        timeout = getattr(args, "timeout", None)

        return cls(
            base_url=env.get(ENV_BASE_URL, ""),
            token=env.get(ENV_TOKEN, ""),
            low_model=env.get(ENV_LOW_MODEL, ""),
            high_model=env.get(ENV_HIGH_MODEL, ""),
            webhook=getattr(args, "webhook", None) or "",
            system=getattr(args, "system", None) or "",
            triage_prompt_path=getattr(args, "files_prompt", None),
            review_prompt_path=getattr(args, "review_prompt", None),
            repo_path=getattr(args, "repo_path", None) or ".",
            hashes=hashes,
            recent=getattr(args, "recent", None),
            skip_merges=not getattr(args, "include_merges", False),
            timeout=timeout if timeout is not None else 120.0,
        )

    def missing_settings(self) -> list[str]:
        """Names of environment settings a model call cannot do without."""
        missing = []
        if not self.low_model:
            missing.append(ENV_LOW_MODEL)
        if not self.high_model:
            missing.append(ENV_HIGH_MODEL)
        return missing
