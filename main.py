import argparse
import sys

from loguru import logger

from review_agents.config import ReviewConfig, load_env
from review_agents.delivery import deliver
from review_agents.pipeline import PipelineAbort, ReviewPipeline


def _configure_logging(level: str) -> None:
    """Send logs to stderr so stdout carries only the report."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="{level: <8} | {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Review git commits with a two-stage LLM pipeline"
    )
    parser.add_argument("--webhook", default="", help="Webhook URL (optional)")
    parser.add_argument(
        "--system", default="", help="System instruction prepended to the review prompt"
    )
    parser.add_argument(
        "--files-prompt", help="Path to a custom file-triage prompt template"
    )
    parser.add_argument(
        "--review-prompt", help="Path to a custom critical-review prompt template"
    )
    parser.add_argument("--env", help="Path to a custom .env file")

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--review-hash", help="Commit to review against its parent (default: HEAD)"
    )
    group.add_argument(
        "--review-hashes",
        nargs=2,
        metavar=("NEWER", "OLDER"),
        help="Two commits to review against each other",
    )
    group.add_argument(
        "--recent",
        type=int,
        metavar="N",
        help="Review the last N commits together (HEAD~N..HEAD)",
    )
    parser.add_argument(
        "--include-merges",
        action="store_true",
        help="Keep merge commit messages in the commit metadata",
    )
    parser.add_argument(
        "--repo-path", default=".", help="Path to git repository (default: current dir)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Model request timeout in seconds (default: 120)",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: resolve commits, run the review pipeline and deliver the report.

    Args:
        argv: Optional list of CLI arguments (for testing). If None, sys.argv is used.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    if args.recent is not None and args.recent < 1:
        build_parser().error("--recent must be a positive integer")
    if args.timeout <= 0:
        build_parser().error("--timeout must be a positive number")

    _configure_logging(args.log_level)
    load_env(args.env)

    config = ReviewConfig.from_sources(args)
    for name in config.missing_settings():
        logger.warning(f"{name} is not set; the model call will likely fail")

    try:
        pipeline = ReviewPipeline.from_config(config)
        outcome = pipeline.run()
    except PipelineAbort as e:
        if e.benign:
            logger.info(str(e))
            return 0
        logger.error(str(e))
        return 1

    deliver(outcome.report, config.webhook)
    return 0


if __name__ == "__main__":
    sys.exit(main())
