"""Delivery of the finished report to stdout and an optional webhook."""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger

from review_tools.webhook import WebhookPoster


def deliver(
    report: str,
    webhook_url: str = "",
    timeout: float = 10.0,
    stream: TextIO | None = None,
) -> bool:
    """Print `report` and, if configured, POST it to `webhook_url`.

    Printing always happens first. Webhook failures are logged and reported
    through the return value only.

    Returns:
        False if the webhook was configured and delivery failed, else True
    """
    print(report, file=stream or sys.stdout, flush=True)

    if not webhook_url:
        return True

    result = WebhookPoster(webhook_url, timeout=timeout).run(report)
    if not result.ok:
        logger.warning(f"Webhook delivery failed: {result.error_message}")
        return False
    return True
