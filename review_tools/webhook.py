"""
Webhook delivery for finished reviews.

Posts the report body as plain text to a configured URL. Delivery is best
effort: a single attempt, and failures are returned rather than raised so the
caller can log them and carry on.
"""

from __future__ import annotations

import requests
from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult


class WebhookPoster(BaseTool[str, int]):
    """Single-attempt plain-text POST of a report.

    Usage:
        poster = WebhookPoster("https://hooks.example.com/review")
        result = poster.run(report)
    """

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        super().__init__("WebhookPoster")
        if not url:
            raise ValueError("Webhook URL is required")
        self.url = url
        self.timeout = timeout

    def execute(self, input_data: str) -> ToolResult[int]:
        """POST `input_data` and return the HTTP status code."""
        headers = {
            "Content-Type": "text/plain; charset=utf-8",
            "User-Agent": "commit-review-assistant",
        }

        try:
            logger.debug(f"Posting review to webhook {self.url}")
            resp = requests.post(
                self.url,
                data=input_data.encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            return ToolResult.error(
                error_code=ToolErrorCode.NETWORK_ERROR,
                error_message=f"Error sending webhook: {exc}",
            )

        if not resp.ok:
            return ToolResult.error(
                error_code=ToolErrorCode.NETWORK_ERROR,
                error_message=f"Webhook responded with {resp.status_code}",
            )

        logger.info("Webhook sent successfully")
        return ToolResult.success(output=resp.status_code)
