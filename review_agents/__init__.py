"""Agents that make up the commit review pipeline.

`FileTriager` and `CriticalReviewer` drive the two model calls,
`ReportComposer` adds file links, and `ReviewPipeline` runs them in order.
"""

from __future__ import annotations

from .config import ReviewConfig, load_env
from .delivery import deliver
from .pipeline import PipelineAbort, ReviewOutcome, ReviewPipeline
from .report import ReportComposer, remote_to_web_url
from .reviewer import CriticalReviewer, ReviewRequest, fetch_file_contents
from .triage import FileTriager, parse_file_list, strip_code_fence

__all__ = [
    "CriticalReviewer",
    "FileTriager",
    "PipelineAbort",
    "ReportComposer",
    "ReviewConfig",
    "ReviewOutcome",
    "ReviewPipeline",
    "ReviewRequest",
    "deliver",
    "fetch_file_contents",
    "load_env",
    "parse_file_list",
    "remote_to_web_url",
    "strip_code_fence",
]
