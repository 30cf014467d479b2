"""
Tools package for the commit review assistant.

This package contains:
- Git access, revision resolution and change set extraction
- LLM providers, prompt templates and the completion tool
- Webhook delivery of finished reports
"""

from .base import (
    BaseTool,
    ToolErrorCode,
    ToolMetrics,
    ToolResult,
    ToolStatus,
)
from .git import ChangeSetExtractor, GitRepository, RevisionResolver
from .llm import LLMTool, PromptManager
from .webhook import WebhookPoster

__all__ = [
    # Base classes and types
    "BaseTool",
    "ToolResult",
    "ToolMetrics",
    "ToolStatus",
    "ToolErrorCode",
    # Concrete tools
    "ChangeSetExtractor",
    "GitRepository",
    "LLMTool",
    "PromptManager",
    "RevisionResolver",
    "WebhookPoster",
]
