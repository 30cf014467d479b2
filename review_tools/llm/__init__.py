"""
LLM integration tools.

Provider abstraction, prompt templates and the single-shot completion tool
used by the triage and review stages.
"""

from .base import LLMConfig, LLMMessage, LLMProvider, LLMResponse, LLMUsage
from .prompts import REVIEW_TEMPLATE, TRIAGE_TEMPLATE, PromptManager, PromptTemplate
from .providers import MockProvider, OpenAIProvider
from .tool import LLMTool, create_llm_tool

__all__ = [
    "LLMConfig",
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "LLMTool",
    "LLMUsage",
    "MockProvider",
    "OpenAIProvider",
    "PromptManager",
    "PromptTemplate",
    "REVIEW_TEMPLATE",
    "TRIAGE_TEMPLATE",
    "create_llm_tool",
]
