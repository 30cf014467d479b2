"""
LLM provider base interface and data structures.

This module defines the base interface and common data structures that all
LLM providers must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class LLMConfig:
    """
    LLM provider configuration structure.

    One config per model: the triage and review stages each get their own.
    """

    api_key: str  # API key
    model: str  # Model name
    base_url: str | None = None  # Custom API endpoint (OpenAI-compatible)
    timeout: float = 120.0  # Request timeout (seconds)
    max_tokens: int | None = None  # Only sent when set
    temperature: float | None = None  # Only sent when set

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, masking the key."""
        result = asdict(self)
        result["api_key"] = "***" if self.api_key else ""
        return result


@dataclass(frozen=True)
class LLMMessage:
    """
    LLM conversation message structure.
    """

    role: str  # 'system', 'user', 'assistant'
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert message to dictionary."""
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class LLMUsage:
    """
    LLM API usage information.
    """

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass(frozen=True)
class LLMResponse:
    """
    LLM API response structure.
    """

    content: str  # Generated content
    model: str  # Model used
    finish_reason: str | None = None
    usage: LLMUsage | None = None


class LLMProvider(ABC):
    """
    Base interface for LLM providers.

    All LLM providers must implement this interface.
    """

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        """
        Generate text using LLM.

        Args:
            messages: List of conversation messages
            **kwargs: Additional parameters

        Returns:
            LLM response
        """
        pass

    def estimate_tokens(self, text: str) -> int:
        """
        Estimate token count for text.

        Args:
            text: Text to analyze

        Returns:
            Estimated token count
        """
        # Rough estimate: 1 token per 4 characters of English
        return len(text) // 4
