"""
LLM completion tool.

Wraps a provider behind the common tool interface: one user-role prompt in,
one completion out. The provider API is async; each call is driven to
completion synchronously since the review pipeline is strictly sequential.
"""

import asyncio
from typing import Any, cast

from loguru import logger

from review_tools.base import BaseTool, ToolErrorCode, ToolResult
from review_tools.llm.base import LLMConfig, LLMMessage, LLMProvider, LLMResponse


class LLMTool(BaseTool[str, LLMResponse]):
    """Single-shot completion against one model."""

    def __init__(self, provider: LLMProvider, name: str = "llm_tool") -> None:
        super().__init__(name)
        self.provider = provider

    @property
    def model(self) -> str:
        return self.provider.config.model

    def validate_input(self, input_data: str) -> bool:
        return bool(input_data and input_data.strip())

    def execute(self, input_data: str) -> ToolResult[LLMResponse]:
        """
        Send `input_data` as a single user message.

        Args:
            input_data: Fully rendered prompt

        Returns:
            Tool result wrapping the provider response
        """
        if not self.validate_input(input_data):
            return ToolResult.error(
                error_code=ToolErrorCode.INVALID_INPUT,
                error_message="Prompt is empty",
            )

        messages = [LLMMessage(role="user", content=input_data)]
        logger.debug(
            f"Calling {self.model} with ~{self.provider.estimate_tokens(input_data)} tokens"
        )

        try:
            llm_response: Any = self.provider.generate(messages)
            if asyncio.iscoroutine(llm_response):
                llm_response = asyncio.run(llm_response)
            llm_response = cast(LLMResponse, llm_response)
        except Exception as e:
            return ToolResult.error(
                error_code=ToolErrorCode.NETWORK_ERROR,
                error_message=str(e),
            )

        if llm_response.usage:
            logger.debug(
                f"{llm_response.model} used {llm_response.usage.total_tokens} tokens"
            )

        return ToolResult.success(output=llm_response)


def create_llm_tool(
    provider_config: LLMConfig, provider_type: str = "openai", name: str = "llm_tool"
) -> LLMTool:
    """
    Factory function to create an LLM tool with the given provider.

    Args:
        provider_config: LLM provider configuration
        provider_type: 'openai' or 'mock'
        name: Tool name used in logs

    Returns:
        Configured LLM tool instance
    """
    provider: LLMProvider
    if provider_type == "openai":
        from .providers import OpenAIProvider

        provider = OpenAIProvider(provider_config)
    elif provider_type == "mock":
        from .providers import MockProvider

        provider = MockProvider(provider_config)
    else:
        raise ValueError(f"Unsupported provider type: {provider_type}")

    return LLMTool(provider=provider, name=name)


__all__ = ["LLMTool", "create_llm_tool"]
