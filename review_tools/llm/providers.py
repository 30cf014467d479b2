"""
LLM provider implementations.

`OpenAIProvider` talks to any OpenAI-compatible chat-completions endpoint
(OpenAI itself, OpenRouter, a local gateway). `MockProvider` replays canned
responses for tests.
"""

from typing import Any

from openai import AsyncOpenAI

from .base import LLMConfig, LLMMessage, LLMProvider, LLMResponse, LLMUsage


class OpenAIProvider(LLMProvider):
    """
    OpenAI-compatible LLM provider implementation.

    The client never retries: one request per call, failures surface to the
    caller. A client is opened and closed inside each call, so its connection
    pool never outlives the event loop that `asyncio.run` created for it.
    """

    def _create_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url or None,
            timeout=self.config.timeout,
            max_retries=0,
        )

    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        """Generate text using the chat-completions API."""

        request_params: dict[str, Any] = {
            "model": kwargs.get("model", self.config.model),
            "messages": [msg.to_dict() for msg in messages],
        }

        max_tokens = kwargs.get("max_tokens", self.config.max_tokens)
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        temperature = kwargs.get("temperature", self.config.temperature)
        if temperature is not None:
            request_params["temperature"] = temperature

        try:
            async with self._create_client() as client:
                response = await client.chat.completions.create(**request_params)
        except Exception as e:
            raise RuntimeError(f"Chat completion failed: {e}") from e

        if not response.choices:
            raise RuntimeError("Chat completion returned no choices")

        choice = response.choices[0]
        usage = None
        if response.usage is not None:
            usage = LLMUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or self.config.model,
            finish_reason=choice.finish_reason,
            usage=usage,
        )


class MockProvider(LLMProvider):
    """
    Mock LLM provider for testing.

    Returns predefined responses in order (cycling) and records every prompt
    it was given in `calls`.
    """

    def __init__(self, config: LLMConfig, mock_responses: list[str] | None = None):
        super().__init__(config)
        self.mock_responses = mock_responses or ["Mock response for testing"]
        self.response_index = 0
        self.calls: list[list[LLMMessage]] = []

    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        """Generate mock response."""
        self.calls.append(list(messages))

        prompt_tokens = self.estimate_tokens(" ".join(msg.content for msg in messages))
        response_text = self.mock_responses[
            self.response_index % len(self.mock_responses)
        ]
        completion_tokens = self.estimate_tokens(response_text)
        self.response_index += 1

        return LLMResponse(
            content=response_text,
            model=self.config.model,
            finish_reason="stop",
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
