"""Claude API wrapper used as the text-generation backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

# Transport-level failures worth another attempt; everything else surfaces at once
TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Model reply text plus token usage."""

    text: str
    input_tokens: int
    output_tokens: int


def _reply_text(message: anthropic.types.Message) -> str:
    return "".join(
        block.text for block in message.content if getattr(block, "type", "text") == "text"
    )


class LLMClient:
    """Async Claude client that retries transient transport errors.

    Args:
        api_key: Falls back to ANTHROPIC_API_KEY when omitted.
        timeout: Per-request HTTP timeout in seconds.
        max_retries: Extra attempts after the first one fails transiently.

    Retries run inside whatever deadline the caller puts around generate();
    cancelling the call cancels the in-flight HTTP request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 2,
    ):
        options: dict = {"max_retries": 0}
        if api_key is not None:
            options["api_key"] = api_key
        if timeout is not None:
            options["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**options)
        self.max_retries = max_retries

    async def _create_message(self, request: dict) -> anthropic.types.Message:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info("Retrying LLM call (attempt %d)", attempt.retry_state.attempt_number)
                return await self.client.messages.create(**request)
        raise RuntimeError("unreachable")  # pragma: no cover

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> LLMResponse:
        """Send one user turn and return the concatenated text blocks.

        Raises:
            ValueError: the model returned no text.
            anthropic.APIError: the request failed after all retries.
        """
        request: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        logger.debug("LLM call: model=%s", model)
        try:
            message = await self._create_message(request)
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise

        usage = message.usage
        logger.debug("LLM response: %d input, %d output tokens", usage.input_tokens, usage.output_tokens)
        text = _reply_text(message)
        if not text.strip():
            raise ValueError("Empty response from AI model")
        return LLMResponse(text=text, input_tokens=usage.input_tokens, output_tokens=usage.output_tokens)
