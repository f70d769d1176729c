import logging
from typing import Optional

import openai

from .. import config
from ..errors import AICompletionError

logger = logging.getLogger(__name__)


class CompletionProvider:
    """Maps a prompt string to a text completion."""

    def complete(self, prompt: str) -> str:
        raise NotImplementedError


class OpenAICompletionProvider(CompletionProvider):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[openai.OpenAI] = None,
    ):
        self.api_key = api_key or config.OPENAI_API_KEY
        self.model = model or config.AI_MODEL
        self.timeout = timeout if timeout is not None else config.AI_TIMEOUT_SECONDS
        self.max_tokens = config.AI_MAX_TOKENS
        self.temperature = config.AI_TEMPERATURE

        self.client = client
        if self.client is None and self.api_key:
            # single attempt per request
            self.client = openai.OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def complete(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the raw text.
        Raises AICompletionError on any client error, timeout or empty reply.
        """
        if self.client is None:
            raise AICompletionError("OpenAI API key not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            raise AICompletionError(f"AI completion timed out after {self.timeout}s") from e
        except openai.OpenAIError as e:
            raise AICompletionError(f"AI completion failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AICompletionError("AI completion returned no content")

        logger.debug(f"AI completion received ({len(content)} chars)")
        return content


def build_default_completion_provider() -> Optional[CompletionProvider]:
    """OpenAI provider when a key is configured, otherwise None (neutral AI mode)."""
    if not config.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not set; AI factors will be neutral")
        return None
    return OpenAICompletionProvider()
