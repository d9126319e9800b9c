"""OpenAI-backed language model."""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from .base import LanguageModel
from ..core.config import settings
from ..prompts.base import Prompt

logger = logging.getLogger(__name__)


class OpenAIModel(LanguageModel):
    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None):
        self.model = model or settings.OPENAI_MODEL
        if not self.model:
            raise RuntimeError("OPENAI_MODEL missing from settings")
        if client is None:
            if not settings.OPENAI_API_KEY:
                raise RuntimeError("OPENAI_API_KEY missing from settings")
            # Single attempt per request: the SDK's own retries are disabled
            client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.MODEL_TIMEOUT_SECONDS,
                max_retries=0,
            )
        self.client = client

    def _system_message(self, prompt: Prompt) -> str:
        return (
            "Return only valid JSON matching this JSON schema. Do not wrap it in markdown.\n"
            f"{json.dumps(prompt.output_schema, sort_keys=True)}"
        )

    async def generate(self, prompt: Prompt) -> Any:
        """Call the chat completions API in JSON mode.

        Parameters
        ----------
        prompt: Prompt
            Assembled prompt; its output schema is sent as the system message.

        Returns
        -------
        str | None
            The raw message content, or None when the API returned no choices.
        """
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self._system_message(prompt)},
                {"role": "user", "content": prompt.text},
            ],
            response_format={"type": "json_object"},
            temperature=settings.MODEL_TEMPERATURE,
        )
        if not completion.choices:
            return None
        message = completion.choices[0].message
        if message is None:
            return None
        usage = getattr(completion, "usage", None)
        if usage is not None:
            logger.info(
                "openai %s tokens_in=%s tokens_out=%s",
                prompt.name, usage.prompt_tokens, usage.completion_tokens,
            )
        return message.content
