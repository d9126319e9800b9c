from typing import Any, Protocol

from ..prompts.base import Prompt

class LanguageModel(Protocol):
    async def generate(self, prompt: Prompt) -> Any:
        """
        Returns the raw reply for one prompt: a JSON string, an already
        decoded dict, or None when the model produced nothing.
        Validation against prompt.output_model happens in the caller.
        """
        ...
