from typing import Any

import httpx

from .base import LanguageModel
from ..core.config import settings
from ..prompts.base import Prompt

class HttpModel(LanguageModel):
    """
    Client for a self-hosted model gateway.
    POSTs {name, prompt, schema, variables} to {base_url}/generate and expects
    {"output": <object or JSON string>} back; a missing "output" means no reply.
    A body that is not JSON is handed back as raw text.
    """
    def __init__(self, base_url: str, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or settings.MODEL_TIMEOUT_SECONDS
        self.transport = transport

    async def generate(self, prompt: Prompt) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(
                f"{self.base_url}/generate",
                json={
                    "name": prompt.name,
                    "prompt": prompt.text,
                    "schema": prompt.output_schema,
                    "variables": prompt.variables,
                },
            )
            r.raise_for_status()
            try:
                body = r.json()
            except ValueError:
                # Raw text goes on to the decoder, which reports it as invalid
                return r.text
            if not isinstance(body, dict):
                return None
            return body.get("output")
