"""Single-attempt model invocation with typed failures.

There are no retries or backoff: a failed call fails the request. Each call
is bounded by a timeout so a hung provider cannot hold a request forever.
"""

import asyncio
import json
import logging
import time

from ..core.errors import FieldViolation, ModelOutputInvalid, ModelOutputMissing
from ..core.metrics import MODEL_CALLS, MODEL_LATENCY
from ..models.base import LanguageModel
from ..prompts.base import Prompt
from ..schemas import validate_output

logger = logging.getLogger(__name__)


def _decode(raw):
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ModelOutputInvalid(
                [FieldViolation(field="(root)", reason=f"reply is not valid JSON: {exc.msg}")],
                "Model reply is not valid JSON",
            ) from exc
    return raw


def _is_blank(raw) -> bool:
    if raw is None:
        return True
    return isinstance(raw, (str, bytes, bytearray)) and not raw.strip()


async def invoke_model(model: LanguageModel, prompt: Prompt, timeout: float):
    """Run ``prompt`` once and return an instance of ``prompt.output_model``.

    Raises ModelOutputMissing when the provider errors, times out or replies
    with nothing, and ModelOutputInvalid when the reply fails the schema.
    """
    start = time.perf_counter()
    outcome = "ok"
    try:
        try:
            raw = await asyncio.wait_for(model.generate(prompt), timeout=timeout)
        except asyncio.TimeoutError as exc:
            outcome = "timeout"
            raise ModelOutputMissing(f"Model call '{prompt.name}' timed out after {timeout:g}s") from exc
        except Exception as exc:
            outcome = "error"
            raise ModelOutputMissing(f"Model call '{prompt.name}' failed: {exc}") from exc

        try:
            payload = None if _is_blank(raw) else _decode(raw)
        except ModelOutputInvalid:
            outcome = "invalid"
            raise
        if payload is None:
            outcome = "missing"
            raise ModelOutputMissing(f"The model returned no output for '{prompt.name}'")

        try:
            return validate_output(prompt.output_model, payload)
        except ModelOutputInvalid as exc:
            outcome = "invalid"
            logger.warning(
                "model output for %s failed validation: %s",
                prompt.name, [v.to_dict() for v in exc.violations],
            )
            raise
    finally:
        elapsed = time.perf_counter() - start
        MODEL_CALLS.labels(prompt=prompt.name, outcome=outcome).inc()
        MODEL_LATENCY.labels(prompt=prompt.name).observe(elapsed)
        logger.info("model call %s outcome=%s elapsed=%.2fs", prompt.name, outcome, elapsed)
