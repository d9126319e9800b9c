"""Error taxonomy shared by the schema, invocation and orchestration layers.

Every error here is terminal for the current request: nothing retries them.
The HTTP layer maps them to status codes in ``saas_value.main``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class FieldViolation:
    field: str
    reason: str

    def to_dict(self) -> dict:
        return asdict(self)


def violations_from_errors(errors: Iterable[dict], skip_prefix: tuple = ()) -> List[FieldViolation]:
    """Convert pydantic-style error dicts (``loc``/``msg``) into violations.

    ``skip_prefix`` drops leading location parts such as FastAPI's ``"body"``.
    """
    out: List[FieldViolation] = []
    for err in errors:
        loc = list(err.get("loc", ()))
        while loc and loc[0] in skip_prefix:
            loc.pop(0)
        field = ".".join(str(part) for part in loc) or "(root)"
        out.append(FieldViolation(field=field, reason=err.get("msg", "invalid value")))
    return out


class SaasValueError(Exception):
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ValidationError(SaasValueError):
    """Input failed schema constraints."""
    code = "validation_error"

    def __init__(self, violations: List[FieldViolation], message: str = "Input failed validation"):
        super().__init__(message)
        self.violations = list(violations)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["violations"] = [v.to_dict() for v in self.violations]
        return payload


class ModelOutputMissing(SaasValueError):
    """The model call produced no usable payload (error, timeout, null or blank)."""
    code = "model_output_missing"


class ModelOutputInvalid(SaasValueError):
    """The model replied, but the payload does not satisfy the output schema."""
    code = "model_output_invalid"

    def __init__(self, violations: List[FieldViolation], message: str = "Model output failed validation"):
        super().__init__(message)
        self.violations = list(violations)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["violations"] = [v.to_dict() for v in self.violations]
        return payload
