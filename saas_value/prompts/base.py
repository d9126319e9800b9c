"""Prompt value object and the conditional line renderer shared by all prompts.

A prompt body is a fixed sequence of sections; each section is an ordered list
of ``(predicate, renderer)`` rules. A rule appends its line only when its
predicate holds, so absent fields never leave an empty label behind and the
same input always yields the same text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple, Type

from pydantic import BaseModel

from ..core.utils import format_number, is_present

Predicate = Callable[[Any], bool]
Renderer = Callable[[Any], str]
Rule = Tuple[Predicate, Renderer]


@dataclass(frozen=True)
class Prompt:
    name: str
    text: str
    output_model: Type[BaseModel]
    # Validated input in wire format; offline and HTTP providers read it
    variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def output_schema(self) -> dict:
        return self.output_model.model_json_schema(by_alias=True)


def _value_text(value: Any) -> str:
    if isinstance(value, str):
        # One field, one line: embedded newlines would start new prompt lines
        return " ".join(value.split())
    return format_number(value)


def field_rule(attr: str, label: str, suffix: str = "") -> Rule:
    """Render ``- {label}: {value}{suffix}`` when ``attr`` is present."""
    def present(obj) -> bool:
        return is_present(getattr(obj, attr, None))

    def render(obj) -> str:
        return f"- {label}: {_value_text(getattr(obj, attr))}{suffix}"

    return present, render


@dataclass(frozen=True)
class Section:
    heading: str
    rules: Sequence[Rule]

    def lines(self, obj) -> List[str]:
        return [render(obj) for present, render in self.rules if present(obj)]

    def render(self, obj) -> str | None:
        lines = self.lines(obj)
        if not lines:
            return None
        return "\n".join([f"{self.heading}:"] + lines)


def render_sections(obj, sections: Sequence[Section]) -> str:
    blocks = [block for block in (s.render(obj) for s in sections) if block]
    return "\n\n".join(blocks)


def indent(text: str, prefix: str = "  ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())
