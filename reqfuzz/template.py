"""
Template compilation and materialization.

A template is a plain string where every substitution point is wrapped in a
pair of delimiter occurrences, e.g. with delimiter "##":

    "user=##name##&role=admin"  ->  "user=alice&role=admin"

The text enclosed by a pair is only a placeholder and is dropped on
substitution.
"""
from dataclasses import dataclass
from typing import List, Tuple

from .errors import MalformedTemplate


@dataclass(frozen=True)
class CompiledTemplate:
    raw: str
    delimiter: str
    offsets: Tuple[int, ...] = ()

    @property
    def spans(self) -> int:
        """Number of substitution points (one per delimiter pair)."""
        return len(self.offsets) // 2

    @property
    def is_static(self) -> bool:
        return not self.offsets

    def render(self, word: str) -> str:
        return materialize(self, word)


def _find_offsets(raw: str, delimiter: str) -> List[int]:
    """Left-to-right scan for non-overlapping occurrences."""
    offsets = []
    pos = raw.find(delimiter)
    while pos != -1:
        offsets.append(pos)
        pos = raw.find(delimiter, pos + len(delimiter))
    return offsets


def compile_template(raw: str, delimiter: str, label: str = "template") -> CompiledTemplate:
    """
    Compiles `raw` into a reusable substitution plan.

    Raises MalformedTemplate when the delimiter count is odd, since the fuzz
    target would be ambiguous. `label` only shows up in the error message.
    """
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")

    offsets = _find_offsets(raw, delimiter)
    if len(offsets) % 2:
        raise MalformedTemplate(
            f"{label} {raw!r} has {len(offsets)} occurrences of delimiter {delimiter!r} (must be even)"
        )
    return CompiledTemplate(raw=raw, delimiter=delimiter, offsets=tuple(offsets))


def materialize(template: CompiledTemplate, word: str) -> str:
    """Substitutes `word` once per delimiter pair. Pure, thread-safe."""
    if not template.offsets:
        return template.raw

    raw = template.raw
    width = len(template.delimiter)
    parts = []
    cursor = 0
    offsets = template.offsets
    for i in range(0, len(offsets), 2):
        start, end = offsets[i], offsets[i + 1]
        parts.append(raw[cursor:start])
        parts.append(word)
        cursor = end + width
    parts.append(raw[cursor:])
    return "".join(parts)
