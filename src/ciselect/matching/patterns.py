"""
Declared include/exclude patterns and validation of their configuration shape.

A pattern is declared either as a bare glob string or as a one-element mapping
with key `include` or `exclude` and a glob string value. Shapes are checked here,
once, so compilation never sees a malformed pattern.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ciselect.matching.errors import InvalidPatternShapeError


class PatternKind(str, Enum):
    """How a declared pattern was tagged."""

    literal = "literal"
    include = "include"
    exclude = "exclude"


_TAG_KEYS = {"include": PatternKind.include, "exclude": PatternKind.exclude}


@dataclass(frozen=True)
class TaggedPattern:
    kind: PatternKind
    glob: str

    @property
    def governs(self) -> bool:
        """
        Whether a path matched by this pattern is selected. Untagged patterns
        select, the same as `include`.
        """
        return self.kind is not PatternKind.exclude


def is_valid_pattern(raw: Any) -> bool:
    """True if `raw` is a glob string or a single-key `include`/`exclude` mapping."""
    if isinstance(raw, str):
        return True
    if isinstance(raw, Mapping) and len(raw) == 1:
        ((key, value),) = raw.items()
        return key in _TAG_KEYS and isinstance(value, str)
    return False


def parse_pattern(raw: Any, context: str) -> TaggedPattern:
    """Convert one declared pattern to a `TaggedPattern`, or raise `InvalidPatternShapeError`."""
    if not is_valid_pattern(raw):
        raise InvalidPatternShapeError(f"pattern {raw!r}", context)
    if isinstance(raw, str):
        return TaggedPattern(PatternKind.literal, raw)
    ((key, value),) = raw.items()
    return TaggedPattern(_TAG_KEYS[key], value)


def parse_patterns(raw: list[Any], context: str) -> list[TaggedPattern]:
    """Parse an already-normalized list of declared patterns. May be empty."""
    return [parse_pattern(p, context) for p in raw]


def parse_pattern_list(raw: Any, context: str, *, field: str = "files") -> list[TaggedPattern]:
    """
    Parse a pattern field that must name at least one pattern: a single valid
    pattern, or a non-empty list of valid patterns. Anything else raises
    `InvalidPatternShapeError` naming `field` and `context`.
    """
    if is_valid_pattern(raw):
        return [parse_pattern(raw, context)]
    if not isinstance(raw, list) or not raw or not all(is_valid_pattern(p) for p in raw):
        raise InvalidPatternShapeError(f"'{field}'", context)
    return parse_patterns(raw, context)
