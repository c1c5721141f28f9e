"""Errors raised while parsing and compiling include/exclude patterns."""

from __future__ import annotations


class PatternError(ValueError):
    """Base class for all pattern errors. Always fatal for a selection run."""


class GlobCompileError(PatternError):
    """A glob could not be compiled. `glob` holds the offending pattern text."""

    def __init__(self, message: str, glob: str) -> None:
        super().__init__(f"{message}, in glob: {glob}")
        self.glob: str = glob


class BadEscapeError(GlobCompileError):
    def __init__(self, glob: str) -> None:
        super().__init__("Bad escape sequence", glob)


class UnsupportedCharClassError(GlobCompileError):
    def __init__(self, glob: str) -> None:
        super().__init__("Character classes not supported", glob)


class InvalidPatternShapeError(PatternError):
    """
    A declared pattern is neither a glob string nor a single-key
    `include`/`exclude` mapping. `context` names the configuration it came from.
    """

    def __init__(self, message: str, context: str) -> None:
        super().__init__(f"{context} has invalid {message}")
        self.context: str = context
