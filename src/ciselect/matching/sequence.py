"""Compiled include/exclude pattern sequences with last-match-wins evaluation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ciselect.matching.glob import GlobMatcher, compile_glob
from ciselect.matching.patterns import TaggedPattern


@dataclass(frozen=True)
class CompiledPatternSequence:
    """
    Compiled patterns as `(governs, matcher)` pairs, stored in reverse of their
    declared order so the first match found is the last one declared.
    """

    entries: tuple[tuple[bool, GlobMatcher], ...]

    def evaluate(self, path: str) -> bool:
        for governs, matcher in self.entries:
            if matcher.matches(path):
                return governs
        return False

    def __len__(self) -> int:
        return len(self.entries)


def join_prefix(prefix: str, glob: str) -> str:
    """Join `prefix` and `glob` with exactly one `/` between them."""
    return prefix.rstrip("/") + "/" + glob.lstrip("/")


def compile_sequence(
    patterns: Sequence[TaggedPattern], prefix: str | None = None
) -> CompiledPatternSequence:
    """
    Compile declared patterns. With a non-empty `prefix`, every glob is scoped
    under that directory first. Raises `GlobCompileError` on the first bad glob.
    """
    entries: list[tuple[bool, GlobMatcher]] = []
    for pattern in reversed(patterns):
        glob = join_prefix(prefix, pattern.glob) if prefix else pattern.glob
        entries.append((pattern.governs, compile_glob(glob)))
    return CompiledPatternSequence(tuple(entries))


def evaluate(seq: CompiledPatternSequence, path: str) -> bool:
    """Whether `path` is selected: the last-declared matching pattern governs; no match excludes."""
    return seq.evaluate(path)
