"""
Apply compiled pattern sequences to a repository's file list: once for the
top-level test patterns, and once per test command configured for parallel runs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ciselect.matching.errors import InvalidPatternShapeError
from ciselect.matching.patterns import parse_pattern_list
from ciselect.matching.sequence import CompiledPatternSequence, compile_sequence

# A `tests` entry from the configuration: a mapping (usually with `command`,
# `mode`, `files`, `prefix`) or a bare command string.
CommandConfig = Any

PARALLEL_MODE = "parallel"
EXPANDED_KEY = "files_expanded"


def select_files(seq: CompiledPatternSequence, paths: Sequence[str]) -> list[str]:
    """Paths selected by `seq`, in input order."""
    return [p for p in paths if seq.evaluate(p)]


def is_parallel(config: CommandConfig) -> bool:
    return isinstance(config, Mapping) and config.get("mode") == PARALLEL_MODE


def expand_parallel_config(config: Mapping[str, Any], paths: Sequence[str]) -> dict[str, Any]:
    """
    Return a copy of a parallel test config with its `files` patterns expanded
    against `paths` under `files_expanded`.

    Raises `InvalidPatternShapeError` if `files` is not a valid pattern or a
    non-empty list of valid patterns.
    """
    context = f"parallel test config {dict(config)!r}"
    patterns = parse_pattern_list(config.get("files"), context, field="files")
    prefix = config.get("prefix")
    if prefix is not None and not isinstance(prefix, str):
        raise InvalidPatternShapeError("'prefix'", context)
    seq = compile_sequence(patterns, prefix)
    expanded = dict(config)
    expanded[EXPANDED_KEY] = select_files(seq, paths)
    return expanded


def assign_parallel_groups(
    configs: Sequence[CommandConfig], paths: Sequence[str]
) -> list[CommandConfig]:
    """
    Expand every parallel-mode entry of `configs` against `paths`. Other entries
    are returned unchanged, in their original positions.
    """
    return [expand_parallel_config(c, paths) if is_parallel(c) else c for c in configs]


def parallel_entries(configs: Sequence[CommandConfig]) -> list[dict[str, Any]]:
    """Only the parallel-mode entries of `configs`."""
    return [c for c in configs if is_parallel(c)]
