"""
Self-contained include/exclude pattern matching for CI file selection.

Globs use POSIX wildcards plus `**`, with no character classes, and never match
a leading `.` of a path component. In a pattern sequence the last declared
matching pattern decides whether a path is selected.

No imports from `ciselect` outside this package.

Usage::

    from ciselect.matching import compile_sequence, parse_patterns, select_files

    patterns = parse_patterns(["**/*_spec.rb", {"exclude": "vendor/**"}], "example")
    selected = select_files(compile_sequence(patterns), paths)
"""

from ciselect.matching.errors import (
    BadEscapeError,
    GlobCompileError,
    InvalidPatternShapeError,
    PatternError,
    UnsupportedCharClassError,
)
from ciselect.matching.glob import GlobMatcher, compile_glob
from ciselect.matching.patterns import (
    PatternKind,
    TaggedPattern,
    parse_pattern,
    parse_pattern_list,
    parse_patterns,
)
from ciselect.matching.selector import assign_parallel_groups, parallel_entries, select_files
from ciselect.matching.sequence import CompiledPatternSequence, compile_sequence, evaluate

__all__ = [
    "BadEscapeError",
    "CompiledPatternSequence",
    "GlobCompileError",
    "GlobMatcher",
    "InvalidPatternShapeError",
    "PatternError",
    "PatternKind",
    "TaggedPattern",
    "UnsupportedCharClassError",
    "assign_parallel_groups",
    "compile_glob",
    "compile_sequence",
    "evaluate",
    "parallel_entries",
    "parse_pattern",
    "parse_pattern_list",
    "parse_patterns",
    "select_files",
]
