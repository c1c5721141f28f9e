"""
Build the test plan for one configuration profile and write it as JSON.

The plan has two parts: `tests`, the repository files selected by the merged
`test_pattern` settings, and `commands`, the parallel `tests` entries, each with
the files its own patterns select under `files_expanded`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from strif import atomic_output_file

from ciselect.config import get_profile, normalize_field
from ciselect.listing import FileLister
from ciselect.matching import (
    assign_parallel_groups,
    compile_sequence,
    parallel_entries,
    parse_patterns,
    select_files,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "test_list.json"


@dataclass
class SelectionPlan:
    tests: list[str] = field(default_factory=list)
    commands: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tests": self.tests, "commands": self.commands}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2) + "\n"


def build_plan(config: dict[str, Any], profile_name: str, lister: FileLister) -> SelectionPlan:
    """
    Select test files and parallel commands for `profile_name`.

    Top-level `test_pattern` and `tests` come ahead of the profile's own, so
    profile patterns declared later take precedence. Raises `ConfigError` for
    missing or malformed settings and `PatternError` for bad patterns; nothing
    is selected in either case.
    """
    profile = get_profile(config, profile_name)
    owner = f"profile '{profile_name}'"

    test_patterns = normalize_field(config.get("test_pattern"), "test_pattern", "top-level config")
    test_patterns += normalize_field(profile.get("test_pattern"), "test_pattern", owner)
    commands = normalize_field(config.get("tests"), "tests", "top-level config")
    commands += normalize_field(profile.get("tests"), "tests", owner)

    # Patterns are compiled before any files are listed.
    seq = compile_sequence(parse_patterns(test_patterns, f"'test_pattern' in {owner}"))
    logger.debug("Compiled %d test patterns for %s", len(seq), owner)

    files = lister.list_files()
    logger.debug("Listed %d files", len(files))

    tests = list(dict.fromkeys(select_files(seq, files)))
    parallel = parallel_entries(assign_parallel_groups(commands, files))
    logger.info(
        "Selected %d of %d files and %d parallel commands for %s",
        len(tests),
        len(files),
        len(parallel),
        owner,
    )
    return SelectionPlan(tests=tests, commands=parallel)


def write_plan(plan: SelectionPlan, output_path: Path) -> None:
    """Write the plan as pretty-printed JSON, atomically."""
    with atomic_output_file(output_path, make_parents=True) as temp_path:
        Path(temp_path).write_text(plan.to_json(), encoding="utf-8")
