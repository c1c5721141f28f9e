"""Tests for file selection and parallel group assignment."""

from __future__ import annotations

import copy

import pytest

from ciselect.matching import (
    InvalidPatternShapeError,
    UnsupportedCharClassError,
    assign_parallel_groups,
    compile_sequence,
    parallel_entries,
    parse_patterns,
    select_files,
)

PATHS = [
    "spec/models/user_spec.rb",
    "lib/user.rb",
    "spec/features/login_spec.rb",
    "vendor/gem/gem_spec.rb",
    "README.md",
]


def test_select_files_preserves_order():
    seq = compile_sequence(parse_patterns(["**/*_spec.rb", {"exclude": "vendor/**"}], "test"))
    assert select_files(seq, PATHS) == [
        "spec/models/user_spec.rb",
        "spec/features/login_spec.rb",
    ]


def test_select_files_is_idempotent():
    seq = compile_sequence(parse_patterns(["**/*.rb"], "test"))
    assert select_files(seq, PATHS) == select_files(seq, PATHS)


def test_select_files_empty_inputs():
    seq = compile_sequence(parse_patterns(["**"], "test"))
    assert select_files(seq, []) == []
    assert select_files(compile_sequence([]), PATHS) == []


def test_assign_parallel_groups_expands_parallel_entries():
    configs = [
        {"command": "rspec", "mode": "parallel", "files": "**/*_spec.rb", "prefix": "spec"},
        {"command": "rake lint"},
        "bundle exec rake",
    ]
    result = assign_parallel_groups(configs, PATHS)
    assert len(result) == 3
    assert result[0]["files_expanded"] == [
        "spec/models/user_spec.rb",
        "spec/features/login_spec.rb",
    ]
    assert result[0]["command"] == "rspec"
    assert result[1] is configs[1]
    assert result[2] == "bundle exec rake"


def test_assign_parallel_groups_does_not_mutate_input():
    configs = [{"mode": "parallel", "files": ["**/*.rb", {"exclude": "vendor/**"}]}]
    before = copy.deepcopy(configs)
    result = assign_parallel_groups(configs, PATHS)
    assert configs == before
    assert result[0]["files_expanded"] == [
        "spec/models/user_spec.rb",
        "lib/user.rb",
        "spec/features/login_spec.rb",
    ]


def test_assign_parallel_groups_without_prefix():
    configs = [{"mode": "parallel", "files": {"include": "lib/*.rb"}}]
    result = assign_parallel_groups(configs, PATHS)
    assert result[0]["files_expanded"] == ["lib/user.rb"]


def test_assign_parallel_groups_rejects_empty_files():
    configs = [{"command": "rspec", "mode": "parallel", "files": []}]
    with pytest.raises(InvalidPatternShapeError) as exc:
        assign_parallel_groups(configs, PATHS)
    assert "parallel test config" in str(exc.value)
    assert "rspec" in str(exc.value)


def test_assign_parallel_groups_rejects_two_key_mapping():
    configs = [
        {"mode": "parallel", "files": ["**/*.rb", {"include": "a", "exclude": "b"}]},
    ]
    with pytest.raises(InvalidPatternShapeError):
        assign_parallel_groups(configs, PATHS)


def test_assign_parallel_groups_rejects_missing_files():
    with pytest.raises(InvalidPatternShapeError, match="'files'"):
        assign_parallel_groups([{"mode": "parallel"}], PATHS)


def test_assign_parallel_groups_rejects_non_string_prefix():
    configs = [{"mode": "parallel", "files": "*.rb", "prefix": 3}]
    with pytest.raises(InvalidPatternShapeError, match="'prefix'"):
        assign_parallel_groups(configs, PATHS)


def test_assign_parallel_groups_propagates_glob_errors():
    configs = [{"mode": "parallel", "files": "spec/[a-z]*.rb"}]
    with pytest.raises(UnsupportedCharClassError):
        assign_parallel_groups(configs, PATHS)


def test_non_parallel_entries_are_not_validated():
    configs = [{"mode": "serial", "files": []}]
    assert assign_parallel_groups(configs, PATHS) == configs


def test_parallel_entries():
    configs = [
        {"command": "a", "mode": "parallel", "files": "*"},
        {"command": "b"},
        "c",
    ]
    assert parallel_entries(configs) == [configs[0]]
