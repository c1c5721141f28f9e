"""Tests for repository file listing."""

from __future__ import annotations

from pathlib import Path

import pytest

from ciselect.listing import (
    FileListingError,
    FindFileLister,
    StaticFileLister,
    WalkFileLister,
    load_gitignore,
    parse_find_output,
    split_quoted,
)


def _make_tree(root: Path) -> None:
    """Create a small repository tree with hidden files and directories."""
    (root / "a.rb").write_text("# a\n")
    sub = root / "sub"
    sub.mkdir()
    (sub / "b.rb").write_text("# b\n")
    (sub / ".d.rb").write_text("# hidden file\n")
    hidden = root / ".hidden"
    hidden.mkdir()
    (hidden / "c.rb").write_text("# hidden dir\n")


def test_split_quoted_whitespace():
    assert split_quoted("a b") == ["a", "b"]
    assert split_quoted("  a \t b  ") == ["a", "b"]
    assert split_quoted("") == []


def test_split_quoted_quotes():
    assert split_quoted('"a b" c') == ["a b", "c"]
    assert split_quoted('x"y z"') == ["xy z"]


def test_split_quoted_escapes():
    assert split_quoted("a\\tb") == ["a\tb"]
    assert split_quoted("a\\nb") == ["a\nb"]
    assert split_quoted("a\\ b") == ["a b"]
    assert split_quoted('a\\"b') == ['a"b']
    assert split_quoted("a\\\\b") == ["a\\b"]


def test_parse_find_output():
    output = './a.rb\n./"dir/b c.rb"\n\n./sub/x.rb extra\n'
    assert parse_find_output(output) == ["a.rb", "dir/b c.rb", "sub/x.rb"]


def test_find_lister(tmp_path: Path):
    _make_tree(tmp_path)
    assert sorted(FindFileLister(tmp_path).list_files()) == ["a.rb", "sub/b.rb"]


def test_find_lister_failure(tmp_path: Path):
    with pytest.raises(FileListingError, match="fails"):
        FindFileLister(tmp_path / "missing").list_files()


def test_walk_lister_skips_hidden(tmp_path: Path):
    _make_tree(tmp_path)
    assert WalkFileLister(tmp_path).list_files() == ["a.rb", "sub/b.rb"]


def test_listers_skip_symlinks(tmp_path: Path):
    _make_tree(tmp_path)
    (tmp_path / "link.rb").symlink_to(tmp_path / "sub" / "b.rb")
    (tmp_path / "dangling.rb").symlink_to(tmp_path / "missing.rb")
    (tmp_path / "sublink").symlink_to(tmp_path / "sub", target_is_directory=True)

    walked = WalkFileLister(tmp_path).list_files()
    assert walked == ["a.rb", "sub/b.rb"]
    assert walked == sorted(FindFileLister(tmp_path).list_files())


def test_walk_lister_sorted(tmp_path: Path):
    for name in ["c.txt", "a.txt", "b.txt"]:
        (tmp_path / name).write_text(name)
    assert WalkFileLister(tmp_path).list_files() == ["a.txt", "b.txt", "c.txt"]


def test_walk_lister_ignores_gitignore_by_default(tmp_path: Path):
    (tmp_path / "keep.rb").write_text("")
    (tmp_path / ".gitignore").write_text("build/\n")
    build = tmp_path / "build"
    build.mkdir()
    (build / "out.rb").write_text("")
    assert WalkFileLister(tmp_path).list_files() == ["build/out.rb", "keep.rb"]


def test_walk_lister_respects_gitignore(tmp_path: Path):
    (tmp_path / "keep.rb").write_text("")
    (tmp_path / ".gitignore").write_text("# comment\nbuild/\n*.log\n")
    build = tmp_path / "build"
    build.mkdir()
    (build / "out.rb").write_text("")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "keep.rb").write_text("")
    (sub / "debug.log").write_text("")
    (sub / ".gitignore").write_text("generated/\n")
    gen = sub / "generated"
    gen.mkdir()
    (gen / "x.rb").write_text("")

    result = WalkFileLister(tmp_path, respect_gitignore=True).list_files()
    assert result == ["keep.rb", "sub/keep.rb"]


def test_nested_gitignore_does_not_leak_to_siblings(tmp_path: Path):
    a = tmp_path / "a"
    a.mkdir()
    (a / ".gitignore").write_text("*.tmp\n")
    (a / "x.tmp").write_text("")
    b = tmp_path / "b"
    b.mkdir()
    (b / "y.tmp").write_text("")

    result = WalkFileLister(tmp_path, respect_gitignore=True).list_files()
    assert result == ["b/y.tmp"]


def test_load_gitignore_missing_or_empty(tmp_path: Path):
    assert load_gitignore(tmp_path) is None
    (tmp_path / ".gitignore").write_text("# only a comment\n\n")
    assert load_gitignore(tmp_path) is None


def test_load_gitignore_non_utf8(tmp_path: Path):
    (tmp_path / ".gitignore").write_bytes(b"\x80\x81\x82\xff\xfe")
    assert load_gitignore(tmp_path) is None


def test_static_lister_returns_copy():
    paths = ["a", "b"]
    lister = StaticFileLister(paths)
    listed = lister.list_files()
    listed.append("c")
    assert lister.list_files() == ["a", "b"]
