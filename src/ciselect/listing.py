"""
Listing a repository's files for test selection.

Paths are repository-relative, `/`-separated, without a leading `./`, and never
inside hidden (dot-prefixed) files or directories.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import pathspec

logger = logging.getLogger(__name__)

FIND_COMMAND = "find . -type f -not -path '*/.*'"


class FileListingError(RuntimeError):
    """The file listing could not be produced."""


class FileLister(Protocol):
    def list_files(self) -> list[str]: ...


def split_quoted(line: str) -> list[str]:
    """
    Split a line of `find` output into fields.

    Double quotes group whitespace into a field and are dropped. A backslash
    escapes the next character, with `\\t` and `\\n` standing for tab and newline.
    Unquoted whitespace separates fields.
    """
    fields: list[str] = []
    current: list[str] = []
    escaped = False
    quoted = False
    for c in line:
        if escaped:
            current.append({"t": "\t", "n": "\n"}.get(c, c))
            escaped = False
        elif c == "\\":
            escaped = True
        elif c == '"':
            quoted = not quoted
        elif not quoted and c.isspace():
            if current:
                fields.append("".join(current))
                current = []
        else:
            current.append(c)
    if current:
        fields.append("".join(current))
    return fields


def parse_find_output(output: str) -> list[str]:
    """Convert `find .` output to relative paths, one per non-blank line."""
    files: list[str] = []
    for line in output.splitlines():
        if line.startswith("./"):
            line = line[2:]
        fields = split_quoted(line)
        if fields:
            files.append(fields[0])
    return files


class FindFileLister:
    """Lists files by running `find` in the repository root."""

    def __init__(self, root: str | Path = ".") -> None:
        self._root: Path = Path(root)

    def list_files(self) -> list[str]:
        logger.debug("Running %r in %s", FIND_COMMAND, self._root)
        try:
            result = subprocess.run(
                FIND_COMMAND,
                shell=True,
                cwd=self._root,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise FileListingError(f"{FIND_COMMAND} fails: {e}") from e
        if result.returncode != 0:
            raise FileListingError(f"{FIND_COMMAND} fails: {result.stderr.strip()}")
        return parse_find_output(result.stdout)


def load_gitignore(directory: Path) -> pathspec.PathSpec | None:
    """
    Read `.gitignore` in the given directory and return a compiled `PathSpec`,
    or `None` if the file doesn't exist or has no patterns.
    """
    gitignore = directory / ".gitignore"
    if not gitignore.is_file():
        return None
    try:
        lines = gitignore.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return None
    lines = [line for line in lines if line.strip() and not line.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


class WalkFileLister:
    """
    Lists files by walking the repository root, pruning hidden directories
    (and, if `respect_gitignore` is set, anything ignored by `.gitignore` files
    along the way). Output is sorted.
    """

    def __init__(self, root: str | Path = ".", respect_gitignore: bool = False) -> None:
        self._root: Path = Path(root)
        self._respect_gitignore: bool = respect_gitignore

    def list_files(self) -> list[str]:
        files: list[str] = []
        # Gitignore specs active in each directory, paired with the directory they apply from.
        specs_by_dir: dict[Path, list[tuple[Path, pathspec.PathSpec]]] = {}

        for dirpath, dirnames, filenames in os.walk(self._root):
            current = Path(dirpath)
            rel_dir = Path(os.path.relpath(dirpath, self._root))

            specs = list(specs_by_dir.get(current, []))
            if self._respect_gitignore:
                spec = load_gitignore(current)
                if spec is not None:
                    specs.append((current, spec))

            # Prune in-place (prevents descent)
            dirnames[:] = sorted(
                d
                for d in dirnames
                if not d.startswith(".") and not self._is_ignored(current / d, specs, is_dir=True)
            )
            for d in dirnames:
                specs_by_dir[current / d] = specs

            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                # Regular files only, as with `find -type f`.
                filepath = current / filename
                if filepath.is_symlink() or not filepath.is_file():
                    continue
                if self._is_ignored(filepath, specs, is_dir=False):
                    continue
                files.append((rel_dir / filename).as_posix())

        files.sort()
        logger.debug("Listed %d files under %s", len(files), self._root)
        return files

    @staticmethod
    def _is_ignored(
        path: Path, specs: Sequence[tuple[Path, pathspec.PathSpec]], is_dir: bool
    ) -> bool:
        for base, spec in specs:
            rel = path.relative_to(base).as_posix()
            if spec.match_file(rel + "/" if is_dir else rel):
                return True
        return False


class StaticFileLister:
    """Returns a fixed list of paths."""

    def __init__(self, paths: Sequence[str]) -> None:
        self._paths: list[str] = list(paths)

    def list_files(self) -> list[str]:
        return list(self._paths)
