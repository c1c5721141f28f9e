"""
Compile globs in our restricted syntax (POSIX wildcards plus `**`, minus character
classes) into anchored regular expressions over `/`-separated paths.

Wildcards never match a `.` at the start of a path component. That rule accounts
for most of the complexity here, particularly for `**`, which can begin new path
components.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ciselect.matching.errors import BadEscapeError, UnsupportedCharClassError

# Characters that may follow a backslash.
_ESCAPABLE = frozenset("?*\\[")

# Any string not containing `/.`.
_STARSTAR = r"(?:[^/]*/+[^/.])*[^/]*/*"

# For the `**` forms, consider the leftmost `[^/.]`, if any: everything before it
# is slashes (or dots, when not at a component start), everything after is `_STARSTAR`.
_STARSTAR_NODOT = rf"(?:/*[^/.]{_STARSTAR}|/*)"
_STARSTAR_NONEMPTY_NODOT = rf"(?:/*[^/.]{_STARSTAR}|/+)"
_STARSTAR_NONEMPTY = rf"(?:[.]*/*[^/.]{_STARSTAR}|[.]*/+|[.]+)"


@dataclass(frozen=True)
class GlobMatcher:
    """A compiled glob. Matches whole path strings only."""

    glob: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.regex.match(path) is not None


def glob_to_regex(glob: str) -> str:
    """
    Translate `glob` to regular expression source anchored at both ends.

    Raises `BadEscapeError` for a backslash not followed by one of `? * \\ [`,
    and `UnsupportedCharClassError` for `[`.
    """
    parts: list[str] = [r"\A"]
    i = 0
    nodot = True
    n = len(glob)
    while i < n:
        c = glob[i]
        next_nodot = False
        if c == "?":
            parts.append("[^/.]" if nodot else "[^/]")
        elif c == "*":
            if i + 1 < n and glob[i + 1] == "*":
                # Any run **, ***, ****, etc. is equivalent.
                while i + 2 < n and glob[i + 2] == "*":
                    i += 1
                if i + 2 < n and glob[i + 2] == "?":
                    # **? is nonempty
                    i += 2
                    parts.append(_STARSTAR_NONEMPTY_NODOT if nodot else _STARSTAR_NONEMPTY)
                else:
                    i += 1
                    parts.append(_STARSTAR_NODOT if nodot else _STARSTAR)
            elif i + 1 < n and glob[i + 1] == "?":
                # *? is nonempty
                i += 1
                parts.append("[^/.][^/]*" if nodot else "[^/]+")
            else:
                parts.append("(?:[^/.][^/]*|)" if nodot else "[^/]*")
        elif c == "\\":
            if i + 1 >= n or glob[i + 1] not in _ESCAPABLE:
                raise BadEscapeError(glob)
            i += 1
            parts.append(re.escape(glob[i]))
        elif c == "[":
            raise UnsupportedCharClassError(glob)
        elif c == "/":
            next_nodot = True
            parts.append("/")
        elif c.isascii() and c.isalnum():
            parts.append(c)
        else:
            parts.append(re.escape(c))
        i += 1
        nodot = next_nodot
    parts.append(r"\Z")
    return "".join(parts)


def compile_glob(glob: str) -> GlobMatcher:
    """Compile a glob into a `GlobMatcher`. See `glob_to_regex` for errors."""
    return GlobMatcher(glob=glob, regex=re.compile(glob_to_regex(glob)))
