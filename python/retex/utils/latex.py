"""
Low-level scanning utilities for LaTeX source.
Everything here works on plain strings and absolute offsets, nothing is mutated.
"""

import bisect
import functools
import re
from typing import Iterator, List, NamedTuple, Pattern

import structlog

logger = structlog.get_logger(__name__)

NOT_FOUND = -1

_COMMAND_NAME_RE = re.compile(r"\\[a-zA-Z]+\*?")


# --- Types ---
class CommandMatch(NamedTuple):
    name: str
    start: int  # offset of the backslash
    arg_start: int  # offset of the opening brace of the first argument
    end: int  # offset just past the closing brace of the first argument


def find_group_end(text: str, open_index: int) -> int:
    """
    Returns the offset just past the brace that closes the group opened at
    `open_index`, or NOT_FOUND when the group is never closed.

    A backslash escapes the following character, so \\{ \\} and \\\\ leave the
    depth untouched. Braces inside a % comment are not counted.
    """
    if open_index < 0 or open_index >= len(text) or text[open_index] != "{":
        return NOT_FOUND

    depth = 0
    i = open_index
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "%":
            i = _line_end(text, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return NOT_FOUND


def _line_end(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return len(text) if end == -1 else end


class CommentMap:
    """
    Spans of every % comment in a text, from the unescaped % up to (not
    including) the newline. Built in one pass; lookups are a bisect.
    """

    def __init__(self, text: str):
        self.starts: List[int] = []
        self.ends: List[int] = []

        i = 0
        length = len(text)
        while i < length:
            ch = text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == "%":
                end = _line_end(text, i)
                self.starts.append(i)
                self.ends.append(end)
                i = end
                continue
            i += 1

    def covers(self, pos: int) -> bool:
        k = bisect.bisect_left(self.starts, pos) - 1
        return k >= 0 and pos < self.ends[k]


@functools.lru_cache(maxsize=16)
def comment_map(text: str) -> CommentMap:
    return CommentMap(text)


def is_commented(text: str, pos: int) -> bool:
    """True when `pos` sits after an unescaped % on its own line."""
    return comment_map(text).covers(pos)


def find_token(text: str, token: str, start: int = 0, end: int = -1) -> int:
    """First occurrence of `token` in [start, end) that is not commented out."""
    if end < 0:
        end = len(text)
    idx = text.find(token, start, end)
    while idx != -1:
        if not is_commented(text, idx):
            return idx
        idx = text.find(token, idx + len(token), end)
    return NOT_FOUND


def iter_commands(text: str, pattern: Pattern[str], start: int = 0, end: int = -1) -> Iterator[CommandMatch]:
    """
    Yields every invocation of `pattern` whose first argument is balanced.

    `pattern` must end on the opening brace of the first argument and expose
    the command name as group 1. Invocations inside comments are ignored.
    Arguments that are unterminated, or that close beyond `end`, are skipped
    and scanning continues after them.
    """
    if end < 0:
        end = len(text)

    for match in pattern.finditer(text, start, end):
        if is_commented(text, match.start()):
            continue

        arg_start = match.end() - 1
        arg_end = find_group_end(text, arg_start)
        if arg_end == NOT_FOUND or arg_end > end:
            logger.debug("Skipping unterminated command argument", command=match.group(1), offset=match.start())
            continue

        yield CommandMatch(name=match.group(1), start=match.start(), arg_start=arg_start, end=arg_end)


def read_arguments(text: str, pos: int, limit: int = 4) -> List[str]:
    """
    Reads up to `limit` consecutive brace groups starting at `pos`.
    Whitespace (including newlines) between groups is allowed.
    Returns the inner text of each group found.
    """
    args: List[str] = []
    i = pos
    while len(args) < limit:
        while i < len(text) and text[i].isspace():
            i += 1
        if i >= len(text) or text[i] != "{":
            break
        group_end = find_group_end(text, i)
        if group_end == NOT_FOUND:
            break
        args.append(text[i + 1 : group_end - 1])
        i = group_end
    return args


def strip_formatting(raw: str) -> str:
    """
    Removes formatting wrappers (\\textbf{X} -> X, recursively), drops bare
    declaration switches such as \\large and stray braces, then collapses
    whitespace.
    """
    out: List[str] = []
    i = 0
    length = len(raw)

    while i < length:
        ch = raw[i]

        if ch == "\\":
            match = _COMMAND_NAME_RE.match(raw, i)
            if match:
                j = match.end()
                k = j
                while k < length and raw[k] in " \t":
                    k += 1
                if k < length and raw[k] == "{":
                    group_end = find_group_end(raw, k)
                    if group_end != NOT_FOUND:
                        out.append(strip_formatting(raw[k + 1 : group_end - 1]))
                        i = group_end
                        continue
                # Declaration switch (\large, \bfseries) or broken wrapper
                out.append(" ")
                i = j
                continue

            # Control symbol: \& -> &, \\ -> line break
            if i + 1 < length:
                nxt = raw[i + 1]
                out.append(" " if nxt == "\\" else nxt)
            i += 2
            continue

        if ch in "{}":
            i += 1
            continue

        if ch == "%":
            i = _line_end(raw, i)
            continue

        out.append(ch)
        i += 1

    return " ".join("".join(out).split())
