"""Glob expansion and path helpers."""

from __future__ import annotations

import os
import re
import sys
from typing import Iterable

from ..manifest.types import OrderedSet

_GLOB_CHARS = re.compile(r"[*?\[]")


def _log(message: str) -> None:
    from ..runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[paths] {message}", file=sys.stderr, flush=True)


def _split_brace_options(s: str) -> list[str]:
    """Split brace options on commas, handling nested braces."""
    opts = []
    buf = ""
    depth = 0
    for ch in s:
        if ch == "," and depth == 0:
            opts.append(buf)
            buf = ""
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        buf += ch
    opts.append(buf)
    return opts


def brace_expand(pattern: str) -> list[str]:
    """Expand shell-style brace patterns like {a,b,c} into multiple strings."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    depth = 0
    end = -1
    for i in range(start, len(pattern)):
        if pattern[i] == "{":
            depth += 1
        elif pattern[i] == "}":
            depth -= 1
            if depth == 0:
                end = i
                break
    if end == -1:
        return [pattern]
    inside = pattern[start + 1 : end]
    rest = pattern[end + 1 :]
    prefix = pattern[:start]
    out = []
    for opt in _split_brace_options(inside):
        for expanded in brace_expand(opt + rest):
            out.append(prefix + expanded)
    return out


def to_posix(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def relative(base_dir: str, path: str) -> str:
    return to_posix(os.path.relpath(os.path.normpath(path), os.path.normpath(base_dir)))


def join_url(base: str, path: str) -> str:
    if not base:
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def _walk_files(base_dir: str) -> list[str]:
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(base_dir):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            files.append(relative(base_dir, os.path.join(dirpath, name)))
    return files


def _clean_pattern(pattern: str) -> str:
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def _match(pattern: str, base_dir: str, files: list[str]) -> list[str]:
    if not _GLOB_CHARS.search(pattern):
        candidate = os.path.join(base_dir, pattern)
        if os.path.isfile(candidate):
            return [to_posix(os.path.normpath(pattern))]
        return []

    from pathspec import PathSpec

    spec = PathSpec.from_lines("gitwildmatch", ["/" + pattern.lstrip("/")])
    return [path for path in files if spec.match_file(path)]


def expand(patterns: Iterable[str], base_dir: str | None = None) -> list[str]:
    """
    Resolve glob patterns into file paths relative to ``base_dir``.

    Patterns are applied in order; a leading ``!`` removes paths matched by
    earlier patterns. Results keep first-match order and contain no
    duplicates. Hidden files are only returned when named literally.
    """
    root = os.path.abspath(base_dir) if base_dir else os.getcwd()
    files: list[str] | None = None
    result: OrderedSet[str] = OrderedSet()

    for raw in patterns:
        negate = raw.startswith("!")
        body = raw[1:] if negate else raw
        for pattern in brace_expand(body):
            pattern = _clean_pattern(pattern)
            if not pattern:
                continue
            if files is None and _GLOB_CHARS.search(pattern):
                files = _walk_files(root)
            matches = _match(pattern, root, files or [])
            if negate:
                for path in matches:
                    result.discard(path)
            else:
                result.extend(matches)
            if not matches:
                _log(f"no files matched {raw!r} in {root}")

    return result.to_list()
