#!/usr/bin/env python3
"""Expand content globs into the ordered, de-duplicated list of files to scan."""
from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from purge_tools.errors import GlobSyntaxError


logger = logging.getLogger(__name__)


def validate_pattern(pattern: str) -> None:
    """Reject patterns glob would silently misread (empty, unterminated [..])."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise GlobSyntaxError(str(pattern), 'empty pattern')
    i = 0
    n = len(pattern)
    while i < n:
        if pattern[i] == '[':
            j = i + 1
            if j < n and pattern[j] == '!':
                j += 1
            # a ']' right after '[' or '[!' is a literal member of the class
            if j < n and pattern[j] == ']':
                j += 1
            close = pattern.find(']', j)
            if close == -1:
                raise GlobSyntaxError(pattern, f"unterminated character class at offset {i}")
            if '/' in pattern[i:close]:
                raise GlobSyntaxError(pattern, f"character class at offset {i} spans a path separator")
            i = close + 1
        else:
            i += 1


def _expand(pattern: str, cwd: Path) -> List[Path]:
    # sorted so a pattern always yields the same order regardless of directory listing order
    matches = sorted(glob.glob(pattern, root_dir=str(cwd), recursive=True))
    out = []
    for m in matches:
        p = Path(os.path.normpath(os.path.join(str(cwd), m)))
        if p.is_file():
            out.append(p)
    return out


def resolve_content(patterns: Iterable[str], cwd: Union[str, Path, None] = None,
                    skip: Iterable[str] = ()) -> List[Path]:
    """Expand content globs into an ordered, de-duplicated list of files.

    Patterns are processed in the given order and the first occurrence of a
    file wins. A pattern that matches nothing contributes nothing.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    patterns = list(patterns)
    skip = list(skip)
    for pat in patterns + skip:
        validate_pattern(pat)

    skipped: Set[str] = set()
    for pat in skip:
        skipped.update(os.path.realpath(p) for p in _expand(pat, base))

    seen: Set[str] = set()
    files: List[Path] = []
    for pat in patterns:
        found = _expand(pat, base)
        if not found:
            logger.debug("content glob %r matched no files under %s", pat, base)
        for p in found:
            key = os.path.realpath(p)
            if key in seen or key in skipped:
                continue
            seen.add(key)
            files.append(p)
    if skipped:
        logger.debug("skipped %d file(s) via skippedContentGlobs", len(skipped))
    return files


def relative_to(path: Path, base: Optional[Path]) -> str:
    if base is None:
        return str(path)
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return str(path)
