#!/usr/bin/env python3
"""Token extractors: map raw file text to candidate class names / identifiers.

Every extractor exposes one method, ``extract(text) -> list[str]``, so the
scanner can swap strategies per file extension without caring which one it has.
"""
from __future__ import annotations

import inspect
import re
from typing import Callable, List, Optional, Sequence

from bs4 import BeautifulSoup


# letters, digits, hyphen, underscore, colon, slash
DEFAULT_PATTERN = r"[A-Za-z0-9_:/-]+"


class Extractor:
    name = 'extractor'

    def extract(self, text: str) -> List[str]:
        raise NotImplementedError

    def __call__(self, text: str) -> List[str]:
        return self.extract(text)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class DefaultExtractor(Extractor):
    name = 'default'
    _re = re.compile(DEFAULT_PATTERN)

    def extract(self, text: str) -> List[str]:
        return self._re.findall(text or '')


class CustomExtractor(Extractor):
    """Wraps a user function ``str -> list[str]``."""

    name = 'custom'

    def __init__(self, func: Callable[[str], Optional[Sequence[str]]], name: Optional[str] = None):
        if not callable(func):
            raise TypeError(f"extractor must be callable, got {type(func).__name__}")
        if not accepts_single_argument(func):
            raise TypeError('extractor must accept exactly one positional argument (the file text)')
        self.func = func
        if name:
            self.name = name
        else:
            self.name = getattr(func, '__name__', 'custom')

    @classmethod
    def from_pattern(cls, pattern: str, flags: int = 0) -> 'CustomExtractor':
        rx = re.compile(pattern, flags)

        def _find_all(text: str) -> List[str]:
            # group-less findall semantics even if the user pattern has groups
            return [m.group(0) for m in rx.finditer(text)]

        return cls(_find_all, name=f"pattern:{pattern}")

    def extract(self, text: str) -> List[str]:
        out = self.func(text)
        # a falsy result means "nothing matched", same as `match(...) || []`
        if out is None:
            return []
        if isinstance(out, (str, bytes)) or not isinstance(out, (list, tuple)):
            raise TypeError(f"extractor {self.name!r} returned {type(out).__name__}, expected a list of strings")
        bad = [t for t in out if not isinstance(t, str)]
        if bad:
            raise TypeError(f"extractor {self.name!r} returned non-string token {bad[0]!r}")
        return list(out)


class HtmlExtractor(Extractor):
    """Parse markup and return tag names, ids, classes and attribute names."""

    name = 'html'

    def extract(self, text: str) -> List[str]:
        soup = BeautifulSoup(text or '', 'html.parser')
        tokens: List[str] = []
        for tag in soup.find_all(True):
            tokens.append(tag.name)
            for attr, value in tag.attrs.items():
                tokens.append(attr)
                if attr == 'class':
                    # bs4 splits multi-valued class attributes already
                    tokens.extend(c for c in value if c)
                elif attr == 'id' and value:
                    tokens.append(value)
        return tokens


BUILTIN_EXTRACTORS = {
    'default': DefaultExtractor,
    'html': HtmlExtractor,
}


def builtin_extractor(name: str) -> Extractor:
    try:
        return BUILTIN_EXTRACTORS[name]()
    except KeyError:
        known = ', '.join(sorted(BUILTIN_EXTRACTORS))
        raise ValueError(f"unknown extractor {name!r} (known: {known})") from None


def accepts_single_argument(func: Callable) -> bool:
    """True when ``func(text)`` is a valid call."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins without introspectable signatures
        return True
    try:
        sig.bind('')
    except TypeError:
        return False
    return True
