#!/usr/bin/env python3
"""Locate, parse and validate a purge configuration.

Two formats are understood:

  purgecss.config.py    executed as a module; top-level names are read
  purgecss.config.json  plain object with the same keys

Recognised keys: content, defaultExtractor (default_extractor), extractors,
skippedContentGlobs (skipped_content_globs).
"""
from __future__ import annotations

import json
import logging
import re
import runpy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from purge_tools.errors import ConfigNotFoundError, ConfigParseError
from purge_tools.extractors import CustomExtractor, DefaultExtractor, Extractor, builtin_extractor


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAMES = ('purgecss.config.py', 'purgecss.config.json')

# camelCase keys first so a config written like the JS original wins over aliases
KEY_ALIASES = {
    'content': ('content',),
    'defaultExtractor': ('defaultExtractor', 'default_extractor'),
    'extractors': ('extractors',),
    'skippedContentGlobs': ('skippedContentGlobs', 'skipped_content_globs'),
}


@dataclass(frozen=True)
class ExtractorRule:
    extensions: Tuple[str, ...]
    extractor: Extractor

    def matches(self, path: Path) -> bool:
        ext = path.suffix.lstrip('.').lower()
        return ext in self.extensions


@dataclass(frozen=True)
class PurgeConfig:
    content: Tuple[str, ...]
    default_extractor: Extractor = field(default_factory=DefaultExtractor)
    extractors: Tuple[ExtractorRule, ...] = ()
    skipped_content_globs: Tuple[str, ...] = ()
    source: Optional[Path] = None

    def extractor_for(self, path: Path) -> Extractor:
        for rule in self.extractors:
            if rule.matches(path):
                return rule.extractor
        return self.default_extractor


def find_config(root: Union[str, Path, None] = None) -> Path:
    base = Path(root) if root is not None else Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        cand = base / name
        if cand.is_file():
            return cand
    raise ConfigNotFoundError(f"no {' or '.join(DEFAULT_CONFIG_NAMES)} found in {base}")


def load_config(path: Union[str, Path, None] = None, root: Union[str, Path, None] = None) -> PurgeConfig:
    if path is None:
        cfg_path = find_config(root)
    else:
        cfg_path = Path(path)
        # relative paths: current directory first, then root
        if root is not None and not cfg_path.is_absolute() and not cfg_path.is_file():
            cfg_path = Path(root) / cfg_path
        if not cfg_path.is_file():
            raise ConfigNotFoundError(f"config file not found: {cfg_path}")

    suffix = cfg_path.suffix.lower()
    if suffix == '.py':
        raw = _read_python_config(cfg_path)
    elif suffix == '.json':
        raw = _read_json_config(cfg_path)
    else:
        raise ConfigParseError(f"{cfg_path}: unsupported config format {suffix or '(none)'!r}; use .py or .json")

    config = build_config(raw, source=cfg_path)
    logger.debug("loaded %s: %d content globs, extractor=%r", cfg_path, len(config.content), config.default_extractor)
    return config


def _read_python_config(path: Path) -> Dict[str, Any]:
    try:
        return runpy.run_path(str(path))
    except Exception as e:
        raise ConfigParseError(f"{path}: failed to execute config: {type(e).__name__}: {e}") from e


def _read_json_config(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"{path}: cannot read config: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigParseError(f"{path}: top-level JSON value must be an object")
    return data


def _pick(raw: Dict[str, Any], key: str) -> Any:
    for alias in KEY_ALIASES[key]:
        if alias in raw:
            return raw[alias]
    return None


def build_config(raw: Dict[str, Any], source: Optional[Path] = None) -> PurgeConfig:
    """Validate a raw mapping (module globals or parsed JSON) into a PurgeConfig."""
    where = str(source) if source else '<config>'

    content = _pick(raw, 'content')
    if content is None:
        raise ConfigParseError(f"{where}: 'content' is required")
    if not isinstance(content, (list, tuple)):
        raise ConfigParseError(f"{where}: 'content' must be a list of glob strings")
    if not content:
        raise ConfigParseError(f"{where}: 'content' must not be empty")
    for i, pat in enumerate(content):
        if not isinstance(pat, str) or not pat.strip():
            raise ConfigParseError(f"{where}: content[{i}] must be a non-empty string, got {pat!r}")

    default = _pick(raw, 'defaultExtractor')
    if default is None:
        default_extractor: Extractor = DefaultExtractor()
    else:
        default_extractor = coerce_extractor(default, f"{where}: defaultExtractor")

    rules = []
    extractors = _pick(raw, 'extractors')
    if extractors is not None:
        if not isinstance(extractors, (list, tuple)):
            raise ConfigParseError(f"{where}: 'extractors' must be a list")
        for i, entry in enumerate(extractors):
            rules.append(_coerce_rule(entry, f"{where}: extractors[{i}]"))

    skipped = _pick(raw, 'skippedContentGlobs')
    if skipped is None:
        skipped = ()
    if not isinstance(skipped, (list, tuple)) or not all(isinstance(s, str) and s for s in skipped):
        raise ConfigParseError(f"{where}: 'skippedContentGlobs' must be a list of glob strings")

    return PurgeConfig(
        content=tuple(content),
        default_extractor=default_extractor,
        extractors=tuple(rules),
        skipped_content_globs=tuple(skipped),
        source=source,
    )


def coerce_extractor(value: Any, where: str) -> Extractor:
    """Turn a config value into an Extractor.

    Accepted: an Extractor instance, a callable ``str -> list[str]``, a built-in
    name ("default", "html"), or ``{"pattern": regex}`` (optionally ``"flags": "i"``).
    """
    if isinstance(value, Extractor):
        return value
    if isinstance(value, str):
        try:
            return builtin_extractor(value)
        except ValueError as e:
            raise ConfigParseError(f"{where}: {e}") from e
    if isinstance(value, dict):
        pattern = value.get('pattern')
        if not isinstance(pattern, str) or not pattern:
            raise ConfigParseError(f"{where}: expected {{\"pattern\": \"<regex>\"}}")
        flags = re.IGNORECASE if 'i' in str(value.get('flags') or '') else 0
        try:
            return CustomExtractor.from_pattern(pattern, flags)
        except re.error as e:
            raise ConfigParseError(f"{where}: invalid regex {pattern!r}: {e}") from e
    if callable(value):
        try:
            return CustomExtractor(value)
        except TypeError as e:
            raise ConfigParseError(f"{where}: {e}") from e
    raise ConfigParseError(f"{where}: must be a function taking the file text, got {type(value).__name__}")


def _coerce_rule(entry: Any, where: str) -> ExtractorRule:
    if not isinstance(entry, dict):
        raise ConfigParseError(f"{where}: must be an object with 'extractor' and 'extensions'")
    exts = entry.get('extensions')
    if not isinstance(exts, (list, tuple)) or not exts or not all(isinstance(e, str) and e for e in exts):
        raise ConfigParseError(f"{where}: 'extensions' must be a non-empty list of strings")
    if 'extractor' not in entry:
        raise ConfigParseError(f"{where}: 'extractor' is required")
    extractor = coerce_extractor(entry['extractor'], f"{where}.extractor")
    return ExtractorRule(
        extensions=tuple(e.lstrip('.').lower() for e in exts),
        extractor=extractor,
    )
