#!/usr/bin/env python3
"""Apply the configured extractors to every content file and merge the tokens."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from purge_tools.config_loader import PurgeConfig
from purge_tools.errors import ExtractorError, FileProcessingError, FileReadError
from purge_tools.glob_resolver import resolve_content


logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    tokens: List[str] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    errors: List[FileProcessingError] = field(default_factory=list)

    @property
    def token_set(self) -> FrozenSet[str]:
        return frozenset(self.tokens)

    @property
    def ok(self) -> bool:
        return not self.errors


def read_file(path: Path) -> str:
    return Path(path).read_text(encoding='utf-8', errors='ignore')


def _extract_one(path: Path, config: PurgeConfig) -> Tuple[List[str], Optional[FileProcessingError]]:
    try:
        text = read_file(path)
    except OSError as e:
        return [], FileReadError(path, f"{type(e).__name__}: {e}")
    extractor = config.extractor_for(path)
    try:
        tokens = extractor.extract(text)
    except Exception as e:
        # user extractors can raise anything
        return [], ExtractorError(path, f"{extractor.name}: {type(e).__name__}: {e}")
    return tokens, None


def extract_tokens(files: Iterable[Union[str, Path]], config: PurgeConfig, jobs: int = 1) -> ExtractionResult:
    files = [Path(f) for f in files]
    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            # map() keeps input order, so merging below is identical to the sequential path
            outcomes = list(executor.map(lambda p: _extract_one(p, config), files))
    else:
        outcomes = [_extract_one(p, config) for p in files]

    result = ExtractionResult(files=files)
    seen = set()
    for path, (tokens, error) in zip(files, outcomes):
        if error is not None:
            logger.warning("skipping %s (%s error): %s", path, error.kind, error.reason)
            result.errors.append(error)
            continue
        for tok in tokens:
            if tok not in seen:
                seen.add(tok)
                result.tokens.append(tok)
    return result


def scan(config: PurgeConfig, cwd: Union[str, Path, None] = None, jobs: int = 1) -> ExtractionResult:
    """Resolve the config's content globs under ``cwd`` and extract their tokens."""
    files = resolve_content(config.content, cwd=cwd, skip=config.skipped_content_globs)
    logger.info("scanning %d file(s) from %d content glob(s)", len(files), len(config.content))
    return extract_tokens(files, config, jobs=jobs)
