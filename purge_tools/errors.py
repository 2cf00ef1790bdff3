from __future__ import annotations

from pathlib import Path


class PurgeError(Exception):
    """Base class for everything raised by purge_tools."""


class PurgeConfigError(PurgeError):
    """Configuration-level failure. These abort the run."""


class ConfigNotFoundError(PurgeConfigError):
    pass


class ConfigParseError(PurgeConfigError):
    pass


class GlobSyntaxError(PurgeConfigError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid glob {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class FileProcessingError(PurgeError):
    """Per-file failure. Recorded on the result; the rest of the files are still scanned."""

    kind = 'file'

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason

    def to_dict(self) -> dict:
        return {'path': str(self.path), 'kind': self.kind, 'reason': self.reason}


class FileReadError(FileProcessingError):
    kind = 'read'


class ExtractorError(FileProcessingError):
    kind = 'extractor'
