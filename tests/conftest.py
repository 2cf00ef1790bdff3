"""
Test configuration: puts the repo root on sys.path so tests import
purge_tools.* and the step scripts the same way the scripts run.
"""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

SAMPLE_SITE = REPO_ROOT / "sample_site"


@pytest.fixture
def make_tree(tmp_path):
    """Write {relative_path: text} under tmp_path and return tmp_path."""

    def _make(files):
        for rel, text in files.items():
            p = tmp_path / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def sample_site():
    return SAMPLE_SITE
