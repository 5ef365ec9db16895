import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'docdoc' and tests/ importable as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_docdoc_caches


@pytest.fixture(autouse=True)
def _reset_global_state(monkeypatch):
    """Ensure config caches and logging handlers are fresh for each test.

    DOCDOC_* variables from a developer shell would silently change config
    loading, so they are always cleared.
    """
    for key in list(os.environ):
        if key.startswith("DOCDOC_"):
            monkeypatch.delenv(key, raising=False)
    reset_docdoc_caches()
    yield
    reset_docdoc_caches()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """Run the test from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
