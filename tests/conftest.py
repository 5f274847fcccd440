import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'taskledger'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from taskledger.core.config import clear_all_caches  # noqa: E402
from taskledger.core.stdlib_logging import reset_stdlib_logging_for_tests  # noqa: E402
from taskledger.data import clear_caches as clear_data_caches  # noqa: E402


SAMPLE_DOCUMENT = """\
# Setup

- [x] 1.1 Create repository
  - Initialise the project layout
  _Requirements: 1.1_
- [ ] 1.2 Configure CI
  - Run tests on every push
  - Depends on: 1.1
  - Assignee: alice
  - Priority: high
  - Tags: infra, ci
  _Requirements: 1.2, 3.1_

## Follow-up

- [ ] 1.3 Write docs
  - Describe the workflow
  - Depends on: 1.2
  - Complexity: low
"""


def _reset_caches() -> None:
    clear_all_caches()
    clear_data_caches()
    reset_stdlib_logging_for_tests()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Give every test its own project root and user config dir.

    Clears ``TASKLEDGER_*`` variables from the developer shell so config
    loading only sees bundled defaults plus what the test writes.
    """
    for key in list(os.environ):
        if key.startswith("TASKLEDGER_"):
            monkeypatch.delenv(key, raising=False)

    root = tmp_path_factory.mktemp("project")
    user_dir = tmp_path_factory.mktemp("user-config")
    monkeypatch.setenv("TASKLEDGER_PROJECT_ROOT", str(root))
    monkeypatch.setenv("TASKLEDGER_USER_CONFIG_DIR", str(user_dir))

    _reset_caches()
    yield root
    _reset_caches()


@pytest.fixture
def project_root(isolated_env) -> Path:
    """Project root with an empty ``.taskledger/config`` directory."""
    (isolated_env / ".taskledger" / "config").mkdir(parents=True, exist_ok=True)
    return isolated_env


@pytest.fixture
def write_project_config(project_root):
    """Write a YAML file into the project config directory."""

    def _write(name: str, content: str) -> Path:
        path = project_root / ".taskledger" / "config" / name
        path.write_text(content, encoding="utf-8")
        clear_all_caches()
        return path

    return _write


@pytest.fixture
def sample_document() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def task_file(project_root) -> Path:
    """The sample document written to the default ``tasks.md`` location."""
    path = project_root / "tasks.md"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path
