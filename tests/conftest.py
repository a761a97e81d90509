from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from monkey_ref.runtime import Environment
from monkey_ref.utils import DEBUG_PY_TRACE_VAR, RECURSION_LIMIT_VAR


@pytest.fixture
def env() -> Environment:
    """A fresh root environment with the builtin table attached."""
    return Environment()


@pytest.fixture
def restore_recursion_limit():
    """Put the interpreter-wide recursion limit back after the test."""
    limit = sys.getrecursionlimit()
    yield
    sys.setrecursionlimit(limit)


@pytest.fixture(autouse=True)
def _isolate_monkey_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MONKEY_* settings from the outer shell out of every test."""
    for name in (DEBUG_PY_TRACE_VAR, RECURSION_LIMIT_VAR):
        # setenv first so teardown also undoes writes made by the code under test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if pytest ever generates duplicate node IDs."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        nodeid = item.nodeid
        if nodeid in seen:
            duplicates.append(nodeid)
            continue
        seen[nodeid] = 1

    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in sorted(set(duplicates)))
    raise pytest.UsageError(
        "Duplicate pytest nodeids detected during collection:\n" f"{lines}"
    )
