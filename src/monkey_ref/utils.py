from __future__ import annotations

import os as _os
import sys as _sys
from typing import Optional

DEBUG_PY_TRACE_VAR = "MONKEY_DEBUG_PY_TRACE"
RECURSION_LIMIT_VAR = "MONKEY_RECURSION_LIMIT"

# Python frames, not Monkey calls; one Monkey call costs roughly twenty
DEFAULT_RECURSION_LIMIT = 20_000

TRUTHY_FLAGS = {"1", "true", "on", "yes"}
FALSY_FLAGS = {"0", "false", "off", "no"}

def envvar_value_by_name(name: str) -> Optional[str]:
    """Return the raw value of an environment variable, or None if unset."""
    return _os.environ.get(name)

def debug_py_trace_enabled() -> bool:
    value = envvar_value_by_name(DEBUG_PY_TRACE_VAR)
    return value is not None and value.strip().lower() in TRUTHY_FLAGS

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_VAR] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_VAR, None)

def recursion_limit_from_env() -> Optional[int]:
    """Positive integer from MONKEY_RECURSION_LIMIT; anything else is ignored."""
    raw = envvar_value_by_name(RECURSION_LIMIT_VAR)
    if raw is None:
        return None

    try:
        limit = int(raw.strip())
    except ValueError:
        return None

    return limit if limit > 0 else None

def apply_recursion_limit() -> None:
    """MONKEY_RECURSION_LIMIT is used as-is; otherwise the ceiling is only ever raised."""
    limit = recursion_limit_from_env()
    if limit is not None:
        _sys.setrecursionlimit(limit)
    elif _sys.getrecursionlimit() < DEFAULT_RECURSION_LIMIT:
        _sys.setrecursionlimit(DEFAULT_RECURSION_LIMIT)
