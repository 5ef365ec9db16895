"""Subprocess runner for DocDoc command modules."""
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

SRC_ROOT = Path(__file__).resolve().parents[2] / "src"


def run_docdoc(
    args: List[str],
    cwd: Path,
    *,
    module: str = "docdoc.cli._dispatcher",
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Execute a DocDoc CLI module with ``python -m``."""
    run_env = os.environ.copy()
    run_env.update(env or {})
    existing = run_env.get("PYTHONPATH")
    run_env["PYTHONPATH"] = str(SRC_ROOT) + (os.pathsep + existing if existing else "")

    cmd = [sys.executable, "-m", module, *args]
    return subprocess.run(
        cmd,
        text=True,
        capture_output=True,
        env=run_env,
        cwd=cwd,
        check=False,
        timeout=60,
    )


def start_docdoc(
    args: List[str],
    cwd: Path,
    *,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.Popen:
    """Start ``docdoc`` in the background (for long-running ``render --watch``)."""
    run_env = os.environ.copy()
    run_env.update(env or {})
    existing = run_env.get("PYTHONPATH")
    run_env["PYTHONPATH"] = str(SRC_ROOT) + (os.pathsep + existing if existing else "")

    return subprocess.Popen(
        [sys.executable, "-m", "docdoc.cli._dispatcher", *args],
        cwd=cwd,
        env=run_env,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
