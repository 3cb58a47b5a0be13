"""
Utilities for working with CLI in tests.
"""

import json
import os
import subprocess
import sys
from pathlib import Path


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    """
    Runs xtemplate.cli with specified arguments in the given directory.

    Args:
        root: Working directory for command execution
        *args: Command line arguments for xtemplate.cli

    Returns:
        CompletedProcess with execution results
    """
    env = os.environ.copy()
    repo_root = str(Path(__file__).resolve().parents[2])
    env["PYTHONPATH"] = repo_root + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "xtemplate.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)


__all__ = ["run_cli", "jload"]
