"""Test helpers for argocd-deps tools."""

import subprocess
import sys

import pytest


def run_command(args: list[str], capsys: pytest.CaptureFixture[str]) -> str:
    """Run the command line tool and return stdout."""
    proc = subprocess.run(
        [sys.executable, "-m", "argocd_deps.tool.argocd_deps", *args],
        capture_output=True,
        text=True,
        check=False,
    )
    sys.stderr.write(proc.stderr)
    if proc.returncode != 0:
        raise SystemExit(proc.returncode)
    return proc.stdout
