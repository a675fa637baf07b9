"""Blocking invocation of external build tools."""

from __future__ import annotations

import subprocess
import time
from typing import Sequence

import click

from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec

TIMEOUT_RETURNCODE = 124
MISSING_TOOL_RETURNCODE = 127


def run_tool(stage: StageSpec, context: PipelineContext, cmd: Sequence[str]) -> StageOutcome:
    """Run ``cmd`` in the workspace and wait for it to exit.

    The tool's stdout and stderr go straight to the terminal so its own
    diagnostics reach the user unmodified.
    """
    cmd = [str(part) for part in cmd]
    timeout = context.bundle.timeout_for(stage.name)
    details = {"command": cmd, "timeout_s": timeout}

    click.echo(f"[{stage.name}] $ {' '.join(cmd)}")
    started = time.monotonic()
    try:
        result = subprocess.run(cmd, cwd=context.workspace, timeout=timeout, check=False)
        returncode = result.returncode
    except subprocess.TimeoutExpired:
        returncode = TIMEOUT_RETURNCODE
        details["error"] = f"timed out after {timeout:g}s"
    except FileNotFoundError:
        returncode = MISSING_TOOL_RETURNCODE
        details["error"] = f"tool not found: {cmd[0]}"
    except PermissionError as e:
        returncode = MISSING_TOOL_RETURNCODE
        details["error"] = f"cannot execute {cmd[0]}: {e.strerror}"
    duration = time.monotonic() - started

    if "error" in details:
        click.echo(f"[{stage.name}] {details['error']}", err=True)

    status = "success" if returncode == 0 else "failed"
    return StageOutcome(
        name=stage.name,
        status=status,
        details=details,
        returncode=returncode,
        duration_s=duration,
    )
