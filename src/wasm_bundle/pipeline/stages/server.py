"""Serve stage: start a local file server and open the bundle in a browser.

Both actions are conveniences. Neither is awaited, and any problem they hit
is reported as a warning instead of failing the pipeline.
"""

from __future__ import annotations

import socket
import subprocess
import time
import webbrowser
from pathlib import Path
from typing import Any, Dict, List

import click

from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec


def build_command(config: BundleConfig, python: str, serve_root: Path) -> List[str]:
    return [
        python,
        "-m",
        "http.server",
        str(config.port),
        "--bind",
        config.host,
        "--directory",
        str(serve_root),
    ]


def port_in_use(host: str, port: int, timeout: float = 0.5) -> bool:
    """Return True if something already accepts connections on host:port."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def _start_server(stage: StageSpec, context: PipelineContext, warnings: List[str]) -> Dict[str, Any]:
    bundle = context.bundle
    cmd = stage.config["command"]

    if port_in_use(bundle.host, bundle.port):
        message = (
            f"port {bundle.port} on {bundle.host} is already in use, "
            "assuming an earlier server is still serving the bundle"
        )
        click.echo(f"[{stage.name}] Warning: {message}", err=True)
        warnings.append(message)
        return {"command": cmd, "started": False}

    click.echo(f"[{stage.name}] $ {' '.join(cmd)} &")
    try:
        process = subprocess.Popen(
            cmd,
            cwd=context.workspace,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        message = f"could not start file server: {e}"
        click.echo(f"[{stage.name}] Warning: {message}", err=True)
        warnings.append(message)
        return {"command": cmd, "started": False}

    return {"command": cmd, "started": True, "pid": process.pid}


def _open_viewer(stage: StageSpec, url: str, warnings: List[str]) -> bool:
    try:
        opened = webbrowser.open(url, new=2)
    except webbrowser.Error as e:
        warnings.append(f"could not open a browser: {e}")
        opened = False
    else:
        if not opened:
            warnings.append("no browser available")

    if not opened:
        click.echo(f"[{stage.name}] Open {url} in your browser")
    return opened


def run_stage(stage: StageSpec, context: PipelineContext) -> StageOutcome:
    """Launch the server and the viewer without waiting on either."""
    bundle = context.bundle
    url = bundle.viewer_url
    warnings: List[str] = []
    details: Dict[str, Any] = {"url": url, "warnings": warnings}

    started = time.monotonic()
    entry_page = context.workspace / bundle.output_dir / bundle.entry_page
    if not entry_page.is_file():
        message = f"entry page {entry_page} does not exist"
        click.echo(f"[{stage.name}] Warning: {message}", err=True)
        warnings.append(message)

    if bundle.serve:
        details["server"] = _start_server(stage, context, warnings)
    if bundle.open_browser:
        details["browser_opened"] = _open_viewer(stage, url, warnings)
    elif bundle.serve:
        click.echo(f"[{stage.name}] Serving {url}")

    return StageOutcome(
        name=stage.name,
        status="success",
        details=details,
        returncode=0,
        duration_s=time.monotonic() - started,
    )
