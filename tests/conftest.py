"""Shared fixtures: a throwaway crate workspace and fake build tools."""

from __future__ import annotations

import json
import stat
import sys
import textwrap
from pathlib import Path

import pytest

from wasm_bundle.config import parse_config


ARTIFACT_SIZE = 4096
LOADER_JS = """\
let wasm_bindgen;
(function() {
    const __exports = {};
    function init(module) { return WebAssembly.instantiateStreaming(fetch(module)); }
    wasm_bindgen = Object.assign(init, __exports);
})();
"""


def write_tool(path: Path, body: str) -> Path:
    """Write an executable Python script standing in for an external tool."""
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def crate_workspace(tmp_path: Path) -> Path:
    workspace = tmp_path / "crate"
    workspace.mkdir()
    (workspace / "Cargo.toml").write_text(
        '[package]\nname = "demo-app"\nversion = "0.1.0"\n', encoding="utf-8"
    )
    (workspace / "docs").mkdir()
    (workspace / "docs" / "index.html").write_text(
        '<script src="demo_app.js"></script>\n', encoding="utf-8"
    )
    return workspace


@pytest.fixture
def tool_dir(tmp_path: Path) -> Path:
    tools = tmp_path / "tools"
    tools.mkdir()

    write_tool(tools / "cargo", f"""
        import pathlib, sys
        target = sys.argv[sys.argv.index("--target") + 1]
        out = pathlib.Path("target") / target / "release"
        out.mkdir(parents=True, exist_ok=True)
        (out / "demo_app.wasm").write_bytes(b"\\0asm" + bytes(range(256)) * ({ARTIFACT_SIZE} // 256 - 1) + bytes(252))
    """)

    write_tool(tools / "wasm-bindgen", f"""
        import pathlib, sys
        artifact = pathlib.Path(sys.argv[1])
        out_dir = pathlib.Path(sys.argv[sys.argv.index("--out-dir") + 1])
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "demo_app_bg.wasm").write_bytes(artifact.read_bytes())
        (out_dir / "demo_app.js").write_text({LOADER_JS!r})
    """)

    write_tool(tools / "wasm-opt", f"""
        import json, pathlib, sys
        with open({str(tools / "wasm-opt.log")!r}, "a") as log:
            log.write(json.dumps(sys.argv[1:]) + "\\n")
        src = pathlib.Path(sys.argv[1])
        dst = pathlib.Path(sys.argv[sys.argv.index("-o") + 1])
        data = src.read_bytes()
        dst.write_bytes(data[: len(data) // 2])
    """)
    return tools


def failing_tool(path: Path, code: int) -> Path:
    return write_tool(path, f"""
        import sys
        sys.stderr.write("error: simulated failure\\n")
        sys.exit({code})
    """)


def opt_calls(tools: Path):
    log = tools / "wasm-opt.log"
    if not log.exists():
        return []
    return [json.loads(line) for line in log.read_text().splitlines()]


@pytest.fixture
def make_config(tool_dir: Path):
    """Build a BundleConfig pointing at the fake tools, with stage 4 muted."""
    def _make(**overrides):
        settings = {
            "cargo": str(tool_dir / "cargo"),
            "wasm_bindgen": str(tool_dir / "wasm-bindgen"),
            "wasm_opt": str(tool_dir / "wasm-opt"),
            "serve": False,
            "open_browser": False,
        }
        settings.update(overrides)
        return parse_config(settings)

    return _make
