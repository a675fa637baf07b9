"""Binding generator stage: wrap the compiled module in a JS loader."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.pipeline.process import run_tool
from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec


def bundle_paths(config: BundleConfig, crate_name: str) -> Tuple[Path, Path]:
    """Workspace-relative paths of the bundle binary and its runtime shim."""
    out_dir = Path(config.output_dir)
    return out_dir / f"{crate_name}_bg.wasm", out_dir / f"{crate_name}.js"


def build_command(config: BundleConfig, artifact: Path) -> List[str]:
    # --no-modules exposes a global `wasm_bindgen` loader instead of an ES module.
    return [
        config.wasm_bindgen,
        str(artifact),
        "--out-dir",
        config.output_dir,
        "--no-modules",
        "--no-typescript",
    ]


def run_stage(stage: StageSpec, context: PipelineContext) -> StageOutcome:
    """Run wasm-bindgen and check that the bundle binary was written."""
    outcome = run_tool(stage, context, stage.config["command"])
    bundle_wasm = stage.config["bundle_wasm"]
    outcome.details["bundle_wasm"] = bundle_wasm
    outcome.details["loader_js"] = stage.config["loader_js"]

    if outcome.status == "success" and not (context.workspace / bundle_wasm).is_file():
        outcome.status = "failed"
        outcome.returncode = 1
        outcome.details["error"] = f"wasm-bindgen did not produce {bundle_wasm}"
    return outcome
