"""Optimizer stage: shrink the bundle binary in place with wasm-opt."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.pipeline.process import run_tool
from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec


def build_command(config: BundleConfig, bundle_wasm: Path) -> List[str]:
    """Build the wasm-opt invocation; input and output are the same file.

    ``--fast-math`` trades bit-exact floating-point results for size and
    speed, so it is a setting rather than a hard-coded flag.
    """
    cmd = [config.wasm_opt, str(bundle_wasm), f"-{config.opt_level}"]
    if config.fast_math:
        cmd.append("--fast-math")
    if config.debug_symbols:
        cmd.append("-g")
    cmd.extend(["-o", str(bundle_wasm)])
    return cmd


def _file_size(path: Path) -> Optional[int]:
    return path.stat().st_size if path.is_file() else None


def run_stage(stage: StageSpec, context: PipelineContext) -> StageOutcome:
    bundle_wasm = context.workspace / stage.config["bundle_wasm"]
    size_before = _file_size(bundle_wasm)

    outcome = run_tool(stage, context, stage.config["command"])

    outcome.details["bundle_wasm"] = stage.config["bundle_wasm"]
    outcome.details["size_before"] = size_before
    outcome.details["size_after"] = _file_size(bundle_wasm)
    return outcome
