"""Compiler stage: build the library crate for the wasm target."""

from __future__ import annotations

from pathlib import Path
from typing import List

from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.pipeline.process import run_tool
from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec


def artifact_path(config: BundleConfig, crate_name: str) -> Path:
    """Workspace-relative path cargo writes the compiled module to."""
    return Path(config.target_dir) / config.target / config.profile / f"{crate_name}.wasm"


def build_command(config: BundleConfig) -> List[str]:
    if config.profile == "release":
        profile_args = ["--release"]
    else:
        profile_args = ["--profile", config.profile]
    return [config.cargo, "build", *profile_args, "--lib", "--target", config.target]


def run_stage(stage: StageSpec, context: PipelineContext) -> StageOutcome:
    outcome = run_tool(stage, context, stage.config["command"])
    outcome.details["artifact"] = stage.config["artifact"]
    return outcome
