"""Registry of pipeline stage handlers."""

from __future__ import annotations

from typing import Callable

from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec

from .bindgen import run_stage as run_bindgen_stage
from .compiler import run_stage as run_compile_stage
from .optimizer import run_stage as run_optimize_stage
from .server import run_stage as run_serve_stage

StageHandler = Callable[[StageSpec, PipelineContext], StageOutcome]

STAGE_HANDLERS: dict[str, StageHandler] = {
    "compile": run_compile_stage,
    "bindgen": run_bindgen_stage,
    "optimize": run_optimize_stage,
    "serve": run_serve_stage,
}

__all__ = ["STAGE_HANDLERS", "StageHandler"]
