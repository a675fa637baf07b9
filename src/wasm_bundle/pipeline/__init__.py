"""Release pipeline orchestration for the wasm bundler.

The modules under :mod:`wasm_bundle.pipeline` turn a :class:`BundleConfig`
into an ordered list of stages and run them one after another, stopping at
the first failure.
"""

from .pipeline import build_pipeline, make_context, pipeline_exit_code, run_pipeline
from .types import PipelineContext, StageOutcome, StageSpec

__all__ = [
    "PipelineContext",
    "StageOutcome",
    "StageSpec",
    "build_pipeline",
    "make_context",
    "pipeline_exit_code",
    "run_pipeline",
]
