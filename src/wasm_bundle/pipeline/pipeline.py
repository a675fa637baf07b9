"""Stage-based release pipeline orchestration."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import click

from wasm_bundle.config import resolve_crate_name
from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.pipeline.stages import STAGE_HANDLERS, bindgen, compiler, optimizer, server
from wasm_bundle.pipeline.types import PipelineContext, StageOutcome, StageSpec
from wasm_bundle.reporting.serialize import write_pipeline_summary, write_stage_outcome


def make_context(
    bundle: BundleConfig,
    workspace: Optional[Path] = None,
    python: Optional[str] = None,
) -> PipelineContext:
    """Resolve the workspace and report directory for a run."""
    workspace = Path(workspace).resolve() if workspace is not None else Path.cwd()
    report_root = Path(bundle.report_dir)
    if not report_root.is_absolute():
        report_root = workspace / report_root
    return PipelineContext(
        workspace=workspace,
        report_root=report_root,
        python=python or sys.executable,
        bundle=bundle,
    )


def build_pipeline(context: PipelineContext) -> List[StageSpec]:
    """Build the ordered stage list: compile, bindgen, optimize, serve.

    Each stage's ``requires`` names the artifact the previous stage leaves
    behind, so the optimizer is handed exactly the path bindgen declared.
    """
    bundle = context.bundle
    crate_name = resolve_crate_name(bundle, context.workspace)

    artifact = compiler.artifact_path(bundle, crate_name)
    bundle_wasm, loader_js = bindgen.bundle_paths(bundle, crate_name)

    return [
        StageSpec(
            name="compile",
            type="compile",
            config={
                "command": compiler.build_command(bundle),
                "artifact": str(artifact),
            },
        ),
        StageSpec(
            name="bindgen",
            type="bindgen",
            config={
                "command": bindgen.build_command(bundle, artifact),
                "bundle_wasm": str(bundle_wasm),
                "loader_js": str(loader_js),
            },
            requires=(context.workspace / artifact,),
        ),
        StageSpec(
            name="optimize",
            type="optimize",
            config={
                "command": optimizer.build_command(bundle, bundle_wasm),
                "bundle_wasm": str(bundle_wasm),
            },
            requires=(context.workspace / bundle_wasm,),
        ),
        StageSpec(
            name="serve",
            type="serve",
            config={
                "command": server.build_command(bundle, context.python, context.workspace),
            },
        ),
    ]


def _write_report(writer, *args) -> bool:
    """Run a report writer; an unwritable report directory only warns."""
    try:
        writer(*args)
    except OSError as e:
        click.echo(f"Warning: could not write pipeline report: {e}", err=True)
        return False
    return True


def _missing_requirements(stage: StageSpec) -> List[str]:
    return [str(path) for path in stage.requires if not path.exists()]


def run_pipeline(
    stages: List[StageSpec],
    context: PipelineContext,
    write_reports: bool = True,
) -> List[StageOutcome]:
    """Execute stages in order, stopping at the first failure.

    Stages after a failed one are recorded as ``skipped`` and never run.
    """
    outcomes: List[StageOutcome] = []
    failed: Optional[StageOutcome] = None

    for stage in stages:
        handler = STAGE_HANDLERS.get(stage.type)
        if handler is None:
            raise ValueError(f"Unknown stage type '{stage.type}'")

        if failed is not None:
            outcome = StageOutcome(
                name=stage.name,
                status="skipped",
                details={"reason": f"stage '{failed.name}' failed"},
            )
        elif missing := _missing_requirements(stage):
            click.echo(f"[{stage.name}] missing artifact: {', '.join(missing)}", err=True)
            outcome = StageOutcome(
                name=stage.name,
                status="failed",
                details={"error": "missing artifact", "missing": missing},
                returncode=1,
            )
        else:
            outcome = handler(stage, context)

        if outcome.failed and failed is None:
            failed = outcome

        if write_reports:
            write_reports = _write_report(write_stage_outcome, context.report_root / stage.name, outcome)
        outcomes.append(outcome)

    if write_reports:
        _write_report(write_pipeline_summary, context.report_root, context.bundle, outcomes)

    return outcomes


def pipeline_exit_code(outcomes: List[StageOutcome]) -> int:
    """Exit code of the first failed stage, or 0 if none failed."""
    for outcome in outcomes:
        if outcome.failed:
            return outcome.returncode or 1
    return 0


__all__ = ["build_pipeline", "make_context", "pipeline_exit_code", "run_pipeline"]
