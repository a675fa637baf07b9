"""Serialization utilities for pipeline reports.

This module writes per-stage outcome files and the pipeline summary as
JSON, and exports the outcome table as CSV.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List

from wasm_bundle.datatypes import BundleConfig
from wasm_bundle.reporting.tables import create_outcome_table

if TYPE_CHECKING:
    from wasm_bundle.pipeline.types import StageOutcome


def _serialize_outcome(outcome: StageOutcome) -> Dict[str, Any]:
    return {
        'name': outcome.name,
        'status': outcome.status,
        'returncode': outcome.returncode,
        'duration_s': round(outcome.duration_s, 3),
        'details': outcome.details,
    }


def write_stage_outcome(stage_dir: Path, outcome: StageOutcome) -> Path:
    """Write ``stage_outcome.json`` for a single stage.

    Args:
        stage_dir: Directory for this stage's report.
        outcome: Stage outcome to record.

    Returns:
        Path to saved JSON file.
    """
    stage_dir.mkdir(parents=True, exist_ok=True)
    json_path = stage_dir / 'stage_outcome.json'
    json_path.write_text(
        json.dumps(_serialize_outcome(outcome), indent=2, default=str),
        encoding='utf-8',
    )
    return json_path


def write_pipeline_summary(
    report_root: Path,
    config: BundleConfig,
    outcomes: List[StageOutcome]
) -> Path:
    """Write ``pipeline_summary.json`` and ``pipeline_outcomes.csv``.

    Args:
        report_root: Report directory.
        config: Configuration the pipeline ran with.
        outcomes: Outcomes of every stage, in order.

    Returns:
        Path to saved JSON file.
    """
    report_root.mkdir(parents=True, exist_ok=True)

    summary = {
        'config': asdict(config),
        'stages': [_serialize_outcome(outcome) for outcome in outcomes],
    }
    json_path = report_root / 'pipeline_summary.json'
    json_path.write_text(json.dumps(summary, indent=2, default=str), encoding='utf-8')

    create_outcome_table(outcomes).to_csv(report_root / 'pipeline_outcomes.csv')

    return json_path
