"""Shared dataclasses for release pipeline orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from wasm_bundle.datatypes import BundleConfig


@dataclass(frozen=True)
class StageSpec:
    """Single pipeline stage specification.

    ``requires`` lists the artifacts an earlier stage must have produced
    before this one may start.
    """

    name: str
    type: str
    config: Mapping[str, Any]
    requires: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class PipelineContext:
    """Execution context shared across stages."""

    workspace: Path
    report_root: Path
    python: str
    bundle: BundleConfig


@dataclass
class StageOutcome:
    """Result emitted by a pipeline stage."""

    name: str
    status: str
    details: Dict[str, Any] = field(default_factory=dict)
    returncode: Optional[int] = None
    duration_s: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status == "failed"
