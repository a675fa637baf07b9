"""Table generation for reporting.

This module provides functions for creating tables of stage outcomes and
bundle sizes.
"""

from __future__ import annotations

import pandas as pd
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from wasm_bundle.pipeline.types import StageOutcome


OUTCOME_COLUMNS = ['Stage', 'Status', 'Return code', 'Duration (s)']


def create_outcome_table(outcomes: List[StageOutcome]) -> pd.DataFrame:
    """Create a table with one row per stage.

    Args:
        outcomes: Stage outcomes in pipeline order.

    Returns:
        DataFrame indexed by stage name.
    """
    rows = [
        {
            'Stage': outcome.name,
            'Status': outcome.status,
            'Return code': outcome.returncode,
            'Duration (s)': round(outcome.duration_s, 3),
        }
        for outcome in outcomes
    ]

    df = pd.DataFrame(rows, columns=OUTCOME_COLUMNS)
    df = df.set_index('Stage')

    return df


def create_size_table(outcomes: List[StageOutcome]) -> pd.DataFrame:
    """Create a table of bundle binary sizes before and after optimization.

    Only stages that recorded both sizes appear.
    """
    rows = []

    for outcome in outcomes:
        before = outcome.details.get('size_before')
        after = outcome.details.get('size_after')
        if before is None or after is None:
            continue
        rows.append({
            'File': outcome.details.get('bundle_wasm', outcome.name),
            'Before (bytes)': before,
            'After (bytes)': after,
            'Saved (%)': (before - after) / before * 100 if before else 0.0,
        })

    return pd.DataFrame(rows, columns=['File', 'Before (bytes)', 'After (bytes)', 'Saved (%)'])
