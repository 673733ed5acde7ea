"""Tabular views of projections, forecasts, allocations and scenarios."""

from typing import Dict, List, Mapping, Sequence

import pandas as pd

from pavecast.config.constants import CATEGORY_ORDER
from pavecast.config.schema import AllocationResult, ForecastPoint, ProjectionPoint, Scenario

FORECAST_COLUMNS = ["year", "good", "fair", "poor", "critical"]
SELECTION_COLUMNS = [
    "segment_id", "category", "treatment", "condition_before",
    "condition_improvement", "cost", "benefit",
]


def projection_frame(points: Sequence[ProjectionPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"year": p.year, "condition": p.condition, "after_maintenance": p.after_maintenance}
         for p in points],
        columns=["year", "condition", "after_maintenance"],
    )


def forecast_frame(points: Sequence[ForecastPoint]) -> pd.DataFrame:
    return pd.DataFrame([p.as_dict() for p in points], columns=FORECAST_COLUMNS)


def maintenance_comparison_frame(rows: List[Dict[str, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        rows, columns=["year", "no_maintenance", "single_maintenance", "regular_maintenance"],
    )


def selection_frame(result: AllocationResult) -> pd.DataFrame:
    """One row per selected project, in selection order."""
    return pd.DataFrame(
        [
            {
                "segment_id": p.segment_id,
                "category": p.category,
                "treatment": p.treatment_name,
                "condition_before": p.condition,
                "condition_improvement": p.condition_improvement,
                "cost": p.cost,
                "benefit": p.benefit,
            }
            for p in result.selections
        ],
        columns=SELECTION_COLUMNS,
    )


def allocation_summary(results: Mapping[str, AllocationResult]) -> pd.DataFrame:
    """One row per labelled run (e.g. per strategy)."""
    return pd.DataFrame(
        [
            {
                "run": label,
                "projected_condition": r.projected_condition,
                "segments_improved": r.segments_improved,
                "segments_unaddressed": r.segments_unaddressed,
                "total_cost": r.total_cost,
            }
            for label, r in results.items()
        ],
        columns=["run", "projected_condition", "segments_improved",
                 "segments_unaddressed", "total_cost"],
    )


def scenario_frame(
    scenarios: Sequence[Scenario],
    category_order: Sequence[str] = CATEGORY_ORDER,
) -> pd.DataFrame:
    rows = []
    for s in scenarios:
        row = {"name": s.name, "total_budget": s.total_budget}
        for category in category_order:
            row[category] = s.amount(category)
        row["projected_pci"] = s.projected_pci
        rows.append(row)
    return pd.DataFrame(rows, columns=["name", "total_budget", *category_order, "projected_pci"])
