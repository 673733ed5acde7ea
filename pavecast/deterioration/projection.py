"""Multi-year condition projection for a single segment.

The decay model is stepped one year at a time from the last recorded
condition. A treatment therefore restarts decay from the improved condition
without resetting any age clock: every step uses age = 1.
"""

import logging
import numbers
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from pavecast.config.constants import MAX_REGULAR_INTERVAL_YEARS
from pavecast.config.errors import ValidationError
from pavecast.config.schema import (
    DecayParameters,
    MaintenanceImpact,
    ProjectionPoint,
    ScheduleEntry,
    TreatmentType,
)
from pavecast.deterioration.decay_model import DecayModel
from pavecast.deterioration.maintenance import apply_impact
from pavecast.deterioration.predictor import AlternatePredictor, predict_step_with_fallback

logger = logging.getLogger(__name__)


def check_horizon(horizon_years: int) -> None:
    if not isinstance(horizon_years, numbers.Integral) or horizon_years < 0:
        raise ValidationError(f"horizon_years must be a non-negative integer, got {horizon_years}")


def _index_schedule(
    schedule: Optional[Sequence[ScheduleEntry]],
    horizon_years: int,
) -> Dict[int, List[MaintenanceImpact]]:
    """Group schedule impacts by year, keeping the caller's order within a year."""
    by_year: Dict[int, List[MaintenanceImpact]] = defaultdict(list)
    for entry in schedule or ():
        if entry.year > horizon_years:
            raise ValidationError(
                f"schedule year {entry.year} is beyond the {horizon_years}-year horizon"
            )
        by_year[entry.year].append(entry.impact)
    return by_year


def regular_schedule(
    treatment: TreatmentType,
    horizon_years: int,
    max_interval: int = MAX_REGULAR_INTERVAL_YEARS,
) -> List[ScheduleEntry]:
    """Repeat a treatment every min(lifespan_extension, max_interval) years.

    Only whole years that fall on a multiple of the interval get an entry,
    so a 2.5-year interval treats at years 5, 10, ... and never at year 0.
    A zero interval yields an empty schedule.
    """
    interval = min(treatment.lifespan_extension, max_interval)
    if interval <= 0:
        return []
    return [
        ScheduleEntry(year=year, impact=treatment.impact)
        for year in range(1, horizon_years + 1)
        if year % interval == 0
    ]


class ProjectionEngine:
    """Drives the decay and maintenance models across a horizon."""

    def __init__(self, model: Optional[DecayModel] = None):
        self.model = model or DecayModel()

    def project(
        self,
        params: DecayParameters,
        horizon_years: int,
        schedule: Optional[Sequence[ScheduleEntry]] = None,
    ) -> List[ProjectionPoint]:
        """Project condition for years 0..horizon_years inclusive.

        Args:
            params: Segment decay parameters; initial_condition is year 0.
            horizon_years: Number of years to project (>= 0).
            schedule: Optional maintenance entries. Entries sharing a year are
                applied in the order given.

        Returns:
            horizon_years + 1 ProjectionPoints in ascending year order.
        """
        check_horizon(horizon_years)
        by_year = _index_schedule(schedule, horizon_years)

        points = []
        condition = params.initial_condition
        for year in range(horizon_years + 1):
            impacts = by_year.get(year, [])
            for impact in impacts:
                condition = apply_impact(condition, impact)
            points.append(ProjectionPoint(year, condition, after_maintenance=bool(impacts)))

            if year < horizon_years:
                condition = self.model.step(condition, params)
        return points

    async def project_with_predictor(
        self,
        params: DecayParameters,
        horizon_years: int,
        predictor: AlternatePredictor,
        schedule: Optional[Sequence[ScheduleEntry]] = None,
    ) -> List[ProjectionPoint]:
        """Same as project() but each yearly step is awaited from predictor.

        Steps are strictly sequential since each depends on the previous
        condition. Failed steps use this engine's analytical model.
        """
        check_horizon(horizon_years)
        by_year = _index_schedule(schedule, horizon_years)

        points = []
        condition = params.initial_condition
        for year in range(horizon_years + 1):
            impacts = by_year.get(year, [])
            for impact in impacts:
                condition = apply_impact(condition, impact)
            points.append(ProjectionPoint(year, condition, after_maintenance=bool(impacts)))

            if year < horizon_years:
                condition = await predict_step_with_fallback(predictor, self.model, condition, params)
        return points

    def compare_maintenance_plans(
        self,
        params: DecayParameters,
        horizon_years: int,
        treatment: TreatmentType,
        maintenance_year: int,
    ) -> List[Dict[str, float]]:
        """Per-year conditions with no, a single, and regular treatment.

        Returns:
            One dict per year with keys year, no_maintenance,
            single_maintenance and regular_maintenance.
        """
        check_horizon(horizon_years)
        if not 0 <= maintenance_year <= horizon_years:
            raise ValidationError(
                f"maintenance_year must be in [0, {horizon_years}], got {maintenance_year}"
            )

        none = self.project(params, horizon_years)
        single = self.project(
            params, horizon_years, [ScheduleEntry(maintenance_year, treatment.impact)],
        )
        regular = self.project(params, horizon_years, regular_schedule(treatment, horizon_years))

        logger.debug(
            f"Compared maintenance plans for {treatment.name} over {horizon_years} years"
        )
        return [
            {
                "year": n.year,
                "no_maintenance": n.condition,
                "single_maintenance": s.condition,
                "regular_maintenance": r.condition,
            }
            for n, s, r in zip(none, single, regular)
        ]
