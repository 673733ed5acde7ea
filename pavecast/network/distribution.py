"""Network-wide condition distribution forecasts.

Each segment is projected independently, so trajectories can be computed in a
worker pool (or concurrently against an async predictor). Yearly percentages
are aggregated only after every trajectory is available.
"""

import asyncio
import logging
from datetime import date
from multiprocessing import Pool
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from pavecast.config.constants import CONDITION_STATES, CONDITION_THRESHOLDS
from pavecast.config.schema import ForecastPoint, Segment, round_half_up
from pavecast.deterioration.decay_model import DecayModel
from pavecast.deterioration.predictor import AlternatePredictor
from pavecast.deterioration.projection import ProjectionEngine, check_horizon

logger = logging.getLogger(__name__)


def condition_state(
    condition: float,
    thresholds: Mapping[str, float] = CONDITION_THRESHOLDS,
) -> str:
    """Map a PCI value to good / fair / poor / critical."""
    if condition >= thresholds["good"]:
        return "good"
    elif condition >= thresholds["fair"]:
        return "fair"
    elif condition >= thresholds["poor"]:
        return "poor"
    return "critical"


def condition_distribution(
    conditions: Sequence[float],
    thresholds: Mapping[str, float] = CONDITION_THRESHOLDS,
) -> Dict[str, int]:
    """Rounded percentage of conditions in each state (all 0 when empty)."""
    values = np.asarray(conditions, dtype=float)
    if values.size == 0:
        return {state: 0 for state in CONDITION_STATES}

    counts = {
        "good": np.count_nonzero(values >= thresholds["good"]),
        "fair": np.count_nonzero((values >= thresholds["fair"]) & (values < thresholds["good"])),
        "poor": np.count_nonzero((values >= thresholds["poor"]) & (values < thresholds["fair"])),
        "critical": np.count_nonzero(values < thresholds["poor"]),
    }
    total = values.size
    return {state: round_half_up(counts[state] / total * 100) for state in CONDITION_STATES}


def _segment_trajectory(
    model: DecayModel,
    segment: Segment,
    horizon_years: int,
    traffic_level: str,
    climate_impact: str,
) -> List[float]:
    """Condition of one segment after 0..horizon_years years (worker entry point)."""
    return [
        model.predict(segment.condition, year, segment.surface_type, traffic_level, climate_impact)
        for year in range(horizon_years + 1)
    ]


class DistributionForecaster:
    """Buckets projected network conditions into states per year."""

    def __init__(
        self,
        model: Optional[DecayModel] = None,
        n_workers: int = 1,
        thresholds: Optional[Mapping[str, float]] = None,
    ):
        self.model = model or DecayModel()
        self.n_workers = n_workers
        self.thresholds = dict(thresholds or CONDITION_THRESHOLDS)

    def forecast(
        self,
        segments: Sequence[Segment],
        horizon_years: int,
        start_year: Optional[int] = None,
        traffic_level: str = "medium",
        climate_impact: str = "medium",
        use_segment_modifiers: bool = False,
    ) -> List[ForecastPoint]:
        """Forecast the condition distribution for years 0..horizon_years.

        Args:
            segments: Network population.
            horizon_years: Years to forecast (>= 0).
            start_year: Label for offset 0. Defaults to the current calendar
                year; pass 0 for zero-based offsets.
            traffic_level: Modifier applied to every segment.
            climate_impact: Modifier applied to every segment.
            use_segment_modifiers: Use each segment's own traffic and climate
                instead of the defaults above.

        Returns:
            horizon_years + 1 ForecastPoints.
        """
        check_horizon(horizon_years)
        args = [
            (
                self.model,
                segment,
                horizon_years,
                segment.traffic_level if use_segment_modifiers else traffic_level,
                segment.climate_impact if use_segment_modifiers else climate_impact,
            )
            for segment in segments
        ]

        if self.n_workers <= 1 or len(args) <= 1:
            trajectories = [_segment_trajectory(*arg) for arg in args]
        else:
            with Pool(self.n_workers) as pool:
                trajectories = pool.starmap(_segment_trajectory, args)

        logger.debug(
            f"Forecast {len(segments)} segments over {horizon_years} years "
            f"({self.n_workers} workers)"
        )
        return self._aggregate(trajectories, horizon_years, start_year)

    async def forecast_with_predictor(
        self,
        segments: Sequence[Segment],
        horizon_years: int,
        predictor: AlternatePredictor,
        start_year: Optional[int] = None,
        max_concurrency: int = 8,
        traffic_level: str = "medium",
        climate_impact: str = "medium",
        use_segment_modifiers: bool = False,
    ) -> List[ForecastPoint]:
        """Forecast with an async predictor, projecting segments concurrently.

        Each segment's years are stepped sequentially through the predictor;
        at most max_concurrency segments are in flight at once.
        """
        check_horizon(horizon_years)
        engine = ProjectionEngine(self.model)
        semaphore = asyncio.Semaphore(max(1, max_concurrency))

        async def run(segment: Segment) -> List[float]:
            params = segment.decay_parameters(
                traffic_level=None if use_segment_modifiers else traffic_level,
                climate_impact=None if use_segment_modifiers else climate_impact,
            )
            async with semaphore:
                points = await engine.project_with_predictor(params, horizon_years, predictor)
            return [p.condition for p in points]

        trajectories = await asyncio.gather(*(run(segment) for segment in segments))
        return self._aggregate(list(trajectories), horizon_years, start_year)

    def _aggregate(
        self,
        trajectories: List[List[float]],
        horizon_years: int,
        start_year: Optional[int],
    ) -> List[ForecastPoint]:
        base_year = date.today().year if start_year is None else start_year
        matrix = np.asarray(trajectories, dtype=float).reshape(len(trajectories), horizon_years + 1)

        points = []
        for offset in range(horizon_years + 1):
            dist = condition_distribution(matrix[:, offset], self.thresholds)
            points.append(ForecastPoint(year=base_year + offset, **dist))
        return points
