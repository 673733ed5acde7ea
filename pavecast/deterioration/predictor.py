"""Pluggable one-step condition predictors.

An alternate predictor (e.g. a learned model behind a remote call) exposes the
same one-step contract as the analytical model but may suspend on I/O. A step
that fails falls back to the analytical one-year decay for that step. Failure
means returning None or a value outside [0, 100], raising PredictorError, or
timing out or hitting an I/O error on the remote call.
"""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

from pavecast.config.errors import PredictorError
from pavecast.config.schema import DecayParameters
from pavecast.deterioration.decay_model import DecayModel

logger = logging.getLogger(__name__)


class AlternatePredictor(ABC):
    """Async one-step predictor contract."""

    @abstractmethod
    async def predict_one_step(
        self,
        current_condition: float,
        surface_type: str,
        traffic_level: str,
        climate_impact: str,
        moisture_level: Optional[float] = None,
    ) -> Optional[float]:
        """Condition one year after current_condition, or None on failure."""
        ...


class AnalyticalPredictor(AlternatePredictor):
    """The analytical decay model behind the async contract.

    Moisture, when known, scales the yearly rate by 1 + moisture / 200.
    """

    def __init__(self, model: Optional[DecayModel] = None, use_moisture: bool = True):
        self.model = model or DecayModel()
        self.use_moisture = use_moisture

    async def predict_one_step(
        self,
        current_condition: float,
        surface_type: str,
        traffic_level: str,
        climate_impact: str,
        moisture_level: Optional[float] = None,
    ) -> Optional[float]:
        return self.model.predict(
            current_condition,
            1,
            surface_type,
            traffic_level,
            climate_impact,
            moisture_level if self.use_moisture else None,
        )


def _usable(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value) and 0.0 <= value <= 100.0


async def predict_step_with_fallback(
    predictor: AlternatePredictor,
    fallback: DecayModel,
    condition: float,
    params: DecayParameters,
) -> float:
    """Await one predictor step; use the analytical step when it fails."""
    try:
        value = await predictor.predict_one_step(
            condition,
            params.surface_type,
            params.traffic_level,
            params.climate_impact,
            params.moisture_level,
        )
    except (PredictorError, asyncio.TimeoutError, OSError) as e:
        logger.warning(f"Predictor step failed ({e}); using analytical decay")
        return fallback.step(condition, params)

    if not _usable(value):
        logger.warning(f"Predictor returned unusable value {value!r}; using analytical decay")
        return fallback.step(condition, params)
    return float(value)
