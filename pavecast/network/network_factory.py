"""Network factory: reproducible synthetic segment populations and the default catalog."""

from typing import List

import numpy as np

from pavecast.config.constants import (
    LEVEL_MIX,
    LEVELS,
    MOISTURE_COVERAGE,
    MOISTURE_RANGE,
    NETWORK_SIZE,
    SEGMENT_CONDITION_RANGE,
    SEGMENT_LENGTH_RANGE,
    SURFACE_MIX,
    TREATMENT_CATALOG,
)
from pavecast.config.schema import Segment, TreatmentType


def create_network(n_segments: int = NETWORK_SIZE, seed: int = 42) -> List[Segment]:
    """Create a synthetic road network.

    Surface types follow SURFACE_MIX, traffic and climate follow LEVEL_MIX,
    conditions are integer PCI values, and ~90% of segments carry a moisture
    reading.

    Args:
        n_segments: Number of segments.
        seed: RNG seed for reproducibility.

    Returns:
        Segments with ids "RS-0001", "RS-0002", ...
    """
    rng = np.random.default_rng(seed)

    surfaces = list(SURFACE_MIX)
    surface_p = np.array(list(SURFACE_MIX.values()))
    surface_p = surface_p / surface_p.sum()

    segments = []
    for i in range(1, n_segments + 1):
        condition = int(rng.integers(SEGMENT_CONDITION_RANGE[0], SEGMENT_CONDITION_RANGE[1] + 1))
        length = round(float(rng.uniform(*SEGMENT_LENGTH_RANGE)), 2)
        has_moisture = rng.random() < MOISTURE_COVERAGE
        moisture = round(float(rng.uniform(*MOISTURE_RANGE)), 1) if has_moisture else None

        segments.append(Segment(
            segment_id=f"RS-{i:04d}",
            condition=condition,
            length=length,
            surface_type=str(rng.choice(surfaces, p=surface_p)),
            traffic_level=str(rng.choice(LEVELS, p=LEVEL_MIX)),
            climate_impact=str(rng.choice(LEVELS, p=LEVEL_MIX)),
            moisture_level=moisture,
        ))

    return segments


def default_treatment_catalog() -> List[TreatmentType]:
    """Crack Sealing, Surface Treatment, Mill & Overlay and Reconstruction."""
    return [TreatmentType(**row) for row in TREATMENT_CATALOG]
