"""Shared test fixtures."""

import pytest

from pavecast.budget.allocator import BudgetAllocator
from pavecast.config.schema import DecayParameters, Segment, TreatmentType
from pavecast.deterioration.decay_model import DecayModel
from pavecast.deterioration.projection import ProjectionEngine
from pavecast.network.network_factory import create_network, default_treatment_catalog


@pytest.fixture
def model():
    return DecayModel()


@pytest.fixture
def engine(model):
    return ProjectionEngine(model)


@pytest.fixture
def allocator():
    return BudgetAllocator()


@pytest.fixture
def asphalt_params():
    return DecayParameters(
        initial_condition=100.0,
        surface_type="Asphalt",
        traffic_level="medium",
        climate_impact="medium",
    )


@pytest.fixture
def catalog():
    return default_treatment_catalog()


@pytest.fixture
def reconstruction():
    return TreatmentType(
        name="Reconstruction",
        condition_improvement=100,
        cost_per_mile=500_000,
        lifespan_extension=20,
        applicable_min_condition=0,
        applicable_max_condition=40,
    )


@pytest.fixture
def network():
    return create_network(20, seed=7)


@pytest.fixture
def make_segment():
    def factory(segment_id, condition, length=1.0, surface_type="Asphalt", **kwargs):
        return Segment(
            segment_id=segment_id,
            condition=condition,
            length=length,
            surface_type=surface_type,
            **kwargs,
        )
    return factory
