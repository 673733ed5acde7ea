"""Bounded condition restoration from a maintenance treatment."""

from pavecast.config.constants import MAX_CONDITION
from pavecast.config.errors import ValidationError
from pavecast.config.schema import MaintenanceImpact


def apply_maintenance(current_condition: float, improvement: float) -> float:
    """Condition after a treatment adding `improvement` points, capped at 100."""
    if improvement < 0:
        raise ValidationError(f"improvement must be non-negative, got {improvement}")
    return min(MAX_CONDITION, current_condition + improvement)


def apply_impact(current_condition: float, impact: MaintenanceImpact) -> float:
    return apply_maintenance(current_condition, impact.condition_improvement)
