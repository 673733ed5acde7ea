"""Named budget scenarios (Current / Optimized / Reduced)."""

import logging
import math
from typing import List, Optional, Sequence

from pavecast.budget.allocator import BudgetAllocator
from pavecast.config.errors import ValidationError
from pavecast.config.schema import (
    BudgetAllocation,
    Scenario,
    ScenarioDefinition,
    Segment,
    TreatmentType,
    default_scenario_definitions,
    round_half_up,
)

logger = logging.getLogger(__name__)


def network_mean_condition(segments: Sequence[Segment]) -> float:
    """Mean PCI of the network as-is (0 when empty)."""
    if not segments:
        return 0.0
    return sum(s.condition for s in segments) / len(segments)


class ScenarioGenerator:
    """Scales the current budget, splits it, and allocates per scenario.

    A definition without a strategy reports the current network mean instead
    of running the allocator.
    """

    def __init__(
        self,
        allocator: Optional[BudgetAllocator] = None,
        definitions: Optional[Sequence[ScenarioDefinition]] = None,
    ):
        self.allocator = allocator or BudgetAllocator()
        self.definitions = list(definitions) if definitions is not None else default_scenario_definitions()

    def generate_scenarios(
        self,
        current_budget: float,
        segments: Sequence[Segment],
        treatment_types: Sequence[TreatmentType],
    ) -> List[Scenario]:
        if not math.isfinite(current_budget) or current_budget < 0:
            raise ValidationError(f"current_budget must be finite and non-negative, got {current_budget}")

        category_order = self.allocator.policy.category_order
        current_pci = round_half_up(network_mean_condition(segments))

        scenarios = []
        for definition in self.definitions:
            allocation = BudgetAllocation.from_split(
                current_budget * definition.multiplier, definition.split, category_order,
            )
            if definition.strategy is None:
                pci = current_pci
            else:
                result = self.allocator.allocate(
                    segments, treatment_types, allocation, definition.strategy,
                )
                pci = result.projected_condition

            logger.debug(
                f"Scenario {definition.name}: budget {allocation.total_budget:,.2f}, PCI {pci}"
            )
            scenarios.append(Scenario(
                name=definition.name,
                allocation=allocation,
                projected_pci=pci,
                strategy=definition.strategy,
            ))
        return scenarios


def generate_scenarios(
    current_budget: float,
    segments: Sequence[Segment],
    treatment_types: Sequence[TreatmentType],
) -> List[Scenario]:
    """Current, Optimized and Reduced scenarios with the default definitions."""
    return ScenarioGenerator().generate_scenarios(current_budget, segments, treatment_types)
