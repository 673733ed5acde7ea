"""Greedy category-by-category budget allocation.

Categories are processed in a fixed order (preventive -> minor -> major ->
reconstruction), each against its own budget. Within a category every
(segment, treatment) pair that passes the eligibility filters becomes a
candidate project; candidates are sorted by the strategy key and walked
greedily, selecting at most one treatment per segment while the category
budget lasts.

Ordering contract: candidates are generated in segment input order, then
treatment input order, and sorted with a stable sort. Ties therefore resolve
to input order, which makes a run reproducible for a fixed input ordering.

Selected treatments update a working copy of segment conditions, so later
categories see the improved condition. A segment may be selected once per
category, and each selection counts towards segments_improved even when the
same segment was already improved in an earlier category.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Union

from pavecast.config.constants import DEFAULT_STRATEGY, STRATEGIES, STRATEGY_ALIASES
from pavecast.config.errors import ValidationError
from pavecast.config.schema import (
    AllocationPolicy,
    AllocationResult,
    BudgetAllocation,
    CandidateProject,
    Segment,
    SegmentId,
    TreatmentType,
    round_half_up,
)
from pavecast.deterioration.maintenance import apply_maintenance

logger = logging.getLogger(__name__)


def normalize_strategy(strategy: Optional[str]) -> str:
    """Resolve a strategy name or short alias ("impact", "cost", "benefit")."""
    if strategy is None:
        return DEFAULT_STRATEGY
    name = STRATEGY_ALIASES.get(strategy, strategy)
    if name not in STRATEGIES:
        raise ValidationError(f"Unknown optimization strategy: {strategy!r}")
    return name


def _benefit_per_cost(improvement: float, cost: float) -> float:
    if cost > 0:
        return improvement / cost
    # Free treatments rank first unless they do nothing
    return float("inf") if improvement > 0 else 0.0


def _sort_key(strategy: str, improvement: float, cost: float) -> float:
    if strategy == "maximize_impact":
        return improvement
    elif strategy == "minimize_cost":
        return cost
    return _benefit_per_cost(improvement, cost)


class BudgetAllocator:
    """Allocates categorized budgets across a segment population."""

    def __init__(self, policy: Optional[AllocationPolicy] = None):
        self.policy = policy or AllocationPolicy()

    def group_treatments(
        self, treatment_types: Sequence[TreatmentType],
    ) -> Dict[str, List[TreatmentType]]:
        """Treatments per category by condition-improvement band, input order kept."""
        groups: Dict[str, List[TreatmentType]] = {name: [] for name in self.policy.category_order}
        for treatment in treatment_types:
            groups[self.policy.category_for(treatment.condition_improvement)].append(treatment)
        return groups

    def is_eligible(self, category: str, condition: float) -> bool:
        """Category-level eligibility ceiling (e.g. reconstruction only at <= 40)."""
        ceiling = self.policy.category_max_condition.get(category)
        return ceiling is None or condition <= ceiling

    def candidates(
        self,
        category: str,
        segments: Sequence[Segment],
        treatments: Sequence[TreatmentType],
        conditions: Mapping[SegmentId, float],
        strategy: str,
    ) -> List[CandidateProject]:
        """Eligible (segment, treatment) pairs for one category, sorted by strategy."""
        projects = []
        for segment in segments:
            condition = conditions[segment.segment_id]
            if not self.is_eligible(category, condition):
                continue
            for treatment in treatments:
                if not treatment.applies_to(condition):
                    continue
                cost = treatment.cost_per_mile * segment.length
                projects.append(CandidateProject(
                    segment_id=segment.segment_id,
                    treatment_name=treatment.name,
                    category=category,
                    condition=condition,
                    condition_improvement=treatment.condition_improvement,
                    cost=cost,
                    benefit=_sort_key(strategy, treatment.condition_improvement, cost),
                ))

        # sorted() is stable for reverse=True as well: ties keep input order
        return sorted(
            projects,
            key=lambda p: p.benefit,
            reverse=(strategy != "minimize_cost"),
        )

    def allocate(
        self,
        segments: Sequence[Segment],
        treatment_types: Sequence[TreatmentType],
        category_budgets: Union[BudgetAllocation, Mapping[str, float]],
        strategy: Optional[str] = DEFAULT_STRATEGY,
    ) -> AllocationResult:
        """Select treatments per category and report the projected network.

        Args:
            segments: Network population; never mutated.
            treatment_types: Treatment catalog.
            category_budgets: BudgetAllocation or mapping of category -> amount.
                Missing categories get no budget; zero or negative amounts skip
                the category.
            strategy: "maximize_impact", "minimize_cost" or
                "maximize_benefit_per_cost" (or a short alias).

        Returns:
            AllocationResult. projected_condition is the rounded mean of the
            final working conditions over all segments (0 for an empty network).
        """
        strategy = normalize_strategy(strategy)
        budgets = (
            category_budgets.categories
            if isinstance(category_budgets, BudgetAllocation)
            else dict(category_budgets)
        )
        unknown = set(budgets) - set(self.policy.category_order)
        if unknown:
            raise ValidationError(f"Unknown budget categories: {sorted(unknown)}")
        for name, amount in budgets.items():
            if not math.isfinite(amount):
                raise ValidationError(f"Budget for {name} must be finite, got {amount}")

        conditions: Dict[SegmentId, float] = {s.segment_id: s.condition for s in segments}
        if len(conditions) != len(segments):
            raise ValidationError("Segment ids must be unique within an allocation run")
        groups = self.group_treatments(treatment_types)

        selections: List[CandidateProject] = []
        category_spend: Dict[str, float] = {name: 0.0 for name in self.policy.category_order}
        total_cost = 0.0

        for category in self.policy.category_order:
            budget = budgets.get(category, 0.0)
            treatments = groups[category]
            if budget <= 0 or not treatments:
                continue

            remaining = budget
            selected_ids = set()
            for project in self.candidates(category, segments, treatments, conditions, strategy):
                if project.segment_id in selected_ids or project.cost > remaining:
                    continue
                conditions[project.segment_id] = apply_maintenance(
                    conditions[project.segment_id], project.condition_improvement,
                )
                remaining -= project.cost
                total_cost += project.cost
                category_spend[category] += project.cost
                selected_ids.add(project.segment_id)
                selections.append(project)

            logger.debug(
                f"{category}: {len(selected_ids)} selected, "
                f"spent {budget - remaining:,.2f} of {budget:,.2f}"
            )

        n_segments = len(segments)
        mean_condition = sum(conditions.values()) / n_segments if n_segments else 0.0

        return AllocationResult(
            projected_condition=round_half_up(mean_condition),
            segments_improved=len(selections),
            total_cost=total_cost,
            # Negative when segments are selected in several categories
            segments_unaddressed=n_segments - len(selections),
            selections=selections,
            category_spend=category_spend,
            final_conditions=conditions,
        )


def compare_strategies(
    segments: Sequence[Segment],
    treatment_types: Sequence[TreatmentType],
    category_budgets: Union[BudgetAllocation, Mapping[str, float]],
    allocator: Optional[BudgetAllocator] = None,
) -> Dict[str, AllocationResult]:
    """Run the same allocation under every strategy."""
    allocator = allocator or BudgetAllocator()
    return {
        strategy: allocator.allocate(segments, treatment_types, category_budgets, strategy)
        for strategy in STRATEGIES
    }
