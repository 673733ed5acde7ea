"""Tests for greedy category budget allocation."""

import math

import pytest

from pavecast.budget.allocator import BudgetAllocator, compare_strategies, normalize_strategy
from pavecast.config.constants import STRATEGIES
from pavecast.config.errors import ValidationError
from pavecast.config.schema import AllocationPolicy, BudgetAllocation, TreatmentType


def ids(result):
    return [p.segment_id for p in result.selections]


class TestCategories:
    def test_group_default_catalog(self, allocator, catalog):
        groups = allocator.group_treatments(catalog)
        assert [t.name for t in groups["preventive_maintenance"]] == ["Crack Sealing", "Surface Treatment"]
        assert groups["minor_rehabilitation"] == []
        assert [t.name for t in groups["major_rehabilitation"]] == ["Mill & Overlay"]
        assert [t.name for t in groups["reconstruction"]] == ["Reconstruction"]

    @pytest.mark.parametrize("improvement,category", [
        (0, "preventive_maintenance"),
        (10, "preventive_maintenance"),
        (10.5, "minor_rehabilitation"),
        (20, "minor_rehabilitation"),
        (20.5, "major_rehabilitation"),
        (89.9, "major_rehabilitation"),
        (90, "reconstruction"),
        (100, "reconstruction"),
    ])
    def test_band_boundaries(self, allocator, improvement, category):
        assert allocator.policy.category_for(improvement) == category

    def test_eligibility_ceilings(self, allocator):
        assert allocator.is_eligible("reconstruction", 40)
        assert not allocator.is_eligible("reconstruction", 40.5)
        assert allocator.is_eligible("major_rehabilitation", 60)
        assert not allocator.is_eligible("major_rehabilitation", 61)
        assert allocator.is_eligible("preventive_maintenance", 100)


class TestStrategies:
    @pytest.mark.parametrize("alias,name", [
        ("impact", "maximize_impact"),
        ("cost", "minimize_cost"),
        ("benefit", "maximize_benefit_per_cost"),
        ("minimize_cost", "minimize_cost"),
        (None, "maximize_benefit_per_cost"),
    ])
    def test_aliases(self, alias, name):
        assert normalize_strategy(alias) == name

    def test_unknown_strategy(self, allocator, make_segment, catalog):
        with pytest.raises(ValidationError):
            allocator.allocate([make_segment("A", 30)], catalog, {"reconstruction": 1e6}, "greedy")

    def test_impact_vs_benefit(self, allocator, make_segment):
        cheap = TreatmentType("Thin Overlay", condition_improvement=15, cost_per_mile=10_000)
        deep = TreatmentType("Thick Overlay", condition_improvement=20, cost_per_mile=40_000)
        segments = [make_segment("A", 50)]
        budgets = {"minor_rehabilitation": 100_000}

        impact = allocator.allocate(segments, [cheap, deep], budgets, "maximize_impact")
        benefit = allocator.allocate(segments, [cheap, deep], budgets, "maximize_benefit_per_cost")
        cost = allocator.allocate(segments, [cheap, deep], budgets, "minimize_cost")

        assert [p.treatment_name for p in impact.selections] == ["Thick Overlay"]
        assert impact.final_conditions["A"] == 70
        assert [p.treatment_name for p in benefit.selections] == ["Thin Overlay"]
        assert benefit.final_conditions["A"] == 65
        assert [p.treatment_name for p in cost.selections] == ["Thin Overlay"]

    def test_minimize_cost_ascending(self, allocator, make_segment, reconstruction):
        segments = [make_segment("A", 30, length=2), make_segment("B", 30, length=1)]
        budgets = {"reconstruction": 2_000_000}
        assert ids(allocator.allocate(segments, [reconstruction], budgets, "minimize_cost")) == ["B", "A"]
        assert ids(allocator.allocate(segments, [reconstruction], budgets, "maximize_impact")) == ["A", "B"]

    def test_compare_strategies(self, make_segment, catalog):
        results = compare_strategies([make_segment("A", 30)], catalog, {"reconstruction": 1e6})
        assert set(results) == set(STRATEGIES)
        assert all(r.segments_improved == 1 for r in results.values())


class TestAllocate:
    def test_reconstruction_example(self, allocator, make_segment, reconstruction):
        """Only the segment at or below 40 qualifies for reconstruction."""
        segments = [make_segment("A", 30), make_segment("B", 70)]
        result = allocator.allocate(segments, [reconstruction], {"reconstruction": 500_000})

        assert ids(result) == ["A"]
        assert result.segments_improved == 1
        assert result.segments_unaddressed == 1
        assert result.total_cost == 500_000
        assert result.final_conditions == {"A": 100, "B": 70}
        assert result.projected_condition == 85
        assert result.category_spend["reconstruction"] == 500_000
        assert result.category_spend["preventive_maintenance"] == 0.0

    def test_budget_allocation_input(self, allocator, make_segment, reconstruction):
        budgets = BudgetAllocation.from_split(500_000, (0.0, 0.0, 0.0, 1.0))
        result = allocator.allocate([make_segment("A", 30)], [reconstruction], budgets)
        assert result.segments_improved == 1

    def test_zero_budget_selects_nothing(self, allocator, make_segment, catalog):
        segments = [make_segment("A", 80), make_segment("B", 81)]
        result = allocator.allocate(segments, catalog, {c: 0 for c in allocator.policy.category_order})
        assert result.selections == []
        assert result.total_cost == 0
        assert result.segments_unaddressed == 2
        assert result.projected_condition == 81   # 80.5 rounds up

    def test_negative_budget_skips_category(self, allocator, make_segment, reconstruction):
        result = allocator.allocate([make_segment("A", 30)], [reconstruction], {"reconstruction": -10})
        assert result.selections == []

    def test_empty_network(self, allocator, catalog):
        result = allocator.allocate([], catalog, {"reconstruction": 1e6})
        assert result.projected_condition == 0
        assert result.segments_improved == 0
        assert result.segments_unaddressed == 0

    def test_ties_resolve_to_input_order(self, allocator, make_segment, reconstruction):
        segments = [make_segment("A", 30), make_segment("B", 30)]
        budgets = {"reconstruction": 500_000}
        assert ids(allocator.allocate(segments, [reconstruction], budgets)) == ["A"]
        assert ids(allocator.allocate(segments[::-1], [reconstruction], budgets)) == ["B"]

    def test_unaffordable_candidate_skipped(self, allocator, make_segment, reconstruction):
        segments = [make_segment("A", 30, length=2), make_segment("B", 30, length=1)]
        result = allocator.allocate(
            segments, [reconstruction], {"reconstruction": 700_000}, "maximize_impact",
        )
        assert ids(result) == ["B"]
        assert result.total_cost == 500_000

    def test_later_categories_see_improved_condition(self, allocator, make_segment, catalog):
        """Mill & Overlay lifts 35 to 60, which is above the reconstruction ceiling."""
        result = allocator.allocate(
            [make_segment("A", 35)], catalog,
            {"major_rehabilitation": 1e6, "reconstruction": 1e6},
        )
        assert [p.treatment_name for p in result.selections] == ["Mill & Overlay"]
        assert result.final_conditions["A"] == 60
        assert result.total_cost == 135_000

    def test_applicable_range_uses_working_condition(self, allocator, make_segment, catalog):
        thin = TreatmentType("Thin Overlay", 15, 1_000, applicable_max_condition=60)
        segments = [make_segment("A", 55)]

        both = allocator.allocate(
            segments, catalog + [thin],
            {"preventive_maintenance": 1e6, "minor_rehabilitation": 1e6},
        )
        # Surface Treatment takes 55 to 65, out of range for Thin Overlay
        assert [p.treatment_name for p in both.selections] == ["Surface Treatment"]

        minor_only = allocator.allocate(segments, catalog + [thin], {"minor_rehabilitation": 1e6})
        assert minor_only.final_conditions["A"] == 70

    def test_segment_counted_once_per_category(self, allocator, make_segment):
        seal = TreatmentType("Seal", 5, 1_000)
        patch = TreatmentType("Patch", 15, 1_000)
        result = allocator.allocate(
            [make_segment("A", 50)], [seal, patch],
            {"preventive_maintenance": 10_000, "minor_rehabilitation": 10_000},
        )
        assert result.final_conditions["A"] == 70
        assert result.segments_improved == 2
        assert result.segments_unaddressed == -1

    def test_major_ceiling(self, allocator, make_segment):
        overlay = TreatmentType("Overlay", 25, 1_000)
        result = allocator.allocate(
            [make_segment("A", 65), make_segment("B", 60)], [overlay],
            {"major_rehabilitation": 1e6},
        )
        assert ids(result) == ["B"]

    def test_free_treatment_ranks_first(self, allocator, make_segment, catalog):
        sweep = TreatmentType("Sweep", 5, 0)
        result = allocator.allocate(
            [make_segment("A", 70)], [sweep] + catalog, {"preventive_maintenance": 1},
        )
        assert [p.treatment_name for p in result.selections] == ["Sweep"]
        assert result.selections[0].benefit == float("inf")
        assert result.total_cost == 0

    def test_custom_policy(self, make_segment):
        full_depth = TreatmentType("Full Depth", 100, 1_000)
        segments = [make_segment("A", 70)]
        budgets = {"reconstruction": 1e6}

        assert BudgetAllocator().allocate(segments, [full_depth], budgets).selections == []
        relaxed = BudgetAllocator(AllocationPolicy(category_max_condition={}))
        assert relaxed.allocate(segments, [full_depth], budgets).final_conditions["A"] == 100

    def test_inputs_untouched(self, allocator, network, catalog):
        before = [s.condition for s in network]
        allocator.allocate(network, catalog, {c: 1e6 for c in allocator.policy.category_order})
        assert [s.condition for s in network] == before

    def test_unknown_category(self, allocator, make_segment, catalog):
        with pytest.raises(ValidationError):
            allocator.allocate([make_segment("A", 30)], catalog, {"resurfacing": 1e6})

    @pytest.mark.parametrize("amount", [math.nan, math.inf])
    def test_non_finite_budget_rejected(self, allocator, make_segment, catalog, amount):
        segments = [make_segment("A", 30), make_segment("B", 35)]
        with pytest.raises(ValidationError):
            allocator.allocate(segments, catalog, {"reconstruction": amount})

    def test_non_finite_budget_allocation_rejected(self):
        with pytest.raises(ValidationError):
            BudgetAllocation(total_budget=1e6, categories={"reconstruction": math.nan})
        with pytest.raises(ValidationError):
            BudgetAllocation.from_split(math.nan, (0.25, 0.25, 0.25, 0.25))

    def test_duplicate_segment_ids(self, allocator, make_segment, catalog):
        with pytest.raises(ValidationError):
            allocator.allocate([make_segment("A", 30), make_segment("A", 50)], catalog, {})
