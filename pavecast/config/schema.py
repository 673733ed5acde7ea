"""Value types and bound configuration tables."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pavecast.config.constants import (
    CATEGORY_BANDS,
    CATEGORY_MAX_CONDITION,
    CATEGORY_ORDER,
    CLIMATE_FACTORS,
    DEFAULT_DECAY_RATE,
    EARLY_PERIOD_YEARS,
    LATE_RATE_FRACTION,
    LEVELS,
    MAX_CONDITION,
    MIN_CONDITION,
    MOISTURE_RATE_DIVISOR,
    SCENARIO_DEFINITIONS,
    SURFACE_DECAY_RATES,
    TRAFFIC_FACTORS,
)
from pavecast.config.errors import ValidationError

SegmentId = Union[int, str]


def _require(ok: bool, message: str) -> None:
    if not ok:
        raise ValidationError(message)


def check_condition(value: float, name: str = "condition") -> None:
    _require(
        value is not None and not math.isnan(value) and MIN_CONDITION <= value <= MAX_CONDITION,
        f"{name} must be in [{MIN_CONDITION:g}, {MAX_CONDITION:g}], got {value}",
    )


def check_level(value: str, name: str) -> None:
    _require(value in LEVELS, f"{name} must be one of {LEVELS}, got {value!r}")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Bound configuration
# =============================================================================


@dataclass(frozen=True)
class DecayTables:
    """Rate and modifier tables bound to a DecayModel at construction."""

    surface_rates: Dict[str, float] = field(default_factory=lambda: dict(SURFACE_DECAY_RATES))
    default_rate: float = DEFAULT_DECAY_RATE
    traffic_factors: Dict[str, float] = field(default_factory=lambda: dict(TRAFFIC_FACTORS))
    climate_factors: Dict[str, float] = field(default_factory=lambda: dict(CLIMATE_FACTORS))
    early_period_years: float = EARLY_PERIOD_YEARS
    late_rate_fraction: float = LATE_RATE_FRACTION
    moisture_divisor: float = MOISTURE_RATE_DIVISOR

    def __post_init__(self):
        _require(self.default_rate >= 0, "default_rate must be non-negative")
        _require(
            all(rate >= 0 for rate in self.surface_rates.values()),
            "surface decay rates must be non-negative",
        )
        for name, table in (("traffic_factors", self.traffic_factors),
                            ("climate_factors", self.climate_factors)):
            _require(set(table) == set(LEVELS), f"{name} must define exactly {LEVELS}")
            _require(all(v >= 0 for v in table.values()), f"{name} must be non-negative")
        _require(self.early_period_years >= 0, "early_period_years must be non-negative")
        _require(self.late_rate_fraction >= 0, "late_rate_fraction must be non-negative")
        _require(self.moisture_divisor > 0, "moisture_divisor must be positive")

    def base_rate(self, surface_type: str) -> float:
        return self.surface_rates.get(surface_type, self.default_rate)


@dataclass(frozen=True)
class AllocationPolicy:
    """Category ordering, improvement bands and eligibility ceilings."""

    category_order: Tuple[str, ...] = CATEGORY_ORDER
    category_bands: Tuple[Tuple[str, float, bool], ...] = CATEGORY_BANDS
    category_max_condition: Dict[str, float] = field(
        default_factory=lambda: dict(CATEGORY_MAX_CONDITION)
    )

    def __post_init__(self):
        banded = [name for name, _, _ in self.category_bands]
        _require(
            set(banded) == set(self.category_order),
            f"category bands {banded} do not cover categories {self.category_order}",
        )
        _require(
            set(self.category_max_condition) <= set(self.category_order),
            "eligibility ceilings reference unknown categories",
        )

    def category_for(self, improvement: float) -> str:
        """Classify a condition improvement into its spend category."""
        for name, bound, inclusive in self.category_bands:
            if improvement < bound or (inclusive and improvement == bound):
                return name
        # Bands are expected to end at +inf; treat overflow as the last band
        return self.category_bands[-1][0]


@dataclass(frozen=True)
class ScenarioDefinition:
    name: str
    multiplier: float
    split: Tuple[float, ...]
    strategy: Optional[str] = None   # None -> report current network as-is

    def __post_init__(self):
        _require(self.multiplier >= 0, "scenario multiplier must be non-negative")
        _require(all(s >= 0 for s in self.split), "scenario split must be non-negative")
        _require(abs(sum(self.split) - 1.0) < 1e-6, f"scenario split must sum to 1, got {sum(self.split)}")


def default_scenario_definitions() -> List[ScenarioDefinition]:
    return [
        ScenarioDefinition(
            name=d["name"],
            multiplier=d["multiplier"],
            split=tuple(d["split"]),
            strategy=d["strategy"],
        )
        for d in SCENARIO_DEFINITIONS
    ]


# =============================================================================
# Inventory records
# =============================================================================


@dataclass(frozen=True)
class Segment:
    """A road segment as read from the asset inventory."""

    segment_id: SegmentId
    condition: float          # PCI 0-100
    length: float             # miles
    surface_type: str         # "Asphalt", "Concrete", "Chip Seal", "Gravel", ...
    traffic_level: str = "medium"
    climate_impact: str = "medium"
    moisture_level: Optional[float] = None   # %

    def __post_init__(self):
        check_condition(self.condition)
        _require(self.length > 0, f"segment {self.segment_id}: length must be positive, got {self.length}")
        check_level(self.traffic_level, "traffic_level")
        check_level(self.climate_impact, "climate_impact")
        if self.moisture_level is not None:
            _require(
                0.0 <= self.moisture_level <= 100.0,
                f"segment {self.segment_id}: moisture_level must be in [0, 100]",
            )

    def decay_parameters(
        self,
        traffic_level: Optional[str] = None,
        climate_impact: Optional[str] = None,
    ) -> DecayParameters:
        return DecayParameters(
            initial_condition=self.condition,
            surface_type=self.surface_type,
            traffic_level=traffic_level or self.traffic_level,
            climate_impact=climate_impact or self.climate_impact,
            moisture_level=self.moisture_level,
        )


@dataclass(frozen=True)
class MaintenanceImpact:
    condition_improvement: float
    lifespan_extension: float = 0.0

    def __post_init__(self):
        _require(self.condition_improvement >= 0, "condition_improvement must be non-negative")
        _require(self.lifespan_extension >= 0, "lifespan_extension must be non-negative")


@dataclass(frozen=True)
class TreatmentType:
    """A maintenance intervention from the treatment catalog."""

    name: str
    condition_improvement: float
    cost_per_mile: float
    lifespan_extension: float = 0.0
    applicable_min_condition: Optional[float] = None
    applicable_max_condition: Optional[float] = None

    def __post_init__(self):
        _require(self.condition_improvement >= 0, f"{self.name}: condition_improvement must be non-negative")
        _require(self.cost_per_mile >= 0, f"{self.name}: cost_per_mile must be non-negative")
        _require(self.lifespan_extension >= 0, f"{self.name}: lifespan_extension must be non-negative")
        if self.applicable_min_condition is not None and self.applicable_max_condition is not None:
            _require(
                self.applicable_min_condition <= self.applicable_max_condition,
                f"{self.name}: applicable range min > max",
            )

    @property
    def impact(self) -> MaintenanceImpact:
        return MaintenanceImpact(self.condition_improvement, self.lifespan_extension)

    def applies_to(self, condition: float) -> bool:
        if self.applicable_min_condition is not None and condition < self.applicable_min_condition:
            return False
        if self.applicable_max_condition is not None and condition > self.applicable_max_condition:
            return False
        return True


# =============================================================================
# Projection records
# =============================================================================


@dataclass(frozen=True)
class DecayParameters:
    """Per-segment inputs to the one-step decay contract."""

    initial_condition: float
    surface_type: str
    traffic_level: str = "medium"
    climate_impact: str = "medium"
    moisture_level: Optional[float] = None

    def __post_init__(self):
        check_condition(self.initial_condition, "initial_condition")
        check_level(self.traffic_level, "traffic_level")
        check_level(self.climate_impact, "climate_impact")


@dataclass(frozen=True)
class ScheduleEntry:
    year: int
    impact: MaintenanceImpact

    def __post_init__(self):
        _require(self.year >= 0, f"schedule year must be non-negative, got {self.year}")


@dataclass(frozen=True)
class ProjectionPoint:
    year: int
    condition: float
    after_maintenance: bool = False


@dataclass(frozen=True)
class ForecastPoint:
    year: int        # calendar year, or offset when the forecast is unanchored
    good: int        # percentages
    fair: int
    poor: int
    critical: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "year": self.year,
            "good": self.good,
            "fair": self.fair,
            "poor": self.poor,
            "critical": self.critical,
        }


# =============================================================================
# Allocation records
# =============================================================================


@dataclass(frozen=True)
class BudgetAllocation:
    """Total budget and its split across spend categories."""

    total_budget: float
    categories: Dict[str, float]

    def __post_init__(self):
        _require(
            math.isfinite(self.total_budget) and self.total_budget >= 0,
            f"total_budget must be finite and non-negative, got {self.total_budget}",
        )
        for name, amount in self.categories.items():
            _require(math.isfinite(amount), f"budget for {name} must be finite, got {amount}")

    @classmethod
    def from_split(
        cls,
        total_budget: float,
        split: Sequence[float],
        category_order: Sequence[str] = CATEGORY_ORDER,
    ) -> BudgetAllocation:
        _require(
            len(split) == len(category_order),
            f"split has {len(split)} shares for {len(category_order)} categories",
        )
        return cls(
            total_budget=total_budget,
            categories={name: total_budget * share for name, share in zip(category_order, split)},
        )

    def amount(self, category: str) -> float:
        return self.categories.get(category, 0.0)


@dataclass
class CandidateProject:
    """A (segment, treatment) pairing evaluated during one allocation run."""

    segment_id: SegmentId
    treatment_name: str
    category: str
    condition: float            # working condition when evaluated
    condition_improvement: float
    cost: float
    benefit: float              # sort key for the active strategy


@dataclass
class AllocationResult:
    projected_condition: int
    segments_improved: int
    total_cost: float
    segments_unaddressed: int
    selections: List[CandidateProject] = field(default_factory=list)
    category_spend: Dict[str, float] = field(default_factory=dict)
    final_conditions: Dict[SegmentId, float] = field(default_factory=dict)


@dataclass
class Scenario:
    name: str
    allocation: BudgetAllocation
    projected_pci: int
    strategy: Optional[str] = None

    @property
    def total_budget(self) -> float:
        return self.allocation.total_budget

    def amount(self, category: str) -> float:
        return self.allocation.amount(category)

