"""Decay tables, category bands, thresholds and scenario definitions."""

# =============================================================================
# Deterioration
# =============================================================================

# Base deterioration rates (condition points per year) by surface type
SURFACE_DECAY_RATES = {
    "Asphalt":   3.0,
    "Concrete":  2.0,
    "Chip Seal": 4.5,
    "Gravel":    6.0,
}
DEFAULT_DECAY_RATE = 3.0  # unknown surface types

LEVELS = ("low", "medium", "high")

TRAFFIC_FACTORS = {
    "low":    0.85,
    "medium": 1.0,
    "high":   1.2,
}

CLIMATE_FACTORS = {
    "low":    0.9,
    "medium": 1.0,
    "high":   1.15,
}

# Piecewise accumulation: full rate for the early period, then a reduced rate
EARLY_PERIOD_YEARS = 5
LATE_RATE_FRACTION = 0.8

# Moisture (0-100 %) scales the modified rate by 1 + moisture / divisor
MOISTURE_RATE_DIVISOR = 200.0

MAX_CONDITION = 100.0
MIN_CONDITION = 0.0

# =============================================================================
# Condition States
# =============================================================================

CONDITION_STATES = ("good", "fair", "poor", "critical")

# Lower bound (inclusive) of each state; anything below "poor" is critical
CONDITION_THRESHOLDS = {
    "good": 80.0,
    "fair": 60.0,
    "poor": 40.0,
}

# =============================================================================
# Budget Categories
# =============================================================================

CATEGORY_ORDER = (
    "preventive_maintenance",
    "minor_rehabilitation",
    "major_rehabilitation",
    "reconstruction",
)

# (category, upper bound on condition improvement, bound is inclusive)
# First matching row wins: <=10, (10, 20], (20, 90), >=90
CATEGORY_BANDS = (
    ("preventive_maintenance", 10.0, True),
    ("minor_rehabilitation",   20.0, True),
    ("major_rehabilitation",   90.0, False),
    ("reconstruction",         float("inf"), True),
)

# Segments above these conditions are never considered for the category
CATEGORY_MAX_CONDITION = {
    "major_rehabilitation": 60.0,
    "reconstruction":       40.0,
}

# =============================================================================
# Optimization Strategies
# =============================================================================

STRATEGIES = ("maximize_impact", "minimize_cost", "maximize_benefit_per_cost")
DEFAULT_STRATEGY = "maximize_benefit_per_cost"

STRATEGY_ALIASES = {
    "impact":  "maximize_impact",
    "cost":    "minimize_cost",
    "benefit": "maximize_benefit_per_cost",
}

# =============================================================================
# Budget Scenarios
# =============================================================================

# name -> budget multiplier, category split, strategy (None = no allocation run)
SCENARIO_DEFINITIONS = (
    {
        "name": "Current",
        "multiplier": 1.0,
        "split": (0.33, 0.26, 0.21, 0.20),
        "strategy": None,
    },
    {
        "name": "Optimized",
        "multiplier": 1.10,
        "split": (0.40, 0.30, 0.20, 0.10),
        "strategy": "maximize_benefit_per_cost",
    },
    {
        "name": "Reduced",
        "multiplier": 0.75,
        "split": (0.20, 0.20, 0.30, 0.30),
        "strategy": "maximize_impact",
    },
)

# =============================================================================
# Treatment Catalog
# =============================================================================

TREATMENT_CATALOG = (
    {
        "name": "Crack Sealing",
        "condition_improvement": 5,
        "cost_per_mile": 3_000,
        "lifespan_extension": 2,
        "applicable_min_condition": 60,
        "applicable_max_condition": 100,
    },
    {
        "name": "Surface Treatment",
        "condition_improvement": 10,
        "cost_per_mile": 30_000,
        "lifespan_extension": 5,
        "applicable_min_condition": 50,
        "applicable_max_condition": 80,
    },
    {
        "name": "Mill & Overlay",
        "condition_improvement": 25,
        "cost_per_mile": 135_000,
        "lifespan_extension": 10,
        "applicable_min_condition": 30,
        "applicable_max_condition": 60,
    },
    {
        "name": "Reconstruction",
        "condition_improvement": 100,
        "cost_per_mile": 500_000,
        "lifespan_extension": 20,
        "applicable_min_condition": 0,
        "applicable_max_condition": 40,
    },
)

# Regular maintenance interval cap (years) for maintenance plan comparison
MAX_REGULAR_INTERVAL_YEARS = 5

# =============================================================================
# Synthetic Network
# =============================================================================

NETWORK_SIZE = 50

SURFACE_MIX = {
    "Asphalt":   0.55,
    "Concrete":  0.20,
    "Chip Seal": 0.15,
    "Gravel":    0.10,
}

SEGMENT_LENGTH_RANGE = (0.2, 5.0)       # miles
SEGMENT_CONDITION_RANGE = (20, 100)     # PCI
LEVEL_MIX = (0.3, 0.5, 0.2)             # low / medium / high
MOISTURE_RANGE = (0.0, 100.0)           # %
MOISTURE_COVERAGE = 0.9                 # fraction of segments with a reading
