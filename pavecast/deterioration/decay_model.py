"""Piecewise-linear pavement deterioration.

modified_rate = base_rate(surface) * traffic_factor * climate_factor

deterioration(age) = modified_rate * age                                   age <= 5
                   = modified_rate * 5 + 0.8 * modified_rate * (age - 5)   age > 5

New or rehabilitated pavement loses condition fastest in its first years, so
the rate drops to 80% after the early period. The result is floored at 0.
"""

from typing import Optional

from pavecast.config.constants import MIN_CONDITION
from pavecast.config.errors import ValidationError
from pavecast.config.schema import DecayParameters, DecayTables, check_condition, check_level


class DecayModel:
    """Analytical condition decay with tables bound at construction."""

    def __init__(self, tables: Optional[DecayTables] = None):
        self.tables = tables or DecayTables()

    def modified_rate(
        self,
        surface_type: str,
        traffic_level: str = "medium",
        climate_impact: str = "medium",
        moisture_level: Optional[float] = None,
    ) -> float:
        """Yearly decay rate after traffic, climate and (optional) moisture modifiers."""
        check_level(traffic_level, "traffic_level")
        check_level(climate_impact, "climate_impact")

        rate = (
            self.tables.base_rate(surface_type)
            * self.tables.traffic_factors[traffic_level]
            * self.tables.climate_factors[climate_impact]
        )
        if moisture_level is not None:
            if not 0.0 <= moisture_level <= 100.0:
                raise ValidationError(f"moisture_level must be in [0, 100], got {moisture_level}")
            rate *= 1.0 + moisture_level / self.tables.moisture_divisor
        return rate

    def deterioration(self, rate: float, age_in_years: float) -> float:
        """Total condition loss accumulated over age_in_years at the given rate."""
        early = self.tables.early_period_years
        if age_in_years <= early:
            return rate * age_in_years
        return rate * early + rate * self.tables.late_rate_fraction * (age_in_years - early)

    def predict(
        self,
        initial_condition: float,
        age_in_years: float,
        surface_type: str,
        traffic_level: str = "medium",
        climate_impact: str = "medium",
        moisture_level: Optional[float] = None,
    ) -> float:
        """Condition after age_in_years of decay from initial_condition.

        Args:
            initial_condition: PCI in [0, 100].
            age_in_years: Elapsed years, >= 0.
            surface_type: Surface name; unknown names use the default rate.
            traffic_level: "low", "medium" or "high".
            climate_impact: "low", "medium" or "high".
            moisture_level: Optional moisture % that accelerates decay.

        Returns:
            Condition in [0, initial_condition].
        """
        check_condition(initial_condition, "initial_condition")
        if age_in_years < 0:
            raise ValidationError(f"age_in_years must be non-negative, got {age_in_years}")

        rate = self.modified_rate(surface_type, traffic_level, climate_impact, moisture_level)
        return max(MIN_CONDITION, initial_condition - self.deterioration(rate, age_in_years))

    def predict_params(self, params: DecayParameters, age_in_years: float) -> float:
        return self.predict(
            params.initial_condition,
            age_in_years,
            params.surface_type,
            params.traffic_level,
            params.climate_impact,
        )

    def step(self, condition: float, params: DecayParameters) -> float:
        """One year of decay from condition.

        params.initial_condition is ignored, and so is moisture: only the
        alternate predictors take it into account.
        """
        return self.predict(
            condition,
            1,
            params.surface_type,
            params.traffic_level,
            params.climate_impact,
        )

