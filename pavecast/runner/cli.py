"""Command-line interface for the projection and allocation engine."""

import logging

import click

from pavecast.budget.allocator import BudgetAllocator, compare_strategies
from pavecast.budget.scenarios import ScenarioGenerator
from pavecast.config.constants import CATEGORY_ORDER, LEVELS, NETWORK_SIZE, STRATEGIES
from pavecast.config.errors import ValidationError
from pavecast.config.schema import DecayParameters
from pavecast.deterioration.projection import ProjectionEngine
from pavecast.network.distribution import DistributionForecaster
from pavecast.network.network_factory import create_network, default_treatment_catalog
from pavecast.reporting.tables import (
    allocation_summary,
    forecast_frame,
    maintenance_comparison_frame,
    projection_frame,
    scenario_frame,
    selection_frame,
)

logger = logging.getLogger(__name__)

network_options = [
    click.option("--segments", default=NETWORK_SIZE, help="Number of synthetic segments."),
    click.option("--seed", default=42, help="Network RNG seed."),
]


def with_network(func):
    for option in reversed(network_options):
        func = option(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def main(verbose):
    """Pavement deterioration projection and budget allocation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--condition", default=100.0, help="Initial condition (PCI).")
@click.option("--surface", default="Asphalt", help="Surface type.")
@click.option("--traffic", type=click.Choice(LEVELS), default="medium")
@click.option("--climate", type=click.Choice(LEVELS), default="medium")
@click.option("--years", default=20, help="Projection horizon in years.")
@click.option("--treatment", default=None, help="Catalog treatment to compare maintenance plans with.")
@click.option("--maintenance-year", default=5, help="Year of the single treatment.")
def project(condition, surface, traffic, climate, years, treatment, maintenance_year):
    """Project one segment's condition, optionally comparing maintenance plans."""
    try:
        params = DecayParameters(condition, surface, traffic, climate)
        engine = ProjectionEngine()

        if treatment is None:
            click.echo(projection_frame(engine.project(params, years)).to_string(index=False))
            return

        catalog = {t.name: t for t in default_treatment_catalog()}
        if treatment not in catalog:
            raise click.BadParameter(f"choose from {sorted(catalog)}", param_hint="--treatment")
        rows = engine.compare_maintenance_plans(params, years, catalog[treatment], maintenance_year)
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(maintenance_comparison_frame(rows).to_string(index=False))


@main.command()
@with_network
@click.option("--years", default=10, help="Forecast horizon in years.")
@click.option("--start-year", default=None, type=int, help="Label for year 0 (default: this year).")
@click.option("--workers", default=1, help="Number of parallel workers.")
@click.option("--segment-modifiers", is_flag=True, help="Use per-segment traffic and climate.")
def forecast(segments, seed, years, start_year, workers, segment_modifiers):
    """Forecast the network condition distribution."""
    network = create_network(segments, seed=seed)
    logger.info(f"Forecasting {len(network)} segments over {years} years...")
    try:
        points = DistributionForecaster(n_workers=workers).forecast(
            network, years, start_year=start_year, use_segment_modifiers=segment_modifiers,
        )
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(forecast_frame(points).to_string(index=False))


@main.command()
@with_network
@click.option("--preventive", default=250_000.0, help="Preventive maintenance budget.")
@click.option("--minor", default=200_000.0, help="Minor rehabilitation budget.")
@click.option("--major", default=300_000.0, help="Major rehabilitation budget.")
@click.option("--reconstruction", default=500_000.0, help="Reconstruction budget.")
@click.option("--strategy", type=click.Choice([*STRATEGIES, "all"]), default="maximize_benefit_per_cost")
@click.option("--details", is_flag=True, help="List selected projects.")
def allocate(segments, seed, preventive, minor, major, reconstruction, strategy, details):
    """Allocate category budgets across the network."""
    network = create_network(segments, seed=seed)
    catalog = default_treatment_catalog()
    budgets = dict(zip(CATEGORY_ORDER, (preventive, minor, major, reconstruction)))

    try:
        if strategy == "all":
            results = compare_strategies(network, catalog, budgets)
        else:
            results = {strategy: BudgetAllocator().allocate(network, catalog, budgets, strategy)}
    except ValidationError as e:
        raise click.ClickException(str(e))

    click.echo(allocation_summary(results).to_string(index=False))
    if details:
        for label, result in results.items():
            click.echo(f"\n{label}")
            click.echo(selection_frame(result).to_string(index=False))


@main.command()
@with_network
@click.option("--budget", default=1_000_000.0, help="Current total budget.")
def scenarios(segments, seed, budget):
    """Compare the Current, Optimized and Reduced budget scenarios."""
    network = create_network(segments, seed=seed)
    try:
        result = ScenarioGenerator().generate_scenarios(budget, network, default_treatment_catalog())
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(scenario_frame(result).to_string(index=False))


if __name__ == "__main__":
    main()
