"""Command-line interface for the truck telemetry simulator."""

import logging
import sys
from pathlib import Path

import click

from truckmon.config.constants import DEPLOYMENT_PROFILES, TIRE_POSITIONS
from truckmon.config.schema import SimulationConfig, severity_counts
from truckmon.simulation.scheduler import ManualClock, SimulationScheduler
from truckmon.simulation.session import TruckSession
from truckmon.storage.telemetry_writer import TelemetryLogWriter
from truckmon.validation.range_checks import validate_telemetry_dir
from truckmon.web.state_server import run_server


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main():
    """Smart truck telemetry simulation and scoring engine."""


@main.command()
@click.option("--ticks", default=600, help="Number of one-second simulation ticks.")
@click.option("--profile", type=click.Choice(sorted(DEPLOYMENT_PROFILES)), default="dashboard",
              help="Session start defaults.")
@click.option("--engine/--no-engine", default=True, help="Start with the engine running.")
@click.option("--speed", default=60.0, help="Speed setpoint (km/h).")
@click.option("--load", default=None, type=float, help="Load setpoint (tons); profile default if omitted.")
@click.option("--rain/--no-rain", default=False, help="Simulate rain.")
@click.option("--fuel", default=None, type=float, help="Initial fuel level (L); profile default if omitted.")
@click.option("--tire", "tires", multiple=True, type=(click.Choice(TIRE_POSITIONS), float),
              help="Override one wheel, e.g. --tire FL 28.")
@click.option("--seed", default=42, help="RNG seed for temperature and trend jitter.")
@click.option("--truck-id", default=1, help="Truck identifier used in the output path.")
@click.option("--output-dir", default="output/", help="Output directory.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def simulate(ticks, profile, engine, speed, load, rain, fuel, tires, seed, truck_id,
             output_dir, verbose):
    """Run an offline session on a simulated clock and write its telemetry log."""
    _configure_logging(verbose)
    logger = logging.getLogger(__name__)

    config = SimulationConfig(profile=profile, seed=seed)
    clock = ManualClock()
    session = TruckSession(config, scheduler=SimulationScheduler(clock), truck_id=truck_id)

    changes = {"engine_on": engine, "speed_kmh": speed, "rain_active": rain}
    if load is not None:
        changes["load_tons"] = load
    if fuel is not None:
        changes["fuel_level"] = fuel
    session.update(**changes)
    for position, pressure in tires:
        session.set_tire_pressure(position, pressure)
    # Setup changes are not fuel readings
    session.fuel_detector.reset()

    logger.info(f"Simulating truck {truck_id:03d} for {ticks} ticks (seed={seed})...")
    session.start()
    session.run_for(ticks * config.tick_seconds)

    state = session.state
    counts = severity_counts(session.alerts)
    logger.info(
        f"Final state: engine={'on' if state.engine_on else 'off'}, speed={state.speed_kmh:.0f} km/h, "
        f"fuel={state.fuel_level:.2f} L, temperature={state.temperature_c:.1f}°C"
    )
    logger.info(
        f"Tire health {session.tire_health.score:.1f} ({session.tire_health.condition}), "
        f"~{session.tire_health.estimated_remaining_km} km remaining"
    )
    logger.info(f"Alerts: {counts['critical']} critical, {counts['warning']} warning, {counts['info']} info")
    for notice in session.notices:
        logger.warning(notice.message)
    logger.info(f"Advisory: {session.advisory}")

    output_path = Path(output_dir)
    writer = TelemetryLogWriter(output_path)
    path = writer.write_session(truck_id, session.records)
    session.stop()

    report = validate_telemetry_dir(output_path)
    logger.info(report.summary())
    click.echo(str(path))
    if not report.passed:
        sys.exit(1)


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind.")
@click.option("--port", default=5000, help="Port to bind.")
@click.option("--profile", type=click.Choice(sorted(DEPLOYMENT_PROFILES)), default="backend",
              help="Session start defaults.")
@click.option("--seed", default=None, type=int, help="RNG seed for jitter.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def serve(host, port, profile, seed, verbose):
    """Serve the live truck state over HTTP."""
    _configure_logging(verbose)
    run_server(host=host, port=port, config=SimulationConfig(profile=profile, seed=seed))


if __name__ == "__main__":
    main()
