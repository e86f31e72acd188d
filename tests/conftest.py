"""Shared test fixtures."""

import numpy as np
import pytest

from truckmon.config.schema import PhysicalState, SimulationConfig
from truckmon.simulation.scheduler import ManualClock, SimulationScheduler
from truckmon.simulation.session import TruckSession


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def nominal_state():
    """Engine running at cruise with every signal inside its normal band."""
    return PhysicalState(
        engine_on=True,
        speed_kmh=60.0,
        load_tons=15.0,
        fuel_level=150.0,
        temperature_c=70.0,
        tire_pressures_psi=[38.0, 38.0, 38.0, 38.0],
        rain_active=False,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def session(clock):
    config = SimulationConfig(profile="dashboard", seed=42)
    return TruckSession(config, scheduler=SimulationScheduler(clock))


@pytest.fixture
def quiet_session(clock):
    """Session without temperature jitter, for exact temperature checks."""
    config = SimulationConfig(profile="dashboard", seed=42, jitter_amplitude=0.0)
    return TruckSession(config, scheduler=SimulationScheduler(clock))
