"""Fuel burn per simulation tick, with forced shutdown at an empty tank."""

import logging
from typing import Optional

from truckmon.config.constants import FUEL_BURN_DIVISOR, FUEL_EMPTY_MESSAGE, FUEL_RANGE_L
from truckmon.config.schema import FuelEmptyEvent, PhysicalState, clamp, utc_now

logger = logging.getLogger(__name__)


def burn_per_tick(speed_kmh: float) -> float:
    """Litres consumed in one tick at the given speed."""
    return speed_kmh / FUEL_BURN_DIVISOR


class FuelConsumptionModel:
    """Depletes fuel while the engine runs and the truck moves."""

    def apply(self, state: PhysicalState) -> Optional[FuelEmptyEvent]:
        """Burn one tick of fuel.

        Returns:
            FuelEmptyEvent if the tank is empty while the engine is running
            (the engine is switched off in the same tick), otherwise None.
        """
        if state.engine_on and state.speed_kmh > 0:
            state.fuel_level = clamp(state.fuel_level - burn_per_tick(state.speed_kmh), *FUEL_RANGE_L)

        if state.engine_on and state.fuel_level <= 0.0:
            state.fuel_level = 0.0
            state.engine_on = False
            logger.warning(f"{FUEL_EMPTY_MESSAGE} (speed was {state.speed_kmh:.0f} km/h)")
            return FuelEmptyEvent(
                timestamp=utc_now(),
                fuel_level=state.fuel_level,
                message=FUEL_EMPTY_MESSAGE,
            )
        return None
