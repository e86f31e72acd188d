"""Tests for dashboard status indicators."""

import pytest

from truckmon.features.indicators import compute_indicators, engine_rpm


class TestEngineRpm:
    def test_idle(self):
        assert engine_rpm(0.0, True) == 800

    def test_linear_in_speed(self):
        assert engine_rpm(60.0, True) == 2000

    def test_engine_off(self):
        assert engine_rpm(60.0, False) == 0


class TestIndicators:
    def test_nominal_all_good(self, nominal_state):
        indicators = compute_indicators(nominal_state)
        assert set(indicators) == {
            "tire_pressure", "fuel", "load", "temperature", "speed", "weather", "engine",
        }
        assert all(item["status"] == "good" for item in indicators.values())
        assert indicators["engine"]["value"] == 2000
        assert indicators["weather"]["value"] == "Clear"

    @pytest.mark.parametrize("pressures,status", [
        ([29.0] * 4, "critical"), ([34.0] * 4, "warning"), ([35.0] * 4, "good"),
    ])
    def test_tire_pressure_status(self, nominal_state, pressures, status):
        nominal_state.tire_pressures_psi = pressures
        assert compute_indicators(nominal_state)["tire_pressure"]["status"] == status

    def test_tire_pressure_value_rounded(self, nominal_state):
        nominal_state.tire_pressures_psi = [37.0, 38.0, 38.0, 38.0]
        assert compute_indicators(nominal_state)["tire_pressure"]["value"] == 38

    @pytest.mark.parametrize("temp,status", [(75.0, "good"), (80.0, "warning"), (91.0, "critical")])
    def test_temperature_status(self, nominal_state, temp, status):
        nominal_state.temperature_c = temp
        assert compute_indicators(nominal_state)["temperature"]["status"] == status

    def test_fuel_status(self, nominal_state):
        nominal_state.fuel_level = 10.0
        assert compute_indicators(nominal_state)["fuel"]["status"] == "critical"
        nominal_state.fuel_level = 30.0
        assert compute_indicators(nominal_state)["fuel"]["status"] == "warning"

    def test_load_and_speed_only_warn(self, nominal_state):
        nominal_state.load_tons = 30.0
        nominal_state.speed_kmh = 120.0
        indicators = compute_indicators(nominal_state)
        assert indicators["load"]["status"] == "warning"
        assert indicators["speed"]["status"] == "warning"

    def test_rain_and_engine_off(self, nominal_state):
        nominal_state.rain_active = True
        nominal_state.engine_on = False
        indicators = compute_indicators(nominal_state)
        assert indicators["weather"] == {"value": "Rainy", "status": "warning"}
        assert indicators["engine"] == {"value": 0, "status": "off"}
