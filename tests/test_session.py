"""Tests for the truck session: control inputs, ticks, and derived outputs."""

import pytest

from truckmon.alerts.alert_engine import alert_summary
from truckmon.config.constants import (
    ADVISORY_MESSAGES,
    AMBIENT_TEMP_C,
    FUEL_EMPTY_MESSAGE,
    TREND_CAPACITY,
)
from truckmon.config.schema import SimulationConfig
from truckmon.simulation.scheduler import ManualClock, SimulationScheduler
from truckmon.simulation.session import TruckSession


class TestSessionDefaults:
    def test_dashboard_profile(self, session):
        state = session.state
        assert not state.engine_on
        assert state.speed_kmh == 0.0
        assert state.fuel_level == 85.0
        assert state.temperature_c == 75.0
        assert state.tire_pressures_psi == [38.0, 38.0, 38.0, 38.0]

    def test_backend_profile(self, clock):
        session = TruckSession(SimulationConfig(profile="backend", seed=1),
                               scheduler=SimulationScheduler(clock))
        assert session.state.fuel_level == 200.0
        assert session.state.tire_pressures_psi == [38.0, 38.0, 37.0, 39.0]

    def test_derived_outputs_ready_before_first_tick(self, session):
        assert session.alerts
        assert session.tire_health is not None
        assert session.fuel_anomaly is not None
        assert session.advisory == ADVISORY_MESSAGES["optimal"]

    def test_unknown_profile_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig(profile="mainframe")


class TestControlInputs:
    def test_setters_clamp(self, session):
        session.set_speed(250)
        session.set_load(-3)
        session.set_fuel_level(1000)
        session.set_temperature(5)
        state = session.state
        assert state.speed_kmh == 120.0
        assert state.load_tons == 0.0
        assert state.fuel_level == 300.0
        assert state.temperature_c == AMBIENT_TEMP_C

    def test_tire_pressures_clamped(self, session):
        session.set_tire_pressures([10, 50, 30, 40])
        assert session.state.tire_pressures_psi == [25.0, 45.0, 30.0, 40.0]

    def test_single_tire(self, session):
        session.set_tire_pressure("RL", 28)
        assert session.state.tire_pressures_psi == [38.0, 38.0, 28.0, 38.0]
        critical = [a for a in session.alerts if a.severity == "critical"]
        assert len(critical) == 1
        assert "Rear Left" in critical[0].message

    def test_wrong_tire_count(self, session):
        with pytest.raises(ValueError):
            session.set_tire_pressures([38, 38, 38])

    def test_flag_type_checked(self, session):
        with pytest.raises(TypeError):
            session.update(engine_on="yes")

    def test_boolean_speed_rejected(self, session):
        with pytest.raises(TypeError):
            session.set_speed(True)

    def test_nan_rejected(self, session):
        with pytest.raises(ValueError):
            session.set_load(float("nan"))

    def test_unknown_field(self, session):
        with pytest.raises(KeyError):
            session.update(altitude=100)

    def test_rejected_update_is_atomic(self, session):
        before = session.snapshot()
        with pytest.raises(KeyError):
            session.update(speed_kmh=90, altitude=100)
        assert session.state.speed_kmh == before.speed_kmh
        assert session.state.timestamp == before.timestamp

    def test_update_refreshes_alerts(self, session):
        session.set_fuel_level(10)
        assert any("Fuel level critically low" in a.message for a in session.alerts)

    def test_merge_snapshot(self, session):
        session.merge_snapshot({"engineOn": True, "speed": 80, "rainActive": True, "color": "red"})
        state = session.state
        assert state.engine_on
        assert state.speed_kmh == 80.0
        assert state.rain_active
        assert state.fuel_level == 85.0

    def test_update_touches_timestamp(self, session):
        before = session.state.timestamp
        session.set_load(20)
        assert session.state.timestamp >= before

    def test_snapshot_is_detached(self, session):
        snap = session.snapshot()
        session.set_speed(50)
        assert snap.speed_kmh == 0.0


class TestTick:
    def test_invariants_hold_over_many_ticks(self, session):
        session.update(engine_on=True, speed_kmh=120, load_tons=30, fuel_level=300)
        for _ in range(600):
            session.tick()
            state = session.state
            assert 0.0 <= state.speed_kmh <= 120.0
            assert 0.0 <= state.load_tons <= 30.0
            assert 0.0 <= state.fuel_level <= 300.0
            assert AMBIENT_TEMP_C <= state.temperature_c <= 110.0
            assert all(25.0 <= p <= 45.0 for p in state.tire_pressures_psi)
            assert 0.0 <= session.tire_health.score <= 100.0
            assert 0.0 <= session.fuel_anomaly.score <= 100.0

    def test_fuel_burns_with_speed(self, session):
        session.update(engine_on=True, speed_kmh=60)
        session.tick()
        assert session.state.fuel_level == pytest.approx(85.0 - 0.06)

    def test_no_burn_when_stopped(self, session):
        session.set_engine(True)
        session.tick()
        assert session.state.fuel_level == 85.0

    def test_engine_off_resets_temperature_next_tick(self, quiet_session):
        quiet_session.update(engine_on=True, speed_kmh=100, load_tons=25)
        for _ in range(30):
            quiet_session.tick()
        assert quiet_session.state.temperature_c > 75.0
        quiet_session.set_engine(False)
        quiet_session.tick()
        assert quiet_session.state.temperature_c == AMBIENT_TEMP_C
        assert quiet_session.state.speed_kmh == 0.0

    def test_fuel_empty_forces_shutdown(self, session):
        session.update(engine_on=True, speed_kmh=60, fuel_level=0.05)
        event = session.tick()
        assert event is not None
        assert event.message == FUEL_EMPTY_MESSAGE
        assert session.state.fuel_level == 0.0
        assert not session.state.engine_on
        assert session.insights()["notices"] == [FUEL_EMPTY_MESSAGE]

    def test_empty_tank_with_engine_on_while_stopped(self, session):
        session.update(engine_on=True, fuel_level=0)
        session.tick()
        assert not session.state.engine_on

    def test_thermal_model_disabled_keeps_manual_temperature(self, clock):
        config = SimulationConfig(seed=3, thermal_model_enabled=False)
        session = TruckSession(config, scheduler=SimulationScheduler(clock))
        session.update(engine_on=True, speed_kmh=60, temperature_c=90)
        session.tick()
        assert session.state.temperature_c == 90.0

    def test_tick_records_row(self, session):
        session.update(engine_on=True, speed_kmh=60)
        session.tick()
        row = session.records[-1]
        assert row["tick"] == 1
        assert row["speed_kmh"] == 60.0
        assert row["alerts_info"] + row["alerts_warning"] + row["alerts_critical"] >= 1

    def test_same_seed_same_trajectory(self):
        def run():
            clock = ManualClock()
            session = TruckSession(SimulationConfig(seed=11), scheduler=SimulationScheduler(clock))
            session.update(engine_on=True, speed_kmh=70, load_tons=20)
            for _ in range(50):
                session.tick()
            return session.state.temperature_c, [s.tire_pressure for s in session.trends.recent()]

        assert run() == run()


class TestSchedules:
    def test_tick_cadence(self, session):
        session.start()
        session.run_for(10.0)
        assert session.ticks == 10

    def test_advisory_refreshes_every_five_seconds(self, session):
        session.start()
        session.set_fuel_level(15)
        assert session.advisory == ADVISORY_MESSAGES["optimal"]
        session.run_for(4.0)
        assert session.advisory == ADVISORY_MESSAGES["optimal"]
        session.run_for(1.0)
        assert session.advisory == ADVISORY_MESSAGES["fuel_critical"]

    def test_refresh_advisory_directly(self, session):
        session.update(temperature_c=100)
        assert session.refresh_advisory() == ADVISORY_MESSAGES["overheating"]

    def test_stop_discards_history(self, session):
        session.start()
        session.update(engine_on=True, speed_kmh=50)
        session.run_for(30.0)
        assert len(session.trends.recent()) == TREND_CAPACITY
        session.stop()
        assert session.trends.recent() == []
        assert session.fuel_detector.recent() == []
        assert session.records == []
        ticks = session.ticks
        session.scheduler.clock.advance(10.0)
        session.scheduler.run_pending()
        assert session.ticks == ticks

    def test_restart_after_stop(self, session):
        session.start()
        session.run_for(3.0)
        session.stop()
        session.start()
        session.run_for(2.0)
        assert session.ticks == 5


class TestInsights:
    def test_keys(self, session):
        insights = session.insights()
        assert set(insights) == {
            "alerts", "alert_counts", "tire_health", "fuel_anomaly",
            "advisory", "indicators", "trends", "notices",
        }

    def test_fuel_drop_while_parked_flags_anomaly(self, session):
        session.set_fuel_level(60)
        anomaly = session.insights()["fuel_anomaly"]
        assert anomaly["is_anomaly"]
        assert anomaly["score"] == 100.0
        assert anomaly["history"][-1]["anomaly"]

    def test_alerts_match_summary(self, session):
        session.set_tire_pressure("FL", 28)
        insights = session.insights()
        summary = alert_summary(session.alerts)
        assert insights["alerts"] == summary["alerts"]
        assert insights["alert_counts"] == summary["counts"]
        assert insights["alert_counts"]["critical"] == 1

    def test_idempotent_reads(self, session):
        assert session.insights() == session.insights()
