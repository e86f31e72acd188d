"""Physical limits, model coefficients, thresholds, and message text for the truck engine."""

# =============================================================================
# Physical State Limits
# =============================================================================

AMBIENT_TEMP_C = 30.0

SPEED_RANGE_KMH = (0.0, 120.0)
LOAD_RANGE_TONS = (0.0, 30.0)
FUEL_RANGE_L = (0.0, 300.0)
TEMPERATURE_RANGE_C = (AMBIENT_TEMP_C, 110.0)
TIRE_PRESSURE_RANGE_PSI = (25.0, 45.0)

TIRE_POSITIONS = ["FL", "FR", "RL", "RR"]
TIRE_NAMES = {
    "FL": "Front Left",
    "FR": "Front Right",
    "RL": "Rear Left",
    "RR": "Rear Right",
}

# =============================================================================
# Deployment Profiles (session start defaults)
# =============================================================================

DEPLOYMENT_PROFILES = {
    "dashboard": {
        "engine_on": False,
        "speed_kmh": 0.0,
        "load_tons": 15.0,
        "fuel_level": 85.0,
        "temperature_c": 75.0,
        "tire_pressures_psi": (38.0, 38.0, 38.0, 38.0),
        "rain_active": False,
    },
    "backend": {
        "engine_on": False,
        "speed_kmh": 0.0,
        "load_tons": 15.0,
        "fuel_level": 200.0,
        "temperature_c": 35.0,
        "tire_pressures_psi": (38.0, 38.0, 37.0, 39.0),
        "rain_active": False,
    },
}

DEFAULT_PROFILE = "dashboard"

# =============================================================================
# Schedules
# =============================================================================

SIMULATION_TICK_SEC = 1.0
ADVISORY_TICK_SEC = 5.0

FUEL_HISTORY_CAPACITY = 10
TREND_CAPACITY = 20

# =============================================================================
# Temperature Dynamics
# =============================================================================

THERMAL_SMOOTHING = 0.08          # exponential smoothing factor per tick
THERMAL_JITTER_AMPLITUDE = 0.5    # peak-to-peak, centered on zero
STATIONARY_SPEED_KMH = 5.0        # below this the truck counts as stopped
STATIONARY_COOLING = 0.10         # extra blend toward ambient when stopped

THERMAL_TARGET_BASE = 35.0
THERMAL_TARGET_LOAD_GAIN = 40.0   # at full 30 t load
THERMAL_TARGET_SPEED_GAIN = 45.0  # at full 120 km/h
THERMAL_RAIN_COOLING = 8.0

# =============================================================================
# Fuel Consumption
# =============================================================================

FUEL_BURN_DIVISOR = 1000.0  # litres per tick = speed / divisor

# =============================================================================
# Tire Health Factor Model
# =============================================================================

IDEAL_TIRE_PRESSURE_PSI = 37.5
PRESSURE_FALLOFF_PSI = 10.0

SAFE_LOAD_TONS = 25.0
LOAD_EXPONENT = 1.3

SPEED_FREE_KMH = 40.0
SPEED_FALLOFF_KMH = 40.0
SPEED_EXPONENT = 1.2
SPEED_FACTOR_FLOOR = 0.3

TEMPERATURE_BAND_C = (60.0, 75.0)
TEMPERATURE_FALLOFF_C = 40.0

TIRE_HEALTH_WEIGHTS = {
    "pressure": 0.40,
    "load": 0.25,
    "speed": 0.20,
    "temperature": 0.15,
}

TIRE_LIFE_KM = 60_000

# Recommendation triggers
RECOMMEND_PRESSURE_RANGE_PSI = (35.0, 40.0)
RECOMMEND_LOAD_HIGH_TONS = 25.0
RECOMMEND_LOAD_LOW_TONS = 5.0
RECOMMEND_SPEED_HIGH_KMH = 80.0
RECOMMEND_SPEED_LOW_KMH = 20.0

# Condition label thresholds, best first
TIRE_CONDITION_LEVELS = [
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Fair"),
    (0.0, "Poor"),
]

TIRE_RECOMMENDATIONS = {
    "pressure_low": "Increase tire pressure to 35-40 PSI",
    "pressure_high": "Reduce tire pressure to 35-40 PSI",
    "load_high": "High load detected - reduce to extend tire life",
    "load_low": "Light load - keep pressure near the low end of 35-40 PSI for even tread contact",
    "speed_high": "High speed reduces tire lifespan - moderate speed recommended",
    "speed_low": "Low-speed crawling increases scrub wear - avoid prolonged creeping",
    "temperature_high": "High temperature - check cooling system",
    "temperature_low": "Engine below operating temperature - avoid heavy loads until warmed up",
    "optimal": "All parameters optimal - maintain current conditions",
}

# =============================================================================
# Fuel Anomaly Detection
# =============================================================================

ANOMALY_DROP_GATE = -0.5
ANOMALY_STOPPED_DROP = -0.3
ANOMALY_ENGINE_OFF_DROP = -0.2
ANOMALY_EXPECTED_MULTIPLIER = 3.0

ANOMALY_STOPPED_WEIGHT = 20.0
ANOMALY_ENGINE_OFF_WEIGHT = 25.0
ANOMALY_EXCESS_WEIGHT = 15.0

# =============================================================================
# Alert Thresholds
# =============================================================================

ALERT_THRESHOLDS = {
    "tire_critical_below": 30.0,
    "tire_warning_below": 35.0,
    "fuel_critical_below": 20.0,
    "fuel_warning_below": 40.0,
    "temperature_critical_above": 95.0,
    "temperature_warning_above": 85.0,
    "load_critical_above": 27.0,
    "load_warning_above": 25.0,
    "speed_warning_above": 100.0,
}

SEVERITIES = ["critical", "warning", "info"]

# =============================================================================
# Advisory Messages (priority order)
# =============================================================================

ADVISORY_MESSAGES = {
    "fuel_critical": "Fuel critically low! Plan immediate refueling to avoid breakdown.",
    "overheating": "Engine overheating! Stop and check cooling system immediately.",
    "tire_critical": "Critical tire pressure detected! Stop and inflate tires to prevent blowout.",
    "load_speed": "Heavy load + high speed reduces efficiency. Consider slowing down.",
    "fuel_dropping": "Fuel dropping fast. Check for leakage or plan next fuel stop.",
    "heat_at_speed": "High temp at high speed. Reduce speed to cool engine.",
    "optimal": "Optimal conditions! Maintain current parameters for best efficiency.",
    "idling": "Engine idling. Turn off to save fuel if stationary for long.",
    "engine_off": "Engine off. All systems ready. Start engine to begin monitoring.",
    "monitoring": "Monitoring all systems...",
}

FUEL_EMPTY_MESSAGE = "Fuel tank empty - engine shut down automatically."

# =============================================================================
# Dashboard Indicators
# =============================================================================

IDLE_RPM = 800
RPM_PER_KMH = 20

TREND_PRESSURE_JITTER = 0.3
TREND_FUEL_JITTER = 0.4
TREND_PRESSURE_RANGE_PSI = (30.0, 45.0)
