"""Internal constants shared across the library."""

BASE_URL = "https://euapi.gizwits.com/app"
#: Application id of the Bestway Smart Hub app on the Gizwits cloud.
APPLICATION_ID = "98754e684ec045528b073876c34c7348"

HEADER_USER_TOKEN = "X-Gizwits-User-token"
HEADER_APPLICATION_ID = "X-Gizwits-Application-Id"
CONTENT_TYPE = "application/json; charset=UTF-8"

#: Seconds a successful fetch stays fresh for non-forced refreshes.
CACHE_TTL_SECONDS: float = 60.0
#: Seconds between background poll ticks.
POLL_INTERVAL_SECONDS: float = 10.0

# ------------------------------------------------------------------
# Target temperature range (°C)
# ------------------------------------------------------------------

TEMP_MIN_C = 20
TEMP_MAX_C = 40
TEMP_STEP_C = 1


def clamp_target_temp(value: int) -> int:
    """Clamp a reported set-point into the supported range."""
    return max(TEMP_MIN_C, min(TEMP_MAX_C, int(value)))


def validate_target_temp(value: int) -> int:
    """Return *value* as int or raise :class:`ValueError` when out of range."""
    if isinstance(value, bool):
        raise ValueError(f"temperature must be an integer, got {value!r}")
    temp = int(value)
    if temp != value:
        raise ValueError(f"temperature must be a whole number of °C, got {value}")
    if not TEMP_MIN_C <= temp <= TEMP_MAX_C:
        raise ValueError(f"temperature must be between {TEMP_MIN_C} and {TEMP_MAX_C} °C, got {temp}")
    return temp


# ------------------------------------------------------------------
# Snapshot presets
# ------------------------------------------------------------------

#: State before the first fetch.
INITIAL_STATE: dict[str, object] = {
    "power": False,
    "current_temp": 25,
    "target_temp": 30,
    "heating_on": False,
    "filter_on": False,
    "waves_on": False,
}

#: State recorded while the cloud reports the device disconnected.
IDLE_STATE: dict[str, object] = {
    "power": False,
    "current_temp": 25,
    "target_temp": 25,
    "heating_on": False,
    "filter_on": False,
    "waves_on": False,
}

MANUFACTURER = "Bestway"
MODEL = "Lay-Z"

# ------------------------------------------------------------------
# Gizwits attribute names
# ------------------------------------------------------------------

ATTR_POWER = "power"
ATTR_TEMP_NOW = "temp_now"
ATTR_TEMP_SET = "temp_set"
ATTR_HEAT_POWER = "heat_power"
ATTR_FILTER_POWER = "filter_power"
ATTR_WAVE_POWER = "wave_power"
