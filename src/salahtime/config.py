"""Calculation conventions and environment-driven configuration.

Entry points call ``dotenv.load_dotenv()`` before ``load_config()`` so that
values in a local ``.env`` file are picked up like regular environment
variables.
"""

import dataclasses
import logging
import os
from collections.abc import Mapping

from salahtime.models import PrayerAngleConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG = PrayerAngleConfig()

# Maghrib at 0.833° coincides with sunset for the Sunni conventions.
CALCULATION_METHODS: dict[str, PrayerAngleConfig] = {
    "default": DEFAULT_CONFIG,
    "jafari": PrayerAngleConfig(fajr_angle=16.0, maghrib_angle=4.0, isha_angle=14.0),
    "tehran": PrayerAngleConfig(fajr_angle=17.7, maghrib_angle=4.5, isha_angle=14.0),
    "mwl": PrayerAngleConfig(fajr_angle=18.0, maghrib_angle=0.833, isha_angle=17.0),
    "isna": PrayerAngleConfig(fajr_angle=15.0, maghrib_angle=0.833, isha_angle=15.0),
    "egypt": PrayerAngleConfig(fajr_angle=19.5, maghrib_angle=0.833, isha_angle=17.5),
    "makkah": PrayerAngleConfig(
        fajr_angle=18.5, maghrib_angle=0.833, isha_interval=90.0
    ),
    "karachi": PrayerAngleConfig(
        fajr_angle=18.0, maghrib_angle=0.833, isha_angle=18.0
    ),
}

_ENV_PREFIX = "SALAHTIME_"

# Environment variable suffix → (config field, parser)
_ENV_FIELDS: dict[str, tuple[str, type]] = {
    "FAJR_ANGLE": ("fajr_angle", float),
    "SUNRISE_ALTITUDE": ("sunrise_altitude", float),
    "MAGHRIB_ANGLE": ("maghrib_angle", float),
    "ISHA_ANGLE": ("isha_angle", float),
    "ISHA_INTERVAL": ("isha_interval", float),
    "ASR_SHADOW_RATIO": ("asr_shadow_ratio", float),
    "OUTPUT_FORMAT": ("output_format", str),
}


def get_method(name: str) -> PrayerAngleConfig:
    """Look up a named calculation convention (case-insensitive)."""
    try:
        return CALCULATION_METHODS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown calculation method: {name!r} "
            f"(expected one of {', '.join(CALCULATION_METHODS)})"
        ) from None


def load_config(environ: Mapping[str, str] | None = None) -> PrayerAngleConfig:
    """Build a PrayerAngleConfig from SALAHTIME_* environment variables.

    ``SALAHTIME_METHOD`` selects the base convention; the per-field variables
    override it. Empty values are ignored.

    Args:
        environ: Variable mapping. Defaults to ``os.environ``.

    Returns:
        The resulting configuration.

    Raises:
        ValueError: On an unknown method, an unparsable number, or an invalid
            output format.
    """
    if environ is None:
        environ = os.environ

    config = get_method(environ.get(_ENV_PREFIX + "METHOD") or "default")

    overrides: dict[str, object] = {}
    for suffix, (field, parse) in _ENV_FIELDS.items():
        raw = environ.get(_ENV_PREFIX + suffix)
        if not raw:
            continue
        try:
            overrides[field] = parse(raw.strip())
        except ValueError:
            raise ValueError(
                f"Invalid value for {_ENV_PREFIX}{suffix}: {raw!r}"
            ) from None

    if overrides:
        log.debug("Applying configuration overrides: %s", overrides)
        config = dataclasses.replace(config, **overrides)
    return config
