"""Runtime settings loaded from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from qrpro.history import MAX_CAPACITY

ENV_PREFIX = "QRPRO_"


@dataclass(frozen=True)
class Settings:
    """Tunables for logging, history and rendering."""

    log_level: str = "INFO"
    log_file: str | None = None
    json_logs: bool = False
    history_capacity: int = 10
    min_contrast: float = 3.0
    logo_fraction: float = 0.2   # logo square edge, as a fraction of the canvas
    logo_margin: int = 5         # opaque padding around the logo square, px
    output_dir: Path = Path(".")


def _parse_bool(value: str | None) -> bool:
    """Parse string to bool; default False for missing/invalid."""
    if not value:
        return False
    return value.strip().lower() in ("true", "1", "yes", "on")


def _get_number(key: str, default, cast):
    raw = os.getenv(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{key}: {raw!r}") from None


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Build Settings from QRPRO_* environment variables.

    Variables already present in the environment win over the .env file.
    """
    load_dotenv(env_file, override=False)

    capacity = _get_number("HISTORY_CAPACITY", Settings.history_capacity, int)
    if not 1 <= capacity <= MAX_CAPACITY:
        raise ValueError(f"{ENV_PREFIX}HISTORY_CAPACITY must be between 1 and {MAX_CAPACITY}, got {capacity}")
    fraction = _get_number("LOGO_FRACTION", Settings.logo_fraction, float)
    if not 0.0 < fraction < 1.0:
        raise ValueError(f"{ENV_PREFIX}LOGO_FRACTION must be in (0, 1), got {fraction}")

    return Settings(
        log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", Settings.log_level).strip().upper(),
        log_file=os.getenv(ENV_PREFIX + "LOG_FILE") or None,
        json_logs=_parse_bool(os.getenv(ENV_PREFIX + "LOG_JSON")),
        history_capacity=capacity,
        min_contrast=_get_number("MIN_CONTRAST", Settings.min_contrast, float),
        logo_fraction=fraction,
        logo_margin=_get_number("LOGO_MARGIN", Settings.logo_margin, int),
        output_dir=Path(os.getenv(ENV_PREFIX + "OUTPUT_DIR") or ".").expanduser(),
    )
