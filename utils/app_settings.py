"""Application settings for the tally tool.

Values come from environment variables (``ECUES_*``) first, then from the
``[tally]`` section of ``app.ini`` inside ``ECUES_DATA_DIR`` (default
``data``), then from built-in defaults.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_ATTENTION_SECONDS = 2.0
DEFAULT_TOAST_SECONDS = 3.0


@dataclass(slots=True)
class TallySettings:
    data_dir: Path
    attention_seconds: float = DEFAULT_ATTENTION_SECONDS
    toast_seconds: float = DEFAULT_TOAST_SECONDS
    output_dir: Path = Path("data") / "output"
    log_level: str = "INFO"
    hospital_catalog: Optional[Path] = None


def _data_dir() -> Path:
    return Path(os.environ.get("ECUES_DATA_DIR", "data"))


def _read_ini(data_dir: Path) -> dict[str, str]:
    """Read the ``[tally]`` section of ``app.ini`` if present."""
    ini_path = data_dir / "app.ini"
    if not ini_path.exists():
        return {}
    cp = configparser.ConfigParser()
    try:
        cp.read(ini_path, encoding="utf-8")
    except configparser.Error as exc:
        logger.warning("Ignoring malformed %s: %s", ini_path, exc)
        return {}
    if not cp.has_section("tally"):
        return {}
    return dict(cp.items("tally"))


def _lookup(key: str, ini: dict[str, str]) -> Optional[str]:
    raw = os.environ.get(f"ECUES_{key.upper()}")
    if raw is None:
        raw = ini.get(key)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _as_seconds(key: str, raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", key, raw, default)
        return default
    if value < 0:
        logger.warning("Negative %s=%r, using %s", key, raw, default)
        return default
    return value


def load_settings() -> TallySettings:
    data_dir = _data_dir()
    ini = _read_ini(data_dir)

    output_raw = _lookup("output_dir", ini)
    catalog_raw = _lookup("hospital_catalog", ini)
    return TallySettings(
        data_dir=data_dir,
        attention_seconds=_as_seconds(
            "attention_seconds", _lookup("attention_seconds", ini), DEFAULT_ATTENTION_SECONDS
        ),
        toast_seconds=_as_seconds("toast_seconds", _lookup("toast_seconds", ini), DEFAULT_TOAST_SECONDS),
        output_dir=Path(output_raw) if output_raw else data_dir / "output",
        log_level=(_lookup("log_level", ini) or "INFO").upper(),
        hospital_catalog=Path(catalog_raw) if catalog_raw else None,
    )


__all__ = ["TallySettings", "load_settings", "DEFAULT_ATTENTION_SECONDS", "DEFAULT_TOAST_SECONDS"]
