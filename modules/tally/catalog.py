"""Hospital catalog offered when assigning transport destinations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

OTHER_SENTINEL = "OTROS"

DEFAULT_HOSPITALS: Tuple[str, ...] = (
    "HOSPITAL PENNA",
    "HOSPITAL ARGERICH",
    "HOSPITAL RAMOS MEJIA",
    "HOSPITAL FERNANDEZ",
    "HOSPITAL RIVADAVIA",
    "HOSPITAL PIROVANO",
    "HOSPITAL TORNU",
    "HOSPITAL SANTOJANNI",
    "HOSPITAL PIÑERO",
    "HOSPITAL GRIERSON",
    "HOSPITAL ZUBIZARRETA",
    "HOSPITAL VELEZ SARSFIELD",
    "HOSPITAL ALVAREZ",
    "HOSPITAL DURAND",
    "HOSPITAL MUÑIZ",
    "HOSPITAL SANTA LUCIA",
    "HOSPITAL GUTIERREZ",
    "HOSPITAL ELIZALDE",
)


@dataclass(slots=True, frozen=True)
class HospitalCatalog:
    hospitals: Tuple[str, ...] = DEFAULT_HOSPITALS
    other: str = OTHER_SENTINEL

    def options(self) -> Tuple[str, ...]:
        """Selectable values in display order, sentinel last."""

        return self.hospitals + (self.other,)

    def is_other(self, value: str) -> bool:
        return value == self.other


DEFAULT_CATALOG = HospitalCatalog()


def load_catalog(path: Optional[Path]) -> HospitalCatalog:
    """Load a catalog override from YAML, falling back to the built-in list.

    The file holds ``hospitals: [...]`` and optionally ``other: <sentinel>``.
    """
    if path is None:
        return DEFAULT_CATALOG
    path = Path(path)
    if not path.exists():
        logger.warning("Hospital catalog %s not found, using defaults", path)
        return DEFAULT_CATALOG
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Hospital catalog {path} must be a mapping")
    raw = data.get("hospitals") or []
    if not isinstance(raw, list):
        raise ValueError(f"'hospitals' in {path} must be a list")
    other = str(data.get("other") or OTHER_SENTINEL).strip()
    hospitals = tuple(
        name for name in (str(item).strip() for item in raw) if name and name != other
    )
    if not hospitals:
        logger.warning("Hospital catalog %s is empty, using defaults", path)
        return DEFAULT_CATALOG
    return HospitalCatalog(hospitals=hospitals, other=other)


__all__ = ["OTHER_SENTINEL", "DEFAULT_HOSPITALS", "DEFAULT_CATALOG", "HospitalCatalog", "load_catalog"]
