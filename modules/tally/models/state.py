"""Dataclasses representing the tally session state."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Tuple

DEFAULT_ALLOCATION_ID = "1"


@dataclass(slots=True, frozen=True)
class TallyCounts:
    attended: int = 0
    transported: int = 0
    male: int = 0
    female: int = 0
    sex_unknown: int = 0
    minors: int = 0
    adults: int = 0
    age_unknown: int = 0
    mobile_units: int = 0
    air_units: int = 0
    deceased: int = 0
    evacuated: int = 0

    @property
    def total_patients(self) -> int:
        return self.attended + self.transported

    def replace(self, **changes: int) -> "TallyCounts":
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class HospitalAllocation:
    """One destination entry; ``is_custom`` marks a free-text name."""

    id: str
    name: str = ""
    count: int = 0
    is_custom: bool = False

    def replace(self, **changes: Any) -> "HospitalAllocation":
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class IncidentMetadata:
    incident: str = ""
    address: str = ""
    intervention: str = ""
    notes: str = ""

    def replace(self, **changes: str) -> "IncidentMetadata":
        return replace(self, **changes)


@dataclass(slots=True, frozen=True)
class MethaneReport:
    """Seven-field METHANE situational report."""

    major_incident: str = ""
    exact_location: str = ""
    incident_type: str = ""
    hazards: str = ""
    access: str = ""
    casualties: str = ""
    emergency_services: str = ""

    def values(self) -> Tuple[str, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    def has_content(self) -> bool:
        return any(self.values())

    def has_visible_content(self) -> bool:
        return any(value.strip() for value in self.values())

    def replace(self, **changes: str) -> "MethaneReport":
        return replace(self, **changes)


def _default_allocations() -> Tuple[HospitalAllocation, ...]:
    return (HospitalAllocation(id=DEFAULT_ALLOCATION_ID),)


@dataclass(slots=True, frozen=True)
class TallyState:
    """Immutable snapshot of a tally session."""

    counts: TallyCounts = field(default_factory=TallyCounts)
    allocations: Tuple[HospitalAllocation, ...] = field(default_factory=_default_allocations)
    metadata: IncidentMetadata = field(default_factory=IncidentMetadata)
    methane: MethaneReport = field(default_factory=MethaneReport)
    is_final: bool = False

    @property
    def total_patients(self) -> int:
        return self.counts.total_patients

    @property
    def allocated_total(self) -> int:
        return sum(record.count for record in self.allocations)

    def find_allocation(self, record_id: str) -> HospitalAllocation:
        for record in self.allocations:
            if record.id == record_id:
                return record
        raise KeyError(f"Unknown allocation: {record_id}")

    def replace(self, **changes: Any) -> "TallyState":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        counts = {f.name: getattr(self.counts, f.name) for f in fields(self.counts)}
        counts["total_patients"] = self.total_patients
        return {
            "counts": counts,
            "allocations": [
                {
                    "id": record.id,
                    "name": record.name,
                    "count": record.count,
                    "is_custom": record.is_custom,
                }
                for record in self.allocations
            ],
            "metadata": {f.name: getattr(self.metadata, f.name) for f in fields(self.metadata)},
            "methane": {f.name: getattr(self.methane, f.name) for f in fields(self.methane)},
            "is_final": self.is_final,
        }


__all__ = [
    "DEFAULT_ALLOCATION_ID",
    "TallyCounts",
    "HospitalAllocation",
    "IncidentMetadata",
    "MethaneReport",
    "TallyState",
]
