from .enums import AllocationField, Axis, Category, Channel, Resource
from .state import (
    DEFAULT_ALLOCATION_ID,
    HospitalAllocation,
    IncidentMetadata,
    MethaneReport,
    TallyCounts,
    TallyState,
)

__all__ = [
    "AllocationField",
    "Axis",
    "Category",
    "Channel",
    "Resource",
    "DEFAULT_ALLOCATION_ID",
    "HospitalAllocation",
    "IncidentMetadata",
    "MethaneReport",
    "TallyCounts",
    "TallyState",
]
