"""State transitions keeping the tally counters consistent.

Every function takes the current :class:`TallyState` and returns the next
one.  Rejected operations raise :class:`~.validators.ValidationError` and
leave the input untouched; decrements that would go below zero return the
input state unchanged.
"""

from __future__ import annotations

import logging
import uuid
from typing import Tuple, Union

from .catalog import DEFAULT_CATALOG, HospitalCatalog
from .models import (
    AllocationField,
    Axis,
    Category,
    Channel,
    HospitalAllocation,
    IncidentMetadata,
    MethaneReport,
    Resource,
    TallyState,
)
from .validators import CapacityError, EmptyPoolError, InvalidDirectionError, LastAllocationError

logger = logging.getLogger(__name__)

# Transport deltas are always attributed to the first listed destination,
# whichever hospital actually received the patient.
DEFAULT_ALLOCATION_TARGET = "first"


def _step(value: int) -> int:
    step = int(value)
    if step not in (1, -1):
        raise ValueError(f"Step must be +1 or -1, got {value!r}")
    return step


def default_allocation_target(allocations: Tuple[HospitalAllocation, ...]) -> int:
    """Index of the record that absorbs transport deltas."""
    return 0


def new_session() -> TallyState:
    return TallyState()


def reset_session() -> TallyState:
    logger.info("Tally session reset")
    return new_session()


# ---------------------------------------------------------------------------
# Patient intake

def record_patient_event(state: TallyState, channel: Union[Channel, str], delta: int) -> TallyState:
    channel = Channel(channel)
    delta = _step(delta)
    counts = state.counts

    new_value = getattr(counts, channel.value) + delta
    if new_value < 0:
        logger.debug("Ignoring %s decrement below zero", channel.value)
        return state

    sex_unknown = counts.sex_unknown
    age_unknown = counts.age_unknown
    if delta > 0:
        sex_unknown += 1
        age_unknown += 1
    else:
        # Patients already classified are left in their category.
        if sex_unknown > 0:
            sex_unknown -= 1
        if age_unknown > 0:
            age_unknown -= 1

    counts = counts.replace(
        **{channel.value: new_value, "sex_unknown": sex_unknown, "age_unknown": age_unknown}
    )
    allocations = state.allocations
    if channel is Channel.TRANSPORTED:
        allocations = _sync_transport_allocation(allocations, delta, counts.transported)
    return state.replace(counts=counts, allocations=allocations)


def _sync_transport_allocation(
    allocations: Tuple[HospitalAllocation, ...], delta: int, transported: int
) -> Tuple[HospitalAllocation, ...]:
    records = list(allocations)
    index = default_allocation_target(allocations)
    if records and records[index].name:
        target = records[index]
        records[index] = target.replace(count=max(0, target.count + delta))

    overflow = sum(record.count for record in records) - transported
    if overflow > 0:
        logger.warning(
            "Allocated destinations exceed transported count by %s; releasing from latest records",
            overflow,
        )
        for idx in range(len(records) - 1, -1, -1):
            if overflow <= 0:
                break
            released = min(records[idx].count, overflow)
            if released:
                records[idx] = records[idx].replace(count=records[idx].count - released)
                overflow -= released
    return tuple(records)


# ---------------------------------------------------------------------------
# Classification

def reclassify(state: TallyState, category: Union[Category, str], direction: int) -> TallyState:
    category = Category(category)
    direction = _step(direction)
    pool = category.axis.pool
    counts = state.counts
    pool_value = getattr(counts, pool)
    category_value = getattr(counts, category.value)

    if direction > 0:
        if pool_value <= 0:
            raise EmptyPoolError(category.axis)
        counts = counts.replace(**{category.value: category_value + 1, pool: pool_value - 1})
    else:
        if category_value <= 0:
            logger.debug("Ignoring %s decrement below zero", category.value)
            return state
        counts = counts.replace(**{category.value: category_value - 1, pool: pool_value + 1})
    return state.replace(counts=counts)


def adjust_unknown_direct(state: TallyState, axis: Union[Axis, str], direction: int) -> TallyState:
    axis = Axis(axis)
    direction = _step(direction)
    if direction > 0:
        raise InvalidDirectionError()
    current = getattr(state.counts, axis.pool)
    if current <= 0:
        logger.debug("Ignoring %s decrement below zero", axis.pool)
        return state
    return state.replace(counts=state.counts.replace(**{axis.pool: current - 1}))


def adjust_resource(state: TallyState, counter: Union[Resource, str], delta: int) -> TallyState:
    counter = Resource(counter)
    delta = _step(delta)
    current = getattr(state.counts, counter.value)
    if current + delta < 0:
        logger.debug("Ignoring %s decrement below zero", counter.value)
        return state
    return state.replace(counts=state.counts.replace(**{counter.value: current + delta}))


# ---------------------------------------------------------------------------
# Destinations

def _replace_allocation(state: TallyState, updated: HospitalAllocation) -> TallyState:
    records = tuple(updated if record.id == updated.id else record for record in state.allocations)
    return state.replace(allocations=records)


def set_allocation(
    state: TallyState,
    record_id: str,
    field: Union[AllocationField, str],
    value: Union[int, str],
    *,
    catalog: HospitalCatalog = DEFAULT_CATALOG,
) -> TallyState:
    field = AllocationField(field)
    record = state.find_allocation(record_id)

    if field is AllocationField.COUNT:
        new_count = int(value)
        if new_count < 0:
            logger.debug("Ignoring negative count for allocation %s", record_id)
            return state
        delta = new_count - record.count
        if delta > 0 and state.allocated_total + delta > state.counts.transported:
            raise CapacityError()
        return _replace_allocation(state, record.replace(count=new_count))

    name = str(value)
    if not record.is_custom and catalog.is_other(name):
        return _replace_allocation(state, record.replace(name="", is_custom=True))
    return _replace_allocation(state, record.replace(name=name))


def revert_allocation_to_catalog(state: TallyState, record_id: str) -> TallyState:
    record = state.find_allocation(record_id)
    return _replace_allocation(state, record.replace(name="", is_custom=False))


def add_allocation(state: TallyState) -> TallyState:
    existing = {record.id for record in state.allocations}
    record_id = uuid.uuid4().hex[:9]
    while record_id in existing:  # pragma: no cover
        record_id = uuid.uuid4().hex[:9]
    return state.replace(allocations=state.allocations + (HospitalAllocation(id=record_id),))


def remove_allocation(state: TallyState, record_id: str) -> TallyState:
    state.find_allocation(record_id)
    if len(state.allocations) <= 1:
        raise LastAllocationError()
    return state.replace(
        allocations=tuple(record for record in state.allocations if record.id != record_id)
    )


# ---------------------------------------------------------------------------
# Free-text fields

def update_metadata(state: TallyState, **fields: str) -> TallyState:
    unknown = set(fields) - set(IncidentMetadata.__dataclass_fields__)
    if unknown:
        raise ValueError("Unknown incident fields: " + ", ".join(sorted(unknown)))
    return state.replace(metadata=state.metadata.replace(**{k: str(v) for k, v in fields.items()}))


def update_methane(state: TallyState, **fields: str) -> TallyState:
    unknown = set(fields) - set(MethaneReport.__dataclass_fields__)
    if unknown:
        raise ValueError("Unknown METHANE fields: " + ", ".join(sorted(unknown)))
    return state.replace(methane=state.methane.replace(**{k: str(v) for k, v in fields.items()}))


def set_final(state: TallyState, flag: bool) -> TallyState:
    return state.replace(is_final=bool(flag))


__all__ = [
    "DEFAULT_ALLOCATION_TARGET",
    "default_allocation_target",
    "new_session",
    "reset_session",
    "record_patient_event",
    "reclassify",
    "adjust_unknown_direct",
    "adjust_resource",
    "set_allocation",
    "revert_allocation_to_catalog",
    "add_allocation",
    "remove_allocation",
    "update_metadata",
    "update_methane",
    "set_final",
]
