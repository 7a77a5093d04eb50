from __future__ import annotations

import random
from dataclasses import fields

import pytest

from modules.tally import engine
from modules.tally.catalog import OTHER_SENTINEL
from modules.tally.models import HospitalAllocation, TallyCounts, TallyState
from modules.tally.report import summary_text
from modules.tally.validators import (
    CapacityError,
    EmptyPoolError,
    InvalidDirectionError,
    LastAllocationError,
    ValidationError,
)


def _state(**counts) -> TallyState:
    return TallyState(counts=TallyCounts(**counts))


def _with_hospitals(state: TallyState, *records: HospitalAllocation) -> TallyState:
    return state.replace(allocations=tuple(records))


# ---------------------------------------------------------------------------
# Patient intake

@pytest.mark.parametrize("channel", ["attended", "transported"])
def test_intake_grows_total_and_both_unknown_pools(channel):
    state = _state(male=2, sex_unknown=1, adults=3)
    after = engine.record_patient_event(state, channel, +1)

    assert after.total_patients == state.total_patients + 1
    assert after.counts.sex_unknown == state.counts.sex_unknown + 1
    assert after.counts.age_unknown == state.counts.age_unknown + 1
    assert getattr(after.counts, channel) == 1


def test_decrement_below_zero_is_ignored():
    state = TallyState()
    assert engine.record_patient_event(state, "attended", -1) is state


def test_decrement_only_drains_non_empty_pools():
    state = _state(attended=2, male=1, sex_unknown=1, adults=2, age_unknown=0)
    after = engine.record_patient_event(state, "attended", -1)

    assert after.counts.attended == 1
    assert after.counts.sex_unknown == 0
    assert after.counts.age_unknown == 0
    assert after.counts.adults == 2


def test_decrement_of_fully_classified_patient_leaves_partition_stale():
    state = _state(attended=1, male=1, sex_unknown=0, adults=1, age_unknown=0)
    after = engine.record_patient_event(state, "attended", -1)

    c = after.counts
    assert c.total_patients == 0
    assert c.male == 1
    assert c.male + c.female + c.sex_unknown != c.total_patients


def test_invalid_step_is_a_programming_error():
    with pytest.raises(ValueError):
        engine.record_patient_event(TallyState(), "attended", 2)
    with pytest.raises(ValueError):
        engine.record_patient_event(TallyState(), "deceased", 1)


def test_transport_is_attributed_to_first_named_destination():
    state = _with_hospitals(
        TallyState(),
        HospitalAllocation(id="1", name="HOSPITAL PENNA"),
        HospitalAllocation(id="2", name="HOSPITAL DURAND"),
    )
    state = engine.record_patient_event(state, "transported", +1)
    state = engine.record_patient_event(state, "transported", +1)

    assert engine.DEFAULT_ALLOCATION_TARGET == "first"
    assert engine.default_allocation_target(state.allocations) == 0
    assert [r.count for r in state.allocations] == [2, 0]

    state = engine.record_patient_event(state, "transported", -1)
    assert [r.count for r in state.allocations] == [1, 0]


def test_transport_skips_unnamed_first_destination():
    state = engine.record_patient_event(TallyState(), "transported", +1)
    assert state.allocations[0].count == 0
    assert state.counts.transported == 1


def test_transport_decrement_releases_surplus_from_latest_destination():
    state = _with_hospitals(
        _state(transported=2, sex_unknown=2, age_unknown=2),
        HospitalAllocation(id="1", name=""),
        HospitalAllocation(id="2", name="HOSPITAL DURAND", count=1),
        HospitalAllocation(id="3", name="HOSPITAL MUÑIZ", count=1),
    )
    after = engine.record_patient_event(state, "transported", -1)

    assert after.counts.transported == 1
    assert [r.count for r in after.allocations] == [0, 1, 0]


def test_attended_events_never_touch_destinations():
    state = _with_hospitals(TallyState(), HospitalAllocation(id="1", name="HOSPITAL PENNA"))
    after = engine.record_patient_event(state, "attended", +1)
    assert after.allocations == state.allocations


# ---------------------------------------------------------------------------
# Classification

def test_reclassify_moves_from_pool_to_category():
    state = engine.record_patient_event(TallyState(), "attended", +1)
    state = engine.reclassify(state, "male", +1)
    state = engine.reclassify(state, "minors", +1)

    assert state.counts.male == 1
    assert state.counts.sex_unknown == 0
    assert state.counts.minors == 1
    assert state.counts.age_unknown == 0


@pytest.mark.parametrize("category,axis_label", [("female", "Sexo"), ("adults", "Edad")])
def test_reclassify_from_empty_pool_is_rejected(category, axis_label):
    state = _state(attended=1, male=1, minors=1)
    with pytest.raises(EmptyPoolError) as excinfo:
        engine.reclassify(state, category, +1)
    assert str(excinfo.value) == f"No hay pacientes en S/D ({axis_label}) para clasificar."


def test_reclassify_back_to_unknown():
    state = _state(attended=1, female=1, age_unknown=1)
    after = engine.reclassify(state, "female", -1)
    assert after.counts.female == 0
    assert after.counts.sex_unknown == 1
    assert engine.reclassify(after, "female", -1) is after


def test_reclassify_conserves_patient_totals():
    state = _state(attended=3, transported=2, male=1, sex_unknown=4, minors=2, age_unknown=3)
    for category, direction in [("male", 1), ("female", 1), ("male", -1), ("adults", 1), ("minors", -1)]:
        after = engine.reclassify(state, category, direction)
        assert after.total_patients == state.total_patients
        assert after.counts.attended == state.counts.attended
        assert after.counts.transported == state.counts.transported
        state = after


def test_direct_unknown_adjustment():
    assert engine.adjust_unknown_direct(TallyState(), "sex", -1) == TallyState()

    state = _state(attended=2, sex_unknown=2)
    assert engine.adjust_unknown_direct(state, "sex", -1).counts.sex_unknown == 1

    with pytest.raises(InvalidDirectionError) as excinfo:
        engine.adjust_unknown_direct(state, "age", +1)
    assert "Atendidos" in str(excinfo.value)


def test_resource_counters_clamp_at_zero():
    state = engine.adjust_resource(TallyState(), "deceased", -1)
    assert state.counts.deceased == 0
    state = engine.adjust_resource(state, "mobile_units", +1)
    state = engine.adjust_resource(state, "air_units", +1)
    state = engine.adjust_resource(state, "evacuated", +1)
    assert (state.counts.mobile_units, state.counts.air_units, state.counts.evacuated) == (1, 1, 1)
    assert state.total_patients == 0


# ---------------------------------------------------------------------------
# Destinations

def test_allocation_beyond_transported_is_rejected():
    state = TallyState()
    with pytest.raises(CapacityError):
        engine.set_allocation(state, "1", "count", 1)
    assert state.allocations[0].count == 0


def test_allocation_within_transported_is_applied():
    state = _state(transported=2, sex_unknown=2, age_unknown=2)
    state = engine.add_allocation(state)
    first, second = state.allocations
    state = engine.set_allocation(state, first.id, "count", 1)
    state = engine.set_allocation(state, second.id, "count", 1)
    with pytest.raises(CapacityError):
        engine.set_allocation(state, second.id, "count", 2)
    state = engine.set_allocation(state, second.id, "count", 0)
    assert state.allocated_total == 1
    assert engine.set_allocation(state, first.id, "count", -1) is state


def test_other_sentinel_switches_to_custom_and_back():
    state = engine.set_allocation(TallyState(), "1", "name", OTHER_SENTINEL)
    record = state.allocations[0]
    assert record.is_custom is True
    assert record.name == ""

    state = engine.set_allocation(state, "1", "name", "Clínica Privada")
    assert state.allocations[0].name == "Clínica Privada"

    state = engine.revert_allocation_to_catalog(state, "1")
    assert state.allocations[0].is_custom is False
    assert state.allocations[0].name == ""


def test_custom_record_accepts_sentinel_text_as_name():
    state = engine.set_allocation(TallyState(), "1", "name", OTHER_SENTINEL)
    state = engine.set_allocation(state, "1", "name", OTHER_SENTINEL)
    assert state.allocations[0].name == OTHER_SENTINEL
    assert state.allocations[0].is_custom is True


def test_revert_keeps_count():
    state = _with_hospitals(
        _state(transported=1, sex_unknown=1, age_unknown=1),
        HospitalAllocation(id="1", name="Base", count=1, is_custom=True),
    )
    after = engine.revert_allocation_to_catalog(state, "1")
    assert after.allocations[0].count == 1


def test_add_and_remove_allocations():
    state = engine.add_allocation(engine.add_allocation(TallyState()))
    ids = [record.id for record in state.allocations]
    assert len(set(ids)) == 3
    assert all(record.count == 0 and not record.is_custom for record in state.allocations)

    state = engine.remove_allocation(state, ids[1])
    assert [record.id for record in state.allocations] == [ids[0], ids[2]]
    state = engine.remove_allocation(state, ids[0])
    with pytest.raises(LastAllocationError):
        engine.remove_allocation(state, ids[2])


def test_unknown_allocation_id():
    with pytest.raises(KeyError):
        engine.set_allocation(TallyState(), "missing", "count", 0)
    with pytest.raises(ValueError):
        engine.set_allocation(TallyState(), "1", "colour", "red")


# ---------------------------------------------------------------------------
# Session

def test_reset_restores_defaults():
    state = engine.record_patient_event(TallyState(), "transported", +1)
    state = engine.add_allocation(state)
    state = engine.update_metadata(state, incident="Choque", address="Av. 9 de Julio", notes="x")
    state = engine.update_methane(state, hazards="Combustible")
    state = engine.set_final(state, True)

    fresh = engine.reset_session()
    assert all(getattr(fresh.counts, f.name) == 0 for f in fields(fresh.counts))
    assert len(fresh.allocations) == 1
    assert fresh.allocations[0] == HospitalAllocation(id="1")
    assert not any(getattr(fresh.metadata, f.name) for f in fields(fresh.metadata))
    assert not fresh.methane.has_content()
    assert fresh.is_final is False


def test_unknown_text_fields_are_rejected():
    with pytest.raises(ValueError):
        engine.update_metadata(TallyState(), colour="red")
    with pytest.raises(ValueError):
        engine.update_methane(TallyState(), Z="?")


def test_scenario_intake_then_classification_summary():
    state = engine.record_patient_event(TallyState(), "attended", +1)
    assert (state.counts.attended, state.counts.sex_unknown, state.counts.age_unknown) == (1, 1, 1)
    state = engine.reclassify(state, "male", +1)
    assert (state.counts.male, state.counts.sex_unknown) == (1, 0)

    text = summary_text(state)
    assert "Masc: 1" in text
    assert "S/D: 0" in text


# ---------------------------------------------------------------------------
# Invariants over random operation sequences

def _random_step(rng: random.Random, state: TallyState) -> TallyState:
    op = rng.randrange(8)
    step = rng.choice([1, -1])
    if op == 0:
        return engine.record_patient_event(state, rng.choice(["attended", "transported"]), step)
    if op == 1:
        return engine.reclassify(state, rng.choice(["male", "female", "minors", "adults"]), step)
    if op == 2:
        return engine.adjust_unknown_direct(state, rng.choice(["sex", "age"]), -1)
    if op == 3:
        return engine.adjust_resource(state, rng.choice(["deceased", "evacuated", "mobile_units", "air_units"]), step)
    record = rng.choice(state.allocations)
    if op == 4:
        return engine.set_allocation(state, record.id, "count", max(0, record.count + step))
    if op == 5:
        return engine.set_allocation(state, record.id, "name", rng.choice(["", "HOSPITAL PENNA", OTHER_SENTINEL]))
    if op == 6:
        return engine.add_allocation(state) if step > 0 else engine.remove_allocation(state, record.id)
    return engine.record_patient_event(state, "transported", step)


@pytest.mark.parametrize("seed", range(20))
def test_counters_stay_non_negative_and_allocations_capped(seed):
    rng = random.Random(seed)
    state = TallyState()
    for _ in range(300):
        before = state
        try:
            state = _random_step(rng, state)
        except ValidationError:
            state = before

        for f in fields(state.counts):
            assert getattr(state.counts, f.name) >= 0, f.name
        assert all(record.count >= 0 for record in state.allocations)
        assert state.allocated_total <= state.counts.transported
        assert len(state.allocations) >= 1
