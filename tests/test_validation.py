"""Tests for segmentation validation."""

import pytest

from queueseg.domain.models import (
    Agent,
    AgentStatus,
    BreakSlot,
    Queue,
    ScheduleState,
    SegmentationResult,
)
from queueseg.validation.validator import (
    ScheduleValidator,
    ValidationErrorType,
)

SLOT = "12:00 - 1:00"


class TestScheduleValidator:
    """Tests for ScheduleValidator."""

    @pytest.fixture
    def validator(self):
        """Create a validator with default settings."""
        return ScheduleValidator()

    @pytest.fixture
    def state(self):
        """A board with one filled slot and consistent counters."""
        state = ScheduleState(time_slots=[SLOT])
        for agent_id, name in (("A001", "Gin"), ("A002", "Lyka"), ("A003", "Caleb")):
            state.add_agent(Agent(id=agent_id, name=name, status=AgentStatus.PRESENT))
        state.set_headcount(SLOT, Queue.LV_PGC, 1)
        state.set_headcount(SLOT, Queue.SV_NPGC, 1)

        state.get_agent("A001").increment(Queue.LV_PGC)
        state.get_agent("A002").increment(Queue.SV_NPGC)
        state.results = [
            SegmentationResult(
                slot=SLOT,
                total_required=2,
                assignments={Queue.LV_PGC: ["Gin"], Queue.SV_NPGC: ["Lyka"]},
                locked=True,
            )
        ]
        state.locked_slots.add(SLOT)
        return state

    def _error_types(self, result):
        return {e.error_type for e in result.errors}

    def test_valid_state_passes(self, validator, state):
        """A consistent board should pass validation."""
        result = validator.validate(state)
        assert result.is_valid, f"Errors: {[str(e) for e in result.errors]}"

    def test_empty_state_passes(self, validator):
        assert validator.validate(ScheduleState()).is_valid

    def test_counter_mismatch(self, validator, state):
        state.get_agent("A003").total = 2
        result = validator.validate(state)
        assert not result.is_valid
        assert ValidationErrorType.COUNTER_MISMATCH in self._error_types(result)
        assert any(e.agent_id == "A003" for e in result.errors)

    def test_negative_count(self, validator, state):
        agent = state.get_agent("A003")
        agent.assignments[Queue.PM_PGC] = -1
        agent.total = -1
        result = validator.validate_counters(state)
        assert ValidationErrorType.NEGATIVE_COUNT in self._error_types(result)

    def test_double_booking(self, validator, state):
        state.results[0].assignments[Queue.SV_NPGC] = ["Gin"]
        result = validator.validate(state)
        assert ValidationErrorType.DOUBLE_BOOKED in self._error_types(result)

    def test_recorded_overbooking_is_warning(self, validator, state):
        slot_result = state.results[0]
        slot_result.assignments[Queue.SV_NPGC] = ["Gin"]
        slot_result.overbooked = ["Gin"]
        state.get_agent("A002").decrement(Queue.SV_NPGC)
        state.get_agent("A001").increment(Queue.SV_NPGC)

        result = validator.validate(state)

        assert result.is_valid, f"Errors: {[str(e) for e in result.errors]}"
        assert any("overbooked" in w for w in result.warnings)

    def test_assigned_on_break(self, validator, state):
        state.set_breaks(
            "A001", [BreakSlot(id="L1", name="Lunch Break", start="12:00 PM", end="1:00 PM")]
        )
        result = validator.validate(state)
        assert ValidationErrorType.ASSIGNED_ON_BREAK in self._error_types(result)

    def test_break_check_can_be_disabled(self, state):
        state.set_breaks(
            "A001", [BreakSlot(id="L1", name="Lunch Break", start="12:00 PM", end="1:00 PM")]
        )
        assert ScheduleValidator(check_breaks=False).validate(state).is_valid

    def test_edited_result_may_seat_agent_on_break(self, validator, state):
        state.set_breaks(
            "A001", [BreakSlot(id="L1", name="Lunch Break", start="12:00 PM", end="1:00 PM")]
        )
        state.results[0].is_edited = True
        assert validator.validate(state).is_valid

    def test_unknown_agent(self, validator, state):
        state.results[0].assignments[Queue.PM_PGC] = ["Ghost"]
        result = validator.validate(state)
        assert ValidationErrorType.UNKNOWN_AGENT in self._error_types(result)

    def test_absent_agent_is_warning(self, validator, state):
        state.set_status("A001", AgentStatus.ABSENT)
        result = validator.validate(state)
        assert result.is_valid
        assert any("not present" in w for w in result.warnings)

    def test_underfilled_queue(self, validator, state):
        state.set_headcount(SLOT, Queue.LV_PGC, 2)
        result = validator.validate(state)
        assert ValidationErrorType.UNDERFILLED_QUEUE in self._error_types(result)

    def test_edited_result_may_be_underfilled(self, validator, state):
        state.set_headcount(SLOT, Queue.LV_PGC, 2)
        state.results[0].is_edited = True
        assert validator.validate(state).is_valid

    def test_warning_with_assignments(self, validator, state):
        state.results[0].warning = f"{SLOT}: Insufficient agents (Required: 2, Available: 1)"
        result = validator.validate(state)
        assert ValidationErrorType.WARNING_WITH_ASSIGNMENTS in self._error_types(result)

    def test_locked_without_result(self, validator, state):
        state.results = []
        state.get_agent("A001").reset_counters()
        state.get_agent("A002").reset_counters()
        result = validator.validate(state)
        assert self._error_types(result) == {ValidationErrorType.LOCKED_WITHOUT_RESULT}

    def test_error_str(self, validator, state):
        state.results[0].assignments[Queue.SV_NPGC] = ["Gin"]
        error = next(
            e for e in validator.validate(state).errors
            if e.error_type == ValidationErrorType.DOUBLE_BOOKED
        )
        text = str(error)
        assert text.startswith("[double_booked]")
        assert "A001" in text
        assert SLOT in text
