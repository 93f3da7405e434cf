"""Tests for agents and roster/board editing on the session state."""

import pytest

from queueseg.domain.models import (
    DEFAULT_TIME_SLOTS,
    Agent,
    AgentStatus,
    BreakSlot,
    Queue,
    ScheduleState,
    SegmentationResult,
)


class TestAgent:
    """Tests for Agent counters."""

    def test_nickname_defaults_to_name(self):
        agent = Agent(id="A001", name="JENNELYN DIAZ")
        assert agent.display_name == "JENNELYN DIAZ"
        assert Agent(id="A002", name="JENNELYN DIAZ", nickname="Jen").display_name == "Jen"

    def test_only_present_is_eligible(self):
        for status in AgentStatus:
            agent = Agent(id="A001", name="Gin", status=status)
            assert agent.is_present is (status == AgentStatus.PRESENT)

    def test_increment_and_decrement(self):
        agent = Agent(id="A001", name="Gin")
        agent.increment(Queue.LV_PGC)
        agent.increment(Queue.LV_PGC)
        agent.increment(Queue.SV_NPGC)
        assert agent.count(Queue.LV_PGC) == 2
        assert agent.total == 3

        agent.decrement(Queue.LV_PGC)
        assert agent.count(Queue.LV_PGC) == 1
        assert agent.total == 2
        assert agent.counters_consistent()

    def test_decrement_floored_at_zero(self):
        agent = Agent(id="A001", name="Gin")
        agent.increment(Queue.SV_PGC)
        agent.decrement(Queue.PM_PGC)
        assert agent.count(Queue.PM_PGC) == 0
        assert agent.total == 1

    def test_combined_count(self):
        agent = Agent(id="A001", name="Gin")
        agent.increment(Queue.LV_PGC)
        agent.increment(Queue.SV_PGC)
        agent.increment(Queue.SV_NPGC)
        assert agent.combined_count([Queue.LV_PGC, Queue.SV_PGC, Queue.PM_PGC]) == 2

    def test_reset_counters(self):
        agent = Agent(id="A001", name="Gin")
        agent.increment(Queue.LV_PGC)
        agent.reset_counters()
        assert agent.total == 0
        assert agent.assignments == {}


class TestRosterEditing:
    """Tests for agent and break editing on ScheduleState."""

    @pytest.fixture
    def state(self):
        state = ScheduleState()
        state.add_agent(Agent(id="A001", name="Gin", status=AgentStatus.PRESENT))
        state.add_agent(Agent(id="A002", name="Lyka", status=AgentStatus.OFF))
        return state

    def test_default_board(self, state):
        assert state.time_slots == DEFAULT_TIME_SLOTS
        assert all(state.total_required(s) == 0 for s in DEFAULT_TIME_SLOTS)

    def test_sort_order_assigned(self, state):
        agent = state.add_agent(Agent(id="A003", name="Caleb"))
        assert [a.sort_order for a in state.agents] == [0, 1, 2]
        assert agent.sort_order == 2

    def test_duplicate_id_rejected(self, state):
        with pytest.raises(ValueError):
            state.add_agent(Agent(id="A001", name="Other"))

    def test_present_agents(self, state):
        assert [a.id for a in state.present_agents] == ["A001"]
        state.set_status("A002", AgentStatus.PRESENT)
        assert [a.id for a in state.present_agents] == ["A001", "A002"]

    def test_unknown_agent(self, state):
        with pytest.raises(KeyError):
            state.get_agent("A999")
        with pytest.raises(KeyError):
            state.set_status("A999", AgentStatus.PRESENT)

    def test_remove_agent_drops_breaks(self, state):
        state.set_breaks("A001", [BreakSlot("L1", "Lunch Break", "12:00 PM", "1:00 PM")])
        state.remove_agent("A001")
        assert "A001" not in state.breaks
        assert [a.id for a in state.agents] == ["A002"]

    def test_set_breaks_empty_clears(self, state):
        state.set_breaks("A001", [BreakSlot("L1", "Lunch Break", "12:00 PM", "1:00 PM")])
        state.set_breaks("A001", [])
        assert state.breaks == {}

    def test_duplicate_display_name_rejected(self, state):
        with pytest.raises(ValueError, match="display name"):
            state.add_agent(Agent(id="A003", name="GIN SANTOS", nickname="Gin"))
        assert [a.id for a in state.agents] == ["A001", "A002"]

    def test_duplicate_names_rejected_on_construction(self):
        with pytest.raises(ValueError, match="display name"):
            ScheduleState(agents=[Agent(id="A001", name="Gin"), Agent(id="A002", name="Gin")])

    def test_find_by_name(self, state):
        assert state.find_agent_by_name("Gin").id == "A001"
        assert state.find_agent_by_name("Lyka").id == "A002"
        assert state.find_agent_by_name("Nobody") is None

    def test_productivity_quota(self, state):
        state.get_agent("A001").productivity = 95
        assert [a.id for a in state.agents_below_quota()] == ["A001"]
        state.set_productivity_quota(90)
        assert state.agents_below_quota() == []

    def test_productivity_quota_clamped(self, state):
        state.set_productivity_quota(500)
        assert state.productivity_quota == 200
        state.set_productivity_quota(-5)
        assert state.productivity_quota == 0


class TestBoardEditing:
    """Tests for time slot and headcount editing."""

    @pytest.fixture
    def state(self):
        return ScheduleState(time_slots=["10:00 - 11:00", "11:00 - 12:00"])

    def test_add_time_slot(self, state):
        assert state.add_time_slot("7:00 - 8:00") is True
        assert state.time_slots[-1] == "7:00 - 8:00"
        assert state.required_for("7:00 - 8:00") == {q: 0 for q in Queue}

    def test_add_duplicate_slot(self, state):
        assert state.add_time_slot("10:00 - 11:00") is False
        assert len(state.time_slots) == 2

    def test_add_invalid_slot(self, state):
        with pytest.raises(ValueError):
            state.add_time_slot("10:00-11:00")

    def test_reorder(self, state):
        state.reorder_time_slots(["11:00 - 12:00", "10:00 - 11:00"])
        assert state.time_slots == ["11:00 - 12:00", "10:00 - 11:00"]

    def test_reorder_rejects_other_sets(self, state):
        with pytest.raises(ValueError):
            state.reorder_time_slots(["11:00 - 12:00"])
        with pytest.raises(ValueError):
            state.reorder_time_slots(["11:00 - 12:00", "1:00 - 2:00"])

    def test_headcount_clamped(self, state):
        assert state.set_headcount("10:00 - 11:00", Queue.LV_PGC, 150) == 99
        assert state.set_headcount("10:00 - 11:00", Queue.SV_PGC, -3) == 0
        assert state.set_headcount("10:00 - 11:00", Queue.PM_PGC, 4) == 4
        assert state.total_required("10:00 - 11:00") == 103

    def test_headcount_unknown_slot(self, state):
        with pytest.raises(KeyError):
            state.set_headcount("3:00 - 4:00", Queue.LV_PGC, 1)

    def test_get_result_and_lock(self, state):
        state.results.append(SegmentationResult(slot="10:00 - 11:00", total_required=0))
        state.locked_slots.add("10:00 - 11:00")
        assert state.get_result("10:00 - 11:00") is state.results[0]
        assert state.get_result("11:00 - 12:00") is None
        assert state.is_locked("10:00 - 11:00")
        assert not state.is_locked("11:00 - 12:00")
