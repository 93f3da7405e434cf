"""Domain models for the segmentation system.

This module contains all core data structures used throughout the
segmentation system, including agents, queues, breaks, slot results and
the session state that ties them together.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from queueseg.domain.clock import is_valid_slot_label


class AgentStatus(Enum):
    """Attendance status of an agent for the day."""

    NA = "N/A"
    PRESENT = "PRESENT"
    OFF = "OFF"
    ABSENT = "ABSENT"
    PTO = "PTO"
    RDOT = "RDOT"  # Rest day overtime
    RD_SWAP = "RD SWAP"
    SME = "SME"


class Queue(Enum):
    """Service queues agents can be assigned to.

    Declaration order is the display order used by reports.
    """

    PM_PGC = "PM PGC"
    SV_PGC = "SV PGC"
    LV_PGC = "LV PGC"
    PM_NPGC = "PM NPGC"
    SV_NPGC = "SV NPGC"
    LV_NPGC = "LV NPGC"


DEFAULT_TIME_SLOTS = [
    "10:00 - 11:00",
    "11:00 - 12:00",
    "12:00 - 1:00",
    "1:00 - 2:00",
    "2:00 - 3:00",
    "3:00 - 4:00",
    "4:00 - 5:00",
    "5:00 - 6:00",
    "6:00 - 7:00",
]

REST_DAY_OPTIONS = [
    "Sun-Mon",
    "Mon-Tue",
    "Tue-Wed",
    "Wed-Thu",
    "Thu-Fri",
    "Fri-Sat",
    "Sat-Sun",
]


@dataclass
class Agent:
    """A staff member who can be assigned to queues.

    Attributes:
        id: Unique identifier for the agent.
        name: Full name as it appears on the roster.
        nickname: Display name used in segmentation output.
        rest_days: Rest day pair label (e.g., "Sun-Mon").
        status: Attendance status; only PRESENT agents are scheduled.
        assignments: Cumulative assignment count per queue for the session.
        total: Sum of all per-queue counts.
        productivity: Productivity percentage for the shift.
        sort_order: Position of the agent on the roster.
    """

    id: str
    name: str
    nickname: str = ""
    rest_days: str = "Sun-Mon"
    status: AgentStatus = AgentStatus.NA
    assignments: dict[Queue, int] = field(default_factory=dict)
    total: int = 0
    productivity: int = 0
    sort_order: int = 0

    def __post_init__(self):
        if not self.nickname:
            self.nickname = self.name

    @property
    def display_name(self) -> str:
        """Name shown in slot results."""
        return self.nickname

    @property
    def is_present(self) -> bool:
        """Whether the agent is eligible for assignment."""
        return self.status == AgentStatus.PRESENT

    def count(self, queue: Queue) -> int:
        """Get cumulative count for a queue."""
        return self.assignments.get(queue, 0)

    def combined_count(self, queues) -> int:
        """Sum of counts across a group of queues."""
        return sum(self.count(q) for q in queues)

    def increment(self, queue: Queue) -> None:
        """Record one assignment to a queue."""
        self.assignments[queue] = self.count(queue) + 1
        self.total += 1

    def decrement(self, queue: Queue) -> None:
        """Remove one assignment from a queue, floored at zero."""
        current = self.count(queue)
        if current <= 0:
            return
        self.assignments[queue] = current - 1
        self.total = max(0, self.total - 1)

    def reset_counters(self) -> None:
        """Zero all assignment history."""
        self.assignments = {}
        self.total = 0

    def counters_consistent(self) -> bool:
        """Check that total equals the sum of per-queue counts."""
        return self.total == sum(self.assignments.values())


@dataclass
class BreakSlot:
    """A named break interval with explicit AM/PM times.

    Attributes:
        id: Unique identifier for the break.
        name: Label (e.g., "Lunch Break").
        start: Start time label, e.g. "12:00 PM".
        end: End time label, e.g. "1:00 PM".
    """

    id: str
    name: str
    start: str
    end: str


@dataclass
class SegmentationResult:
    """Outcome of segmenting a single time slot.

    Either carries a warning (and no assignments) or a mapping of
    queue to assigned agent display names.

    Attributes:
        slot: Slot label.
        total_required: Sum of the slot's headcount requirements.
        assignments: Queue to ordered list of agent display names.
        warning: Insufficient-supply message, if any.
        locked: Whether the result is frozen against regeneration.
        is_edited: Whether the result was changed by a manual edit.
        overbooked: Display names placed in more than one queue by the
            fallback passes.
    """

    slot: str
    total_required: int
    assignments: dict[Queue, list[str]] = field(default_factory=dict)
    warning: Optional[str] = None
    locked: bool = False
    is_edited: bool = False
    overbooked: list[str] = field(default_factory=list)

    @property
    def is_warning(self) -> bool:
        """Whether this result is an insufficient-supply warning."""
        return self.warning is not None

    def assigned_names(self) -> list[str]:
        """All display names in this result, in queue order."""
        names = []
        for queue in Queue:
            names.extend(self.assignments.get(queue, []))
        return names


@dataclass
class SegmentationConfig:
    """Configuration for segmentation generation.

    Attributes:
        timezone_offset_hours: Fixed UTC offset used for "now" (Philippines).
        group_size: Number of queues treated as the hard and easy groups.
        quota_base: Hourly quota that corresponds to a weight of 1.0.
        weighted_total_tolerance: Differences in weighted totals at or
            below this are treated as ties.
        ending_soon_minutes: Window for the slot-ending-soon check.
        lock_warnings: Whether warning results are locked like assignments.
        seed: Optional seed for tie-breaking randomness.
    """

    timezone_offset_hours: int = 8
    group_size: int = 3
    quota_base: float = 50.0
    weighted_total_tolerance: float = 0.1
    ending_soon_minutes: int = 5
    lock_warnings: bool = False
    seed: Optional[int] = None


def _check_unique(agents: list[Agent]) -> None:
    """Raise ValueError if two agents share an ID or a display name."""
    ids = set()
    names = set()
    for agent in agents:
        if agent.id in ids:
            raise ValueError(f"Duplicate agent ID: {agent.id}")
        if agent.display_name in names:
            raise ValueError(f"Duplicate display name: {agent.display_name!r}")
        ids.add(agent.id)
        names.add(agent.display_name)


@dataclass
class ScheduleState:
    """Session state for a day of segmentation.

    This is the aggregate every operation reads and mutates; it is passed
    explicitly rather than held globally.

    Attributes:
        agents: Roster in display order.
        breaks: Agent ID to list of breaks.
        time_slots: Slot labels in user order.
        headcount: Slot label to queue requirement map.
        locked_slots: Labels of slots whose results are frozen.
        results: Slot results in slot order.
        productivity_quota: Shift productivity target in percent.
        has_generated: Whether generation has run since the last reset.
    """

    agents: list[Agent] = field(default_factory=list)
    breaks: dict[str, list[BreakSlot]] = field(default_factory=dict)
    time_slots: list[str] = field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    headcount: dict[str, dict[Queue, int]] = field(default_factory=dict)
    locked_slots: set[str] = field(default_factory=set)
    results: list[SegmentationResult] = field(default_factory=list)
    productivity_quota: int = 100
    has_generated: bool = False

    def __post_init__(self):
        _check_unique(self.agents)
        for slot in self.time_slots:
            self.headcount.setdefault(slot, {q: 0 for q in Queue})

    @property
    def present_agents(self) -> list[Agent]:
        """Agents eligible for assignment."""
        return [a for a in self.agents if a.is_present]

    def get_agent(self, agent_id: str) -> Agent:
        """Look up an agent by ID."""
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        raise KeyError(f"Unknown agent ID: {agent_id}")

    def find_agent_by_name(self, display_name: str) -> Optional[Agent]:
        """Resolve a display name from a slot result to an agent.

        Display names are unique on the roster, so slot results can refer to
        agents by name.
        """
        for agent in self.agents:
            if agent.display_name == display_name:
                return agent
        return None

    def get_result(self, slot: str) -> Optional[SegmentationResult]:
        """Get the stored result for a slot, if any."""
        for result in self.results:
            if result.slot == slot:
                return result
        return None

    def required_for(self, slot: str) -> dict[Queue, int]:
        """Headcount requirement map for a slot (zeros if unset)."""
        return self.headcount.get(slot, {})

    def total_required(self, slot: str) -> int:
        """Total headcount required for a slot."""
        return sum(self.required_for(slot).values())

    def is_locked(self, slot: str) -> bool:
        """Whether a slot's result is frozen."""
        return slot in self.locked_slots

    # Roster editing

    def add_agent(self, agent: Agent) -> Agent:
        """Append an agent to the roster."""
        _check_unique(self.agents + [agent])
        agent.sort_order = max((a.sort_order for a in self.agents), default=-1) + 1
        self.agents.append(agent)
        return agent

    def remove_agent(self, agent_id: str) -> None:
        """Remove an agent and their breaks."""
        agent = self.get_agent(agent_id)
        self.agents.remove(agent)
        self.breaks.pop(agent_id, None)

    def set_status(self, agent_id: str, status: AgentStatus) -> None:
        """Change an agent's attendance status."""
        self.get_agent(agent_id).status = status

    def set_breaks(self, agent_id: str, breaks: list[BreakSlot]) -> None:
        """Replace an agent's break list."""
        self.get_agent(agent_id)
        if breaks:
            self.breaks[agent_id] = list(breaks)
        else:
            self.breaks.pop(agent_id, None)

    def agents_below_quota(self) -> list[Agent]:
        """Present agents whose productivity is under the shift quota."""
        return [
            a for a in self.present_agents if a.productivity < self.productivity_quota
        ]

    def set_productivity_quota(self, quota: int) -> None:
        """Set the shift productivity target, clamped to 0-200."""
        self.productivity_quota = max(0, min(200, quota))

    # Board editing

    def add_time_slot(self, slot: str) -> bool:
        """Append a slot with zero headcount.

        Returns:
            True if added, False if the slot already exists.
        """
        if not is_valid_slot_label(slot):
            raise ValueError(f"Invalid time slot label: {slot!r}")
        if slot in self.time_slots:
            return False
        self.time_slots.append(slot)
        self.headcount[slot] = {q: 0 for q in Queue}
        return True

    def reorder_time_slots(self, new_order: list[str]) -> None:
        """Replace slot order with a permutation of the current slots."""
        if sorted(new_order) != sorted(self.time_slots):
            raise ValueError("New order must contain exactly the current slots")
        self.time_slots = list(new_order)

    def set_headcount(
        self, slot: str, queue: Queue, value: int, max_headcount: int = 99
    ) -> int:
        """Set a slot's requirement for a queue, clamped to [0, max_headcount].

        Returns:
            The stored (clamped) value.
        """
        if slot not in self.time_slots:
            raise KeyError(f"Unknown time slot: {slot}")
        clamped = max(0, min(max_headcount, value))
        self.headcount.setdefault(slot, {q: 0 for q in Queue})[queue] = clamped
        return clamped
