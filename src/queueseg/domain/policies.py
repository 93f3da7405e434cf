"""Policy definitions for segmentation rules.

This module contains configurable policies for queue difficulty, quota
weighting and break presets. Policies are kept separate from the
segmentation engine to allow independent testing and easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from queueseg.domain.models import Queue


@dataclass(frozen=True)
class QueueQuota:
    """Quota metadata for a queue.

    Quotas are weighting divisors for workload comparisons, not caps.

    Attributes:
        queue: The queue.
        display_name: Name used by the productivity tooling.
        target_quota: Items expected per shift.
        hourly_quota: Items expected per hour.
    """

    queue: Queue
    display_name: str
    target_quota: int
    hourly_quota: int


DEFAULT_QUEUE_QUOTAS = {
    Queue.SV_PGC: QueueQuota(Queue.SV_PGC, "SHORT_VideoPGC", 400, 53),
    Queue.SV_NPGC: QueueQuota(Queue.SV_NPGC, "SHORT_Video_NON_PGC", 400, 53),
    Queue.LV_PGC: QueueQuota(Queue.LV_PGC, "LONG_Video_PGC", 300, 40),
    Queue.LV_NPGC: QueueQuota(Queue.LV_NPGC, "LONG_Video_NON_PGC", 300, 40),
    Queue.PM_PGC: QueueQuota(Queue.PM_PGC, "PM PGC", 600, 80),
    Queue.PM_NPGC: QueueQuota(Queue.PM_NPGC, "PM NPGC", 600, 80),
}

DEFAULT_DIFFICULTY_ORDER = [
    Queue.LV_PGC,  # Hardest
    Queue.SV_PGC,  # Hard
    Queue.PM_PGC,  # Medium-Hard
    Queue.LV_NPGC,  # Medium
    Queue.PM_NPGC,  # Easy
    Queue.SV_NPGC,  # Easiest
]

DIFFICULTY_LABELS = ["Hardest", "Hard", "Medium-Hard", "Medium", "Easy", "Easiest"]


class QueuePolicy(ABC):
    """Abstract base class for queue difficulty and quota policies."""

    @abstractmethod
    def difficulty_order(self) -> list[Queue]:
        """All queues ordered hardest to easiest."""
        pass

    @abstractmethod
    def get_quota(self, queue: Queue) -> QueueQuota:
        """Get quota metadata for a queue."""
        pass

    @abstractmethod
    def hard_queues(self) -> list[Queue]:
        """Queues treated as the hard group."""
        pass

    @abstractmethod
    def easy_queues(self) -> list[Queue]:
        """Queues treated as the easy group."""
        pass

    def difficulty_rank(self, queue: Queue) -> int:
        """Zero-based rank, 0 being hardest."""
        return self.difficulty_order().index(queue)

    def difficulty_label(self, queue: Queue) -> str:
        """Human-readable difficulty for a queue."""
        return DIFFICULTY_LABELS[self.difficulty_rank(queue)]


@dataclass
class DefaultQueuePolicy(QueuePolicy):
    """Default queue policy.

    Difficulty (hardest first): LV PGC, SV PGC, PM PGC, LV NPGC, PM NPGC,
    SV NPGC. The three hardest form the hard group and the three easiest
    the easy group.
    """

    order: list[Queue] = field(default_factory=lambda: list(DEFAULT_DIFFICULTY_ORDER))
    quotas: dict[Queue, QueueQuota] = field(
        default_factory=lambda: dict(DEFAULT_QUEUE_QUOTAS)
    )
    group_size: int = 3

    def __post_init__(self):
        if sorted(q.value for q in self.order) != sorted(q.value for q in Queue):
            raise ValueError("Difficulty order must rank every queue exactly once")
        missing = [q for q in Queue if q not in self.quotas]
        if missing:
            raise ValueError(f"Missing quotas for: {', '.join(q.value for q in missing)}")

    def difficulty_order(self) -> list[Queue]:
        return list(self.order)

    def get_quota(self, queue: Queue) -> QueueQuota:
        return self.quotas[queue]

    def hard_queues(self) -> list[Queue]:
        return self.order[: self.group_size]

    def easy_queues(self) -> list[Queue]:
        return self.order[-self.group_size :]


@dataclass(frozen=True)
class BreakPreset:
    """A named break with default times."""

    name: str
    default_start: str
    default_end: str


class BreakPolicy(ABC):
    """Abstract base class for break presets and naming."""

    @abstractmethod
    def presets(self) -> list[BreakPreset]:
        """Preset breaks offered when adding a break."""
        pass

    @abstractmethod
    def ad_hoc_break_name(self) -> str:
        """Name given to breaks recorded for unassigned agents."""
        pass


@dataclass
class DefaultBreakPolicy(BreakPolicy):
    """Default break presets.

    - Early Break: 11:00 AM - 11:15 AM
    - Lunch Break: 12:00 PM - 1:00 PM
    - Late Break: 4:00 PM - 4:15 PM
    """

    ad_hoc_name: str = "Unassigned"

    def presets(self) -> list[BreakPreset]:
        return [
            BreakPreset("Early Break", "11:00 AM", "11:15 AM"),
            BreakPreset("Lunch Break", "12:00 PM", "1:00 PM"),
            BreakPreset("Late Break", "4:00 PM", "4:15 PM"),
        ]

    def ad_hoc_break_name(self) -> str:
        return self.ad_hoc_name

    def get_preset(self, name: str) -> BreakPreset:
        """Look up a preset by name."""
        for preset in self.presets():
            if preset.name == name:
                return preset
        raise KeyError(f"Unknown break preset: {name}")
