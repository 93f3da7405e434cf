"""Domain models and business rules for segmentation."""

from queueseg.domain.clock import SlotInterval
from queueseg.domain.models import (
    Agent,
    AgentStatus,
    BreakSlot,
    Queue,
    ScheduleState,
    SegmentationConfig,
    SegmentationResult,
)
from queueseg.domain.policies import (
    BreakPolicy,
    BreakPreset,
    DefaultBreakPolicy,
    DefaultQueuePolicy,
    QueuePolicy,
    QueueQuota,
)

__all__ = [
    # Models
    "Agent",
    "AgentStatus",
    "BreakSlot",
    "Queue",
    "ScheduleState",
    "SegmentationConfig",
    "SegmentationResult",
    "SlotInterval",
    # Policies
    "BreakPolicy",
    "BreakPreset",
    "DefaultBreakPolicy",
    "DefaultQueuePolicy",
    "QueuePolicy",
    "QueueQuota",
]
