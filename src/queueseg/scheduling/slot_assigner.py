"""Greedy slot assignment pass.

This module fills one time slot's per-queue headcount from the pool of
available agents:
1. Process queues hardest to easiest
2. Rank candidates by rotation, group load, weighted load and total
3. Fall back to agents already placed elsewhere when the pool runs dry
4. Record ad hoc breaks for agents left over
"""

import logging
import random
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Optional

from queueseg.domain.models import Agent, BreakSlot, Queue, SegmentationConfig, SegmentationResult
from queueseg.domain.policies import (
    BreakPolicy,
    DefaultBreakPolicy,
    DefaultQueuePolicy,
    QueuePolicy,
)
from queueseg.scheduling.breaks import record_ad_hoc_break

logger = logging.getLogger(__name__)


def _sign(value: float) -> int:
    if value < 0:
        return -1
    if value > 0:
        return 1
    return 0


@dataclass
class SlotAssignment:
    """Outcome of a single slot pass.

    Attributes:
        slot: Slot label.
        total_required: Sum of the slot's requirements.
        assignments: Queue to ordered list of assigned agents.
        warning: Insufficient-supply message, if the slot was not filled.
        unassigned: Available agents left without a queue.
        placements: Agent ID to the queue they landed in (next rotation hint).
        overbooked: Agents placed in more than one queue by fallback passes.
    """

    slot: str
    total_required: int
    assignments: dict[Queue, list[Agent]] = field(default_factory=dict)
    warning: Optional[str] = None
    unassigned: list[Agent] = field(default_factory=list)
    placements: dict[str, Queue] = field(default_factory=dict)
    overbooked: list[Agent] = field(default_factory=list)

    def to_result(self, locked: bool = False) -> SegmentationResult:
        """Convert to a stored result keyed by display names."""
        return SegmentationResult(
            slot=self.slot,
            total_required=self.total_required,
            assignments={
                queue: [a.display_name for a in agents]
                for queue, agents in self.assignments.items()
            },
            warning=self.warning,
            locked=locked,
            overbooked=[a.display_name for a in self.overbooked],
        )


class SlotAssigner:
    """Greedy per-slot assigner.

    Agents' cumulative counters are carried across slots by the caller and
    mutated in place as assignments are made, so later queues and later
    slots see the load produced by earlier ones.

    Example:
        >>> assigner = SlotAssigner(rng=random.Random(7))
        >>> outcome = assigner.assign_slot("10:00 - 11:00", requirement, agents)
    """

    def __init__(
        self,
        queue_policy: Optional[QueuePolicy] = None,
        break_policy: Optional[BreakPolicy] = None,
        config: Optional[SegmentationConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or SegmentationConfig()
        self.queue_policy = queue_policy or DefaultQueuePolicy(
            group_size=self.config.group_size
        )
        self.break_policy = break_policy or DefaultBreakPolicy()
        self.rng = rng or random.Random(self.config.seed)

    def assign_slot(
        self,
        slot: str,
        requirement: dict[Queue, int],
        available: list[Agent],
        on_break: Optional[list[Agent]] = None,
        rotation_hint: Optional[dict[str, Queue]] = None,
        breaks: Optional[dict[str, list[BreakSlot]]] = None,
    ) -> Optional[SlotAssignment]:
        """Run the full pass for one slot.

        Args:
            slot: Slot label.
            requirement: Queue to required headcount.
            available: Agents not on break for this slot.
            on_break: Agents on break, named in the warning text.
            rotation_hint: Agent ID to the queue held in the previous slot.
            breaks: Break mapping to record ad hoc breaks into.

        Returns:
            SlotAssignment, or None if nothing is required for the slot.
        """
        total_required = sum(requirement.get(q, 0) for q in Queue)
        if total_required == 0:
            return None

        if total_required > len(available):
            return SlotAssignment(
                slot=slot,
                total_required=total_required,
                warning=self._insufficient_warning(
                    slot, total_required, len(available), on_break or []
                ),
            )

        outcome = self.fill_queues(slot, requirement, available, rotation_hint)

        if breaks is not None:
            name = self.break_policy.ad_hoc_break_name()
            for agent in outcome.unassigned:
                record_ad_hoc_break(breaks, agent.id, slot, name)

        return outcome

    def fill_queues(
        self,
        slot: str,
        requirement: dict[Queue, int],
        available: list[Agent],
        rotation_hint: Optional[dict[str, Queue]] = None,
    ) -> SlotAssignment:
        """Fill every queue's requirement without the supply check.

        When the pool is smaller than the total requirement, the fallback
        passes place agents in a second queue. Each such placement is logged.
        """
        hint = rotation_hint or {}
        outcome = SlotAssignment(
            slot=slot,
            total_required=sum(requirement.get(q, 0) for q in Queue),
        )

        for queue in self.queue_policy.difficulty_order():
            required = requirement.get(queue, 0)
            assigned: list[Agent] = []
            outcome.assignments[queue] = assigned
            if required <= 0:
                continue

            # Primary pass: agents not yet placed this slot
            candidates = [a for a in available if a.id not in outcome.placements]
            for agent in self._rank_candidates(queue, candidates, hint)[:required]:
                self._place(outcome, queue, agent)

            # Fallback: agents already placed in another queue
            if len(assigned) < required:
                taken = {a.id for a in assigned}
                others = [
                    a for a in available
                    if a.id in outcome.placements and a.id not in taken
                ]
                for agent in self._rank_fallback(queue, others):
                    if len(assigned) >= required:
                        break
                    self._place(outcome, queue, agent)

            # Last resort: anyone not already in this queue. After the primary
            # and fallback passes no such agent is left, so this places nobody.
            if len(assigned) < required:
                taken = {a.id for a in assigned}
                remaining = [a for a in available if a.id not in taken]
                for agent in self._rank_candidates(queue, remaining, hint):
                    if len(assigned) >= required:
                        break
                    self._place(outcome, queue, agent)

            if len(assigned) < required:
                logger.warning(
                    "%s: %s short by %d (required %d, pool %d)",
                    slot, queue.value, required - len(assigned), required, len(available),
                )

        outcome.unassigned = [a for a in available if a.id not in outcome.placements]
        return outcome

    def _place(self, outcome: SlotAssignment, queue: Queue, agent: Agent) -> None:
        """Assign an agent to a queue and update counters."""
        outcome.assignments[queue].append(agent)
        agent.increment(queue)

        previous = outcome.placements.get(agent.id)
        if previous is None:
            outcome.placements[agent.id] = queue
            return

        if all(a.id != agent.id for a in outcome.overbooked):
            outcome.overbooked.append(agent)
        logger.warning(
            "%s: %s double-booked in %s and %s to meet headcount",
            outcome.slot, agent.display_name, previous.value, queue.value,
        )

    def _rank_candidates(
        self,
        queue: Queue,
        candidates: list[Agent],
        rotation_hint: dict[str, Queue],
    ) -> list[Agent]:
        """Order candidates best-first for a queue."""
        tiebreak = {a.id: self.rng.random() for a in candidates}

        def compare(a: Agent, b: Agent) -> int:
            return self._compare(a, b, queue, rotation_hint, tiebreak)

        return sorted(candidates, key=cmp_to_key(compare))

    def _compare(
        self,
        a: Agent,
        b: Agent,
        queue: Queue,
        rotation_hint: dict[str, Queue],
        tiebreak: dict[str, float],
    ) -> int:
        """Composite comparator; negative means a should be assigned first."""
        # Holding this queue last slot sorts later
        a_repeat = rotation_hint.get(a.id) == queue
        b_repeat = rotation_hint.get(b.id) == queue
        if a_repeat != b_repeat:
            return 1 if a_repeat else -1

        quota = self.queue_policy.get_quota(queue)
        base = self.config.quota_base

        hard = self.queue_policy.hard_queues()
        if queue in hard:
            diff = a.combined_count(hard) - b.combined_count(hard)
            if diff:
                return _sign(diff)
            weight = quota.hourly_quota / base
            diff = a.count(queue) * weight - b.count(queue) * weight
            if diff:
                return _sign(diff)

        easy = self.queue_policy.easy_queues()
        if queue in easy:
            diff = a.combined_count(easy) - b.combined_count(easy)
            if diff:
                return _sign(diff)

        factor = base / quota.hourly_quota
        diff = a.total * factor - b.total * factor
        if abs(diff) > self.config.weighted_total_tolerance:
            return _sign(diff)

        if a.total != b.total:
            return _sign(a.total - b.total)

        return _sign(tiebreak[a.id] - tiebreak[b.id])

    def _rank_fallback(self, queue: Queue, candidates: list[Agent]) -> list[Agent]:
        """Order fallback candidates by this-queue load, then total."""
        return sorted(
            candidates,
            key=lambda a: (a.count(queue), a.total, self.rng.random()),
        )

    def _insufficient_warning(
        self,
        slot: str,
        required: int,
        available: int,
        on_break: list[Agent],
    ) -> str:
        """Build the insufficient-agents message for a slot."""
        message = f"{slot}: Insufficient agents (Required: {required}, Available: {available})"
        if on_break:
            names = ", ".join(a.display_name for a in on_break)
            message += f" - On break: {names}"
        return message
