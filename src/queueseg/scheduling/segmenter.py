"""Main segmentation interface.

This module provides the high-level Segmenter class that orchestrates
break purging, per-slot assignment passes, slot locking and the manual
edit and reset paths that keep agent counters consistent.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from queueseg.domain.clock import current_minutes, parse_slot_end_minutes
from queueseg.domain.models import (
    Queue,
    ScheduleState,
    SegmentationConfig,
    SegmentationResult,
)
from queueseg.domain.policies import (
    BreakPolicy,
    DefaultBreakPolicy,
    DefaultQueuePolicy,
    QueuePolicy,
)
from queueseg.scheduling.breaks import purge_expired_breaks, split_by_break
from queueseg.scheduling.slot_assigner import SlotAssigner

logger = logging.getLogger(__name__)


@dataclass
class SegmentationRun:
    """Summary of one generation run.

    Attributes:
        results: Results for every slot that has one, in slot order.
        generated_slots: Slots computed in this run.
        carried_slots: Locked slots carried forward unchanged.
        warnings: Warning messages produced in this run.
        overbooked: Slot label to display names double-booked in it.
        rotation_hint: Placements from the last processed slot.
    """

    results: list[SegmentationResult] = field(default_factory=list)
    generated_slots: list[str] = field(default_factory=list)
    carried_slots: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    overbooked: dict[str, list[str]] = field(default_factory=dict)
    rotation_hint: dict[str, Queue] = field(default_factory=dict)


class Segmenter:
    """High-level segmenter for a day's time slots.

    Slots are processed in their stored order as a fold: each slot's pass
    sees the counters and rotation hint left by all slots before it. Locked
    slots are history and are never recomputed.

    Example:
        >>> segmenter = Segmenter(rng=random.Random(42))
        >>> state = ScheduleState(agents=[...])
        >>> run = segmenter.generate(state)
    """

    def __init__(
        self,
        config: Optional[SegmentationConfig] = None,
        queue_policy: Optional[QueuePolicy] = None,
        break_policy: Optional[BreakPolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize segmenter with configuration and policies.

        Args:
            config: Generation settings.
            queue_policy: Queue difficulty and quota policy.
            break_policy: Break preset and naming policy.
            rng: Random source for tie-breaking; seeded from config if omitted.
        """
        self.config = config or SegmentationConfig()
        self.queue_policy = queue_policy or DefaultQueuePolicy(
            group_size=self.config.group_size
        )
        self.break_policy = break_policy or DefaultBreakPolicy()

        self.assigner = SlotAssigner(
            queue_policy=self.queue_policy,
            break_policy=self.break_policy,
            config=self.config,
            rng=rng or random.Random(self.config.seed),
        )

    def generate(
        self,
        state: ScheduleState,
        now_minutes: Optional[int] = None,
    ) -> SegmentationRun:
        """Generate results for every unlocked slot.

        Args:
            state: Session state, mutated in place.
            now_minutes: Local time used to purge expired breaks. Defaults
                to the current time at the configured offset.

        Returns:
            SegmentationRun describing what was computed.
        """
        if now_minutes is None:
            now_minutes = current_minutes(offset_hours=self.config.timezone_offset_hours)

        # Purge once per cycle, before any slot is processed
        state.breaks = purge_expired_breaks(state.breaks, now_minutes)

        present = state.present_agents
        run = SegmentationRun()
        hint: dict[str, Queue] = {}

        for slot in state.time_slots:
            if state.is_locked(slot):
                existing = state.get_result(slot)
                if existing is not None:
                    run.results.append(existing)
                    run.carried_slots.append(slot)
                    hint = self._hint_from_result(state, existing)
                    continue
                logger.warning("Slot %s is locked without a result; unlocking", slot)
                state.locked_slots.discard(slot)

            available, on_break = split_by_break(present, slot, state.breaks)
            outcome = self.assigner.assign_slot(
                slot,
                state.required_for(slot),
                available,
                on_break=on_break,
                rotation_hint=hint,
                breaks=state.breaks,
            )
            if outcome is None:
                continue

            locked = outcome.warning is None or self.config.lock_warnings
            result = outcome.to_result(locked=locked)
            if locked:
                state.locked_slots.add(slot)

            run.results.append(result)
            run.generated_slots.append(slot)
            if result.warning:
                run.warnings.append(result.warning)
                logger.info(result.warning)
            if result.overbooked:
                run.overbooked[slot] = list(result.overbooked)
            hint = dict(outcome.placements)

        run.rotation_hint = hint
        state.results = run.results
        state.has_generated = True

        logger.info(
            "Segmentation generated: %d computed, %d carried, %d warning(s)",
            len(run.generated_slots), len(run.carried_slots), len(run.warnings),
        )
        return run

    def generate_with_stats(
        self,
        state: ScheduleState,
        now_minutes: Optional[int] = None,
    ) -> tuple[SegmentationRun, dict]:
        """Generate results and return statistics.

        Returns:
            Tuple of (run, stats_dict).
        """
        run = self.generate(state, now_minutes)
        return run, self._calculate_stats(run, state)

    def _calculate_stats(self, run: SegmentationRun, state: ScheduleState) -> dict:
        """Calculate run statistics."""
        assigned_seats = sum(
            len(r.assigned_names()) for r in run.results if not r.is_warning
        )
        totals = [a.total for a in state.present_agents]

        return {
            "present_agents": len(state.present_agents),
            "total_slots": len(state.time_slots),
            "generated_slots": len(run.generated_slots),
            "carried_slots": len(run.carried_slots),
            "warning_slots": len(run.warnings),
            "assigned_seats": assigned_seats,
            "overbooked_slots": len(run.overbooked),
            "min_total": min(totals) if totals else 0,
            "max_total": max(totals) if totals else 0,
            "avg_total": sum(totals) / len(totals) if totals else 0,
        }

    def _hint_from_result(
        self,
        state: ScheduleState,
        result: SegmentationResult,
    ) -> dict[str, Queue]:
        """Rebuild the rotation hint from a stored result."""
        hint: dict[str, Queue] = {}
        for queue in self.queue_policy.difficulty_order():
            for name in result.assignments.get(queue, []):
                agent = state.find_agent_by_name(name)
                if agent is not None and agent.id not in hint:
                    hint[agent.id] = queue
        return hint

    def update_assignments(
        self,
        state: ScheduleState,
        slot: str,
        queue: Queue,
        new_names: list[str],
    ) -> SegmentationResult:
        """Replace a slot's list for one queue, adjusting counters.

        Added names gain one assignment for the queue, removed names lose
        one. This is the only way to change a locked slot short of a reset.

        Raises:
            ValueError: If the slot has no assignment result.
        """
        result = state.get_result(slot)
        if result is None or result.is_warning:
            raise ValueError(f"No assignments to edit for slot {slot}")

        old = Counter(result.assignments.get(queue, []))
        new = Counter(new_names)

        for name, count in (old - new).items():
            self._apply_delta(state, name, queue, -count)
        for name, count in (new - old).items():
            self._apply_delta(state, name, queue, count)

        result.assignments[queue] = list(new_names)
        result.is_edited = True
        return result

    def reset_slot(self, state: ScheduleState, slot: str) -> bool:
        """Discard a slot's result and unlock it.

        Every counter the slot contributed is decremented first.

        Returns:
            True if a stored result was discarded.
        """
        state.locked_slots.discard(slot)
        result = state.get_result(slot)
        if result is None:
            return False

        self._retract(state, result)
        state.results.remove(result)
        return True

    def remove_time_slot(self, state: ScheduleState, slot: str) -> None:
        """Remove a slot from the board, retracting its contributions."""
        if slot not in state.time_slots:
            raise KeyError(f"Unknown time slot: {slot}")
        self.reset_slot(state, slot)
        state.time_slots.remove(slot)
        state.headcount.pop(slot, None)

    def reset_all(self, state: ScheduleState) -> None:
        """Zero every agent's counters and clear all locks and results."""
        for agent in state.agents:
            agent.reset_counters()
        state.locked_slots.clear()
        state.results = []
        state.has_generated = False
        logger.info("Full reset: counters zeroed for %d agent(s)", len(state.agents))

    def slots_ending_soon(
        self,
        state: ScheduleState,
        now_minutes: Optional[int] = None,
    ) -> list[str]:
        """Locked slots ending within the configured window from now."""
        if now_minutes is None:
            now_minutes = current_minutes(offset_hours=self.config.timezone_offset_hours)

        ending = []
        for slot in state.time_slots:
            if not state.is_locked(slot):
                continue
            end = parse_slot_end_minutes(slot)
            if end is None:
                continue
            remaining = end - now_minutes
            if 0 < remaining <= self.config.ending_soon_minutes:
                ending.append(slot)
        return ending

    def _retract(self, state: ScheduleState, result: SegmentationResult) -> None:
        """Undo a result's counter contributions."""
        for queue, names in result.assignments.items():
            for name in names:
                self._apply_delta(state, name, queue, -1)

    def _apply_delta(
        self,
        state: ScheduleState,
        name: str,
        queue: Queue,
        delta: int,
    ) -> None:
        agent = state.find_agent_by_name(name)
        if agent is None:
            logger.warning("No agent named %r; counters for %s unchanged", name, queue.value)
            return
        for _ in range(abs(delta)):
            if delta > 0:
                agent.increment(queue)
            else:
                agent.decrement(queue)
