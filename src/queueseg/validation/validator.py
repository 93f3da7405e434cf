"""Validation module for verifying segmentation correctness.

This module provides a single source of truth for the invariants every
segmentation must hold. Generated and edited states should pass validation
before being persisted or displayed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from queueseg.domain.models import Queue, ScheduleState, SegmentationResult
from queueseg.scheduling.breaks import is_on_break


class ValidationErrorType(Enum):
    """Types of validation errors."""

    COUNTER_MISMATCH = "counter_mismatch"
    NEGATIVE_COUNT = "negative_count"
    DOUBLE_BOOKED = "double_booked"
    ASSIGNED_ON_BREAK = "assigned_on_break"
    UNKNOWN_AGENT = "unknown_agent"
    AGENT_NOT_PRESENT = "agent_not_present"
    UNDERFILLED_QUEUE = "underfilled_queue"
    WARNING_WITH_ASSIGNMENTS = "warning_with_assignments"
    LOCKED_WITHOUT_RESULT = "locked_without_result"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    agent_id: Optional[str] = None
    slot: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.agent_id:
            parts.append(f"Agent {self.agent_id}:")
        parts.append(self.message)
        if self.slot is not None:
            parts.append(f"(slot {self.slot})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a state."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class ScheduleValidator:
    """Validates a session state against segmentation invariants.

    Checks:
    - Every agent's total equals the sum of its per-queue counts
    - No agent appears in two queues of one slot (fallback overbooking
      that was recorded on the result is reported as a warning instead)
    - No agent is assigned during one of their breaks
    - Filled results meet their headcount

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(state)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(self, check_breaks: bool = True):
        self.check_breaks = check_breaks

    def validate(self, state: ScheduleState) -> ValidationResult:
        """Validate counters and every stored result."""
        result = ValidationResult(is_valid=True)

        self.validate_counters(state, result)

        for slot_result in state.results:
            self._validate_slot_result(slot_result, state, result)

        for slot in state.locked_slots:
            if state.get_result(slot) is None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.LOCKED_WITHOUT_RESULT,
                        message="Slot is locked but has no stored result",
                        slot=slot,
                    )
                )

        return result

    def validate_counters(
        self,
        state: ScheduleState,
        result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Check total == sum(per-queue counts) for every agent."""
        if result is None:
            result = ValidationResult(is_valid=True)

        for agent in state.agents:
            negative = {q.value: c for q, c in agent.assignments.items() if c < 0}
            if negative:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NEGATIVE_COUNT,
                        message=f"Negative queue counts: {negative}",
                        agent_id=agent.id,
                    )
                )
            if not agent.counters_consistent():
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.COUNTER_MISMATCH,
                        message=(
                            f"Total {agent.total} != sum of queue counts "
                            f"{sum(agent.assignments.values())}"
                        ),
                        agent_id=agent.id,
                    )
                )

        return result

    def _validate_slot_result(
        self,
        slot_result: SegmentationResult,
        state: ScheduleState,
        result: ValidationResult,
    ) -> None:
        """Validate a single slot result."""
        slot = slot_result.slot

        if slot_result.is_warning:
            if any(slot_result.assignments.get(q) for q in Queue):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.WARNING_WITH_ASSIGNMENTS,
                        message="Warning result also carries assignments",
                        slot=slot,
                    )
                )
            return

        seen: dict[str, Queue] = {}
        for queue in Queue:
            names = slot_result.assignments.get(queue, [])
            required = state.required_for(slot).get(queue, 0)
            if len(names) < required and not slot_result.is_edited:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNDERFILLED_QUEUE,
                        message=f"{queue.value} has {len(names)} of {required} required",
                        slot=slot,
                    )
                )

            for name in names:
                agent = state.find_agent_by_name(name)
                if agent is None:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.UNKNOWN_AGENT,
                            message=f"Unknown agent {name!r} in {queue.value}",
                            slot=slot,
                        )
                    )
                    continue

                if not agent.is_present and not slot_result.is_edited:
                    result.add_warning(
                        f"{slot}: {agent.display_name} is assigned but not present"
                    )

                if agent.id in seen:
                    if name in slot_result.overbooked:
                        result.add_warning(
                            f"{slot}: {name} overbooked in {seen[agent.id].value} "
                            f"and {queue.value}"
                        )
                    else:
                        result.add_error(
                            ValidationError(
                                error_type=ValidationErrorType.DOUBLE_BOOKED,
                                message=(
                                    f"Assigned to both {seen[agent.id].value} "
                                    f"and {queue.value}"
                                ),
                                agent_id=agent.id,
                                slot=slot,
                            )
                        )
                else:
                    seen[agent.id] = queue

                # Manual edits may seat a resting agent on purpose
                if (
                    self.check_breaks
                    and not slot_result.is_edited
                    and is_on_break(agent.id, slot, state.breaks)
                ):
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.ASSIGNED_ON_BREAK,
                            message=f"Assigned to {queue.value} during a break",
                            agent_id=agent.id,
                            slot=slot,
                        )
                    )
