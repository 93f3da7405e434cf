"""Break handling for segmentation.

Covers the three break concerns of a generation cycle:
1. Filtering agents whose breaks overlap a slot
2. Purging breaks that already ended
3. Recording ad hoc breaks for agents left unassigned in a slot
"""

import logging
import uuid
from typing import Optional

from queueseg.domain.clock import format_minutes, parse_slot_interval, parse_time_to_minutes
from queueseg.domain.models import Agent, BreakSlot

logger = logging.getLogger(__name__)


def is_on_break(
    agent_id: str,
    slot: str,
    breaks: dict[str, list[BreakSlot]],
) -> bool:
    """Check if any of an agent's breaks overlaps a slot.

    Overlap is half-open: a break ending exactly when the slot starts
    does not count.

    Args:
        agent_id: ID of the agent.
        slot: Slot label.
        breaks: Agent ID to list of breaks.

    Returns:
        True if the agent is unavailable for the slot.
    """
    agent_breaks = breaks.get(agent_id)
    if not agent_breaks:
        return False

    interval = parse_slot_interval(slot)
    if interval is None:
        return False

    for break_slot in agent_breaks:
        break_start = parse_time_to_minutes(break_slot.start)
        break_end = parse_time_to_minutes(break_slot.end)
        if interval.overlaps(break_start, break_end):
            return True

    return False


def split_by_break(
    agents: list[Agent],
    slot: str,
    breaks: dict[str, list[BreakSlot]],
) -> tuple[list[Agent], list[Agent]]:
    """Partition agents into (available, on_break) for a slot."""
    available = []
    on_break = []
    for agent in agents:
        if is_on_break(agent.id, slot, breaks):
            on_break.append(agent)
        else:
            available.append(agent)
    return available, on_break


def purge_expired_breaks(
    breaks: dict[str, list[BreakSlot]],
    now_minutes: int,
) -> dict[str, list[BreakSlot]]:
    """Drop breaks whose end time is at or before now.

    Agents left without any break are removed from the mapping.

    Args:
        breaks: Agent ID to list of breaks.
        now_minutes: Current local time in minutes since midnight.

    Returns:
        New mapping with only active breaks.
    """
    updated: dict[str, list[BreakSlot]] = {}
    removed = 0

    for agent_id, agent_breaks in breaks.items():
        active = [b for b in agent_breaks if parse_time_to_minutes(b.end) > now_minutes]
        removed += len(agent_breaks) - len(active)
        if active:
            updated[agent_id] = active

    if removed:
        logger.debug("Purged %d expired break(s) at %s", removed, format_minutes(now_minutes))

    return updated


def record_ad_hoc_break(
    breaks: dict[str, list[BreakSlot]],
    agent_id: str,
    slot: str,
    name: str = "Unassigned",
) -> Optional[BreakSlot]:
    """Record a break spanning exactly a slot for an unassigned agent.

    Args:
        breaks: Agent ID to list of breaks, updated in place.
        agent_id: ID of the agent left unassigned.
        slot: Slot label the agent is resting in.
        name: Name for the recorded break.

    Returns:
        The new BreakSlot, or None if the slot label is unparseable or the
        same interval is already recorded for the agent.
    """
    interval = parse_slot_interval(slot)
    if interval is None:
        logger.debug("Cannot record break for %s: bad slot label %r", agent_id, slot)
        return None

    start = format_minutes(interval.start)
    end = format_minutes(interval.end)

    agent_breaks = breaks.setdefault(agent_id, [])
    for existing in agent_breaks:
        if existing.start == start and existing.end == end:
            return None

    break_slot = BreakSlot(id=str(uuid.uuid4()), name=name, start=start, end=end)
    agent_breaks.append(break_slot)
    return break_slot
