"""Persistence for segmentation session state.

The segmenter treats persistence as an external sink: callers load a
state, run operations on it and save it back. Two stores are provided,
an in-memory one for tests and embedding, and a JSON file store whose
document layout mirrors the application's saved app-state record.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from queueseg.domain.models import (
    Agent,
    AgentStatus,
    BreakSlot,
    Queue,
    ScheduleState,
    SegmentationResult,
)

logger = logging.getLogger(__name__)


class StateStoreError(Exception):
    """Raised when a stored state cannot be read or written."""


def _agent_to_dict(agent: Agent) -> dict:
    return {
        "id": agent.id,
        "name": agent.name,
        "nickname": agent.nickname,
        "restDays": agent.rest_days,
        "status": agent.status.value,
        "assignments": {q.value: c for q, c in agent.assignments.items()},
        "total": agent.total,
        "productivity": agent.productivity,
        "sortOrder": agent.sort_order,
    }


def _agent_from_dict(data: dict) -> Agent:
    return Agent(
        id=str(data["id"]),
        name=data["name"],
        nickname=data.get("nickname", ""),
        rest_days=data.get("restDays", "Sun-Mon"),
        status=AgentStatus(data.get("status", AgentStatus.NA.value)),
        assignments={Queue(q): int(c) for q, c in data.get("assignments", {}).items()},
        total=int(data.get("total", 0)),
        productivity=int(data.get("productivity", 0)),
        sort_order=int(data.get("sortOrder", 0)),
    )


def _result_to_dict(result: SegmentationResult) -> dict:
    data = {
        "slot": result.slot,
        "totalRequired": result.total_required,
        "assignments": {q.value: list(names) for q, names in result.assignments.items()},
        "locked": result.locked,
        "isEdited": result.is_edited,
    }
    if result.warning is not None:
        data["warning"] = result.warning
    if result.overbooked:
        data["overbooked"] = list(result.overbooked)
    return data


def _result_from_dict(data: dict) -> SegmentationResult:
    return SegmentationResult(
        slot=data["slot"],
        total_required=int(data.get("totalRequired", 0)),
        assignments={Queue(q): list(names) for q, names in data.get("assignments", {}).items()},
        warning=data.get("warning"),
        locked=bool(data.get("locked", False)),
        is_edited=bool(data.get("isEdited", False)),
        overbooked=list(data.get("overbooked", [])),
    )


def state_to_dict(state: ScheduleState) -> dict:
    """Serialize a state to a JSON-compatible dict."""
    return {
        "agents": [_agent_to_dict(a) for a in state.agents],
        "breakTimes": {
            agent_id: {
                "agentId": agent_id,
                "breaks": [
                    {"id": b.id, "name": b.name, "start": b.start, "end": b.end}
                    for b in breaks
                ],
            }
            for agent_id, breaks in state.breaks.items()
        },
        "timeSlots": list(state.time_slots),
        "headcountData": {
            slot: {q.value: n for q, n in reqs.items()}
            for slot, reqs in state.headcount.items()
        },
        # Sorted in slot order so documents diff cleanly
        "lockedSlots": [s for s in state.time_slots if s in state.locked_slots],
        "segmentationResults": [_result_to_dict(r) for r in state.results],
        "productivityQuota": state.productivity_quota,
        "hasGenerated": state.has_generated,
    }


def state_from_dict(data: dict) -> ScheduleState:
    """Build a state from a dict produced by state_to_dict."""
    if not isinstance(data, dict):
        raise StateStoreError(
            f"State document must be a JSON object, got {type(data).__name__}"
        )
    try:
        agents = [_agent_from_dict(a) for a in data.get("agents", [])]
        agents.sort(key=lambda a: a.sort_order)

        breaks = {}
        for agent_id, entry in data.get("breakTimes", {}).items():
            items = [
                BreakSlot(id=b["id"], name=b.get("name", "Break"), start=b["start"], end=b["end"])
                for b in entry.get("breaks", [])
            ]
            if items:
                breaks[agent_id] = items

        time_slots = list(data["timeSlots"]) if "timeSlots" in data else None
        headcount = {
            slot: {Queue(q): int(n) for q, n in reqs.items()}
            for slot, reqs in data.get("headcountData", {}).items()
        }

        kwargs = dict(
            agents=agents,
            breaks=breaks,
            headcount=headcount,
            locked_slots=set(data.get("lockedSlots", [])),
            results=[_result_from_dict(r) for r in data.get("segmentationResults", [])],
            productivity_quota=int(data.get("productivityQuota", 100)),
            has_generated=data.get("hasGenerated") in (True, "true"),
        )
        if time_slots is not None:
            kwargs["time_slots"] = time_slots
        return ScheduleState(**kwargs)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise StateStoreError(f"Invalid state document: {e}") from e


class StateStore(ABC):
    """Abstract base class for state persistence."""

    @abstractmethod
    def load(self) -> ScheduleState:
        """Load the stored state, or a default state if none exists."""
        pass

    @abstractmethod
    def save(self, state: ScheduleState) -> None:
        """Persist a state, replacing any previous one."""
        pass

    def reset(self) -> ScheduleState:
        """Replace the stored state with a fresh default state."""
        state = ScheduleState()
        self.save(state)
        return state


class MemoryStateStore(StateStore):
    """Keeps a serialized copy of the state in memory.

    Round-tripping through the dict form means callers never share
    objects with the store.
    """

    def __init__(self):
        self._data = None

    def load(self) -> ScheduleState:
        if self._data is None:
            return ScheduleState()
        return state_from_dict(self._data)

    def save(self, state: ScheduleState) -> None:
        self._data = state_to_dict(state)


class JsonStateStore(StateStore):
    """Stores the state as a JSON document on disk.

    Example:
        >>> store = JsonStateStore("state.json")
        >>> state = store.load()
        >>> store.save(state)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> ScheduleState:
        if not self.path.exists():
            logger.debug("No state file at %s; starting fresh", self.path)
            return ScheduleState()
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StateStoreError(f"Cannot read state file {self.path}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StateStoreError(f"Malformed state file {self.path}: {e}") from e
        return state_from_dict(data)

    def save(self, state: ScheduleState) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(state_to_dict(state), indent=2), encoding="utf-8")
        except OSError as e:
            raise StateStoreError(f"Cannot write state file {self.path}: {e}") from e
        logger.debug("Saved state to %s", self.path)
