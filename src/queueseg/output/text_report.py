"""Text output for segmentation review.

This module creates plain-text output showing:
- Per-slot queue assignments and warnings
- Cumulative assignment history per agent
- Active breaks
"""

from pathlib import Path
from typing import Union

from queueseg.domain.models import Queue, ScheduleState


class TextReportGenerator:
    """Generates a plain-text segmentation report.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(state))
    """

    def __init__(self, width: int = 80):
        self.width = width

    def generate(self, state: ScheduleState, output_path: Union[str, Path]) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(state)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, state: ScheduleState) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(state)

    def _generate_content(self, state: ScheduleState) -> str:
        lines = []

        lines.append("=" * self.width)
        lines.append("QUEUE SEGMENTATION")
        lines.append("=" * self.width)
        lines.append(f"Present Agents: {len(state.present_agents)}")
        lines.append(f"Time Slots: {len(state.time_slots)} ({len(state.locked_slots)} locked)")
        lines.append("")

        lines.extend(self._segmentation_lines(state))
        lines.append("")
        lines.extend(self._history_lines(state))
        lines.append("")
        lines.extend(self._break_lines(state))

        return "\n".join(lines) + "\n"

    def _segmentation_lines(self, state: ScheduleState) -> list[str]:
        lines = ["-" * self.width, "SEGMENTATION OUTPUT", "-" * self.width]

        if not state.results:
            lines.append("No results. Set headcount for at least one time slot.")
            return lines

        for result in state.results:
            flags = []
            if result.locked:
                flags.append("locked")
            if result.is_edited:
                flags.append("edited")
            flag_str = f" [{', '.join(flags)}]" if flags else ""
            lines.append(f"{result.slot} (required {result.total_required}){flag_str}")

            if result.warning:
                lines.append(f"  WARNING: {result.warning}")
                continue

            for queue in Queue:
                names = result.assignments.get(queue, [])
                if names:
                    lines.append(f"  {queue.value:<8} {', '.join(names)}")
            if result.overbooked:
                lines.append(f"  Overbooked: {', '.join(result.overbooked)}")

        return lines

    def _history_lines(self, state: ScheduleState) -> list[str]:
        lines = ["-" * self.width, "ASSIGNMENT HISTORY", "-" * self.width]

        header = f"{'Agent':<14}" + "".join(f"{q.value:>9}" for q in Queue) + f"{'Total':>7}"
        lines.append(header)

        if not state.agents:
            lines.append("No agents to display")
            return lines

        for agent in state.agents:
            marker = "" if agent.is_present else "*"
            row = f"{(agent.display_name + marker)[:14]:<14}"
            row += "".join(f"{agent.count(q):>9}" for q in Queue)
            row += f"{agent.total:>7}"
            lines.append(row)

        if any(not a.is_present for a in state.agents):
            lines.append("* not present")

        return lines

    def _break_lines(self, state: ScheduleState) -> list[str]:
        lines = ["-" * self.width, "BREAKS", "-" * self.width]

        if not state.breaks:
            lines.append("No breaks scheduled")
            return lines

        for agent in state.agents:
            for break_slot in state.breaks.get(agent.id, []):
                lines.append(
                    f"  {agent.display_name:<14} {break_slot.name:<14} "
                    f"{break_slot.start} - {break_slot.end}"
                )

        return lines
