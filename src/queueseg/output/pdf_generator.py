"""PDF generation for segmentation output.

This module creates printable PDF pages showing:
- The segmentation grid (slots by queues) with warnings
- Cumulative assignment history per agent
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from queueseg.domain.models import Queue, ScheduleState

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    Queue.LV_PGC: (0.85, 0.35, 0.35),  # Red, hardest
    Queue.SV_PGC: (0.9, 0.55, 0.3),  # Orange
    Queue.PM_PGC: (0.9, 0.75, 0.3),  # Amber
    Queue.LV_NPGC: (0.9, 0.85, 0.4),  # Yellow
    Queue.PM_NPGC: (0.65, 0.8, 0.4),  # Lime
    Queue.SV_NPGC: (0.45, 0.75, 0.45),  # Green, easiest
    "warning": (1.0, 0.85, 0.85),
    "locked": (0.92, 0.92, 0.97),
    "header": (0.85, 0.85, 0.85),
}


def _load_canvas():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


def _cell_lines(names: list[str], per_line: int = 2, max_lines: int = 3) -> list[str]:
    """Wrap a queue's names into grid cell lines.

    Names that do not fit are summarised as "+N more" on the last line.
    """
    capacity = per_line * max_lines
    shown = names if len(names) <= capacity else names[: capacity - 1]
    lines = [", ".join(shown[i : i + per_line]) for i in range(0, len(shown), per_line)]
    hidden = len(names) - len(shown)
    if hidden:
        more = f"+{hidden} more"
        if lines:
            lines[-1] += f", {more}"
        else:
            lines.append(more)
    return lines


class PDFGenerator:
    """Generates printable PDF segmentation sheets.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(state, "segmentation.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        title: str = "Queue Segmentation",
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.title = title

    def generate(
        self,
        state: ScheduleState,
        output_path: Union[str, Path],
        include_history: bool = True,
    ) -> None:
        """Generate the PDF and save it to a file.

        Args:
            state: Session state to render.
            output_path: Path to save the PDF.
            include_history: Whether to add the assignment history page.
        """
        canvas, pagesize = _load_canvas()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, state, include_history)
        c.save()

    def generate_to_buffer(
        self,
        state: ScheduleState,
        include_history: bool = True,
    ) -> BytesIO:
        """Generate the PDF and return it as a bytes buffer."""
        canvas, pagesize = _load_canvas()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, state, include_history)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, state: ScheduleState, include_history: bool) -> None:
        self._draw_segmentation_page(c, state)
        if include_history:
            self._draw_history_page(c, state)

    def _draw_header(self, c, text: str, subtitle: str) -> None:
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, text)
        c.setFont("Helvetica", 10)
        c.drawString(self.margin, self.page_height - self.margin - 35, subtitle)

    def _draw_segmentation_page(self, c, state: ScheduleState) -> None:
        """Draw the slot by queue grid."""
        self._draw_header(
            c,
            self.title,
            f"Present Agents: {len(state.present_agents)}  "
            f"Slots: {len(state.results)} with results",
        )

        slot_col = 90
        queues = list(Queue)
        col_width = (self.page_width - 2 * self.margin - slot_col) / len(queues)
        row_height = 40
        top = self.page_height - self.margin - 60

        # Header row
        y = top - 18
        c.setFont("Helvetica-Bold", 9)
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y, slot_col, 18, fill=1, stroke=1)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(self.margin + 4, y + 5, "Time Slot")
        for i, queue in enumerate(queues):
            x = self.margin + slot_col + i * col_width
            c.setFillColorRGB(*COLORS[queue])
            c.rect(x, y, col_width, 18, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawCentredString(x + col_width / 2, y + 5, queue.value)

        if not state.results:
            c.setFont("Helvetica", 10)
            c.drawString(self.margin, y - 25, "No results generated.")
            c.showPage()
            return

        for result in state.results:
            if y - row_height < self.margin + 20:
                c.showPage()
                y = self.page_height - self.margin
            y -= row_height

            fill = COLORS["warning"] if result.warning else (
                COLORS["locked"] if result.locked else (1, 1, 1)
            )
            c.setFillColorRGB(*fill)
            c.rect(self.margin, y, self.page_width - 2 * self.margin, row_height, fill=1, stroke=1)

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            c.drawString(self.margin + 4, y + row_height - 12, result.slot)
            c.setFont("Helvetica", 7)
            c.drawString(self.margin + 4, y + row_height - 24, f"Req: {result.total_required}")

            if result.warning:
                c.setFont("Helvetica-Oblique", 8)
                c.drawString(self.margin + slot_col + 4, y + row_height / 2 - 3, result.warning[:110])
                continue

            c.setFont("Helvetica", 7)
            for i, queue in enumerate(queues):
                x = self.margin + slot_col + i * col_width
                names = result.assignments.get(queue, [])
                for line_no, line in enumerate(_cell_lines(names)):
                    c.drawString(x + 3, y + row_height - 11 - line_no * 10, line)

        c.showPage()

    def _draw_history_page(self, c, state: ScheduleState) -> None:
        """Draw cumulative counts per agent."""
        self._draw_header(c, "Assignment History", f"Agents: {len(state.agents)}")

        name_col = 140
        queues = list(Queue)
        col_width = (self.page_width - 2 * self.margin - name_col) / (len(queues) + 1)
        row_height = 16
        y = self.page_height - self.margin - 60 - row_height

        c.setFont("Helvetica-Bold", 9)
        c.drawString(self.margin + 4, y + 4, "Agent")
        for i, queue in enumerate(queues):
            c.drawCentredString(
                self.margin + name_col + (i + 0.5) * col_width, y + 4, queue.value
            )
        c.drawCentredString(
            self.margin + name_col + (len(queues) + 0.5) * col_width, y + 4, "Total"
        )

        c.setFont("Helvetica", 9)
        for agent in state.agents:
            if y - row_height < self.margin:
                c.showPage()
                c.setFont("Helvetica", 9)
                y = self.page_height - self.margin
            y -= row_height

            # Grey out agents who are not present
            shade = 0 if agent.is_present else 0.6
            c.setFillColorRGB(shade, shade, shade)
            c.drawString(self.margin + 4, y + 4, agent.display_name[:24])
            for i, queue in enumerate(queues):
                c.drawCentredString(
                    self.margin + name_col + (i + 0.5) * col_width,
                    y + 4,
                    str(agent.count(queue)),
                )
            c.drawCentredString(
                self.margin + name_col + (len(queues) + 0.5) * col_width,
                y + 4,
                str(agent.total),
            )

        c.showPage()
