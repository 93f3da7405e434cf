"""Tests for the text report and PDF output."""

import random

import pytest

from queueseg.domain.models import Agent, AgentStatus, BreakSlot, Queue, ScheduleState
from queueseg.output.pdf_generator import PDFGenerator, _cell_lines
from queueseg.output.text_report import TextReportGenerator
from queueseg.scheduling.segmenter import Segmenter


@pytest.fixture
def state():
    state = ScheduleState(time_slots=["10:00 - 11:00", "11:00 - 12:00", "12:00 - 1:00"])
    for agent_id, name in (("A001", "Gin"), ("A002", "Lyka"), ("A003", "Caleb")):
        state.add_agent(Agent(id=agent_id, name=name, status=AgentStatus.PRESENT))
    state.add_agent(Agent(id="A004", name="Thelma", status=AgentStatus.PTO))
    state.set_breaks(
        "A003", [BreakSlot(id="L1", name="Lunch Break", start="12:00 PM", end="1:00 PM")]
    )
    state.set_headcount("10:00 - 11:00", Queue.LV_PGC, 1)
    state.set_headcount("10:00 - 11:00", Queue.SV_NPGC, 2)
    state.set_headcount("12:00 - 1:00", Queue.LV_PGC, 3)
    Segmenter(rng=random.Random(6)).generate(state, now_minutes=0)
    return state


class TestTextReport:
    """Tests for TextReportGenerator."""

    def test_sections(self, state):
        text = TextReportGenerator().generate_to_string(state)
        assert "QUEUE SEGMENTATION" in text
        assert "SEGMENTATION OUTPUT" in text
        assert "ASSIGNMENT HISTORY" in text
        assert "BREAKS" in text

    def test_slot_lines(self, state):
        text = TextReportGenerator().generate_to_string(state)
        assert "10:00 - 11:00 (required 3) [locked]" in text
        assert "LV PGC" in text
        assert "WARNING: 12:00 - 1:00: Insufficient agents (Required: 3, Available: 2)" in text

    def test_absent_marker(self, state):
        text = TextReportGenerator().generate_to_string(state)
        assert "Thelma*" in text
        assert "* not present" in text

    def test_breaks_listed(self, state):
        text = TextReportGenerator().generate_to_string(state)
        assert "Lunch Break" in text
        assert "12:00 PM - 1:00 PM" in text

    def test_empty_state(self):
        text = TextReportGenerator().generate_to_string(ScheduleState())
        assert "No results" in text
        assert "No agents to display" in text
        assert "No breaks scheduled" in text

    def test_write_file(self, state, tmp_path):
        path = tmp_path / "report.txt"
        content = TextReportGenerator(width=60).generate(state, path)
        assert path.read_text() == content
        assert content.startswith("=" * 60)


class TestPDFGenerator:
    """Tests for PDFGenerator."""

    def test_generate_to_buffer(self, state):
        pytest.importorskip("reportlab")
        buffer = PDFGenerator().generate_to_buffer(state)
        assert buffer.read(5) == b"%PDF-"

    def test_generate_file(self, state, tmp_path):
        pytest.importorskip("reportlab")
        path = tmp_path / "segmentation.pdf"
        PDFGenerator().generate(state, path, include_history=False)
        assert path.stat().st_size > 0

    def test_empty_state(self):
        pytest.importorskip("reportlab")
        buffer = PDFGenerator().generate_to_buffer(ScheduleState())
        assert buffer.getvalue().startswith(b"%PDF-")

    def test_large_queue_renders(self):
        pytest.importorskip("reportlab")
        state = ScheduleState(time_slots=["10:00 - 11:00"])
        for i in range(12):
            state.add_agent(Agent(id=f"A{i:03d}", name=f"Agent {i}", status=AgentStatus.PRESENT))
        state.set_headcount("10:00 - 11:00", Queue.SV_NPGC, 12)
        Segmenter(rng=random.Random(3)).generate(state, now_minutes=0)
        buffer = PDFGenerator().generate_to_buffer(state)
        assert buffer.getvalue().startswith(b"%PDF-")


class TestCellLines:
    """Tests for wrapping queue names into grid cells."""

    def test_fits(self):
        assert _cell_lines(["Gin", "Lyka", "Caleb"]) == ["Gin, Lyka", "Caleb"]

    def test_exactly_full(self):
        names = [f"N{i}" for i in range(6)]
        assert _cell_lines(names) == ["N0, N1", "N2, N3", "N4, N5"]

    def test_overflow_summarised(self):
        names = [f"N{i}" for i in range(12)]
        lines = _cell_lines(names)
        assert lines == ["N0, N1", "N2, N3", "N4, +7 more"]

    def test_custom_shape(self):
        names = [f"N{i}" for i in range(20)]
        lines = _cell_lines(names, per_line=3, max_lines=3)
        assert len(lines) == 3
        assert lines[-1] == "N6, N7, +12 more"

    def test_empty(self):
        assert _cell_lines([]) == []
