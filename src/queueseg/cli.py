"""Command-line interface for the queue segmentation tool."""

import argparse
import logging
import random
import sys
from typing import Optional

from queueseg.domain.clock import parse_time_to_minutes
from queueseg.domain.models import (
    REST_DAY_OPTIONS,
    Agent,
    AgentStatus,
    BreakSlot,
    Queue,
    ScheduleState,
    SegmentationConfig,
)
from queueseg.domain.policies import DefaultBreakPolicy
from queueseg.output.pdf_generator import PDFGenerator
from queueseg.output.text_report import TextReportGenerator
from queueseg.scheduling.segmenter import Segmenter
from queueseg.storage.state_store import JsonStateStore, StateStoreError
from queueseg.validation.validator import ScheduleValidator

logger = logging.getLogger("queueseg")

SAMPLE_NAMES = [
    "Haerold", "Mathew", "Jennelyn", "Caleb", "Gin", "Lyka", "Russel",
    "James", "Lovely", "Aaron", "Thelma", "Ehrica", "Paolo", "Rica",
    "Bianca", "Marco", "Trisha", "Nico", "Jasmine", "Carlo",
]


def create_sample_state(count: int = 12) -> ScheduleState:
    """Create a sample board for trying the tool.

    Args:
        count: Number of agents on the roster.
    """
    state = ScheduleState()
    presets = DefaultBreakPolicy().presets()

    for i in range(count):
        name = SAMPLE_NAMES[i % len(SAMPLE_NAMES)]
        if i >= len(SAMPLE_NAMES):
            name = f"{name}{i // len(SAMPLE_NAMES) + 1}"

        # Roughly one in six is out for the day
        status = AgentStatus.OFF if i % 6 == 5 else AgentStatus.PRESENT
        state.add_agent(
            Agent(
                id=f"A{i + 1:03d}",
                name=name.upper(),
                nickname=name,
                rest_days=REST_DAY_OPTIONS[i % len(REST_DAY_OPTIONS)],
                status=status,
            )
        )

        # Stagger preset breaks across the roster
        preset = presets[i % len(presets)]
        state.set_breaks(
            f"A{i + 1:03d}",
            [BreakSlot(id=f"B{i + 1:03d}", name=preset.name,
                       start=preset.default_start, end=preset.default_end)],
        )

    present = len(state.present_agents)
    hard_seats = max(1, present // 4)
    for slot in state.time_slots:
        state.set_headcount(slot, Queue.LV_PGC, hard_seats)
        state.set_headcount(slot, Queue.SV_PGC, 1)
        state.set_headcount(slot, Queue.PM_NPGC, 1)
        state.set_headcount(slot, Queue.SV_NPGC, max(0, present // 3 - hard_seats))

    return state


def _print_validation(state: ScheduleState) -> bool:
    result = ScheduleValidator().validate(state)
    if result.is_valid:
        print("\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:3]:
            print(f"    - {warning}")
    return result.is_valid


def _build_segmenter(seed: Optional[int]) -> Segmenter:
    config = SegmentationConfig(seed=seed)
    return Segmenter(config=config, rng=random.Random(seed))


def _now_minutes(now: Optional[str]) -> Optional[int]:
    if now is None:
        return None
    return parse_time_to_minutes(now)


def run_demo(
    agent_count: int = 12,
    seed: Optional[int] = None,
    output_path: Optional[str] = None,
    now: Optional[str] = None,
) -> int:
    """Run a demo segmentation on a sample board."""
    print(f"Generating demo segmentation for {agent_count} agents...")

    state = create_sample_state(agent_count)
    segmenter = _build_segmenter(seed)
    _, stats = segmenter.generate_with_stats(state, _now_minutes(now) or 0)

    print(f"  Present: {stats['present_agents']}")
    print(f"  Slots generated: {stats['generated_slots']}, warnings: {stats['warning_slots']}")
    print(f"  Totals: min={stats['min_total']}, max={stats['max_total']}, "
          f"avg={stats['avg_total']:.1f}")
    print()
    print(TextReportGenerator().generate_to_string(state))

    valid = _print_validation(state)

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(state, output_path)
        print("  PDF created successfully!")

    return 0 if valid else 1


def run_generate(
    state_path: str,
    seed: Optional[int] = None,
    now: Optional[str] = None,
) -> int:
    """Generate unlocked slots of a stored board and save it back."""
    store = JsonStateStore(state_path)
    state = store.load()

    segmenter = _build_segmenter(seed)
    run = segmenter.generate(state, _now_minutes(now))
    store.save(state)

    if run.warnings:
        print(f"Generated with {len(run.warnings)} warning(s):")
        for warning in run.warnings:
            print(f"  - {warning}")
    elif run.results:
        print("All time slots have been assigned successfully.")
    else:
        print("No assignments made. Set headcount for at least one time slot.")

    for slot, names in run.overbooked.items():
        print(f"  ! {slot}: double-booked {', '.join(names)}")

    ending = segmenter.slots_ending_soon(state, _now_minutes(now))
    for slot in ending:
        print(f"Time slot {slot} is ending soon; prepare the next segmentation.")

    return 0 if _print_validation(state) else 1


def run_edit(state_path: str, slot: str, queue: str, names: list[str]) -> int:
    """Replace one queue's agents in a slot."""
    store = JsonStateStore(state_path)
    state = store.load()
    result = Segmenter().update_assignments(state, slot, Queue(queue), names)
    store.save(state)
    print(f"{slot} {queue}: {', '.join(result.assignments[Queue(queue)]) or '(none)'}")
    return 0


def run_reset_slot(state_path: str, slot: str) -> int:
    """Discard a slot's result and unlock it."""
    store = JsonStateStore(state_path)
    state = store.load()
    removed = Segmenter().reset_slot(state, slot)
    store.save(state)
    print(f"{slot}: {'reset' if removed else 'no result to reset'}")
    return 0


def run_reset(state_path: str) -> int:
    """Zero all counters and clear all locks."""
    store = JsonStateStore(state_path)
    state = store.load()
    Segmenter().reset_all(state)
    store.save(state)
    print("All agent counters and slot locks cleared.")
    return 0


def run_report(state_path: str, output_path: Optional[str] = None) -> int:
    """Print a stored board, optionally as PDF."""
    state = JsonStateStore(state_path).load()
    if output_path:
        PDFGenerator().generate(state, output_path)
        print(f"PDF written to {output_path}")
    else:
        print(TextReportGenerator().generate_to_string(state))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Queue Segmentation - assign present agents to queues by time slot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Run demo with 12 agents
  %(prog)s demo --count 20 --seed 7      Reproducible demo with 20 agents
  %(prog)s demo --output seg.pdf         Also write a PDF

  %(prog)s generate --state board.json   Fill unlocked slots and save
  %(prog)s edit --state board.json --slot "1:00 - 2:00" --queue "LV PGC" Gin Lyka
  %(prog)s reset-slot --state board.json --slot "1:00 - 2:00"
  %(prog)s reset --state board.json      Zero counters, clear locks
  %(prog)s report --state board.json --output seg.pdf
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Run demo segmentation")
    demo_parser.add_argument(
        "--count", "-c", type=int, default=12,
        help="Number of agents to generate (default: 12)",
    )
    demo_parser.add_argument("--seed", type=int, help="Seed for tie-breaking")
    demo_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    demo_parser.add_argument("--now", type=str, help='Override local time, e.g. "9:00 AM"')

    generate_parser = subparsers.add_parser("generate", help="Generate unlocked slots")
    generate_parser.add_argument("--state", "-s", required=True, help="State JSON file")
    generate_parser.add_argument("--seed", type=int, help="Seed for tie-breaking")
    generate_parser.add_argument("--now", type=str, help='Override local time, e.g. "9:00 AM"')

    edit_parser = subparsers.add_parser("edit", help="Edit one queue in a slot")
    edit_parser.add_argument("--state", "-s", required=True, help="State JSON file")
    edit_parser.add_argument("--slot", required=True, help="Slot label")
    edit_parser.add_argument(
        "--queue", required=True, choices=[q.value for q in Queue], help="Queue name",
    )
    edit_parser.add_argument("agents", nargs="*", help="Agent display names")

    reset_slot_parser = subparsers.add_parser("reset-slot", help="Reset and unlock a slot")
    reset_slot_parser.add_argument("--state", "-s", required=True, help="State JSON file")
    reset_slot_parser.add_argument("--slot", required=True, help="Slot label")

    reset_parser = subparsers.add_parser("reset", help="Zero counters and clear locks")
    reset_parser.add_argument("--state", "-s", required=True, help="State JSON file")

    report_parser = subparsers.add_parser("report", help="Print or export a board")
    report_parser.add_argument("--state", "-s", required=True, help="State JSON file")
    report_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            return run_demo(args.count, args.seed, args.output, args.now)
        elif args.command == "generate":
            return run_generate(args.state, args.seed, args.now)
        elif args.command == "edit":
            return run_edit(args.state, args.slot, args.queue, args.agents)
        elif args.command == "reset-slot":
            return run_reset_slot(args.state, args.slot)
        elif args.command == "reset":
            return run_reset(args.state)
        elif args.command == "report":
            return run_report(args.state, args.output)
        else:
            parser.print_help()
            return 1
    except (StateStoreError, ValueError, KeyError, ImportError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
