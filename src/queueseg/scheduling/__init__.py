"""Segmentation engine for assigning agents to queues."""

from queueseg.scheduling.breaks import (
    is_on_break,
    purge_expired_breaks,
    record_ad_hoc_break,
    split_by_break,
)
from queueseg.scheduling.segmenter import Segmenter, SegmentationRun
from queueseg.scheduling.slot_assigner import SlotAssigner, SlotAssignment

__all__ = [
    # Segmenter
    "Segmenter",
    "SegmentationRun",
    # Slot pass
    "SlotAssigner",
    "SlotAssignment",
    # Breaks
    "is_on_break",
    "purge_expired_breaks",
    "record_ad_hoc_break",
    "split_by_break",
]
