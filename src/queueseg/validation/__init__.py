"""Validation module for verifying segmentation correctness."""

from queueseg.validation.validator import ScheduleValidator, ValidationError

__all__ = [
    "ScheduleValidator",
    "ValidationError",
]
