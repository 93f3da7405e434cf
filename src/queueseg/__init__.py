"""Queue segmentation for a team of review agents."""

__version__ = "0.1.0"
