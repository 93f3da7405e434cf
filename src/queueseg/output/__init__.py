"""Output generation for segmentation results (text, PDF)."""

from queueseg.output.pdf_generator import PDFGenerator
from queueseg.output.text_report import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
