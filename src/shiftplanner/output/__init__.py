"""Output generation for weekly summaries (PDF, text)."""

from shiftplanner.output.pdf_generator import SummaryPDFGenerator
from shiftplanner.output.text_generator import SummaryTextGenerator

__all__ = [
    "SummaryPDFGenerator",
    "SummaryTextGenerator",
]
