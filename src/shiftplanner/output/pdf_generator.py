"""PDF generation for weekly shift summaries.

This module creates a printable one-page summary showing:
- The employee, week and weekly totals
- One timeline row per day with ordinary, extra and lunch blocks
- Per-day ordinary/extra hours and the lunch window
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from shiftplanner.domain.models import (
    BlockType,
    DaySummary,
    WeeklySummary,
    format_hours,
)

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    BlockType.ORDINARY: (0.4, 0.7, 0.4),  # Green
    BlockType.EXTRA: (0.8, 0.6, 0.2),  # Orange
    "lunch": (1.0, 0.9, 0.5),  # Yellow
    "day_off": (0.85, 0.85, 0.95),  # Light blue
    "free": (0.95, 0.95, 0.95),  # Light gray
}

DAY_MINUTES = 24 * 60


def _minutes(hhmm: str) -> int:
    hours, mins = hhmm.split(":")
    return int(hours) * 60 + int(mins)


class SummaryPDFGenerator:
    """Generates a printable PDF of a weekly summary.

    Example:
        >>> generator = SummaryPDFGenerator()
        >>> generator.generate(summary, "week.pdf", employee_name="Ana Ruiz")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        summary: WeeklySummary,
        output_path: Union[str, Path],
        employee_name: Optional[str] = None,
    ) -> None:
        """Generate the PDF and save it to a file.

        Args:
            summary: The weekly summary to render.
            output_path: Path to save the PDF.
            employee_name: Name shown in the header (defaults to the ID).
        """
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw_page(c, summary, employee_name)
        c.save()

    def generate_to_buffer(
        self,
        summary: WeeklySummary,
        employee_name: Optional[str] = None,
    ) -> BytesIO:
        """Generate the PDF and return it as a bytes buffer."""
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw_page(c, summary, employee_name)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw_page(self, c, summary: WeeklySummary, employee_name: Optional[str]) -> None:
        header_height = 70
        row_height = 52
        label_width = 110
        hours_width = 150

        timeline_left = self.margin + label_width
        timeline_right = self.page_width - self.margin - hours_width
        timeline_width = timeline_right - timeline_left

        self._draw_header(c, summary, employee_name)

        axis_y = self.page_height - self.margin - header_height
        self._draw_time_axis(c, timeline_left, axis_y, timeline_width)

        y = axis_y - 10
        for day in summary.days:
            y -= row_height
            self._draw_day_row(
                c, day, timeline_left, timeline_width, y, row_height - 10
            )

        self._draw_legend(c, self.margin, self.margin)
        c.showPage()

    def _draw_header(self, c, summary: WeeklySummary, employee_name: Optional[str]) -> None:
        """Draw title, week range and totals."""
        name = employee_name or summary.employee_id
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Weekly Shift Summary - {name}",
        )

        c.setFont("Helvetica", 10)
        week = (
            f"{summary.week_start.strftime('%d %b %Y')} - "
            f"{summary.week_end.strftime('%d %b %Y')}"
        )
        if summary.day_off:
            week += f"   Day off: {summary.day_off.display_name}"
        c.drawString(self.margin, self.page_height - self.margin - 36, week)

        c.drawString(
            self.margin,
            self.page_height - self.margin - 50,
            f"Ordinary: {format_hours(summary.ordinary_hours)} h   "
            f"Extra: {format_hours(summary.extra_hours)} h   "
            f"Total: {format_hours(summary.total_hours)} h",
        )

    def _draw_time_axis(self, c, x: float, y: float, width: float) -> None:
        """Draw hour markers every two hours."""
        c.setFont("Helvetica", 7)
        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        for hour in range(0, 25, 2):
            hx = x + width * hour / 24
            c.line(hx, y, hx, y - 5)
            c.drawCentredString(hx, y + 3, f"{hour:02d}:00")

    def _draw_day_row(
        self,
        c,
        day: DaySummary,
        timeline_x: float,
        timeline_width: float,
        y: float,
        height: float,
    ) -> None:
        """Draw a single day's timeline and hours."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        c.drawString(self.margin, y + height / 2 + 2, day.day.display_name)
        c.setFont("Helvetica", 8)
        c.drawString(self.margin, y + height / 2 - 9, day.date.isoformat())

        background = COLORS["day_off"] if day.is_day_off else COLORS["free"]
        c.setFillColorRGB(*background)
        c.rect(timeline_x, y, timeline_width, height, fill=1, stroke=0)

        scale = timeline_width / DAY_MINUTES
        for block in day.blocks:
            bx = timeline_x + _minutes(block.start) * scale
            bw = (_minutes(block.end) - _minutes(block.start)) * scale
            c.setFillColorRGB(*COLORS[block.block_type])
            c.rect(bx, y, bw, height, fill=1, stroke=0)

        if day.lunch:
            bx = timeline_x + _minutes(day.lunch.start) * scale
            bw = (_minutes(day.lunch.end) - _minutes(day.lunch.start)) * scale
            c.setFillColorRGB(*COLORS["lunch"])
            c.rect(bx, y, bw, height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 7)
            c.drawCentredString(bx + bw / 2, y + height / 2 - 3, "L")

        c.setStrokeColorRGB(0.3, 0.3, 0.3)
        c.setLineWidth(0.5)
        c.rect(timeline_x, y, timeline_width, height, fill=0, stroke=1)

        text_x = timeline_x + timeline_width + 10
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 8)
        c.drawString(
            text_x,
            y + height - 10,
            f"Ordinary {format_hours(day.ordinary_hours)} h, "
            f"extra {format_hours(day.extra_hours)} h",
        )
        lunch = f"{day.lunch.start}-{day.lunch.end}" if day.lunch else "-"
        c.drawString(text_x, y + height - 21, f"Lunch: {lunch}")
        if not day.blocks:
            c.drawString(text_x, y + height - 32, "Day off" if day.is_day_off else "No blocks")

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (COLORS[BlockType.ORDINARY], "Ordinary"),
            (COLORS[BlockType.EXTRA], "Extra"),
            (COLORS["lunch"], "Lunch"),
            (COLORS["day_off"], "Day off"),
        ]
        item_x = x + 45
        c.setFont("Helvetica", 8)
        for color, label in items:
            c.setFillColorRGB(*color)
            c.rect(item_x, y - 1, 10, 8, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(item_x + 14, y, label)
            item_x += 70
