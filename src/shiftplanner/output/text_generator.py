"""Plain-text weekly summaries.

This module renders a weekly summary as short chat-style text, suitable
for pasting into a message:
- A header with the employee name
- The weekly ordinary, extra and total hours
- One section per day with its lunch window and numbered work blocks
"""

from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from shiftplanner.domain.models import BlockType, DaySummary, WeeklySummary, format_hours

SHARE_URL = "https://wa.me/?text="


class SummaryTextGenerator:
    """Generates chat-style text for a weekly summary.

    Example output::

        Weekly summary - Ana Ruiz
        Ordinary: 8 h • Extra: 2 h • Total: 10 h

        Monday 2024-01-08 - 8 h ordinary • 2 h extra
          Lunch: 12:00-13:00
          Block 1: 08:00-12:00 (4 h)
          Block 2: 13:00-17:00 (4 h)
          Block 3: 17:00-19:00 (2 h) Extra
    """

    def generate(
        self,
        summary: WeeklySummary,
        output_path: Union[str, Path],
        employee_name: Optional[str] = None,
    ) -> str:
        """Generate the text and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(summary, employee_name)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        summary: WeeklySummary,
        employee_name: Optional[str] = None,
    ) -> str:
        return self._generate_content(summary, employee_name)

    def share_url(
        self,
        summary: WeeklySummary,
        employee_name: Optional[str] = None,
    ) -> str:
        """Link that opens a chat draft containing the summary text."""
        return SHARE_URL + quote(self._generate_content(summary, employee_name))

    def _generate_content(
        self,
        summary: WeeklySummary,
        employee_name: Optional[str],
    ) -> str:
        lines = []
        lines.append(f"Weekly summary - {employee_name}" if employee_name else "Weekly summary")
        lines.append(
            f"Ordinary: {format_hours(summary.ordinary_hours)} h • "
            f"Extra: {format_hours(summary.extra_hours)} h • "
            f"Total: {format_hours(summary.total_hours)} h"
        )

        for day in summary.days:
            lines.append("")
            lines.extend(self._day_lines(day))

        return "\n".join(lines)

    def _day_lines(self, day: DaySummary) -> list[str]:
        heading = (
            f"{day.day.display_name} {day.date.isoformat()} - "
            f"{format_hours(day.ordinary_hours)} h ordinary"
        )
        if day.extra_hours:
            heading += f" • {format_hours(day.extra_hours)} h extra"
        if day.is_day_off:
            heading += " (day off)"

        lines = [heading]
        if day.lunch:
            lines.append(f"  Lunch: {day.lunch.start}-{day.lunch.end}")
        if not day.blocks:
            lines.append("  No blocks")
        for i, block in enumerate(day.blocks, 1):
            suffix = " Extra" if block.block_type is BlockType.EXTRA else ""
            lines.append(
                f"  Block {i}: {block.start}-{block.end} "
                f"({format_hours(block.hours)} h){suffix}"
            )
        return lines
