# report.py

import logging
import math
from collections import Counter
from datetime import date
from pathlib import Path
from typing import List

import fitz  # PyMuPDF

from jobtracker import config
from jobtracker.enums.application_status import ApplicationStatus
from jobtracker.errors import WriteError

FONT = "helv"
BOLD_FONT = "hebo"
# Title, generation date and statistics lines on the first page
BANNER_HEIGHT = config.TITLE_FONT_SIZE + config.ROW_HEIGHT * 2.8


def truncate(text, width):
    """Cut text to at most ``width`` characters, marking the cut with '...'."""
    text = str(text)
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[:width - 3] + "..."


def header_baseline(first_page):
    """Baseline of the column header; the first page makes room for the title banner."""
    y = config.MARGIN_TOP + config.ROW_HEIGHT
    if first_page:
        y += BANNER_HEIGHT
    return y


def max_page_size():
    """Most rows that fit on the first page, keeping one row clear above the footer."""
    last_baseline = config.PAGE_HEIGHT - config.FOOTER_OFFSET - config.ROW_HEIGHT
    return int((last_baseline - header_baseline(True)) // config.ROW_HEIGHT)


def page_count(record_count, page_size=config.PAGE_SIZE):
    # An empty store still gets one page
    return max(1, math.ceil(record_count / page_size))


def paginate(records, page_size=config.PAGE_SIZE) -> List[list]:
    """Split records into consecutive pages of at most ``page_size`` rows."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    records = list(records)
    if not records:
        return [[]]
    return [records[i:i + page_size] for i in range(0, len(records), page_size)]


def cell_text(app, attribute):
    value = getattr(app, attribute)
    if attribute == "date_applied":
        return value.isoformat()
    if attribute == "answer":
        return ApplicationStatus.label_for(value)
    return str(value)


def format_row(app, columns=config.REPORT_COLUMNS):
    return [truncate(cell_text(app, attribute), width) for _, attribute, width, _ in columns]


def summary_line(records):
    """One-line statistics: total, pending and a count per answer."""
    counts = Counter(ApplicationStatus.label_for(app.answer) for app in records)
    pending = counts.pop(ApplicationStatus.Pending.value, 0)
    parts = [f"Total applications: {len(records)}", f"Pending: {pending}"]
    parts += [f"{label}: {count}" for label, count in sorted(counts.items())]
    return "   ".join(parts)


class ReportGenerator:
    """Renders the application list into a paginated PDF table."""

    def __init__(self, page_size=config.PAGE_SIZE, columns=config.REPORT_COLUMNS, today=None):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if page_size > max_page_size():
            raise ValueError(f"page_size {page_size} does not fit on a page, the maximum is {max_page_size()}")
        self.page_size = page_size
        self.columns = columns
        self.today = today or date.today()

    def build(self, records):
        """Lay the records out into a new fitz.Document, one page per chunk of page_size rows."""
        records = list(records)
        pages = paginate(records, self.page_size)
        doc = fitz.open()

        for number, chunk in enumerate(pages, start=1):
            page = doc.new_page(width=config.PAGE_WIDTH, height=config.PAGE_HEIGHT)
            y = config.MARGIN_TOP

            # Title banner on the first page only
            if number == 1:
                y += config.TITLE_FONT_SIZE
                page.insert_text((config.MARGIN_LEFT, y), config.REPORT_TITLE,
                                 fontsize=config.TITLE_FONT_SIZE, fontname=BOLD_FONT)
                y += config.ROW_HEIGHT
                page.insert_text((config.MARGIN_LEFT, y), f"Generated {self.today.isoformat()}",
                                 fontsize=config.BODY_FONT_SIZE, fontname=FONT)
                y += config.ROW_HEIGHT * 0.8
                page.insert_text((config.MARGIN_LEFT, y), truncate(summary_line(records), 150),
                                 fontsize=config.BODY_FONT_SIZE, fontname=FONT)

            y = header_baseline(number == 1)
            self._draw_header(page, y)

            if not chunk:
                y += config.ROW_HEIGHT
                page.insert_text((config.MARGIN_LEFT, y), config.NO_RECORDS_TEXT,
                                 fontsize=config.BODY_FONT_SIZE, fontname=FONT)

            for app in chunk:
                y += config.ROW_HEIGHT
                for (_, _, _, x), text in zip(self.columns, format_row(app, self.columns)):
                    page.insert_text((config.MARGIN_LEFT + x, y), text,
                                     fontsize=config.BODY_FONT_SIZE, fontname=FONT)

            footer = (config.PAGE_WIDTH - config.MARGIN_LEFT - 50, config.PAGE_HEIGHT - config.FOOTER_OFFSET)
            page.insert_text(footer,
                             f"Page {number} / {len(pages)}",
                             fontsize=config.BODY_FONT_SIZE, fontname=FONT)

        return doc

    def _draw_header(self, page, y):
        for header, _, _, x in self.columns:
            page.insert_text((config.MARGIN_LEFT + x, y), header,
                             fontsize=config.HEADER_FONT_SIZE, fontname=BOLD_FONT)
        page.draw_line(fitz.Point(config.MARGIN_LEFT, y + 4),
                       fitz.Point(config.PAGE_WIDTH - config.MARGIN_LEFT, y + 4), width=0.5)

    def export(self, records, output_path):
        """Write the report to ``output_path``, replacing any previous file.

        Returns the number of pages written.
        """
        records = list(records)
        doc = self.build(records)
        try:
            pages = doc.page_count
            data = doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()

        output_path = Path(output_path)
        try:
            output_path.write_bytes(data)
        except OSError as e:
            raise WriteError(f"Could not write report to {output_path}: {e}") from e

        logging.info(f"Exported {len(records)} application(s) on {pages} page(s) to {output_path}.")
        return pages
