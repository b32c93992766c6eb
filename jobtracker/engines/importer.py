# importer.py

import logging
import warnings
from typing import List, Optional

import pandas as pd

from jobtracker import config
from jobtracker.errors import SourceUnreadableError, ValidationError
from jobtracker.utils.date_utils import parse_date

INVALID = "invalid"
DUPLICATE = "duplicate"

# One spare column: pandas cuts longer rows down to these names, and a filled
# spare cell is enough to reject the row by its field count
_OVERFLOW_COLUMNS = 1
_COLUMN_NAMES = list(config.IMPORT_COLUMNS) + [f"extra_{i}" for i in range(_OVERFLOW_COLUMNS)]


class SkippedRow:
    """A row that was not imported. Informational, never raised."""

    def __init__(self, row_number, reason, detail="", values=None):
        self.row_number = row_number
        self.reason = reason
        self.detail = detail
        self.values = values or []

    def __repr__(self):
        return f"SkippedRow(row={self.row_number}, reason={self.reason!r}, detail={self.detail!r})"


class RowMapping:
    """Result of mapping one CSV row: either ``fields`` or a skip ``detail``."""

    def __init__(self, fields=None, detail=None):
        self.fields = fields
        self.detail = detail

    @property
    def ok(self):
        return self.fields is not None


class ImportSummary:
    def __init__(self):
        self.added = []
        self.skipped: List[SkippedRow] = []
        self.total = 0

    @property
    def imported(self):
        return len(self.added)

    @property
    def skipped_duplicate(self):
        return sum(1 for row in self.skipped if row.reason == DUPLICATE)

    @property
    def skipped_invalid(self):
        return sum(1 for row in self.skipped if row.reason == INVALID)

    def as_dict(self):
        return {
            "imported": self.imported,
            "skipped_duplicate": self.skipped_duplicate,
            "skipped_invalid": self.skipped_invalid,
            "total": self.total
        }


def _cell(value) -> Optional[str]:
    """None for a field the row did not have at all, otherwise the stripped text."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value).strip()


def map_row(values) -> RowMapping:
    """Map the raw cells of one data row to record fields.

    Never raises: anything wrong with the row comes back as a RowMapping
    carrying a ``detail`` message instead of fields.
    """
    cells = [_cell(v) for v in values]
    while cells and cells[-1] is None:
        cells.pop()

    if len(cells) > len(config.IMPORT_COLUMNS):
        return RowMapping(detail=f"more than {len(config.IMPORT_COLUMNS)} fields")
    if len(cells) < config.MIN_IMPORT_FIELDS:
        return RowMapping(detail=f"expected {config.MIN_IMPORT_FIELDS}-{len(config.IMPORT_COLUMNS)} fields, got {len(cells)}")

    cells = [c or "" for c in cells] + [""] * (len(config.IMPORT_COLUMNS) - len(cells))
    company, title, docs, location, date_text = cells

    if not company or not title:
        return RowMapping(detail="company and title are required")
    if not location:
        return RowMapping(detail="location is required")

    date_applied = None
    if date_text:
        try:
            date_applied = parse_date(date_text)
        except ValueError as e:
            return RowMapping(detail=str(e))

    return RowMapping(fields={
        "company": company,
        "title": title,
        "docs": docs,
        "location": location,
        "date_applied": date_applied
    })


class CsvImporter:
    """Imports ';'-separated application rows into an ApplicationDatabase."""

    def __init__(self, database, delimiter=config.CSV_DELIMITER, encoding=config.CSV_ENCODING):
        self.database = database
        self.delimiter = delimiter
        self.encoding = encoding

    def read_rows(self, path):
        """Return the data rows as cell lists, the header row already dropped."""
        try:
            with warnings.catch_warnings():
                # Over-long rows are cut down to _COLUMN_NAMES; pandas warns about the loss
                warnings.simplefilter("ignore", pd.errors.ParserWarning)
                df = pd.read_csv(
                    path,
                    sep=self.delimiter,
                    header=None,
                    names=_COLUMN_NAMES,
                    index_col=False,
                    dtype=str,
                    keep_default_na=False,
                    skip_blank_lines=True,
                    encoding=self.encoding,
                    engine="python"
                )
        except pd.errors.EmptyDataError:
            return []
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
            raise SourceUnreadableError(f"Cannot read import file {path}: {e}") from e

        # The first non-blank line is the header
        return df.values.tolist()[1:]

    def run(self, path):
        rows = self.read_rows(path)
        summary = ImportSummary()
        seen = {app.duplicate_key() for app in self.database.applications}

        for row_number, values in enumerate(rows, start=1):
            summary.total += 1
            mapping = map_row(values)
            if not mapping.ok:
                self._skip(summary, SkippedRow(row_number, INVALID, mapping.detail, values))
                continue

            fields = mapping.fields
            key = (fields["company"], fields["title"])
            if key in seen:
                self._skip(summary, SkippedRow(row_number, DUPLICATE, f"{key[0]} / {key[1]} already tracked", values))
                continue

            try:
                app = self.database.add(persist=False, **fields)
            except ValidationError as e:
                self._skip(summary, SkippedRow(row_number, INVALID, str(e), values))
                continue
            seen.add(key)
            summary.added.append(app)

        if summary.added:
            self.database.save()

        logging.info(
            f"Import of {path} finished: {summary.imported} imported, "
            f"{summary.skipped_duplicate} duplicate(s), {summary.skipped_invalid} invalid, "
            f"{summary.total} row(s) total."
        )
        return summary

    @staticmethod
    def _skip(summary, skipped):
        logging.info(f"Skipping row {skipped.row_number} ({skipped.reason}): {skipped.detail}")
        summary.skipped.append(skipped)
