# config.py
# Defaults for file locations and layout. The CLI can override the paths
# and the page size.

DATA_FILE = "jobs.json"
REPORT_FILE = "jobs.pdf"

# ------------------------- Import -------------------------
CSV_DELIMITER = ";"
CSV_ENCODING = "utf-8"
IMPORT_COLUMNS = ("company", "title", "docs", "location", "date")
# The date column may be left out of a row entirely
MIN_IMPORT_FIELDS = len(IMPORT_COLUMNS) - 1

# ------------------------- Report -------------------------
PAGE_SIZE = 25
REPORT_TITLE = "Job Applications"
NO_RECORDS_TEXT = "No records"

# A4 landscape, in points
PAGE_WIDTH = 842
PAGE_HEIGHT = 595
MARGIN_LEFT = 36
MARGIN_TOP = 40
ROW_HEIGHT = 17
# Footer baseline sits this far above the bottom edge
FOOTER_OFFSET = 15
TITLE_FONT_SIZE = 16
HEADER_FONT_SIZE = 10
BODY_FONT_SIZE = 9

# (header, record attribute, max characters, x offset in points)
REPORT_COLUMNS = (
    ("ID", "id", 5, 0),
    ("Company", "company", 24, 36),
    ("Title", "title", 26, 176),
    ("Docs", "docs", 20, 326),
    ("Location", "location", 16, 446),
    ("Date", "date_applied", 10, 546),
    ("Answer", "answer", 22, 616),
)

# ------------------------- Terminal -------------------------
# (header, record attribute, width)
TABLE_COLUMNS = (
    ("ID", "id", 4),
    ("Company", "company", 20),
    ("Title", "title", 20),
    ("Date", "date_applied", 12),
    ("Location", "location", 15),
    ("Docs", "docs", 20),
    ("Answer", "answer", 15),
)
