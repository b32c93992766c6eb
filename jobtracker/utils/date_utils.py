from datetime import date, datetime

# ISO first; the other two are the day-first formats spreadsheets tend to export
DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y")


def parse_date(value):
    """Parse a date given as a ``date``/``datetime`` or a string in one of DATE_FORMATS.

    Raises ValueError when the text matches none of the formats.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {value!r}")
