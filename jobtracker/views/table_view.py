from jobtracker import config
from jobtracker.engines.report import cell_text, truncate

SEPARATOR = " | "


def render_table(applications, columns=config.TABLE_COLUMNS):
    """Render applications as a fixed-width text table, one line per record."""
    if not applications:
        return "No applications tracked yet."

    header = SEPARATOR.join(f"{title:<{width}}" for title, _, width in columns)
    lines = [header, "-" * len(header)]
    for app in applications:
        lines.append(SEPARATOR.join(
            f"{truncate(cell_text(app, attribute), width):<{width}}"
            for _, attribute, width in columns
        ))
    return "\n".join(lines)
