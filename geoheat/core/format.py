"""Shared formatting utilities for heatmap output."""

import math

from prettytable import PrettyTable, TableStyle

WIDTH = 78
THICK_SEP = "=" * WIDTH
THIN_SEP = "-" * WIDTH


def _make_table(headers, rows, align_map):
    """Create a PrettyTable with SINGLE_BORDER style and per-column alignment."""
    t = PrettyTable()
    t.set_style(TableStyle.SINGLE_BORDER)
    t.field_names = headers
    for row in rows:
        t.add_row(row)
    for h in headers:
        t.align[h] = align_map.get(h, "r")
    return str(t)


def format_title(title, subtitle=None):
    """Return title block lines with thick separators."""
    lines = [THICK_SEP, f" {title}"]
    if subtitle is not None:
        lines.append(f" {subtitle}")
    lines.append(THICK_SEP)
    return lines


def format_section_header(label):
    """Return section header lines with thin separators."""
    return ["", THIN_SEP, f" {label}", THIN_SEP]


def format_footer(note=None):
    """Return footer lines with thick separator and optional note."""
    lines = [THICK_SEP]
    if note is not None:
        lines.append(f" {note}")
    return lines


def format_value(val, fmt=".4f", na_str="NA"):
    """Format a numeric value, returning na_str for None/NaN."""
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return na_str
    return f"{val:{fmt}}"


def format_kv_line(key, value, indent=1):
    """Format a key-value pair with indentation."""
    return f"{' ' * indent}{key}: {value}"


def format_extent_table(min_x, min_y, max_x, max_y):
    """Build a one-row table for a rectangular extent."""
    headers = ["Min X", "Min Y", "Max X", "Max Y"]
    row = [format_value(min_x), format_value(min_y), format_value(max_x), format_value(max_y)]
    table = _make_table(headers, [row], {})
    return ["", *table.split("\n")]


def format_tile_table(statistics, max_rows=None):
    """Build a ranked tile table.

    Parameters
    ----------
    statistics : sequence of TileStatistic
        Rows in display order.
    max_rows : int or None
        Truncate after this many rows and append an ellipsis row.
    """
    headers = ["Rank", "Tile", "Min X", "Min Y", "Max X", "Max Y", "Statistic"]
    shown = statistics if max_rows is None else statistics[:max_rows]
    rows = [
        [
            str(rank),
            str(s.tile_id),
            format_value(s.min_x, ".2f"),
            format_value(s.min_y, ".2f"),
            format_value(s.max_x, ".2f"),
            format_value(s.max_y, ".2f"),
            format_value(s.statistic),
        ]
        for rank, s in enumerate(shown, start=1)
    ]
    if len(shown) < len(statistics):
        rows.append(["...", "...", "", "", "", "", ""])
    table = _make_table(headers, rows, {"Tile": "l"})
    return ["", *table.split("\n")]


def adjust_separators(lines):
    """Widen separator lines to match the widest content line."""
    max_w = max((len(line) for line in lines), default=WIDTH)
    max_w = max(max_w, WIDTH)
    return [
        "=" * max_w
        if line and all(c == "=" for c in line)
        else "-" * max_w
        if line and all(c == "-" for c in line)
        else line
        for line in lines
    ]


def attach_format(result_class, format_func):
    """Monkey-patch ``__repr__`` and ``__str__`` on a result class."""

    def _repr(self):
        return format_func(self)

    def _str(self):
        return format_func(self)

    result_class.__repr__ = _repr
    result_class.__str__ = _str
