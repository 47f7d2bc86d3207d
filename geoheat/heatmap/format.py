"""Formatting for results."""

from geoheat.core.format import (
    adjust_separators,
    attach_format,
    format_extent_table,
    format_footer,
    format_kv_line,
    format_section_header,
    format_tile_table,
    format_title,
)
from geoheat.core.types import Space

from .results import HeatMapResult

MAX_DISPLAY_TILES = 20


def format_heatmap_result(result: HeatMapResult) -> str:
    """Format a heatmap result for display."""
    lines = []
    a, b = result.dataset_ids
    lines.extend(format_title("Spatial Heatmap", f"{a} {result.predicate} {b}"))

    lines.append("")
    lines.append(f" Tiles ranked by {result.kind}:")
    lines.extend(format_tile_table(result.statistics, max_rows=MAX_DISPLAY_TILES))

    values = result.values
    lines.extend(format_section_header("Summary"))
    lines.append(format_kv_line("Tiles", result.n_tiles))
    lines.append(format_kv_line("Tiles with signal", int((values > 0).sum())))
    if result.n_tiles:
        lines.append(format_kv_line("Max statistic", f"{values.max():.4f}"))
        lines.append(format_kv_line("Mean statistic", f"{values.mean():.4f}"))

    params = result.estimation_params
    lines.extend(format_section_header("Execution Details"))
    lines.append(format_kv_line("Backend", params.get("backend", "local")))
    if params.get("n_partitions") is not None:
        lines.append(format_kv_line("Partitions", params["n_partitions"]))
    lines.append(format_kv_line("Tile id tiebreak", "Yes" if params.get("tie_break", True) else "No"))

    note = None
    if result.n_tiles > MAX_DISPLAY_TILES:
        note = f"Showing {MAX_DISPLAY_TILES} of {result.n_tiles} tiles; use to_dataframe() for all."
    lines.extend(format_footer(note))

    lines = adjust_separators(lines)
    return "\n".join(lines)


def format_space(space: Space) -> str:
    """Format a dataset extent for display."""
    lines = []
    lines.extend(format_title("Dataset Extent"))
    lines.extend(format_extent_table(space.min_x, space.min_y, space.max_x, space.max_y))
    lines.append("")
    lines.append(format_kv_line("Objects", space.object_count))
    lines.append(format_kv_line("Span", f"{space.span_x:.4f} x {space.span_y:.4f}"))
    note = "No valid geometry; the extent carries no information." if space.object_count == 0 else None
    lines.extend(format_footer(note))

    lines = adjust_separators(lines)
    return "\n".join(lines)


attach_format(HeatMapResult, format_heatmap_result)
attach_format(Space, format_space)
