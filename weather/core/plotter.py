# plotter.py — Weather timeline figure
# Top: event raster, one row per variant. Bottom: intensity stems.
#
# Rules:
# - matplotlib only
# - no hardcoded datasets; callers pass the trigger log

from typing import Optional, Sequence, Tuple
import matplotlib.pyplot as plt
from matplotlib.ticker import MultipleLocator

from weather.core.catalog import WEATHER_EVENTS, get_weather_color_tint

DEFAULT_TITLE = "Weather Events"
DEFAULT_FIGSIZE = (15.0, 8.0)
SECONDS_PER_MIN = 60.0
FIG_HEIGHT_RATIOS = (2, 3)
FIG_TITLE_FONT_SIZE = 20
EVENT_LINEWIDTH = 2.0
EDGE_COLOR = "#333333"
AXIS_LABEL_FONT_SIZE = 14
TICK_LABEL_SIZE = 12
Y_LIMITS = (0.0, 1.05)
X_MAJOR_TICK_MIN = 10
X_MINOR_TICK_MIN = 2
TIGHT_LAYOUT_RECT = (0, 0.03, 1, 0.95)
SAVE_DPI = 150

def make_figure(
    trigger_seconds: Sequence[float],
    variants: Sequence[str],
    intensities: Sequence[float],
    title: str = DEFAULT_TITLE,
    catalog: Optional[Sequence[str]] = None,
    figsize: Tuple[float, float] = DEFAULT_FIGSIZE,
) -> "plt.Figure":
    """
    Build the raster+stem timeline.

    Parameters
    ----------
    trigger_seconds : list/array of float
        Game time (seconds) of each trigger.
    variants : list of str
        Weather variant per trigger, aligned with `trigger_seconds`.
    intensities : list/array of float
        Intensity (0.5..1.0) per trigger, aligned with `trigger_seconds`.
    catalog : Optional[list of str]
        Row order for the raster; defaults to the built-in catalog.

    Returns
    -------
    matplotlib.figure.Figure
    """
    if not (len(trigger_seconds) == len(variants) == len(intensities)):
        raise ValueError("trigger_seconds, variants and intensities must have equal length")
    rows = list(catalog or WEATHER_EVENTS)
    for v in variants:
        if v not in rows:
            rows.append(v)

    times_min = [t / SECONDS_PER_MIN for t in trigger_seconds]

    fig, (ax1, ax2) = plt.subplots(
        2, 1, sharex=True, figsize=figsize,
        gridspec_kw={'height_ratios': FIG_HEIGHT_RATIOS}
    )
    fig.suptitle(title, fontsize=FIG_TITLE_FONT_SIZE)

    # --- Top: raster by variant ---
    for i, row in enumerate(rows):
        row_times = [t for t, v in zip(times_min, variants) if v == row]
        if row_times:
            ax1.eventplot(row_times, orientation='horizontal', lineoffsets=i,
                          colors=[_color(row)], linewidths=EVENT_LINEWIDTH)
    ax1.set_yticks(list(range(len(rows))))
    ax1.set_yticklabels(rows)
    ax1.set_ylabel('Weather', fontsize=AXIS_LABEL_FONT_SIZE)
    ax1.grid(axis='x', linestyle=':', color='gray')

    # --- Bottom: intensity ---
    if times_min:
        ax2.vlines(times_min, 0.0, list(intensities), colors=EDGE_COLOR)
        ax2.scatter(times_min, list(intensities), c=[_color(v) for v in variants],
                    edgecolors=EDGE_COLOR, zorder=5)
    ax2.set_xlabel('Time (minutes)', fontsize=AXIS_LABEL_FONT_SIZE)
    ax2.set_ylabel('Intensity', fontsize=AXIS_LABEL_FONT_SIZE)
    ax2.set_ylim(bottom=Y_LIMITS[0], top=Y_LIMITS[1])
    ax1.tick_params(axis='y', labelsize=TICK_LABEL_SIZE)
    ax2.tick_params(axis='both', labelsize=TICK_LABEL_SIZE)
    ax2.xaxis.set_major_locator(MultipleLocator(X_MAJOR_TICK_MIN))
    ax2.xaxis.set_minor_locator(MultipleLocator(X_MINOR_TICK_MIN))

    plt.tight_layout(rect=TIGHT_LAYOUT_RECT)
    return fig

def _color(variant: str):
    rgb = get_weather_color_tint(variant)[:3]
    # Clear skies tints nothing; draw it in the edge color instead
    return EDGE_COLOR if rgb == (1.0, 1.0, 1.0) else rgb

def save_figure(fig: "plt.Figure", out_path: str) -> None:
    """
    Save the figure to a file. Format inferred from extension (.png, .pdf, etc.).
    """
    fig.savefig(out_path, bbox_inches='tight', dpi=SAVE_DPI)
