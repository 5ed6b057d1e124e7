"""Matplotlib rendering of plot descriptions, for saving images from the CLI."""

from __future__ import annotations

from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
from loguru import logger
from matplotlib.ticker import AutoMinorLocator

from dsoplot.plot.emitter import PlotDescription

matplotlib.use("Agg")  # for headless operation

DPI = 100


def draw_plot(desc: PlotDescription) -> plt.Figure:
    """Figure showing the same curve, ranges and labels as the gnuplot script."""
    fig, ax = plt.subplots(figsize=(desc.width / DPI, desc.height / DPI), dpi=DPI)
    ax.plot(desc.x, desc.y, color=f"#{desc.color}", label=desc.title, lw=1)
    if desc.x_range is not None:
        ax.set_xlim(*desc.x_range)
    if desc.y_range is not None:
        ax.set_ylim(*desc.y_range)
    ax.set_xlabel(desc.xlabel)
    ax.set_ylabel(desc.ylabel)
    ax.xaxis.set_minor_locator(AutoMinorLocator(10))
    ax.yaxis.set_minor_locator(AutoMinorLocator(2))
    ax.grid(True)
    ax.legend(loc="upper right")
    return fig


def save_plot(desc: PlotDescription, path: str | Path) -> Path:
    path = Path(path)
    fig = draw_plot(desc)
    try:
        fig.savefig(path)
    finally:
        plt.close(fig)
    logger.info(f"Saved plot to {path}")
    return path
