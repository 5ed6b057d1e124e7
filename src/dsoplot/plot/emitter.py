"""Plot descriptions for the external plotter.

A `PlotDescription` carries the gnuplot script (passed with ``-e``), the data
piped to gnuplot's stdin (``'-'`` data file) and the same curve as numeric
arrays, so other renderers can draw an identical plot.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from dsoplot.scpi.calibration import calibrate, sample_times
from dsoplot.scpi.commands import fmt_number
from dsoplot.types.records import PlotReply

TERMINALS = ("canvas", "dumb")
IMITATOR_SAMPLES = 100  # gnuplot's default sampling of a function over [-10:10]


@dataclass(frozen=True)
class PlotDescription:
    script: str
    title: str
    color: str
    xlabel: str
    ylabel: str
    data: Optional[str] = None
    x_range: Optional[tuple[float, float]] = None
    y_range: Optional[tuple[float, float]] = None
    width: int = 800
    height: int = 600
    x: np.ndarray = field(default_factory=lambda: np.empty(0), repr=False, compare=False)
    y: np.ndarray = field(default_factory=lambda: np.empty(0), repr=False, compare=False)

    @property
    def imitator(self) -> bool:
        return self.data is None


def terminal_command(terminal: str, width: int, height: int, mousing: bool = False) -> str:
    if terminal == "dumb":
        return "set term dumb"
    if terminal != "canvas":
        raise ValueError(f"Unknown terminal {terminal}, use one of {TERMINALS}")
    enhanced = "enhanced mousing " if mousing else ""
    return f"set term canvas {enhanced}size {width},{height} name 'cs'"


def _decorations(xlabel: str, ylabel: str) -> str:
    return (
        f"set mxtics 10; set mytics 2; set xlabel '{xlabel}'; "
        f"set ylabel '{ylabel}'; set grid xtics ytics"
    )


def imitator_phase(now: Optional[float] = None) -> str:
    """Current second within the minute, with tenths, e.g. ``"42.7"``."""
    now = time.time() if now is None else now
    sec = int(now)
    tenths = min(int((now - sec) * 10 + 0.5), 9)
    return f"{sec % 60}.{tenths}"


def emit_imitator(
    channel: int,
    color: str,
    width: int,
    height: int,
    terminal: str = "canvas",
    now: Optional[float] = None,
) -> PlotDescription:
    """Sine wave moving with the wall clock, plotted when there is no instrument."""
    phase = imitator_phase(now)
    title = f"Ch.{channel}:sin(x+{phase})"
    script = "; ".join(
        (
            terminal_command(terminal, width, height, mousing=True),
            _decorations("Imitator", "Units"),
            "set style fill solid 0.1 noborder",
            f"plot [] [] sin(x+{phase}) title '{title}' with lines lc rgb '#{color}'",
        )
    )
    x = np.linspace(-10, 10, IMITATOR_SAMPLES)
    return PlotDescription(
        script=script,
        title=title,
        color=color,
        xlabel="Imitator",
        ylabel="Units",
        width=width,
        height=height,
        x=x,
        y=np.sin(x + float(phase)),
    )


def emit_waveform(
    reply: PlotReply,
    channel: int,
    color: str,
    width: int,
    height: int,
    terminal: str = "canvas",
) -> PlotDescription:
    """Calibrated waveform plot; the samples go to gnuplot as inline data."""
    pre = reply.preamble
    cal = calibrate(pre, reply.vertical_range)
    x_min, x_max = fmt_number(cal.x_min), fmt_number(cal.x_max)
    y = fmt_number(cal.y_half_range)
    title = f"Ch.{channel}"
    using = (
        f"((($0-{pre.x_reference})*{fmt_number(pre.x_increment)}"
        f"+{fmt_number(pre.x_origin)})*{fmt_number(cal.time_scale)})"
    )
    script = "; ".join(
        (
            terminal_command(terminal, width, height),
            _decorations(cal.time_unit, "Volts"),
            f"plot [{x_min}:{x_max}] [-{y}:{y}] '-' using {using}:1 "
            f"title '{title}' with lines lc rgb '#{color}'",
        )
    )
    wf = reply.waveform
    return PlotDescription(
        script=script,
        title=title,
        color=color,
        xlabel=cal.time_unit,
        ylabel="Volts",
        data=wf.to_text(),
        x_range=(cal.x_min, cal.x_max),
        y_range=(-cal.y_half_range, cal.y_half_range),
        width=width,
        height=height,
        x=sample_times(pre, len(wf), cal.time_scale),
        y=wf.values,
    )


def emit_plot(
    reply: Optional[PlotReply],
    channel: int,
    color: str,
    width: int,
    height: int,
    terminal: str = "canvas",
) -> PlotDescription:
    """Waveform plot, or the imitator when there is no reply (no instrument)."""
    if reply is None:
        return emit_imitator(channel, color, width, height, terminal)
    return emit_waveform(reply, channel, color, width, height, terminal)
