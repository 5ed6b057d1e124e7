"""
Plot descriptions and renderers.

- `emitter`: waveform / imitator -> `PlotDescription` (gnuplot script + data)
- `gnuplot`: `GnuplotRenderer`, runs the external gnuplot process
- `mpl`: `save_plot`, draws the description with matplotlib

`dsoplot.plot.mpl` is not imported here, so matplotlib is only loaded when an
image is actually saved.
"""

from .emitter import PlotDescription, emit_imitator, emit_plot, emit_waveform
from .gnuplot import GnuplotRenderer
