# -*- coding: utf-8 -*-
"""
dsoplot - bridge between a web page and an Agilent DSO6000 oscilloscope.

Requests from the page (plot, autoscale, timebase, coupling, ranges,
trigger, init, reset, status) are translated into SCPI commands, sent over a
raw socket or the VXI-11 helper, and the replies are decoded into waveforms
and status records. Waveforms are plotted with gnuplot; everything else is
returned as a small JavaScript payload.

Modules
-------
- `dsoplot.types`: requests, records, configuration and errors
- `dsoplot.scpi`: command building and reply decoding
- `dsoplot.device`: the instrument, transports and a mock instrument
- `dsoplot.plot`: plot descriptions and renderers
- `dsoplot.bridge`: the request boundary
- `dsoplot.cli`: the ``dsoplot`` command
"""

from ._version import __version__
